from pydantic import BaseModel
from typing import List


class VerifyPermissionsRequest(BaseModel):
    user_id: str
    permissions: List[str]


class VerifyPermissionsResponse(BaseModel):
    user_id: str
    permissions: List[str]
    granted: bool
