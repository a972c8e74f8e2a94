from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class PermissionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class PermissionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
