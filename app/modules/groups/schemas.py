from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupPermission(BaseModel):
    """One group_permissions row"""
    group_id: str
    permission_id: str


class UpdateGroupPermissions(BaseModel):
    permissions: List[str]
