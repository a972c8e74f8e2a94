from fastapi import APIRouter, Depends
from app.core.dependencies import get_cache, get_store, require_permission
from app.database.store import Store
from app.modules.auth.schemas import CurrentUser
from app.modules.permissions.schemas import (
    PermissionCreate, PermissionUpdate, PermissionResponse
)
from app.modules.permissions.service import PermissionService
from typing import List

router = APIRouter(prefix="/permissions", tags=["permissions"])


def get_permission_service(store: Store = Depends(get_store), cache=Depends(get_cache)) -> PermissionService:
    return PermissionService(store, cache)


@router.get("", response_model=List[PermissionResponse])
async def get_all_permissions(
    current_user: CurrentUser = Depends(require_permission("ViewPermission")),
    service: PermissionService = Depends(get_permission_service)
):
    return await service.get_all_permissions()


@router.post("", response_model=PermissionResponse, status_code=201)
async def create_permission(
    permission_data: PermissionCreate,
    current_user: CurrentUser = Depends(require_permission("CreatePermission")),
    service: PermissionService = Depends(get_permission_service)
):
    return await service.create_permission(permission_data)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewPermission")),
    service: PermissionService = Depends(get_permission_service)
):
    return await service.get_permission_by_id(permission_id)


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: str,
    permission_data: PermissionUpdate,
    current_user: CurrentUser = Depends(require_permission("EditPermission")),
    service: PermissionService = Depends(get_permission_service)
):
    """Update permission. A rename applies to every existing grant of this permission."""
    return await service.update_permission(permission_id, permission_data)


@router.delete("/{permission_id}", response_model=PermissionResponse)
async def delete_permission(
    permission_id: str,
    current_user: CurrentUser = Depends(require_permission("DeletePermission")),
    service: PermissionService = Depends(get_permission_service)
):
    return await service.delete_permission(permission_id)
