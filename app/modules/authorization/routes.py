from fastapi import APIRouter, Depends
from app.core.dependencies import get_authorization_service, require_permission
from app.modules.auth.schemas import CurrentUser
from app.modules.authorization.schemas import VerifyPermissionsRequest, VerifyPermissionsResponse
from app.modules.authorization.service import AuthorizationService

router = APIRouter(prefix="/authorization", tags=["authorization"])


@router.post("/verify", response_model=VerifyPermissionsResponse)
async def verify_user_permissions(
    request: VerifyPermissionsRequest,
    current_user: CurrentUser = Depends(require_permission("ViewUser")),
    service: AuthorizationService = Depends(get_authorization_service)
):
    """Check whether a user holds all of the named permissions"""
    granted = await service.verify_user_permissions(request.user_id, request.permissions)
    return VerifyPermissionsResponse(
        user_id=request.user_id,
        permissions=request.permissions,
        granted=granted
    )
