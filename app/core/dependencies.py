"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import AsyncClient
from app.database.supabase_client import SupabaseClient
from app.database.store import Store
from app.modules.auth.schemas import CurrentUser
from app.modules.auth.service import TokenService
from app.modules.authorization.service import AuthorizationService
from app.modules.users.service import UserService
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_service_supabase() -> AsyncClient:
    return await SupabaseClient.get_service_client()


def get_store(supabase: AsyncClient = Depends(get_service_supabase)) -> Store:
    return Store(supabase)


def get_cache(request: Request):
    """Shared key/value cache created at startup (RedisCache or NullCache)"""
    return request.app.state.cache


def get_authorization_service(
    store: Store = Depends(get_store),
    cache=Depends(get_cache)
) -> AuthorizationService:
    return AuthorizationService(store, cache)


def get_token_service(
    supabase: AsyncClient = Depends(get_service_supabase),
    store: Store = Depends(get_store),
    cache=Depends(get_cache)
) -> TokenService:
    return TokenService(supabase, UserService(store, cache))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    token_service: TokenService = Depends(get_token_service)
) -> CurrentUser:
    """Resolve the bearer token to the local user"""
    return await token_service.get_current_user(credentials.credentials)


def require_permission(*required_permissions: str):
    """Factory function to create permission check dependency"""
    async def check_permission(
        current_user: CurrentUser = Depends(get_current_user),
        authorization: AuthorizationService = Depends(get_authorization_service)
    ) -> CurrentUser:
        """Dependency to check the user holds every required permission"""
        if current_user.is_super_user:
            return current_user
        if not await authorization.verify_user_permissions(current_user.id, required_permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {', '.join(required_permissions)}"
            )
        return current_user
    return check_permission
