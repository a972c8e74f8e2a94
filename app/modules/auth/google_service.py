import logging
from typing import Any, Tuple

from supabase import AuthError

from app.core.exceptions import InvalidCredentialsException
from app.modules.auth.schemas import GoogleLoginRequest
from app.modules.auth.service import Authenticatable
from app.modules.users.schemas import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class GoogleAuthService(Authenticatable):
    """Google sign-in: the ID token is verified by Supabase Auth against the project's Google client."""

    async def _sign_in(self, credentials: GoogleLoginRequest) -> Tuple[UserResponse, Any]:
        params = {"provider": "google", "token": credentials.id_token}
        if credentials.nonce:
            params["nonce"] = credentials.nonce
        try:
            auth_response = await self.supabase.auth.sign_in_with_id_token(params)
        except AuthError as e:
            logger.info(f"Google ID token rejected: {e}")
            raise InvalidCredentialsException("Invalid Google ID token") from e
        if not auth_response.user or not auth_response.user.email:
            raise InvalidCredentialsException("Invalid Google ID token")

        identity = auth_response.user
        user = await self.user_service.get_user_by_email_or_phone(identity.email, None)
        if not user:
            metadata = identity.user_metadata or {}
            user = await self.user_service.create_user(UserCreate(
                email=identity.email,
                first_name=metadata.get("given_name") or metadata.get("full_name") or metadata.get("name"),
                last_name=metadata.get("family_name"),
            ))
            logger.info(f"Created user {user.id} on first Google login")
        return user, auth_response.session
