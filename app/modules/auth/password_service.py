import logging
from typing import Any, Tuple

from supabase import AuthError

from app.core.exceptions import InvalidCredentialsException, UserExistsException
from app.modules.auth.schemas import LoginRequest, PasswordSignupRequest, SignupResponse
from app.modules.auth.service import Authenticatable
from app.modules.users.schemas import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class PasswordAuthService(Authenticatable):
    async def signup(self, signup_data: PasswordSignupRequest) -> SignupResponse:
        """Register credentials with Supabase Auth and create the local user"""
        existing = await self.user_service.get_user_by_email_or_phone(signup_data.email, signup_data.phone)
        if existing:
            raise UserExistsException(signup_data.email)

        try:
            auth_response = await self.supabase.auth.sign_up({
                "email": signup_data.email,
                "password": signup_data.password,
            })
        except AuthError as e:
            error_message = str(e).lower()
            if "already registered" in error_message or "already exists" in error_message:
                raise UserExistsException(signup_data.email) from e
            raise InvalidCredentialsException(f"Registration failed: {e}") from e
        if not auth_response.user:
            raise InvalidCredentialsException("Registration failed")

        user = await self.user_service.create_user(UserCreate(
            **signup_data.model_dump(exclude={"password"})
        ))
        logger.info(f"Password signup for user {user.id}")
        return SignupResponse(user=user, message="User registered successfully")

    async def _sign_in(self, credentials: LoginRequest) -> Tuple[UserResponse, Any]:
        user = await self._require_user(credentials.username)
        # Supabase Auth accepts whichever identifier the account was registered with
        identifier = {"email": user.email} if user.email else {"phone": user.phone}
        try:
            auth_response = await self.supabase.auth.sign_in_with_password({
                **identifier,
                "password": credentials.password,
            })
        except AuthError as e:
            logger.info(f"Password login failed for user {user.id}: {e}")
            raise InvalidCredentialsException() from e
        if not auth_response.user or not auth_response.session:
            raise InvalidCredentialsException()
        return user, auth_response.session
