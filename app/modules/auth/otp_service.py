import logging
from typing import Any, Tuple

from supabase import AuthError

from app.core.exceptions import InvalidCredentialsException, UserExistsException, UserNotFoundException
from app.modules.auth.schemas import OTPLoginRequest, OTPSignupRequest, SignupResponse
from app.modules.auth.service import Authenticatable
from app.modules.users.schemas import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class OTPAuthService(Authenticatable):
    """Passwordless login with a one-time code delivered over SMS by Supabase Auth."""

    async def signup(self, signup_data: OTPSignupRequest) -> SignupResponse:
        existing = await self.user_service.get_user_by_email_or_phone(signup_data.email, signup_data.phone)
        if existing:
            raise UserExistsException(signup_data.email or signup_data.phone)
        user = await self.user_service.create_user(UserCreate(**signup_data.model_dump()))
        logger.info(f"OTP signup for user {user.id}")
        return SignupResponse(user=user, message="User registered successfully")

    async def send_otp(self, phone: str) -> None:
        """Send a code to an active user's phone"""
        user = await self.user_service.get_active_user_by_phone(phone)
        if not user or not user.phone:
            raise UserNotFoundException(phone)
        try:
            await self.supabase.auth.sign_in_with_otp({"phone": user.phone})
        except AuthError as e:
            logger.error(f"Failed to send OTP to user {user.id}: {e}")
            raise InvalidCredentialsException("Could not send verification code") from e
        logger.info(f"OTP sent to user {user.id}")

    async def _sign_in(self, credentials: OTPLoginRequest) -> Tuple[UserResponse, Any]:
        user = await self._require_user(credentials.username)
        if not user.phone:
            raise InvalidCredentialsException("User has no phone number for OTP login")
        try:
            auth_response = await self.supabase.auth.verify_otp({
                "phone": user.phone,
                "token": credentials.otp,
                "type": "sms",
            })
        except AuthError as e:
            logger.info(f"OTP verification failed for user {user.id}: {e}")
            raise InvalidCredentialsException() from e
        if not auth_response.user or not auth_response.session:
            raise InvalidCredentialsException()
        return user, auth_response.session
