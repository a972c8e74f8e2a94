import abc
import hashlib
import logging
import time
from typing import Any, Dict, Optional, Tuple

from supabase import AsyncClient, AuthError

from app.config.settings import settings
from app.core.exceptions import InvalidCredentialsException, UserNotFoundException
from app.modules.auth.schemas import CurrentUser, TokenResponse
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

# In-memory cache for token lookups to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, Tuple[CurrentUser, float]] = {}


class Authenticatable(abc.ABC):
    """Authentication front end: credentials in, validated local user out."""

    def __init__(self, supabase: AsyncClient, user_service: UserService):
        self.supabase = supabase
        self.user_service = user_service

    async def authenticate(self, credentials: Any) -> UserResponse:
        user, _ = await self._sign_in(credentials)
        return user

    async def login(self, credentials: Any) -> TokenResponse:
        user, session = await self._sign_in(credentials)
        return TokenService.token_response(session, user)

    @abc.abstractmethod
    async def _sign_in(self, credentials: Any) -> Tuple[UserResponse, Any]:
        """Verify credentials with the identity provider; returns the local user and the session"""

    async def _require_user(self, username: str) -> UserResponse:
        user = await self.user_service.get_user_by_username(username)
        if not user:
            raise UserNotFoundException(username)
        return user


class TokenService(Authenticatable):
    """Resolves bearer access tokens issued by Supabase Auth."""

    @staticmethod
    def token_response(session: Any, user: UserResponse) -> TokenResponse:
        if not session or not session.access_token:
            raise InvalidCredentialsException()
        return TokenResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
            user_id=user.id,
        )

    async def get_current_user(self, token: str) -> CurrentUser:
        """Map a token to the local user. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            current, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return current
            del _AUTH_USER_CACHE[cache_key]

        try:
            user_response = await self.supabase.auth.get_user(jwt=token)
        except AuthError as e:
            logger.info(f"Rejected access token: {e}")
            raise InvalidCredentialsException("Invalid or expired token") from e
        if not user_response or not user_response.user:
            raise InvalidCredentialsException("Invalid or expired token")

        identity = user_response.user
        local = await self.user_service.get_user_by_email_or_phone(identity.email, identity.phone)
        if not local:
            raise UserNotFoundException(identity.email or identity.phone or identity.id)

        app_metadata = identity.app_metadata or {}
        current = CurrentUser(
            id=local.id,
            email=local.email,
            phone=local.phone,
            is_super_user=app_metadata.get("type") == "super_user",
        )
        if len(_AUTH_USER_CACHE) >= settings.auth_cache_max_size:
            _prune_expired(now)
        if len(_AUTH_USER_CACHE) < settings.auth_cache_max_size:
            _AUTH_USER_CACHE[cache_key] = (current, now + settings.auth_cache_ttl_seconds)
        return current

    async def _sign_in(self, credentials: str) -> Tuple[UserResponse, Any]:
        current = await self.get_current_user(credentials)
        return await self.user_service.get_user_by_id(current.id), None

    async def login(self, credentials: Any) -> TokenResponse:
        raise InvalidCredentialsException("Access tokens cannot be exchanged for new tokens")


def _prune_expired(now: float) -> None:
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]


def clear_token_cache(token: Optional[str] = None) -> None:
    if token is None:
        _AUTH_USER_CACHE.clear()
        return
    _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
