from fastapi import APIRouter, Depends
from supabase import AsyncClient
from app.core.dependencies import (
    get_authorization_service, get_cache, get_current_user, get_service_supabase, get_store
)
from app.database.store import Store
from app.modules.auth.google_service import GoogleAuthService
from app.modules.auth.otp_service import OTPAuthService
from app.modules.auth.password_service import PasswordAuthService
from app.modules.auth.schemas import (
    CurrentUser, GoogleLoginRequest, LoginRequest, OTPLoginRequest, OTPSignupRequest,
    PasswordSignupRequest, SendOTPRequest, SignupResponse, TokenResponse
)
from app.modules.authorization.service import AuthorizationService
from app.modules.users.service import UserService
from app.config.permissions_config import get_permission_matrix

router = APIRouter(prefix="/auth", tags=["auth"])


def get_user_service(store: Store = Depends(get_store), cache=Depends(get_cache)) -> UserService:
    return UserService(store, cache)


def get_password_auth_service(
    supabase: AsyncClient = Depends(get_service_supabase),
    user_service: UserService = Depends(get_user_service)
) -> PasswordAuthService:
    return PasswordAuthService(supabase, user_service)


def get_otp_auth_service(
    supabase: AsyncClient = Depends(get_service_supabase),
    user_service: UserService = Depends(get_user_service)
) -> OTPAuthService:
    return OTPAuthService(supabase, user_service)


def get_google_auth_service(
    supabase: AsyncClient = Depends(get_service_supabase),
    user_service: UserService = Depends(get_user_service)
) -> GoogleAuthService:
    return GoogleAuthService(supabase, user_service)


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    signup_data: PasswordSignupRequest,
    service: PasswordAuthService = Depends(get_password_auth_service)
):
    """Register a new user with email and password"""
    return await service.signup(signup_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: PasswordAuthService = Depends(get_password_auth_service)
):
    """Login with email/phone and password"""
    return await service.login(login_data)


@router.post("/otp/signup", response_model=SignupResponse, status_code=201)
async def otp_signup(
    signup_data: OTPSignupRequest,
    service: OTPAuthService = Depends(get_otp_auth_service)
):
    return await service.signup(signup_data)


@router.post("/otp/send", status_code=202)
async def send_otp(
    request: SendOTPRequest,
    service: OTPAuthService = Depends(get_otp_auth_service)
):
    await service.send_otp(request.phone)
    return {"message": "Verification code sent"}


@router.post("/otp/login", response_model=TokenResponse)
async def otp_login(
    login_data: OTPLoginRequest,
    service: OTPAuthService = Depends(get_otp_auth_service)
):
    return await service.login(login_data)


@router.post("/google", response_model=TokenResponse)
async def google_login(
    login_data: GoogleLoginRequest,
    service: GoogleAuthService = Depends(get_google_auth_service)
):
    """Login with a Google ID token"""
    return await service.login(login_data)


@router.get("/me")
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    authorization: AuthorizationService = Depends(get_authorization_service)
):
    """Get current authenticated user and their permission names (for frontend UI)."""
    if current_user.is_super_user:
        permissions = [p["name"] for p in get_permission_matrix()["permissions"]]
    else:
        permissions = sorted(p.name for p in await authorization.get_effective_permissions(current_user.id))
    return {**current_user.model_dump(), "permissions": permissions}
