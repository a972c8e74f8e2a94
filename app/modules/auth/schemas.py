from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.modules.users.schemas import UserResponse


class LoginRequest(BaseModel):
    username: str  # email or phone
    password: str


class PasswordSignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=255)
    phone: Optional[str] = Field(default=None, min_length=6, max_length=20)
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None


class OTPSignupRequest(BaseModel):
    phone: str = Field(min_length=6, max_length=20)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None


class SendOTPRequest(BaseModel):
    phone: str


class OTPLoginRequest(BaseModel):
    username: str  # email or phone of an existing user
    otp: str = Field(min_length=4, max_length=10)


class GoogleLoginRequest(BaseModel):
    id_token: str
    nonce: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: str


class SignupResponse(BaseModel):
    user: UserResponse
    message: str


class CurrentUser(BaseModel):
    """Identity resolved from a bearer token"""
    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_super_user: bool = False
