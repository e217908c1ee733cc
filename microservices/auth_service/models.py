"""
Authentication Service Models

Phone-anchored users and the request/response bodies of the OTP signup and
login flows.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class OTPPurpose(str, Enum):
    """Scope of a verification code"""
    SIGNUP = "signup"
    LOGIN = "login"


class User(BaseModel):
    """
    Storefront user (stored in the users table)

    Identity is the 10-digit phone number; everything else is optional profile.
    """
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    phone: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    address: Optional[str] = None
    role: UserRole = UserRole.USER
    is_blocked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Request Models

class PhoneRequest(BaseModel):
    """Request a verification code"""
    phone: str = Field(..., description="10-digit phone number")

    @field_validator('phone')
    @classmethod
    def strip_phone(cls, v):
        return v.strip() if isinstance(v, str) else v


class VerifyCodeRequest(PhoneRequest):
    """Submit a verification code"""
    code: str = Field(..., description="6-digit verification code")

    @field_validator('code', mode='before')
    @classmethod
    def code_as_string(cls, v):
        # Keep leading zeros when a client sends the code as a number
        return str(v).strip() if v is not None else v


class SignupVerifyRequest(VerifyCodeRequest):
    """Signup verification with optional initial profile"""
    full_name: Optional[str] = None
    email: Optional[str] = None


class UserProfileUpdateRequest(BaseModel):
    """User-editable profile fields"""
    full_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = None
    address: Optional[str] = None


class BlockUserRequest(BaseModel):
    """Block or unblock a user"""
    blocked: bool = True


# Response Models

class CodeDispatchResponse(BaseModel):
    """Verification code was sent"""
    success: bool = True
    message: str
    expires_in: int


class AuthResponse(BaseModel):
    """Verified signup/login: the user and a session token"""
    success: bool = True
    message: str
    user: User
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class UserListResponse(BaseModel):
    """User list response"""
    users: List[User]
    count: int
