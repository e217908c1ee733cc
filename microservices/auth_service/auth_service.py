"""
Authentication Service - Phone OTP

Two-step signup and login over a shared verification code ledger. A code is
only stored once the SMS provider accepted it, and is deleted as soon as it
has been used.
"""

import logging
import re
import secrets
from typing import Callable, List, Optional

from core.errors import (
    ConflictError, DeliveryError, ExpiredError, ForbiddenError,
    InvalidCodeError, NotFoundError, ValidationError
)
from core.jwt_manager import JWTManager, TokenClaims, TokenScope
from .models import (
    AuthResponse, CodeDispatchResponse, OTPPurpose, SignupVerifyRequest,
    User, UserProfileUpdateRequest, UserRole, VerifyCodeRequest
)
from .protocols import OTPStoreProtocol, SMSClientProtocol, UserRepositoryProtocol

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\d{10}$")


def generate_code() -> str:
    """6-digit numeric code, leading zeros kept"""
    return f"{secrets.randbelow(1000000):06d}"


class PhoneAuthService:
    """Phone number authentication with one-time codes"""

    def __init__(
        self,
        repository: UserRepositoryProtocol,
        otp_store: OTPStoreProtocol,
        sms_client: SMSClientProtocol,
        jwt_manager: JWTManager,
        code_ttl_seconds: int = 300,
        code_generator: Callable[[], str] = generate_code,
    ):
        self.user_repo = repository
        self.otp_store = otp_store
        self.sms_client = sms_client
        self.jwt_manager = jwt_manager
        self.code_ttl_seconds = code_ttl_seconds
        self._generate_code = code_generator

        logger.info("PhoneAuthService initialized")

    # ============================================
    # Signup
    # ============================================

    async def request_signup_code(self, phone: str) -> CodeDispatchResponse:
        """
        Send a signup code to a phone that is not registered yet

        Raises:
            ValidationError: phone is not 10 digits
            ConflictError: phone already registered
            DeliveryError: SMS could not be sent (nothing is stored)
        """
        phone = self._validate_phone(phone)

        if await self.user_repo.get_user_by_phone(phone):
            raise ConflictError("User already exists")

        await self._dispatch_and_store(OTPPurpose.SIGNUP, phone)
        return CodeDispatchResponse(message="OTP sent successfully", expires_in=self.code_ttl_seconds)

    async def verify_signup_code(self, request: SignupVerifyRequest) -> AuthResponse:
        """
        Create the user once the signup code matches

        Raises:
            ExpiredError: no live code for this phone
            InvalidCodeError: code does not match
            ConflictError: the phone was registered in the meantime
        """
        phone = self._validate_phone(request.phone)
        key = self._key(OTPPurpose.SIGNUP, phone)
        self._check_code(key, request.code)

        if await self.user_repo.get_user_by_phone(phone):
            raise ConflictError("User already exists")

        user = await self.user_repo.create_user({
            "phone": phone,
            "full_name": request.full_name,
            "email": request.email,
        })
        self.otp_store.delete(key)

        logger.info(f"User signed up: {user.user_id}")
        return self._auth_response(user, "Signup successful")

    # ============================================
    # Login
    # ============================================

    async def request_login_code(self, phone: str) -> CodeDispatchResponse:
        """
        Send a login code to a registered, unblocked phone

        Raises:
            ValidationError: phone is not 10 digits
            NotFoundError: no user with this phone
            ForbiddenError: user is blocked
            DeliveryError: SMS could not be sent (nothing is stored)
        """
        phone = self._validate_phone(phone)
        await self._get_active_user(phone)

        await self._dispatch_and_store(OTPPurpose.LOGIN, phone)
        return CodeDispatchResponse(message="OTP sent successfully", expires_in=self.code_ttl_seconds)

    async def verify_login_code(self, request: VerifyCodeRequest) -> AuthResponse:
        """
        Log the user in once the login code matches

        The user is looked up again because it may have been blocked or
        removed since the code was sent.
        """
        phone = self._validate_phone(request.phone)
        key = self._key(OTPPurpose.LOGIN, phone)
        self._check_code(key, request.code)

        user = await self._get_active_user(phone)
        self.otp_store.delete(key)

        logger.info(f"User logged in: {user.user_id}")
        return self._auth_response(user, "Login successful")

    # ============================================
    # User management
    # ============================================

    async def list_users(self, limit: int = 100, offset: int = 0) -> List[User]:
        return await self.user_repo.list_users(limit=limit, offset=offset)

    async def get_user(self, user_id: str) -> User:
        user = await self.user_repo.get_user_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    async def update_profile(self, user_id: str, request: UserProfileUpdateRequest) -> User:
        """Update the user-editable profile fields that were supplied"""
        await self.get_user(user_id)
        fields = request.model_dump(exclude_unset=True)
        updated = await self.user_repo.update_user(user_id, fields)
        if not updated:
            raise NotFoundError(f"User not found: {user_id}")
        return updated

    async def set_blocked(self, user_id: str, blocked: bool) -> User:
        await self.get_user(user_id)
        updated = await self.user_repo.update_user(user_id, {"is_blocked": blocked})
        if not updated:
            raise NotFoundError(f"User not found: {user_id}")
        logger.info(f"User {user_id} {'blocked' if blocked else 'unblocked'}")
        return updated

    # ============================================
    # Helpers
    # ============================================

    async def _dispatch_and_store(self, purpose: OTPPurpose, phone: str) -> None:
        code = self._generate_code()
        result = await self.sms_client.dispatch_code(phone, code)
        if not result.get("delivered"):
            raise DeliveryError("Failed to send OTP")
        self.otp_store.set(self._key(purpose, phone), code)
        logger.info(f"{purpose.value} code sent to ******{phone[-4:]}")

    def _check_code(self, key: str, code: str) -> None:
        stored = self.otp_store.get(key)
        if stored is None:
            raise ExpiredError("OTP expired or not found")
        if str(code).strip() != str(stored).strip():
            raise InvalidCodeError("Invalid OTP")

    async def _get_active_user(self, phone: str) -> User:
        user = await self.user_repo.get_user_by_phone(phone)
        if not user:
            raise NotFoundError("User not found")
        if user.is_blocked:
            raise ForbiddenError("User is blocked")
        return user

    def _auth_response(self, user: User, message: str) -> AuthResponse:
        scope = TokenScope.ADMIN if user.role == UserRole.ADMIN else TokenScope.USER
        token = self.jwt_manager.create_access_token(
            TokenClaims(user_id=user.user_id, phone=user.phone, scope=scope)
        )
        return AuthResponse(
            message=message,
            user=user,
            access_token=token,
            expires_in=self.jwt_manager.access_token_expiry,
        )

    @staticmethod
    def _key(purpose: OTPPurpose, phone: str) -> str:
        return f"{purpose.value}:{phone}"

    @staticmethod
    def _validate_phone(phone: Optional[str]) -> str:
        phone = (phone or "").strip()
        if not PHONE_PATTERN.match(phone):
            raise ValidationError("Phone number must be exactly 10 digits")
        return phone
