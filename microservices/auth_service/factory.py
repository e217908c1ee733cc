"""
Authentication Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_auth_service
    service = create_auth_service(db, otp_store, sms_client)
"""
from typing import Optional

from core.config import AuthConfig, get_settings

from .auth_service import PhoneAuthService
from .protocols import OTPStoreProtocol, SMSClientProtocol


def create_auth_service(
    db,
    otp_store: OTPStoreProtocol,
    sms_client: SMSClientProtocol,
    config: Optional[AuthConfig] = None,
) -> PhoneAuthService:
    """
    Create PhoneAuthService with real dependencies.

    This function imports the real repository and JWT manager.
    Use this in production, NOT in tests.

    Args:
        db: PostgresClientWrapper for the users table
        otp_store: Process-wide verification code ledger
        sms_client: SMS provider client
        config: Auth settings (defaults to global settings)

    Returns:
        Configured PhoneAuthService instance
    """
    # Import real dependencies here (not at module level)
    from core.jwt_manager import JWTManager
    from .user_repository import UserRepository

    config = config or get_settings().auth

    jwt_manager = JWTManager(
        secret_key=config.jwt_secret,
        algorithm=config.jwt_algorithm,
        issuer="storefront",
        access_token_expiry=config.jwt_expiration,
    )

    return PhoneAuthService(
        repository=UserRepository(db),
        otp_store=otp_store,
        sms_client=sms_client,
        jwt_manager=jwt_manager,
        code_ttl_seconds=config.otp_ttl_seconds,
    )
