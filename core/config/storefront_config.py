#!/usr/bin/env python3
"""Storefront main configuration

Combines all sub-configs used by the storefront microservices.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig
from .integration_config import ShiprocketConfig, RazorpayConfig, SMSConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class AuthConfig:
    """Phone OTP and session token settings"""
    otp_ttl_seconds: int = 300
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration: int = 3600

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            otp_ttl_seconds=_int(os.getenv("OTP_TTL_SECONDS", "300"), 300),
            jwt_secret=os.getenv("JWT_SECRET"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expiration=_int(os.getenv("JWT_EXPIRATION", "3600"), 3600),
        )


@dataclass
class StorefrontConfig:
    """Main storefront configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False
    default_host: str = "0.0.0.0"

    # Sub-configurations
    auth: AuthConfig = field(default_factory=AuthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    services: ServiceConfig = field(default_factory=ServiceConfig)
    shiprocket: ShiprocketConfig = field(default_factory=ShiprocketConfig)
    razorpay: RazorpayConfig = field(default_factory=RazorpayConfig)
    sms: SMSConfig = field(default_factory=SMSConfig)

    @classmethod
    def from_env(cls) -> 'StorefrontConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            default_host=os.getenv("HOST", "0.0.0.0"),

            auth=AuthConfig.from_env(),
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            services=ServiceConfig.from_env(),
            shiprocket=ShiprocketConfig.from_env(),
            razorpay=RazorpayConfig.from_env(),
            sms=SMSConfig.from_env(),
        )
