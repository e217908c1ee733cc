#!/usr/bin/env python3
"""Third-party integration configuration

Credentials and tuning for the shipping provider (Shiprocket), the payment
gateway (Razorpay) and the SMS verification provider.
"""
import os
from dataclasses import dataclass
from typing import Optional

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class ShiprocketConfig:
    """Shipping provider configuration"""
    base_url: str = "https://apiv2.shiprocket.in"
    email: Optional[str] = None
    password: Optional[str] = None
    pickup_pincode: Optional[str] = None
    pickup_location: str = "Default"
    channel_id: str = ""
    billing_country: str = "India"

    # Tokens are issued for 15 days; renew one day early
    token_lifetime_seconds: int = 15 * 24 * 60 * 60
    token_safety_margin_seconds: int = 24 * 60 * 60

    timeout: float = 15.0

    @classmethod
    def from_env(cls) -> 'ShiprocketConfig':
        return cls(
            base_url=os.getenv("SHIPROCKET_API_URL", "https://apiv2.shiprocket.in"),
            email=os.getenv("SHIPROCKET_EMAIL"),
            password=os.getenv("SHIPROCKET_PASSWORD"),
            pickup_pincode=os.getenv("SHIPROCKET_PICKUP_PINCODE"),
            pickup_location=os.getenv("SHIPROCKET_PICKUP_LOCATION", "Default"),
            channel_id=os.getenv("SHIPROCKET_CHANNEL_ID", ""),
            billing_country=os.getenv("SHIPROCKET_BILLING_COUNTRY", "India"),
            token_lifetime_seconds=_int(os.getenv("SHIPROCKET_TOKEN_LIFETIME", ""), 15 * 24 * 60 * 60),
            token_safety_margin_seconds=_int(os.getenv("SHIPROCKET_TOKEN_SAFETY_MARGIN", ""), 24 * 60 * 60),
            timeout=_float(os.getenv("SHIPROCKET_TIMEOUT", "15"), 15.0),
        )


@dataclass
class RazorpayConfig:
    """Payment gateway configuration"""
    base_url: str = "https://api.razorpay.com"
    key_id: Optional[str] = None
    key_secret: Optional[str] = None
    currency: str = "INR"
    timeout: float = 15.0

    @classmethod
    def from_env(cls) -> 'RazorpayConfig':
        return cls(
            base_url=os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com"),
            key_id=os.getenv("RAZORPAY_KEY_ID"),
            key_secret=os.getenv("RAZORPAY_KEY_SECRET"),
            currency=os.getenv("RAZORPAY_CURRENCY", "INR"),
            timeout=_float(os.getenv("RAZORPAY_TIMEOUT", "15"), 15.0),
        )


@dataclass
class SMSConfig:
    """Verification SMS provider configuration"""
    api_url: str = "https://api.codemindstudio.in/api/start_verification"
    api_key: Optional[str] = None
    api_salt: Optional[str] = None
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'SMSConfig':
        return cls(
            api_url=os.getenv("SMS_API_URL", "https://api.codemindstudio.in/api/start_verification"),
            api_key=os.getenv("SMS_API_KEY"),
            api_salt=os.getenv("SMS_API_SALT"),
            timeout=_float(os.getenv("SMS_TIMEOUT", "10"), 10.0),
        )
