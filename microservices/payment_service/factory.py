"""
Payment Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_payment_service
    service = create_payment_service()
"""
from typing import Optional

from core.config import RazorpayConfig, get_settings

from .payment_service import PaymentService


def create_payment_service(
    config: Optional[RazorpayConfig] = None,
    gateway=None,
    order_client=None,
) -> PaymentService:
    """
    Create PaymentService with real dependencies.

    Use this in production, NOT in tests.

    Args:
        config: Gateway settings (defaults to global settings)
        gateway: Gateway client (defaults to RazorpayClient)
        order_client: Order service client (defaults to OrderClient)

    Returns:
        Configured PaymentService instance
    """
    # Import real clients here (not at module level)
    from .clients import OrderClient, RazorpayClient

    config = config or get_settings().razorpay

    return PaymentService(
        gateway=gateway or RazorpayClient(config),
        key_secret=config.key_secret,
        order_client=order_client or OrderClient(),
        default_currency=config.currency,
    )
