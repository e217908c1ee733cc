"""
Fulfillment Factory

Builds the process-wide shipping provider from configuration.
"""
import logging
from typing import Optional

from core.config import ShiprocketConfig, get_settings

from .providers.base import FulfillmentProvider

logger = logging.getLogger(__name__)


def create_fulfillment_provider(config: Optional[ShiprocketConfig] = None) -> FulfillmentProvider:
    """
    Create the shipping provider.

    Falls back to the mock provider when no Shiprocket credentials are set,
    so local development runs without a provider account.
    """
    config = config or get_settings().shiprocket

    if config.email and config.password:
        from .providers.shiprocket import ShiprocketProvider
        return ShiprocketProvider(config)

    from .providers.mock import MockFulfillmentProvider
    logger.warning("Shiprocket credentials not configured - using MockFulfillmentProvider")
    return MockFulfillmentProvider()
