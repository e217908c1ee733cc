"""Shipping provider implementations"""

from .base import FulfillmentProvider
from .mock import MockFulfillmentProvider
from .shiprocket import ShiprocketProvider

__all__ = ["FulfillmentProvider", "MockFulfillmentProvider", "ShiprocketProvider"]
