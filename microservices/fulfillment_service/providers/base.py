"""Fulfillment provider interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ShipmentRequest, ShipmentResult, ServiceabilityOptions


class FulfillmentProvider(ABC):
    """
    Abstract fulfillment provider.

    Implementations never raise: every failure comes back as a
    ShipmentResult with success=False.
    """

    @abstractmethod
    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        """Register an order with the provider."""
        raise NotImplementedError

    @abstractmethod
    async def track_shipment(self, shipment_id: str) -> ShipmentResult:
        """Tracking information for a provider shipment."""
        raise NotImplementedError

    @abstractmethod
    async def list_shipments(self, page: int = 1, limit: int = 10) -> ShipmentResult:
        """Paginated provider orders."""
        raise NotImplementedError

    @abstractmethod
    async def check_serviceability(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ShipmentResult:
        """Courier options for a destination pincode."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources."""
        return None
