"""
Order Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import Order, Product
from microservices.fulfillment_service.models import (
    ShipmentRequest, ShipmentResult, ServiceabilityOptions
)


# ============================================================================
# Repository Protocols
# ============================================================================

@runtime_checkable
class OrderRepositoryProtocol(Protocol):
    """
    Interface for Order Repository.

    Used for dependency injection to enable testing.
    """

    async def create_order(self, order_data: Dict[str, Any]) -> Order:
        """Insert an order row (id and timestamps assigned by the repository)"""
        ...

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        ...

    async def update_order(
        self, order_id: str, fields: Dict[str, Any], unless: Optional[str] = None
    ) -> Optional[Order]:
        """Partial update, skipped while the unless column is true; None if no row matched"""
        ...

    async def list_orders(self, limit: int = 50, offset: int = 0) -> List[Order]:
        """List orders, newest first"""
        ...

    async def get_user_orders(self, user_id: str) -> List[Order]:
        """Orders for a specific user, newest first"""
        ...

    async def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        """Single order by gateway order id"""
        ...

    async def delete_order(self, order_id: str) -> bool:
        """Delete an order"""
        ...


@runtime_checkable
class CatalogRepositoryProtocol(Protocol):
    """Read-only access to catalog prices"""

    async def get_product(self, product_id: str) -> Optional[Product]:
        ...

    async def get_variant_sku(self, variant_id: str) -> Optional[str]:
        ...


# ============================================================================
# Client Protocols
# ============================================================================

@runtime_checkable
class AccountClientProtocol(Protocol):
    """Interface for the auth service user lookup"""

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        ...


@runtime_checkable
class FulfillmentProviderProtocol(Protocol):
    """Interface for the shipping provider"""

    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        ...

    async def track_shipment(self, shipment_id: str) -> ShipmentResult:
        ...

    async def list_shipments(self, page: int = 1, limit: int = 10) -> ShipmentResult:
        ...

    async def check_serviceability(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ShipmentResult:
        ...
