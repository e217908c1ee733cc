"""
Order Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_order_service
    service = create_order_service(db, fulfillment_provider)
"""
from typing import Optional

from .order_service import OrderService
from .protocols import AccountClientProtocol, FulfillmentProviderProtocol


def create_order_service(
    db,
    fulfillment_provider: FulfillmentProviderProtocol,
    account_client: Optional[AccountClientProtocol] = None,
) -> OrderService:
    """
    Create OrderService with real dependencies.

    This function imports the real repositories (which have I/O dependencies).
    Use this in production, NOT in tests.

    Args:
        db: PostgresClientWrapper shared by the repositories
        fulfillment_provider: Process-wide shipping provider
        account_client: Auth service client

    Returns:
        Configured OrderService instance
    """
    # Import real repositories here (not at module level)
    from .order_repository import OrderRepository
    from .catalog_repository import CatalogRepository

    return OrderService(
        repository=OrderRepository(db),
        catalog=CatalogRepository(db),
        fulfillment_provider=fulfillment_provider,
        account_client=account_client,
    )
