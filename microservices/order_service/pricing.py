"""
Order Pricing

Resolves current catalog prices for requested line items and computes the
order total. Prices are snapshotted onto the line items so later catalog
changes never re-price an order.
"""

import logging
from decimal import Decimal
from typing import List, Tuple

from core.errors import NotFoundError
from .models import OrderItem, OrderItemRequest
from .protocols import CatalogRepositoryProtocol

logger = logging.getLogger(__name__)


class PricingEngine:
    """Prices order requests against the catalog"""

    def __init__(self, catalog: CatalogRepositoryProtocol):
        self.catalog = catalog

    async def price_items(self, requested: List[OrderItemRequest]) -> Tuple[List[OrderItem], Decimal]:
        """
        Snapshot unit prices and compute the order total

        Args:
            requested: Line items from the order request

        Returns:
            (priced line items, total amount)

        Raises:
            NotFoundError: a referenced product does not exist
        """
        items: List[OrderItem] = []
        for line in requested:
            product = await self.catalog.get_product(line.product_id)
            if product is None:
                raise NotFoundError(f"Product not found: {line.product_id}")

            sku = await self.catalog.get_variant_sku(line.variant_id)
            items.append(OrderItem(
                product_id=product.product_id,
                variant_id=line.variant_id,
                size=line.size,
                quantity=line.quantity,
                unit_price=product.effective_price,
                title=product.title,
                sku=sku,
                image=product.image,
            ))

        total = sum((item.line_total for item in items), Decimal("0"))

        logger.debug(f"Priced {len(items)} items, total {total}")
        return items, total
