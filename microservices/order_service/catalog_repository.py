"""
Catalog Repository

Read-only price lookups against the products tables owned by the catalog
CRUD surface.
"""

import logging
from typing import Optional

from core.postgres_client import PostgresClientWrapper
from .models import Product

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Product price access for order pricing"""

    def __init__(self, db: PostgresClientWrapper):
        self.db = db
        self.products_table = "products"
        self.variants_table = "product_variants"

    async def get_product(self, product_id: str) -> Optional[Product]:
        query = f'''
            SELECT product_id, title, amount, discounted_amount, images
            FROM {self.products_table}
            WHERE product_id = $1
        '''
        row = await self.db.query_row(query, [product_id])
        if not row:
            return None

        images = row.get("images") or []
        return Product(
            product_id=row["product_id"],
            title=row["title"],
            amount=row["amount"],
            discounted_amount=row.get("discounted_amount"),
            image=images[0] if images else None,
        )

    async def get_variant_sku(self, variant_id: str) -> Optional[str]:
        query = f'SELECT sku FROM {self.variants_table} WHERE variant_id = $1'
        row = await self.db.query_row(query, [variant_id])
        return row.get("sku") if row else None
