"""
Order Repository

Data access layer for orders using the shared asyncpg pool.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from enum import Enum
import uuid
import logging

from core.postgres_client import PostgresClientWrapper
from .models import Order

logger = logging.getLogger(__name__)

ORDER_COLUMNS = [
    "order_id", "user_id", "items", "shipping_address", "payment_method",
    "payment_status", "total_amount", "donation_amount", "is_delivered",
    "delivered_at", "is_cancelled", "cancelled_at", "fulfillment_status",
    "shipment_order_id", "shipment_order_date", "shipment_id",
    "payment_intent_id", "payment_confirmation_id", "created_at", "updated_at",
]

UPDATABLE_COLUMNS = set(ORDER_COLUMNS) - {"order_id", "user_id", "items", "total_amount", "created_at"}
GUARD_COLUMNS = {"is_delivered", "is_cancelled"}


class OrderRepository:
    """
    Repository for order data operations

    Line items and the shipping address are stored as JSONB.
    """

    def __init__(self, db: PostgresClientWrapper):
        self.db = db
        self.orders_table = "orders"

    async def create_order(self, order_data: Dict[str, Any]) -> Order:
        """Create a new order"""
        order_id = f"order_{uuid.uuid4().hex[:12]}"
        now = datetime.now(timezone.utc)

        row = {
            "order_id": order_id,
            "is_delivered": False,
            "is_cancelled": False,
            "created_at": now,
            "updated_at": now,
            **{k: self._to_db(v) for k, v in order_data.items()},
        }
        columns = list(row.keys())
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        query = f'''
            INSERT INTO {self.orders_table} ({", ".join(columns)})
            VALUES ({placeholders})
            RETURNING *
        '''

        try:
            result = await self.db.query_row(query, [row[c] for c in columns])
        except Exception as e:
            logger.error(f"Failed to create order: {e}")
            raise

        if not result:
            raise RuntimeError("Failed to create order")
        return self._row_to_order(result)

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        query = f'SELECT * FROM {self.orders_table} WHERE order_id = $1'
        result = await self.db.query_row(query, [order_id])
        return self._row_to_order(result) if result else None

    async def update_order(
        self,
        order_id: str,
        fields: Dict[str, Any],
        unless: Optional[str] = None
    ) -> Optional[Order]:
        """
        Update the given columns of an order

        With unless set to a boolean column, the row is only updated while that
        column is false; the check and the write are one statement. Returns None
        when no row matched.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update order columns: {sorted(unknown)}")
        if unless is not None and unless not in GUARD_COLUMNS:
            raise ValueError(f"Cannot guard an update on column: {unless}")

        update_data = {k: self._to_db(v) for k, v in fields.items()}
        update_data["updated_at"] = datetime.now(timezone.utc)

        # Build SET clause
        set_clauses = []
        params = []
        for i, (key, value) in enumerate(update_data.items(), start=1):
            set_clauses.append(f"{key} = ${i}")
            params.append(value)
        params.append(order_id)

        where = f"order_id = ${len(params)}"
        if unless:
            where += f" AND NOT {unless}"

        query = f'''
            UPDATE {self.orders_table}
            SET {", ".join(set_clauses)}
            WHERE {where}
            RETURNING *
        '''
        result = await self.db.query_row(query, params)
        return self._row_to_order(result) if result else None

    async def list_orders(self, limit: int = 50, offset: int = 0) -> List[Order]:
        """List orders, newest first"""
        query = f'''
            SELECT * FROM {self.orders_table}
            ORDER BY created_at DESC
            LIMIT $1 OFFSET $2
        '''
        results = await self.db.query(query, [limit, offset])
        return [self._row_to_order(r) for r in results]

    async def get_user_orders(self, user_id: str) -> List[Order]:
        """Get orders for a specific user"""
        query = f'''
            SELECT * FROM {self.orders_table}
            WHERE user_id = $1
            ORDER BY created_at DESC
        '''
        results = await self.db.query(query, [user_id])
        return [self._row_to_order(r) for r in results]

    async def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        """Get single order by gateway order id"""
        query = f'''
            SELECT * FROM {self.orders_table}
            WHERE payment_intent_id = $1
            ORDER BY created_at DESC
            LIMIT 1
        '''
        result = await self.db.query_row(query, [payment_intent_id])
        return self._row_to_order(result) if result else None

    async def delete_order(self, order_id: str) -> bool:
        """Delete an order"""
        count = await self.db.execute(f'DELETE FROM {self.orders_table} WHERE order_id = $1', [order_id])
        return count > 0

    @staticmethod
    def _to_db(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @staticmethod
    def _row_to_order(row: Dict[str, Any]) -> Order:
        return Order(**{k: row.get(k) for k in ORDER_COLUMNS if row.get(k) is not None})
