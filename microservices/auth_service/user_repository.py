"""
User Repository

Data access layer for storefront users using the shared asyncpg pool.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, List

import asyncpg

from core.errors import ConflictError
from core.postgres_client import PostgresClientWrapper
from .models import User

logger = logging.getLogger(__name__)

USER_COLUMNS = [
    "user_id", "phone", "full_name", "email", "avatar", "address",
    "role", "is_blocked", "created_at", "updated_at",
]

UPDATABLE_COLUMNS = {"full_name", "email", "avatar", "address", "role", "is_blocked"}


class UserRepository:
    """User repository - async data access layer"""

    def __init__(self, db: PostgresClientWrapper):
        self.db = db
        self.users_table = "users"

    async def get_user_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone"""
        result = await self.db.query_row(
            f"SELECT * FROM {self.users_table} WHERE phone = $1",
            [phone]
        )
        return self._row_to_user(result) if result else None

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        result = await self.db.query_row(
            f"SELECT * FROM {self.users_table} WHERE user_id = $1",
            [user_id]
        )
        return self._row_to_user(result) if result else None

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create new user

        Raises:
            ConflictError: phone already registered
        """
        now = datetime.now(timezone.utc)
        query = f"""
            INSERT INTO {self.users_table}
            (user_id, phone, full_name, email, role, is_blocked, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """
        params = [
            f"usr_{uuid.uuid4().hex}",
            user_data["phone"],
            user_data.get("full_name"),
            user_data.get("email"),
            self._to_db(user_data.get("role", "user")),
            False,
            now,
            now,
        ]

        try:
            result = await self.db.query_row(query, params)
        except asyncpg.UniqueViolationError:
            raise ConflictError(f"User already exists with phone {user_data['phone']}")
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

        return self._row_to_user(result)

    async def update_user(self, user_id: str, update_data: Dict[str, Any]) -> Optional[User]:
        """Update user information"""
        unknown = set(update_data) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update user columns: {sorted(unknown)}")
        if not update_data:
            return await self.get_user_by_id(user_id)

        fields = {k: self._to_db(v) for k, v in update_data.items()}
        fields["updated_at"] = datetime.now(timezone.utc)

        set_clauses = [f"{key} = ${i}" for i, key in enumerate(fields, start=1)]
        params = list(fields.values()) + [user_id]

        query = f"""
            UPDATE {self.users_table}
            SET {", ".join(set_clauses)}
            WHERE user_id = ${len(params)}
            RETURNING *
        """
        result = await self.db.query_row(query, params)
        return self._row_to_user(result) if result else None

    async def list_users(self, limit: int = 100, offset: int = 0) -> List[User]:
        """List users, newest first"""
        results = await self.db.query(
            f"SELECT * FROM {self.users_table} ORDER BY created_at DESC LIMIT $1 OFFSET $2",
            [limit, offset]
        )
        return [self._row_to_user(r) for r in results]

    @staticmethod
    def _to_db(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @staticmethod
    def _row_to_user(row: Dict[str, Any]) -> User:
        return User(**{k: row.get(k) for k in USER_COLUMNS if row.get(k) is not None})
