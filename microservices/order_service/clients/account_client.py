"""
Account Client for Order Service

HTTP client for user lookups against auth_service
"""

import httpx
import logging
from typing import Optional, Dict, Any

from core.service_client_base import BaseServiceClient

logger = logging.getLogger(__name__)


class AccountClient(BaseServiceClient):
    """Client for auth_service user records"""

    service_name = "auth_service"

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get user by ID

        Args:
            user_id: User ID

        Returns:
            User data if found, None when missing or the service is unreachable
        """
        try:
            response = await self.get(f"/api/v1/users/{user_id}")
            if response.status_code == 404:
                logger.warning(f"User {user_id} not found")
                return None
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to get user: {e.response.status_code}")
            return None
        except Exception as e:
            logger.error(f"Error getting user: {e}")
            return None
