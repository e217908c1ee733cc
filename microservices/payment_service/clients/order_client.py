"""
Order Client for Payment Service

HTTP client for reporting verified payments to order_service
"""

import httpx
import logging
from typing import Optional, Dict, Any

from core.service_client_base import BaseServiceClient

logger = logging.getLogger(__name__)


class OrderClient(BaseServiceClient):
    """Client for order_service payment confirmation"""

    service_name = "order_service"

    async def confirm_payment(
        self, payment_intent_id: str, payment_confirmation_id: str
    ) -> Optional[Dict[str, Any]]:
        """
        Mark the order created for a gateway order as paid

        Returns:
            Updated order data, or None when no order matches or the service is unreachable
        """
        try:
            response = await self.post(
                "/api/v1/orders/payments/confirm",
                json={
                    "payment_intent_id": payment_intent_id,
                    "payment_confirmation_id": payment_confirmation_id,
                    "payment_status": "paid",
                }
            )
            if response.status_code == 404:
                logger.warning(f"No order for payment intent {payment_intent_id}")
                return None
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to confirm payment: {e.response.status_code}")
            return None
        except Exception as e:
            logger.error(f"Error confirming payment: {e}")
            return None
