"""
Razorpay Gateway Client

Orders API over httpx with key id/secret basic auth.
https://razorpay.com/docs/api/orders/
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.config import RazorpayConfig, get_settings
from core.errors import GatewayError

logger = logging.getLogger(__name__)


class RazorpayClient:
    """
    Razorpay payment gateway client.

    Usage:
        client = RazorpayClient()
        order = await client.create_order(50000, "INR", "receipt_1700000000000")
    """

    ORDERS_PATH = "/v1/orders"

    def __init__(self, config: Optional[RazorpayConfig] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config or get_settings().razorpay

        if not (self.config.key_id and self.config.key_secret):
            logger.warning("Razorpay keys not configured")

        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy HTTP client initialization"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                auth=(self.config.key_id or "", self.config.key_secret or ""),
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
        return self._client

    async def close(self):
        """Close HTTP client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Create a gateway order

        Raises:
            GatewayError: keys missing, gateway unreachable or request refused
        """
        if not (self.config.key_id and self.config.key_secret):
            raise GatewayError("Payment gateway not configured")

        payload: Dict[str, Any] = {"amount": amount, "currency": currency, "receipt": receipt}
        if notes:
            payload["notes"] = notes

        try:
            response = await self.client.post(self.ORDERS_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Razorpay order creation failed: {e}")
            raise GatewayError("Failed to create Razorpay order", details=str(e))

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code >= 400:
            logger.error(f"Razorpay rejected order creation ({response.status_code}): {body}")
            raise GatewayError(
                "Failed to create Razorpay order",
                details=body,
                rejected=response.status_code < 500,
            )

        logger.info(f"Razorpay order created: {body.get('id') if isinstance(body, dict) else body}")
        return body
