"""
Shiprocket fulfillment provider

Owns the authenticated session with the Shiprocket external API and exposes
shipment creation, tracking, listing and serviceability checks. Every call
returns a ShipmentResult; transport, auth and provider-reported errors never
propagate as exceptions.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from core.config import ShiprocketConfig
from .base import FulfillmentProvider
from ..models import (
    ShipmentRequest, ShipmentResult, ShipmentSession, ServiceabilityOptions
)

logger = logging.getLogger(__name__)


class ShiprocketAuthError(Exception):
    """Login exchange with the provider failed"""
    pass


class ShiprocketProvider(FulfillmentProvider):
    """Shiprocket external API client"""

    AUTH_PATH = "/v1/external/auth/login"
    CREATE_ORDER_PATH = "/v1/external/orders/create/adhoc"
    TRACK_PATH = "/v1/external/courier/track"
    ORDERS_PATH = "/v1/external/orders"
    SERVICEABILITY_PATH = "/v1/external/courier/serviceability"

    def __init__(
        self,
        config: ShiprocketConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the provider

        Args:
            config: Provider credentials, pickup pincode and token lifetime
            http_client: Pre-built client (tests); defaults to one bound to base_url
            clock: Epoch-seconds source used for session expiry
        """
        self.config = config
        self.client = http_client or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout,
            headers={"Content-Type": "application/json"}
        )
        self._clock = clock
        self._session: Optional[ShipmentSession] = None
        self._session_lock = asyncio.Lock()

    @property
    def session(self) -> Optional[ShipmentSession]:
        return self._session

    async def close(self) -> None:
        await self.client.aclose()

    # ==================== Session ====================

    async def ensure_session(self) -> str:
        """
        Return a valid bearer token, logging in when absent or expired.

        Refreshes are serialized; callers waiting on the lock reuse the token
        obtained by the first one.

        Raises:
            ShiprocketAuthError: login exchange failed
        """
        session = self._session
        if session and session.is_valid(self._clock()):
            return session.token

        async with self._session_lock:
            session = self._session
            if session and session.is_valid(self._clock()):
                return session.token
            self._session = await self._authenticate()
            return self._session.token

    def invalidate_session(self) -> None:
        self._session = None

    async def _authenticate(self) -> ShipmentSession:
        if not self.config.email or not self.config.password:
            raise ShiprocketAuthError("Shiprocket credentials are not configured")

        try:
            response = await self.client.post(
                self.AUTH_PATH,
                json={"email": self.config.email, "password": self.config.password}
            )
        except httpx.HTTPError as e:
            raise ShiprocketAuthError(f"Shiprocket authentication failed: {e}") from e

        body = self._json_body(response)
        if response.status_code >= 400 or not isinstance(body, dict) or not body.get("token"):
            message = body.get("message") if isinstance(body, dict) else body
            raise ShiprocketAuthError(f"Shiprocket authentication failed: {message or response.status_code}")

        lifetime = body.get("expires_in") or self.config.token_lifetime_seconds
        expires_at = self._clock() + float(lifetime) - self.config.token_safety_margin_seconds
        logger.info("Authenticated with Shiprocket")
        return ShipmentSession(token=body["token"], expires_at=expires_at)

    # ==================== Operations ====================

    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        """Create an adhoc order in Shiprocket"""
        return await self._call(
            "POST",
            self.CREATE_ORDER_PATH,
            json=self._build_order_payload(request),
            success_message="Shipment created successfully",
            failure_message="Failed to create shipment in Shiprocket",
        )

    async def track_shipment(self, shipment_id: str) -> ShipmentResult:
        return await self._call(
            "GET",
            self.TRACK_PATH,
            params={"shipment_id": shipment_id},
            success_message="Tracking information retrieved successfully",
            failure_message="Failed to retrieve tracking information",
        )

    async def list_shipments(self, page: int = 1, limit: int = 10) -> ShipmentResult:
        return await self._call(
            "GET",
            self.ORDERS_PATH,
            params={"page": page, "limit": limit},
            success_message="Shipments retrieved successfully",
            failure_message="Failed to retrieve shipments",
        )

    async def check_serviceability(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ShipmentResult:
        """
        Check whether a delivery pincode is served from the pickup pincode

        Fails without touching the network when no pickup pincode is
        configured or passed in options.
        """
        options = options or ServiceabilityOptions()
        pickup_postcode = options.pickup_postcode or self.config.pickup_pincode
        if not pickup_postcode:
            logger.error("SHIPROCKET_PICKUP_PINCODE is not configured")
            return ShipmentResult.fail(
                "Shiprocket pickup pincode is not configured (SHIPROCKET_PICKUP_PINCODE)",
                "Failed to check pincode serviceability with Shiprocket",
            )

        params = {
            "pickup_postcode": pickup_postcode,
            "delivery_postcode": pincode,
            "cod": options.cod,
            "weight": options.weight,
            "length": options.length,
            "breadth": options.breadth,
            "height": options.height,
            "declared_value": options.declared_value,
        }
        return await self._call(
            "GET",
            self.SERVICEABILITY_PATH,
            params=params,
            success_message="Pincode serviceability checked successfully",
            failure_message="Failed to check pincode serviceability with Shiprocket",
        )

    # ==================== Helpers ====================

    async def _call(
        self,
        method: str,
        path: str,
        success_message: str,
        failure_message: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> ShipmentResult:
        try:
            token = await self.ensure_session()
            headers = {"Authorization": f"Bearer {token}"}
            if method == "GET":
                response = await self.client.get(path, params=params, headers=headers)
            else:
                response = await self.client.post(path, json=json, headers=headers)
        except ShiprocketAuthError as e:
            logger.error(f"{failure_message}: {e}")
            return ShipmentResult.fail(str(e), failure_message)
        except httpx.HTTPError as e:
            logger.error(f"{failure_message}: {type(e).__name__}: {e}")
            return ShipmentResult.fail(str(e) or type(e).__name__, failure_message)
        except Exception as e:
            logger.error(f"{failure_message}: unexpected {type(e).__name__}: {e}")
            return ShipmentResult.fail(str(e), failure_message)

        body = self._json_body(response)
        if response.status_code == 401:
            # Token revoked or expired early; next call logs in again
            self.invalidate_session()
        if response.status_code >= 400:
            logger.error(f"{failure_message}: HTTP {response.status_code} {body}")
            return ShipmentResult.fail(body, failure_message, status_code=response.status_code)

        return ShipmentResult.ok(body, success_message)

    def _build_order_payload(self, request: ShipmentRequest) -> Dict[str, Any]:
        return {
            "order_id": request.order_id,
            "order_date": request.order_date.strftime("%Y-%m-%d"),
            "pickup_location": self.config.pickup_location,
            "channel_id": self.config.channel_id,
            "comment": "Order placed via ecommerce platform",
            "billing_customer_name": request.customer_name,
            "billing_last_name": "",
            "billing_address": request.address,
            "billing_address_2": request.address_2,
            "billing_city": request.city,
            "billing_pincode": request.pincode,
            "billing_state": request.state,
            "billing_country": self.config.billing_country,
            "billing_email": request.email,
            "billing_phone": request.phone,
            "shipping_is_billing": True,
            "order_items": [
                {
                    "name": item.name,
                    "sku": item.sku,
                    "units": item.units,
                    "selling_price": float(item.selling_price),
                    "product_id": item.product_id,
                }
                for item in request.items
            ],
            "payment_method": request.payment_method.value,
            "sub_total": float(request.sub_total),
            "length": request.length,
            "breadth": request.breadth,
            "height": request.height,
            "weight": request.weight,
        }

    @staticmethod
    def _json_body(response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text
