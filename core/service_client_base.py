"""
Base client for calls between storefront services

Peer base URLs and the request timeout come from ServiceConfig; requests
carry the internal service headers unless disabled.
"""

import httpx
import logging
from typing import Optional, Dict, Any
from abc import ABC

from core.config import get_settings

logger = logging.getLogger(__name__)


class BaseServiceClient(ABC):
    """
    Base class for peer service clients

    Subclasses set service_name; the base URL is read from
    ServiceConfig.<service_name>_url.

    Example:
        class OrderClient(BaseServiceClient):
            service_name = "order_service"

            async def get_order(self, order_id: str):
                response = await self.get(f"/api/v1/orders/{order_id}")
                return response.json()
    """

    service_name: str = None

    def __init__(
        self,
        base_url: Optional[str] = None,
        use_internal_auth: bool = True,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            base_url: Overrides the configured peer URL
            use_internal_auth: Attach internal service headers
            timeout: Overrides ServiceConfig.request_timeout
            http_client: Pre-built client (tests)
        """
        if not self.service_name:
            raise ValueError(f"{self.__class__.__name__} must define 'service_name'")

        services = get_settings().services
        self.base_url = (base_url or getattr(services, f"{self.service_name}_url")).rstrip('/')

        headers = {"Content-Type": "application/json"}
        if use_internal_auth:
            from core.internal_service_auth import InternalServiceAuth
            headers.update(InternalServiceAuth.get_internal_service_headers())

        self.client = http_client or httpx.AsyncClient(
            timeout=timeout or services.request_timeout,
            headers=headers
        )
        logger.debug(f"{self.service_name} client -> {self.base_url}")

    async def close(self):
        await self.client.aclose()

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        return await self.client.get(f"{self.base_url}{path}", params=params, headers=headers)

    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        return await self.client.post(f"{self.base_url}{path}", json=json, headers=headers)


__all__ = ["BaseServiceClient"]
