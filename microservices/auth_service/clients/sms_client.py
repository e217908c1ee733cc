"""
SMS Client for Auth Service

Sends verification codes through the SMS verification provider.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.config import SMSConfig, get_settings

logger = logging.getLogger(__name__)


class SMSClient:
    """Client for the SMS verification provider"""

    def __init__(self, config: Optional[SMSConfig] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config or get_settings().sms
        self.client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def dispatch_code(self, phone: str, code: str) -> Dict[str, Any]:
        """
        Send a verification code by SMS

        Returns:
            {"delivered": bool, "message": str}. Timeouts, transport errors and
            provider refusals all come back as delivered=False.
        """
        headers = {}
        if self.config.api_key:
            headers["Api-Key"] = self.config.api_key
        if self.config.api_salt:
            headers["Api-Salt"] = self.config.api_salt

        try:
            response = await self.client.post(
                self.config.api_url,
                data={"otp": code, "type": "SMS", "numberOrMail": phone},
                headers=headers,
            )
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException:
            logger.warning(f"SMS dispatch to {self._mask(phone)} timed out")
            return {"delivered": False, "message": "OTP sending timed out"}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"SMS dispatch to {self._mask(phone)} failed: {e}")
            return {"delivered": False, "message": "OTP sending failed"}

        delivered = bool(body.get("status")) if isinstance(body, dict) else False
        message = body.get("message", "") if isinstance(body, dict) else ""
        if not delivered:
            logger.warning(f"SMS provider refused dispatch to {self._mask(phone)}: {message}")
        return {"delivered": delivered, "message": message}

    @staticmethod
    def _mask(phone: str) -> str:
        return f"******{phone[-4:]}" if phone else ""
