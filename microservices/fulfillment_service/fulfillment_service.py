"""
Fulfillment Service Business Logic

Interprets provider answers that callers should not read raw, such as
pincode serviceability.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from core.errors import GatewayError, ValidationError
from .models import CourierOption, ServiceabilityOptions, ServiceabilityResponse
from .providers.base import FulfillmentProvider

logger = logging.getLogger(__name__)

PINCODE_PATTERN = re.compile(r"^\d{6}$")


class FulfillmentService:
    """Serviceability checks on top of a fulfillment provider"""

    def __init__(self, provider: FulfillmentProvider):
        self.provider = provider

    async def check_pincode(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ServiceabilityResponse:
        """
        Decide whether a destination pincode can be delivered to

        The provider's own status flag is not trusted; a pincode is
        serviceable when at least one courier is offered.

        Raises:
            ValidationError: pincode is not 6 digits
            GatewayError: provider call failed
        """
        pincode = (pincode or "").strip()
        if not PINCODE_PATTERN.match(pincode):
            raise ValidationError("Pincode must be 6 digits")

        result = await self.provider.check_serviceability(pincode, options)
        if not result.success:
            raise GatewayError(result.message, details=result.error, rejected=result.rejected)

        couriers = self._parse_couriers(result.data)
        fastest = min(
            (c for c in couriers if c.estimated_delivery_days is not None),
            key=lambda c: c.estimated_delivery_days,
            default=None,
        )
        serviceable = len(couriers) > 0
        logger.info(f"Pincode {pincode} serviceable={serviceable} ({len(couriers)} couriers)")

        return ServiceabilityResponse(
            pincode=pincode,
            serviceable=serviceable,
            couriers=couriers,
            fastest=fastest,
            message="Delivery available" if serviceable else "Delivery not available for this pincode",
        )

    @staticmethod
    def _parse_couriers(data: Any) -> List[CourierOption]:
        if not isinstance(data, dict):
            return []
        inner: Dict[str, Any] = data.get("data") or {}
        companies = inner.get("available_courier_companies") if isinstance(inner, dict) else None
        if not isinstance(companies, list):
            return []

        couriers = []
        for company in companies:
            if not isinstance(company, dict):
                logger.warning(f"Skipping malformed courier entry: {company!r}")
                continue
            etd = company.get("etd")
            couriers.append(CourierOption(
                courier_name=str(company.get("courier_name") or "Unknown"),
                estimated_delivery_days=_to_int(company.get("estimated_delivery_days")),
                etd=str(etd) if etd is not None else None,
                rate=_to_decimal(company.get("rate")),
            ))
        return couriers


def _to_int(value: Any) -> Optional[int]:
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        return None
    return rate if rate.is_finite() else None
