"""
Fulfillment Service Data Models

Shipping provider integration: tagged results, session state, shipment
requests and serviceability answers.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class ShipmentPaymentMethod(str, Enum):
    """Provider payment flag"""
    COD = "COD"
    PREPAID = "Prepaid"


class ShipmentResult(BaseModel):
    """
    Tagged result returned by every provider call.

    success=True carries data; success=False carries error (raw provider
    payload or exception text) and a human-readable message.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[Any] = None
    message: str = ""
    status_code: Optional[int] = None

    @classmethod
    def ok(cls, data: Any, message: str) -> "ShipmentResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: Any, message: str, status_code: Optional[int] = None) -> "ShipmentResult":
        return cls(success=False, error=error, message=message, status_code=status_code)

    @property
    def rejected(self) -> bool:
        """Provider answered and refused the request"""
        return self.status_code is not None and 400 <= self.status_code < 500


class ShipmentSession(BaseModel):
    """Bearer token plus local expiry (epoch seconds)"""
    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return bool(self.token) and now < self.expires_at


class ShipmentItem(BaseModel):
    """One line of a shipment"""
    name: str
    sku: str
    units: int = Field(..., ge=1)
    selling_price: Decimal
    product_id: str


class ShipmentRequest(BaseModel):
    """Order data denormalized for the shipping provider"""
    order_id: str
    order_date: datetime
    customer_name: str
    address: str
    address_2: str = ""
    city: str
    state: str
    pincode: str
    email: str = ""
    phone: str
    items: List[ShipmentItem]
    payment_method: ShipmentPaymentMethod
    sub_total: Decimal

    # The storefront does not measure parcels; provider defaults apply
    length: float = 10
    breadth: float = 10
    height: float = 10
    weight: float = 0.5


class ServiceabilityOptions(BaseModel):
    """Optional parameters for a serviceability check"""
    pickup_postcode: Optional[str] = None
    cod: int = Field(default=1, ge=0, le=1)
    weight: float = Field(default=0.5, gt=0)
    length: float = Field(default=15, gt=0)
    breadth: float = Field(default=10, gt=0)
    height: float = Field(default=5, gt=0)
    declared_value: float = Field(default=50, ge=0)


class CourierOption(BaseModel):
    """Courier offered for a destination"""
    courier_name: str
    estimated_delivery_days: Optional[int] = None
    etd: Optional[str] = None
    rate: Optional[Decimal] = None


class ServiceabilityResponse(BaseModel):
    """Serviceability answer for a destination pincode"""
    pincode: str
    serviceable: bool
    couriers: List[CourierOption] = Field(default_factory=list)
    fastest: Optional[CourierOption] = None
    message: str
