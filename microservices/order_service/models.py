"""
Order Service Data Models

Pydantic models for storefront orders, line items and shipping addresses.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    """Payment method enumeration"""
    COD = "cod"
    RAZORPAY = "razorpay"
    STRIPE = "stripe"
    PAYPAL = "paypal"


class PaymentStatus(str, Enum):
    """Payment status enumeration"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class FulfillmentStatus(str, Enum):
    """Shipping provider handoff state"""
    PENDING = "pending"
    REGISTERED = "registered"
    FAILED = "failed"


# Core Order Models

class ShippingAddress(BaseModel):
    """Delivery address captured at checkout"""
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    landmark: Optional[str] = None
    alternate_phone: Optional[str] = None
    email: Optional[str] = None


class OrderItem(BaseModel):
    """Line item with the price captured when the order was placed"""
    product_id: str
    variant_id: str
    size: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    title: Optional[str] = None
    sku: Optional[str] = None
    image: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """Core order model"""
    order_id: str
    user_id: str
    items: List[OrderItem]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    total_amount: Decimal
    donation_amount: Decimal = Decimal("0")

    is_delivered: bool = False
    delivered_at: Optional[datetime] = None
    is_cancelled: bool = False
    cancelled_at: Optional[datetime] = None

    fulfillment_status: FulfillmentStatus = FulfillmentStatus.PENDING
    shipment_order_id: Optional[str] = None
    shipment_order_date: Optional[str] = None
    shipment_id: Optional[str] = None

    payment_intent_id: Optional[str] = None
    payment_confirmation_id: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class Product(BaseModel):
    """Catalog fields the order service reads"""
    product_id: str
    title: str
    amount: Decimal
    discounted_amount: Optional[Decimal] = None
    image: Optional[str] = None

    @property
    def effective_price(self) -> Decimal:
        """Discounted price when set, else the base price"""
        if self.discounted_amount is not None and self.discounted_amount > 0:
            return self.discounted_amount
        return self.amount


# Request Models

class OrderItemRequest(BaseModel):
    """Line item as submitted by the client"""
    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class OrderCreateRequest(BaseModel):
    """Create order request"""
    user_id: Optional[str] = Field(None, description="User placing the order")
    products: Optional[List[OrderItemRequest]] = Field(None, description="Line items")
    shipping_address: Optional[ShippingAddress] = Field(None, description="Delivery address")
    payment_method: PaymentMethod = Field(default=PaymentMethod.COD)
    payment_status: Optional[PaymentStatus] = Field(None, description="Defaults to pending")
    donation_amount: Optional[Decimal] = Field(None, ge=0, description="Optional donation add-on")
    payment_intent_id: Optional[str] = Field(None, description="Gateway order id")
    payment_confirmation_id: Optional[str] = Field(None, description="Gateway payment id")

    @field_validator('user_id')
    @classmethod
    def strip_user_id(cls, v):
        return v.strip() if v else v


class PaymentConfirmRequest(BaseModel):
    """Mark the order matching a gateway order id as paid or failed"""
    payment_intent_id: str
    payment_confirmation_id: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PAID


class PaymentStatusUpdateRequest(BaseModel):
    """Set the payment status of a known order"""
    payment_status: PaymentStatus
    payment_confirmation_id: Optional[str] = None


class ServiceabilityCheckRequest(BaseModel):
    """Pincode serviceability request"""
    pincode: str
    cod: Optional[int] = Field(None, ge=0, le=1)
    weight: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    breadth: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    declared_value: Optional[float] = Field(None, ge=0)


# Response Models

class OrderResponse(BaseModel):
    """Order response model"""
    success: bool
    order: Optional[Order] = None
    message: str
    fulfillment_message: Optional[str] = None


class OrderListResponse(BaseModel):
    """Order list response"""
    orders: List[Order]
    count: int
    page: int
    page_size: int
    has_next: bool


class ShipmentEnvelope(BaseModel):
    """Provider tagged result passed through to the client"""
    success: bool
    data: Optional[Any] = None
    message: str
