"""
Payment Service Data Models

Gateway order creation and payment callback verification.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class GatewayOrderCreateRequest(BaseModel):
    """Create a gateway order before checkout"""
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit (paise)")
    currency: Optional[str] = Field(None, description="Defaults to the configured currency")
    receipt: Optional[str] = Field(None, description="Defaults to receipt_<epoch ms>")
    notes: Optional[Dict[str, str]] = None


class GatewayOrderResponse(BaseModel):
    """Gateway order as returned by the gateway"""
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None


class PaymentVerifyRequest(BaseModel):
    """Checkout callback fields"""
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class PaymentVerifyResponse(BaseModel):
    """Verification outcome"""
    success: bool
    message: str
    order_updated: bool = False
