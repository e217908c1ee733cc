"""
Payment Service Business Logic

Gateway order creation and checkout callback verification.
"""

import logging
import time
from typing import Callable, Optional

from .models import (
    GatewayOrderCreateRequest, GatewayOrderResponse,
    PaymentVerifyRequest, PaymentVerifyResponse
)
from .protocols import OrderClientProtocol, PaymentGatewayProtocol
from .signature import verify_payment_signature

logger = logging.getLogger(__name__)


class PaymentService:
    """Payment gateway orchestration"""

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        key_secret: Optional[str],
        order_client: Optional[OrderClientProtocol] = None,
        default_currency: str = "INR",
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            gateway: Payment gateway client
            key_secret: Shared secret the gateway signs callbacks with
            order_client: Order service client, notified after a verified payment
            default_currency: Currency when the caller does not pass one
            clock: Epoch seconds, used for default receipts
        """
        self.gateway = gateway
        self.key_secret = key_secret
        self.order_client = order_client
        self.default_currency = default_currency
        self._clock = clock

        if not key_secret:
            logger.warning("Payment key secret not configured - every verification will fail")

        logger.info("PaymentService initialized")

    async def create_gateway_order(self, request: GatewayOrderCreateRequest) -> GatewayOrderResponse:
        """
        Create a gateway order for the checkout widget

        Raises:
            GatewayError: gateway refused or unreachable
        """
        currency = request.currency or self.default_currency
        receipt = request.receipt or f"receipt_{int(self._clock() * 1000)}"

        order = await self.gateway.create_order(request.amount, currency, receipt, request.notes)
        return GatewayOrderResponse(success=True, message="Razorpay order created", data=order)

    async def verify_payment(self, request: PaymentVerifyRequest) -> PaymentVerifyResponse:
        """
        Check the callback signature and report a verified payment

        The order service update is best-effort: a verified payment stays
        verified even when the matching order could not be updated.
        """
        valid = verify_payment_signature(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
            self.key_secret or "",
        )
        if not valid:
            logger.warning(f"Payment signature mismatch for gateway order {request.razorpay_order_id}")
            return PaymentVerifyResponse(success=False, message="Payment verification failed")

        logger.info(f"Payment verified: {request.razorpay_payment_id} for {request.razorpay_order_id}")

        order_updated = False
        if self.order_client:
            order = await self.order_client.confirm_payment(
                request.razorpay_order_id, request.razorpay_payment_id
            )
            order_updated = order is not None

        return PaymentVerifyResponse(
            success=True,
            message="Payment verified successfully",
            order_updated=order_updated,
        )
