"""
Order Service Business Logic

Order creation, pricing and the best-effort handoff to the shipping
provider, plus delivery/cancellation state changes and shipment queries.
"""

from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, timezone
from decimal import Decimal
import logging

from core.errors import ConflictError, NotFoundError, ValidationError
from microservices.fulfillment_service.fulfillment_service import FulfillmentService
from microservices.fulfillment_service.models import (
    ShipmentItem, ShipmentPaymentMethod, ShipmentRequest, ShipmentResult,
    ServiceabilityOptions, ServiceabilityResponse
)
from .models import (
    Order, OrderCreateRequest, OrderResponse, OrderListResponse,
    PaymentMethod, PaymentStatus, FulfillmentStatus, PaymentConfirmRequest
)
from .pricing import PricingEngine
from .protocols import (
    OrderRepositoryProtocol, CatalogRepositoryProtocol,
    FulfillmentProviderProtocol, AccountClientProtocol
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order management business logic service

    Validation and pricing happen before anything is written. Once the order
    is persisted, the shipping provider handoff is best-effort: a provider
    failure is logged and recorded on the order but never fails creation.
    """

    def __init__(
        self,
        repository: OrderRepositoryProtocol,
        catalog: CatalogRepositoryProtocol,
        fulfillment_provider: FulfillmentProviderProtocol,
        account_client: Optional[AccountClientProtocol] = None
    ):
        """
        Initialize Order Service

        Args:
            repository: Order repository
            catalog: Catalog price lookups
            fulfillment_provider: Shipping provider client
            account_client: Auth service user lookup (optional, used for billing email)
        """
        self.order_repo = repository
        self.pricing = PricingEngine(catalog)
        self.fulfillment = fulfillment_provider
        self.fulfillment_service = FulfillmentService(fulfillment_provider)
        self.account_client = account_client

        logger.info("OrderService initialized")

    # Order Lifecycle Operations

    async def create_order(self, request: OrderCreateRequest) -> OrderResponse:
        """
        Create a new order

        Raises:
            ValidationError: user, products or shipping address missing
            NotFoundError: a referenced product does not exist
        """
        self._validate_order_create_request(request)

        items, total = await self.pricing.price_items(request.products)

        order = await self.order_repo.create_order({
            "user_id": request.user_id,
            "items": [item.model_dump(mode="json") for item in items],
            "shipping_address": request.shipping_address.model_dump(mode="json"),
            "payment_method": request.payment_method,
            "payment_status": request.payment_status or PaymentStatus.PENDING,
            "total_amount": total,
            "donation_amount": request.donation_amount or Decimal("0"),
            "fulfillment_status": FulfillmentStatus.PENDING,
            "payment_intent_id": request.payment_intent_id,
            "payment_confirmation_id": request.payment_confirmation_id,
        })
        logger.info(f"Order created: {order.order_id} for user {order.user_id}, total {order.total_amount}")

        order, fulfillment_message = await self._hand_off_to_fulfillment(order)

        return OrderResponse(
            success=True,
            order=order,
            message="Order created successfully",
            fulfillment_message=fulfillment_message
        )

    async def retry_fulfillment(self, order_id: str) -> OrderResponse:
        """Re-attempt the shipping provider handoff for an unregistered order"""
        order = await self.get_order(order_id)

        if order.fulfillment_status == FulfillmentStatus.REGISTERED:
            return OrderResponse(
                success=True,
                order=order,
                message="Order already registered with the shipping provider"
            )
        if order.is_cancelled:
            raise ConflictError(f"Order {order_id} is cancelled")

        order, fulfillment_message = await self._hand_off_to_fulfillment(order)
        registered = order.fulfillment_status == FulfillmentStatus.REGISTERED
        return OrderResponse(
            success=registered,
            order=order,
            message="Fulfillment registered" if registered else "Fulfillment still pending",
            fulfillment_message=fulfillment_message
        )

    async def mark_delivered(self, order_id: str) -> Order:
        """Set is_delivered and delivered_at unless the order is cancelled"""
        updated = await self.order_repo.update_order(order_id, {
            "is_delivered": True,
            "delivered_at": datetime.now(timezone.utc),
        }, unless="is_cancelled")
        if not updated:
            await self.get_order(order_id)
            raise ConflictError(f"Order {order_id} is cancelled and cannot be delivered")

        logger.info(f"Order delivered: {order_id}")
        return updated

    async def cancel_order(self, order_id: str) -> Order:
        """Set is_cancelled and cancelled_at unless the order is delivered"""
        updated = await self.order_repo.update_order(order_id, {
            "is_cancelled": True,
            "cancelled_at": datetime.now(timezone.utc),
        }, unless="is_delivered")
        if not updated:
            await self.get_order(order_id)
            raise ConflictError(f"Order {order_id} is delivered and cannot be cancelled")

        logger.info(f"Order cancelled: {order_id}")
        return updated

    async def update_payment_status(
        self,
        order_id: str,
        payment_status: PaymentStatus,
        payment_confirmation_id: Optional[str] = None
    ) -> Order:
        """Set payment_status, and the gateway payment id when given"""
        await self.get_order(order_id)

        fields: Dict[str, Any] = {"payment_status": payment_status}
        if payment_confirmation_id:
            fields["payment_confirmation_id"] = payment_confirmation_id

        updated = await self.order_repo.update_order(order_id, fields)
        if not updated:
            raise NotFoundError(f"Order not found: {order_id}")

        logger.info(f"Order {order_id} payment status -> {payment_status.value}")
        return updated

    async def confirm_payment(self, request: PaymentConfirmRequest) -> Order:
        """Record the gateway outcome on the order created for a gateway order id"""
        order = await self.order_repo.get_order_by_payment_intent(request.payment_intent_id)
        if not order:
            raise NotFoundError(f"No order for payment intent: {request.payment_intent_id}")

        return await self.update_payment_status(
            order.order_id, request.payment_status, request.payment_confirmation_id
        )

    async def delete_order(self, order_id: str) -> None:
        if not await self.order_repo.delete_order(order_id):
            raise NotFoundError(f"Order not found: {order_id}")
        logger.info(f"Order deleted: {order_id}")

    # Order Query Operations

    async def get_order(self, order_id: str) -> Order:
        """Get order by ID"""
        order = await self.order_repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order not found: {order_id}")
        return order

    async def list_orders(self, page: int = 1, page_size: int = 50) -> OrderListResponse:
        """List orders with pagination"""
        orders = await self.order_repo.list_orders(limit=page_size, offset=(page - 1) * page_size)
        return OrderListResponse(
            orders=orders,
            count=len(orders),
            page=page,
            page_size=page_size,
            has_next=len(orders) == page_size
        )

    async def get_user_orders(self, user_id: str) -> List[Order]:
        """Get orders for a specific user"""
        return await self.order_repo.get_user_orders(user_id)

    # Shipment Queries

    async def track_shipment(self, shipment_id: str) -> ShipmentResult:
        """Tracking data from the provider, success or failure envelope unchanged"""
        if not shipment_id or not shipment_id.strip():
            raise ValidationError("shipment_id is required")
        return await self.fulfillment.track_shipment(shipment_id.strip())

    async def list_shipments(self, page: int = 1, page_size: int = 10) -> ShipmentResult:
        """Provider order listing, success or failure envelope unchanged"""
        if page < 1 or page_size < 1:
            raise ValidationError("page and page_size must be positive")
        return await self.fulfillment.list_shipments(page, page_size)

    async def check_serviceability(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ServiceabilityResponse:
        return await self.fulfillment_service.check_pincode(pincode, options)

    # Fulfillment Handoff

    async def _hand_off_to_fulfillment(self, order: Order) -> Tuple[Order, str]:
        """
        Register a persisted order with the shipping provider

        Returns the order as stored after the attempt and the provider message.
        Never raises.
        """
        try:
            shipment_request = await self._build_shipment_request(order)
            result = await self.fulfillment.create_shipment(shipment_request)
        except Exception as e:
            logger.error(f"Fulfillment handoff for order {order.order_id} raised: {e}")
            result = ShipmentResult.fail(str(e), "Failed to create shipment")

        data = result.data if isinstance(result.data, dict) else {}
        if result.success and not data.get("order_id"):
            # HTTP 200 without a provider order id is a rejection
            logger.warning(f"Shipping provider returned no order id for {order.order_id}: {result.data}")
            result = ShipmentResult.fail(result.data, "Shipping provider did not accept the order")

        if not result.success:
            logger.warning(
                f"Fulfillment handoff failed for order {order.order_id}: "
                f"{result.message} ({result.error})"
            )
            stored = await self._save_fulfillment(order, {"fulfillment_status": FulfillmentStatus.FAILED})
            return stored, result.message

        fields = {
            "fulfillment_status": FulfillmentStatus.REGISTERED,
            "shipment_order_id": str(data["order_id"]),
            "shipment_order_date": shipment_request.order_date.strftime("%Y-%m-%d"),
        }
        if data.get("shipment_id"):
            fields["shipment_id"] = str(data["shipment_id"])

        stored = await self._save_fulfillment(order, fields)
        logger.info(f"Order {order.order_id} registered with shipping provider as {fields['shipment_order_id']}")
        return stored, result.message

    async def _save_fulfillment(self, order: Order, fields: Dict[str, Any]) -> Order:
        try:
            updated = await self.order_repo.update_order(order.order_id, fields)
            return updated or order
        except Exception as e:
            logger.error(f"Failed to save fulfillment fields for order {order.order_id}: {e}")
            return order

    async def _build_shipment_request(self, order: Order) -> ShipmentRequest:
        address = order.shipping_address
        email = address.email or await self._lookup_user_email(order.user_id)
        goods_total = sum((item.line_total for item in order.items), Decimal("0"))

        return ShipmentRequest(
            order_id=order.order_id,
            order_date=order.created_at,
            customer_name=address.full_name,
            address=address.address,
            address_2=address.landmark or "",
            city=address.city,
            state=address.state,
            pincode=address.postal_code,
            email=email or "",
            phone=address.phone,
            items=[
                ShipmentItem(
                    name=item.title or item.product_id,
                    sku=item.sku or f"SKU-{item.product_id}",
                    units=item.quantity,
                    selling_price=item.unit_price,
                    product_id=item.product_id,
                )
                for item in order.items
            ],
            payment_method=(
                ShipmentPaymentMethod.COD if order.payment_method == PaymentMethod.COD
                else ShipmentPaymentMethod.PREPAID
            ),
            sub_total=goods_total,
        )

    async def _lookup_user_email(self, user_id: str) -> Optional[str]:
        if not self.account_client:
            return None
        try:
            user = await self.account_client.get_user(user_id)
        except Exception as e:
            logger.warning(f"Failed to look up user {user_id} for billing email: {e}")
            return None
        return (user or {}).get("email")

    # Private Helper Methods

    def _validate_order_create_request(self, request: OrderCreateRequest) -> None:
        """Validate order creation request"""
        if not request.user_id:
            raise ValidationError("user is required")

        if not request.products:
            raise ValidationError("products must be a non-empty list")

        if request.shipping_address is None:
            raise ValidationError("shippingAddress is required")
