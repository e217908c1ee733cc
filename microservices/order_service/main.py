"""
Order Microservice

Responsibilities:
- Order placement with server-side pricing
- Shipping provider handoff and shipment tracking
- Delivery and cancellation state
- Pincode serviceability checks
"""

from fastapi import FastAPI, HTTPException, Depends, status, Query, Path
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone

from core.config import get_settings
from core.errors import GatewayError, register_error_handlers
from core.internal_service_auth import require_internal_service
from core.logger import setup_service_logger
from core.postgres_client import get_postgres_client
from microservices.fulfillment_service.factory import create_fulfillment_provider
from microservices.fulfillment_service.models import ServiceabilityOptions, ServiceabilityResponse
from .clients import AccountClient
from .factory import create_order_service
from .models import (
    OrderCreateRequest, OrderResponse, OrderListResponse, Order,
    PaymentConfirmRequest, PaymentStatusUpdateRequest, ServiceabilityCheckRequest,
    ShipmentEnvelope
)
from .order_service import OrderService

SERVICE_NAME = "order_service"

settings = get_settings()
logger = setup_service_logger(SERVICE_NAME)


class OrderMicroservice:
    """Order microservice core class"""

    def __init__(self):
        self.order_service: Optional[OrderService] = None
        self.db = None
        self.fulfillment_provider = None
        self.account_client = None

    async def initialize(self):
        """Initialize the microservice"""
        try:
            self.db = await get_postgres_client(SERVICE_NAME)
            self.fulfillment_provider = create_fulfillment_provider()
            self.account_client = AccountClient()
            self.order_service = create_order_service(
                self.db,
                fulfillment_provider=self.fulfillment_provider,
                account_client=self.account_client,
            )
            logger.info("Order microservice initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize order microservice: {e}")
            raise

    async def shutdown(self):
        """Shutdown the microservice"""
        try:
            if self.fulfillment_provider:
                await self.fulfillment_provider.close()
            if self.account_client:
                await self.account_client.close()
            if self.db:
                await self.db.close()
            logger.info("Order microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Global microservice instance
order_microservice = OrderMicroservice()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    await order_microservice.initialize()
    yield
    await order_microservice.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Order Service",
    description="Storefront order placement and fulfillment microservice",
    version="1.0.0",
    lifespan=lifespan
)
register_error_handlers(app)


# Dependency injection
def get_order_service() -> OrderService:
    """Get order service instance"""
    if not order_microservice.order_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Order service not initialized"
        )
    return order_microservice.order_service


# Health check endpoints
@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "port": settings.services.order_service_port,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_database():
    """Database client of the running service, None before startup"""
    return order_microservice.db


@app.get("/health/detailed")
async def detailed_health_check(db=Depends(get_database)):
    """Detailed health check with database connectivity"""
    database_connected = db is not None and await db.health_check()
    return {
        "status": "healthy" if database_connected else "degraded",
        "service": SERVICE_NAME,
        "database_connected": database_connected,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Core order management endpoints

@app.post("/api/v1/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreateRequest,
    order_service: OrderService = Depends(get_order_service)
):
    """Create a new order"""
    return await order_service.create_order(request)


@app.get("/api/v1/orders", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    order_service: OrderService = Depends(get_order_service)
):
    """List orders with pagination"""
    return await order_service.list_orders(page, page_size)


@app.post("/api/v1/orders/payments/confirm", response_model=Order)
async def confirm_payment(
    request: PaymentConfirmRequest,
    caller: str = Depends(require_internal_service),
    order_service: OrderService = Depends(get_order_service)
):
    """Record a verified gateway payment on its order (internal only)"""
    logger.info(f"Payment confirmation from {caller} for {request.payment_intent_id}")
    return await order_service.confirm_payment(request)


@app.get("/api/v1/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Get order details"""
    return await order_service.get_order(order_id)


@app.put("/api/v1/orders/{order_id}/deliver", response_model=Order)
async def mark_delivered(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Mark an order delivered"""
    return await order_service.mark_delivered(order_id)


@app.put("/api/v1/orders/{order_id}/cancel", response_model=Order)
async def cancel_order(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Cancel an order"""
    return await order_service.cancel_order(order_id)


@app.put("/api/v1/orders/{order_id}/payment", response_model=Order)
async def update_payment_status(
    request: PaymentStatusUpdateRequest,
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Set the payment status of an order"""
    return await order_service.update_payment_status(
        order_id, request.payment_status, request.payment_confirmation_id
    )


@app.post("/api/v1/orders/{order_id}/fulfillment/retry", response_model=OrderResponse)
async def retry_fulfillment(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Re-attempt the shipping provider handoff"""
    return await order_service.retry_fulfillment(order_id)


@app.delete("/api/v1/orders/{order_id}")
async def delete_order(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Delete an order"""
    await order_service.delete_order(order_id)
    return {"success": True, "message": f"Order {order_id} deleted"}


@app.get("/api/v1/users/{user_id}/orders")
async def get_user_orders(
    user_id: str = Path(..., description="User ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Get orders for a specific user"""
    orders = await order_service.get_user_orders(user_id)
    return {
        "orders": orders,
        "count": len(orders),
        "user_id": user_id
    }


# Shipment endpoints

@app.get("/api/v1/shipments/{shipment_id}/track", response_model=ShipmentEnvelope)
async def track_shipment(
    shipment_id: str = Path(..., description="Provider shipment ID"),
    order_service: OrderService = Depends(get_order_service)
):
    """Live tracking data from the shipping provider"""
    result = await order_service.track_shipment(shipment_id)
    if not result.success:
        raise GatewayError(result.message, details=result.error, rejected=result.rejected)
    return ShipmentEnvelope(success=True, data=result.data, message=result.message)


@app.get("/api/v1/shipments", response_model=ShipmentEnvelope)
async def list_shipments(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    order_service: OrderService = Depends(get_order_service)
):
    """Orders known to the shipping provider"""
    result = await order_service.list_shipments(page, page_size)
    if not result.success:
        raise GatewayError(result.message, details=result.error, rejected=result.rejected)
    return ShipmentEnvelope(success=True, data=result.data, message=result.message)


@app.post("/api/v1/shipments/serviceability", response_model=ServiceabilityResponse)
async def check_serviceability(
    request: ServiceabilityCheckRequest,
    order_service: OrderService = Depends(get_order_service)
):
    """Whether a destination pincode can be delivered to"""
    overrides = request.model_dump(exclude={"pincode"}, exclude_none=True)
    options = ServiceabilityOptions(**overrides) if overrides else None
    return await order_service.check_serviceability(request.pincode, options)


if __name__ == "__main__":
    uvicorn.run(
        "microservices.order_service.main:app",
        host=settings.default_host,
        port=settings.services.order_service_port,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower()
    )
