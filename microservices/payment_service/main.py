"""
Payment Microservice

Responsibilities:
- Gateway order creation for checkout
- Payment callback signature verification
- Reporting verified payments to the order service
"""

from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import JSONResponse
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone

from core.config import get_settings
from core.errors import register_error_handlers
from core.logger import setup_service_logger
from .factory import create_payment_service
from .models import (
    GatewayOrderCreateRequest, GatewayOrderResponse,
    PaymentVerifyRequest, PaymentVerifyResponse
)
from .payment_service import PaymentService

SERVICE_NAME = "payment_service"

settings = get_settings()
logger = setup_service_logger(SERVICE_NAME)


class PaymentMicroservice:
    """Payment microservice core class"""

    def __init__(self):
        self.payment_service: Optional[PaymentService] = None

    async def initialize(self):
        """Initialize the microservice"""
        try:
            self.payment_service = create_payment_service()
            logger.info("Payment microservice initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize payment microservice: {e}")
            raise

    async def shutdown(self):
        """Shutdown the microservice"""
        try:
            if self.payment_service:
                await self.payment_service.gateway.close()
                if self.payment_service.order_client:
                    await self.payment_service.order_client.close()
            logger.info("Payment microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Global microservice instance
payment_microservice = PaymentMicroservice()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    await payment_microservice.initialize()
    yield
    await payment_microservice.shutdown()


app = FastAPI(
    title="Payment Service",
    description="Payment gateway orders and verification",
    version="1.0.0",
    lifespan=lifespan
)
register_error_handlers(app)


def get_payment_service() -> PaymentService:
    """Get payment service instance"""
    if not payment_microservice.payment_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payment service not initialized"
        )
    return payment_microservice.payment_service


@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "port": settings.services.payment_service_port,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.post("/api/v1/payments/orders", response_model=GatewayOrderResponse)
async def create_gateway_order(
    request: GatewayOrderCreateRequest,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """Create a gateway order"""
    return await payment_service.create_gateway_order(request)


@app.post("/api/v1/payments/verify", response_model=PaymentVerifyResponse)
async def verify_payment(
    request: PaymentVerifyRequest,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """Verify a checkout callback signature"""
    result = await payment_service.verify_payment(request)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump())
    return result


if __name__ == "__main__":
    uvicorn.run(
        "microservices.payment_service.main:app",
        host=settings.default_host,
        port=settings.services.payment_service_port,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower()
    )
