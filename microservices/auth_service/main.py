"""
Auth Microservice

Responsibilities:
- Phone OTP signup and login
- Session token issuance
- User profile and block management
"""

from fastapi import FastAPI, HTTPException, Depends, status, Query, Path
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone

from core.config import get_settings
from core.errors import register_error_handlers
from core.logger import setup_service_logger
from core.postgres_client import get_postgres_client
from .auth_service import PhoneAuthService
from .clients import SMSClient
from .factory import create_auth_service
from .models import (
    AuthResponse, BlockUserRequest, CodeDispatchResponse, PhoneRequest,
    SignupVerifyRequest, User, UserListResponse, UserProfileUpdateRequest,
    VerifyCodeRequest
)
from .otp_store import InMemoryOTPStore

SERVICE_NAME = "auth_service"

settings = get_settings()
logger = setup_service_logger(SERVICE_NAME)


class AuthMicroservice:
    """Auth microservice core class"""

    def __init__(self):
        self.auth_service: Optional[PhoneAuthService] = None
        self.db = None
        self.sms_client = None

    async def initialize(self):
        """Initialize the microservice"""
        try:
            self.db = await get_postgres_client(SERVICE_NAME)
            self.sms_client = SMSClient()
            otp_store = InMemoryOTPStore(ttl_seconds=settings.auth.otp_ttl_seconds)
            self.auth_service = create_auth_service(self.db, otp_store, self.sms_client)
            logger.info("Auth microservice initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize auth microservice: {e}")
            raise

    async def shutdown(self):
        """Shutdown the microservice"""
        try:
            if self.sms_client:
                await self.sms_client.close()
            if self.db:
                await self.db.close()
            logger.info("Auth microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Global microservice instance
auth_microservice = AuthMicroservice()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    await auth_microservice.initialize()
    yield
    await auth_microservice.shutdown()


app = FastAPI(
    title="Auth Service",
    description="Phone OTP authentication and user management",
    version="1.0.0",
    lifespan=lifespan
)
register_error_handlers(app)


def get_auth_service() -> PhoneAuthService:
    """Get auth service instance"""
    if not auth_microservice.auth_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Auth service not initialized"
        )
    return auth_microservice.auth_service


@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "port": settings.services.auth_service_port,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_database():
    """Database client of the running service, None before startup"""
    return auth_microservice.db


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


# ============================================
# Signup / Login
# ============================================

@app.post("/api/v1/auth/signup/request", response_model=CodeDispatchResponse)
async def request_signup_code(
    request: PhoneRequest,
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Send a signup verification code"""
    return await auth_service.request_signup_code(request.phone)


@app.post("/api/v1/auth/signup/verify", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def verify_signup_code(
    request: SignupVerifyRequest,
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Verify the signup code and create the user"""
    return await auth_service.verify_signup_code(request)


@app.post("/api/v1/auth/login/request", response_model=CodeDispatchResponse)
async def request_login_code(
    request: PhoneRequest,
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Send a login verification code"""
    return await auth_service.request_login_code(request.phone)


@app.post("/api/v1/auth/login/verify", response_model=AuthResponse)
async def verify_login_code(
    request: VerifyCodeRequest,
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Verify the login code"""
    return await auth_service.verify_login_code(request)


# ============================================
# Users
# ============================================

@app.get("/api/v1/users", response_model=UserListResponse)
async def list_users(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """List users"""
    users = await auth_service.list_users(limit=limit, offset=offset)
    return UserListResponse(users=users, count=len(users))


@app.get("/api/v1/users/{user_id}", response_model=User)
async def get_user(
    user_id: str = Path(..., description="User ID"),
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Get a user"""
    return await auth_service.get_user(user_id)


@app.patch("/api/v1/users/{user_id}", response_model=User)
async def update_profile(
    request: UserProfileUpdateRequest,
    user_id: str = Path(..., description="User ID"),
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Update profile fields"""
    return await auth_service.update_profile(user_id, request)


@app.put("/api/v1/users/{user_id}/block", response_model=User)
async def set_blocked(
    request: BlockUserRequest,
    user_id: str = Path(..., description="User ID"),
    auth_service: PhoneAuthService = Depends(get_auth_service)
):
    """Block or unblock a user"""
    return await auth_service.set_blocked(user_id, request.blocked)


if __name__ == "__main__":
    uvicorn.run(
        "microservices.auth_service.main:app",
        host=settings.default_host,
        port=settings.services.auth_service_port,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower()
    )
