"""
Internal Service Authentication

用于微服务间通信的内部认证机制

Peer services attach a shared-secret header pair; endpoints that only other
storefront services may call (e.g. payment confirmation) depend on
require_internal_service.
"""

import hmac
import logging
import os

from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)

# 内部服务认证密钥（从环境变量读取，生产环境必须设置）
INTERNAL_SERVICE_SECRET = os.getenv("INTERNAL_SERVICE_SECRET", "dev-internal-secret-change-in-production")
INTERNAL_SERVICE_HEADER = "X-Internal-Service"
INTERNAL_SERVICE_SECRET_HEADER = "X-Internal-Service-Secret"


class InternalServiceAuth:
    """内部服务认证工具类"""

    @staticmethod
    def get_internal_service_headers() -> dict:
        """
        获取内部服务认证 headers

        Returns:
            Headers identifying the caller as a storefront service
        """
        return {
            INTERNAL_SERVICE_HEADER: "true",
            INTERNAL_SERVICE_SECRET_HEADER: INTERNAL_SERVICE_SECRET
        }

    @staticmethod
    def is_internal_service_request(request: Request) -> bool:
        """
        检查请求是否来自内部服务

        Requires X-Internal-Service: true and the matching shared secret.
        """
        internal_service = request.headers.get(INTERNAL_SERVICE_HEADER)
        secret = request.headers.get(INTERNAL_SERVICE_SECRET_HEADER) or ""

        if internal_service == "true" and hmac.compare_digest(secret, INTERNAL_SERVICE_SECRET):
            logger.debug("Valid internal service request detected")
            return True

        return False


async def require_internal_service(request: Request) -> str:
    """
    Dependency for service-to-service endpoints

    Raises:
        HTTPException: 401 when the internal headers are missing or wrong
    """
    if not InternalServiceAuth.is_internal_service_request(request):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Internal service authentication required"
        )
    return "internal-service"


__all__ = [
    "InternalServiceAuth",
    "require_internal_service",
    "INTERNAL_SERVICE_HEADER",
    "INTERNAL_SERVICE_SECRET_HEADER"
]
