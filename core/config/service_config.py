#!/usr/bin/env python3
"""Service configuration for peer storefront services

Each storefront microservice runs as its own FastAPI app. These are the
endpoints they use to reach each other, plus the port each one binds to.
"""
import os
from dataclasses import dataclass

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceConfig:
    """Peer service endpoints"""

    # ===========================================
    # Storefront Services
    # ===========================================
    auth_service_url: str = "http://localhost:8201"
    order_service_url: str = "http://localhost:8210"
    payment_service_url: str = "http://localhost:8207"

    auth_service_port: int = 8201
    order_service_port: int = 8210
    payment_service_port: int = 8207

    # Timeout applied to every peer call (seconds)
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            auth_service_url=os.getenv("AUTH_SERVICE_URL", "http://localhost:8201"),
            order_service_url=os.getenv("ORDER_SERVICE_URL", "http://localhost:8210"),
            payment_service_url=os.getenv("PAYMENT_SERVICE_URL", "http://localhost:8207"),
            auth_service_port=_int(os.getenv("AUTH_SERVICE_PORT", "8201"), 8201),
            order_service_port=_int(os.getenv("ORDER_SERVICE_PORT", "8210"), 8210),
            payment_service_port=_int(os.getenv("PAYMENT_SERVICE_PORT", "8207"), 8207),
            request_timeout=_float(os.getenv("SERVICE_REQUEST_TIMEOUT", "10"), 10.0),
        )
