#!/usr/bin/env python3
"""
Core Module for the storefront microservices

Shared infrastructure used by every service:
    - config/: dataclass configuration loaded from the environment
    - logger.py: service logger setup
    - errors.py: error taxonomy and FastAPI error handlers
    - postgres_client.py: asyncpg pool wrapper
    - service_client_base.py: base HTTP client for peer service calls
    - internal_service_auth.py: shared-secret auth between services
    - jwt_manager.py: session token issuance

USAGE:
    from core.config import get_settings
    from core.errors import NotFoundError

    settings = get_settings()
"""

__version__ = "1.0.0"
