"""
Session tokens for the storefront

Issues the bearer token returned after a successful phone verification and
decodes it for callers that need the claims.
"""

import jwt
import uuid
import secrets
import logging
from typing import Dict, Any, Optional
from datetime import datetime, timedelta, timezone
from enum import Enum
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class TokenScope(Enum):
    """Token scopes, mirrors the user role"""
    USER = "user"
    ADMIN = "admin"


@dataclass
class TokenClaims:
    """Claims carried by a session token"""
    user_id: str
    phone: Optional[str] = None
    scope: TokenScope = TokenScope.USER


class JWTManager:
    """
    Self-issued HS256 session tokens

    Without a configured secret a random one is generated per process, so
    tokens stop verifying after a restart.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        issuer: str = "storefront",
        access_token_expiry: int = 3600,
    ):
        """
        Args:
            secret_key: Signing secret (JWT_SECRET)
            algorithm: Signing algorithm
            issuer: iss claim, checked on decode
            access_token_expiry: Token lifetime in seconds
        """
        if not secret_key:
            logger.warning("JWT_SECRET not configured - using a per-process secret")
        self.secret_key = secret_key or secrets.token_urlsafe(64)
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_token_expiry = access_token_expiry

    def create_access_token(self, claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
        """Sign a token for claims, expiring after access_token_expiry unless overridden"""
        issued_at = datetime.now(tz=timezone.utc)
        expires = issued_at + (expires_delta or timedelta(seconds=self.access_token_expiry))

        payload = {
            "iss": self.issuer,
            "sub": claims.user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires.timestamp()),
            "jti": uuid.uuid4().hex,
            "scope": claims.scope.value,
        }
        if claims.phone:
            payload["phone"] = claims.phone

        logger.debug(f"Issued {claims.scope.value} token for {claims.user_id}")
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode a token

        Returns:
            {"valid": True, "user_id", "phone", "scope", "expires_at", "payload"}
            or {"valid": False, "error"}
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm], issuer=self.issuer)
        except jwt.ExpiredSignatureError:
            return {"valid": False, "error": "Token has expired"}
        except jwt.InvalidIssuerError:
            return {"valid": False, "error": "Invalid token issuer"}
        except jwt.InvalidTokenError as e:
            return {"valid": False, "error": f"Invalid token: {e}"}

        return {
            "valid": True,
            "payload": payload,
            "user_id": payload.get("sub"),
            "phone": payload.get("phone"),
            "scope": payload.get("scope"),
            "expires_at": datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        }
