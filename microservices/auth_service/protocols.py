"""
Authentication Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import User


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """
    Interface for User Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def get_user_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone"""
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        ...

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """Create new user"""
        ...

    async def update_user(self, user_id: str, update_data: Dict[str, Any]) -> Optional[User]:
        """Update user fields, returns the updated user or None if missing"""
        ...

    async def list_users(self, limit: int = 100, offset: int = 0) -> List[User]:
        """List users, newest first"""
        ...


@runtime_checkable
class OTPStoreProtocol(Protocol):
    """
    Interface for the verification code ledger.

    Entries expire on their own; get() must treat an expired entry as absent.
    """

    def set(self, key: str, code: str) -> None:
        ...

    def get(self, key: str) -> Optional[str]:
        ...

    def delete(self, key: str) -> None:
        ...


@runtime_checkable
class SMSClientProtocol(Protocol):
    """Interface for the code delivery collaborator"""

    async def dispatch_code(self, phone: str, code: str) -> Dict[str, Any]:
        """Send a code; returns {"delivered": bool}"""
        ...
