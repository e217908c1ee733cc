"""
Payment Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class PaymentGatewayProtocol(Protocol):
    """Interface for the payment gateway client"""

    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Create a gateway order; raises GatewayError on failure"""
        ...


@runtime_checkable
class OrderClientProtocol(Protocol):
    """Interface for the order service callback"""

    async def confirm_payment(
        self, payment_intent_id: str, payment_confirmation_id: str
    ) -> Optional[Dict[str, Any]]:
        """Mark the matching order paid; None when it could not be done"""
        ...
