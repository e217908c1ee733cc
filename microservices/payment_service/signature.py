"""
Payment callback signature check

The gateway signs "<gateway order id>|<payment id>" with the shared key
secret (HMAC-SHA256, hex). Both sides must build the signed string the
same way.
"""

import hashlib
import hmac


def expected_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of order_id|payment_id"""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """
    Check a payment callback signature.

    Comparison is constant-time. Missing inputs never verify.
    """
    if not (order_id and payment_id and signature and secret):
        return False
    expected = expected_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.strip().lower().encode("utf-8"))
