"""
OTP Store

In-process verification code ledger with per-entry expiry. Created once at
service start and injected into PhoneAuthService; codes do not survive a
restart.
"""

import threading
import time
from typing import Callable, Dict, Optional, Tuple


DEFAULT_TTL_SECONDS = 300


class InMemoryOTPStore:
    """Key/code map with a TTL, safe for concurrent access"""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, code: str) -> None:
        """Store a code; replaces any previous code under the key"""
        with self._lock:
            self._entries[key] = (code, self._clock() + self.ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        """Live code under key, or None if never set or expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            code, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return code

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
