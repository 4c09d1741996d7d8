"""In-memory registry of one-time login codes, keyed by normalized phone."""

import secrets
import threading
from datetime import datetime, timedelta


def make_code() -> str:
    """Uniformly random 6-digit code (100000-999999)."""
    return str(100000 + secrets.randbelow(900000))


class OtpRegistry:
    """Process-lifetime store of at most one live code per phone."""

    def __init__(self):
        self._codes = {}  # phone -> (code, expires_at)
        self._lock = threading.Lock()

    def issue(self, phone: str, ttl_minutes: int = 10, now: datetime = None) -> str:
        """Create a code for ``phone``, replacing any unconsumed one."""
        now = now or datetime.utcnow()
        code = make_code()
        with self._lock:
            self._codes[phone] = (code, now + timedelta(minutes=ttl_minutes))
        return code

    def check(self, phone: str, code: str, now: datetime = None) -> bool:
        """True if ``code`` is the live code for ``phone``; the code is consumed on success."""
        now = now or datetime.utcnow()
        with self._lock:
            entry = self._codes.get(phone)
            if entry is None:
                return False
            stored, expires_at = entry
            if now >= expires_at:
                del self._codes[phone]
                return False
            if not secrets.compare_digest(stored, str(code)):
                return False
            del self._codes[phone]
            return True

    def purge_expired(self, now: datetime = None) -> int:
        now = now or datetime.utcnow()
        with self._lock:
            expired = [phone for phone, (_, expires_at) in self._codes.items() if now >= expires_at]
            for phone in expired:
                del self._codes[phone]
        return len(expired)

    def clear(self):
        with self._lock:
            self._codes.clear()

    def __contains__(self, phone):
        with self._lock:
            return phone in self._codes


# Global instance
otp_registry = OtpRegistry()
