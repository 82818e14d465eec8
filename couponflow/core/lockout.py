"""In-memory verification lockout keyed by coupon code and branch.

The lockout is advisory: it lives in the memory of one process, is not shared
between workers or devices and is lost on restart. The durable attempt counter
on the coupon row is the record of failed attempts.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock


@dataclass(frozen=True)
class LockoutStatus:
    locked: bool
    remaining_seconds: int = 0


class LockoutPolicy:
    """Temporary per-(coupon, branch) lock after repeated password failures."""

    def __init__(self, duration_seconds: int = 600):
        self.duration_seconds = duration_seconds
        self._expires_at: dict[tuple[str, str], datetime] = {}
        self._lock = Lock()

    def check(self, code: str, branch: str, now: datetime | None = None) -> LockoutStatus:
        """Return whether ``(code, branch)`` is locked and for how many more seconds.

        Expired entries are removed as a side effect.
        """
        now = now or datetime.now(UTC)
        key = (code, branch)

        with self._lock:
            expires_at = self._expires_at.get(key)
            if expires_at is None:
                return LockoutStatus(locked=False)
            if now >= expires_at:
                del self._expires_at[key]
                return LockoutStatus(locked=False)

        remaining = math.ceil((expires_at - now).total_seconds())
        return LockoutStatus(locked=True, remaining_seconds=remaining)

    def lock(self, code: str, branch: str, now: datetime | None = None) -> datetime:
        """Lock ``(code, branch)`` for ``duration_seconds`` from ``now``."""
        now = now or datetime.now(UTC)
        expires_at = now + timedelta(seconds=self.duration_seconds)
        with self._lock:
            self._expires_at[(code, branch)] = expires_at
        return expires_at

    def reset(self) -> None:
        """Clear all tracked state (useful for testing)."""
        with self._lock:
            self._expires_at.clear()
