# repo_dashboard/adapters/rate_limit.py
"""
Rate limit bookkeeping for the GitHub REST API.

The tracker is refreshed from the ``x-ratelimit-*`` headers of every
response and consulted before every request. It never sleeps: when the
known quota is exhausted and the reset time is still ahead it refuses the
call, otherwise it lets the call through and lets the response correct it.
"""

import logging
import math
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from repo_dashboard.adapters.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RateLimitInfo:
    """Immutable rate limit information."""
    remaining: int
    reset_at: datetime
    limit: int

    def to_dict(self) -> dict:
        return {
            'remaining': self.remaining,
            'limit': self.limit,
            'resetsAt': self.reset_at.isoformat()
        }


class RateLimitTracker:
    """Process-wide rate limit state, shared by every request the adapter makes."""

    DEFAULT_LIMIT = 5000
    LOW_REMAINING_THRESHOLD = 50

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        # Nothing is known at startup, so assume a full quota
        self._info = RateLimitInfo(
            remaining=self.DEFAULT_LIMIT,
            reset_at=clock() + timedelta(hours=1),
            limit=self.DEFAULT_LIMIT
        )

    def snapshot(self) -> RateLimitInfo:
        with self._lock:
            return self._info

    def check(self) -> None:
        """Raise RateLimitExceeded if a request now would certainly be rejected."""
        info = self.snapshot()
        if info.remaining > 0:
            return

        wait_seconds = (info.reset_at - self._clock()).total_seconds()
        if wait_seconds > 0:
            retry_after = math.ceil(wait_seconds)
            logger.warning(f"Refusing request: rate limit exhausted for another {retry_after}s")
            raise RateLimitExceeded(retry_after)

    def update_from_headers(self, headers: Mapping[str, str]) -> RateLimitInfo:
        """Apply whichever rate limit headers are present; absent ones keep prior values."""
        remaining = _parse_int_header(headers, 'x-ratelimit-remaining')
        reset = _parse_int_header(headers, 'x-ratelimit-reset')
        limit = _parse_int_header(headers, 'x-ratelimit-limit')

        changes = {}
        if remaining is not None:
            changes['remaining'] = remaining
        if reset is not None:
            changes['reset_at'] = datetime.fromtimestamp(reset, tz=timezone.utc)
        if limit is not None:
            changes['limit'] = limit

        with self._lock:
            if changes:
                self._info = replace(self._info, **changes)
            info = self._info

        if remaining is not None and remaining < self.LOW_REMAINING_THRESHOLD:
            logger.warning(f"Rate limit low: {info.remaining}/{info.limit} remaining")
        return info


def _parse_int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = headers.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring malformed {name} header: {value!r}")
        return None
