"""Thread-safe sliding-window rate limiter keyed by caller identity."""

import asyncio
import threading
from collections import deque
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from coupon_lookup.core.config import Settings
from coupon_lookup.core.logger import async_log_with_context, get_logger
from coupon_lookup.core.models import RateLimitDecision


logger = get_logger(__name__)

DEFAULT_QUOTA = 5
DEFAULT_WINDOW = timedelta(minutes=10)
UNKNOWN_CLIENT = "unknown"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


def client_identity(
    forwarded_for: str | None, user_agent: str | None
) -> str:
    """Build a caller identity from proxy headers.

    Uses the first address in ``X-Forwarded-For`` plus the user agent so
    clients sharing a NAT address are told apart by browser.
    """
    address = UNKNOWN_CLIENT
    if forwarded_for:
        address = forwarded_for.split(",")[0].strip() or UNKNOWN_CLIENT
    return f"{address}:{user_agent or UNKNOWN_CLIENT}"


class SlidingWindowRateLimiter:
    """Counts each caller's requests within a trailing time window.

    A caller with no counted requests is idle. Expired timestamps are
    evicted lazily when the caller is next seen, or by ``cleanup``. Denial
    is a normal ``False`` result, never an exception.
    """

    def __init__(
        self,
        quota: int = DEFAULT_QUOTA,
        window: timedelta = DEFAULT_WINDOW,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize rate limiter.

        Args:
            quota: Maximum requests per caller within the window.
            window: Length of the trailing window.
            clock: Source of the current time.
        """
        if quota <= 0:
            raise ValueError("quota must be positive")
        if window <= timedelta(0):
            raise ValueError("window must be positive")

        self._quota = quota
        self._window = window
        self._clock = clock
        self._history: dict[str, deque[datetime]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Clock = utc_now
    ) -> "SlidingWindowRateLimiter":
        """Build a limiter from application settings."""
        return cls(
            quota=settings.rate_limit_requests,
            window=settings.rate_limit_window,
            clock=clock,
        )

    @property
    def quota(self) -> int:
        return self._quota

    @property
    def window(self) -> timedelta:
        return self._window

    def _evict(self, identity: str, now: datetime) -> deque[datetime]:
        """Drop expired timestamps for one caller; lock must be held."""
        timestamps = self._history.get(identity)
        if timestamps is None:
            return deque()
        while timestamps and now - timestamps[0] >= self._window:
            timestamps.popleft()
        return timestamps

    def _decision(
        self,
        allowed: bool,
        timestamps: deque[datetime],
        now: datetime,
        recorded_at: datetime | None = None,
    ) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=allowed,
            remaining=max(0, self._quota - len(timestamps)),
            reset_at=timestamps[0] + self._window if timestamps else now,
            limit=self._quota,
            recorded_at=recorded_at,
        )

    def check(self, identity: str) -> RateLimitDecision:
        """Record a request if the caller is under quota and report status.

        Args:
            identity: Caller identity, e.g. from ``client_identity``.

        Returns:
            The decision with the quota left after this request.
        """
        with self._lock:
            now = self._clock()
            timestamps = self._evict(identity, now)
            allowed = len(timestamps) < self._quota
            if allowed:
                timestamps.append(now)
                self._history[identity] = timestamps
            return self._decision(
                allowed, timestamps, now, recorded_at=now if allowed else None
            )

    def release(self, identity: str, recorded_at: datetime) -> bool:
        """Give back a request recorded by ``check``.

        Used when the work the request paid for did not happen. Returns
        False if the timestamp was already evicted or released.
        """
        with self._lock:
            timestamps = self._history.get(identity)
            if not timestamps or recorded_at not in timestamps:
                return False
            timestamps.remove(recorded_at)
            return True

    def allow(self, identity: str) -> bool:
        """Return True and record the request if the caller is under quota."""
        return self.check(identity).allowed

    def peek(self, identity: str) -> RateLimitDecision:
        """Report the caller's status without recording a request."""
        with self._lock:
            now = self._clock()
            timestamps = self._evict(identity, now)
            return self._decision(
                len(timestamps) < self._quota, timestamps, now
            )

    def remaining(self, identity: str) -> int:
        """Return how many more requests the caller may make right now."""
        return self.peek(identity).remaining

    def reset_at(self, identity: str) -> datetime:
        """Return when the caller's oldest counted request expires.

        An idle caller gets the current time, meaning requests are allowed
        now.
        """
        return self.peek(identity).reset_at

    def cleanup(self) -> int:
        """Forget callers with no requests inside the window.

        Returns:
            Number of caller histories removed.
        """
        with self._lock:
            now = self._clock()
            idle = [
                identity
                for identity in list(self._history)
                if not self._evict(identity, now)
            ]
            for identity in idle:
                del self._history[identity]
        if idle:
            logger.debug("Removed %d idle rate limit entries", len(idle))
        return len(idle)

    def tracked_identities(self) -> int:
        """Return how many callers currently have a stored history."""
        with self._lock:
            return len(self._history)


@async_log_with_context(operation="rate_limit_cleanup")
async def run_periodic_cleanup(
    limiter: SlidingWindowRateLimiter,
    interval_seconds: float,
    stop_event: asyncio.Event,
) -> None:
    """Sweep idle limiter entries every interval until stop_event is set."""
    while not stop_event.is_set():
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
        except TimeoutError:
            limiter.cleanup()
