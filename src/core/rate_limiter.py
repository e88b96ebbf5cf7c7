"""Fixed-window rate limiting for API endpoints."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request
from slowapi.util import get_remote_address

from src.core.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


@dataclass
class ClientRateRecord:
    """Request count for one client within its current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check."""

    allowed: bool
    retry_after: int = 0


class RateLimiter:
    """
    Per-client fixed-window request counter.

    Windows are tracked per client and only roll over when that client is
    next seen, so a client idle for several windows starts over with a full
    quota. Records are never evicted.
    """

    def __init__(
        self,
        window_ms: int = 900_000,
        max_requests: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        self.window_ms = window_ms
        self.max_requests = max_requests
        self._clock = clock
        self._records: dict[str, ClientRateRecord] = {}

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000

    def get_record(self, client_id: str) -> ClientRateRecord | None:
        return self._records.get(client_id)

    def admit(self, client_id: str) -> RateLimitDecision:
        """
        Count a request from client_id against its window.

        Args:
            client_id: Client identifier (usually the remote address)

        Returns:
            Decision with retry_after in whole seconds when rejected
        """
        now = self._clock()
        record = self._records.get(client_id)

        if record is None or now > record.reset_at:
            self._records[client_id] = ClientRateRecord(
                count=1,
                reset_at=now + self.window_seconds,
            )
            return RateLimitDecision(allowed=True)

        if record.count >= self.max_requests:
            retry_after = math.ceil(record.reset_at - now)
            return RateLimitDecision(allowed=False, retry_after=retry_after)

        record.count += 1
        return RateLimitDecision(allowed=True)


def get_rate_limit_key(request: Request) -> str:
    """Get the client key for rate limiting (remote address)."""
    return get_remote_address(request) or "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency that rejects clients over their quota."""
    limiter: RateLimiter = request.app.state.rate_limiter
    client_id = get_rate_limit_key(request)

    decision = limiter.admit(client_id)
    if not decision.allowed:
        logger.warning(f"Rate limit exceeded for {client_id}, retry in {decision.retry_after}s")
        raise RateLimitedError(retry_after=decision.retry_after)
