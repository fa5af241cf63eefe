"""Per-candidate health tracking with exponential back-off for unreachable endpoints."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from chainconn.domain.enums import EndpointHealth

logger = logging.getLogger(__name__)


@dataclass
class EndpointStatus:
    health: EndpointHealth = EndpointHealth.HEALTHY
    consecutive_failures: int = 0
    backoff_level: int = 0  # times marked unreachable without an intervening success
    retry_at: float | None = None


class HealthTracker:
    """Rolling health state for one Transport's candidates.

    A candidate becomes UNREACHABLE after `failure_threshold` consecutive failures and
    is skipped until min(backoff_base * 2**(level-1), backoff_cap) seconds have passed.
    Each further failure while unreachable doubles the window, up to the cap.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        backoff_base: float = 5.0,
        backoff_cap: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self._threshold = failure_threshold
        self._base = backoff_base
        self._cap = backoff_cap
        self._clock = clock
        self._statuses: dict[str, EndpointStatus] = {}

    def status(self, url: str) -> EndpointStatus:
        return self._statuses.setdefault(url, EndpointStatus())

    def is_eligible(self, url: str) -> bool:
        """Pure check; never changes state, so repeated calls cannot shorten a window."""
        status = self.status(url)
        if status.health != EndpointHealth.UNREACHABLE:
            return True
        return status.retry_at is not None and self._clock() >= status.retry_at

    def record_success(self, url: str) -> None:
        status = self.status(url)
        if status.health != EndpointHealth.HEALTHY:
            logger.info("RPC endpoint %s recovered", url)
        status.health = EndpointHealth.HEALTHY
        status.consecutive_failures = 0
        status.backoff_level = 0
        status.retry_at = None

    def record_failure(self, url: str) -> EndpointHealth:
        status = self.status(url)
        status.consecutive_failures += 1
        if status.consecutive_failures < self._threshold:
            status.health = EndpointHealth.DEGRADED
            return status.health

        status.backoff_level += 1
        window = self.backoff_window(status.backoff_level)
        status.health = EndpointHealth.UNREACHABLE
        status.retry_at = self._clock() + window
        logger.warning(
            "RPC endpoint %s unreachable after %d failures, backing off %.1fs",
            url, status.consecutive_failures, window,
        )
        return status.health

    def backoff_window(self, level: int) -> float:
        return min(self._base * 2 ** (level - 1), self._cap)
