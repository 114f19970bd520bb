"""
Circuit Breaker - stops calling a failing external service for a while.

Constructed once per process (see AppContext) and passed by reference to
the client that needs it. State is per instance, never module-global.
"""
import logging
import threading
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from core.errors import CircuitOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLOSED = "CLOSED"
OPEN = "OPEN"
HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """
    Classic three-state breaker.

    - CLOSED: calls pass through; consecutive failures are counted.
    - OPEN: calls fail fast with CircuitOpenError until reset_seconds elapsed.
    - HALF_OPEN: one trial call; success closes, failure re-opens.
    """

    def __init__(
        self,
        name: str,
        threshold: int = 5,
        reset_seconds: float = 60.0,
        clock: Optional[Callable[[], float]] = None,
        tracked_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    ):
        self.name = name
        self.threshold = max(1, threshold)
        self.reset_seconds = reset_seconds
        self.tracked_exceptions = tracked_exceptions
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._failures = 0
        self._last_failure_time = 0.0
        self._state = CLOSED

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def call(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run operation through the breaker."""
        self._before_call()
        try:
            result = operation(*args, **kwargs)
        except self.tracked_exceptions:
            self._on_failure()
            raise
        self._on_success()
        return result

    def reset(self) -> None:
        with self._lock:
            self._failures = 0
            self._last_failure_time = 0.0
            self._state = CLOSED

    def _before_call(self) -> None:
        with self._lock:
            if self._state != OPEN:
                return
            if self._clock() - self._last_failure_time > self.reset_seconds:
                logger.info(f"Circuit '{self.name}' half-open, allowing trial call")
                self._state = HALF_OPEN
                return
        raise CircuitOpenError(self.name)

    def _on_success(self) -> None:
        with self._lock:
            if self._state != CLOSED:
                logger.info(f"Circuit '{self.name}' closed")
            self._failures = 0
            self._state = CLOSED

    def _on_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._last_failure_time = self._clock()
            if self._state == HALF_OPEN or self._failures >= self.threshold:
                if self._state != OPEN:
                    logger.warning(
                        f"Circuit '{self.name}' opened after {self._failures} consecutive failures"
                    )
                self._state = OPEN
