"""
Circuit breaker for calls to the provider reference service.
Stops calling a failing upstream for a cool-down period so lookups fall back quickly.
"""
from enum import Enum
import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


FAILURE_THRESHOLD = 3  # Consecutive failures before opening
OPEN_STATE_DURATION = 60  # Seconds OPEN before allowing a trial call
HALF_OPEN_MAX_REQUESTS = 1  # Trial calls allowed while HALF_OPEN


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerError(Exception):
    """Raised when a call is attempted while the circuit is open."""
    pass


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    Transitions:
    - CLOSED -> OPEN: after ``failure_threshold`` consecutive failures
    - OPEN -> HALF_OPEN: once ``open_duration`` seconds have passed
    - HALF_OPEN -> CLOSED: when the trial call succeeds
    - HALF_OPEN -> OPEN: when the trial call fails
    """

    def __init__(
        self,
        service_name: str,
        failure_threshold: int = FAILURE_THRESHOLD,
        open_duration: float = OPEN_STATE_DURATION,
        half_open_max_requests: int = HALF_OPEN_MAX_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize circuit breaker.

        Args:
            service_name: Upstream name used in log messages (e.g., "provider_service")
            failure_threshold: Consecutive failures before opening
            open_duration: Seconds to remain OPEN before HALF_OPEN
            half_open_max_requests: Trial calls allowed in HALF_OPEN
            clock: Callable returning monotonic seconds
        """
        self.service_name = service_name
        self.failure_threshold = failure_threshold
        self.open_duration = open_duration
        self.half_open_max_requests = half_open_max_requests
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self.half_open_requests = 0

    def _transition(self, new_state: CircuitState, reason: str) -> None:
        logger.warning(
            f"Circuit breaker for {self.service_name}: "
            f"{self.state.name} -> {new_state.name} ({reason})"
        )
        self.state = new_state

    def allow_request(self) -> bool:
        """
        Check whether a call to the upstream may proceed.

        Returns:
            True if the call should be attempted, False if it should fail fast
        """
        if self.state == CircuitState.OPEN:
            if self.opened_at is not None and self._clock() - self.opened_at >= self.open_duration:
                self._transition(CircuitState.HALF_OPEN, "testing recovery")
                self.half_open_requests = 1
                return True
            return False

        if self.state == CircuitState.HALF_OPEN:
            if self.half_open_requests < self.half_open_max_requests:
                self.half_open_requests += 1
                return True
            return False

        return True

    def record_success(self) -> None:
        """Record a successful call; closes the circuit after a good trial call."""
        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.CLOSED, "service recovered")
            self.half_open_requests = 0
            self.opened_at = None
        self.failure_count = 0

    def record_failure(self) -> None:
        """Record a failed call; opens the circuit at the threshold or after a failed trial call."""
        self.failure_count += 1

        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.OPEN, "service still failing")
            self.opened_at = self._clock()
            self.half_open_requests = 0
        elif self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
            self._transition(CircuitState.OPEN, f"{self.failure_count} consecutive failures")
            self.opened_at = self._clock()

    def ensure_closed(self) -> None:
        """
        Gate a call on the breaker.

        Raises:
            CircuitBreakerError: If the circuit does not allow the call
        """
        if not self.allow_request():
            raise CircuitBreakerError(f"Circuit open for {self.service_name}")

    def current_state(self) -> CircuitState:
        """Return the current state."""
        return self.state


# One breaker per upstream service
_circuit_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(service_name: str) -> CircuitBreaker:
    """
    Get or create the circuit breaker for a service.

    Args:
        service_name: Name of the upstream service

    Returns:
        Shared CircuitBreaker instance
    """
    if service_name not in _circuit_breakers:
        _circuit_breakers[service_name] = CircuitBreaker(service_name)
    return _circuit_breakers[service_name]


def reset_circuit_breakers() -> None:
    """Drop every registered breaker."""
    _circuit_breakers.clear()
