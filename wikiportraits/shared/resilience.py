# wikiportraits/shared/resilience.py
import logging
import time
from enum import Enum
from typing import Any, Callable, Coroutine, Dict

import httpx
import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wikiportraits.shared.config import settings

logger = structlog.get_logger()
# tenacity's before_sleep hook expects a stdlib logger
_retry_logger = logging.getLogger(__name__)

# --- 1. Custom Exceptions ---


class ResilienceError(Exception):
    """Base class for resilience-related errors."""
    pass


class CircuitBreakerOpenError(ResilienceError):
    """Raised when a call is blocked because the Circuit Breaker is OPEN."""
    def __init__(self, service_name: str, reset_timeout: float):
        self.service_name = service_name
        self.reset_timeout = reset_timeout
        super().__init__(f"Circuit Breaker for {service_name} is OPEN. Retrying in {reset_timeout}s.")


# --- 2. Circuit Breaker ---


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Stops hammering a Wikimedia host that keeps failing.

    After `failure_threshold` consecutive failures the breaker opens and
    calls fail fast until `recovery_timeout` seconds have passed; then a
    single trial call decides whether it closes again.
    """
    def __init__(self, name: str, failure_threshold: int = 5, recovery_timeout: int = 30):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = 0.0

    async def a_call(self, func: Callable[..., Coroutine[Any, Any, Any]], *args, **kwargs) -> Any:
        """Awaits `func` if the circuit is CLOSED or HALF-OPEN."""
        self._check_state()

        try:
            result = await func(*args, **kwargs)
        except httpx.TransportError:
            self._handle_failure()
            raise
        except Exception:
            # the host answered, even if with an error body
            self._handle_success()
            raise
        self._handle_success()
        return result

    def _check_state(self):
        if self.state == CircuitState.OPEN:
            if time.time() - self.last_failure_time > self.recovery_timeout:
                self._transition_to(CircuitState.HALF_OPEN)
            else:
                raise CircuitBreakerOpenError(self.name, self.recovery_timeout)

    def _handle_success(self):
        if self.state == CircuitState.HALF_OPEN:
            self._reset()
        else:
            self.failure_count = 0

    def _handle_failure(self):
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == CircuitState.HALF_OPEN:
            self._transition_to(CircuitState.OPEN)
        elif self.failure_count >= self.failure_threshold:
            self._transition_to(CircuitState.OPEN)

    def _transition_to(self, new_state: CircuitState):
        self.state = new_state
        logger.warning("circuit_breaker_state_change",
                       service=self.name,
                       state=new_state.value,
                       failures=self.failure_count)

    def _reset(self):
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        logger.info("circuit_breaker_recovered", service=self.name)


# One breaker per Wikimedia host
_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(service_name: str) -> CircuitBreaker:
    if service_name not in _breakers:
        _breakers[service_name] = CircuitBreaker(
            name=service_name,
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            recovery_timeout=settings.CIRCUIT_RECOVERY_SEC,
        )
    return _breakers[service_name]


def reset_circuit_breakers():
    _breakers.clear()


# --- 3. Retry Policy (Tenacity) ---


def retry_external_api(func):
    """
    Retries idempotent Wikimedia reads on network failures.

    Exponential backoff (1s, 2s, 4s... capped at 8s), RETRY_ATTEMPTS tries,
    transport errors only. API-level errors and writes are never retried.
    """
    return retry(
        stop=stop_after_attempt(settings.RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(_retry_logger, logging.WARNING),
        reraise=True,
    )(func)
