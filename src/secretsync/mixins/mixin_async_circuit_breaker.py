# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Coroutine-safe async circuit breaker mixin for backend clients.

Backend clients wrap their remote reads in this breaker so a backend that
keeps failing is not hammered on every reconcile pass. While the circuit is
open, reads fail fast with BackendUnavailableError.

Circuit Breaker States:
    - CLOSED: Normal operation, requests allowed
    - OPEN: Circuit tripped, requests blocked
    - HALF_OPEN: Reset timeout elapsed, next request decides

Usage:
    ```python
    class VaultBackendClient(MixinAsyncCircuitBreaker):
        def __init__(self, config):
            self._init_circuit_breaker(
                threshold=config.circuit_breaker_failure_threshold,
                reset_timeout=config.circuit_breaker_reset_timeout_seconds,
                service_name="vault",
            )

        async def read_secret(self, path, key, correlation_id=None):
            async with self._circuit_breaker_lock:
                await self._check_circuit_breaker("read_secret", correlation_id)
            try:
                value = await self._read(path, key)
            except Exception:
                async with self._circuit_breaker_lock:
                    await self._record_circuit_failure("read_secret", correlation_id)
                raise
            async with self._circuit_breaker_lock:
                await self._reset_circuit_breaker()
            return value
    ```

Concurrency Safety:
    All circuit breaker methods require the caller to hold
    ``_circuit_breaker_lock``. asyncio.Lock is coroutine-safe, not
    thread-safe; executor threads never touch breaker state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from uuid import UUID, uuid4

from secretsync.enums import EnumSyncTransportType
from secretsync.errors import BackendUnavailableError, ModelSyncErrorContext

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    """Circuit breaker state machine.

    State Transitions:
        CLOSED -> OPEN: Failure count >= threshold
        OPEN -> HALF_OPEN: Current time passed the reset deadline
        HALF_OPEN -> CLOSED: First successful operation
        HALF_OPEN -> OPEN: First failed operation
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class MixinAsyncCircuitBreaker:
    """Async circuit breaker mixin.

    State Variables:
        _circuit_breaker_failures: Consecutive failure counter
        _circuit_breaker_open: True while the circuit is open
        _circuit_breaker_open_until: Timestamp of automatic half-open
        _circuit_breaker_half_open: True while the trial operation runs
        _circuit_breaker_lock: asyncio.Lock guarding the variables above
    """

    def _init_circuit_breaker(
        self,
        threshold: int = 5,
        reset_timeout: float = 60.0,
        service_name: str = "unknown",
        transport_type: EnumSyncTransportType = EnumSyncTransportType.BACKEND,
    ) -> None:
        """Initialize circuit breaker state and configuration.

        Args:
            threshold: Maximum consecutive failures before opening (default: 5)
            reset_timeout: Seconds before the circuit goes half-open (default: 60.0)
            service_name: Service identifier for error context
            transport_type: Transport type for error context

        Raises:
            ValueError: If threshold < 1 or reset_timeout < 0
        """
        if threshold < 1:
            raise ValueError(f"Circuit breaker threshold must be >= 1, got {threshold}")
        if reset_timeout < 0:
            raise ValueError(
                f"Circuit breaker reset_timeout must be >= 0, got {reset_timeout}"
            )

        self._circuit_breaker_failures = 0
        self._circuit_breaker_open = False
        self._circuit_breaker_open_until: float = 0.0
        self._circuit_breaker_half_open = False

        self.circuit_breaker_threshold = threshold
        self.circuit_breaker_reset_timeout = reset_timeout
        self.service_name = service_name
        self.transport_type = transport_type

        self._circuit_breaker_lock = asyncio.Lock()

        logger.debug(
            "Circuit breaker initialized",
            extra={
                "service": service_name,
                "threshold": threshold,
                "reset_timeout": reset_timeout,
                "transport_type": transport_type.value,
            },
        )

    @property
    def circuit_state(self) -> CircuitState:
        """Current breaker state, derived without mutating it."""
        if not self._circuit_breaker_open:
            if self._circuit_breaker_half_open:
                return CircuitState.HALF_OPEN
            return CircuitState.CLOSED
        if time.time() >= self._circuit_breaker_open_until:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    async def _check_circuit_breaker(
        self, operation: str, correlation_id: UUID | None = None
    ) -> None:
        """Check if the circuit allows the operation.

        REQUIRES: self._circuit_breaker_lock must be held by caller.

        Args:
            operation: Operation name for error context
            correlation_id: Optional correlation ID, generated if absent

        Raises:
            BackendUnavailableError: If the circuit is open and the reset
                timeout has not elapsed.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during state check",
                extra={"service": self.service_name, "operation": operation},
            )

        if not self._circuit_breaker_open:
            return

        current_time = time.time()
        if current_time >= self._circuit_breaker_open_until:
            self._circuit_breaker_open = False
            self._circuit_breaker_half_open = True
            self._circuit_breaker_failures = 0
            logger.info(
                "Circuit breaker transitioning to half-open",
                extra={"service": self.service_name, "operation": operation},
            )
            return

        retry_after = int(self._circuit_breaker_open_until - current_time)
        context = ModelSyncErrorContext(
            transport_type=self.transport_type,
            operation=operation,
            target_name=self.service_name,
            correlation_id=correlation_id if correlation_id else uuid4(),
        )
        raise BackendUnavailableError(
            f"Circuit breaker is open - {self.service_name} temporarily unavailable",
            context=context,
            circuit_state=CircuitState.OPEN.value,
            retry_after_seconds=retry_after,
        )

    async def _record_circuit_failure(
        self, operation: str, correlation_id: UUID | None = None
    ) -> None:
        """Record a failure and open the circuit once the threshold is hit.

        REQUIRES: self._circuit_breaker_lock must be held by caller.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during failure recording",
                extra={"service": self.service_name, "operation": operation},
            )

        self._circuit_breaker_failures += 1

        if (
            self._circuit_breaker_half_open
            or self._circuit_breaker_failures >= self.circuit_breaker_threshold
        ):
            self._circuit_breaker_open = True
            self._circuit_breaker_half_open = False
            self._circuit_breaker_open_until = (
                time.time() + self.circuit_breaker_reset_timeout
            )
            logger.warning(
                "Circuit breaker opened",
                extra={
                    "service": self.service_name,
                    "operation": operation,
                    "failure_count": self._circuit_breaker_failures,
                    "threshold": self.circuit_breaker_threshold,
                    "reset_timeout": self.circuit_breaker_reset_timeout,
                    "correlation_id": str(correlation_id) if correlation_id else None,
                },
            )

    async def _reset_circuit_breaker(self) -> None:
        """Close the circuit and clear the failure counter.

        REQUIRES: self._circuit_breaker_lock must be held by caller.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during reset",
                extra={"service": self.service_name},
            )

        if (
            self._circuit_breaker_open
            or self._circuit_breaker_half_open
            or self._circuit_breaker_failures > 0
        ):
            logger.info(
                "Circuit breaker reset to closed",
                extra={
                    "service": self.service_name,
                    "previous_failures": self._circuit_breaker_failures,
                },
            )

        self._circuit_breaker_open = False
        self._circuit_breaker_half_open = False
        self._circuit_breaker_failures = 0
        self._circuit_breaker_open_until = 0.0


__all__ = ["CircuitState", "MixinAsyncCircuitBreaker"]
