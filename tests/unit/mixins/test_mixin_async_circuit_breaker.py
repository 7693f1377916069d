# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for MixinAsyncCircuitBreaker.

Test Organization:
    - TestCircuitBreakerBasics: Initialization and failure counting
    - TestCircuitBreakerTransitions: CLOSED -> OPEN -> HALF_OPEN -> CLOSED
    - TestCircuitBreakerErrorContext: BackendUnavailableError payload
"""

from __future__ import annotations

import asyncio
from unittest.mock import patch
from uuid import UUID, uuid4

import pytest

from secretsync.enums import EnumSyncErrorCode, EnumSyncTransportType
from secretsync.errors import BackendUnavailableError, UnknownBackendError
from secretsync.mixins.mixin_async_circuit_breaker import (
    CircuitState,
    MixinAsyncCircuitBreaker,
)


class CircuitBreakerService(MixinAsyncCircuitBreaker):
    """Minimal breaker owner exposing lock-holding wrappers."""

    def __init__(self, threshold: int = 3, reset_timeout: float = 60.0) -> None:
        self._init_circuit_breaker(
            threshold=threshold,
            reset_timeout=reset_timeout,
            service_name="vault",
        )

    async def check(
        self, operation: str = "read_secret", correlation_id: UUID | None = None
    ) -> None:
        async with self._circuit_breaker_lock:
            await self._check_circuit_breaker(operation, correlation_id)

    async def fail(self, times: int = 1) -> None:
        for _ in range(times):
            async with self._circuit_breaker_lock:
                await self._record_circuit_failure("read_secret")

    async def reset(self) -> None:
        async with self._circuit_breaker_lock:
            await self._reset_circuit_breaker()


@pytest.mark.asyncio
class TestCircuitBreakerBasics:
    async def test_starts_closed(self) -> None:
        service = CircuitBreakerService()

        await service.check()

        assert service.circuit_state == CircuitState.CLOSED
        assert service._circuit_breaker_failures == 0
        assert service.transport_type == EnumSyncTransportType.BACKEND

    async def test_failures_below_threshold_keep_circuit_closed(self) -> None:
        service = CircuitBreakerService(threshold=3)

        await service.fail(2)

        assert service.circuit_state == CircuitState.CLOSED
        assert service._circuit_breaker_failures == 2
        await service.check()

    async def test_reset_clears_failures(self) -> None:
        service = CircuitBreakerService(threshold=3)
        await service.fail(2)

        await service.reset()
        await service.fail(2)

        assert service.circuit_state == CircuitState.CLOSED


class TestCircuitBreakerValidation:
    @pytest.mark.parametrize("threshold", [0, -1])
    def test_rejects_threshold(self, threshold: int) -> None:
        with pytest.raises(ValueError, match="threshold"):
            CircuitBreakerService(threshold=threshold)

    def test_rejects_negative_reset_timeout(self) -> None:
        with pytest.raises(ValueError, match="reset_timeout"):
            CircuitBreakerService(reset_timeout=-0.5)


@pytest.mark.asyncio
class TestCircuitBreakerTransitions:
    async def test_opens_at_threshold(self) -> None:
        service = CircuitBreakerService(threshold=3)

        await service.fail(3)

        assert service.circuit_state == CircuitState.OPEN
        with pytest.raises(BackendUnavailableError):
            await service.check()

    async def test_half_open_after_reset_timeout(self) -> None:
        service = CircuitBreakerService(threshold=1, reset_timeout=30.0)
        with patch(
            "secretsync.mixins.mixin_async_circuit_breaker.time.time",
            return_value=1000.0,
        ):
            await service.fail()
            assert service.circuit_state == CircuitState.OPEN

        with patch(
            "secretsync.mixins.mixin_async_circuit_breaker.time.time",
            return_value=1030.0,
        ):
            assert service.circuit_state == CircuitState.HALF_OPEN
            await service.check()

        assert service.circuit_state == CircuitState.HALF_OPEN
        assert service._circuit_breaker_failures == 0

        await service.reset()

        assert service.circuit_state == CircuitState.CLOSED

    async def test_zero_timeout_goes_half_open_immediately(self) -> None:
        service = CircuitBreakerService(threshold=1, reset_timeout=0.0)

        await service.fail()
        await service.check()

        assert service.circuit_state == CircuitState.HALF_OPEN

    async def test_half_open_failure_reopens(self) -> None:
        service = CircuitBreakerService(threshold=1, reset_timeout=0.0)
        await service.fail()
        await service.check()

        await service.fail()

        assert service._circuit_breaker_open

    async def test_first_half_open_failure_reopens_below_threshold(self) -> None:
        service = CircuitBreakerService(threshold=3, reset_timeout=0.0)
        await service.fail(3)
        await service.check()
        assert service.circuit_state == CircuitState.HALF_OPEN

        await service.fail()

        assert service._circuit_breaker_open
        assert not service._circuit_breaker_half_open
        assert service._circuit_breaker_failures == 1

    async def test_half_open_success_closes(self) -> None:
        service = CircuitBreakerService(threshold=3, reset_timeout=0.0)
        await service.fail(3)
        await service.check()

        await service.reset()
        await service.fail(2)

        assert service.circuit_state == CircuitState.CLOSED

    async def test_concurrent_failures_open_once(self) -> None:
        service = CircuitBreakerService(threshold=5)

        await asyncio.gather(*(service.fail() for _ in range(20)))

        assert service._circuit_breaker_failures == 20
        assert service.circuit_state == CircuitState.OPEN


@pytest.mark.asyncio
class TestCircuitBreakerErrorContext:
    async def test_error_payload(self) -> None:
        service = CircuitBreakerService(threshold=1, reset_timeout=60.0)
        correlation_id = uuid4()
        await service.fail()

        with pytest.raises(BackendUnavailableError) as exc_info:
            await service.check("read_secret", correlation_id)

        error = exc_info.value
        assert isinstance(error, UnknownBackendError)
        assert error.error_code == EnumSyncErrorCode.BACKEND_UNAVAILABLE
        assert error.correlation_id == correlation_id
        assert error.context["circuit_state"] == "open"
        assert error.context["operation"] == "read_secret"
        assert error.context["target_name"] == "vault"
        assert 0 <= error.context["retry_after_seconds"] <= 60
        assert "vault temporarily unavailable" in str(error)

    async def test_correlation_id_generated_when_absent(self) -> None:
        service = CircuitBreakerService(threshold=1)
        await service.fail()

        with pytest.raises(BackendUnavailableError) as exc_info:
            await service.check()

        assert isinstance(exc_info.value.correlation_id, UUID)
