# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reusable mixins for secret synchronization components."""

from secretsync.mixins.mixin_async_circuit_breaker import (
    CircuitState,
    MixinAsyncCircuitBreaker,
)

__all__: list[str] = ["CircuitState", "MixinAsyncCircuitBreaker"]
