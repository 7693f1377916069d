# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for synchronization metrics.

Backend clients and the reconciler never talk to a metrics library
directly; they receive a sink implementing this protocol at construction.

Design Decisions:
    - runtime_checkable: Enables isinstance() checks for duck typing
    - Sync methods: Recording a metric is an in-process counter update
    - Label maps: Backend clients pass their identity labels (vault address,
      cluster name, key vault name, ...) and the sink keeps what it knows

Implementations:
    - PrometheusMetricsSink: prometheus_client counters and gauges
    - InMemoryMetricsSink: Test-only recorder
    - NoopMetricsSink: Discards everything
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from secretsync.enums import EnumBackendKind


@runtime_checkable
class ProtocolMetricsSink(Protocol):
    """Protocol for synchronization metrics sinks."""

    def record_token_ttl(self, ttl_seconds: int, labels: Mapping[str, str]) -> None:
        """Record the current session token TTL."""
        ...

    def record_max_token_ttl(
        self, ttl_seconds: int, labels: Mapping[str, str]
    ) -> None:
        """Record the configured renewal threshold."""
        ...

    def record_token_renewal_error(
        self, operation: str, error: str, labels: Mapping[str, str]
    ) -> None:
        """Count a failed session maintenance operation (lookup, renew, login)."""
        ...

    def record_login_error(
        self, backend: EnumBackendKind, labels: Mapping[str, str]
    ) -> None:
        """Count a failed backend login."""
        ...

    def record_backend_read_error(
        self,
        backend: EnumBackendKind,
        path: str,
        key: str,
        error: str,
        labels: Mapping[str, str],
    ) -> None:
        """Count a failed backend secret read."""
        ...

    def record_sync_error(self, name: str, namespace: str) -> None:
        """Count a failed reconcile pass for a record."""
        ...

    def record_sync_status(self, name: str, namespace: str, ok: bool) -> None:
        """Record the outcome of the last reconcile pass for a record."""
        ...

    def record_last_updated(self, name: str, namespace: str, timestamp: float) -> None:
        """Record when the target secret of a record was last written."""
        ...

    def record_secret_read_error(self, name: str, namespace: str) -> None:
        """Count a failed consumer store read."""
        ...

    def record_secret_update_error(self, name: str, namespace: str) -> None:
        """Count a failed consumer store create or update."""
        ...


__all__ = ["ProtocolMetricsSink"]
