# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory metrics sink for unit testing.

Counters and gauges are stored in plain dicts keyed by metric name and a
sorted tuple of label pairs. Measurements can be inspected through
``counter()`` and ``gauge()``.

WARNING: This sink is NOT suitable for production use. Use
PrometheusMetricsSink to expose metrics.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping

from secretsync.enums import EnumBackendKind

LabelKey = tuple[tuple[str, str], ...]


def _key(**labels: str) -> LabelKey:
    return tuple(sorted(labels.items()))


class InMemoryMetricsSink:
    """In-memory metrics recorder.

    Backend identity labels are ignored; only the labels that distinguish
    one measurement from another (path, key, record name, ...) are kept.

    Example:
        >>> sink = InMemoryMetricsSink()
        >>> sink.record_sync_error("db", "default")
        >>> sink.counter("sync_errors_total", name="db", namespace="default")
        1
    """

    def __init__(self) -> None:
        self._counters: dict[str, dict[LabelKey, int]] = defaultdict(dict)
        self._gauges: dict[str, dict[LabelKey, float]] = defaultdict(dict)

    def _inc(self, metric: str, **labels: str) -> None:
        key = _key(**labels)
        self._counters[metric][key] = self._counters[metric].get(key, 0) + 1

    def _set(self, metric: str, value: float, **labels: str) -> None:
        self._gauges[metric][_key(**labels)] = value

    def counter(self, metric: str, **labels: str) -> int:
        """Get a counter value, 0 if never incremented."""
        return self._counters[metric].get(_key(**labels), 0)

    def counter_total(self, metric: str) -> int:
        """Get the sum of a counter across all label sets."""
        return sum(self._counters[metric].values())

    def gauge(self, metric: str, **labels: str) -> float | None:
        """Get a gauge value, None if never set."""
        return self._gauges[metric].get(_key(**labels))

    def clear(self) -> None:
        """Forget every measurement (for testing)."""
        self._counters.clear()
        self._gauges.clear()

    def record_token_ttl(self, ttl_seconds: int, labels: Mapping[str, str]) -> None:
        self._set("token_ttl", ttl_seconds)

    def record_max_token_ttl(
        self, ttl_seconds: int, labels: Mapping[str, str]
    ) -> None:
        self._set("max_token_ttl", ttl_seconds)

    def record_token_renewal_error(
        self, operation: str, error: str, labels: Mapping[str, str]
    ) -> None:
        self._inc("token_renewal_errors_total", operation=operation, error=error)

    def record_login_error(
        self, backend: EnumBackendKind, labels: Mapping[str, str]
    ) -> None:
        self._inc("login_errors_total", backend=backend.value)

    def record_backend_read_error(
        self,
        backend: EnumBackendKind,
        path: str,
        key: str,
        error: str,
        labels: Mapping[str, str],
    ) -> None:
        self._inc(
            "read_secret_errors_total",
            backend=backend.value,
            path=path,
            key=key,
            error=error,
        )

    def record_sync_error(self, name: str, namespace: str) -> None:
        self._inc("sync_errors_total", name=name, namespace=namespace)

    def record_sync_status(self, name: str, namespace: str, ok: bool) -> None:
        self._set("last_sync_status", 1.0 if ok else 0.0, name=name, namespace=namespace)

    def record_last_updated(self, name: str, namespace: str, timestamp: float) -> None:
        self._set("last_updated", timestamp, name=name, namespace=namespace)

    def record_secret_read_error(self, name: str, namespace: str) -> None:
        self._inc("secret_read_errors_total", name=name, namespace=namespace)

    def record_secret_update_error(self, name: str, namespace: str) -> None:
        self._inc("secret_update_errors_total", name=name, namespace=namespace)


__all__ = ["InMemoryMetricsSink"]
