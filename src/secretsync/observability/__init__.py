# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Observability Module.

Exports:
    ProtocolMetricsSink: Interface injected into backends and the reconciler
    PrometheusMetricsSink: prometheus_client implementation
    InMemoryMetricsSink: Test recorder
    NoopMetricsSink: Discarding default
"""

from secretsync.observability.protocol_metrics_sink import ProtocolMetricsSink
from secretsync.observability.sink_metrics_inmemory import InMemoryMetricsSink
from secretsync.observability.sink_metrics_noop import NoopMetricsSink
from secretsync.observability.sink_metrics_prometheus import (
    METRICS_NAMESPACE,
    PrometheusMetricsSink,
)

__all__: list[str] = [
    "METRICS_NAMESPACE",
    "InMemoryMetricsSink",
    "NoopMetricsSink",
    "PrometheusMetricsSink",
    "ProtocolMetricsSink",
]
