# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the metrics sinks.

Prometheus sinks are built on a private CollectorRegistry per test, so
sample values can be read back with ``registry.get_sample_value``.
"""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from secretsync.enums import EnumBackendKind
from secretsync.observability import (
    InMemoryMetricsSink,
    NoopMetricsSink,
    PrometheusMetricsSink,
    ProtocolMetricsSink,
)

VAULT_LABELS = {
    "vault_address": "https://vault:8200",
    "vault_engine": "kv2",
    "vault_version": "1.15.2",
    "vault_cluster_id": "c-1",
    "vault_cluster_name": "vault-a",
}
AZURE_LABELS = {"azure_kv_name": "myvault", "azure_kv_tenant": "tenant-1"}


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def sink(registry: CollectorRegistry) -> PrometheusMetricsSink:
    return PrometheusMetricsSink(registry)


class TestProtocolConformance:
    @pytest.mark.parametrize(
        "implementation",
        [NoopMetricsSink(), InMemoryMetricsSink(), PrometheusMetricsSink()],
    )
    def test_is_metrics_sink(self, implementation: object) -> None:
        assert isinstance(implementation, ProtocolMetricsSink)


class TestPrometheusMetricsSink:
    def test_vault_token_ttl(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.record_token_ttl(1200, VAULT_LABELS)
        sink.record_max_token_ttl(300, VAULT_LABELS)

        assert registry.get_sample_value("secrets_manager_vault_token_ttl", VAULT_LABELS) == 1200
        assert (
            registry.get_sample_value("secrets_manager_vault_max_token_ttl", VAULT_LABELS)
            == 300
        )

    def test_missing_identity_labels_are_blank(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        partial = {"vault_address": "https://vault:8200", "vault_engine": "kv1"}

        sink.record_token_ttl(60, partial)

        labels = dict.fromkeys(VAULT_LABELS, "") | partial
        assert registry.get_sample_value("secrets_manager_vault_token_ttl", labels) == 60

    def test_token_renewal_errors(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.record_token_renewal_error("renew-self", "unknown", VAULT_LABELS)
        sink.record_token_renewal_error("renew-self", "unknown", VAULT_LABELS)

        labels = VAULT_LABELS | {"vault_operation": "renew-self", "error": "unknown"}
        assert (
            registry.get_sample_value(
                "secrets_manager_vault_token_renewal_errors_total", labels
            )
            == 2
        )

    def test_vault_login_error_counts_as_renewal_error(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.record_login_error(EnumBackendKind.VAULT, VAULT_LABELS)

        labels = VAULT_LABELS | {
            "vault_operation": "login",
            "error": "authentication_failed",
        }
        assert (
            registry.get_sample_value(
                "secrets_manager_vault_token_renewal_errors_total", labels
            )
            == 1
        )

    def test_azure_login_error(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.record_login_error(EnumBackendKind.AZURE_KV, AZURE_LABELS)

        assert (
            registry.get_sample_value(
                "secrets_manager_azure_kv_login_errors_total", AZURE_LABELS
            )
            == 1
        )

    def test_read_errors_by_backend(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        sink.record_backend_read_error(
            EnumBackendKind.VAULT, "kv/a", "v", "backend_secret_not_found", VAULT_LABELS
        )
        sink.record_backend_read_error(
            EnumBackendKind.AZURE_KV, "db", "", "unknown_backend_error", AZURE_LABELS
        )

        secret = {"path": "kv/a", "key": "v", "error": "backend_secret_not_found"}
        assert (
            registry.get_sample_value(
                "secrets_manager_vault_read_secret_errors_total", VAULT_LABELS | secret
            )
            == 1
        )
        azure_secret = {"path": "db", "key": "", "error": "unknown_backend_error"}
        assert (
            registry.get_sample_value(
                "secrets_manager_azure_kv_read_secret_errors_total",
                AZURE_LABELS | azure_secret,
            )
            == 1
        )

    def test_controller_metrics(
        self, sink: PrometheusMetricsSink, registry: CollectorRegistry
    ) -> None:
        labels = {"name": "db", "namespace": "default"}

        sink.record_sync_error("db", "default")
        sink.record_secret_read_error("db", "default")
        sink.record_secret_update_error("db", "default")
        sink.record_sync_status("db", "default", ok=False)
        sink.record_last_updated("db", "default", 1704110400.0)

        for metric in (
            "secrets_manager_controller_sync_errors_total",
            "secrets_manager_controller_secret_read_errors_total",
            "secrets_manager_controller_secret_update_errors_total",
        ):
            assert registry.get_sample_value(metric, labels) == 1
        assert (
            registry.get_sample_value("secrets_manager_controller_last_sync_status", labels)
            == 0
        )
        assert (
            registry.get_sample_value("secrets_manager_controller_last_updated", labels)
            == 1704110400.0
        )

        sink.record_sync_status("db", "default", ok=True)
        assert (
            registry.get_sample_value("secrets_manager_controller_last_sync_status", labels)
            == 1
        )

    def test_sinks_do_not_share_registries(self) -> None:
        first = PrometheusMetricsSink()
        second = PrometheusMetricsSink()

        first.record_sync_error("db", "default")

        labels = {"name": "db", "namespace": "default"}
        assert second.registry.get_sample_value(
            "secrets_manager_controller_sync_errors_total", labels
        ) is None

    def test_render(self, sink: PrometheusMetricsSink) -> None:
        sink.record_sync_status("db", "default", ok=True)

        output = sink.render()

        assert b"secrets_manager_controller_last_sync_status" in output


class TestInMemoryMetricsSink:
    def test_counters_and_gauges(self) -> None:
        sink = InMemoryMetricsSink()

        sink.record_sync_error("db", "default")
        sink.record_sync_error("db", "default")
        sink.record_sync_error("other", "default")
        sink.record_sync_status("db", "default", ok=True)

        assert sink.counter("sync_errors_total", name="db", namespace="default") == 2
        assert sink.counter_total("sync_errors_total") == 3
        assert sink.gauge("last_sync_status", name="db", namespace="default") == 1.0
        assert sink.gauge("last_sync_status", name="x", namespace="default") is None

    def test_clear(self) -> None:
        sink = InMemoryMetricsSink()
        sink.record_login_error(EnumBackendKind.AZURE_KV, AZURE_LABELS)

        sink.clear()

        assert sink.counter_total("login_errors_total") == 0
