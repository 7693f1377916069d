# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Prometheus metrics sink for secret synchronization.

Every metric lives under the ``secrets_manager`` namespace and is
registered on a dedicated CollectorRegistry, so several engines (or test
cases) can coexist in one process. Exposition over HTTP is the caller's
concern; ``generate_latest()`` renders the registry in text format.

Metrics:
    secrets_manager_vault_token_ttl
    secrets_manager_vault_max_token_ttl
    secrets_manager_vault_token_renewal_errors_total
    secrets_manager_vault_read_secret_errors_total
    secrets_manager_azure_kv_read_secret_errors_total
    secrets_manager_azure_kv_login_errors_total
    secrets_manager_controller_secret_read_errors_total
    secrets_manager_controller_secret_update_errors_total
    secrets_manager_controller_sync_errors_total
    secrets_manager_controller_last_updated
    secrets_manager_controller_last_sync_status
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from secretsync.enums import EnumBackendKind

logger = logging.getLogger(__name__)

METRICS_NAMESPACE = "secrets_manager"

VAULT_LABEL_NAMES = (
    "vault_address",
    "vault_engine",
    "vault_version",
    "vault_cluster_id",
    "vault_cluster_name",
)
AZURE_KV_LABEL_NAMES = ("azure_kv_name", "azure_kv_tenant")
SECRET_LABEL_NAMES = ("path", "key", "error")
VAULT_ERROR_LABEL_NAMES = ("vault_operation", "error")
RECORD_LABEL_NAMES = ("name", "namespace")

LOGIN_OPERATION = "login"


def _values(names: tuple[str, ...], labels: Mapping[str, str]) -> list[str]:
    return [labels.get(name, "") for name in names]


class PrometheusMetricsSink:
    """ProtocolMetricsSink implementation on prometheus_client.

    Example:
        >>> sink = PrometheusMetricsSink()
        >>> sink.record_sync_status("db", "default", ok=True)
        >>> b"secrets_manager_controller_last_sync_status" in sink.render()
        True
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize and register every metric.

        Args:
            registry: Registry to register on (a private one if None)
        """
        self._registry = registry or CollectorRegistry()

        self._token_ttl = Gauge(
            "token_ttl",
            "Vault token TTL",
            VAULT_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="vault",
            registry=self._registry,
        )
        self._max_token_ttl = Gauge(
            "max_token_ttl",
            "Max Vault token TTL before renewal",
            VAULT_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="vault",
            registry=self._registry,
        )
        self._token_renewal_errors = Counter(
            "token_renewal_errors",
            "Vault token renewal errors counter",
            VAULT_LABEL_NAMES + VAULT_ERROR_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="vault",
            registry=self._registry,
        )
        self._vault_read_errors = Counter(
            "read_secret_errors",
            "Vault read operations errors counter",
            VAULT_LABEL_NAMES + SECRET_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="vault",
            registry=self._registry,
        )
        self._azure_kv_read_errors = Counter(
            "read_secret_errors",
            "Azure Key Vault read operations errors counter",
            AZURE_KV_LABEL_NAMES + SECRET_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="azure_kv",
            registry=self._registry,
        )
        self._azure_kv_login_errors = Counter(
            "login_errors",
            "Azure Key Vault login errors counter",
            AZURE_KV_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="azure_kv",
            registry=self._registry,
        )
        self._secret_read_errors = Counter(
            "secret_read_errors",
            "Errors total count when reading a secret from the consumer store",
            RECORD_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="controller",
            registry=self._registry,
        )
        self._secret_update_errors = Counter(
            "secret_update_errors",
            "Errors total count when creating or updating a secret in the consumer store",
            RECORD_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="controller",
            registry=self._registry,
        )
        self._sync_errors = Counter(
            "sync_errors",
            "Secrets synchronization total errors",
            RECORD_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="controller",
            registry=self._registry,
        )
        self._last_updated = Gauge(
            "last_updated",
            "The last update timestamp as a Unix time",
            RECORD_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="controller",
            registry=self._registry,
        )
        self._last_sync_status = Gauge(
            "last_sync_status",
            "The result of the last sync of a secret. 1 = OK, 0 = Error",
            RECORD_LABEL_NAMES,
            namespace=METRICS_NAMESPACE,
            subsystem="controller",
            registry=self._registry,
        )

        logger.debug("Prometheus metrics sink initialized")

    @property
    def registry(self) -> CollectorRegistry:
        """Registry holding every metric of this sink."""
        return self._registry

    def render(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self._registry)

    def record_token_ttl(self, ttl_seconds: int, labels: Mapping[str, str]) -> None:
        self._token_ttl.labels(*_values(VAULT_LABEL_NAMES, labels)).set(ttl_seconds)

    def record_max_token_ttl(
        self, ttl_seconds: int, labels: Mapping[str, str]
    ) -> None:
        self._max_token_ttl.labels(*_values(VAULT_LABEL_NAMES, labels)).set(
            ttl_seconds
        )

    def record_token_renewal_error(
        self, operation: str, error: str, labels: Mapping[str, str]
    ) -> None:
        self._token_renewal_errors.labels(
            *_values(VAULT_LABEL_NAMES, labels), operation, error
        ).inc()

    def record_login_error(
        self, backend: EnumBackendKind, labels: Mapping[str, str]
    ) -> None:
        # Vault has no login counter; login failures count as renewal errors.
        if backend == EnumBackendKind.VAULT:
            self.record_token_renewal_error(
                LOGIN_OPERATION, "authentication_failed", labels
            )
            return
        self._azure_kv_login_errors.labels(
            *_values(AZURE_KV_LABEL_NAMES, labels)
        ).inc()

    def record_backend_read_error(
        self,
        backend: EnumBackendKind,
        path: str,
        key: str,
        error: str,
        labels: Mapping[str, str],
    ) -> None:
        if backend == EnumBackendKind.VAULT:
            self._vault_read_errors.labels(
                *_values(VAULT_LABEL_NAMES, labels), path, key, error
            ).inc()
            return
        self._azure_kv_read_errors.labels(
            *_values(AZURE_KV_LABEL_NAMES, labels), path, key, error
        ).inc()

    def record_sync_error(self, name: str, namespace: str) -> None:
        self._sync_errors.labels(name, namespace).inc()

    def record_sync_status(self, name: str, namespace: str, ok: bool) -> None:
        self._last_sync_status.labels(name, namespace).set(1 if ok else 0)

    def record_last_updated(self, name: str, namespace: str, timestamp: float) -> None:
        self._last_updated.labels(name, namespace).set(timestamp)

    def record_secret_read_error(self, name: str, namespace: str) -> None:
        self._secret_read_errors.labels(name, namespace).inc()

    def record_secret_update_error(self, name: str, namespace: str) -> None:
        self._secret_update_errors.labels(name, namespace).inc()


__all__ = ["METRICS_NAMESPACE", "PrometheusMetricsSink"]
