# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metrics sink that discards every measurement."""

from __future__ import annotations

from collections.abc import Mapping

from secretsync.enums import EnumBackendKind


class NoopMetricsSink:
    """Default sink when no metrics backend is configured."""

    def record_token_ttl(self, ttl_seconds: int, labels: Mapping[str, str]) -> None:
        pass

    def record_max_token_ttl(
        self, ttl_seconds: int, labels: Mapping[str, str]
    ) -> None:
        pass

    def record_token_renewal_error(
        self, operation: str, error: str, labels: Mapping[str, str]
    ) -> None:
        pass

    def record_login_error(
        self, backend: EnumBackendKind, labels: Mapping[str, str]
    ) -> None:
        pass

    def record_backend_read_error(
        self,
        backend: EnumBackendKind,
        path: str,
        key: str,
        error: str,
        labels: Mapping[str, str],
    ) -> None:
        pass

    def record_sync_error(self, name: str, namespace: str) -> None:
        pass

    def record_sync_status(self, name: str, namespace: str, ok: bool) -> None:
        pass

    def record_last_updated(self, name: str, namespace: str, timestamp: float) -> None:
        pass

    def record_secret_read_error(self, name: str, namespace: str) -> None:
        pass

    def record_secret_update_error(self, name: str, namespace: str) -> None:
        pass


__all__ = ["NoopMetricsSink"]
