# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Fakes shared by unit tests."""

from __future__ import annotations

from collections.abc import Mapping
from uuid import UUID

from secretsync.errors import BackendSecretNotFoundError
from secretsync.models import ModelDataSource, ModelSecretRecord

__all__ = ["FakeBackendClient", "make_record"]


class FakeBackendClient:
    """Backend client serving values from a ``{(path, key): value}`` map.

    Unknown locations raise BackendSecretNotFoundError, like a real
    backend. ``reads`` records every call in order.
    """

    def __init__(self, values: Mapping[tuple[str, str], str] | None = None) -> None:
        self.values: dict[tuple[str, str], str] = dict(values or {})
        self.reads: list[tuple[str, str]] = []
        self.closed = False

    async def read_secret(
        self, path: str, key: str, correlation_id: UUID | None = None
    ) -> str:
        self.reads.append((path, key))
        try:
            return self.values[(path, key)]
        except KeyError:
            raise BackendSecretNotFoundError(path, key) from None

    async def close(self) -> None:
        self.closed = True


def make_record(
    name: str = "s1",
    namespace: str = "default",
    keys_map: Mapping[str, ModelDataSource] | None = None,
    finalizers: list[str] | None = None,
    target_name: str | None = None,
) -> ModelSecretRecord:
    """Build a record; by default one base64 key ``foo`` read from kv/a#v."""
    if keys_map is None:
        keys_map = {"foo": ModelDataSource(path="kv/a", key="v", encoding="base64")}
    return ModelSecretRecord(
        namespace=namespace,
        name=name,
        target_name=target_name or name,
        keys_map=dict(keys_map),
        finalizers=list(finalizers or []),
    )
