# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the consumer key-value store.

Implementations:
    - KubernetesSecretStore: cluster Secret objects through CoreV1Api
    - InMemoryConsumerStore: test-only dict store

Every write is a full replace of the secret data. Implementations raise
ConsumerStoreNotFoundError / ConsumerStoreAlreadyExistsError for the
conditions the reconciler recovers from, and ConsumerStoreError for
everything else, timeouts included.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from secretsync.models import ModelTargetSecret


@runtime_checkable
class ProtocolConsumerStore(Protocol):
    """Read/write access to target secrets."""

    async def get(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> ModelTargetSecret:
        """Raises ConsumerStoreNotFoundError when absent."""
        ...

    async def create(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        """Raises ConsumerStoreAlreadyExistsError when present."""
        ...

    async def update(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        """Raises ConsumerStoreNotFoundError when absent."""
        ...

    async def delete(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> None:
        """Raises ConsumerStoreNotFoundError when absent."""
        ...


__all__ = ["ProtocolConsumerStore"]
