# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the managed record source."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from secretsync.models import ModelRecordIdentity, ModelSecretRecord


@runtime_checkable
class ProtocolRecordSource(Protocol):
    """Load and persist managed secret records.

    Implementations:
        - KubernetesRecordSource: custom resources through CustomObjectsApi
        - InMemoryRecordSource: test-only dict store
    """

    async def get(
        self, identity: ModelRecordIdentity, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        """Raises RecordNotFoundError when the record no longer exists."""
        ...

    async def update(
        self, record: ModelSecretRecord, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        """Persist the record's finalizer list and return the stored record.

        Raises RecordSourceError on conflicts or transport failures.
        """
        ...


__all__ = ["ProtocolRecordSource"]
