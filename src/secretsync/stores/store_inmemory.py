# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory consumer store and record source for unit testing.

WARNING: These stores are NOT suitable for production use. State lives in
plain dicts and is lost on process restart.
"""

from __future__ import annotations

from uuid import UUID

from secretsync.errors import (
    ConsumerStoreAlreadyExistsError,
    ConsumerStoreError,
    ConsumerStoreNotFoundError,
    RecordNotFoundError,
    SecretSyncError,
)
from secretsync.models import ModelRecordIdentity, ModelSecretRecord, ModelTargetSecret

SecretKey = tuple[str, str]


class InMemoryConsumerStore:
    """Dict-backed consumer store with write counters.

    Failures can be injected per operation with ``fail_on``.

    Example:
        >>> store = InMemoryConsumerStore()
        >>> await store.create(secret)
        >>> store.write_count
        1
    """

    def __init__(self) -> None:
        self._secrets: dict[SecretKey, ModelTargetSecret] = {}
        self._failures: dict[str, SecretSyncError] = {}
        self.create_count = 0
        self.update_count = 0
        self.delete_count = 0

    @property
    def write_count(self) -> int:
        """Creates plus updates."""
        return self.create_count + self.update_count

    @property
    def secrets(self) -> dict[SecretKey, ModelTargetSecret]:
        return dict(self._secrets)

    def fail_on(self, operation: str, error: SecretSyncError | None = None) -> None:
        """Make every call of ``operation`` raise (ConsumerStoreError by default)."""
        self._failures[operation] = error or ConsumerStoreError(
            f"Injected {operation} failure"
        )

    def clear_failures(self) -> None:
        self._failures.clear()

    def put(self, secret: ModelTargetSecret) -> None:
        """Seed a secret without counting a write."""
        self._secrets[(secret.namespace, secret.name)] = secret

    def _maybe_fail(self, operation: str) -> None:
        error = self._failures.get(operation)
        if error is not None:
            raise error

    async def get(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> ModelTargetSecret:
        self._maybe_fail("get")
        try:
            return self._secrets[(namespace, name)]
        except KeyError:
            raise ConsumerStoreNotFoundError(
                f"Secret {namespace}/{name} not found"
            ) from None

    async def create(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        self._maybe_fail("create")
        key = (secret.namespace, secret.name)
        if key in self._secrets:
            raise ConsumerStoreAlreadyExistsError(
                f"Secret {secret.namespace}/{secret.name} already exists"
            )
        self._secrets[key] = secret
        self.create_count += 1

    async def update(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        self._maybe_fail("update")
        key = (secret.namespace, secret.name)
        if key not in self._secrets:
            raise ConsumerStoreNotFoundError(
                f"Secret {secret.namespace}/{secret.name} not found"
            )
        self._secrets[key] = secret
        self.update_count += 1

    async def delete(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> None:
        self._maybe_fail("delete")
        if self._secrets.pop((namespace, name), None) is None:
            raise ConsumerStoreNotFoundError(f"Secret {namespace}/{name} not found")
        self.delete_count += 1


class InMemoryRecordSource:
    """Dict-backed record source.

    Like the cluster API, a record marked for deletion disappears once an
    update leaves it without finalizers.
    """

    def __init__(self, records: list[ModelSecretRecord] | None = None) -> None:
        self._records: dict[ModelRecordIdentity, ModelSecretRecord] = {}
        self._version = 0
        self.update_count = 0
        for record in records or []:
            self.put(record)

    def put(self, record: ModelSecretRecord) -> ModelSecretRecord:
        """Store a record without counting an update."""
        self._version += 1
        stored = record.model_copy(update={"resource_version": str(self._version)})
        self._records[record.identity] = stored
        return stored

    def mark_for_deletion(self, identity: ModelRecordIdentity) -> None:
        record = self._records[identity]
        if not record.finalizers:
            del self._records[identity]
            return
        self.put(record.model_copy(update={"deletion_requested": True}))

    def contains(self, identity: ModelRecordIdentity) -> bool:
        return identity in self._records

    async def get(
        self, identity: ModelRecordIdentity, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        try:
            return self._records[identity]
        except KeyError:
            raise RecordNotFoundError(f"Record {identity} not found") from None

    async def update(
        self, record: ModelSecretRecord, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        if record.identity not in self._records:
            raise RecordNotFoundError(f"Record {record.identity} not found")
        self.update_count += 1
        if record.deletion_requested and not record.finalizers:
            del self._records[record.identity]
            return record
        return self.put(record)


__all__ = ["InMemoryConsumerStore", "InMemoryRecordSource"]
