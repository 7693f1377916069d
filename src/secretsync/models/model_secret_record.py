# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Managed secret record model (desired-state declaration)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from secretsync.models.model_data_source import ModelDataSource
from secretsync.models.model_record_identity import ModelRecordIdentity

DEFAULT_TARGET_TYPE = "Opaque"


class ModelSecretRecord(BaseModel):
    """Declares which backend values make up one target secret.

    Attributes:
        namespace: Namespace of the record, and of its target secret
        name: Record name
        target_name: Name of the target secret in the consumer store
        target_type: Target secret type (default "Opaque")
        keys_map: Logical key -> data source; an empty map yields an empty secret
        deletion_requested: True once the record is marked for deletion
        finalizers: Persisted finalizer list
        resource_version: Store version used for optimistic concurrency

    Example:
        >>> record = ModelSecretRecord(
        ...     namespace="default",
        ...     name="s1",
        ...     target_name="s1",
        ...     keys_map={"foo": ModelDataSource(path="kv/a", key="v", encoding="base64")},
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: str = Field(min_length=1)
    name: str = Field(min_length=1)
    target_name: str = Field(min_length=1)
    target_type: str = Field(default=DEFAULT_TARGET_TYPE)
    keys_map: dict[str, ModelDataSource] = Field(default_factory=dict)
    deletion_requested: bool = Field(default=False)
    finalizers: list[str] = Field(default_factory=list)
    resource_version: str | None = Field(default=None)

    @property
    def identity(self) -> ModelRecordIdentity:
        return ModelRecordIdentity(namespace=self.namespace, name=self.name)

    def with_finalizers(self, finalizers: list[str]) -> ModelSecretRecord:
        """Copy of this record with a new finalizer list."""
        return self.model_copy(update={"finalizers": list(finalizers)})


__all__ = ["DEFAULT_TARGET_TYPE", "ModelSecretRecord"]
