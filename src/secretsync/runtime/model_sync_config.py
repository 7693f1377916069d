# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Synchronization Engine Configuration Model.

Top-level configuration consumed by SecretSyncEngine. Values are resolved
by the caller (flags, environment, YAML); this module only validates them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from secretsync.backends.model_azure_kv_backend_config import (
    ModelAzureKeyVaultBackendConfig,
)
from secretsync.backends.model_vault_backend_config import ModelVaultBackendConfig
from secretsync.enums import EnumBackendKind


class ModelRecordSourceConfig(BaseModel):
    """Where managed secret records are stored in the cluster."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str = Field(default="secretsync.io", description="Custom resource API group")
    version: str = Field(default="v1alpha1", description="Custom resource API version")
    plural: str = Field(
        default="secretdefinitions", description="Custom resource plural name"
    )


class ModelSecretSyncConfig(BaseModel):
    """Configuration for the secret synchronization engine.

    Attributes:
        backend: Backend kind ("vault" or "azure-kv"); unknown kinds are
            rejected when the backend client is built
        vault: Vault backend configuration, required for "vault"
        azure_kv: Azure Key Vault configuration, required for "azure-kv"
        reconcile_period_seconds: Requeue delay after a successful sync
        watch_namespaces: Only these namespaces are synced when non-empty
        exclude_namespaces: Namespaces never synced
        consumer_store_timeout_seconds: Timeout for consumer store calls
        record_source: Custom resource coordinates of managed records

    Example:
        >>> config = ModelSecretSyncConfig.model_validate(
        ...     {
        ...         "backend": "vault",
        ...         "vault": {"url": "https://vault:8200", "role_id": "r", "secret_id": "s"},
        ...         "exclude_namespaces": ["kube-system"],
        ...     }
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: str = Field(
        default=EnumBackendKind.VAULT.value,
        description="Secret backend kind",
    )
    vault: ModelVaultBackendConfig | None = Field(
        default=None,
        description="Vault backend configuration",
    )
    azure_kv: ModelAzureKeyVaultBackendConfig | None = Field(
        default=None,
        description="Azure Key Vault backend configuration",
    )
    reconcile_period_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds before a synced record is reconciled again",
    )
    watch_namespaces: frozenset[str] = Field(
        default_factory=frozenset,
        description="Namespaces to sync (all when empty)",
    )
    exclude_namespaces: frozenset[str] = Field(
        default_factory=frozenset,
        description="Namespaces never synced",
    )
    consumer_store_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=300.0,
        description="Timeout for consumer store and record source calls",
    )
    record_source: ModelRecordSourceConfig = Field(
        default_factory=ModelRecordSourceConfig,
        description="Custom resource coordinates of managed records",
    )

    @field_validator("watch_namespaces", "exclude_namespaces", mode="before")
    @classmethod
    def _split_namespaces(cls, value: object) -> object:
        # Accept the comma separated form used on command lines.
        if isinstance(value, str):
            return frozenset(ns.strip() for ns in value.split(",") if ns.strip())
        return value

    @model_validator(mode="after")
    def _check_backend_section(self) -> ModelSecretSyncConfig:
        if self.backend == EnumBackendKind.VAULT.value and self.vault is None:
            raise ValueError("backend 'vault' requires a 'vault' section")
        if self.backend == EnumBackendKind.AZURE_KV.value and self.azure_kv is None:
            raise ValueError("backend 'azure-kv' requires an 'azure_kv' section")
        return self


__all__: list[str] = ["ModelRecordSourceConfig", "ModelSecretSyncConfig"]
