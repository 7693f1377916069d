# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Azure Key Vault Backend Configuration Model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

AZURE_KV_DNS_SUFFIX = "vault.azure.net"


class ModelAzureKeyVaultBackendConfig(BaseModel):
    """Configuration for the managed-credential Azure Key Vault backend.

    Credentials are tried in order: managed identity (by client ID, by
    resource ID, or the default one), the environment service principal,
    then the static client secret when all of tenant_id, client_id and
    client_secret are set.

    Attributes:
        keyvault_name: Key Vault name, used to build the vault URL
        vault_url: Explicit vault URL, overrides keyvault_name
        tenant_id: Azure AD tenant for the client secret credential
        client_id: Service principal application ID
        client_secret: Service principal secret (SecretStr)
        managed_client_id: Client ID of a user-assigned managed identity
        managed_resource_id: Resource ID of a user-assigned managed identity
        timeout_seconds: Per-call timeout in seconds
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    keyvault_name: str = Field(
        min_length=1,
        description="Azure Key Vault name",
    )
    vault_url: str | None = Field(
        default=None,
        description="Explicit vault URL (defaults to https://<name>.vault.azure.net)",
    )
    tenant_id: str | None = Field(
        default=None,
        description="Azure AD tenant ID",
    )
    client_id: str | None = Field(
        default=None,
        description="Service principal client ID",
    )
    client_secret: SecretStr | None = Field(
        default=None,
        description="Service principal client secret (SecretStr for security)",
    )
    managed_client_id: str | None = Field(
        default=None,
        description="User-assigned managed identity client ID",
    )
    managed_resource_id: str | None = Field(
        default=None,
        description="User-assigned managed identity resource ID",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=300.0,
        description="Timeout for every Key Vault call in seconds",
    )
    max_concurrent_operations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent Key Vault operations (thread pool size)",
    )

    @property
    def resolved_vault_url(self) -> str:
        """Vault URL used by the secret client."""
        if self.vault_url:
            return self.vault_url
        return f"https://{self.keyvault_name}.{AZURE_KV_DNS_SUFFIX}"

    @property
    def has_client_secret(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)


__all__: list[str] = ["AZURE_KV_DNS_SUFFIX", "ModelAzureKeyVaultBackendConfig"]
