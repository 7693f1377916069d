# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Backend Configuration Model.

Security Note:
    Credential material (secret ID) uses SecretStr to prevent accidental
    logging. It should come from the environment or a mounted file, never
    from a committed configuration file.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from secretsync.enums import EnumVaultAuthMethod

DEFAULT_KUBERNETES_JWT_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class ModelVaultBackendConfig(BaseModel):
    """Configuration for the token-session Vault backend.

    Attributes:
        url: Vault server URL (e.g., "https://vault.example.com:8200")
        engine: KV engine version, "kv1" or "kv2" (default "kv2")
        auth_method: Login method, approle or kubernetes
        role_id: AppRole role ID
        secret_id: AppRole secret ID (SecretStr)
        approle_path: AppRole auth mount path
        kubernetes_role: Vault role bound to the service account
        kubernetes_path: Kubernetes auth mount path
        kubernetes_jwt_path: File holding the service account JWT
        namespace: Vault namespace for Vault Enterprise
        verify_ssl: Whether to verify SSL certificates
        timeout_seconds: Per-call timeout in seconds
        max_token_ttl: Renew the token once its TTL drops below this
        token_polling_period_seconds: Interval between renewal ticks
        renew_ttl_increment: TTL increment requested on renewal

    Example:
        >>> config = ModelVaultBackendConfig(
        ...     url="https://vault.example.com:8200",
        ...     role_id="my-role",
        ...     secret_id=SecretStr("my-secret"),
        ... )
        >>> print(config.secret_id)
        **********
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    url: str = Field(
        description="Vault server URL (e.g., 'https://vault.example.com:8200')",
    )
    engine: str = Field(
        default="kv2",
        description="KV secret engine version (kv1 or kv2)",
    )
    auth_method: EnumVaultAuthMethod = Field(
        default=EnumVaultAuthMethod.APPROLE,
        description="Vault login method",
    )
    role_id: str | None = Field(
        default=None,
        description="AppRole role ID",
    )
    secret_id: SecretStr | None = Field(
        default=None,
        description="AppRole secret ID (SecretStr for security)",
    )
    approle_path: str = Field(
        default="approle",
        min_length=1,
        description="AppRole auth method mount path",
    )
    kubernetes_role: str | None = Field(
        default=None,
        description="Vault role for Kubernetes service account login",
    )
    kubernetes_path: str = Field(
        default="kubernetes",
        min_length=1,
        description="Kubernetes auth method mount path",
    )
    kubernetes_jwt_path: str = Field(
        default=DEFAULT_KUBERNETES_JWT_PATH,
        description="Path of the service account JWT used for Kubernetes login",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault namespace for Vault Enterprise",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=300.0,
        description="Timeout for every Vault call in seconds",
    )
    max_token_ttl: int = Field(
        default=300,
        ge=0,
        description="Renew the token when its TTL drops below this many seconds",
    )
    token_polling_period_seconds: float = Field(
        default=15.0,
        gt=0.0,
        description="Seconds between token renewal checks",
    )
    renew_ttl_increment: int = Field(
        default=600,
        ge=1,
        description="TTL increment in seconds requested on renewal",
    )
    max_concurrent_operations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent Vault operations (thread pool size)",
    )
    circuit_breaker_enabled: bool = Field(
        default=True,
        description="Enable circuit breaker around secret reads",
    )
    circuit_breaker_failure_threshold: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Number of consecutive failures before opening circuit",
    )
    circuit_breaker_reset_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Seconds to wait before attempting to close opened circuit",
    )

    @model_validator(mode="after")
    def _check_credentials(self) -> ModelVaultBackendConfig:
        if self.auth_method == EnumVaultAuthMethod.APPROLE:
            if not self.role_id or self.secret_id is None:
                raise ValueError("approle login requires role_id and secret_id")
        elif not self.kubernetes_role:
            raise ValueError("kubernetes login requires kubernetes_role")
        return self


__all__: list[str] = ["DEFAULT_KUBERNETES_JWT_PATH", "ModelVaultBackendConfig"]
