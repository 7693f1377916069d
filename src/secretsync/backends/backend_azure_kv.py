# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Azure Key Vault backend client with managed credentials.

There is no session to keep alive: azure-identity hands out short-lived
access tokens and refreshes them on demand. The client only decides which
credential to use, once, at construction.

Credential priority:
    1. Managed identity, selected by client ID, else by resource ID, else
       the default identity of the host
    2. Service principal from environment variables (AZURE_TENANT_ID,
       AZURE_CLIENT_ID, AZURE_CLIENT_SECRET, ...)
    3. Static service principal from configuration, when complete

Key Vault secrets hold a single value, so the ``key`` argument of
read_secret is ignored.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar
from uuid import UUID, uuid4

from azure.core.credentials import TokenCredential
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.identity import (
    ChainedTokenCredential,
    ClientSecretCredential,
    EnvironmentCredential,
    ManagedIdentityCredential,
)
from azure.keyvault.secrets import SecretClient

from secretsync.backends.model_azure_kv_backend_config import (
    ModelAzureKeyVaultBackendConfig,
)
from secretsync.enums import EnumBackendKind, EnumSyncTransportType
from secretsync.errors import (
    AuthenticationFailedError,
    BackendSecretForbiddenError,
    BackendSecretNotFoundError,
    ModelSyncErrorContext,
    SecretSyncError,
    UnknownBackendError,
)
from secretsync.observability import NoopMetricsSink, ProtocolMetricsSink

T = TypeVar("T")

logger = logging.getLogger(__name__)

KEY_VAULT_SCOPE = "https://vault.azure.net/.default"

HTTP_FORBIDDEN = 403


def build_credential_chain(
    config: ModelAzureKeyVaultBackendConfig,
) -> list[TokenCredential]:
    """Credentials to try, highest priority first."""
    if config.managed_client_id:
        managed = ManagedIdentityCredential(client_id=config.managed_client_id)
    elif config.managed_resource_id:
        managed = ManagedIdentityCredential(
            identity_config={"mi_res_id": config.managed_resource_id}
        )
    else:
        managed = ManagedIdentityCredential()

    chain: list[TokenCredential] = [managed, EnvironmentCredential()]
    if config.has_client_secret and config.client_secret is not None:
        chain.append(
            ClientSecretCredential(
                tenant_id=config.tenant_id,
                client_id=config.client_id,
                client_secret=config.client_secret.get_secret_value(),
            )
        )
    return chain


class AzureKeyVaultBackendClient:
    """Managed-credential backend client for Azure Key Vault.

    Use ``await AzureKeyVaultBackendClient.create(config)``; it probes the
    credential chain and fails with AuthenticationFailedError when no
    credential can obtain a Key Vault token.
    """

    def __init__(
        self,
        config: ModelAzureKeyVaultBackendConfig,
        metrics: ProtocolMetricsSink | None = None,
    ) -> None:
        self._config = config
        self._metrics: ProtocolMetricsSink = metrics or NoopMetricsSink()
        self._credential = ChainedTokenCredential(*build_credential_chain(config))
        self._client = SecretClient(
            vault_url=config.resolved_vault_url,
            credential=self._credential,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_concurrent_operations,
            thread_name_prefix="azure_kv_backend_",
        )
        self._metric_labels: dict[str, str] = {
            "azure_kv_name": config.keyvault_name,
            "azure_kv_tenant": config.tenant_id or "",
        }

    @classmethod
    async def create(
        cls,
        config: ModelAzureKeyVaultBackendConfig,
        metrics: ProtocolMetricsSink | None = None,
        correlation_id: UUID | None = None,
    ) -> AzureKeyVaultBackendClient:
        """Build a client and verify a credential can be obtained.

        Raises:
            AuthenticationFailedError: No credential in the chain succeeded.
        """
        client = cls(config, metrics)
        try:
            await client.authenticate(correlation_id)
        except Exception:
            await client.close()
            raise
        return client

    @property
    def metric_labels(self) -> dict[str, str]:
        return dict(self._metric_labels)

    def _error_context(
        self, operation: str, correlation_id: UUID, target_name: str | None = None
    ) -> ModelSyncErrorContext:
        return ModelSyncErrorContext(
            transport_type=EnumSyncTransportType.BACKEND,
            operation=operation,
            target_name=target_name or self._config.keyvault_name,
            correlation_id=correlation_id,
        )

    async def _execute(self, func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(self._executor, func),
            timeout=self._config.timeout_seconds,
        )

    async def authenticate(self, correlation_id: UUID | None = None) -> None:
        """Obtain a Key Vault token from the credential chain."""
        correlation_id = correlation_id or uuid4()
        try:
            await self._execute(lambda: self._credential.get_token(KEY_VAULT_SCOPE))
        except Exception as e:
            self._metrics.record_login_error(
                EnumBackendKind.AZURE_KV, self._metric_labels
            )
            logger.error(
                "Error occurred while authenticating to Azure",
                extra={
                    "azure_kv_name": self._config.keyvault_name,
                    "error_type": type(e).__name__,
                    "correlation_id": str(correlation_id),
                },
            )
            raise AuthenticationFailedError(
                "No Azure credential could obtain a Key Vault token",
                context=self._error_context("login", correlation_id),
            ) from e

        logger.info(
            "Successfully logged into Azure Key Vault",
            extra={
                "azure_kv_name": self._config.keyvault_name,
                "azure_kv_tenant": self._config.tenant_id,
                "correlation_id": str(correlation_id),
            },
        )

    def _record_read_error(self, path: str, error: SecretSyncError) -> None:
        self._metrics.record_backend_read_error(
            EnumBackendKind.AZURE_KV, path, "", error.error_code.value, self._metric_labels
        )

    async def read_secret(
        self, path: str, key: str, correlation_id: UUID | None = None
    ) -> str:
        """Read the current version of secret ``path``; ``key`` is ignored.

        Raises:
            BackendSecretNotFoundError: No such secret.
            BackendSecretForbiddenError: Access denied by Key Vault policy.
            UnknownBackendError: Any other failure, timeouts included.
        """
        correlation_id = correlation_id or uuid4()
        ctx = self._error_context("read_secret", correlation_id, path)
        try:
            secret = await self._execute(lambda: self._client.get_secret(path))
        except ResourceNotFoundError as e:
            error: SecretSyncError = BackendSecretNotFoundError(path, key, context=ctx)
            self._record_read_error(path, error)
            raise error from e
        except HttpResponseError as e:
            if e.status_code == HTTP_FORBIDDEN:
                error = BackendSecretForbiddenError(
                    f"Permission denied reading secret '{path}'", context=ctx
                )
            else:
                error = UnknownBackendError(
                    f"Azure Key Vault read failed for '{path}'",
                    context=ctx,
                    status_code=e.status_code,
                )
            self._record_read_error(path, error)
            raise error from e
        except Exception as e:
            error = UnknownBackendError(
                f"Azure Key Vault read failed for '{path}'",
                context=ctx,
                error_type=type(e).__name__,
            )
            self._record_read_error(path, error)
            raise error from e

        if secret.value is None:
            error = BackendSecretNotFoundError(path, key, context=ctx)
            self._record_read_error(path, error)
            raise error
        return secret.value

    def describe(self) -> dict[str, object]:
        return {
            "backend": EnumBackendKind.AZURE_KV.value,
            "vault_url": self._config.resolved_vault_url,
            "azure_kv_tenant": self._config.tenant_id,
        }

    async def close(self) -> None:
        self._client.close()
        self._credential.close()
        self._executor.shutdown(wait=False)


__all__ = [
    "KEY_VAULT_SCOPE",
    "AzureKeyVaultBackendClient",
    "build_credential_chain",
]
