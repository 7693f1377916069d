# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Backend client factory.

Selects and builds the backend client named by the engine configuration.
Vault clients come back logged in with their token renewer running.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from secretsync.backends.backend_azure_kv import AzureKeyVaultBackendClient
from secretsync.backends.backend_vault import VaultBackendClient
from secretsync.backends.protocol_backend_client import ProtocolBackendClient
from secretsync.enums import EnumBackendKind, EnumSyncTransportType
from secretsync.errors import BackendNotImplementedError, ModelSyncErrorContext
from secretsync.observability import ProtocolMetricsSink

if TYPE_CHECKING:
    from secretsync.runtime.model_sync_config import ModelSecretSyncConfig

logger = logging.getLogger(__name__)


async def create_backend_client(
    config: ModelSecretSyncConfig,
    metrics: ProtocolMetricsSink | None = None,
    stop_event: asyncio.Event | None = None,
    correlation_id: UUID | None = None,
) -> ProtocolBackendClient:
    """Build the configured backend client.

    Args:
        config: Engine configuration
        metrics: Metrics sink passed to the client
        stop_event: Cancellation event for the Vault token renewer
        correlation_id: Correlation ID for tracing

    Raises:
        BackendNotImplementedError: Unknown backend kind.
        AuthenticationFailedError: The backend rejected the login.
        UnsupportedEngineError: Unknown Vault engine.
    """
    correlation_id = correlation_id or uuid4()
    try:
        kind = EnumBackendKind(config.backend)
    except ValueError as e:
        raise BackendNotImplementedError(
            f"Backend '{config.backend}' is not implemented",
            context=ModelSyncErrorContext(
                transport_type=EnumSyncTransportType.BACKEND,
                operation="create_backend_client",
                target_name=config.backend,
                correlation_id=correlation_id,
            ),
            supported=[k.value for k in EnumBackendKind],
        ) from e

    logger.info(
        "Creating backend client",
        extra={"backend": kind.value, "correlation_id": str(correlation_id)},
    )

    if kind == EnumBackendKind.VAULT and config.vault is not None:
        vault = await VaultBackendClient.create(config.vault, metrics, correlation_id)
        vault.start_token_renewer(stop_event)
        return vault
    if kind == EnumBackendKind.AZURE_KV and config.azure_kv is not None:
        return await AzureKeyVaultBackendClient.create(
            config.azure_kv, metrics, correlation_id
        )

    raise BackendNotImplementedError(
        f"Backend '{kind.value}' has no configuration section",
        context=ModelSyncErrorContext(
            transport_type=EnumSyncTransportType.BACKEND,
            operation="create_backend_client",
            target_name=kind.value,
            correlation_id=correlation_id,
        ),
    )


__all__ = ["create_backend_client"]
