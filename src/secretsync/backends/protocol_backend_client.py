# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for secret backend clients."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class ProtocolBackendClient(Protocol):
    """Read access to a secret-of-truth backend.

    Implementations:
        - VaultBackendClient: token session with background renewal
        - AzureKeyVaultBackendClient: short-lived managed credentials

    Concurrency Safety:
        read_secret may be called concurrently from several reconcile
        passes. Reads never trigger session renewal.
    """

    async def read_secret(
        self, path: str, key: str, correlation_id: UUID | None = None
    ) -> str:
        """Read one raw secret value.

        Args:
            path: Backend secret path
            key: Key inside the secret; backends may ignore or default it
            correlation_id: Correlation ID for tracing

        Returns:
            The raw (still encoded) value.

        Raises:
            BackendSecretNotFoundError: No secret at path, or no such key.
            UnknownBackendError: Any other backend failure.
        """
        ...

    async def close(self) -> None:
        """Release connections and worker threads."""
        ...


__all__ = ["ProtocolBackendClient"]
