# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Synchronization Error Context Model.

Bundles the structured fields shared by every synchronization error so
error constructors stay small while remaining strongly typed.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from secretsync.enums import EnumSyncTransportType


class ModelSyncErrorContext(BaseModel):
    """Structured context attached to synchronization errors.

    Attributes:
        transport_type: Remote system the failing operation talked to
        operation: Operation being performed (login, read_secret, upsert, ...)
        target_name: Target resource name (secret path, store object, ...)
        correlation_id: Correlation ID for tracing a reconcile pass

    Example:
        >>> context = ModelSyncErrorContext(
        ...     transport_type=EnumSyncTransportType.BACKEND,
        ...     operation="read_secret",
        ...     target_name="secret/data/db",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise UnknownBackendError("Backend read failed", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transport_type: EnumSyncTransportType | None = Field(
        default=None,
        description="Remote system the failing operation talked to",
    )
    operation: str | None = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: str | None = Field(
        default=None,
        description="Target resource name",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Correlation ID for distributed tracing",
    )


__all__ = ["ModelSyncErrorContext"]
