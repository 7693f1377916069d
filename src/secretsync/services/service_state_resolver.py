# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Desired and current state resolution.

Desired state is what the backend says a target secret should contain;
current state is what the consumer store holds right now. Both are plain
``dict[str, bytes]`` maps so the reconciler can compare them directly.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from secretsync.backends.decoder import Decoder, resolve_decoder
from secretsync.backends.protocol_backend_client import ProtocolBackendClient
from secretsync.errors import ConsumerStoreNotFoundError, SecretSyncError
from secretsync.models import ModelSecretRecord
from secretsync.stores.protocol_consumer_store import ProtocolConsumerStore

logger = logging.getLogger(__name__)


class SecretStateResolver:
    """Builds desired and current byte-maps for a record."""

    def __init__(
        self, backend: ProtocolBackendClient, store: ProtocolConsumerStore
    ) -> None:
        self._backend = backend
        self._store = store

    async def desired_state(
        self, record: ModelSecretRecord, correlation_id: UUID | None = None
    ) -> dict[str, bytes]:
        """Read and decode every data source of ``record``.

        Encodings are resolved before any backend read, so a record naming
        an unknown encoding fails without touching the backend. The first
        failure aborts the whole resolution.

        Returns:
            One entry per logical key of the record.

        Raises:
            UnsupportedEncodingError: A data source names an unknown encoding.
            BackendSecretNotFoundError: A path or key is absent.
            DecodeError: A value is invalid for its encoding.
            UnknownBackendError: Any other backend failure.
        """
        correlation_id = correlation_id or uuid4()
        decoders: dict[str, Decoder] = {
            logical_key: resolve_decoder(source.encoding)
            for logical_key, source in record.keys_map.items()
        }

        desired: dict[str, bytes] = {}
        for logical_key, source in record.keys_map.items():
            try:
                raw = await self._backend.read_secret(
                    source.path, source.key, correlation_id
                )
                desired[logical_key] = decoders[logical_key].decode(raw)
            except SecretSyncError as e:
                logger.error(
                    "Unable to resolve secret value",
                    extra={
                        "record": str(record.identity),
                        "logical_key": logical_key,
                        "path": source.path,
                        "key": source.key,
                        "encoding": source.encoding,
                        "error_code": e.error_code.value,
                        "correlation_id": str(correlation_id),
                    },
                )
                raise
        return desired

    async def current_state(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> dict[str, bytes] | None:
        """Data of the target secret; None when it does not exist.

        An absent target compares as empty, but the caller still has to
        create it so that a record with no keys yields an empty secret.

        Raises:
            ConsumerStoreError: The store could not be read.
        """
        try:
            secret = await self._store.get(namespace, name, correlation_id)
        except ConsumerStoreNotFoundError:
            return None
        return dict(secret.data)


__all__ = ["SecretStateResolver"]
