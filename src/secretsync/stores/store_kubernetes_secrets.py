# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Consumer store backed by Kubernetes Secret objects.

The kubernetes client is synchronous; calls run on a bounded thread pool
and are bounded by ``asyncio.wait_for``. Secret data travels base64
encoded on the wire and is exposed as raw bytes.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar
from uuid import UUID, uuid4

from kubernetes.client import CoreV1Api, V1ObjectMeta, V1Secret
from kubernetes.client.exceptions import ApiException

from secretsync.enums import EnumSyncTransportType
from secretsync.errors import (
    ConsumerStoreAlreadyExistsError,
    ConsumerStoreError,
    ConsumerStoreNotFoundError,
    ModelSyncErrorContext,
)
from secretsync.models import ModelTargetSecret

T = TypeVar("T")

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def encode_secret_data(data: dict[str, bytes]) -> dict[str, str]:
    return {key: base64.b64encode(value).decode("ascii") for key, value in data.items()}


def decode_secret_data(data: dict[str, str] | None) -> dict[str, bytes]:
    return {key: base64.b64decode(value) for key, value in (data or {}).items()}


class KubernetesSecretStore:
    """ProtocolConsumerStore implementation on CoreV1Api."""

    def __init__(
        self,
        core_api: CoreV1Api,
        timeout_seconds: float = 5.0,
        max_workers: int = 4,
    ) -> None:
        self._api = core_api
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="k8s_secret_store_",
        )

    async def _execute(self, func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(self._executor, func),
            timeout=self._timeout_seconds,
        )

    def _context(
        self, operation: str, namespace: str, name: str, correlation_id: UUID | None
    ) -> ModelSyncErrorContext:
        return ModelSyncErrorContext(
            transport_type=EnumSyncTransportType.CONSUMER_STORE,
            operation=operation,
            target_name=f"{namespace}/{name}",
            correlation_id=correlation_id or uuid4(),
        )

    async def _call(
        self,
        operation: str,
        namespace: str,
        name: str,
        func: Callable[[], T],
        correlation_id: UUID | None,
    ) -> T:
        """Run an API call and translate its failures."""
        ctx = self._context(operation, namespace, name, correlation_id)
        try:
            return await self._execute(func)
        except ApiException as e:
            if e.status == HTTP_NOT_FOUND:
                raise ConsumerStoreNotFoundError(
                    f"Secret {namespace}/{name} not found", context=ctx
                ) from e
            if e.status == HTTP_CONFLICT:
                raise ConsumerStoreAlreadyExistsError(
                    f"Secret {namespace}/{name} already exists", context=ctx
                ) from e
            raise ConsumerStoreError(
                f"Kubernetes API error on secret {namespace}/{name}",
                context=ctx,
                status=e.status,
                reason=e.reason,
            ) from e
        except Exception as e:
            raise ConsumerStoreError(
                f"Kubernetes call failed on secret {namespace}/{name}",
                context=ctx,
                error_type=type(e).__name__,
            ) from e

    def _to_body(self, secret: ModelTargetSecret) -> V1Secret:
        return V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=V1ObjectMeta(
                name=secret.name,
                namespace=secret.namespace,
                labels=dict(secret.labels),
                annotations=dict(secret.annotations) or None,
            ),
            type=secret.secret_type,
            data=encode_secret_data(secret.data),
        )

    async def get(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> ModelTargetSecret:
        result = await self._call(
            "get",
            namespace,
            name,
            lambda: self._api.read_namespaced_secret(name=name, namespace=namespace),
            correlation_id,
        )
        metadata = result.metadata
        return ModelTargetSecret(
            namespace=namespace,
            name=name,
            secret_type=result.type or "Opaque",
            data=decode_secret_data(result.data),
            labels=dict(metadata.labels or {}) if metadata else {},
            annotations=dict(metadata.annotations or {}) if metadata else {},
        )

    async def create(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        body = self._to_body(secret)
        await self._call(
            "create",
            secret.namespace,
            secret.name,
            lambda: self._api.create_namespaced_secret(
                namespace=secret.namespace, body=body
            ),
            correlation_id,
        )
        logger.debug(
            "Secret created",
            extra={"secret": f"{secret.namespace}/{secret.name}"},
        )

    async def update(
        self, secret: ModelTargetSecret, correlation_id: UUID | None = None
    ) -> None:
        body = self._to_body(secret)
        await self._call(
            "update",
            secret.namespace,
            secret.name,
            lambda: self._api.replace_namespaced_secret(
                name=secret.name, namespace=secret.namespace, body=body
            ),
            correlation_id,
        )
        logger.debug(
            "Secret updated",
            extra={"secret": f"{secret.namespace}/{secret.name}"},
        )

    async def delete(
        self, namespace: str, name: str, correlation_id: UUID | None = None
    ) -> None:
        await self._call(
            "delete",
            namespace,
            name,
            lambda: self._api.delete_namespaced_secret(name=name, namespace=namespace),
            correlation_id,
        )

    async def close(self) -> None:
        self._executor.shutdown(wait=False)


__all__ = [
    "KubernetesSecretStore",
    "decode_secret_data",
    "encode_secret_data",
]
