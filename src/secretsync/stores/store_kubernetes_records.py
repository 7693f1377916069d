# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Record source backed by SecretDefinition custom resources.

Resource layout:
    metadata.finalizers, metadata.deletionTimestamp, metadata.resourceVersion
    spec.name       target secret name
    spec.type       target secret type (default Opaque)
    spec.keysMap    logical key -> {path, key, encoding}

Finalizer updates are sent as merge patches carrying the resourceVersion
that was read, so a concurrent writer makes the update fail with a
conflict instead of being overwritten.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar
from uuid import UUID, uuid4

from kubernetes.client import CustomObjectsApi
from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from secretsync.enums import EnumSyncTransportType
from secretsync.errors import ModelSyncErrorContext, RecordNotFoundError, RecordSourceError
from secretsync.models import (
    DEFAULT_TARGET_TYPE,
    ModelDataSource,
    ModelRecordIdentity,
    ModelSecretRecord,
)
from secretsync.runtime.model_sync_config import ModelRecordSourceConfig

T = TypeVar("T")

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


def record_from_resource(resource: Mapping[str, Any]) -> ModelSecretRecord:
    """Build a record from a custom resource dict.

    Raises:
        ValidationError: If the resource does not describe a valid record.
    """
    metadata = resource.get("metadata") or {}
    spec = resource.get("spec") or {}
    keys_map = {
        key: ModelDataSource(
            path=source.get("path", ""),
            key=source.get("key", ""),
            encoding=source.get("encoding", ""),
        )
        for key, source in (spec.get("keysMap") or {}).items()
    }
    return ModelSecretRecord(
        namespace=metadata.get("namespace", ""),
        name=metadata.get("name", ""),
        target_name=spec.get("name", ""),
        target_type=spec.get("type") or DEFAULT_TARGET_TYPE,
        keys_map=keys_map,
        deletion_requested=metadata.get("deletionTimestamp") is not None,
        finalizers=list(metadata.get("finalizers") or []),
        resource_version=metadata.get("resourceVersion"),
    )


class KubernetesRecordSource:
    """ProtocolRecordSource implementation on CustomObjectsApi."""

    def __init__(
        self,
        custom_api: CustomObjectsApi,
        config: ModelRecordSourceConfig | None = None,
        timeout_seconds: float = 5.0,
        max_workers: int = 4,
    ) -> None:
        self._api = custom_api
        self._config = config or ModelRecordSourceConfig()
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="k8s_record_source_",
        )

    async def _call(
        self,
        operation: str,
        identity: ModelRecordIdentity,
        func: Callable[[], T],
        correlation_id: UUID | None,
    ) -> T:
        ctx = ModelSyncErrorContext(
            transport_type=EnumSyncTransportType.RECORD_SOURCE,
            operation=operation,
            target_name=str(identity),
            correlation_id=correlation_id or uuid4(),
        )
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, func),
                timeout=self._timeout_seconds,
            )
        except ApiException as e:
            if e.status == HTTP_NOT_FOUND:
                raise RecordNotFoundError(
                    f"Record {identity} not found", context=ctx
                ) from e
            raise RecordSourceError(
                f"Kubernetes API error on record {identity}",
                context=ctx,
                status=e.status,
                reason=e.reason,
            ) from e
        except Exception as e:
            raise RecordSourceError(
                f"Kubernetes call failed on record {identity}",
                context=ctx,
                error_type=type(e).__name__,
            ) from e

    def _parse(self, resource: Mapping[str, Any], identity: ModelRecordIdentity) -> ModelSecretRecord:
        try:
            return record_from_resource(resource)
        except ValidationError as e:
            raise RecordSourceError(
                f"Record {identity} is malformed",
                context=ModelSyncErrorContext(
                    transport_type=EnumSyncTransportType.RECORD_SOURCE,
                    operation="parse",
                    target_name=str(identity),
                ),
            ) from e

    async def get(
        self, identity: ModelRecordIdentity, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        resource = await self._call(
            "get",
            identity,
            lambda: self._api.get_namespaced_custom_object(
                group=self._config.group,
                version=self._config.version,
                namespace=identity.namespace,
                plural=self._config.plural,
                name=identity.name,
            ),
            correlation_id,
        )
        return self._parse(resource, identity)

    async def update(
        self, record: ModelSecretRecord, correlation_id: UUID | None = None
    ) -> ModelSecretRecord:
        identity = record.identity
        metadata: dict[str, object] = {"finalizers": list(record.finalizers)}
        if record.resource_version is not None:
            metadata["resourceVersion"] = record.resource_version
        resource = await self._call(
            "update",
            identity,
            lambda: self._api.patch_namespaced_custom_object(
                group=self._config.group,
                version=self._config.version,
                namespace=identity.namespace,
                plural=self._config.plural,
                name=identity.name,
                body={"metadata": metadata},
            ),
            correlation_id,
        )
        return self._parse(resource, identity)

    async def close(self) -> None:
        self._executor.shutdown(wait=False)


__all__ = ["KubernetesRecordSource", "record_from_resource"]
