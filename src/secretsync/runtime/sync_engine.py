# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Synchronization Engine.

Wires a backend client, the state resolver and the reconciler together and
owns their lifecycle.

Concurrency:
    - Reconcile passes for different records may run concurrently; passes
      for the same record are serialized by a per-record lock. A lock
      lives only while a pass for its record is running or waiting.
    - Each pass runs in its own task shielded from caller cancellation, so
      a pass is never interrupted halfway through a write.
    - shutdown() stops the token renewer at once, then waits for in-flight
      passes to finish before closing the backend client.
"""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID, uuid4

from secretsync.backends.backend_factory import create_backend_client
from secretsync.backends.protocol_backend_client import ProtocolBackendClient
from secretsync.models import ModelReconcileResult, ModelRecordIdentity
from secretsync.observability import NoopMetricsSink, ProtocolMetricsSink
from secretsync.runtime.model_sync_config import ModelSecretSyncConfig
from secretsync.services import SecretRecordReconciler, SecretStateResolver
from secretsync.stores.protocol_consumer_store import ProtocolConsumerStore
from secretsync.stores.protocol_record_source import ProtocolRecordSource

logger = logging.getLogger(__name__)


class SecretSyncEngine:
    """Lifecycle owner for one backend client and its reconciler.

    Example:
        >>> engine = await SecretSyncEngine.create(config, records, store, metrics)
        >>> result = await engine.reconcile(ModelRecordIdentity(namespace="default", name="s1"))
        >>> await engine.shutdown()
    """

    def __init__(
        self,
        config: ModelSecretSyncConfig,
        backend: ProtocolBackendClient,
        record_source: ProtocolRecordSource,
        store: ProtocolConsumerStore,
        metrics: ProtocolMetricsSink | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self._config = config
        self._backend = backend
        self._metrics: ProtocolMetricsSink = metrics or NoopMetricsSink()
        self._stop_event = stop_event or asyncio.Event()
        self._reconciler = SecretRecordReconciler(
            record_source=record_source,
            resolver=SecretStateResolver(backend, store),
            store=store,
            metrics=self._metrics,
            reconcile_period_seconds=config.reconcile_period_seconds,
            watch_namespaces=config.watch_namespaces,
            exclude_namespaces=config.exclude_namespaces,
        )
        self._record_locks: dict[ModelRecordIdentity, asyncio.Lock] = {}
        self._record_lock_users: dict[ModelRecordIdentity, int] = {}
        self._in_flight: set[asyncio.Task[ModelReconcileResult]] = set()
        self._closed = False

    @classmethod
    async def create(
        cls,
        config: ModelSecretSyncConfig,
        record_source: ProtocolRecordSource,
        store: ProtocolConsumerStore,
        metrics: ProtocolMetricsSink | None = None,
        correlation_id: UUID | None = None,
    ) -> SecretSyncEngine:
        """Build the backend client from configuration and wire the engine.

        Raises:
            BackendNotImplementedError: Unknown backend kind.
            AuthenticationFailedError: Backend login failed.
            UnsupportedEngineError: Unknown Vault engine.
        """
        stop_event = asyncio.Event()
        backend = await create_backend_client(
            config, metrics=metrics, stop_event=stop_event, correlation_id=correlation_id
        )
        engine = cls(config, backend, record_source, store, metrics, stop_event)
        logger.info(
            "Secret sync engine started",
            extra={
                "backend": config.backend,
                "reconcile_period_seconds": config.reconcile_period_seconds,
                "watch_namespaces": sorted(config.watch_namespaces),
                "exclude_namespaces": sorted(config.exclude_namespaces),
            },
        )
        return engine

    @property
    def backend(self) -> ProtocolBackendClient:
        return self._backend

    @property
    def reconciler(self) -> SecretRecordReconciler:
        return self._reconciler

    @property
    def is_shutting_down(self) -> bool:
        return self._stop_event.is_set()

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def _reconcile_serialized(
        self, identity: ModelRecordIdentity, correlation_id: UUID
    ) -> ModelReconcileResult:
        lock = self._record_locks.setdefault(identity, asyncio.Lock())
        users = self._record_lock_users.get(identity, 0)
        self._record_lock_users[identity] = users + 1
        try:
            async with lock:
                return await self._reconciler.reconcile(identity, correlation_id)
        finally:
            remaining = self._record_lock_users[identity] - 1
            if remaining:
                self._record_lock_users[identity] = remaining
            else:
                del self._record_lock_users[identity]
                del self._record_locks[identity]

    async def reconcile(
        self, identity: ModelRecordIdentity, correlation_id: UUID | None = None
    ) -> ModelReconcileResult:
        """Reconcile one record.

        After shutdown has begun no new pass is started and the call returns
        without requeue.

        Raises:
            SecretSyncError: The pass failed; ``record`` names the identity.
        """
        if self.is_shutting_down:
            logger.warning(
                "Engine is shutting down, skipping reconcile",
                extra={"record": str(identity)},
            )
            return ModelReconcileResult.done()

        task = asyncio.create_task(
            self._reconcile_serialized(identity, correlation_id or uuid4())
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return await asyncio.shield(task)

    async def shutdown(self, timeout: float = 30.0) -> None:
        """Stop the renewer, drain in-flight passes and close the backend."""
        if self._closed:
            return
        self._stop_event.set()

        pending = set(self._in_flight)
        if pending:
            logger.info(
                "Waiting for in-flight reconciliations",
                extra={"count": len(pending)},
            )
            _, still_running = await asyncio.wait(pending, timeout=timeout)
            if still_running:
                logger.warning(
                    "Reconciliations still running after shutdown timeout",
                    extra={"count": len(still_running)},
                )

        await self._backend.close()
        self._closed = True
        logger.info("Secret sync engine stopped")


__all__ = ["SecretSyncEngine"]
