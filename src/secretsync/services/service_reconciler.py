# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret record reconciler.

Converges the target secret of one managed record towards the state
declared by the backend.

Algorithm per invocation:
    1. Load the record; a missing record is a successful no-op.
    2. Record not marked for deletion:
       a. Finalizer absent: add it, persist, return (requeue immediately).
       b. Namespace excluded: return without writing or requeueing.
       c. Resolve desired state; any backend or decode error aborts.
       d. Read current state from the consumer store.
       e. Upsert when the target is missing or its data differs.
       f. Requeue after the reconcile period.
    3. Marked for deletion with finalizer: delete the target (missing is
       fine), then remove the finalizer and persist.
    4. Marked for deletion without finalizer: no-op.

Ordering:
    The finalizer is durably stored before any consumer store write and
    removed only after the target delete is confirmed, so a crash at any
    point never orphans a target secret.

Failures raise the underlying SecretSyncError with ``record`` set to the
identity being reconciled, so operators can tell which record and which
remote system (backend or consumer store) failed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from secretsync.errors import (
    ConsumerStoreAlreadyExistsError,
    ConsumerStoreError,
    ConsumerStoreNotFoundError,
    RecordNotFoundError,
    SecretSyncError,
)
from secretsync.models import (
    SECRET_FINALIZER,
    FinalizerSet,
    ModelReconcileResult,
    ModelRecordIdentity,
    ModelSecretRecord,
    ModelTargetSecret,
)
from secretsync.observability import NoopMetricsSink, ProtocolMetricsSink
from secretsync.services.service_state_resolver import SecretStateResolver
from secretsync.stores.protocol_consumer_store import ProtocolConsumerStore
from secretsync.stores.protocol_record_source import ProtocolRecordSource

logger = logging.getLogger(__name__)

LABEL_MANAGED_BY = "managed-by"
LABEL_LAST_UPDATED_AT = "last-updated-at"
MANAGED_BY_VALUE = "secretsync"
ANNOTATION_RECORD = "secretsync.io/record"
# Label values may not contain ':'.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H.%M.%SZ"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SecretRecordReconciler:
    """Reconciles managed secret records into the consumer store.

    Example:
        >>> reconciler = SecretRecordReconciler(
        ...     record_source=records,
        ...     resolver=SecretStateResolver(backend, store),
        ...     store=store,
        ...     reconcile_period_seconds=5.0,
        ...     exclude_namespaces=frozenset({"kube-system"}),
        ... )
        >>> result = await reconciler.reconcile(ModelRecordIdentity(namespace="default", name="s1"))
        >>> result.requeue_after_seconds
        5.0
    """

    def __init__(
        self,
        record_source: ProtocolRecordSource,
        resolver: SecretStateResolver,
        store: ProtocolConsumerStore,
        metrics: ProtocolMetricsSink | None = None,
        reconcile_period_seconds: float = 5.0,
        watch_namespaces: frozenset[str] = frozenset(),
        exclude_namespaces: frozenset[str] = frozenset(),
        finalizer: str = SECRET_FINALIZER,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._records = record_source
        self._resolver = resolver
        self._store = store
        self._metrics: ProtocolMetricsSink = metrics or NoopMetricsSink()
        self._reconcile_period_seconds = reconcile_period_seconds
        self._watch_namespaces = watch_namespaces
        self._exclude_namespaces = exclude_namespaces
        self._finalizer = finalizer
        self._clock = clock

    @property
    def finalizer(self) -> str:
        return self._finalizer

    def is_excluded(self, namespace: str) -> bool:
        """True when records of ``namespace`` must never be synced."""
        if namespace in self._exclude_namespaces:
            return True
        return bool(self._watch_namespaces) and namespace not in self._watch_namespaces

    async def reconcile(
        self, identity: ModelRecordIdentity, correlation_id: UUID | None = None
    ) -> ModelReconcileResult:
        """Run one reconcile pass for ``identity``.

        Raises:
            SecretSyncError: Any failure, with ``record`` set to ``identity``.
        """
        correlation_id = correlation_id or uuid4()
        try:
            return await self._reconcile(identity, correlation_id)
        except SecretSyncError as e:
            e.record = identity
            raise

    async def _reconcile(
        self, identity: ModelRecordIdentity, correlation_id: UUID
    ) -> ModelReconcileResult:
        try:
            record = await self._records.get(identity, correlation_id)
        except RecordNotFoundError:
            logger.debug(
                "Record no longer exists",
                extra={"record": str(identity), "correlation_id": str(correlation_id)},
            )
            return ModelReconcileResult.done()

        finalizers = FinalizerSet(record.finalizers)

        if record.deletion_requested:
            if not finalizers.has(self._finalizer):
                return ModelReconcileResult.done()
            await self._delete_target(record, correlation_id)
            finalizers.remove(self._finalizer)
            await self._records.update(
                record.with_finalizers(finalizers.to_list()), correlation_id
            )
            logger.info(
                "Finalizer removed",
                extra={"record": str(identity), "correlation_id": str(correlation_id)},
            )
            return ModelReconcileResult.done()

        if finalizers.add(self._finalizer):
            await self._records.update(
                record.with_finalizers(finalizers.to_list()), correlation_id
            )
            logger.info(
                "Finalizer added",
                extra={
                    "record": str(identity),
                    "finalizer": self._finalizer,
                    "correlation_id": str(correlation_id),
                },
            )
            return ModelReconcileResult(requeue_after_seconds=0.0)

        if self.is_excluded(record.namespace):
            logger.debug(
                "Namespace excluded from sync",
                extra={"record": str(identity), "namespace": record.namespace},
            )
            return ModelReconcileResult.done()

        wrote = await self._sync(record, correlation_id)
        return ModelReconcileResult(
            requeue_after_seconds=self._reconcile_period_seconds,
            wrote_target=wrote,
        )

    def _sync_failed(self, record: ModelSecretRecord, error: SecretSyncError) -> None:
        self._metrics.record_sync_error(record.target_name, record.namespace)
        self._metrics.record_sync_status(record.target_name, record.namespace, ok=False)
        logger.error(
            "Secret sync failed",
            extra={
                "record": str(record.identity),
                "secret": f"{record.namespace}/{record.target_name}",
                "error_code": error.error_code.value,
                "transport_type": error.context.get("transport_type"),
            },
        )

    async def _sync(self, record: ModelSecretRecord, correlation_id: UUID) -> bool:
        """Converge the target secret. Returns True when it was written."""
        try:
            desired = await self._resolver.desired_state(record, correlation_id)
        except SecretSyncError as e:
            self._sync_failed(record, e)
            raise

        try:
            current = await self._resolver.current_state(
                record.namespace, record.target_name, correlation_id
            )
        except ConsumerStoreError as e:
            self._metrics.record_secret_read_error(record.target_name, record.namespace)
            self._sync_failed(record, e)
            raise

        if current is not None and desired == current:
            self._metrics.record_sync_status(record.target_name, record.namespace, ok=True)
            return False

        logger.info(
            "Secret must be updated",
            extra={
                "record": str(record.identity),
                "secret": f"{record.namespace}/{record.target_name}",
                "correlation_id": str(correlation_id),
            },
        )
        now = self._clock()
        target = ModelTargetSecret(
            namespace=record.namespace,
            name=record.target_name,
            secret_type=record.target_type,
            data=desired,
            labels={
                LABEL_MANAGED_BY: MANAGED_BY_VALUE,
                LABEL_LAST_UPDATED_AT: now.strftime(TIMESTAMP_FORMAT),
            },
            annotations={ANNOTATION_RECORD: str(record.identity)},
        )
        try:
            await self._upsert(target, correlation_id)
        except ConsumerStoreError as e:
            self._metrics.record_secret_update_error(record.target_name, record.namespace)
            self._sync_failed(record, e)
            raise

        self._metrics.record_last_updated(
            record.target_name, record.namespace, now.timestamp()
        )
        self._metrics.record_sync_status(record.target_name, record.namespace, ok=True)
        logger.info(
            "Secret updated",
            extra={
                "record": str(record.identity),
                "secret": f"{record.namespace}/{record.target_name}",
                "correlation_id": str(correlation_id),
            },
        )
        return True

    async def _upsert(self, target: ModelTargetSecret, correlation_id: UUID) -> None:
        """Create the target, or replace it when it already exists."""
        try:
            await self._store.create(target, correlation_id)
        except ConsumerStoreAlreadyExistsError:
            await self._store.update(target, correlation_id)

    async def _delete_target(
        self, record: ModelSecretRecord, correlation_id: UUID
    ) -> None:
        try:
            await self._store.delete(record.namespace, record.target_name, correlation_id)
        except ConsumerStoreNotFoundError:
            logger.debug(
                "Target secret already deleted",
                extra={"secret": f"{record.namespace}/{record.target_name}"},
            )
            return
        logger.info(
            "Secret deleted",
            extra={
                "record": str(record.identity),
                "secret": f"{record.namespace}/{record.target_name}",
                "correlation_id": str(correlation_id),
            },
        )


__all__ = ["SecretRecordReconciler"]
