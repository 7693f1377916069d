# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Domain models for secret synchronization."""

from secretsync.models.finalizer_set import SECRET_FINALIZER, FinalizerSet
from secretsync.models.model_data_source import ModelDataSource
from secretsync.models.model_reconcile_result import ModelReconcileResult
from secretsync.models.model_record_identity import ModelRecordIdentity
from secretsync.models.model_secret_record import DEFAULT_TARGET_TYPE, ModelSecretRecord
from secretsync.models.model_target_secret import ModelTargetSecret

__all__: list[str] = [
    "DEFAULT_TARGET_TYPE",
    "SECRET_FINALIZER",
    "FinalizerSet",
    "ModelDataSource",
    "ModelReconcileResult",
    "ModelRecordIdentity",
    "ModelSecretRecord",
    "ModelTargetSecret",
]
