# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reconciliation services."""

from secretsync.services.service_reconciler import SecretRecordReconciler
from secretsync.services.service_state_resolver import SecretStateResolver

__all__: list[str] = ["SecretRecordReconciler", "SecretStateResolver"]
