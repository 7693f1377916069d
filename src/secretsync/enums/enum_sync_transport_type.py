# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Synchronization Transport Type Enumeration.

Identifies which remote system an operation (or an error) belongs to.
Used for error context and metrics attribution.
"""

from enum import Enum


class EnumSyncTransportType(str, Enum):
    """Transport types for secret synchronization components.

    Attributes:
        BACKEND: Secret-of-truth backend (Vault, Azure Key Vault)
        CONSUMER_STORE: Consumer key-value store (Kubernetes Secrets)
        RECORD_SOURCE: Store holding the managed secret records
        RUNTIME: Engine internal operations
    """

    BACKEND = "backend"
    CONSUMER_STORE = "consumer_store"
    RECORD_SOURCE = "record_source"
    RUNTIME = "runtime"


__all__ = ["EnumSyncTransportType"]
