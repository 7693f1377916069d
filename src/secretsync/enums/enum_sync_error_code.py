# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error code enumeration for secret synchronization errors.

Every error class in ``secretsync.errors`` carries one of these codes so
callers and metrics can classify failures without isinstance chains.
"""

from enum import Enum


class EnumSyncErrorCode(str, Enum):
    """Stable error classification codes."""

    OPERATION_FAILED = "operation_failed"
    INVALID_CONFIGURATION = "invalid_configuration"
    AUTHENTICATION_FAILED = "authentication_failed"
    TOKEN_NOT_RENEWABLE = "token_not_renewable"
    UNSUPPORTED_ENGINE = "unsupported_engine"
    UNSUPPORTED_ENCODING = "unsupported_encoding"
    DECODE_ERROR = "decode_error"
    BACKEND_NOT_IMPLEMENTED = "backend_not_implemented"
    BACKEND_SECRET_NOT_FOUND = "backend_secret_not_found"
    BACKEND_SECRET_FORBIDDEN = "backend_secret_forbidden"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    UNKNOWN_BACKEND_ERROR = "unknown_backend_error"
    CONSUMER_STORE_ERROR = "consumer_store_error"
    CONSUMER_STORE_NOT_FOUND = "consumer_store_not_found"
    CONSUMER_STORE_ALREADY_EXISTS = "consumer_store_already_exists"
    RECORD_SOURCE_ERROR = "record_source_error"
    RECORD_NOT_FOUND = "record_not_found"


__all__ = ["EnumSyncErrorCode"]
