# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Synchronization Errors Module.

Exports the error hierarchy rooted at SecretSyncError together with the
ModelSyncErrorContext used to attach structured context to it.
"""

from secretsync.errors.model_sync_error_context import ModelSyncErrorContext
from secretsync.errors.sync_errors import (
    AuthenticationFailedError,
    BackendError,
    BackendNotImplementedError,
    BackendSecretForbiddenError,
    BackendSecretNotFoundError,
    BackendUnavailableError,
    ConsumerStoreAlreadyExistsError,
    ConsumerStoreError,
    ConsumerStoreNotFoundError,
    DecodeError,
    DecodingError,
    ProtocolConfigurationError,
    RecordNotFoundError,
    RecordSourceError,
    SecretSyncError,
    TokenNotRenewableError,
    UnknownBackendError,
    UnsupportedEncodingError,
    UnsupportedEngineError,
)

__all__: list[str] = [
    "AuthenticationFailedError",
    "BackendError",
    "BackendNotImplementedError",
    "BackendSecretForbiddenError",
    "BackendSecretNotFoundError",
    "BackendUnavailableError",
    "ConsumerStoreAlreadyExistsError",
    "ConsumerStoreError",
    "ConsumerStoreNotFoundError",
    "DecodeError",
    "DecodingError",
    "ModelSyncErrorContext",
    "ProtocolConfigurationError",
    "RecordNotFoundError",
    "RecordSourceError",
    "SecretSyncError",
    "TokenNotRenewableError",
    "UnknownBackendError",
    "UnsupportedEncodingError",
    "UnsupportedEngineError",
]
