# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Synchronization Error Classes.

Error Hierarchy:
    SecretSyncError (base error)
    ├── ProtocolConfigurationError
    ├── BackendError                        (transport: backend)
    │   ├── AuthenticationFailedError
    │   ├── TokenNotRenewableError
    │   ├── UnsupportedEngineError
    │   ├── BackendNotImplementedError
    │   ├── BackendSecretNotFoundError
    │   └── UnknownBackendError
    │       ├── BackendSecretForbiddenError
    │       └── BackendUnavailableError
    ├── DecodingError                       (transport: backend)
    │   ├── UnsupportedEncodingError
    │   └── DecodeError
    └── ConsumerStoreError                  (transport: consumer_store)
        ├── ConsumerStoreNotFoundError
        ├── ConsumerStoreAlreadyExistsError
        └── RecordSourceError
            └── RecordNotFoundError

All errors:
    - Carry an EnumSyncErrorCode for classification
    - Support proper error chaining with ``raise ... from e``
    - Accept ModelSyncErrorContext for bundled context parameters
    - Expose a mutable ``record`` attribute set by the reconciler so a
      failure can be attributed to the record being reconciled
"""

from __future__ import annotations

from uuid import UUID

from secretsync.enums import EnumSyncErrorCode, EnumSyncTransportType
from secretsync.errors.model_sync_error_context import ModelSyncErrorContext


class SecretSyncError(Exception):
    """Base error class for secret synchronization errors.

    Structured Fields (via ModelSyncErrorContext):
        transport_type: Remote system involved
        operation: Operation being performed
        correlation_id: Request correlation ID for tracking
        target_name: Target resource name

    Example:
        >>> context = ModelSyncErrorContext(
        ...     transport_type=EnumSyncTransportType.CONSUMER_STORE,
        ...     operation="upsert",
        ...     target_name="default/db-creds",
        ... )
        >>> raise SecretSyncError("Operation failed", context=context, attempt=2)
    """

    default_error_code: EnumSyncErrorCode = EnumSyncErrorCode.OPERATION_FAILED
    default_transport_type: EnumSyncTransportType | None = None

    def __init__(
        self,
        message: str,
        error_code: EnumSyncErrorCode | None = None,
        context: ModelSyncErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize SecretSyncError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to the class default)
            context: Bundled context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.context: dict[str, object] = dict(extra_context)
        self.transport_type = self.default_transport_type
        self.correlation_id: UUID | None = None
        self.record: object | None = None

        if context is not None:
            if context.transport_type is not None:
                self.transport_type = context.transport_type
            if context.operation is not None:
                self.context["operation"] = context.operation
            if context.target_name is not None:
                self.context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id

        if self.transport_type is not None:
            self.context["transport_type"] = self.transport_type.value

    def __str__(self) -> str:
        if self.record is not None:
            return f"{self.message} (record={self.record})"
        return self.message


class ProtocolConfigurationError(SecretSyncError):
    """Raised when configuration validation fails.

    Used for parsing errors, missing required fields and invalid values.
    """

    default_error_code = EnumSyncErrorCode.INVALID_CONFIGURATION
    default_transport_type = EnumSyncTransportType.RUNTIME


class BackendError(SecretSyncError):
    """Base class for failures attributed to the secret backend."""

    default_transport_type = EnumSyncTransportType.BACKEND


class AuthenticationFailedError(BackendError):
    """Raised when login against the backend fails.

    For managed-credential backends this means every credential in the
    chain was rejected.
    """

    default_error_code = EnumSyncErrorCode.AUTHENTICATION_FAILED


class TokenNotRenewableError(BackendError):
    """Raised when the session token is flagged non-renewable."""

    default_error_code = EnumSyncErrorCode.TOKEN_NOT_RENEWABLE


class UnsupportedEngineError(BackendError):
    """Raised when the configured secret engine name is not recognized."""

    default_error_code = EnumSyncErrorCode.UNSUPPORTED_ENGINE

    def __init__(
        self,
        engine: str,
        context: ModelSyncErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"Secret engine '{engine}' is not supported",
            context=context,
            engine=engine,
            **extra_context,
        )
        self.engine = engine


class BackendNotImplementedError(BackendError):
    """Raised when the configured backend kind has no implementation."""

    default_error_code = EnumSyncErrorCode.BACKEND_NOT_IMPLEMENTED


class BackendSecretNotFoundError(BackendError):
    """Raised when the backend has no secret at path, or no such key in it.

    Example:
        >>> raise BackendSecretNotFoundError("secret/data/db", "password")
    """

    default_error_code = EnumSyncErrorCode.BACKEND_SECRET_NOT_FOUND

    def __init__(
        self,
        path: str,
        key: str,
        context: ModelSyncErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"Secret not found in backend: path='{path}' key='{key}'",
            context=context,
            path=path,
            key=key,
            **extra_context,
        )
        self.path = path
        self.key = key


class UnknownBackendError(BackendError):
    """Raised for any backend failure that has no more specific type.

    Timeouts, transport failures and malformed payloads land here.
    """

    default_error_code = EnumSyncErrorCode.UNKNOWN_BACKEND_ERROR


class BackendSecretForbiddenError(UnknownBackendError):
    """Raised when the backend denies access to a secret path."""

    default_error_code = EnumSyncErrorCode.BACKEND_SECRET_FORBIDDEN


class BackendUnavailableError(UnknownBackendError):
    """Raised when the backend circuit breaker is open."""

    default_error_code = EnumSyncErrorCode.BACKEND_UNAVAILABLE


class DecodingError(SecretSyncError):
    """Base class for decoder failures, attributed to the backend."""

    default_transport_type = EnumSyncTransportType.BACKEND


class UnsupportedEncodingError(DecodingError):
    """Raised when a data source names an encoding with no decoder."""

    default_error_code = EnumSyncErrorCode.UNSUPPORTED_ENCODING

    def __init__(
        self,
        encoding: str,
        context: ModelSyncErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"Encoding '{encoding}' is not supported",
            context=context,
            encoding=encoding,
            **extra_context,
        )
        self.encoding = encoding


class DecodeError(DecodingError):
    """Raised when a raw backend value is not valid for its encoding."""

    default_error_code = EnumSyncErrorCode.DECODE_ERROR


class ConsumerStoreError(SecretSyncError):
    """Raised for consumer store failures without a more specific type."""

    default_error_code = EnumSyncErrorCode.CONSUMER_STORE_ERROR
    default_transport_type = EnumSyncTransportType.CONSUMER_STORE


class ConsumerStoreNotFoundError(ConsumerStoreError):
    """Raised when the requested object does not exist in the store."""

    default_error_code = EnumSyncErrorCode.CONSUMER_STORE_NOT_FOUND


class ConsumerStoreAlreadyExistsError(ConsumerStoreError):
    """Raised by create when the object already exists."""

    default_error_code = EnumSyncErrorCode.CONSUMER_STORE_ALREADY_EXISTS


class RecordSourceError(ConsumerStoreError):
    """Raised when loading or persisting a managed record fails."""

    default_error_code = EnumSyncErrorCode.RECORD_SOURCE_ERROR
    default_transport_type = EnumSyncTransportType.RECORD_SOURCE


class RecordNotFoundError(RecordSourceError):
    """Raised when the managed record no longer exists."""

    default_error_code = EnumSyncErrorCode.RECORD_NOT_FOUND


__all__ = [
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
    "ProtocolConfigurationError",
    "RecordNotFoundError",
    "RecordSourceError",
    "SecretSyncError",
    "TokenNotRenewableError",
    "UnknownBackendError",
    "UnsupportedEncodingError",
    "UnsupportedEngineError",
]
