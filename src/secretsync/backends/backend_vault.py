# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Vault backend client with a self-renewing token session.

The client logs in once at construction (AppRole or Kubernetes auth), then
a background renewal loop keeps the token alive:

    - every polling period the token is looked up
    - lookup failure (revoked, expired) triggers an immediate full login
      with the original credential material
    - a TTL below ``max_token_ttl`` triggers a single renew-self call
    - a non-renewable token is reported as TokenNotRenewableError and the
      session is left usable until the next tick

Reads never renew. Token replacement happens only under the session lock,
so there is a single writer for the session at any time.

Security Features:
    - SecretStr protection for credential material
    - Sanitized error messages (never expose tokens or values)
    - SSL verification enabled by default

hvac is synchronous; every call runs on a bounded ThreadPoolExecutor via
``loop.run_in_executor`` and is bounded by ``asyncio.wait_for``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TypeVar
from uuid import UUID, uuid4

import hvac

from secretsync.backends.model_token_info import ModelTokenInfo
from secretsync.backends.model_vault_backend_config import ModelVaultBackendConfig
from secretsync.backends.session_renewal import decide_renewal_action
from secretsync.backends.vault_engine import resolve_engine
from secretsync.enums import (
    EnumBackendKind,
    EnumRenewalAction,
    EnumSessionState,
    EnumSyncTransportType,
    EnumVaultAuthMethod,
)
from secretsync.errors import (
    AuthenticationFailedError,
    BackendSecretForbiddenError,
    BackendSecretNotFoundError,
    ModelSyncErrorContext,
    SecretSyncError,
    TokenNotRenewableError,
    UnknownBackendError,
)
from secretsync.mixins import MixinAsyncCircuitBreaker
from secretsync.observability import NoopMetricsSink, ProtocolMetricsSink
from secretsync.runtime.periodic_task import PeriodicTask

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "data"

OPERATION_LOGIN = "login"
OPERATION_LOOKUP_SELF = "lookup-self"
OPERATION_RENEW_SELF = "renew-self"
OPERATION_IS_RENEWABLE = "is-renewable"
OPERATION_READ_SECRET = "read_secret"


class VaultBackendClient(MixinAsyncCircuitBreaker):
    """Token-session backend client for HashiCorp Vault.

    Use ``await VaultBackendClient.create(config)`` to obtain a logged-in
    client. The constructor only validates configuration and builds the
    hvac client.

    Session State:
        LOGGED_OUT -> LOGGING_IN -> ACTIVE -> CHECKING_TTL -> {ACTIVE | RENEWING}
        Authentication failures while logging in or renewing move the
        session to LOGGED_OUT; the next tick retries.

    Example:
        >>> client = await VaultBackendClient.create(config, metrics=sink)
        >>> client.start_token_renewer(stop_event)
        >>> value = await client.read_secret("secret/data/db", "password")
    """

    def __init__(
        self,
        config: ModelVaultBackendConfig,
        metrics: ProtocolMetricsSink | None = None,
    ) -> None:
        """Validate configuration and build the hvac client.

        Raises:
            UnsupportedEngineError: If ``config.engine`` is not kv1 or kv2.
        """
        self._config = config
        self._engine = resolve_engine(config.engine)
        self._metrics: ProtocolMetricsSink = metrics or NoopMetricsSink()
        self._client = hvac.Client(
            url=config.url,
            namespace=config.namespace,
            verify=config.verify_ssl,
            timeout=config.timeout_seconds,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_concurrent_operations,
            thread_name_prefix="vault_backend_",
        )
        self._session_lock = asyncio.Lock()
        self._state = EnumSessionState.LOGGED_OUT
        self._token_info: ModelTokenInfo | None = None
        self._last_renewal_error: SecretSyncError | None = None
        self._renewer: PeriodicTask | None = None
        self._metric_labels: dict[str, str] = {
            "vault_address": config.url,
            "vault_engine": self._engine.name,
        }
        self._circuit_breaker_initialized = False
        if config.circuit_breaker_enabled:
            self._init_circuit_breaker(
                threshold=config.circuit_breaker_failure_threshold,
                reset_timeout=config.circuit_breaker_reset_timeout_seconds,
                service_name=f"vault.{config.namespace or 'default'}",
                transport_type=EnumSyncTransportType.BACKEND,
            )
            self._circuit_breaker_initialized = True

    @classmethod
    async def create(
        cls,
        config: ModelVaultBackendConfig,
        metrics: ProtocolMetricsSink | None = None,
        correlation_id: UUID | None = None,
    ) -> VaultBackendClient:
        """Build a client, log in and read cluster health.

        Raises:
            UnsupportedEngineError: Unknown engine name.
            AuthenticationFailedError: Login rejected or unreachable.
            UnknownBackendError: Cluster health could not be read.
        """
        correlation_id = correlation_id or uuid4()
        client = cls(config, metrics)
        try:
            await client.login(correlation_id)
            await client._load_cluster_health(correlation_id)
        except Exception:
            await client.close()
            raise
        client._metrics.record_max_token_ttl(
            config.max_token_ttl, client._metric_labels
        )
        return client

    @property
    def state(self) -> EnumSessionState:
        return self._state

    @property
    def engine_name(self) -> str:
        return self._engine.name

    @property
    def token_info(self) -> ModelTokenInfo | None:
        """Result of the last successful token lookup."""
        return self._token_info

    @property
    def last_renewal_error(self) -> SecretSyncError | None:
        """Error recorded by the last renewal tick, None if it succeeded."""
        return self._last_renewal_error

    @property
    def metric_labels(self) -> dict[str, str]:
        return dict(self._metric_labels)

    def _error_context(
        self, operation: str, correlation_id: UUID, target_name: str | None = None
    ) -> ModelSyncErrorContext:
        return ModelSyncErrorContext(
            transport_type=EnumSyncTransportType.BACKEND,
            operation=operation,
            target_name=target_name or self._config.url,
            correlation_id=correlation_id,
        )

    async def _execute(self, func: Callable[[], T]) -> T:
        """Run a synchronous hvac call in the thread pool with timeout."""
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(self._executor, func),
            timeout=self._config.timeout_seconds,
        )

    def _login_request(self) -> str:
        """Perform the configured login and return the client token.

        Runs on the executor. The token is not installed here; the caller
        does that under the session lock.
        """
        config = self._config
        if config.auth_method == EnumVaultAuthMethod.KUBERNETES:
            jwt = Path(config.kubernetes_jwt_path).read_text(encoding="utf-8").strip()
            response = self._client.auth.kubernetes.login(
                role=config.kubernetes_role,
                jwt=jwt,
                use_token=False,
                mount_point=config.kubernetes_path,
            )
        else:
            secret_id = config.secret_id.get_secret_value() if config.secret_id else ""
            response = self._client.auth.approle.login(
                role_id=config.role_id,
                secret_id=secret_id,
                use_token=False,
                mount_point=config.approle_path,
            )
        return str(response["auth"]["client_token"])

    async def login(self, correlation_id: UUID | None = None) -> None:
        """Log in and replace the session token.

        Raises:
            AuthenticationFailedError: If Vault rejected the credentials or
                could not be reached.
        """
        correlation_id = correlation_id or uuid4()
        async with self._session_lock:
            self._state = EnumSessionState.LOGGING_IN
            try:
                token = await self._execute(self._login_request)
            except Exception as e:
                self._state = EnumSessionState.LOGGED_OUT
                self._metrics.record_login_error(
                    EnumBackendKind.VAULT, self._metric_labels
                )
                logger.error(
                    "Vault login failed",
                    extra={
                        "auth_method": self._config.auth_method.value,
                        "error_type": type(e).__name__,
                        "correlation_id": str(correlation_id),
                    },
                )
                raise AuthenticationFailedError(
                    "Unable to login to Vault with provided credentials",
                    context=self._error_context(OPERATION_LOGIN, correlation_id),
                    auth_method=self._config.auth_method.value,
                ) from e
            self._client.token = token
            self._state = EnumSessionState.ACTIVE

        logger.info(
            "Logged into Vault",
            extra={
                "auth_method": self._config.auth_method.value,
                "correlation_id": str(correlation_id),
            },
        )

    async def _load_cluster_health(self, correlation_id: UUID) -> None:
        try:
            health = await self._execute(
                lambda: self._client.sys.read_health_status(method="GET")
            )
        except Exception as e:
            raise UnknownBackendError(
                "Could not get health information about Vault cluster",
                context=self._error_context("health", correlation_id),
            ) from e

        if not isinstance(health, dict):
            health = {}
        self._metric_labels.update(
            {
                "vault_version": str(health.get("version", "")),
                "vault_cluster_id": str(health.get("cluster_id", "")),
                "vault_cluster_name": str(health.get("cluster_name", "")),
            }
        )
        logger.info(
            "Successfully logged into Vault cluster",
            extra={
                "vault_url": self._config.url,
                "vault_engine": self._engine.name,
                "vault_cluster_name": self._metric_labels["vault_cluster_name"],
                "vault_cluster_id": self._metric_labels["vault_cluster_id"],
                "vault_version": self._metric_labels["vault_version"],
                "vault_sealed": health.get("sealed"),
                "correlation_id": str(correlation_id),
            },
        )

    async def lookup_token(
        self, correlation_id: UUID | None = None
    ) -> ModelTokenInfo | None:
        """Look up the current token, None if the lookup failed."""
        correlation_id = correlation_id or uuid4()
        try:
            response = await self._execute(self._client.auth.token.lookup_self)
        except Exception as e:
            self._metrics.record_token_renewal_error(
                OPERATION_LOOKUP_SELF, "unknown", self._metric_labels
            )
            logger.error(
                "Unable to look up Vault token",
                extra={
                    "error_type": type(e).__name__,
                    "correlation_id": str(correlation_id),
                },
            )
            return None

        token_info = ModelTokenInfo.from_lookup(response)
        self._token_info = token_info
        if token_info.ttl is not None:
            self._metrics.record_token_ttl(token_info.ttl, self._metric_labels)
        return token_info

    async def _transition(
        self, state: EnumSessionState, from_state: EnumSessionState | None = None
    ) -> None:
        """Move the session to ``state`` under the session lock.

        With ``from_state`` the move is skipped unless the session is still
        in that state, so a concurrent login outcome is not overwritten.
        """
        async with self._session_lock:
            if from_state is None or self._state == from_state:
                self._state = state

    async def _renew_token(
        self, token_info: ModelTokenInfo, correlation_id: UUID
    ) -> None:
        """Renew the current token once.

        Raises:
            TokenNotRenewableError: The token is flagged non-renewable.
            AuthenticationFailedError: Vault refused the renewal.
            UnknownBackendError: Any other renewal failure.
        """
        if not token_info.renewable:
            self._metrics.record_token_renewal_error(
                OPERATION_IS_RENEWABLE, "token_not_renewable", self._metric_labels
            )
            raise TokenNotRenewableError(
                "Vault token is not renewable",
                context=self._error_context(OPERATION_IS_RENEWABLE, correlation_id),
            )

        async with self._session_lock:
            self._state = EnumSessionState.RENEWING
            try:
                response = await self._execute(
                    lambda: self._client.auth.token.renew_self(
                        increment=self._config.renew_ttl_increment
                    )
                )
            except hvac.exceptions.Forbidden as e:
                self._state = EnumSessionState.LOGGED_OUT
                self._metrics.record_token_renewal_error(
                    OPERATION_RENEW_SELF, "authentication_failed", self._metric_labels
                )
                raise AuthenticationFailedError(
                    "Vault refused token renewal",
                    context=self._error_context(OPERATION_RENEW_SELF, correlation_id),
                ) from e
            except Exception as e:
                self._state = EnumSessionState.ACTIVE
                self._metrics.record_token_renewal_error(
                    OPERATION_RENEW_SELF, "unknown", self._metric_labels
                )
                raise UnknownBackendError(
                    "Vault token renewal failed",
                    context=self._error_context(OPERATION_RENEW_SELF, correlation_id),
                ) from e
            self._state = EnumSessionState.ACTIVE

        auth = response.get("auth") if isinstance(response, dict) else None
        if isinstance(auth, dict) and isinstance(auth.get("lease_duration"), int):
            self._metrics.record_token_ttl(auth["lease_duration"], self._metric_labels)

    async def renewal_tick(self, correlation_id: UUID | None = None) -> EnumRenewalAction:
        """Run one iteration of the renewal loop.

        Never raises for backend failures: errors are logged, counted and
        kept in ``last_renewal_error`` until the next tick.

        Returns:
            The action that was decided for this tick.
        """
        correlation_id = correlation_id or uuid4()
        await self._transition(EnumSessionState.CHECKING_TTL)
        token_info = await self.lookup_token(correlation_id)
        action = decide_renewal_action(token_info, self._config.max_token_ttl)
        self._last_renewal_error = None

        if action == EnumRenewalAction.RELOGIN:
            logger.info(
                "Trying to login to Vault again",
                extra={"correlation_id": str(correlation_id)},
            )
            try:
                await self.login(correlation_id)
            except AuthenticationFailedError as e:
                self._last_renewal_error = e
                logger.warning(
                    "Login error, Vault token not obtained",
                    extra={"correlation_id": str(correlation_id)},
                )
        elif action == EnumRenewalAction.RENEW and token_info is not None:
            logger.info(
                "Vault token is close to expiry",
                extra={
                    "vault_token_ttl": token_info.ttl,
                    "max_token_ttl": self._config.max_token_ttl,
                    "correlation_id": str(correlation_id),
                },
            )
            try:
                await self._renew_token(token_info, correlation_id)
            except (AuthenticationFailedError, TokenNotRenewableError, UnknownBackendError) as e:
                self._last_renewal_error = e
                if isinstance(e, TokenNotRenewableError):
                    await self._transition(
                        EnumSessionState.ACTIVE, EnumSessionState.CHECKING_TTL
                    )
                logger.error(
                    "Failed to renew Vault token",
                    extra={
                        "error_code": e.error_code.value,
                        "correlation_id": str(correlation_id),
                    },
                )
            else:
                logger.info(
                    "Vault token renewed",
                    extra={"correlation_id": str(correlation_id)},
                )
        else:
            if token_info is not None and token_info.ttl is None:
                logger.warning(
                    "Failed to read Vault token TTL",
                    extra={"correlation_id": str(correlation_id)},
                )
            await self._transition(
                EnumSessionState.ACTIVE, EnumSessionState.CHECKING_TTL
            )

        return action

    def start_token_renewer(self, stop_event: asyncio.Event | None = None) -> PeriodicTask:
        """Start the background renewal loop.

        Args:
            stop_event: Shared cancellation event; setting it stops the loop.
        """
        if self._renewer is not None and self._renewer.is_running:
            return self._renewer
        self._renewer = PeriodicTask(
            "vault-token-renewer",
            self._config.token_polling_period_seconds,
            self.renewal_tick,
            stop_event,
        )
        self._renewer.start()
        return self._renewer

    async def stop_token_renewer(self) -> None:
        if self._renewer is not None:
            await self._renewer.stop()
            self._renewer = None

    async def _record_circuit_success(self) -> None:
        if self._circuit_breaker_initialized:
            async with self._circuit_breaker_lock:
                await self._reset_circuit_breaker()

    async def _record_circuit_failure_if_enabled(self, correlation_id: UUID) -> None:
        if self._circuit_breaker_initialized:
            async with self._circuit_breaker_lock:
                await self._record_circuit_failure(OPERATION_READ_SECRET, correlation_id)

    def _record_read_error(self, path: str, key: str, error: SecretSyncError) -> None:
        self._metrics.record_backend_read_error(
            EnumBackendKind.VAULT, path, key, error.error_code.value, self._metric_labels
        )

    async def read_secret(
        self, path: str, key: str, correlation_id: UUID | None = None
    ) -> str:
        """Read one value from Vault.

        An empty key reads the ``data`` key.

        Raises:
            BackendSecretNotFoundError: No secret at path, or no such key.
            BackendSecretForbiddenError: The session may not read path.
            BackendUnavailableError: The circuit breaker is open.
            UnknownBackendError: Timeouts, transport failures, non-string values.
        """
        correlation_id = correlation_id or uuid4()
        key = key or DEFAULT_SECRET_KEY
        ctx = self._error_context(OPERATION_READ_SECRET, correlation_id, path)

        if self._circuit_breaker_initialized:
            async with self._circuit_breaker_lock:
                await self._check_circuit_breaker(OPERATION_READ_SECRET, correlation_id)

        try:
            response = await self._execute(lambda: self._client.read(path))
        except hvac.exceptions.InvalidPath:
            response = None
        except hvac.exceptions.Forbidden as e:
            await self._record_circuit_success()
            error: SecretSyncError = BackendSecretForbiddenError(
                f"Permission denied reading secret at '{path}'", context=ctx, key=key
            )
            self._record_read_error(path, key, error)
            raise error from e
        except Exception as e:
            await self._record_circuit_failure_if_enabled(correlation_id)
            error = UnknownBackendError(
                f"Vault read failed for '{path}'",
                context=ctx,
                key=key,
                error_type=type(e).__name__,
            )
            self._record_read_error(path, key, error)
            raise error from e

        await self._record_circuit_success()

        data = self._engine.unwrap(response)
        if data is None or data.get(key) is None:
            if isinstance(response, dict):
                for warning in response.get("warnings") or []:
                    logger.info(
                        "Secret contains warnings",
                        extra={
                            "vault_secret_warning": warning,
                            "correlation_id": str(correlation_id),
                        },
                    )
            error = BackendSecretNotFoundError(path, key, context=ctx)
            self._record_read_error(path, key, error)
            raise error

        value = data[key]
        if not isinstance(value, str):
            error = UnknownBackendError(
                f"Secret value at '{path}' is not a string",
                context=ctx,
                key=key,
                value_type=type(value).__name__,
            )
            self._record_read_error(path, key, error)
            raise error
        return value

    def describe(self) -> dict[str, object]:
        """Non-secret description of the client for logging."""
        return {
            "backend": EnumBackendKind.VAULT.value,
            "url": self._config.url,
            "engine": self._engine.name,
            "auth_method": self._config.auth_method.value,
            "state": self._state.value,
            "renewer_running": self._renewer is not None and self._renewer.is_running,
            "circuit_breaker_enabled": self._circuit_breaker_initialized,
        }

    async def close(self) -> None:
        """Stop the renewer and release the thread pool."""
        await self.stop_token_renewer()
        self._executor.shutdown(wait=False)
        await self._transition(EnumSessionState.LOGGED_OUT)
        logger.info("Vault backend client closed", extra={"vault_url": self._config.url})


__all__ = ["DEFAULT_SECRET_KEY", "VaultBackendClient"]
