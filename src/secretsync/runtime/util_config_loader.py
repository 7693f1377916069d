# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Engine Configuration Loader.

Loads ModelSecretSyncConfig from a YAML file or an already parsed mapping.

Example YAML:
    ```yaml
    backend: vault
    reconcile_period_seconds: 5
    exclude_namespaces: kube-system,kube-public
    vault:
      url: https://vault.example.com:8200
      engine: kv2
      role_id: secretsync
      secret_id: s3cr3t
      max_token_ttl: 300
      token_polling_period_seconds: 15
    ```

Security:
    - Uses yaml.safe_load() to prevent arbitrary code execution
    - Validation errors never echo input values, which may hold credentials
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from secretsync.enums import EnumSyncTransportType
from secretsync.errors import ModelSyncErrorContext, ProtocolConfigurationError
from secretsync.runtime.model_sync_config import ModelSecretSyncConfig

logger = logging.getLogger(__name__)

MAX_CONFIG_SIZE_BYTES = 1024 * 1024


def _context(target_name: str) -> ModelSyncErrorContext:
    return ModelSyncErrorContext(
        transport_type=EnumSyncTransportType.RUNTIME,
        operation="load_sync_config",
        target_name=target_name,
    )


def parse_sync_config(
    data: Mapping[str, object], source: str = "<mapping>"
) -> ModelSecretSyncConfig:
    """Validate a parsed configuration mapping.

    Raises:
        ProtocolConfigurationError: If validation fails. The message lists
            the failing field locations only.
    """
    try:
        return ModelSecretSyncConfig.model_validate(dict(data))
    except ValidationError as e:
        locations = sorted(
            ".".join(str(part) for part in error["loc"]) or "<root>"
            for error in e.errors()
        )
        raise ProtocolConfigurationError(
            f"Invalid configuration in {source}: {', '.join(locations)}",
            context=_context(source),
            error_count=e.error_count(),
        ) from e


def load_sync_config(path: str | Path) -> ModelSecretSyncConfig:
    """Load and validate the engine configuration from a YAML file.

    Raises:
        ProtocolConfigurationError: If the file is missing, too large, not
            valid YAML, not a mapping, or fails validation.
    """
    path = Path(path)
    if not path.is_file():
        raise ProtocolConfigurationError(
            f"Configuration file not found: {path}", context=_context(str(path))
        )

    file_size = path.stat().st_size
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ProtocolConfigurationError(
            f"Configuration file too large: {file_size} bytes (max {MAX_CONFIG_SIZE_BYTES})",
            context=_context(str(path)),
        )

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProtocolConfigurationError(
            f"Invalid YAML in configuration file: {path}", context=_context(str(path))
        ) from e

    if not isinstance(data, dict):
        raise ProtocolConfigurationError(
            f"Configuration must be a mapping, got {type(data).__name__}",
            context=_context(str(path)),
        )

    config = parse_sync_config(data, source=str(path))
    logger.debug(
        "Loaded sync configuration",
        extra={"config_path": str(path), "backend": config.backend},
    )
    return config


__all__ = ["load_sync_config", "parse_sync_config"]
