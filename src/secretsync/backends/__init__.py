# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Backends Module.

Exports:
    ProtocolBackendClient: read_secret capability
    VaultBackendClient: token session backend with renewal loop
    AzureKeyVaultBackendClient: managed credential backend
    create_backend_client: factory selecting a client by backend kind
    resolve_decoder: text/base64 decoders
    resolve_engine: Vault KV v1/v2 payload unwrapping
    decide_renewal_action: pure renewal policy
"""

from secretsync.backends.backend_azure_kv import AzureKeyVaultBackendClient
from secretsync.backends.backend_factory import create_backend_client
from secretsync.backends.backend_vault import VaultBackendClient
from secretsync.backends.decoder import (
    DEFAULT_ENCODING,
    Base64Decoder,
    Decoder,
    TextDecoder,
    resolve_decoder,
)
from secretsync.backends.model_azure_kv_backend_config import (
    ModelAzureKeyVaultBackendConfig,
)
from secretsync.backends.model_token_info import ModelTokenInfo
from secretsync.backends.model_vault_backend_config import ModelVaultBackendConfig
from secretsync.backends.protocol_backend_client import ProtocolBackendClient
from secretsync.backends.session_renewal import decide_renewal_action
from secretsync.backends.vault_engine import KvEngineV1, KvEngineV2, resolve_engine

__all__: list[str] = [
    "DEFAULT_ENCODING",
    "AzureKeyVaultBackendClient",
    "Base64Decoder",
    "Decoder",
    "KvEngineV1",
    "KvEngineV2",
    "ModelAzureKeyVaultBackendConfig",
    "ModelTokenInfo",
    "ModelVaultBackendConfig",
    "ProtocolBackendClient",
    "TextDecoder",
    "VaultBackendClient",
    "create_backend_client",
    "decide_renewal_action",
    "resolve_decoder",
    "resolve_engine",
]
