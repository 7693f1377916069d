# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Synchronization Enumerations Module.

Exports:
    EnumBackendKind: Backend selection (VAULT, AZURE_KV)
    EnumRenewalAction: Renewal tick decision (NOOP, RENEW, RELOGIN)
    EnumSessionState: Token session lifecycle states
    EnumSyncErrorCode: Error classification codes
    EnumSyncTransportType: Remote system an operation belongs to
    EnumVaultAuthMethod: Vault login methods (APPROLE, KUBERNETES)
"""

from secretsync.enums.enum_backend_kind import EnumBackendKind
from secretsync.enums.enum_renewal_action import EnumRenewalAction
from secretsync.enums.enum_session_state import EnumSessionState
from secretsync.enums.enum_sync_error_code import EnumSyncErrorCode
from secretsync.enums.enum_sync_transport_type import EnumSyncTransportType
from secretsync.enums.enum_vault_auth_method import EnumVaultAuthMethod

__all__: list[str] = [
    "EnumBackendKind",
    "EnumRenewalAction",
    "EnumSessionState",
    "EnumSyncErrorCode",
    "EnumSyncTransportType",
    "EnumVaultAuthMethod",
]
