# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Backend kind enumeration used to select a backend client implementation."""

from enum import Enum


class EnumBackendKind(str, Enum):
    """Supported secret backends.

    Attributes:
        VAULT: HashiCorp Vault, token session based
        AZURE_KV: Azure Key Vault, managed credential based
    """

    VAULT = "vault"
    AZURE_KV = "azure-kv"


__all__ = ["EnumBackendKind"]
