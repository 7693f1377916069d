# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault authentication method enumeration."""

from enum import Enum


class EnumVaultAuthMethod(str, Enum):
    """Vault login methods.

    Attributes:
        APPROLE: Role ID + secret ID login against the approle mount
        KUBERNETES: Service account JWT login against the kubernetes mount
    """

    APPROLE = "approle"
    KUBERNETES = "kubernetes"


__all__ = ["EnumVaultAuthMethod"]
