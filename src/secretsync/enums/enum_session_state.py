# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Token session state machine enumeration.

State Transitions:
    LOGGED_OUT -> LOGGING_IN -> ACTIVE
    ACTIVE -> CHECKING_TTL -> ACTIVE | RENEWING | LOGGING_IN
    RENEWING -> ACTIVE
    LOGGING_IN -> LOGGED_OUT (authentication failure)
"""

from enum import Enum


class EnumSessionState(str, Enum):
    """Lifecycle states of an authenticated backend session."""

    LOGGED_OUT = "logged_out"
    LOGGING_IN = "logging_in"
    ACTIVE = "active"
    CHECKING_TTL = "checking_ttl"
    RENEWING = "renewing"


__all__ = ["EnumSessionState"]
