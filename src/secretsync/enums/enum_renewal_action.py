# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Renewal decision enumeration returned by the session renewal policy."""

from enum import Enum


class EnumRenewalAction(str, Enum):
    """Action to take on a renewal tick.

    Attributes:
        NOOP: Token is healthy, nothing to do
        RENEW: Token TTL is below the threshold, renew it
        RELOGIN: Token lookup failed, perform a full login
    """

    NOOP = "noop"
    RENEW = "renew"
    RELOGIN = "relogin"


__all__ = ["EnumRenewalAction"]
