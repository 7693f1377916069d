# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pure session renewal policy.

Kept free of I/O so the decision table can be tested without a backend.
"""

from __future__ import annotations

from secretsync.backends.model_token_info import ModelTokenInfo
from secretsync.enums import EnumRenewalAction


def decide_renewal_action(
    token_info: ModelTokenInfo | None, max_token_ttl: int
) -> EnumRenewalAction:
    """Decide what a renewal tick should do.

    Args:
        token_info: Result of the token lookup, None if the lookup failed
        max_token_ttl: Renew once the remaining TTL drops below this

    Returns:
        RELOGIN when the lookup failed, RENEW when the TTL is known and
        below the threshold, NOOP otherwise (including an unknown TTL).
    """
    if token_info is None:
        return EnumRenewalAction.RELOGIN
    if token_info.ttl is None:
        return EnumRenewalAction.NOOP
    if token_info.ttl < max_token_ttl:
        return EnumRenewalAction.RENEW
    return EnumRenewalAction.NOOP


__all__ = ["decide_renewal_action"]
