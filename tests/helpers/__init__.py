# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for secretsync unit tests.

Available Utilities:
    Deterministic:
        - DeterministicClock: Controllable UTC clock for reconciler timestamps

    Fakes:
        - FakeBackendClient: Backend client serving values from a dict
        - make_record: Build a managed secret record with sensible defaults
"""

from tests.helpers.deterministic import DeterministicClock
from tests.helpers.fakes import FakeBackendClient, make_record

__all__ = [
    "DeterministicClock",
    "FakeBackendClient",
    "make_record",
]
