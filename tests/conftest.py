# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for secretsync tests."""

from __future__ import annotations

import pytest

from secretsync.observability import InMemoryMetricsSink
from secretsync.stores import InMemoryConsumerStore, InMemoryRecordSource
from tests.helpers import DeterministicClock, FakeBackendClient


@pytest.fixture
def metrics() -> InMemoryMetricsSink:
    """Provide a fresh in-memory metrics sink."""
    return InMemoryMetricsSink()


@pytest.fixture
def consumer_store() -> InMemoryConsumerStore:
    """Provide an empty in-memory consumer store."""
    return InMemoryConsumerStore()


@pytest.fixture
def record_source() -> InMemoryRecordSource:
    """Provide an empty in-memory record source."""
    return InMemoryRecordSource()


@pytest.fixture
def backend() -> FakeBackendClient:
    """Provide a backend holding ``hello`` base64 encoded at kv/a#v."""
    return FakeBackendClient({("kv/a", "v"): "aGVsbG8="})


@pytest.fixture
def clock() -> DeterministicClock:
    """Provide a clock fixed at 2024-01-01T12:00:00Z."""
    return DeterministicClock()
