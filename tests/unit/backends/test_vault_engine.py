# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for Vault KV engine unwrapping."""

from __future__ import annotations

import pytest

from secretsync.backends.vault_engine import KvEngineV1, KvEngineV2, resolve_engine
from secretsync.errors import UnsupportedEngineError


class TestResolveEngine:
    def test_empty_defaults_to_kv2(self) -> None:
        assert isinstance(resolve_engine(""), KvEngineV2)

    def test_kv1(self) -> None:
        engine = resolve_engine("kv1")
        assert isinstance(engine, KvEngineV1)
        assert engine.name == "kv1"

    def test_kv2(self) -> None:
        assert resolve_engine("kv2").name == "kv2"

    def test_unknown_engine(self) -> None:
        with pytest.raises(UnsupportedEngineError) as exc_info:
            resolve_engine("kv3")

        assert exc_info.value.engine == "kv3"


class TestKvEngineV1:
    def test_unwrap_payload(self) -> None:
        raw = {"data": {"password": "p"}, "lease_duration": 0}
        assert KvEngineV1().unwrap(raw) == {"password": "p"}

    def test_none_response(self) -> None:
        assert KvEngineV1().unwrap(None) is None

    def test_missing_data(self) -> None:
        assert KvEngineV1().unwrap({"warnings": ["x"]}) is None


class TestKvEngineV2:
    def test_unwrap_nested_payload(self) -> None:
        raw = {
            "data": {
                "data": {"password": "p"},
                "metadata": {"version": 3},
            }
        }
        assert KvEngineV2().unwrap(raw) == {"password": "p"}

    def test_v1_shaped_response_is_missing(self) -> None:
        assert KvEngineV2().unwrap({"data": {"password": "p"}}) is None

    def test_deleted_version_has_null_data(self) -> None:
        raw = {"data": {"data": None, "metadata": {"deletion_time": "x"}}}
        assert KvEngineV2().unwrap(raw) is None

    def test_none_response(self) -> None:
        assert KvEngineV2().unwrap(None) is None
