# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault KV engine addressing.

KV version 1 returns the secret payload directly under ``data``; version 2
nests it one level deeper, under ``data.data``, next to its metadata. The
engine is chosen once, when the backend client is built.
"""

from __future__ import annotations

from collections.abc import Mapping

from secretsync.errors import UnsupportedEngineError

ENGINE_KV1 = "kv1"
ENGINE_KV2 = "kv2"
DEFAULT_ENGINE = ENGINE_KV2


class KvEngineV1:
    """KV version 1: the response ``data`` is the payload."""

    name = ENGINE_KV1

    def unwrap(self, raw: Mapping[str, object] | None) -> dict[str, object] | None:
        if raw is None:
            return None
        data = raw.get("data")
        return dict(data) if isinstance(data, Mapping) else None


class KvEngineV2:
    """KV version 2: the payload sits under ``data.data``."""

    name = ENGINE_KV2

    def unwrap(self, raw: Mapping[str, object] | None) -> dict[str, object] | None:
        if raw is None:
            return None
        envelope = raw.get("data")
        if not isinstance(envelope, Mapping):
            return None
        data = envelope.get("data")
        return dict(data) if isinstance(data, Mapping) else None


KvEngine = KvEngineV1 | KvEngineV2


def resolve_engine(name: str) -> KvEngine:
    """Select the engine for ``name``; empty means kv2.

    Raises:
        UnsupportedEngineError: If the name is not kv1 or kv2.
    """
    name = name or DEFAULT_ENGINE
    if name == ENGINE_KV1:
        return KvEngineV1()
    if name == ENGINE_KV2:
        return KvEngineV2()
    raise UnsupportedEngineError(name)


__all__ = [
    "DEFAULT_ENGINE",
    "ENGINE_KV1",
    "ENGINE_KV2",
    "KvEngine",
    "KvEngineV1",
    "KvEngineV2",
    "resolve_engine",
]
