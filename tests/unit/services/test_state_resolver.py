# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for SecretStateResolver."""

from __future__ import annotations

import pytest

from secretsync.errors import (
    BackendSecretNotFoundError,
    ConsumerStoreError,
    DecodeError,
    UnsupportedEncodingError,
)
from secretsync.models import ModelDataSource, ModelTargetSecret
from secretsync.services import SecretStateResolver
from secretsync.stores import InMemoryConsumerStore
from tests.helpers import FakeBackendClient, make_record


class TestDesiredState:
    @pytest.mark.asyncio
    async def test_decodes_every_key(self, consumer_store: InMemoryConsumerStore) -> None:
        backend = FakeBackendClient(
            {("kv/a", "v"): "aGVsbG8=", ("kv/b", "user"): "admin"}
        )
        record = make_record(
            keys_map={
                "foo": ModelDataSource(path="kv/a", key="v", encoding="base64"),
                "user": ModelDataSource(path="kv/b", key="user"),
            }
        )

        desired = await SecretStateResolver(backend, consumer_store).desired_state(record)

        assert desired == {"foo": b"hello", "user": b"admin"}

    @pytest.mark.asyncio
    async def test_empty_keys_map(
        self, backend: FakeBackendClient, consumer_store: InMemoryConsumerStore
    ) -> None:
        record = make_record(keys_map={})

        desired = await SecretStateResolver(backend, consumer_store).desired_state(record)

        assert desired == {}
        assert backend.reads == []

    @pytest.mark.asyncio
    async def test_missing_value_aborts(
        self, consumer_store: InMemoryConsumerStore
    ) -> None:
        backend = FakeBackendClient({("kv/a", "v"): "x"})
        record = make_record(
            keys_map={
                "a": ModelDataSource(path="kv/a", key="v"),
                "b": ModelDataSource(path="kv/missing", key="v"),
            }
        )

        with pytest.raises(BackendSecretNotFoundError) as exc_info:
            await SecretStateResolver(backend, consumer_store).desired_state(record)

        assert exc_info.value.path == "kv/missing"

    @pytest.mark.asyncio
    async def test_unknown_encoding_fails_before_reading(
        self, backend: FakeBackendClient, consumer_store: InMemoryConsumerStore
    ) -> None:
        record = make_record(
            keys_map={
                "a": ModelDataSource(path="kv/a", key="v"),
                "b": ModelDataSource(path="kv/a", key="v", encoding="rot13"),
            }
        )

        with pytest.raises(UnsupportedEncodingError):
            await SecretStateResolver(backend, consumer_store).desired_state(record)

        assert backend.reads == []

    @pytest.mark.asyncio
    async def test_invalid_base64(self, consumer_store: InMemoryConsumerStore) -> None:
        backend = FakeBackendClient({("kv/a", "v"): "not base64!"})
        record = make_record()

        with pytest.raises(DecodeError):
            await SecretStateResolver(backend, consumer_store).desired_state(record)


class TestCurrentState:
    @pytest.mark.asyncio
    async def test_existing_target(
        self, backend: FakeBackendClient, consumer_store: InMemoryConsumerStore
    ) -> None:
        consumer_store.put(
            ModelTargetSecret(namespace="default", name="s1", data={"foo": b"x"})
        )

        current = await SecretStateResolver(backend, consumer_store).current_state(
            "default", "s1"
        )

        assert current == {"foo": b"x"}

    @pytest.mark.asyncio
    async def test_missing_target_is_none(
        self, backend: FakeBackendClient, consumer_store: InMemoryConsumerStore
    ) -> None:
        current = await SecretStateResolver(backend, consumer_store).current_state(
            "default", "s1"
        )

        assert current is None

    @pytest.mark.asyncio
    async def test_store_failure_surfaces(
        self, backend: FakeBackendClient, consumer_store: InMemoryConsumerStore
    ) -> None:
        consumer_store.fail_on("get")

        with pytest.raises(ConsumerStoreError):
            await SecretStateResolver(backend, consumer_store).current_state(
                "default", "s1"
            )
