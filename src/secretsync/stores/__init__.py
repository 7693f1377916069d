# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Consumer store and record source implementations."""

from secretsync.stores.protocol_consumer_store import ProtocolConsumerStore
from secretsync.stores.protocol_record_source import ProtocolRecordSource
from secretsync.stores.store_inmemory import InMemoryConsumerStore, InMemoryRecordSource
from secretsync.stores.store_kubernetes_records import KubernetesRecordSource
from secretsync.stores.store_kubernetes_secrets import KubernetesSecretStore

__all__: list[str] = [
    "InMemoryConsumerStore",
    "InMemoryRecordSource",
    "KubernetesRecordSource",
    "KubernetesSecretStore",
    "ProtocolConsumerStore",
    "ProtocolRecordSource",
]
