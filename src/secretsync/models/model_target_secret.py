# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Target secret model: the object written to the consumer store."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from secretsync.models.model_secret_record import DEFAULT_TARGET_TYPE


class ModelTargetSecret(BaseModel):
    """Secret object as written to, or read from, the consumer store.

    Every write is a full replace of ``data``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: str = Field(min_length=1)
    name: str = Field(min_length=1)
    secret_type: str = Field(default=DEFAULT_TARGET_TYPE)
    data: dict[str, bytes] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


__all__ = ["ModelTargetSecret"]
