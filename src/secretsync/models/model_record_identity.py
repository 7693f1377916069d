# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Identity of a managed secret record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelRecordIdentity(BaseModel):
    """Namespace and name of a managed record; renders as ``namespace/name``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: str = Field(min_length=1)
    name: str = Field(min_length=1)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


__all__ = ["ModelRecordIdentity"]
