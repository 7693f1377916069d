# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Data source model: where one logical key of a target secret comes from."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelDataSource(BaseModel):
    """Backend location and encoding of one secret value.

    Attributes:
        path: Backend secret path
        key: Key inside the backend secret (backend specific default when empty)
        encoding: Encoding of the stored value ("text" or "base64")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(min_length=1, description="Backend secret path")
    key: str = Field(default="", description="Key inside the backend secret")
    encoding: str = Field(default="", description="Encoding of the stored value")


__all__ = ["ModelDataSource"]
