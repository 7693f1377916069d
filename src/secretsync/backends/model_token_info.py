# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Token lookup result model."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field


class ModelTokenInfo(BaseModel):
    """Subset of a Vault ``lookup-self`` response used for renewal decisions.

    Attributes:
        ttl: Remaining TTL in seconds, None when the response had no usable value
        renewable: Whether the token may be renewed
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl: int | None = Field(default=None, description="Remaining TTL in seconds")
    renewable: bool = Field(default=False, description="Token renewable flag")

    @classmethod
    def from_lookup(cls, response: Mapping[str, object] | None) -> ModelTokenInfo:
        """Build from a raw lookup-self response.

        Vault reports ttl as a JSON number; strings holding an integer are
        tolerated, anything else leaves ttl unset.
        """
        data = response.get("data") if response else None
        if not isinstance(data, Mapping):
            return cls()

        raw_ttl = data.get("ttl")
        ttl: int | None = None
        if isinstance(raw_ttl, bool):
            ttl = None
        elif isinstance(raw_ttl, int):
            ttl = raw_ttl
        elif isinstance(raw_ttl, str):
            try:
                ttl = int(raw_ttl)
            except ValueError:
                ttl = None

        return cls(ttl=ttl, renewable=data.get("renewable") is True)


__all__ = ["ModelTokenInfo"]
