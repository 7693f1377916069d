# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Result of one reconcile pass."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelReconcileResult(BaseModel):
    """Outcome of a successful reconcile pass.

    Attributes:
        requeue_after_seconds: Delay before the next pass, None for no requeue
        wrote_target: Whether the consumer store was written
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    requeue_after_seconds: float | None = Field(default=None)
    wrote_target: bool = Field(default=False)

    @classmethod
    def done(cls) -> ModelReconcileResult:
        """No requeue, nothing written."""
        return cls()


__all__ = ["ModelReconcileResult"]
