# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Ordered set of finalizer tokens.

Finalizers are persisted as a list; this wrapper keeps insertion order and
rejects duplicates so add/remove are idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

SECRET_FINALIZER = "secret.finalizer.secretsync.io"


class FinalizerSet:
    """Insertion-ordered set with has/add/remove.

    Example:
        >>> finalizers = FinalizerSet(["a"])
        >>> finalizers.add(SECRET_FINALIZER)
        True
        >>> finalizers.to_list()
        ['a', 'secret.finalizer.secretsync.io']
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._items: dict[str, None] = dict.fromkeys(items)

    def has(self, finalizer: str) -> bool:
        return finalizer in self._items

    def add(self, finalizer: str) -> bool:
        """Add a finalizer. Returns False if it was already present."""
        if finalizer in self._items:
            return False
        self._items[finalizer] = None
        return True

    def remove(self, finalizer: str) -> bool:
        """Remove a finalizer. Returns False if it was absent."""
        if finalizer not in self._items:
            return False
        del self._items[finalizer]
        return True

    def to_list(self) -> list[str]:
        return list(self._items)

    def __contains__(self, finalizer: object) -> bool:
        return finalizer in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"FinalizerSet({self.to_list()!r})"


__all__ = ["SECRET_FINALIZER", "FinalizerSet"]
