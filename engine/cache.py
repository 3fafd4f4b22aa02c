"""Memoization for discovery queries.

Entries are keyed by a filter signature and stamped with the registry version
they were computed against. Any registration bumps the version and drops every
entry on the next access.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiscoveryCache:
    """Bounded, version-invalidated result cache."""

    def __init__(self, *, max_entries: int = 128) -> None:
        if max_entries < 1:
            raise ValueError("DiscoveryCache.max_entries must be >= 1.")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._version: int | None = None
        self._entries: OrderedDict[Hashable, object] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop every cached entry."""

        self._entries.clear()

    def get_or_compute(self, signature: Hashable, version: int, compute: Callable[[], T]) -> T:
        """Return the cached result for `signature`, computing it on a miss.

        Args:
            signature: Stable, hashable key for the query.
            version: Current registry version.
            compute: Zero-argument callable producing the result.

        Returns:
            The cached or freshly computed result.
        """

        if version != self._version:
            if self._entries:
                logger.debug(
                    "Discovery cache invalidated (version %s -> %s); dropped %d entries.",
                    self._version,
                    version,
                    len(self._entries),
                )
            self._entries.clear()
            self._version = version

        if signature in self._entries:
            self.hits += 1
            return self._entries[signature]  # type: ignore[return-value]

        self.misses += 1
        result = compute()
        self._entries[signature] = result
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return result
