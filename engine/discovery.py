"""Catalog discovery over a plugin registry.

Every query is memoized in a DiscoveryCache keyed by its filter signature, so
repeated catalog browsing does not rescan the registry. Results are tuples of
descriptors in registration order unless a query defines its own ranking.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from .cache import DiscoveryCache
from .categories import LibraryFamily, PluginCategory
from .data_checker import DatasetSummary
from .descriptors import PluginDescriptor
from .registry import PluginRegistry

_RANK_EXACT_NAME: Final[int] = 0
_RANK_NAME: Final[int] = 1
_RANK_TAG: Final[int] = 2
_RANK_DESCRIPTION: Final[int] = 3


def _normalize(text: str) -> str:
    """Normalize a string for case-insensitive matching."""

    return " ".join(text.strip().lower().split())


def search_rank(descriptor: PluginDescriptor, query: str) -> int | None:
    """Return the search tier for a descriptor, or None when it does not match.

    Lower is better: exact display name, then display-name substring, then a
    tag substring, then a description substring.

    Args:
        descriptor: Descriptor to score.
        query: Normalized, non-empty query.

    Returns:
        Tier integer when matched, otherwise None.
    """

    name = _normalize(descriptor.display_name)
    if name == query:
        return _RANK_EXACT_NAME
    if query in name:
        return _RANK_NAME
    if any(query in _normalize(tag) for tag in descriptor.tags):
        return _RANK_TAG
    if query in _normalize(descriptor.description):
        return _RANK_DESCRIPTION
    return None


def fits_summary(descriptor: PluginDescriptor, summary: DatasetSummary) -> bool:
    """Return whether a dataset of this shape could satisfy the descriptor.

    Checks column bounds and that enough columns have a supported type to bind
    every required semantic field.
    """

    requirements = descriptor.data_requirements
    if summary.column_count < requirements.min_columns:
        return False
    if requirements.max_columns is not None and summary.column_count > requirements.max_columns:
        return False
    usable = sum(
        1
        for value_type in summary.column_types.values()
        if value_type in requirements.supported_value_types
    )
    return usable >= max(1, len(requirements.required_semantic_fields))


class DiscoveryService:
    """Filter, search and group registered plugins."""

    def __init__(self, registry: PluginRegistry, *, cache: DiscoveryCache | None = None) -> None:
        self.registry = registry
        self.cache = cache if cache is not None else DiscoveryCache()

    def _cached(self, signature: tuple[object, ...], compute) -> tuple[PluginDescriptor, ...]:
        return self.cache.get_or_compute(signature, self.registry.version, compute)

    def all(self) -> tuple[PluginDescriptor, ...]:
        """Return every descriptor in registration order."""

        return self._cached(("all",), lambda: tuple(self.registry.list()))

    def by_category(self, category: PluginCategory | str) -> tuple[PluginDescriptor, ...]:
        """Return descriptors in one category."""

        key = str(category)
        return self._cached(
            ("category", key),
            lambda: tuple(d for d in self.registry.list() if str(d.category) == key),
        )

    def by_library(self, library: LibraryFamily | str) -> tuple[PluginDescriptor, ...]:
        """Return descriptors rendered by one library family."""

        key = str(library)
        return self._cached(
            ("library", key),
            lambda: tuple(d for d in self.registry.list() if str(d.library) == key),
        )

    def by_tags(self, tags: Iterable[str]) -> tuple[PluginDescriptor, ...]:
        """Return descriptors carrying any of `tags` (case-insensitive)."""

        wanted = frozenset(_normalize(tag) for tag in tags if tag.strip())
        if not wanted:
            return ()
        return self._cached(
            ("tags", tuple(sorted(wanted))),
            lambda: tuple(
                d
                for d in self.registry.list()
                if wanted.intersection(_normalize(tag) for tag in d.tags)
            ),
        )

    def search(self, query: str) -> tuple[PluginDescriptor, ...]:
        """Return descriptors matching `query`, best tier first.

        Ties keep registration order. A blank query matches nothing.
        """

        needle = _normalize(query)
        if not needle:
            return ()

        def compute() -> tuple[PluginDescriptor, ...]:
            ranked: list[tuple[int, int, PluginDescriptor]] = []
            for position, descriptor in enumerate(self.registry.list()):
                rank = search_rank(descriptor, needle)
                if rank is not None:
                    ranked.append((rank, position, descriptor))
            ranked.sort(key=lambda item: (item[0], item[1]))
            return tuple(descriptor for _, _, descriptor in ranked)

        return self._cached(("search", needle), compute)

    def grouped_by_category(self) -> dict[str, tuple[PluginDescriptor, ...]]:
        """Return descriptors grouped by category, in taxonomy order.

        Empty categories are omitted.
        """

        grouped: dict[str, tuple[PluginDescriptor, ...]] = {}
        for category in PluginCategory:
            members = self.by_category(category)
            if members:
                grouped[str(category)] = members
        return grouped

    def compatible_with(self, summary: DatasetSummary) -> tuple[PluginDescriptor, ...]:
        """Return descriptors whose data requirements could fit `summary`."""

        signature = (
            "compatible",
            summary.column_count,
            tuple(sorted((name, str(t)) for name, t in summary.column_types.items())),
        )
        return self._cached(
            signature,
            lambda: tuple(d for d in self.registry.list() if fits_summary(d, summary)),
        )
