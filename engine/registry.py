"""Plugin registry for chart descriptors.

The registry is built once, explicitly, by the application bootstrap via
`build_registry`. Registration is additive only: there is no removal path, so
lookups stay stable for the life of the process.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, ValuesView
from dataclasses import dataclass
from types import MappingProxyType

from .descriptors import PluginDescriptor, descriptor_problems
from .errors import DuplicateIdError, InvalidDescriptorError, UnknownPluginError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegistrationStats:
    """Totals of registered plugins grouped by category and library."""

    total: int
    by_category: dict[str, int]
    by_library: dict[str, int]

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "total": self.total,
            "by_category": dict(self.by_category),
            "by_library": dict(self.by_library),
        }


class PluginRegistry:
    """Ordered, append-only lookup of plugin descriptors."""

    def __init__(self) -> None:
        self._descriptors: dict[str, PluginDescriptor] = {}
        self._version = 0

    @property
    def version(self) -> int:
        """Monotonic counter bumped on every successful registration."""

        return self._version

    def register(self, descriptor: PluginDescriptor) -> None:
        """Add a descriptor to the registry.

        Args:
            descriptor: Descriptor to register.

        Raises:
            DuplicateIdError: When the id is already registered.
            InvalidDescriptorError: When the descriptor violates an invariant.
        """

        if descriptor.id in self._descriptors:
            raise DuplicateIdError(descriptor.id)
        problems = descriptor_problems(descriptor)
        if problems:
            raise InvalidDescriptorError(descriptor.id, problems[0])
        self._descriptors[descriptor.id] = descriptor
        self._version += 1
        logger.debug("Registered chart plugin %s (%s)", descriptor.id, descriptor.library)

    def get(self, plugin_id: str) -> PluginDescriptor:
        """Return the descriptor registered under `plugin_id`.

        Raises:
            UnknownPluginError: When no descriptor has that id.
        """

        try:
            return self._descriptors[plugin_id]
        except KeyError:
            raise UnknownPluginError(plugin_id) from None

    def list(self) -> ValuesView[PluginDescriptor]:
        """Return a live, restartable view of descriptors in registration order."""

        return MappingProxyType(self._descriptors).values()

    def ids(self) -> tuple[str, ...]:
        """Return registered ids in registration order."""

        return tuple(self._descriptors)

    def registration_stats(self) -> RegistrationStats:
        """Summarize registered plugins by category and library."""

        by_category = Counter(str(d.category) for d in self._descriptors.values())
        by_library = Counter(str(d.library) for d in self._descriptors.values())
        return RegistrationStats(
            total=len(self._descriptors),
            by_category=dict(by_category),
            by_library=dict(by_library),
        )

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


def build_registry(
    descriptors: Iterable[PluginDescriptor],
    *,
    registry: PluginRegistry | None = None,
) -> PluginRegistry:
    """Build a registry from descriptors, failing on the first bad one.

    Args:
        descriptors: Descriptors to register, in catalog order.
        registry: Optional existing registry to extend.

    Returns:
        The populated PluginRegistry.

    Raises:
        DuplicateIdError: When two descriptors share an id.
        InvalidDescriptorError: When a descriptor violates an invariant.
    """

    target = registry if registry is not None else PluginRegistry()
    before = len(target)
    for descriptor in descriptors:
        target.register(descriptor)
    logger.info("Loaded %d chart plugin(s); registry holds %d.", len(target) - before, len(target))
    return target
