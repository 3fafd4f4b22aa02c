"""Host drawing-surface contract.

Adapters never draw. They hand a native specification to a host container,
which creates a NativeChart (a browser bridge, a headless renderer, or the
in-process PayloadSurface below) and forwards native events back through the
callbacks registered with `on`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..categories import LibraryFamily
from ..errors import ChartEngineError, RenderError

NativeCallback = Callable[[Any], Any]


class NativeChart(Protocol):
    """A live native chart object owned by one adapter handle."""

    def update(self, spec: dict[str, Any]) -> None: ...

    def on(self, event: str, callback: NativeCallback) -> None: ...

    def off(self, event: str, callback: NativeCallback) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def release(self) -> None: ...


class Container(Protocol):
    """Host slot that native charts are created in."""

    def create(self, library: LibraryFamily, spec: dict[str, Any]) -> NativeChart: ...

    def show_error(self, error: RenderError) -> None: ...


@dataclass(eq=False)
class PayloadChart:
    """In-process native chart holding its spec as a JSON-serializable payload."""

    library: LibraryFamily
    spec: dict[str, Any]
    width: int | None = None
    height: int | None = None
    listeners: dict[str, list[NativeCallback]] = field(default_factory=dict)
    released: bool = False
    updates: int = 0

    def _ensure_live(self) -> None:
        if self.released:
            raise ChartEngineError("Native chart has been released.")

    def update(self, spec: dict[str, Any]) -> None:
        self._ensure_live()
        self.spec = spec
        self.updates += 1

    def on(self, event: str, callback: NativeCallback) -> None:
        self._ensure_live()
        self.listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: NativeCallback) -> None:
        callbacks = self.listeners.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            self.listeners.pop(event, None)

    def resize(self, width: int, height: int) -> None:
        self._ensure_live()
        self.width = width
        self.height = height

    def release(self) -> None:
        self.listeners.clear()
        self.released = True

    def listener_count(self) -> int:
        """Return the number of registered callbacks across all events."""

        return sum(len(callbacks) for callbacks in self.listeners.values())

    def emit(self, event: str, payload: Any) -> list[Any]:
        """Deliver a native event to registered callbacks, returning their results."""

        return [callback(payload) for callback in list(self.listeners.get(event, ()))]

    def as_json(self) -> dict[str, Any]:
        """Return the payload shipped to a browser bridge."""

        return {
            "library": str(self.library),
            "spec": self.spec,
            "events": sorted(self.listeners),
            "size": {"width": self.width, "height": self.height},
        }


@dataclass(eq=False)
class PayloadSurface:
    """Container that records created charts and error placeholders in memory."""

    charts: list[PayloadChart] = field(default_factory=list)
    errors: list[RenderError] = field(default_factory=list)

    def create(self, library: LibraryFamily, spec: dict[str, Any]) -> PayloadChart:
        chart = PayloadChart(library=library, spec=spec)
        self.charts.append(chart)
        return chart

    def show_error(self, error: RenderError) -> None:
        self.errors.append(error)

    @property
    def latest(self) -> PayloadChart | None:
        """The most recently created chart, if any."""

        return self.charts[-1] if self.charts else None
