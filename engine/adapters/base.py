"""Shared adapter lifecycle.

Each library adapter only implements `build_spec`. Mounting, listener wiring,
updates, resizing and release are identical across libraries and live here so
handles behave the same everywhere: at most one live handle per chart, no
listener leaks across updates, and release happens exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..categories import LibraryFamily
from ..chart import Dimensions, RenderableChart
from ..errors import AlreadyMountedError, RenderError
from ..events import (
    EXTRACTORS,
    ErrorHandler,
    EventHandler,
    InteractionNormalizer,
    native_events_for,
)
from .surface import Container, NativeChart

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class AdapterHandle:
    """Native resources owned by one mounted chart.

    Args:
        chart: Chart the handle was mounted for.
        library: Library family of the adapter that created it.
        native: Live native chart, None once released.
        normalizer: Interaction normalizer receiving native callbacks.
        container: Host container the native chart lives in.
        suppress_legend_toggle: Whether legend clicks skip native toggling.
        listeners: Bound (native event, callback) pairs.
        released: Whether native resources have been released.
    """

    chart: RenderableChart
    library: LibraryFamily
    native: NativeChart | None
    normalizer: InteractionNormalizer
    container: Container | None = None
    suppress_legend_toggle: bool = False
    listeners: list[tuple[str, Callable[[Any], Any]]] = field(default_factory=list)
    released: bool = False


class ChartAdapter:
    """Base class for per-library rendering adapters."""

    library: ClassVar[LibraryFamily]
    error_prefix: ClassVar[str]

    def build_spec(self, chart: RenderableChart, *, suppress_legend_toggle: bool = False) -> dict[str, Any]:
        """Return the native specification for a chart."""

        raise NotImplementedError

    def drag_mode(self, spec: dict[str, Any]) -> str | None:
        """Return the drag interaction a native spec enables, when the library reports one."""

        return None

    def mount(
        self,
        chart: RenderableChart,
        container: Container,
        *,
        on_event: EventHandler | None = None,
        on_error: ErrorHandler | None = None,
        suppress_legend_toggle: bool = False,
    ) -> AdapterHandle | None:
        """Create the native chart in `container` and wire interaction events.

        Args:
            chart: Chart to mount.
            container: Host container.
            on_event: Receives normalized interaction events.
            on_error: Receives RenderErrors for failed mounts and handlers.
            suppress_legend_toggle: Report legend clicks without toggling series.

        Returns:
            The live AdapterHandle, or None when mounting failed.

        Raises:
            AlreadyMountedError: When the chart already owns a live handle.
        """

        if chart.is_mounted:
            raise AlreadyMountedError(f"Chart {chart.chart_id!r} is already mounted.")

        normalizer = InteractionNormalizer(
            chart.chart_id,
            on_event,
            EXTRACTORS[self.library],
            capabilities=chart.capabilities,
            suppress_legend_toggle=suppress_legend_toggle,
            on_error=on_error,
        )
        native: NativeChart | None = None
        handle: AdapterHandle | None = None
        try:
            spec = self.build_spec(chart, suppress_legend_toggle=suppress_legend_toggle)
            normalizer.drag_mode = self.drag_mode(spec)
            native = container.create(self.library, spec)
            native.resize(chart.dimensions.width, chart.dimensions.height)
            handle = AdapterHandle(
                chart=chart,
                library=self.library,
                native=native,
                normalizer=normalizer,
                container=container,
                suppress_legend_toggle=suppress_legend_toggle,
            )
            self._bind(handle, native)
        except Exception as exc:
            logger.warning("%s mount failed for chart %s: %s", self.library, chart.chart_id, exc)
            if handle is not None:
                self._release(handle)
            elif native is not None:
                native.release()
            error = RenderError(code=f"{self.error_prefix}_INIT_ERROR", message=str(exc))
            container.show_error(error)
            if on_error is not None:
                on_error(error)
            return None

        chart.adapter_handle = handle
        return handle

    def update(self, handle: AdapterHandle, chart: RenderableChart) -> None:
        """Replace the native spec in place and rewire listeners.

        Calling update repeatedly with the same chart yields the same native
        state and the same listener set. A failed update releases the native
        chart and leaves an error placeholder in its container.
        """

        native = handle.native
        if handle.released or native is None:
            logger.debug("Ignoring update for released %s handle.", handle.library)
            return
        try:
            spec = self.build_spec(chart, suppress_legend_toggle=handle.suppress_legend_toggle)
            native.update(spec)
            self._unbind(handle)
            if handle.chart is not chart and handle.chart.adapter_handle is handle:
                handle.chart.adapter_handle = None
            handle.chart = chart
            handle.normalizer.chart_id = chart.chart_id
            handle.normalizer.capabilities = frozenset(chart.capabilities)
            handle.normalizer.drag_mode = self.drag_mode(spec)
            self._bind(handle, native)
        except Exception as exc:
            logger.warning("%s update failed for chart %s: %s", self.library, chart.chart_id, exc)
            self._fail(handle, "UPDATE_ERROR", exc)
            return
        chart.adapter_handle = handle

    def resize(self, handle: AdapterHandle, dimensions: Dimensions) -> None:
        """Resize the native chart to new host dimensions.

        A failed resize releases the native chart and leaves an error
        placeholder in its container.
        """

        if handle.released or handle.native is None:
            return
        try:
            handle.native.resize(dimensions.width, dimensions.height)
        except Exception as exc:
            logger.warning("%s resize failed for chart %s: %s", self.library, handle.chart.chart_id, exc)
            self._fail(handle, "RESIZE_ERROR", exc)
            return
        handle.chart.dimensions = dimensions

    def unmount(self, handle: AdapterHandle) -> None:
        """Release native resources; repeated calls are no-ops."""

        if handle.released:
            return
        self._release(handle)

    def _fail(self, handle: AdapterHandle, suffix: str, exc: Exception) -> None:
        error = RenderError(code=f"{self.error_prefix}_{suffix}", message=str(exc))
        self._release(handle)
        if handle.container is not None:
            handle.container.show_error(error)
        if handle.normalizer.on_error is not None:
            handle.normalizer.on_error(error)

    def _bind(self, handle: AdapterHandle, native: NativeChart) -> None:
        for name in native_events_for(self.library, handle.normalizer.capabilities):
            callback = handle.normalizer.callback(name)
            native.on(name, callback)
            handle.listeners.append((name, callback))

    def _unbind(self, handle: AdapterHandle) -> None:
        native = handle.native
        while handle.listeners:
            name, callback = handle.listeners.pop()
            if native is not None:
                native.off(name, callback)

    def _release(self, handle: AdapterHandle) -> None:
        handle.released = True
        native = handle.native
        try:
            self._unbind(handle)
        finally:
            handle.native = None
            if native is not None:
                try:
                    native.release()
                except Exception:
                    logger.exception("%s native release failed for chart %s", self.library, handle.chart.chart_id)
            if handle.chart.adapter_handle is handle:
                handle.chart.adapter_handle = None
