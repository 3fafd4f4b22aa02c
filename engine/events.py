"""Normalized interaction events.

Every adapter routes native callbacks through one InteractionNormalizer. The
only per-library code is a small extractor that reads the native payload; the
normalizer stamps the chart id, filters by the chart's capabilities, shields
native code from handler exceptions, and decides whether a legend click keeps
its default toggle behavior.

Native payload shapes handled here:

- ECharts: `click`/`mouseover` params with `seriesName`, `seriesIndex` and
  `dataIndex`; `datazoom` with `startValue`/`endValue` (or `start`/`end`
  percentages, possibly under `batch`); `legendselectchanged` with `name`;
  `brushselected` with `batch[0].areas[0].coordRange`.
- Chart.js: `click`/`hover` with active `elements` (`datasetIndex`, `index`);
  `zoomComplete`/`panComplete` with `scales.{x,y}.{min,max}`; `legendClick`
  with `datasetIndex`.
- Plotly: `plotly_click`/`plotly_hover` with `points[0].pointIndex` and
  `curveNumber`; `plotly_relayout` with `xaxis.range[0]` style keys;
  `plotly_legendclick` with `curveNumber`; `plotly_selected` with `range`.
- D3: `click`/`mouseover` with `index` and `seriesId`; `zoom` with
  `transform` and `sourceEvent.type` (wheel zooms, drag pans) plus the
  rescaled `xDomain`/`yDomain`; `brush` with `selection`; `legendclick`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from .categories import InteractionKind, LibraryFamily
from .errors import RenderError

logger = logging.getLogger(__name__)

Range = tuple[Any, Any]


@dataclass(frozen=True, slots=True)
class Extracted:
    """Library-independent fields read from one native payload."""

    kind: InteractionKind
    series_id: str | None = None
    data_index: int | None = None
    domain_value: Range | None = None
    range_value: Range | None = None


@dataclass(frozen=True, slots=True)
class InteractionEvent:
    """A normalized user interaction with a rendered chart.

    Args:
        kind: Interaction kind.
        chart_id: Chart the event came from.
        series_id: Series identifier for point and legend events.
        data_index: Point index within the series.
        domain_value: New x-axis range for zoom, pan and selection.
        range_value: New y-axis range for zoom, pan and selection.
        native_payload: Raw payload as received from the library.
    """

    kind: InteractionKind
    chart_id: str
    series_id: str | None = None
    data_index: int | None = None
    domain_value: Range | None = None
    range_value: Range | None = None
    native_payload: Any = None

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (without the native payload)."""

        return {
            "kind": str(self.kind),
            "chart_id": self.chart_id,
            "series_id": self.series_id,
            "data_index": self.data_index,
            "domain_value": list(self.domain_value) if self.domain_value is not None else None,
            "range_value": list(self.range_value) if self.range_value is not None else None,
        }


Extractor = Callable[[str, Mapping[str, Any]], Extracted | None]
EventHandler = Callable[[InteractionEvent], None]
ErrorHandler = Callable[[RenderError], None]


def _index(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _series(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _pair(low: Any, high: Any) -> Range | None:
    if low is None and high is None:
        return None
    return (low, high)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _first(value: Any) -> Any:
    if isinstance(value, Sequence) and not isinstance(value, str) and value:
        return value[0]
    return None


def extract_echarts(name: str, payload: Mapping[str, Any]) -> Extracted | None:
    """Read an ECharts event payload."""

    if name in ("click", "mouseover"):
        kind = InteractionKind.click if name == "click" else InteractionKind.hover
        series = payload.get("seriesName")
        if series is None:
            series = payload.get("seriesIndex")
        return Extracted(kind=kind, series_id=_series(series), data_index=_index(payload.get("dataIndex")))
    if name == "datazoom":
        entry = _as_mapping(_first(payload.get("batch"))) or payload
        if "startValue" in entry or "endValue" in entry:
            domain = _pair(entry.get("startValue"), entry.get("endValue"))
        else:
            domain = _pair(entry.get("start"), entry.get("end"))
        return Extracted(kind=InteractionKind.zoom, domain_value=domain)
    if name == "graphroam":
        return Extracted(kind=InteractionKind.pan)
    if name == "legendselectchanged":
        return Extracted(kind=InteractionKind.legend_toggle, series_id=_series(payload.get("name")))
    if name == "brushselected":
        batch = _as_mapping(_first(payload.get("batch")))
        area = _as_mapping(_first(batch.get("areas")))
        coord = area.get("coordRange")
        if isinstance(_first(coord), Sequence):
            x_range, y_range = coord[0], coord[1] if len(coord) > 1 else None
            return Extracted(
                kind=InteractionKind.selection,
                domain_value=_pair(*x_range[:2]),
                range_value=_pair(*y_range[:2]) if y_range else None,
            )
        if isinstance(coord, Sequence) and len(coord) >= 2:
            return Extracted(kind=InteractionKind.selection, domain_value=_pair(coord[0], coord[1]))
        return Extracted(kind=InteractionKind.selection)
    return None


def _scale_range(scales: Mapping[str, Any], axis: str) -> Range | None:
    scale = _as_mapping(scales.get(axis))
    return _pair(scale.get("min"), scale.get("max"))


def extract_chartjs(name: str, payload: Mapping[str, Any]) -> Extracted | None:
    """Read a Chart.js callback payload."""

    if name in ("click", "hover"):
        element = _as_mapping(_first(payload.get("elements")))
        kind = InteractionKind.click if name == "click" else InteractionKind.hover
        return Extracted(
            kind=kind,
            series_id=_series(element.get("datasetIndex")),
            data_index=_index(element.get("index")),
        )
    if name in ("zoomComplete", "panComplete"):
        scales = _as_mapping(payload.get("scales"))
        return Extracted(
            kind=InteractionKind.zoom if name == "zoomComplete" else InteractionKind.pan,
            domain_value=_scale_range(scales, "x"),
            range_value=_scale_range(scales, "y"),
        )
    if name == "legendClick":
        return Extracted(
            kind=InteractionKind.legend_toggle,
            series_id=_series(payload.get("datasetIndex")),
        )
    return None


def _relayout_range(payload: Mapping[str, Any], axis: str) -> Range | None:
    whole = payload.get(f"{axis}.range")
    if isinstance(whole, Sequence) and not isinstance(whole, str) and len(whole) == 2:
        return (whole[0], whole[1])
    return _pair(payload.get(f"{axis}.range[0]"), payload.get(f"{axis}.range[1]"))


def extract_plotly(name: str, payload: Mapping[str, Any]) -> Extracted | None:
    """Read a Plotly event payload."""

    if name in ("plotly_click", "plotly_hover"):
        point = _as_mapping(_first(payload.get("points")))
        data_index = point.get("pointIndex")
        if data_index is None:
            data_index = point.get("pointNumber")
        return Extracted(
            kind=InteractionKind.click if name == "plotly_click" else InteractionKind.hover,
            series_id=_series(point.get("curveNumber")),
            data_index=_index(data_index),
        )
    if name == "plotly_relayout":
        domain = _relayout_range(payload, "xaxis")
        value_range = _relayout_range(payload, "yaxis")
        if domain is None and value_range is None and not any(
            key.endswith(".autorange") for key in payload
        ):
            return None
        kind = InteractionKind.pan if payload.get("dragmode") == "pan" else InteractionKind.zoom
        return Extracted(kind=kind, domain_value=domain, range_value=value_range)
    if name == "plotly_legendclick":
        return Extracted(
            kind=InteractionKind.legend_toggle,
            series_id=_series(payload.get("curveNumber")),
        )
    if name == "plotly_selected":
        selected = _as_mapping(payload.get("range"))
        x_range, y_range = selected.get("x"), selected.get("y")
        return Extracted(
            kind=InteractionKind.selection,
            domain_value=tuple(x_range[:2]) if isinstance(x_range, Sequence) else None,
            range_value=tuple(y_range[:2]) if isinstance(y_range, Sequence) else None,
        )
    return None


def extract_d3(name: str, payload: Mapping[str, Any]) -> Extracted | None:
    """Read a D3 event payload forwarded by the host bridge."""

    if name in ("click", "mouseover"):
        return Extracted(
            kind=InteractionKind.click if name == "click" else InteractionKind.hover,
            series_id=_series(payload.get("seriesId")),
            data_index=_index(payload.get("index")),
        )
    if name == "zoom":
        source = _as_mapping(payload.get("sourceEvent"))
        kind = InteractionKind.zoom if source.get("type") == "wheel" else InteractionKind.pan
        x_domain, y_domain = payload.get("xDomain"), payload.get("yDomain")
        return Extracted(
            kind=kind,
            domain_value=tuple(x_domain[:2]) if isinstance(x_domain, Sequence) else None,
            range_value=tuple(y_domain[:2]) if isinstance(y_domain, Sequence) else None,
        )
    if name == "brush":
        selection = payload.get("selection")
        if not isinstance(selection, Sequence) or len(selection) < 2:
            return Extracted(kind=InteractionKind.selection)
        low, high = selection[0], selection[1]
        if isinstance(low, Sequence) and isinstance(high, Sequence):
            return Extracted(
                kind=InteractionKind.selection,
                domain_value=(low[0], high[0]),
                range_value=(low[1], high[1]),
            )
        return Extracted(kind=InteractionKind.selection, domain_value=(low, high))
    if name == "legendclick":
        return Extracted(kind=InteractionKind.legend_toggle, series_id=_series(payload.get("seriesId")))
    return None


EXTRACTORS: Final[dict[LibraryFamily, Extractor]] = {
    LibraryFamily.echarts: extract_echarts,
    LibraryFamily.chartjs: extract_chartjs,
    LibraryFamily.plotly: extract_plotly,
    LibraryFamily.d3js: extract_d3,
}

NATIVE_EVENTS: Final[dict[LibraryFamily, dict[InteractionKind, tuple[str, ...]]]] = {
    LibraryFamily.echarts: {
        InteractionKind.click: ("click",),
        InteractionKind.hover: ("mouseover",),
        InteractionKind.zoom: ("datazoom",),
        InteractionKind.pan: ("graphroam",),
        InteractionKind.legend_toggle: ("legendselectchanged",),
        InteractionKind.selection: ("brushselected",),
    },
    LibraryFamily.chartjs: {
        InteractionKind.click: ("click",),
        InteractionKind.hover: ("hover",),
        InteractionKind.zoom: ("zoomComplete",),
        InteractionKind.pan: ("panComplete",),
        InteractionKind.legend_toggle: ("legendClick",),
    },
    LibraryFamily.plotly: {
        InteractionKind.click: ("plotly_click",),
        InteractionKind.hover: ("plotly_hover",),
        InteractionKind.zoom: ("plotly_relayout",),
        InteractionKind.pan: ("plotly_relayout",),
        InteractionKind.legend_toggle: ("plotly_legendclick",),
        InteractionKind.selection: ("plotly_selected",),
    },
    LibraryFamily.d3js: {
        InteractionKind.click: ("click",),
        InteractionKind.hover: ("mouseover",),
        InteractionKind.zoom: ("zoom",),
        InteractionKind.pan: ("zoom",),
        InteractionKind.legend_toggle: ("legendclick",),
        InteractionKind.selection: ("brush",),
    },
}


def native_events_for(library: LibraryFamily, capabilities: Iterable[InteractionKind]) -> tuple[str, ...]:
    """Return the native event names to bind for a set of capabilities, deduplicated."""

    mapping = NATIVE_EVENTS[library]
    names: list[str] = []
    for kind in InteractionKind:
        if kind not in capabilities:
            continue
        for name in mapping.get(kind, ()):
            if name not in names:
                names.append(name)
    return tuple(names)


class InteractionNormalizer:
    """Translate native callbacks into InteractionEvents for one chart.

    `drag_mode` holds the drag interaction the native chart is configured for.
    Payloads that only carry axis ranges are classified by it, and payloads
    reporting a new `dragmode` replace it.
    """

    def __init__(
        self,
        chart_id: str,
        handler: EventHandler | None,
        extractor: Extractor,
        *,
        capabilities: Iterable[InteractionKind] = tuple(InteractionKind),
        suppress_legend_toggle: bool = False,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self.chart_id = chart_id
        self.handler = handler
        self.extractor = extractor
        self.capabilities = frozenset(capabilities)
        self.suppress_legend_toggle = suppress_legend_toggle
        self.on_error = on_error
        self.drag_mode: str | None = None

    def normalize(self, native_event: str, payload: Any) -> InteractionEvent | None:
        """Return the normalized event for a native payload, or None when ignored."""

        mapping = _as_mapping(payload)
        reported = mapping.get("dragmode")
        if isinstance(reported, str):
            self.drag_mode = reported
        elif self.drag_mode is not None:
            mapping = {**mapping, "dragmode": self.drag_mode}
        extracted = self.extractor(native_event, mapping)
        if extracted is None or extracted.kind not in self.capabilities:
            return None
        return InteractionEvent(
            kind=extracted.kind,
            chart_id=self.chart_id,
            series_id=extracted.series_id,
            data_index=extracted.data_index,
            domain_value=extracted.domain_value,
            range_value=extracted.range_value,
            native_payload=payload,
        )

    def dispatch(self, native_event: str, payload: Any) -> bool | None:
        """Handle one native callback.

        Returns:
            False to tell the native library to skip its default action (legend
            toggling under suppression), otherwise None.
        """

        event = self.normalize(native_event, payload)
        if event is None:
            return None
        if self.handler is not None:
            try:
                self.handler(event)
            except Exception as exc:
                logger.exception("Interaction handler failed for chart %s (%s)", self.chart_id, event.kind)
                if self.on_error is not None:
                    self.on_error(RenderError(code="INTERACTION_HANDLER_ERROR", message=str(exc)))
        if event.kind == InteractionKind.legend_toggle and self.suppress_legend_toggle:
            return False
        return None

    def callback(self, native_event: str) -> Callable[[Any], bool | None]:
        """Return a one-argument callback bound to a native event name."""

        def _callback(payload: Any) -> bool | None:
            return self.dispatch(native_event, payload)

        _callback.__name__ = f"on_{native_event}"
        return _callback
