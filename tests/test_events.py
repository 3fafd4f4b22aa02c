"""Unit tests for interaction event normalization."""

from __future__ import annotations

import pytest

from engine.categories import InteractionKind, LibraryFamily
from engine.errors import RenderError
from engine.events import (
    InteractionEvent,
    InteractionNormalizer,
    extract_chartjs,
    extract_d3,
    extract_echarts,
    extract_plotly,
    native_events_for,
)

pytestmark = pytest.mark.unit


def _collect(extractor, **kwargs) -> tuple[InteractionNormalizer, list[InteractionEvent]]:
    events: list[InteractionEvent] = []
    return InteractionNormalizer("chart-1", events.append, extractor, **kwargs), events


def test_plotly_click_normalizes_point_and_curve() -> None:
    """Plotly point clicks carry the curve number and point index."""

    normalizer, events = _collect(extract_plotly)
    payload = {"points": [{"pointIndex": 2, "curveNumber": 0}]}

    assert normalizer.dispatch("plotly_click", payload) is None
    assert len(events) == 1
    event = events[0]
    assert event.kind == InteractionKind.click
    assert event.chart_id == "chart-1"
    assert event.series_id == "0"
    assert event.data_index == 2
    assert event.native_payload is payload


def test_plotly_relayout_reports_axis_ranges() -> None:
    """Relayout ranges become domain and range values; dragmode picks the kind."""

    normalizer, _ = _collect(extract_plotly)

    zoom = normalizer.normalize(
        "plotly_relayout", {"xaxis.range[0]": 1, "xaxis.range[1]": 5, "yaxis.range": [0, 10]}
    )
    assert zoom is not None
    assert zoom.kind == InteractionKind.zoom
    assert zoom.domain_value == (1, 5)
    assert zoom.range_value == (0, 10)

    pan = normalizer.normalize("plotly_relayout", {"xaxis.range[0]": 2, "xaxis.range[1]": 6, "dragmode": "pan"})
    assert pan is not None
    assert pan.kind == InteractionKind.pan
    assert pan.range_value is None

    assert normalizer.normalize("plotly_relayout", {"title.text": "x"}) is None


def test_echarts_click_and_zoom() -> None:
    """ECharts params map to series name, data index and zoom window."""

    normalizer, _ = _collect(extract_echarts)

    click = normalizer.normalize("click", {"seriesName": "Sales", "seriesIndex": 0, "dataIndex": 4})
    assert click is not None
    assert (click.kind, click.series_id, click.data_index) == (InteractionKind.click, "Sales", 4)

    zoom = normalizer.normalize("datazoom", {"batch": [{"start": 10, "end": 60}]})
    assert zoom is not None
    assert zoom.kind == InteractionKind.zoom
    assert zoom.domain_value == (10, 60)


def test_echarts_brush_selection_reads_coord_range() -> None:
    """Rectangular brush areas become x and y ranges."""

    normalizer, _ = _collect(extract_echarts)
    payload = {"batch": [{"areas": [{"coordRange": [[1, 3], [10, 20]]}]}]}

    event = normalizer.normalize("brushselected", payload)

    assert event is not None
    assert event.kind == InteractionKind.selection
    assert event.domain_value == (1, 3)
    assert event.range_value == (10, 20)


def test_chartjs_click_and_zoom_complete() -> None:
    """Chart.js active elements and scale bounds are normalized."""

    normalizer, _ = _collect(extract_chartjs)

    click = normalizer.normalize("click", {"elements": [{"datasetIndex": 1, "index": 3}]})
    assert click is not None
    assert (click.series_id, click.data_index) == ("1", 3)

    zoom = normalizer.normalize("zoomComplete", {"scales": {"x": {"min": 0, "max": 4}}})
    assert zoom is not None
    assert zoom.domain_value == (0, 4)
    assert zoom.range_value is None


def test_d3_zoom_source_decides_zoom_or_pan() -> None:
    """Wheel events zoom; drag events pan."""

    normalizer, _ = _collect(extract_d3)

    wheel = normalizer.normalize("zoom", {"sourceEvent": {"type": "wheel"}, "xDomain": [0, 5]})
    drag = normalizer.normalize("zoom", {"sourceEvent": {"type": "mousemove"}, "xDomain": [1, 6]})

    assert wheel is not None and wheel.kind == InteractionKind.zoom
    assert drag is not None and drag.kind == InteractionKind.pan
    assert drag.domain_value == (1, 6)


def test_events_outside_capabilities_are_dropped() -> None:
    """Only declared capabilities reach the handler."""

    normalizer, events = _collect(extract_echarts, capabilities=[InteractionKind.click])

    normalizer.dispatch("mouseover", {"seriesIndex": 0, "dataIndex": 1})
    normalizer.dispatch("click", {"seriesIndex": 0, "dataIndex": 1})

    assert [event.kind for event in events] == [InteractionKind.click]


def test_unknown_native_events_are_ignored() -> None:
    """Unrecognized native event names produce nothing."""

    normalizer, events = _collect(extract_d3)
    assert normalizer.dispatch("dblclick", {}) is None
    assert normalizer.normalize("click", "not a mapping") is not None
    assert len(events) == 0


def test_handler_exception_is_reported_not_raised() -> None:
    """A failing handler is isolated and reported through on_error."""

    errors: list[RenderError] = []

    def handler(event: InteractionEvent) -> None:
        raise RuntimeError("boom")

    normalizer = InteractionNormalizer("chart-1", handler, extract_plotly, on_error=errors.append)

    assert normalizer.dispatch("plotly_click", {"points": [{"pointIndex": 0, "curveNumber": 0}]}) is None
    assert [error.code for error in errors] == ["INTERACTION_HANDLER_ERROR"]
    assert "boom" in errors[0].message


@pytest.mark.parametrize(
    ("extractor", "name", "payload"),
    [
        (extract_echarts, "legendselectchanged", {"name": "Sales"}),
        (extract_chartjs, "legendClick", {"datasetIndex": 0}),
        (extract_plotly, "plotly_legendclick", {"curveNumber": 0}),
        (extract_d3, "legendclick", {"seriesId": "a"}),
    ],
)
def test_legend_toggle_suppression_cancels_default(extractor, name: str, payload: dict) -> None:
    """Suppressed legend clicks are reported and return False to the library."""

    normalizer, events = _collect(extractor, suppress_legend_toggle=True)
    assert normalizer.dispatch(name, payload) is False
    assert events[0].kind == InteractionKind.legend_toggle

    plain, _ = _collect(extractor)
    assert plain.dispatch(name, payload) is None


def test_native_events_for_deduplicates_shared_events() -> None:
    """Zoom and pan share one native relayout listener in Plotly."""

    names = native_events_for(LibraryFamily.plotly, {InteractionKind.zoom, InteractionKind.pan})
    assert names == ("plotly_relayout",)
    assert native_events_for(LibraryFamily.chartjs, {InteractionKind.selection}) == ()


def test_event_as_json_omits_native_payload() -> None:
    """The JSON form is stable and excludes the raw payload."""

    event = InteractionEvent(kind=InteractionKind.zoom, chart_id="c", domain_value=(0, 1), native_payload=object())
    assert event.as_json() == {
        "kind": "zoom",
        "chart_id": "c",
        "series_id": None,
        "data_index": None,
        "domain_value": [0, 1],
        "range_value": None,
    }
