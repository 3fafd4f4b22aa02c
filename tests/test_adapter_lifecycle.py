"""Unit tests for adapter mount, update, resize and unmount."""

from __future__ import annotations

import pytest

from core.charting.bootstrap import ChartEngine
from engine.adapters import ADAPTERS, adapter_for
from engine.adapters.echarts import EChartsAdapter
from engine.adapters.surface import PayloadSurface
from engine.categories import InteractionKind, LibraryFamily
from engine.chart import Dimensions, RenderableChart
from engine.data_checker import Dataset
from engine.errors import AlreadyMountedError, ChartEngineError, RenderError
from engine.events import InteractionEvent
from engine.factory import Created

pytestmark = pytest.mark.unit


def _chart(engine: ChartEngine, dataset: Dataset, plugin_id: str = "basic-bar", **config) -> RenderableChart:
    result = engine.factory.create(plugin_id, {"xField": "category", "yField": "amount", **config}, dataset)
    assert isinstance(result, Created)
    return result.instance


def test_every_library_has_exactly_one_adapter() -> None:
    """The adapter table covers each library family once."""

    assert set(ADAPTERS) == set(LibraryFamily)
    for library, adapter in ADAPTERS.items():
        assert adapter.library == library
        assert adapter_for(str(library)) is adapter
    with pytest.raises(ValueError):
        adapter_for("vega")


def test_double_unmount_releases_once(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Unmount is idempotent and releases native resources exactly once."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    handle = adapter.mount(chart, surface)
    assert handle is not None
    native = surface.charts[0]

    adapter.unmount(handle)
    adapter.unmount(handle)

    assert native.release_calls == 1
    assert native.listener_count() == 0
    assert handle.released
    assert not chart.is_mounted


def test_mounting_a_mounted_chart_raises(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """A chart owns at most one live handle."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    handle = adapter.mount(chart, surface)
    assert handle is not None

    with pytest.raises(AlreadyMountedError):
        adapter.mount(chart, surface)

    adapter.unmount(handle)
    assert adapter.mount(chart, surface) is not None


def test_failed_create_shows_error_and_returns_none(engine: ChartEngine, sales_dataset: Dataset, make_surface) -> None:
    """Init failures are reported to the container and the error callback."""

    chart = _chart(engine, sales_dataset)
    failing = make_surface(fail_on_create=True)
    errors: list[RenderError] = []

    handle = EChartsAdapter().mount(chart, failing, on_error=errors.append)

    assert handle is None
    assert [error.code for error in failing.errors] == ["ECHARTS_INIT_ERROR"]
    assert errors == failing.errors
    assert not chart.is_mounted


def test_failure_after_create_releases_native_once(engine: ChartEngine, sales_dataset: Dataset, make_surface) -> None:
    """A native chart created before a failure is released exactly once."""

    chart = _chart(engine, sales_dataset, plugin_id="chartjs-bar")
    failing = make_surface(fail_on_resize=True)

    handle = engine.factory.mount(chart, failing)

    assert handle is None
    assert failing.charts[0].release_calls == 1
    assert failing.errors[0].code == "CHARTJS_INIT_ERROR"


def test_mount_binds_listeners_for_capabilities(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Listeners are bound for each declared interaction kind and forward events."""

    chart = _chart(engine, sales_dataset)
    events: list[InteractionEvent] = []
    handle = engine.factory.mount(chart, surface, on_event=events.append)
    assert handle is not None
    native = surface.charts[0]

    assert set(native.listeners) == {"click", "mouseover", "datazoom", "legendselectchanged", "brushselected"}
    native.emit("click", {"seriesName": "amount", "dataIndex": 1})

    assert len(events) == 1
    assert events[0].chart_id == chart.chart_id
    assert events[0].data_index == 1


def test_repeated_update_does_not_leak_listeners(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Updating with the same chart leaves the same native state and listener set."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    handle = adapter.mount(chart, surface)
    assert handle is not None
    native = surface.charts[0]
    before = native.listener_count()

    adapter.update(handle, chart)
    first_spec = native.spec
    adapter.update(handle, chart)

    assert native.update_calls == 2
    assert native.spec == first_spec
    assert native.listener_count() == before


def test_update_moves_handle_to_new_chart(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Updating with a different chart transfers ownership of the handle."""

    old = _chart(engine, sales_dataset)
    new = _chart(engine, sales_dataset, title="Revenue")
    adapter = EChartsAdapter()
    handle = adapter.mount(old, surface)
    assert handle is not None

    adapter.update(handle, new)

    assert not old.is_mounted
    assert new.adapter_handle is handle
    assert handle.normalizer.chart_id == new.chart_id
    assert surface.charts[0].spec["title"]["text"] == "Revenue"


def test_update_after_unmount_is_ignored(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Released handles do not touch native resources."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    handle = adapter.mount(chart, surface)
    assert handle is not None
    adapter.unmount(handle)

    adapter.update(handle, chart)
    adapter.resize(handle, Dimensions(width=10, height=10))

    assert surface.charts[0].update_calls == 0


def test_resize_updates_native_and_chart(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Resize forwards new dimensions to the native chart."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    handle = adapter.mount(chart, surface)
    assert handle is not None

    adapter.resize(handle, Dimensions(width=1024, height=512))

    assert surface.charts[0].size == (1024, 512)
    assert chart.dimensions.width == 1024


def test_payload_surface_rejects_use_after_release(engine: ChartEngine, sales_dataset: Dataset) -> None:
    """The payload surface's native chart refuses calls once released."""

    chart = _chart(engine, sales_dataset, plugin_id="plotly-line")
    payload_surface = PayloadSurface()
    adapter = adapter_for(LibraryFamily.plotly)
    handle = adapter.mount(chart, payload_surface)
    assert handle is not None
    native = payload_surface.latest
    assert native is not None
    assert native.as_json()["library"] == "plotly"

    adapter.unmount(handle)

    assert native.released
    with pytest.raises(ChartEngineError):
        native.update({})


def test_capabilities_limit_bound_events(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """Charts without zoom capability get no zoom listener."""

    chart = _chart(engine, sales_dataset, plugin_id="chartjs-bar")
    chart.capabilities = frozenset({InteractionKind.click})
    handle = engine.factory.mount(chart, surface)
    assert handle is not None

    assert set(surface.charts[0].listeners) == {"click"}


def test_resize_failure_after_mount_is_reported(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """A native resize failure becomes a RESIZE_ERROR placeholder instead of escaping."""

    chart = _chart(engine, sales_dataset)
    adapter = EChartsAdapter()
    errors: list[RenderError] = []
    handle = adapter.mount(chart, surface, on_error=errors.append)
    assert handle is not None
    native = surface.charts[0]
    native.fail_on_resize = True

    adapter.resize(handle, Dimensions(width=10, height=10))

    assert [error.code for error in errors] == ["ECHARTS_RESIZE_ERROR"]
    assert surface.errors == errors
    assert native.release_calls == 1
    assert handle.released
    assert not chart.is_mounted
    assert chart.dimensions.width != 10


def test_update_failure_shows_placeholder(
    engine: ChartEngine, sales_dataset: Dataset, surface, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A failed update leaves an error placeholder rather than the stale chart."""

    chart = _chart(engine, sales_dataset, plugin_id="chartjs-bar")
    adapter = adapter_for(LibraryFamily.chartjs)
    errors: list[RenderError] = []
    handle = adapter.mount(chart, surface, on_error=errors.append)
    assert handle is not None
    native = surface.charts[0]

    def broken_update(spec: dict) -> None:
        raise RuntimeError("context lost")

    monkeypatch.setattr(native, "update", broken_update)
    adapter.update(handle, chart)

    assert [error.code for error in surface.errors] == ["CHARTJS_UPDATE_ERROR"]
    assert errors == surface.errors
    assert native.release_calls == 1
    assert native.listener_count() == 0
    assert not chart.is_mounted


def test_plotly_range_only_relayout_follows_configured_drag_mode(
    engine: ChartEngine, sales_dataset: Dataset, surface
) -> None:
    """Relayouts carrying only axis ranges are classified by the chart's drag mode."""

    chart = _chart(engine, sales_dataset, plugin_id="plotly-line")
    chart.capabilities = frozenset({InteractionKind.pan})
    events: list[InteractionEvent] = []
    handle = engine.factory.mount(chart, surface, on_event=events.append)
    assert handle is not None
    native = surface.charts[0]
    assert native.spec["layout"]["dragmode"] == "pan"

    native.emit("plotly_relayout", {"xaxis.range[0]": 0.5, "xaxis.range[1]": 2.5})

    assert [(event.kind, event.domain_value) for event in events] == [(InteractionKind.pan, (0.5, 2.5))]


def test_plotly_drag_mode_changes_are_tracked(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """A relayout reporting a new dragmode reclassifies later range-only relayouts."""

    chart = _chart(engine, sales_dataset, plugin_id="plotly-line")
    chart.capabilities = frozenset({InteractionKind.zoom, InteractionKind.pan})
    events: list[InteractionEvent] = []
    handle = engine.factory.mount(chart, surface, on_event=events.append)
    assert handle is not None
    native = surface.charts[0]

    native.emit("plotly_relayout", {"xaxis.range[0]": 1, "xaxis.range[1]": 2})
    native.emit("plotly_relayout", {"dragmode": "pan"})
    native.emit("plotly_relayout", {"xaxis.range[0]": 3, "xaxis.range[1]": 4})

    assert [event.kind for event in events] == [InteractionKind.zoom, InteractionKind.pan]
