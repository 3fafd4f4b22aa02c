"""Unit tests for chart creation and mounting through the factory."""

from __future__ import annotations

import pytest

from core.charting.bootstrap import ChartEngine, build_engine
from engine.adapters.surface import PayloadSurface
from engine.categories import LibraryFamily
from engine.chart import Dimensions, Margin
from engine.data_checker import Dataset
from engine.errors import InsufficientColumnsError, MissingFieldError, UnknownPluginError
from engine.factory import Created, Rejected

pytestmark = pytest.mark.unit


def test_create_basic_bar_end_to_end(engine: ChartEngine, sales_dataset: Dataset) -> None:
    """A valid config and dataset produce a renderable chart."""

    result = engine.factory.create("basic-bar", {"xField": "category", "yField": "amount"}, sales_dataset)

    assert isinstance(result, Created)
    assert result.ok is True
    chart = result.instance
    assert chart.plugin_id == "basic-bar"
    assert chart.library == LibraryFamily.echarts
    assert chart.chart_id.startswith("basic-bar-")
    assert chart.config["xField"] == "category"
    assert chart.data == sales_dataset.rows
    assert (chart.dimensions.width, chart.dimensions.height) == (800, 400)
    assert chart.theme.name == "light"
    assert not chart.is_mounted


def test_create_missing_field_is_rejected_at_config_stage(engine: ChartEngine, sales_dataset: Dataset) -> None:
    """A missing required field is reported, not raised."""

    result = engine.factory.create("basic-bar", {"xField": "category"}, sales_dataset)

    assert isinstance(result, Rejected)
    assert result.ok is False
    assert result.stage == "config"
    assert isinstance(result.error, MissingFieldError)
    assert result.error.field == "yField"
    assert result.as_json()["error"]["code"] == "missing_field"


def test_create_short_dataset_is_rejected_at_data_stage(engine: ChartEngine) -> None:
    """Dataset shape problems surface as data-stage rejections."""

    dataset = {"columns": [{"name": "category", "type": "string"}], "rows": [{"category": "a"}]}
    result = engine.factory.create("basic-bar", {"xField": "category", "yField": "category"}, dataset)

    assert isinstance(result, Rejected)
    assert result.stage == "data"
    assert isinstance(result.error, InsufficientColumnsError)


def test_create_unknown_plugin_raises(engine: ChartEngine, sales_dataset: Dataset) -> None:
    """Unknown plugin ids are a caller error, not a validation result."""

    with pytest.raises(UnknownPluginError):
        engine.factory.create("no-such-chart", {}, sales_dataset)


def test_create_accepts_dimensions_theme_and_chart_id(engine: ChartEngine, sales_dataset: Dataset) -> None:
    """Explicit presentation options are carried onto the instance."""

    dimensions = Dimensions(width=300, height=200, margin=Margin(top=10, right=10, bottom=10, left=10))
    result = engine.factory.create(
        "chartjs-bar",
        {"xField": "category", "yField": "amount"},
        sales_dataset,
        dimensions,
        {"name": "dark", "palette": ["#ff0000"]},
        chart_id="sales",
    )

    assert isinstance(result, Created)
    chart = result.instance
    assert chart.chart_id == "sales"
    assert chart.dimensions.inner_width == 280
    assert chart.theme.name == "dark"
    assert chart.theme.palette == ("#ff0000",)


def test_settings_supply_default_size_and_theme(sales_dataset: Dataset) -> None:
    """Engine options drive the fallback dimensions and theme."""

    engine = build_engine({"DEFAULT_WIDTH": 640, "DEFAULT_HEIGHT": 320, "DEFAULT_THEME": "dark"})
    result = engine.factory.create("basic-bar", {"xField": "category", "yField": "amount"}, sales_dataset)

    assert isinstance(result, Created)
    assert (result.instance.dimensions.width, result.instance.dimensions.height) == (640, 320)
    assert result.instance.theme.name == "dark"


def test_mount_selects_adapter_by_library(engine: ChartEngine, sales_dataset: Dataset, surface) -> None:
    """The factory mounts with the adapter matching the library tag."""

    result = engine.factory.create("basic-bar", {"xField": "category", "yField": "amount"}, sales_dataset)
    assert isinstance(result, Created)

    handle = engine.factory.mount(result.instance, surface)

    assert handle is not None
    assert handle.library == LibraryFamily.echarts
    assert result.instance.is_mounted
    assert surface.charts[0].spec["series"][0]["type"] == "bar"
    assert surface.charts[0].size == (800, 400)


def test_mount_legend_suppression_is_set_by_caller(sales_dataset: Dataset) -> None:
    """An explicit flag overrides the engine-wide legend setting in both directions."""

    engine = build_engine({"SUPPRESS_LEGEND_TOGGLE": True})
    result = engine.factory.create("basic-bar", {"xField": "category", "yField": "amount"}, sales_dataset)
    assert isinstance(result, Created)

    first = PayloadSurface()
    handle = engine.factory.mount(result.instance, first, suppress_legend_toggle=False)
    assert handle is not None
    assert handle.suppress_legend_toggle is False
    assert "selectedMode" not in first.charts[0].spec["legend"]
    engine.factory.adapter_for(handle.library).unmount(handle)

    second = PayloadSurface()
    handle = engine.factory.mount(result.instance, second)
    assert handle is not None
    assert handle.suppress_legend_toggle is True
    assert second.charts[0].spec["legend"]["selectedMode"] is False
