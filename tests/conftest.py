"""Pytest fixtures shared across engine unit tests and Django integration tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from core.charting.bootstrap import ChartEngine, build_engine
from engine.categories import InteractionKind, LibraryFamily, PluginCategory, ValueType
from engine.data_checker import Column, Dataset
from engine.descriptors import DataRequirements, PluginDescriptor, StringField
from engine.errors import RenderError


class CountingNativeChart:
    """Native chart double that counts lifecycle calls."""

    def __init__(self, library: LibraryFamily, spec: dict[str, Any], *, fail_on_resize: bool = False) -> None:
        self.library = library
        self.spec = spec
        self.fail_on_resize = fail_on_resize
        self.listeners: dict[str, list[Any]] = {}
        self.update_calls = 0
        self.release_calls = 0
        self.size: tuple[int, int] | None = None

    def update(self, spec: dict[str, Any]) -> None:
        self.spec = spec
        self.update_calls += 1

    def on(self, event: str, callback: Any) -> None:
        self.listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Any) -> None:
        self.listeners[event].remove(callback)
        if not self.listeners[event]:
            del self.listeners[event]

    def resize(self, width: int, height: int) -> None:
        if self.fail_on_resize:
            raise RuntimeError("surface detached")
        self.size = (width, height)

    def release(self) -> None:
        self.release_calls += 1

    def listener_count(self) -> int:
        return sum(len(callbacks) for callbacks in self.listeners.values())

    def emit(self, event: str, payload: Any) -> list[Any]:
        return [callback(payload) for callback in list(self.listeners.get(event, ()))]


class CountingSurface:
    """Container double recording created charts and error placeholders."""

    def __init__(self, *, fail_on_create: bool = False, fail_on_resize: bool = False) -> None:
        self.fail_on_create = fail_on_create
        self.fail_on_resize = fail_on_resize
        self.charts: list[CountingNativeChart] = []
        self.errors: list[RenderError] = []

    def create(self, library: LibraryFamily, spec: dict[str, Any]) -> CountingNativeChart:
        if self.fail_on_create:
            raise RuntimeError("canvas unavailable")
        chart = CountingNativeChart(library, spec, fail_on_resize=self.fail_on_resize)
        self.charts.append(chart)
        return chart

    def show_error(self, error: RenderError) -> None:
        self.errors.append(error)


@pytest.fixture
def surface() -> CountingSurface:
    """Return a fresh counting container."""

    return CountingSurface()


@pytest.fixture
def make_surface() -> type[CountingSurface]:
    """Return the counting container class for tests that need failure modes."""

    return CountingSurface


@pytest.fixture
def engine() -> ChartEngine:
    """Return an engine built from the built-in catalog only."""

    return build_engine({})


@pytest.fixture
def sales_dataset() -> Dataset:
    """Return a small category/amount dataset."""

    return Dataset(
        rows=(
            {"category": "North", "amount": 120, "month": "2025-01-01"},
            {"category": "South", "amount": 80, "month": "2025-02-01"},
            {"category": "East", "amount": 95.5, "month": "2025-03-01"},
        ),
        columns=(
            Column(name="category", type=ValueType.string),
            Column(name="amount", type=ValueType.number),
            Column(name="month", type=ValueType.date),
        ),
    )


@pytest.fixture
def bar_descriptor() -> PluginDescriptor:
    """Return a minimal two-field bar descriptor."""

    return PluginDescriptor(
        id="test-bar",
        display_name="Test Bar",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        config_schema={
            "xField": StringField(required=True, binds_column=True),
            "yField": StringField(required=True, binds_column=True),
        },
        data_requirements=DataRequirements(min_columns=2, required_semantic_fields=("xField", "yField")),
        interaction_capabilities=frozenset({InteractionKind.click}),
        params={"chart_type": "bar", "category_key": "xField", "value_key": "yField"},
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django request cycle or IO.
    - `integration`: tests touching Django views, management commands, or files.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
