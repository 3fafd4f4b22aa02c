"""Unit tests for the built-in chart catalog."""

from __future__ import annotations

from collections import Counter

import pytest

from core.charting.bootstrap import ChartEngine
from core.charting.catalog import BUILTIN_DESCRIPTORS
from engine.adapters import adapter_for
from engine.categories import LibraryFamily
from engine.chart import Dimensions, RenderableChart, resolve_theme
from engine.data_checker import Column
from engine.descriptors import descriptor_problems

pytestmark = pytest.mark.unit


def test_builtin_ids_are_unique_and_well_formed() -> None:
    """The shipped catalog registers without problems."""

    counts = Counter(descriptor.id for descriptor in BUILTIN_DESCRIPTORS)
    assert [plugin_id for plugin_id, count in counts.items() if count > 1] == []
    for descriptor in BUILTIN_DESCRIPTORS:
        assert descriptor_problems(descriptor) == [], descriptor.id


def test_every_library_ships_plugins(engine: ChartEngine) -> None:
    """Each library family has at least one built-in plugin."""

    for library in LibraryFamily:
        assert engine.discovery.by_library(library), library


def test_flagship_plugins_are_registered(engine: ChartEngine) -> None:
    """The flagship plugin ids resolve."""

    for plugin_id in ("basic-bar", "echarts-sunburst", "plotly-surface3d", "d3js-force-directed-graph"):
        assert engine.registry.get(plugin_id).id == plugin_id


@pytest.mark.parametrize("descriptor", BUILTIN_DESCRIPTORS, ids=lambda d: d.id)
def test_every_builtin_builds_a_spec_for_empty_data(descriptor) -> None:
    """Adapters build a native spec for each plugin even with no rows."""

    config = {name: spec.default for name, spec in descriptor.config_schema.items() if spec.default is not None}
    columns = []
    for name in descriptor.bound_fields():
        config[name] = name
        columns.append(Column(name=name, type=next(iter(sorted(descriptor.data_requirements.supported_value_types)))))
    chart = RenderableChart(
        chart_id="empty",
        plugin_id=descriptor.id,
        library=descriptor.library,
        params=descriptor.params,
        capabilities=descriptor.interaction_capabilities,
        config=config,
        data=(),
        columns=tuple(columns),
        dimensions=Dimensions(width=640, height=480),
        theme=resolve_theme("dark"),
    )

    spec = adapter_for(descriptor.library).build_spec(chart)

    assert isinstance(spec, dict)
    assert spec
