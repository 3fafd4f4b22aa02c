"""Built-in chart plugin descriptors.

Descriptors are plain data; `core.charting.bootstrap` passes them to
`engine.registry.build_registry` once at app startup. Each entry names the
library that renders it and, in `params`, which config keys bind the category,
value and other columns the adapter reads.
"""

from __future__ import annotations

from typing import Final

from engine.categories import ExportFormat as Fmt
from engine.categories import InteractionKind as Ik
from engine.categories import LibraryFamily, PluginCategory, ValueType
from engine.descriptors import (
    ArrayField,
    BooleanField,
    DataRequirements,
    EnumField,
    FieldSpec,
    NumberField,
    PluginDescriptor,
    StringField,
)

_TABULAR_TYPES: Final[frozenset[ValueType]] = frozenset({ValueType.string, ValueType.number, ValueType.date})
_NUMERIC_TYPES: Final[frozenset[ValueType]] = frozenset({ValueType.number})
_LABELLED_TYPES: Final[frozenset[ValueType]] = frozenset({ValueType.string, ValueType.number})

_POINTER: Final[frozenset[Ik]] = frozenset({Ik.click, Ik.hover})
_LEGEND: Final[frozenset[Ik]] = frozenset({Ik.click, Ik.hover, Ik.legend_toggle})
_CARTESIAN: Final[frozenset[Ik]] = frozenset({Ik.click, Ik.hover, Ik.zoom, Ik.pan, Ik.legend_toggle})
_ECHARTS_CARTESIAN: Final[frozenset[Ik]] = frozenset(
    {Ik.click, Ik.hover, Ik.zoom, Ik.legend_toggle, Ik.selection}
)
_PLOTLY_ALL: Final[frozenset[Ik]] = frozenset(Ik)

_IMAGE: Final[frozenset[Fmt]] = frozenset({Fmt.png, Fmt.svg})
_IMAGE_DATA: Final[frozenset[Fmt]] = frozenset({Fmt.png, Fmt.svg, Fmt.csv})
_RASTER: Final[frozenset[Fmt]] = frozenset({Fmt.png, Fmt.jpg})
_PLOTLY_EXPORT: Final[frozenset[Fmt]] = frozenset({Fmt.png, Fmt.jpg, Fmt.svg, Fmt.pdf})


def _column(title: str, *, required: bool = True) -> StringField:
    return StringField(required=required, binds_column=True, title=title)


_TITLE: Final[StringField] = StringField(title="Chart title")


def _xy_schema(**extra: FieldSpec) -> dict[str, FieldSpec]:
    return {
        "xField": _column("X axis field"),
        "yField": _column("Y axis field"),
        "title": _TITLE,
        **extra,
    }


_XY_REQUIREMENTS: Final[DataRequirements] = DataRequirements(
    min_columns=2,
    required_semantic_fields=("xField", "yField"),
    supported_value_types=_TABULAR_TYPES,
)

_XY_PARAMS: Final[dict[str, str]] = {"category_key": "xField", "value_key": "yField"}


def _label_value_schema(**extra: FieldSpec) -> dict[str, FieldSpec]:
    return {
        "labelField": _column("Label field"),
        "valueField": _column("Value field"),
        "title": _TITLE,
        **extra,
    }


_LABEL_VALUE_PARAMS: Final[dict[str, str]] = {"category_key": "labelField", "value_key": "valueField"}

_SMOOTH: Final[BooleanField] = BooleanField(default=False, title="Smooth lines")
_STACK: Final[StringField] = StringField(title="Stack group")
_SHOW_SYMBOL: Final[BooleanField] = BooleanField(default=True, title="Show point markers")


BUILTIN_DESCRIPTORS: Final[tuple[PluginDescriptor, ...]] = (
    # ECharts
    PluginDescriptor(
        id="basic-bar",
        display_name="Bar Chart",
        description="Compare values across categories with vertical bars.",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        tags=("bar", "comparison", "categorical"),
        config_schema=_xy_schema(stack=_STACK),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_IMAGE_DATA,
        interaction_capabilities=_ECHARTS_CARTESIAN,
        params={"chart_type": "bar", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="echarts-line",
        display_name="Line Chart",
        description="Show trends over a continuous or ordered axis.",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        tags=("line", "trend", "time-series"),
        config_schema=_xy_schema(smooth=_SMOOTH, showSymbol=_SHOW_SYMBOL),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_IMAGE_DATA,
        interaction_capabilities=_ECHARTS_CARTESIAN,
        params={"chart_type": "line", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="echarts-area",
        display_name="Area Chart",
        description="Line chart with the area under each series filled.",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        tags=("area", "trend", "cumulative"),
        config_schema=_xy_schema(smooth=_SMOOTH, stack=_STACK),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_IMAGE,
        interaction_capabilities=_ECHARTS_CARTESIAN,
        params={"chart_type": "area", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="echarts-scatter",
        display_name="Scatter Plot",
        description="Plot the relationship between two numeric variables.",
        category=PluginCategory.statistical,
        library=LibraryFamily.echarts,
        tags=("scatter", "correlation", "distribution"),
        config_schema=_xy_schema(),
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("xField", "yField"),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_ECHARTS_CARTESIAN,
        params={"chart_type": "scatter", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="echarts-pie",
        display_name="Pie Chart",
        description="Show each category's share of a whole.",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        tags=("pie", "proportion", "share"),
        config_schema=_label_value_schema(
            innerRadius=StringField(default="0%", title="Inner radius"),
            outerRadius=StringField(default="70%", title="Outer radius"),
            showLabels=BooleanField(default=True, title="Show slice labels"),
        ),
        data_requirements=DataRequirements(
            min_columns=2,
            max_columns=3,
            required_semantic_fields=("labelField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
            supports_aggregation=False,
            grouping_field="labelField",
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "pie", **_LABEL_VALUE_PARAMS},
    ),
    PluginDescriptor(
        id="echarts-sankey",
        display_name="Sankey Diagram",
        description="Visualize weighted flows between nodes.",
        category=PluginCategory.advanced,
        library=LibraryFamily.echarts,
        tags=("sankey", "flow", "network"),
        config_schema={
            "sourceField": _column("Source field"),
            "targetField": _column("Target field"),
            "valueField": _column("Flow value field"),
            "nodeAlign": EnumField(options=("justify", "left", "right"), default="justify", title="Node alignment"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("sourceField", "targetField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_POINTER,
        params={
            "chart_type": "sankey",
            "source_key": "sourceField",
            "target_key": "targetField",
            "value_key": "valueField",
        },
    ),
    PluginDescriptor(
        id="echarts-candlestick",
        display_name="Candlestick Chart",
        description="Open, high, low and close prices per period, with optional volume.",
        category=PluginCategory.financial,
        library=LibraryFamily.echarts,
        tags=("candlestick", "ohlc", "stock", "finance"),
        config_schema={
            "dateField": _column("Date field"),
            "openField": _column("Open price field"),
            "highField": _column("High price field"),
            "lowField": _column("Low price field"),
            "closeField": _column("Close price field"),
            "volumeField": _column("Volume field", required=False),
            "upColor": StringField(default="#00da3c", title="Rising color"),
            "downColor": StringField(default="#ec0000", title="Falling color"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=5,
            required_semantic_fields=("dateField", "openField", "highField", "lowField", "closeField"),
            supported_value_types=_TABULAR_TYPES,
            supports_aggregation=False,
            grouping_field="dateField",
        ),
        export_formats=_IMAGE_DATA,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom}),
        params={
            "chart_type": "candlestick",
            "date_key": "dateField",
            "open_key": "openField",
            "high_key": "highField",
            "low_key": "lowField",
            "close_key": "closeField",
            "volume_key": "volumeField",
        },
    ),
    PluginDescriptor(
        id="echarts-sunburst",
        display_name="Sunburst Chart",
        description="Hierarchical data as concentric rings.",
        category=PluginCategory.advanced,
        library=LibraryFamily.echarts,
        tags=("sunburst", "hierarchy", "tree"),
        config_schema={
            "nameField": _column("Name field"),
            "valueField": _column("Value field"),
            "childrenField": StringField(default="children", title="Children key"),
            "startAngle": NumberField(default=90, minimum=0, maximum=360, title="Start angle"),
            "sort": EnumField(options=("desc", "asc", None), default="desc", title="Sort order"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("nameField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_POINTER,
        params={
            "chart_type": "sunburst",
            "name_key": "nameField",
            "value_key": "valueField",
            "children_key": "childrenField",
        },
    ),
    PluginDescriptor(
        id="echarts-treemap",
        display_name="Treemap",
        description="Hierarchical data as nested rectangles sized by value.",
        category=PluginCategory.advanced,
        library=LibraryFamily.echarts,
        tags=("treemap", "hierarchy", "proportion"),
        config_schema={
            "nameField": _column("Name field"),
            "valueField": _column("Value field"),
            "childrenField": StringField(default="children", title="Children key"),
            "leafDepth": NumberField(minimum=1, title="Visible depth"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("nameField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom}),
        params={
            "chart_type": "treemap",
            "name_key": "nameField",
            "value_key": "valueField",
            "children_key": "childrenField",
        },
    ),
    PluginDescriptor(
        id="echarts-radar",
        display_name="Radar Chart",
        description="Compare several quantitative variables on radial axes.",
        category=PluginCategory.statistical,
        library=LibraryFamily.echarts,
        tags=("radar", "spider", "multivariate"),
        config_schema={
            "indicatorField": _column("Indicator field"),
            "valueField": _column("Value field"),
            "shape": EnumField(options=("polygon", "circle"), default="polygon", title="Grid shape"),
            "max": NumberField(minimum=0, title="Axis maximum"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("indicatorField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
            supports_aggregation=False,
            grouping_field="indicatorField",
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "radar", "category_key": "indicatorField", "value_key": "valueField"},
    ),
    PluginDescriptor(
        id="echarts-gauge",
        display_name="Gauge",
        description="A single value against a min/max scale.",
        category=PluginCategory.basic,
        library=LibraryFamily.echarts,
        tags=("gauge", "kpi", "single-value"),
        config_schema={
            "valueField": _column("Value field"),
            "min": NumberField(default=0, title="Minimum"),
            "max": NumberField(default=100, title="Maximum"),
            "label": StringField(title="Value label"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=1,
            required_semantic_fields=("valueField",),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=frozenset({Ik.click}),
        params={"chart_type": "gauge", "value_key": "valueField"},
    ),
    PluginDescriptor(
        id="echarts-heatmap",
        display_name="Heatmap",
        description="Color-encoded values on a grid of two categorical axes.",
        category=PluginCategory.statistical,
        library=LibraryFamily.echarts,
        tags=("heatmap", "matrix", "density"),
        config_schema={
            "xField": _column("X axis field"),
            "yField": _column("Y axis field"),
            "valueField": _column("Value field"),
            "showLabels": BooleanField(default=False, title="Show cell labels"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("xField", "yField", "valueField"),
            supported_value_types=_TABULAR_TYPES,
        ),
        export_formats=_IMAGE_DATA,
        interaction_capabilities=_POINTER,
        params={"chart_type": "heatmap", "category_key": "xField", "series_key": "yField", "value_key": "valueField"},
    ),
    # Chart.js
    PluginDescriptor(
        id="chartjs-bar",
        display_name="Chart.js Bar Chart",
        description="Canvas bar chart for comparing categories.",
        category=PluginCategory.basic,
        library=LibraryFamily.chartjs,
        tags=("bar", "comparison", "canvas"),
        config_schema=_xy_schema(stack=_STACK),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_RASTER,
        interaction_capabilities=_CARTESIAN,
        params={"chart_type": "bar", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="chartjs-line",
        display_name="Chart.js Line Chart",
        description="Canvas line chart for trends.",
        category=PluginCategory.basic,
        library=LibraryFamily.chartjs,
        tags=("line", "trend", "canvas"),
        config_schema=_xy_schema(smooth=_SMOOTH, showSymbol=_SHOW_SYMBOL),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_RASTER,
        interaction_capabilities=_CARTESIAN,
        params={"chart_type": "line", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="chartjs-doughnut",
        display_name="Doughnut Chart",
        description="Pie chart with a hollow center.",
        category=PluginCategory.basic,
        library=LibraryFamily.chartjs,
        tags=("doughnut", "donut", "proportion"),
        config_schema=_label_value_schema(cutout=StringField(default="50%", title="Cutout")),
        data_requirements=DataRequirements(
            min_columns=2,
            max_columns=2,
            required_semantic_fields=("labelField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "doughnut", **_LABEL_VALUE_PARAMS},
    ),
    PluginDescriptor(
        id="chartjs-polar-area",
        display_name="Polar Area Chart",
        description="Equal-angle segments whose radius encodes value.",
        category=PluginCategory.statistical,
        library=LibraryFamily.chartjs,
        tags=("polar", "radial", "proportion"),
        config_schema=_label_value_schema(),
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("labelField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
            supports_aggregation=False,
            grouping_field="labelField",
        ),
        export_formats=_RASTER,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "polarArea", **_LABEL_VALUE_PARAMS},
    ),
    PluginDescriptor(
        id="chartjs-radar",
        display_name="Chart.js Radar Chart",
        description="Multivariate comparison on radial axes.",
        category=PluginCategory.statistical,
        library=LibraryFamily.chartjs,
        tags=("radar", "spider", "multivariate"),
        config_schema=_label_value_schema(beginAtZero=BooleanField(default=True, title="Begin at zero")),
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("labelField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_RASTER,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "radar", **_LABEL_VALUE_PARAMS},
    ),
    PluginDescriptor(
        id="chartjs-bubble",
        display_name="Bubble Chart",
        description="Scatter plot with a third variable encoded as bubble size.",
        category=PluginCategory.statistical,
        library=LibraryFamily.chartjs,
        tags=("bubble", "scatter", "multivariate"),
        config_schema={
            "xField": _column("X field"),
            "yField": _column("Y field"),
            "sizeField": _column("Size field"),
            "maxRadius": NumberField(default=20, minimum=1, maximum=100, title="Largest bubble radius"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("xField", "yField", "sizeField"),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_RASTER,
        interaction_capabilities=_CARTESIAN,
        params={"chart_type": "bubble", "x_key": "xField", "y_key": "yField", "size_key": "sizeField"},
    ),
    # Plotly
    PluginDescriptor(
        id="plotly-line",
        display_name="Plotly Line Chart",
        description="Interactive line chart with zoom, pan and box selection.",
        category=PluginCategory.basic,
        library=LibraryFamily.plotly,
        tags=("line", "trend", "interactive"),
        config_schema=_xy_schema(smooth=_SMOOTH, showSymbol=_SHOW_SYMBOL),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=_PLOTLY_ALL,
        params={"chart_type": "line", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="plotly-violin",
        display_name="Violin Plot",
        description="Distribution shape of a numeric variable, optionally per group.",
        category=PluginCategory.statistical,
        library=LibraryFamily.plotly,
        tags=("violin", "distribution", "density"),
        config_schema={
            "valueField": _column("Value field"),
            "groupField": _column("Group field", required=False),
            "showBox": BooleanField(default=True, title="Show inner box"),
            "showMeanLine": BooleanField(default=True, title="Show mean line"),
            "points": EnumField(options=("all", "outliers", "suspectedoutliers"), default="outliers", title="Points"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=1,
            required_semantic_fields=("valueField",),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=_PLOTLY_ALL,
        params={"chart_type": "violin", "value_key": "valueField", "category_key": "groupField"},
    ),
    PluginDescriptor(
        id="plotly-surface3d",
        display_name="3D Surface",
        description="Continuous surface over an x/y grid.",
        category=PluginCategory.advanced,
        library=LibraryFamily.plotly,
        tags=("surface", "3d", "grid"),
        config_schema={
            "xField": _column("X field"),
            "yField": _column("Y field"),
            "zField": _column("Z field"),
            "colorscale": EnumField(
                options=("Viridis", "Cividis", "Hot", "Blues", "RdBu"), default="Viridis", title="Color scale"
            ),
            "showScale": BooleanField(default=True, title="Show color bar"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("xField", "yField", "zField"),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom}),
        params={"chart_type": "surface", "x_key": "xField", "y_key": "yField", "z_key": "zField"},
    ),
    PluginDescriptor(
        id="plotly-mesh3d",
        display_name="3D Mesh",
        description="Triangulated mesh through scattered 3D points.",
        category=PluginCategory.advanced,
        library=LibraryFamily.plotly,
        tags=("mesh", "3d", "geometry"),
        config_schema={
            "xField": _column("X field"),
            "yField": _column("Y field"),
            "zField": _column("Z field"),
            "opacity": NumberField(default=0.8, minimum=0, maximum=1, title="Opacity"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("xField", "yField", "zField"),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom}),
        params={"chart_type": "mesh3d", "x_key": "xField", "y_key": "yField", "z_key": "zField"},
    ),
    PluginDescriptor(
        id="plotly-contour",
        display_name="Contour Plot",
        description="Level curves of a z value over an x/y grid.",
        category=PluginCategory.statistical,
        library=LibraryFamily.plotly,
        tags=("contour", "density", "grid"),
        config_schema={
            "xField": _column("X field"),
            "yField": _column("Y field"),
            "zField": _column("Z field"),
            "coloring": EnumField(options=("fill", "heatmap", "lines"), default="fill", title="Coloring"),
            "colorscale": EnumField(
                options=("Viridis", "Cividis", "Hot", "Blues", "RdBu"), default="Viridis", title="Color scale"
            ),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=3,
            required_semantic_fields=("xField", "yField", "zField"),
            supported_value_types=_NUMERIC_TYPES,
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=_PLOTLY_ALL,
        params={"chart_type": "contour", "x_key": "xField", "y_key": "yField", "z_key": "zField"},
    ),
    PluginDescriptor(
        id="plotly-funnel",
        display_name="Funnel Chart",
        description="Progressive reduction of a value through sequential stages.",
        category=PluginCategory.basic,
        library=LibraryFamily.plotly,
        tags=("funnel", "conversion", "stages"),
        config_schema={
            "stageField": _column("Stage field"),
            "valueField": _column("Value field"),
            "textinfo": EnumField(
                options=("value", "percent initial", "value+percent initial", "none"),
                default="value+percent initial",
                title="Segment text",
            ),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("stageField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
            supports_aggregation=False,
            grouping_field="stageField",
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=frozenset({Ik.click, Ik.hover}),
        params={"chart_type": "funnel", "category_key": "stageField", "value_key": "valueField"},
    ),
    PluginDescriptor(
        id="plotly-waterfall",
        display_name="Waterfall Chart",
        description="Running total built from relative increases and decreases.",
        category=PluginCategory.financial,
        library=LibraryFamily.plotly,
        tags=("waterfall", "bridge", "finance"),
        config_schema=_xy_schema(
            measureField=_column("Measure field (relative/total/absolute)", required=False),
            increasingColor=StringField(default="#2ca02c", title="Increase color"),
            decreasingColor=StringField(default="#d62728", title="Decrease color"),
        ),
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("xField", "yField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_PLOTLY_EXPORT,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom, Ik.pan}),
        params={"chart_type": "waterfall", **_XY_PARAMS, "measure_key": "measureField"},
    ),
    # D3
    PluginDescriptor(
        id="d3js-force-directed-graph",
        display_name="Force-Directed Graph",
        description="Node-link network laid out by a force simulation.",
        category=PluginCategory.advanced,
        library=LibraryFamily.d3js,
        tags=("network", "graph", "force", "relationships"),
        config_schema={
            "linkSourceField": _column("Link source field"),
            "linkTargetField": _column("Link target field"),
            "nodeIdField": _column("Node id field", required=False),
            "groupField": _column("Node group field", required=False),
            "weightField": _column("Link weight field", required=False),
            "forceStrength": NumberField(default=-300, minimum=-1000, maximum=0, title="Charge strength"),
            "linkDistance": NumberField(default=50, minimum=10, maximum=500, title="Link distance"),
            "nodeRadius": NumberField(default=8, minimum=1, maximum=50, title="Node radius"),
            "title": _TITLE,
        },
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("linkSourceField", "linkTargetField"),
            supported_value_types=_LABELLED_TYPES,
        ),
        export_formats=_IMAGE,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.zoom, Ik.pan}),
        params={
            "chart_type": "force",
            "node_key": "nodeIdField",
            "source_key": "linkSourceField",
            "target_key": "linkTargetField",
            "group_key": "groupField",
            "value_key": "weightField",
        },
    ),
    PluginDescriptor(
        id="d3js-bar",
        display_name="D3 Bar Chart",
        description="SVG bar chart drawn with band and linear scales.",
        category=PluginCategory.basic,
        library=LibraryFamily.d3js,
        tags=("bar", "svg", "comparison"),
        config_schema=_xy_schema(),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_IMAGE_DATA,
        interaction_capabilities=frozenset({Ik.click, Ik.hover, Ik.selection, Ik.legend_toggle}),
        params={"chart_type": "bar", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="d3js-line",
        display_name="D3 Line Chart",
        description="SVG line chart with zoomable axes.",
        category=PluginCategory.basic,
        library=LibraryFamily.d3js,
        tags=("line", "svg", "trend"),
        config_schema=_xy_schema(smooth=_SMOOTH, series=ArrayField(title="Series overrides")),
        data_requirements=_XY_REQUIREMENTS,
        export_formats=_IMAGE_DATA,
        interaction_capabilities=frozenset(Ik),
        params={"chart_type": "line", **_XY_PARAMS},
    ),
    PluginDescriptor(
        id="d3js-pie",
        display_name="D3 Pie Chart",
        description="SVG pie or donut chart.",
        category=PluginCategory.basic,
        library=LibraryFamily.d3js,
        tags=("pie", "donut", "svg", "proportion"),
        config_schema=_label_value_schema(
            innerRatio=NumberField(default=0, minimum=0, maximum=0.9, title="Inner radius ratio")
        ),
        data_requirements=DataRequirements(
            min_columns=2,
            required_semantic_fields=("labelField", "valueField"),
            supported_value_types=_LABELLED_TYPES,
            supports_aggregation=False,
            grouping_field="labelField",
        ),
        export_formats=_IMAGE,
        interaction_capabilities=_LEGEND,
        params={"chart_type": "pie", **_LABEL_VALUE_PARAMS},
    ),
)
