"""Closed taxonomies shared by plugin descriptors.

Values are stable identifiers used across the registry, discovery filters, and
the JSON endpoints.
"""

from __future__ import annotations

from enum import StrEnum


class PluginCategory(StrEnum):
    """Catalog grouping for a chart kind."""

    basic = "basic"
    statistical = "statistical"
    advanced = "advanced"
    financial = "financial"


class LibraryFamily(StrEnum):
    """Rendering library a plugin targets.

    Each family is served by exactly one rendering adapter.
    """

    echarts = "echarts"
    chartjs = "chartjs"
    plotly = "plotly"
    d3js = "d3js"


class InteractionKind(StrEnum):
    """Normalized interaction event kinds."""

    click = "click"
    hover = "hover"
    zoom = "zoom"
    pan = "pan"
    legend_toggle = "legend-toggle"
    selection = "selection"


class ValueType(StrEnum):
    """Column value types accepted from the upstream data layer."""

    string = "string"
    number = "number"
    date = "date"
    boolean = "boolean"


class ExportFormat(StrEnum):
    """Output formats a plugin can be exported to."""

    png = "png"
    jpg = "jpg"
    svg = "svg"
    pdf = "pdf"
    csv = "csv"
