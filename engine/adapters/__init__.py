"""Rendering adapters, one per library family."""

from __future__ import annotations

from typing import Final

from ..categories import LibraryFamily
from .base import AdapterHandle, ChartAdapter
from .chartjs import ChartJSAdapter
from .d3 import D3Adapter
from .echarts import EChartsAdapter
from .plotly import PlotlyAdapter
from .surface import Container, NativeChart, PayloadChart, PayloadSurface

ADAPTERS: Final[dict[LibraryFamily, ChartAdapter]] = {
    LibraryFamily.echarts: EChartsAdapter(),
    LibraryFamily.chartjs: ChartJSAdapter(),
    LibraryFamily.plotly: PlotlyAdapter(),
    LibraryFamily.d3js: D3Adapter(),
}


def adapter_for(library: LibraryFamily | str) -> ChartAdapter:
    """Return the adapter serving a library family.

    Raises:
        ValueError: When `library` is not a known family.
    """

    return ADAPTERS[LibraryFamily(library)]


__all__ = [
    "ADAPTERS",
    "AdapterHandle",
    "ChartAdapter",
    "ChartJSAdapter",
    "Container",
    "D3Adapter",
    "EChartsAdapter",
    "NativeChart",
    "PayloadChart",
    "PayloadSurface",
    "PlotlyAdapter",
    "adapter_for",
]
