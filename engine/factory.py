"""Factory service: turn a plugin id, config and dataset into a renderable chart.

`create` runs config validation, then data-requirement checks, and returns a
discriminated result rather than raising for recoverable validation failures.
`mount` selects the adapter from the chart's library tag.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Literal

from .adapters import AdapterHandle, ChartAdapter, Container, adapter_for
from .categories import LibraryFamily
from .chart import Dimensions, RenderableChart, Theme, resolve_theme
from .config_validator import validate_config
from .data_checker import Dataset, check_data_requirements
from .errors import ChartValidationError
from .events import ErrorHandler, EventHandler
from .registry import PluginRegistry
from .settings import EngineSettings

logger = logging.getLogger(__name__)

Stage = Literal["config", "data"]


@dataclass(frozen=True, slots=True)
class Created:
    """Successful create result."""

    ok: ClassVar[bool] = True

    instance: RenderableChart


@dataclass(frozen=True, slots=True)
class Rejected:
    """Failed create result carrying the first validation error."""

    ok: ClassVar[bool] = False

    stage: Stage
    error: ChartValidationError

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {"stage": self.stage, "error": self.error.as_json()}


CreateResult = Created | Rejected


class FactoryService:
    """Create and mount chart instances for registered plugins."""

    def __init__(self, registry: PluginRegistry, *, settings: EngineSettings | None = None) -> None:
        self.registry = registry
        self.settings = settings if settings is not None else EngineSettings()

    def create(
        self,
        plugin_id: str,
        raw_config: Mapping[str, Any],
        dataset: Dataset | Mapping[str, Any],
        dimensions: Dimensions | None = None,
        theme: Theme | Mapping[str, Any] | str | None = None,
        *,
        chart_id: str | None = None,
    ) -> CreateResult:
        """Validate inputs and build a RenderableChart.

        Args:
            plugin_id: Registered plugin id.
            raw_config: Caller-supplied configuration.
            dataset: Dataset or its `{rows, columns}` wire shape.
            dimensions: Drawing size; settings defaults when omitted.
            theme: Theme, theme name, or partial theme mapping.
            chart_id: Identifier stamped on interaction events.

        Returns:
            Created with the instance, or Rejected with the first error.

        Raises:
            UnknownPluginError: When `plugin_id` is not registered.
        """

        descriptor = self.registry.get(plugin_id)

        try:
            config = validate_config(descriptor.config_schema, raw_config)
        except ChartValidationError as exc:
            logger.debug("Rejected config for %s: %s", plugin_id, exc)
            return Rejected(stage="config", error=exc)

        try:
            if not isinstance(dataset, Dataset):
                dataset = Dataset.from_mapping(dataset)
            check_data_requirements(
                descriptor.data_requirements,
                config,
                dataset,
                bound_fields=descriptor.bound_fields(),
            )
        except ChartValidationError as exc:
            logger.debug("Rejected data for %s: %s", plugin_id, exc)
            return Rejected(stage="data", error=exc)

        instance = RenderableChart(
            chart_id=chart_id or f"{plugin_id}-{uuid.uuid4().hex[:12]}",
            plugin_id=descriptor.id,
            library=descriptor.library,
            params=descriptor.params,
            capabilities=descriptor.interaction_capabilities,
            config=config,
            data=dataset.rows,
            columns=dataset.columns,
            dimensions=dimensions
            or Dimensions(width=self.settings.default_width, height=self.settings.default_height),
            theme=resolve_theme(theme, default=self.settings.default_theme),
        )
        return Created(instance=instance)

    def adapter_for(self, library: LibraryFamily | str) -> ChartAdapter:
        """Return the adapter for a library family."""

        return adapter_for(library)

    def mount(
        self,
        instance: RenderableChart,
        container: Container,
        on_event: EventHandler | None = None,
        on_error: ErrorHandler | None = None,
        *,
        suppress_legend_toggle: bool | None = None,
    ) -> AdapterHandle | None:
        """Mount a chart with the adapter matching its library tag.

        `suppress_legend_toggle` falls back to the engine setting when omitted.

        Raises:
            AlreadyMountedError: When the instance already owns a live handle.
        """

        return self.adapter_for(instance.library).mount(
            instance,
            container,
            on_event=on_event,
            on_error=on_error,
            suppress_legend_toggle=(
                self.settings.suppress_legend_toggle if suppress_legend_toggle is None else suppress_legend_toggle
            ),
        )
