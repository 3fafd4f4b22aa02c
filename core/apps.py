"""App configuration for the core Django app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app."""

    name = "core"
    verbose_name = "Chart plugins"

    def ready(self) -> None:
        """Build the chart plugin registry once at startup."""

        from core.charting.bootstrap import bootstrap

        bootstrap()
