"""Validate chart catalog files before deploying them."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.charting.catalog import BUILTIN_DESCRIPTORS
from core.charting.catalog_loader import load_catalog_file
from engine.errors import RegistrationError
from engine.registry import build_registry


class Command(BaseCommand):
    """Build a throwaway registry from the built-in catalog plus catalog files."""

    help = "Check that YAML chart catalog files decode and register cleanly (read-only)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "paths",
            nargs="*",
            help="Catalog files to check; defaults to CHART_ENGINE['CATALOG_FILES'].",
        )
        parser.add_argument(
            "--without-builtins",
            action="store_true",
            help="Check the files on their own instead of on top of the built-in catalog.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        from django.conf import settings

        paths: list[str] = list(options["paths"]) or list(
            getattr(settings, "CHART_ENGINE", {}).get("CATALOG_FILES", [])
        )
        without_builtins: bool = options["without_builtins"]

        descriptors = [] if without_builtins else list(BUILTIN_DESCRIPTORS)
        for path in paths:
            try:
                loaded = load_catalog_file(path)
            except FileNotFoundError as exc:
                raise CommandError(f"Catalog file not found: {path}") from exc
            except RegistrationError as exc:
                raise CommandError(f"{path}: {exc}") from exc
            self.stdout.write(f"{path}: {len(loaded)} plugin(s) decoded.")
            descriptors.extend(loaded)

        try:
            registry = build_registry(descriptors)
        except RegistrationError as exc:
            raise CommandError(str(exc)) from exc

        stats = registry.registration_stats()
        self.stdout.write(
            self.style.SUCCESS(f"OK: {stats.total} plugin(s) registered cleanly.")
        )
        for library, count in sorted(stats.by_library.items()):
            self.stdout.write(f"  {library}: {count}")
        return None
