"""List registered chart plugins."""

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError

from core.charting.bootstrap import get_engine
from engine.categories import LibraryFamily, PluginCategory
from engine.codec import encode_descriptor


class Command(BaseCommand):
    """Print registered chart plugins, optionally filtered."""

    help = "List registered chart plugins grouped by category."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--category",
            choices=[category.value for category in PluginCategory],
            default=None,
            help="Only list plugins in this category.",
        )
        parser.add_argument(
            "--library",
            choices=[library.value for library in LibraryFamily],
            default=None,
            help="Only list plugins rendered by this library.",
        )
        parser.add_argument(
            "--search",
            default=None,
            help="Rank plugins by a text query over names, tags and descriptions.",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Emit full descriptors as JSON.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        category: str | None = options["category"]
        library: str | None = options["library"]
        search: str | None = options["search"]
        as_json: bool = options["json"]

        discovery = get_engine().discovery
        if search is not None:
            if not search.strip():
                raise CommandError("--search requires a non-empty query.")
            descriptors = discovery.search(search)
        else:
            descriptors = discovery.all()
        if category:
            descriptors = tuple(d for d in descriptors if d.category == category)
        if library:
            descriptors = tuple(d for d in descriptors if d.library == library)

        if as_json:
            self.stdout.write(json.dumps([encode_descriptor(d) for d in descriptors], indent=2))
            return None

        if not descriptors:
            self.stdout.write("No chart plugins matched.")
            return None
        current: str | None = None
        ordered = descriptors if search is not None else sorted(
            descriptors, key=lambda d: list(PluginCategory).index(d.category)
        )
        for descriptor in ordered:
            if search is None and descriptor.category != current:
                current = descriptor.category
                self.stdout.write(f"{current}:")
            self.stdout.write(
                f"  {descriptor.id:<28} {descriptor.library:<8} {descriptor.display_name}"
            )
        self.stdout.write(f"{len(descriptors)} plugin(s).")
        return None
