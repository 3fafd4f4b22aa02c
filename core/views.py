"""JSON endpoints for browsing, validating and previewing chart plugins.

All endpoints are read-only: nothing is persisted. Validation failures map to
HTTP 422 with the field-attributed error, unknown plugin ids to 404.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.charting.bootstrap import get_engine
from engine.adapters import PayloadSurface
from engine.categories import LibraryFamily, PluginCategory
from engine.chart import Dimensions
from engine.codec import encode_descriptor
from engine.config_validator import validate_config
from engine.errors import ChartValidationError, RenderError, UnknownPluginError
from engine.factory import Rejected

logger = logging.getLogger(__name__)


def _error(message: str, *, status: int) -> JsonResponse:
    return JsonResponse({"ok": False, "error": message}, status=status)


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    """Parse a JSON object request body, returning None when malformed."""

    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


@require_GET
def plugin_list(request: HttpRequest) -> JsonResponse:
    """List registered plugins, optionally filtered.

    Query parameters: `category`, `library`, `tag` (repeatable, match-any) and
    `q` (ranked text search). Filters combine with AND.
    """

    discovery = get_engine().discovery
    category = (request.GET.get("category") or "").strip()
    library = (request.GET.get("library") or "").strip()
    tags = [tag for tag in request.GET.getlist("tag") if tag.strip()]
    query = (request.GET.get("q") or "").strip()

    if category and category not in {c.value for c in PluginCategory}:
        return _error(f"Unknown category: {category!r}.", status=400)
    if library and library not in {f.value for f in LibraryFamily}:
        return _error(f"Unknown library: {library!r}.", status=400)

    results = discovery.search(query) if query else discovery.all()
    if category:
        allowed = {d.id for d in discovery.by_category(category)}
        results = tuple(d for d in results if d.id in allowed)
    if library:
        allowed = {d.id for d in discovery.by_library(library)}
        results = tuple(d for d in results if d.id in allowed)
    if tags:
        allowed = {d.id for d in discovery.by_tags(tags)}
        results = tuple(d for d in results if d.id in allowed)

    return JsonResponse(
        {
            "ok": True,
            "count": len(results),
            "results": [encode_descriptor(descriptor) for descriptor in results],
        }
    )


@require_GET
def plugin_detail(request: HttpRequest, plugin_id: str) -> JsonResponse:
    """Return one plugin descriptor."""

    try:
        descriptor = get_engine().registry.get(plugin_id)
    except UnknownPluginError as exc:
        return _error(str(exc), status=404)
    return JsonResponse({"ok": True, "plugin": encode_descriptor(descriptor)})


@require_POST
def plugin_validate(request: HttpRequest, plugin_id: str) -> JsonResponse:
    """Validate a config (and, when given, a dataset) against a plugin.

    Body: `{"config": {...}, "dataset": {"rows": [...], "columns": [...]}}`.
    """

    payload = _json_body(request)
    if payload is None:
        return _error("Request body must be a JSON object.", status=400)
    engine = get_engine()
    try:
        descriptor = engine.registry.get(plugin_id)
    except UnknownPluginError as exc:
        return _error(str(exc), status=404)

    raw_config = payload.get("config") or {}
    if not isinstance(raw_config, dict):
        return _error("config must be a JSON object.", status=400)

    if "dataset" not in payload:
        try:
            config = validate_config(descriptor.config_schema, raw_config)
        except ChartValidationError as exc:
            return JsonResponse({"ok": False, "stage": "config", "error": exc.as_json()}, status=422)
        return JsonResponse({"ok": True, "config": config})

    dataset = payload.get("dataset")
    if not isinstance(dataset, dict):
        return _error("dataset must be a JSON object.", status=400)
    result = engine.factory.create(plugin_id, raw_config, dataset)
    if isinstance(result, Rejected):
        return JsonResponse({"ok": False, **result.as_json()}, status=422)
    return JsonResponse({"ok": True, "config": dict(result.instance.config)})


@require_POST
def plugin_preview(request: HttpRequest, plugin_id: str) -> JsonResponse:
    """Build the native chart specification for a config and dataset.

    Body: `{"config", "dataset", "dimensions"?, "theme"?}`. The chart is
    mounted on an in-memory PayloadSurface and released before responding.
    """

    payload = _json_body(request)
    if payload is None:
        return _error("Request body must be a JSON object.", status=400)
    engine = get_engine()
    if plugin_id not in engine.registry:
        return _error(f"Unknown chart plugin: {plugin_id!r}.", status=404)

    raw_config = payload.get("config") or {}
    dataset = payload.get("dataset") or {}
    if not isinstance(raw_config, dict) or not isinstance(dataset, dict):
        return _error("config and dataset must be JSON objects.", status=400)
    theme = payload.get("theme")
    if theme is not None and not isinstance(theme, (str, dict)):
        return _error("theme must be a theme name or a JSON object.", status=400)
    dimensions = None
    if payload.get("dimensions") is not None:
        if not isinstance(payload["dimensions"], dict):
            return _error("dimensions must be a JSON object.", status=400)
        try:
            dimensions = Dimensions.from_mapping(payload["dimensions"])
        except (KeyError, TypeError, ValueError):
            return _error("dimensions need integer width and height and an optional margin object.", status=400)

    result = engine.factory.create(
        plugin_id,
        raw_config,
        dataset,
        dimensions=dimensions,
        theme=theme,
    )
    if isinstance(result, Rejected):
        return JsonResponse({"ok": False, **result.as_json()}, status=422)

    surface = PayloadSurface()
    errors: list[RenderError] = []
    instance = result.instance
    handle = engine.factory.mount(instance, surface, on_error=errors.append)
    if handle is None or surface.latest is None:
        logger.warning("Preview failed for %s: %s", plugin_id, [error.as_json() for error in errors])
        return JsonResponse(
            {"ok": False, "stage": "render", "error": errors[0].as_json() if errors else None},
            status=500,
        )
    body = {
        "ok": True,
        "chart_id": instance.chart_id,
        "plugin_id": instance.plugin_id,
        "dimensions": instance.dimensions.as_json(),
        "payload": surface.latest.as_json(),
    }
    engine.factory.adapter_for(instance.library).unmount(handle)
    return JsonResponse(body)


@require_GET
def plugin_stats(request: HttpRequest) -> JsonResponse:
    """Return registration totals by category and library."""

    engine = get_engine()
    return JsonResponse(
        {
            "ok": True,
            "stats": engine.registry.registration_stats().as_json(),
            "categories": {
                category: [descriptor.id for descriptor in descriptors]
                for category, descriptors in engine.discovery.grouped_by_category().items()
            },
        }
    )
