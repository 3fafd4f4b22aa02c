"""Plain-mapping codec for plugin descriptors.

Descriptors round-trip through JSON/YAML-compatible dicts so catalogs can live
in files and be served by the API. Decoding is strict: unknown field kinds,
categories, libraries or value types raise InvalidDescriptorError.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import fields
from typing import Any, Final

from .categories import ExportFormat, InteractionKind, LibraryFamily, PluginCategory, ValueType
from .descriptors import (
    ArrayField,
    BooleanField,
    DataRequirements,
    EnumField,
    FieldSpec,
    NumberField,
    PluginDescriptor,
    StringField,
)
from .errors import InvalidDescriptorError

FIELD_KINDS: Final[dict[str, type[FieldSpec]]] = {
    "string": StringField,
    "number": NumberField,
    "boolean": BooleanField,
    "enum": EnumField,
    "array": ArrayField,
}


def encode_field(spec: FieldSpec) -> dict[str, Any]:
    """Encode a field spec, omitting unset optional attributes."""

    payload: dict[str, Any] = {"kind": spec.kind}
    for item in fields(spec):
        value = getattr(spec, item.name)
        if value is None or value == "" or (item.name == "binds_column" and not value):
            continue
        payload[item.name] = list(value) if isinstance(value, tuple) else value
    return payload


def encode_descriptor(descriptor: PluginDescriptor) -> dict[str, Any]:
    """Encode a descriptor as a JSON-serializable dict."""

    requirements = descriptor.data_requirements
    return {
        "id": descriptor.id,
        "display_name": descriptor.display_name,
        "description": descriptor.description,
        "category": str(descriptor.category),
        "library": str(descriptor.library),
        "version": descriptor.version,
        "tags": list(descriptor.tags),
        "config_schema": {name: encode_field(spec) for name, spec in descriptor.config_schema.items()},
        "data_requirements": {
            "min_columns": requirements.min_columns,
            "max_columns": requirements.max_columns,
            "required_semantic_fields": list(requirements.required_semantic_fields),
            "supported_value_types": sorted(str(t) for t in requirements.supported_value_types),
            "supports_aggregation": requirements.supports_aggregation,
            "grouping_field": requirements.grouping_field,
        },
        "export_formats": sorted(str(f) for f in descriptor.export_formats),
        "interaction_capabilities": [
            str(kind) for kind in InteractionKind if kind in descriptor.interaction_capabilities
        ],
        "params": dict(descriptor.params),
    }


def _enum_values(plugin_id: str, label: str, enum_type: type, raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, str) or not isinstance(raw, (list, tuple, set, frozenset)):
        raise InvalidDescriptorError(plugin_id, f"{label} must be a list.")
    try:
        return [enum_type(value) for value in raw]
    except ValueError as exc:
        raise InvalidDescriptorError(plugin_id, f"{label} has an unknown value: {exc}") from None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


_ATTRIBUTE_CHECKS: Final[dict[str, tuple[str, Callable[[Any], bool]]]] = {
    "required": ("a boolean", lambda value: isinstance(value, bool)),
    "binds_column": ("a boolean", lambda value: isinstance(value, bool)),
    "title": ("a string", lambda value: isinstance(value, str)),
    "description": ("a string", lambda value: isinstance(value, str)),
    "minimum": ("a number", _is_number),
    "maximum": ("a number", _is_number),
    "options": ("a list", _is_list),
    "item_kind": ("one of string, number, boolean", lambda value: value in ("string", "number", "boolean")),
}

_DEFAULT_CHECKS: Final[dict[str, tuple[str, Callable[[Any], bool]]]] = {
    "string": ("a string", lambda value: isinstance(value, str)),
    "number": ("a number", _is_number),
    "boolean": ("a boolean", lambda value: isinstance(value, bool)),
    "array": ("a list", _is_list),
}


def _check_attributes(plugin_id: str, name: str, kind: str, attributes: Mapping[str, Any]) -> None:
    for key, value in attributes.items():
        if value is None:
            continue
        if key == "default":
            check = _DEFAULT_CHECKS.get(kind)
        else:
            check = _ATTRIBUTE_CHECKS.get(key)
        if check is not None and not check[1](value):
            raise InvalidDescriptorError(
                plugin_id, f"config field {name!r} attribute {key!r} must be {check[0]}, got {value!r}."
            )


def _column_count(plugin_id: str, key: str, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidDescriptorError(plugin_id, f"data_requirements.{key} must be an integer, got {value!r}.")
    return value


def _string_list(plugin_id: str, label: str, raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not _is_list(raw) or not all(isinstance(item, str) for item in raw):
        raise InvalidDescriptorError(plugin_id, f"{label} must be a list of strings.")
    return tuple(raw)


def decode_field(plugin_id: str, name: str, payload: Mapping[str, Any]) -> FieldSpec:
    """Decode one config field spec.

    Raises:
        InvalidDescriptorError: When the kind or an attribute is unknown or
            has the wrong type.
    """

    if not isinstance(payload, Mapping):
        raise InvalidDescriptorError(plugin_id, f"config field {name!r} must be a mapping.")
    kind = payload.get("kind")
    spec_type = FIELD_KINDS.get(kind) if isinstance(kind, str) else None
    if spec_type is None:
        raise InvalidDescriptorError(plugin_id, f"config field {name!r} has unknown kind {kind!r}.")
    allowed = {item.name for item in fields(spec_type)}
    attributes = {key: value for key, value in payload.items() if key != "kind"}
    unknown = sorted(set(attributes) - allowed)
    if unknown:
        raise InvalidDescriptorError(plugin_id, f"config field {name!r} has unknown attributes {unknown}.")
    _check_attributes(plugin_id, name, kind, attributes)
    for key in ("options", "default"):
        if isinstance(attributes.get(key), list):
            attributes[key] = tuple(attributes[key])
    return spec_type(**attributes)


def decode_descriptor(payload: Mapping[str, Any]) -> PluginDescriptor:
    """Decode a descriptor from a plain mapping.

    Raises:
        InvalidDescriptorError: When the payload is malformed.
    """

    plugin_id = str(payload.get("id") or "")
    if not plugin_id:
        raise InvalidDescriptorError("<missing id>", "id must be a non-empty string.")

    try:
        category = PluginCategory(payload.get("category"))
        library = LibraryFamily(payload.get("library"))
    except ValueError as exc:
        raise InvalidDescriptorError(plugin_id, str(exc)) from None

    raw_schema = payload.get("config_schema") or {}
    if not isinstance(raw_schema, Mapping):
        raise InvalidDescriptorError(plugin_id, "config_schema must be a mapping.")
    schema = {name: decode_field(plugin_id, name, spec) for name, spec in raw_schema.items()}

    raw_requirements = payload.get("data_requirements") or {}
    if not isinstance(raw_requirements, Mapping):
        raise InvalidDescriptorError(plugin_id, "data_requirements must be a mapping.")
    value_types = _enum_values(
        plugin_id, "supported_value_types", ValueType, raw_requirements.get("supported_value_types")
    )
    supports_aggregation = raw_requirements.get("supports_aggregation", True)
    if not isinstance(supports_aggregation, bool):
        raise InvalidDescriptorError(plugin_id, "data_requirements.supports_aggregation must be a boolean.")
    grouping_field = raw_requirements.get("grouping_field")
    if grouping_field is not None and not isinstance(grouping_field, str):
        raise InvalidDescriptorError(plugin_id, "data_requirements.grouping_field must be a string.")
    requirements = DataRequirements(
        min_columns=_column_count(plugin_id, "min_columns", raw_requirements.get("min_columns", 1)),
        max_columns=(
            _column_count(plugin_id, "max_columns", raw_requirements["max_columns"])
            if raw_requirements.get("max_columns") is not None
            else None
        ),
        required_semantic_fields=_string_list(
            plugin_id, "required_semantic_fields", raw_requirements.get("required_semantic_fields")
        ),
        supported_value_types=frozenset(value_types) if value_types else frozenset(ValueType),
        supports_aggregation=supports_aggregation,
        grouping_field=grouping_field,
    )

    export_formats = _enum_values(plugin_id, "export_formats", ExportFormat, payload.get("export_formats"))
    capabilities = _enum_values(
        plugin_id, "interaction_capabilities", InteractionKind, payload.get("interaction_capabilities")
    )
    params = payload.get("params") or {}
    if not isinstance(params, Mapping):
        raise InvalidDescriptorError(plugin_id, "params must be a mapping.")

    return PluginDescriptor(
        id=plugin_id,
        display_name=str(payload.get("display_name") or ""),
        description=str(payload.get("description") or ""),
        category=category,
        library=library,
        version=str(payload.get("version") or "1.0.0"),
        tags=_string_list(plugin_id, "tags", payload.get("tags")),
        config_schema=schema,
        data_requirements=requirements,
        export_formats=frozenset(export_formats) if export_formats else frozenset({ExportFormat.png}),
        interaction_capabilities=frozenset(capabilities),
        params=params,
    )
