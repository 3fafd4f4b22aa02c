"""Validate caller-supplied chart configuration against a plugin schema.

Validation walks the schema in declaration order and stops at the first
failure. Fields not named by the schema pass through unchanged so adapters can
accept library-specific extras (series styling, axes, legend) without each
plugin having to declare them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .descriptors import ArrayField, BooleanField, EnumField, FieldSpec, NumberField, StringField
from .errors import InvalidEnumError, InvalidTypeError, MissingFieldError, RangeError

logger = logging.getLogger(__name__)

_ITEM_CHECKS = {
    "string": lambda value: isinstance(value, str),
    "number": lambda value: _is_number(value),
    "boolean": lambda value: isinstance(value, bool),
}


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_field(name: str, spec: FieldSpec, value: Any) -> Any:
    if isinstance(spec, StringField):
        if not isinstance(value, str):
            raise InvalidTypeError(name, expected="string", value=value)
        return value
    if isinstance(spec, NumberField):
        if not _is_number(value):
            raise InvalidTypeError(name, expected="number", value=value)
        if (spec.minimum is not None and value < spec.minimum) or (
            spec.maximum is not None and value > spec.maximum
        ):
            raise RangeError(name, value=value, minimum=spec.minimum, maximum=spec.maximum)
        return value
    if isinstance(spec, BooleanField):
        if not isinstance(value, bool):
            raise InvalidTypeError(name, expected="boolean", value=value)
        return value
    if isinstance(spec, EnumField):
        if value not in spec.options:
            raise InvalidEnumError(name, value=value, options=spec.options)
        return value
    if isinstance(spec, ArrayField):
        if not isinstance(value, (list, tuple)):
            raise InvalidTypeError(name, expected="array", value=value)
        if spec.item_kind is not None:
            check = _ITEM_CHECKS[spec.item_kind]
            for item in value:
                if not check(item):
                    raise InvalidTypeError(name, expected=f"array of {spec.item_kind}", value=item)
        return list(value)
    raise TypeError(f"Unsupported field spec for {name!r}: {type(spec).__name__}")


def _default_for(spec: FieldSpec) -> Any:
    if isinstance(spec, ArrayField) and spec.default is not None:
        return list(spec.default)
    return spec.default


def validate_config(schema: Mapping[str, FieldSpec], raw: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and default a raw config.

    Args:
        schema: Ordered mapping of config key to field spec.
        raw: Caller-supplied configuration.

    Returns:
        A new dict with every declared default applied and unknown keys kept.

    Raises:
        MissingFieldError: A required field is absent.
        InvalidTypeError: A present field has the wrong kind of value.
        InvalidEnumError: An enum value is not one of the declared options.
        RangeError: A number falls outside the declared bounds.
    """

    validated: dict[str, Any] = dict(raw)
    for name, spec in schema.items():
        # Explicit null counts as absent; enums check None against their options.
        if name not in raw or (raw[name] is None and not isinstance(spec, EnumField)):
            if spec.required:
                raise MissingFieldError(name)
            validated.pop(name, None)
            default = _default_for(spec)
            if default is not None:
                validated[name] = default
            continue
        validated[name] = _check_field(name, spec, raw[name])
    return validated
