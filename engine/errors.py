"""Error taxonomy for the chart engine.

Registration errors are fatal at startup. Validation errors are recoverable and
field-attributed so a configuration UI can highlight the offending input.
Rendering failures are values (`RenderError`) delivered through callbacks
rather than exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ChartEngineError(Exception):
    """Base class for all chart engine errors."""


class RegistrationError(ChartEngineError):
    """A descriptor could not be added to the registry."""


class DuplicateIdError(RegistrationError):
    """A descriptor id is already registered."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(f"Plugin id {plugin_id!r} is already registered.")
        self.plugin_id = plugin_id


class InvalidDescriptorError(RegistrationError):
    """A descriptor violates a registry-build invariant."""

    def __init__(self, plugin_id: str, reason: str) -> None:
        super().__init__(f"PluginDescriptor[{plugin_id}] {reason}")
        self.plugin_id = plugin_id
        self.reason = reason


class UnknownPluginError(ChartEngineError, LookupError):
    """No descriptor is registered under the requested id."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(f"Unknown chart plugin: {plugin_id!r}.")
        self.plugin_id = plugin_id


class AlreadyMountedError(ChartEngineError):
    """A chart instance already owns a live adapter handle."""


class ChartValidationError(ChartEngineError):
    """Base class for recoverable, field-attributed validation failures.

    Attributes:
        code: Stable machine-readable error code.
        field: Config field (or column) the failure is attributed to.
    """

    code = "validation_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {"code": self.code, "field": self.field, "message": self.message}


class ConfigValidationError(ChartValidationError):
    """A caller-supplied config does not satisfy the plugin schema."""


class MissingFieldError(ConfigValidationError):
    code = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Required field {field!r} is missing.", field=field)


class InvalidTypeError(ConfigValidationError):
    code = "invalid_type"

    def __init__(self, field: str, *, expected: str, value: object) -> None:
        super().__init__(
            f"Field {field!r} expects a {expected} value; got {type(value).__name__}.",
            field=field,
        )
        self.expected = expected
        self.value = value


class InvalidEnumError(ConfigValidationError):
    code = "invalid_enum"

    def __init__(self, field: str, *, value: object, options: tuple[object, ...]) -> None:
        super().__init__(
            f"Field {field!r} must be one of {list(options)}; got {value!r}.",
            field=field,
        )
        self.value = value
        self.options = options


class RangeError(ConfigValidationError):
    code = "out_of_range"

    def __init__(
        self,
        field: str,
        *,
        value: float,
        minimum: float | None,
        maximum: float | None,
    ) -> None:
        bounds = f"[{'-inf' if minimum is None else minimum}, {'inf' if maximum is None else maximum}]"
        super().__init__(f"Field {field!r} value {value!r} is outside {bounds}.", field=field)
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class DataValidationError(ChartValidationError):
    """A dataset's shape does not satisfy the plugin's data requirements."""


class InsufficientColumnsError(DataValidationError):
    code = "insufficient_columns"

    def __init__(self, *, required: int, actual: int) -> None:
        super().__init__(f"Dataset has {actual} column(s); at least {required} required.")
        self.required = required
        self.actual = actual


class TooManyColumnsError(DataValidationError):
    code = "too_many_columns"

    def __init__(self, *, allowed: int, actual: int) -> None:
        super().__init__(f"Dataset has {actual} column(s); at most {allowed} allowed.")
        self.allowed = allowed
        self.actual = actual


class UnboundFieldError(DataValidationError):
    code = "unbound_field"

    def __init__(self, field: str, *, column: object = None) -> None:
        if column is None:
            message = f"Field {field!r} is not bound to a dataset column."
        else:
            message = f"Field {field!r} is bound to {column!r}, which is not a dataset column."
        super().__init__(message, field=field)
        self.column = column


class UnsupportedTypeError(DataValidationError):
    code = "unsupported_type"

    def __init__(self, column: str, value_type: str, *, field: str | None = None) -> None:
        super().__init__(f"Column {column!r} has unsupported type {value_type!r}.", field=field)
        self.column = column
        self.value_type = value_type


class AmbiguousGroupingError(DataValidationError):
    code = "ambiguous_grouping"

    def __init__(self, field: str, *, key: object) -> None:
        super().__init__(
            f"Field {field!r} has duplicate key {key!r}; this chart does not aggregate rows.",
            field=field,
        )
        self.key = key


@dataclass(frozen=True, slots=True)
class RenderError:
    """A normalized rendering failure reported by an adapter.

    Args:
        code: Stable error code (e.g. "ECHARTS_INIT_ERROR").
        message: Human-readable description.
    """

    code: str
    message: str

    def as_json(self) -> dict[str, str]:
        """Return a JSON-serializable representation."""

        return {"code": self.code, "message": self.message}
