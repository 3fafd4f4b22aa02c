"""Plugin descriptor types.

A PluginDescriptor is static, serializable metadata for one chart kind: which
library renders it, which configuration fields it accepts, and which dataset
shapes it can consume. Descriptors hold no references to rendering code; the
factory selects an adapter from the `library` tag alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Literal

from .categories import ExportFormat, InteractionKind, LibraryFamily, PluginCategory, ValueType

ArrayItemKind = Literal["string", "number", "boolean"]


@dataclass(frozen=True, slots=True)
class StringField:
    """A free-form string config field.

    Args:
        required: Whether callers must supply the field.
        default: Value applied when the field is absent.
        binds_column: Whether the value names a dataset column.
        title: Short label for configuration UIs.
        description: Longer help text for configuration UIs.
    """

    kind: ClassVar[str] = "string"

    required: bool = False
    default: str | None = None
    binds_column: bool = False
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class NumberField:
    """A numeric config field with optional inclusive bounds."""

    kind: ClassVar[str] = "number"

    required: bool = False
    default: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class BooleanField:
    """A boolean config field."""

    kind: ClassVar[str] = "boolean"

    required: bool = False
    default: bool | None = None
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class EnumField:
    """A config field restricted to a closed set of options.

    Options may include `None` where the native library accepts a null choice
    (for example an unsorted sunburst).
    """

    kind: ClassVar[str] = "enum"

    options: tuple[Any, ...] = ()
    required: bool = False
    default: Any = None
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class ArrayField:
    """A list-valued config field, optionally homogeneous."""

    kind: ClassVar[str] = "array"

    item_kind: ArrayItemKind | None = None
    required: bool = False
    default: tuple[Any, ...] | None = None
    title: str = ""
    description: str = ""


FieldSpec = StringField | NumberField | BooleanField | EnumField | ArrayField

ALL_VALUE_TYPES: frozenset[ValueType] = frozenset(ValueType)


@dataclass(frozen=True, slots=True)
class DataRequirements:
    """Declarative shape and type constraints for a plugin's dataset.

    Args:
        min_columns: Minimum dataset column count.
        max_columns: Optional maximum dataset column count.
        required_semantic_fields: Config keys whose values must name columns.
        supported_value_types: Column types the plugin can render.
        supports_aggregation: Whether repeated grouping keys are acceptable.
        grouping_field: Config key naming the grouping (category) column.
    """

    min_columns: int = 1
    max_columns: int | None = None
    required_semantic_fields: tuple[str, ...] = ()
    supported_value_types: frozenset[ValueType] = ALL_VALUE_TYPES
    supports_aggregation: bool = True
    grouping_field: str | None = None


@dataclass(frozen=True, slots=True)
class PluginDescriptor:
    """Static metadata and schema describing one chart kind.

    Args:
        id: Unique, stable plugin key.
        display_name: Human-readable name.
        category: Catalog grouping.
        library: Rendering library family tag.
        config_schema: Ordered mapping from config key to field spec.
        data_requirements: Dataset constraints.
        export_formats: Output formats the chart can be exported to.
        interaction_capabilities: Event kinds the chart emits.
        description: Longer human-readable description.
        tags: Free-form search tags.
        version: Plugin version string.
        params: Plugin-specific rendering parameters read by the adapter.
    """

    id: str
    display_name: str
    category: PluginCategory
    library: LibraryFamily
    config_schema: Mapping[str, FieldSpec] = field(default_factory=dict)
    data_requirements: DataRequirements = DataRequirements()
    export_formats: frozenset[ExportFormat] = frozenset({ExportFormat.png})
    interaction_capabilities: frozenset[InteractionKind] = frozenset()
    description: str = ""
    tags: tuple[str, ...] = ()
    version: str = "1.0.0"
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "config_schema", MappingProxyType(dict(self.config_schema)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "export_formats", frozenset(self.export_formats))
        object.__setattr__(
            self, "interaction_capabilities", frozenset(self.interaction_capabilities)
        )

    def bound_fields(self) -> tuple[str, ...]:
        """Return config keys whose values name dataset columns, in schema order."""

        bound = [
            name
            for name, spec in self.config_schema.items()
            if isinstance(spec, StringField) and spec.binds_column
        ]
        for name in self.data_requirements.required_semantic_fields:
            if name not in bound:
                bound.append(name)
        return tuple(bound)


def descriptor_problems(descriptor: PluginDescriptor) -> list[str]:
    """Return registry-build invariant violations for a descriptor.

    Args:
        descriptor: Descriptor to inspect.

    Returns:
        Human-readable problems; empty when the descriptor is well-formed.
    """

    problems: list[str] = []
    if not descriptor.id.strip():
        problems.append("id must be a non-empty string.")
    if not descriptor.display_name.strip():
        problems.append("display_name must be a non-empty string.")
    if not isinstance(descriptor.category, PluginCategory):
        problems.append(f"category {descriptor.category!r} is not a known category.")
    if not isinstance(descriptor.library, LibraryFamily):
        problems.append(f"library {descriptor.library!r} is not a known library family.")

    schema = descriptor.config_schema
    requirements = descriptor.data_requirements
    for name in requirements.required_semantic_fields:
        spec = schema.get(name)
        if spec is None:
            problems.append(f"required semantic field {name!r} is not a config_schema key.")
        elif not getattr(spec, "required", False):
            problems.append(f"required semantic field {name!r} must be a required config field.")
    if requirements.grouping_field is not None and requirements.grouping_field not in schema:
        problems.append(
            f"grouping_field {requirements.grouping_field!r} is not a config_schema key."
        )
    if requirements.min_columns < 0:
        problems.append("data_requirements.min_columns must be >= 0.")
    if requirements.max_columns is not None and requirements.max_columns < requirements.min_columns:
        problems.append("data_requirements.max_columns must be >= min_columns.")
    if not requirements.supported_value_types:
        problems.append("data_requirements.supported_value_types must not be empty.")

    for name, spec in schema.items():
        if isinstance(spec, EnumField):
            if not spec.options:
                problems.append(f"enum field {name!r} must declare options.")
            elif spec.default is not None and spec.default not in spec.options:
                problems.append(f"enum field {name!r} default {spec.default!r} is not an option.")
        elif isinstance(spec, NumberField):
            if (
                spec.minimum is not None
                and spec.maximum is not None
                and spec.minimum > spec.maximum
            ):
                problems.append(f"number field {name!r} has minimum > maximum.")
            if spec.default is not None:
                if spec.minimum is not None and spec.default < spec.minimum:
                    problems.append(f"number field {name!r} default is below minimum.")
                if spec.maximum is not None and spec.default > spec.maximum:
                    problems.append(f"number field {name!r} default is above maximum.")
        elif not isinstance(spec, (StringField, BooleanField, ArrayField)):
            problems.append(f"field {name!r} has unsupported spec {type(spec).__name__}.")
    return problems
