"""Dataset types and data-requirement checks.

Datasets arrive from an upstream data layer as `{rows, columns}` where each
column carries a name and one of the value types in `ValueType`. The checker
verifies shape before any rendering happens; checks run in a fixed order and
stop at the first failure.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .categories import ValueType
from .descriptors import DataRequirements
from .errors import (
    AmbiguousGroupingError,
    DataValidationError,
    InsufficientColumnsError,
    TooManyColumnsError,
    UnboundFieldError,
    UnsupportedTypeError,
)


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed dataset column."""

    name: str
    type: ValueType

    def as_json(self) -> dict[str, str]:
        """Return a JSON-serializable representation."""

        return {"name": self.name, "type": str(self.type)}


@dataclass(frozen=True, slots=True)
class DatasetSummary:
    """Shape of a dataset without its rows.

    Args:
        column_count: Number of columns.
        column_types: Column name to value type, in column order.
        available_semantic_fields: Column names a config may bind to.
    """

    column_count: int
    column_types: Mapping[str, ValueType]
    available_semantic_fields: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Dataset:
    """Tabular input rows plus column metadata."""

    rows: tuple[Mapping[str, Any], ...]
    columns: tuple[Column, ...]

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Dataset:
        """Coerce the upstream `{rows, columns}` wire shape into a Dataset.

        Args:
            payload: Mapping with a `columns` list of `{name, type}` entries and
                an optional `rows` list of mappings.

        Returns:
            Dataset with typed columns.

        Raises:
            DataValidationError: When the payload is malformed.
            UnsupportedTypeError: When a column declares an unknown type.
        """

        raw_columns = payload.get("columns")
        if not isinstance(raw_columns, Sequence) or isinstance(raw_columns, str):
            raise DataValidationError("Dataset.columns must be a list of {name, type} entries.")
        columns: list[Column] = []
        for entry in raw_columns:
            if not isinstance(entry, Mapping) or not isinstance(entry.get("name"), str):
                raise DataValidationError("Dataset column entries must have a string name.")
            name = entry["name"]
            raw_type = entry.get("type")
            try:
                value_type = ValueType(raw_type)
            except ValueError:
                raise UnsupportedTypeError(name, str(raw_type)) from None
            columns.append(Column(name=name, type=value_type))

        raw_rows = payload.get("rows") or ()
        if not isinstance(raw_rows, Sequence) or isinstance(raw_rows, str):
            raise DataValidationError("Dataset.rows must be a list of records.")
        rows: list[Mapping[str, Any]] = []
        for row in raw_rows:
            if not isinstance(row, Mapping):
                raise DataValidationError("Dataset rows must be mappings of column name to value.")
            rows.append(dict(row))
        return cls(rows=tuple(rows), columns=tuple(columns))

    def column_names(self) -> tuple[str, ...]:
        """Return column names in order."""

        return tuple(column.name for column in self.columns)

    def column_type(self, name: str) -> ValueType | None:
        """Return a column's type, or None when the column is missing."""

        for column in self.columns:
            if column.name == name:
                return column.type
        return None

    def values(self, name: str) -> list[Any]:
        """Return one column's values across rows (None where a row lacks it)."""

        return [row.get(name) for row in self.rows]

    def summary(self) -> DatasetSummary:
        """Summarize the dataset shape."""

        return DatasetSummary(
            column_count=len(self.columns),
            column_types=MappingProxyType({c.name: c.type for c in self.columns}),
            available_semantic_fields=self.column_names(),
        )


def _bound_columns(
    requirements: DataRequirements,
    config: Mapping[str, Any],
    summary: DatasetSummary,
    bound_fields: Iterable[str],
) -> list[tuple[str, str]]:
    available = set(summary.available_semantic_fields)
    pairs: list[tuple[str, str]] = []
    for field in requirements.required_semantic_fields:
        column = config.get(field)
        if not isinstance(column, str) or column not in available:
            raise UnboundFieldError(field, column=column)
        pairs.append((field, column))

    seen = {field for field, _ in pairs}
    for field in bound_fields:
        if field in seen:
            continue
        column = config.get(field)
        if column is None or column == "":
            continue
        if not isinstance(column, str) or column not in available:
            raise UnboundFieldError(field, column=column)
        pairs.append((field, column))
        seen.add(field)
    return pairs


def check_summary(
    requirements: DataRequirements,
    config: Mapping[str, Any],
    summary: DatasetSummary,
    *,
    bound_fields: Iterable[str] = (),
) -> None:
    """Check a dataset summary against data requirements.

    Runs column bounds, field binding, and column type checks in that order.

    Args:
        requirements: Plugin data requirements.
        config: Validated config whose bound fields name columns.
        summary: Dataset shape.
        bound_fields: Optional config keys that bind columns when set.

    Raises:
        InsufficientColumnsError: Fewer columns than `min_columns`.
        TooManyColumnsError: More columns than `max_columns`.
        UnboundFieldError: A bound field does not name a dataset column.
        UnsupportedTypeError: A bound column's type is not supported.
    """

    if summary.column_count < requirements.min_columns:
        raise InsufficientColumnsError(required=requirements.min_columns, actual=summary.column_count)
    if requirements.max_columns is not None and summary.column_count > requirements.max_columns:
        raise TooManyColumnsError(allowed=requirements.max_columns, actual=summary.column_count)

    for field, column in _bound_columns(requirements, config, summary, bound_fields):
        value_type = summary.column_types[column]
        if value_type not in requirements.supported_value_types:
            raise UnsupportedTypeError(column, str(value_type), field=field)


def check_data_requirements(
    requirements: DataRequirements,
    config: Mapping[str, Any],
    dataset: Dataset,
    *,
    bound_fields: Iterable[str] = (),
) -> None:
    """Check a dataset against data requirements.

    Runs `check_summary`, then, for plugins that do not aggregate, rejects a
    grouping column that repeats a key.

    Raises:
        DataValidationError: The first failing check's error.
    """

    check_summary(requirements, config, dataset.summary(), bound_fields=bound_fields)

    grouping_field = requirements.grouping_field
    if requirements.supports_aggregation or grouping_field is None:
        return
    column = config.get(grouping_field)
    if not isinstance(column, str) or dataset.column_type(column) is None:
        return
    seen: set[Any] = set()
    for key in dataset.values(column):
        marker = repr(key) if isinstance(key, (list, dict)) else key
        if marker in seen:
            raise AmbiguousGroupingError(grouping_field, key=key)
        seen.add(marker)
