"""Unit tests for chart config validation."""

from __future__ import annotations

import pytest

from engine.config_validator import validate_config
from engine.descriptors import ArrayField, BooleanField, EnumField, NumberField, StringField
from engine.errors import InvalidEnumError, InvalidTypeError, MissingFieldError, RangeError

pytestmark = pytest.mark.unit


SCHEMA = {
    "xField": StringField(required=True, binds_column=True),
    "yField": StringField(required=True, binds_column=True),
    "smooth": BooleanField(default=False),
    "startAngle": NumberField(default=90, minimum=0, maximum=360),
    "sort": EnumField(options=("desc", "asc", None), default="desc"),
    "colors": ArrayField(item_kind="string"),
}


def test_validate_config_applies_defaults_and_keeps_unknown_keys() -> None:
    """Declared defaults fill gaps; undeclared keys pass through untouched."""

    result = validate_config(SCHEMA, {"xField": "a", "yField": "b", "legend": "bottom"})

    assert result == {
        "xField": "a",
        "yField": "b",
        "smooth": False,
        "startAngle": 90,
        "sort": "desc",
        "legend": "bottom",
    }


def test_validate_config_is_idempotent() -> None:
    """Validating an already-validated config changes nothing."""

    once = validate_config(SCHEMA, {"xField": "a", "yField": "b", "colors": ("#fff",)})
    assert validate_config(SCHEMA, once) == once


def test_validate_config_does_not_mutate_input() -> None:
    """The caller's mapping is copied, not modified."""

    raw = {"xField": "a", "yField": "b"}
    validate_config(SCHEMA, raw)
    assert raw == {"xField": "a", "yField": "b"}


def test_missing_required_field_names_the_field() -> None:
    """The first absent required field is reported."""

    with pytest.raises(MissingFieldError) as excinfo:
        validate_config(SCHEMA, {"xField": "a"})
    assert excinfo.value.field == "yField"
    assert excinfo.value.as_json()["code"] == "missing_field"


def test_explicit_null_counts_as_missing() -> None:
    """A None value for a required string is treated like an absent key."""

    with pytest.raises(MissingFieldError):
        validate_config(SCHEMA, {"xField": None, "yField": "b"})


def test_null_is_a_valid_enum_option_when_declared() -> None:
    """Enums that list None accept an explicit null."""

    result = validate_config(SCHEMA, {"xField": "a", "yField": "b", "sort": None})
    assert result["sort"] is None


@pytest.mark.parametrize(
    ("raw", "field", "expected"),
    [
        ({"smooth": "yes"}, "smooth", "boolean"),
        ({"startAngle": True}, "startAngle", "number"),
        ({"startAngle": "90"}, "startAngle", "number"),
        ({"xField": 3}, "xField", "string"),
        ({"colors": "red"}, "colors", "array"),
        ({"colors": ["red", 4]}, "colors", "array of string"),
    ],
)
def test_wrong_value_kind_is_rejected(raw: dict, field: str, expected: str) -> None:
    """Values of the wrong kind raise InvalidTypeError; booleans are not numbers."""

    config = {"xField": "a", "yField": "b", **raw}
    with pytest.raises(InvalidTypeError) as excinfo:
        validate_config(SCHEMA, config)
    assert excinfo.value.field == field
    assert excinfo.value.expected == expected


def test_out_of_range_number_is_rejected_not_clamped() -> None:
    """Bounds are enforced by raising, never by clamping."""

    with pytest.raises(RangeError) as excinfo:
        validate_config(SCHEMA, {"xField": "a", "yField": "b", "startAngle": 361})
    assert excinfo.value.value == 361
    assert excinfo.value.maximum == 360
    assert excinfo.value.code == "out_of_range"


def test_bounds_are_inclusive() -> None:
    """Values equal to a bound are accepted."""

    for angle in (0, 360, 12.5):
        result = validate_config(SCHEMA, {"xField": "a", "yField": "b", "startAngle": angle})
        assert result["startAngle"] == angle


def test_enum_value_outside_options_is_rejected() -> None:
    """Enum values must be one of the declared options."""

    with pytest.raises(InvalidEnumError) as excinfo:
        validate_config(SCHEMA, {"xField": "a", "yField": "b", "sort": "random"})
    assert excinfo.value.options == ("desc", "asc", None)


def test_validation_stops_at_first_schema_field() -> None:
    """Failures are reported in schema declaration order."""

    with pytest.raises(MissingFieldError) as excinfo:
        validate_config(SCHEMA, {"smooth": "nope"})
    assert excinfo.value.field == "xField"
