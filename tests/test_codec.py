"""Unit tests for descriptor encoding and decoding."""

from __future__ import annotations

import json

import pytest

from core.charting.catalog import BUILTIN_DESCRIPTORS
from engine.codec import decode_descriptor, decode_field, encode_descriptor
from engine.descriptors import EnumField
from engine.errors import InvalidDescriptorError

pytestmark = pytest.mark.unit


def _builtin(plugin_id: str):
    return next(d for d in BUILTIN_DESCRIPTORS if d.id == plugin_id)


def test_builtin_descriptors_survive_json() -> None:
    """Every built-in descriptor decodes back to an equal descriptor."""

    for descriptor in BUILTIN_DESCRIPTORS:
        payload = json.loads(json.dumps(encode_descriptor(descriptor)))
        assert decode_descriptor(payload) == descriptor, descriptor.id


def test_encode_descriptor_shape() -> None:
    """Encoded descriptors use plain strings and lists."""

    payload = encode_descriptor(_builtin("echarts-sunburst"))

    assert payload["category"] == "advanced"
    assert payload["library"] == "echarts"
    assert payload["config_schema"]["startAngle"] == {
        "kind": "number",
        "required": False,
        "default": 90,
        "minimum": 0,
        "maximum": 360,
        "title": "Start angle",
    }
    assert payload["config_schema"]["sort"]["options"] == ["desc", "asc", None]
    assert payload["interaction_capabilities"] == ["click", "hover"]
    assert payload["export_formats"] == ["png", "svg"]


def test_decode_field_converts_lists() -> None:
    """Enum options arrive as lists and are stored as tuples."""

    spec = decode_field("p", "sort", {"kind": "enum", "options": ["a", "b"], "default": "a"})
    assert spec == EnumField(options=("a", "b"), default="a")


@pytest.mark.parametrize(
    "payload",
    [
        {"display_name": "No id", "category": "basic", "library": "echarts"},
        {"id": "x", "display_name": "X", "category": "fancy", "library": "echarts"},
        {"id": "x", "display_name": "X", "category": "basic", "library": "vega"},
        {"id": "x", "display_name": "X", "category": "basic", "library": "echarts", "config_schema": {"a": {"kind": "date"}}},
        {"id": "x", "display_name": "X", "category": "basic", "library": "echarts", "config_schema": {"a": {"kind": "string", "colour": 1}}},
        {"id": "x", "display_name": "X", "category": "basic", "library": "echarts", "export_formats": "png"},
        {"id": "x", "display_name": "X", "category": "basic", "library": "echarts", "interaction_capabilities": ["drag"]},
        {"id": "x", "display_name": "X", "category": "basic", "library": "echarts", "params": ["bar"]},
    ],
)
def test_decode_descriptor_is_strict(payload: dict) -> None:
    """Malformed payloads raise InvalidDescriptorError."""

    with pytest.raises(InvalidDescriptorError):
        decode_descriptor(payload)


_BASE = {"id": "x", "display_name": "X", "category": "basic", "library": "echarts"}


@pytest.mark.parametrize(
    "extra",
    [
        {"data_requirements": {"min_columns": "two"}},
        {"data_requirements": {"max_columns": 2.5}},
        {"data_requirements": {"min_columns": True}},
        {"data_requirements": {"required_semantic_fields": "xField"}},
        {"data_requirements": {"supports_aggregation": "yes"}},
        {"data_requirements": {"grouping_field": 3}},
        {"config_schema": {"size": {"kind": "number", "minimum": "0"}}},
        {"config_schema": {"size": {"kind": "number", "default": "12"}}},
        {"config_schema": {"label": {"kind": "string", "required": "yes"}}},
        {"config_schema": {"flag": {"kind": "boolean", "default": 1}}},
        {"config_schema": {"items": {"kind": "array", "item_kind": "date"}}},
        {"config_schema": {"sort": {"kind": "enum", "options": "asc"}}},
        {"config_schema": {"odd": {"kind": ["string"]}}},
        {"tags": "bar"},
    ],
)
def test_decode_descriptor_rejects_ill_typed_attributes(extra: dict) -> None:
    """Attributes of the wrong type are reported instead of failing later in registration."""

    with pytest.raises(InvalidDescriptorError) as excinfo:
        decode_descriptor({**_BASE, **extra})
    assert excinfo.value.plugin_id == "x"
