"""Integration tests for the chart plugin JSON API."""

from __future__ import annotations

import json
from typing import Any

import pytest
from django.test import Client
from django.urls import reverse

pytestmark = pytest.mark.integration


SALES = {
    "columns": [{"name": "category", "type": "string"}, {"name": "amount", "type": "number"}],
    "rows": [{"category": "North", "amount": 120}, {"category": "South", "amount": 80}],
}


def _post(client: Client, url: str, body: Any) -> Any:
    return client.post(url, data=json.dumps(body), content_type="application/json")


def test_plugin_list_returns_every_plugin(client: Client) -> None:
    """The unfiltered list returns the whole catalog."""

    response = client.get(reverse("core:plugin_list"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["count"] == len(payload["results"])
    assert "basic-bar" in [plugin["id"] for plugin in payload["results"]]


def test_plugin_list_filters_combine(client: Client) -> None:
    """Category, library, tag and query filters narrow the result together."""

    response = client.get(
        reverse("core:plugin_list"),
        {"category": "basic", "library": "echarts", "tag": ["bar", "pie"]},
    )
    ids = [plugin["id"] for plugin in response.json()["results"]]
    assert ids == ["basic-bar", "echarts-pie"]

    searched = client.get(reverse("core:plugin_list"), {"q": "bar chart"}).json()
    assert [plugin["id"] for plugin in searched["results"]][0] == "basic-bar"


def test_plugin_list_rejects_unknown_filters(client: Client) -> None:
    """Unknown categories and libraries are a bad request."""

    assert client.get(reverse("core:plugin_list"), {"category": "fancy"}).status_code == 400
    assert client.get(reverse("core:plugin_list"), {"library": "vega"}).status_code == 400


def test_plugin_detail_and_missing_plugin(client: Client) -> None:
    """Detail returns one encoded descriptor; unknown ids are 404."""

    response = client.get(reverse("core:plugin_detail", args=["echarts-sunburst"]))
    assert response.status_code == 200
    assert response.json()["plugin"]["config_schema"]["startAngle"]["maximum"] == 360

    assert client.get(reverse("core:plugin_detail", args=["nope"])).status_code == 404


def test_validate_config_only(client: Client) -> None:
    """Config-only validation returns the defaulted config."""

    response = _post(client, reverse("core:plugin_validate", args=["echarts-sunburst"]), {"config": {"nameField": "n", "valueField": "v"}})

    assert response.status_code == 200
    assert response.json()["config"]["startAngle"] == 90


def test_validate_reports_first_error(client: Client) -> None:
    """Validation failures are 422 with a field-attributed error."""

    response = _post(
        client,
        reverse("core:plugin_validate", args=["basic-bar"]),
        {"config": {"xField": "category"}, "dataset": SALES},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["stage"] == "config"
    assert body["error"] == {
        "code": "missing_field",
        "field": "yField",
        "message": body["error"]["message"],
    }


def test_validate_data_stage(client: Client) -> None:
    """Data problems are reported with the data stage."""

    response = _post(
        client,
        reverse("core:plugin_validate", args=["basic-bar"]),
        {"config": {"xField": "category", "yField": "profit"}, "dataset": SALES},
    )

    assert response.status_code == 422
    assert response.json()["stage"] == "data"
    assert response.json()["error"]["code"] == "unbound_field"


def test_validate_rejects_bad_bodies(client: Client) -> None:
    """Non-object bodies and unknown plugins are rejected."""

    url = reverse("core:plugin_validate", args=["basic-bar"])
    assert client.post(url, data="[1]", content_type="application/json").status_code == 400
    assert client.post(url, data="{", content_type="application/json").status_code == 400
    assert _post(client, reverse("core:plugin_validate", args=["nope"]), {}).status_code == 404
    assert client.get(url).status_code == 405


def test_preview_returns_native_payload(client: Client) -> None:
    """Preview mounts the chart and returns the library payload."""

    response = _post(
        client,
        reverse("core:plugin_preview", args=["plotly-line"]),
        {
            "config": {"xField": "category", "yField": "amount"},
            "dataset": SALES,
            "dimensions": {"width": 500, "height": 300},
            "theme": "dark",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["plugin_id"] == "plotly-line"
    assert body["dimensions"]["width"] == 500
    payload = body["payload"]
    assert payload["library"] == "plotly"
    assert payload["size"] == {"width": 500, "height": 300}
    assert payload["spec"]["layout"]["paper_bgcolor"] == "#111827"
    assert "plotly_click" in payload["events"]


def test_preview_rejects_invalid_input(client: Client) -> None:
    """Preview reports validation failures and bad dimensions."""

    url = reverse("core:plugin_preview", args=["basic-bar"])
    assert _post(client, url, {"config": {}, "dataset": SALES}).status_code == 422
    assert _post(
        client,
        url,
        {"config": {"xField": "category", "yField": "amount"}, "dataset": SALES, "dimensions": {"width": "wide"}},
    ).status_code == 400
    assert _post(client, reverse("core:plugin_preview", args=["nope"]), {}).status_code == 404


def test_plugin_stats(client: Client) -> None:
    """Stats report totals and grouped ids."""

    response = client.get(reverse("core:plugin_stats"))

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["total"] == sum(body["stats"]["by_library"].values())
    assert list(body["categories"]) == ["basic", "statistical", "advanced", "financial"]


@pytest.mark.parametrize(
    "extra",
    [
        {"theme": ["dark"]},
        {"theme": 3},
        {"dimensions": {"width": 500, "height": 300, "margin": [10, 10]}},
        {"dimensions": "500x300"},
    ],
)
def test_preview_rejects_malformed_theme_and_dimensions(client: Client, extra: dict[str, Any]) -> None:
    """Themes and dimensions of the wrong JSON type are a bad request."""

    body = {"config": {"xField": "category", "yField": "amount"}, "dataset": SALES, **extra}
    response = _post(client, reverse("core:plugin_preview", args=["basic-bar"]), body)

    assert response.status_code == 400
    assert response.json()["ok"] is False
