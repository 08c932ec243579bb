# tests/test_routes.py
"""
Tests for the HTTP surface the dashboard renderer talks to.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from logfeed.app import app
from logfeed.services import LogFeed, get_log_feed

from .helpers import make_rows

FEED = "/api/v1/feed"


@pytest.fixture
def feed(gateway):
    return LogFeed(gateway.client(), page_size=100)


@pytest.fixture
def client(feed):
    app.dependency_overrides[get_log_feed] = lambda: feed
    try:
        # no context manager: startup hooks would start the real poller
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ===========================================================================
# Feed
# ===========================================================================


def test_get_feed_before_any_fetch(client):
    response = client.get(FEED)

    assert response.status_code == 200
    body = response.json()
    assert body["filter_key"] == "{}"
    assert body["items"] == []
    assert body["summary"] == {"first": 0, "last": 0, "total": 0, "total_cost": "$0.000000"}


def test_refresh_returns_loaded_head(client):
    body = client.post(f"{FEED}/refresh").json()

    assert len(body["items"]) == 100
    assert body["items"][0]["id"] == "log-250"
    assert body["items"][0]["model"] == "gpt-4o-mini"
    assert body["total"] == 250
    assert body["has_more"] is True


def test_end_reached_appends_next_page(client):
    client.post(f"{FEED}/refresh")

    body = client.post(f"{FEED}/end-reached").json()

    assert len(body["items"]) == 200
    assert body["offset"] == 100
    assert body["summary"]["last"] == 200


def test_gateway_failure_is_reported_in_snapshot(client, gateway):
    gateway.error = httpx.Response(500, json={"error": {"code": "internal"}})

    response = client.post(f"{FEED}/refresh")

    assert response.status_code == 200
    assert response.json()["last_error"] == {"kind": "server", "message": "internal", "source": "head"}


# ===========================================================================
# Filters
# ===========================================================================


class TestUpdateFilters:
    def test_status_filter(self, client, gateway):
        gateway.prepend(*make_rows(2, prefix="err", status="error"))

        body = client.put(f"{FEED}/filters", json={"status": "error"}).json()

        assert body["filter_key"] == '{"status":"error"}'
        assert [item["id"] for item in body["items"]] == ["err-2", "err-1"]
        assert body["filters"] == {"status": "error"}

    def test_typed_dates_cover_whole_days(self, client, gateway):
        body = client.put(
            f"{FEED}/filters",
            json={"time_from": "2024-03-01", "time_to": "2024-03-02"},
        ).json()

        assert body["filters"] == {
            "time_from": "2024-03-01T00:00:00.000Z",
            "time_to": "2024-03-02T23:59:59.999Z",
        }
        params = gateway.requests[-1].url.params
        assert params["time_to"] == "2024-03-02T23:59:59.999Z"

    def test_preset(self, client):
        body = client.put(f"{FEED}/filters", json={"preset": "today"}).json()

        assert body["time_range_preset"] == "today"
        assert "time_from" in body["filters"]
        assert "time_to" not in body["filters"]

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"status": "finished"}, "Invalid filters"),
            ({"preset": "fortnight"}, "Unknown time range preset"),
            ({"time_from": "last tuesday"}, "Invalid time value"),
            ({"time_from": "2024-03-02", "time_to": "2024-03-01"}, "Invalid filters"),
        ],
    )
    def test_rejected_filters(self, client, feed, payload, message):
        response = client.put(f"{FEED}/filters", json=payload)

        assert response.status_code == 422
        body = response.json()
        assert body["ok"] is False
        assert message in body["error"]
        assert body["detail"] == {"kind": "validation"}
        assert feed.state.filter_key == "{}"

    def test_malformed_body(self, client):
        response = client.put(f"{FEED}/filters", json=["status"])

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request"


# ===========================================================================
# Interactions
# ===========================================================================


def test_interaction_gate_round_trip(client, gateway):
    client.post(f"{FEED}/refresh")
    gateway.prepend(*make_rows(1, prefix="new"))

    opened = client.post(f"{FEED}/interactions/open").json()
    assert opened == {"ok": True, "gate_count": 1, "pending_head": False, "pending_page": False}

    held = client.post(f"{FEED}/refresh").json()
    assert held["pending_head"] is True
    assert held["items"][0]["id"] == "log-250"

    closed = client.post(f"{FEED}/interactions/close").json()
    assert closed["gate_count"] == 0
    assert closed["pending_head"] is False
    assert client.get(FEED).json()["items"][0]["id"] == "new-1"


def test_close_without_open_stays_at_zero(client):
    assert client.post(f"{FEED}/interactions/close").json()["gate_count"] == 0


# ===========================================================================
# Meta
# ===========================================================================


def test_health(client):
    body = client.get("/api/v1/health").json()

    assert body["ok"] is True
    assert body["service"] == "logfeed"
    assert body["poller_running"] is False


def test_meta_lists_feed_endpoints(client):
    body = client.get("/api/v1/meta").json()

    assert body["status"] == "ok"
    assert "/api/v1/feed" in body["endpoints"]
    assert "/api/v1/feed/interactions/open" in body["endpoints"]
