# tests/test_server.py
"""
Tests for the logfeed-server command line.
"""

import json
import logging

import pytest

from logfeed import server
from logfeed.config import Settings
from logfeed.errors import GatewayNetworkError, GatewayServerError
from logfeed.utils import feed_error_response


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    return calls


def test_parser_defaults_come_from_settings():
    settings = Settings(server_host="127.0.0.1", server_port=9100)

    args = server.build_parser(settings).parse_args([])

    assert (args.host, args.port, args.reload, args.log_level) == ("127.0.0.1", 9100, False, "info")


def test_parser_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        server.build_parser(Settings()).parse_args(["--log-level", "chatty"])


def test_main_runs_app_with_cli_options(uvicorn_calls):
    server.main(["--host", "0.0.0.0", "--port", "9200", "--reload", "--log-level", "debug"])

    target, kwargs = uvicorn_calls[0]
    assert target == "logfeed.app:app"
    assert kwargs == {
        "host": "0.0.0.0",
        "port": 9200,
        "reload": True,
        "log_level": "debug",
        "access_log": False,
    }
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


# ===========================================================================
# Error envelopes
# ===========================================================================


def test_feed_error_envelope_carries_kind():
    response = feed_error_response(GatewayNetworkError("Request timed out after 15s"), status_code=502)

    assert response.status_code == 502
    assert json.loads(response.body) == {
        "ok": False,
        "error": "Request timed out after 15s",
        "detail": {"kind": "network"},
    }


def test_server_error_envelope_carries_upstream_status():
    response = feed_error_response(GatewayServerError("unauthorized", status_code=401), status_code=502)

    assert json.loads(response.body)["detail"] == {"kind": "server", "upstream_status": 401}
