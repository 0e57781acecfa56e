from __future__ import annotations

import argparse
import base64
import json
from typing import Any, Dict, List

import pytest

from kraken_client import cli
from kraken_client.exchange import KrakenClient
from kraken_client.utils.exceptions import ConfigurationError


class StubResponse:
    def __init__(self, status_code: int, payload: Any = None, reason: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    def json(self) -> Any:
        return self._payload


class RecordingSession:
    def __init__(self, response: StubResponse) -> None:
        self._response = response
        self.calls: List[Dict[str, Any]] = []

    def request(self, **kwargs: Any) -> StubResponse:
        self.calls.append(kwargs)
        return self._response

    def close(self) -> None:
        pass


def test_parse_args_collects_params() -> None:
    args = cli.parse_args(["public", "Ticker", "pair=XBTEUR", "since=0", "--api-version", "1"])

    assert args.visibility == "public"
    assert args.endpoint == "Ticker"
    assert args.params == [("pair", "XBTEUR"), ("since", "0")]
    assert args.api_version == 1
    assert args.base_uri is None


def test_parse_args_rejects_malformed_param() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["public", "Ticker", "pair"])


def test_run_prints_parsed_body(capsys: pytest.CaptureFixture[str]) -> None:
    payload = {"error": [], "result": {"unixtime": 1616492376}}
    session = RecordingSession(StubResponse(200, payload))
    client = KrakenClient(session=session)

    code = cli.run(cli.parse_args(["public", "Time"]), client)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == payload
    assert session.calls[0]["url"] == "https://api.kraken.com/0/public/Time"


def test_run_reports_exchange_errors(capsys: pytest.CaptureFixture[str]) -> None:
    payload = {"error": ["EQuery:Unknown asset pair"], "result": {}}
    client = KrakenClient(session=RecordingSession(StubResponse(200, payload)))

    code = cli.run(cli.parse_args(["public", "Ticker", "pair=NOPE"]), client)

    assert code == 1
    assert "EQuery:Unknown asset pair" in capsys.readouterr().out


def test_run_reports_http_errors(capsys: pytest.CaptureFixture[str]) -> None:
    client = KrakenClient(session=RecordingSession(StubResponse(520, reason="Unknown")))

    code = cli.run(cli.parse_args(["public", "Time"]), client)

    assert code == 1
    assert "HTTP 520" in capsys.readouterr().err


def test_run_private_signs_request() -> None:
    session = RecordingSession(StubResponse(200, {"error": [], "result": {"ZEUR": "1.0"}}))
    client = KrakenClient(
        api_key="key",
        api_secret=base64.b64encode(b"secret").decode("ascii"),
        session=session,
    )

    code = cli.run(cli.parse_args(["private", "Balance"]), client)

    assert code == 0
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.kraken.com/0/private/Balance"
    assert call["headers"]["API-Key"] == "key"
    assert call["data"].startswith("nonce=")


def test_run_private_requires_credentials() -> None:
    client = KrakenClient(session=RecordingSession(StubResponse(200, {})))

    with pytest.raises(ConfigurationError):
        cli.run(argparse.Namespace(visibility="private", endpoint="Balance", params=[]), client)


def test_main_returns_2_without_credentials() -> None:
    assert cli.main(["private", "Balance"]) == 2
