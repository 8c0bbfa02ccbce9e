from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import Mock

import httpx
import pytest

from offer_relay import config
from offer_relay.utils import relay as relay_module

WEBHOOK_URL = "https://n8n.example.com/webhook/offer-letter"


class DummyClient:
    def __init__(self, outcome: httpx.Response | Exception, calls: list[dict[str, Any]], timeout: Any):
        self._outcome = outcome
        self.calls = calls
        self.timeout = timeout

    async def __aenter__(self) -> "DummyClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    async def post(self, url: str, json: dict[str, Any], headers: dict[str, str] | None = None) -> httpx.Response:
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": self.timeout})
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


def _install_client(monkeypatch: pytest.MonkeyPatch, outcome: httpx.Response | Exception) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        httpx,
        "AsyncClient",
        lambda timeout=None: DummyClient(outcome, calls, timeout),
    )
    return calls


@pytest.fixture()
def relay_logger(monkeypatch: pytest.MonkeyPatch) -> Mock:
    mock_logger = Mock()
    monkeypatch.setattr(relay_module, "logger", mock_logger)
    return mock_logger


def _response(status_code: int, text: str = "") -> httpx.Response:
    return httpx.Response(status_code, text=text, request=httpx.Request("POST", WEBHOOK_URL))


def test_forward_payload_posts_json(monkeypatch, relay_logger, offer_payload):
    calls = _install_client(monkeypatch, _response(200))

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    assert calls == [
        {
            "url": WEBHOOK_URL,
            "json": offer_payload,
            "headers": {"Content-Type": "application/json"},
            "timeout": None,
        }
    ]
    relay_logger.info.assert_called_once()
    relay_logger.error.assert_not_called()


def test_forward_payload_logs_non_success_response(monkeypatch, relay_logger, offer_payload):
    _install_client(monkeypatch, _response(502, "workflow inactive"))

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    relay_logger.error.assert_called_once()
    extra = relay_logger.error.call_args.kwargs["extra"]
    assert extra["status_code"] == 502
    assert extra["body"] == "workflow inactive"
    relay_logger.info.assert_not_called()


def test_forward_payload_swallows_transport_errors(monkeypatch, relay_logger, offer_payload):
    error = httpx.ConnectError("connection refused", request=httpx.Request("POST", WEBHOOK_URL))
    calls = _install_client(monkeypatch, error)

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    assert len(calls) == 1
    relay_logger.exception.assert_called_once()


def test_forward_payload_uses_configured_timeout(monkeypatch, relay_logger, offer_payload):
    calls = _install_client(monkeypatch, _response(204))
    monkeypatch.setattr(config, "RELAY_TIMEOUT_SECONDS", 2.5)

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    assert calls[0]["timeout"] == 2.5


def test_dispatch_returns_before_delivery(monkeypatch, relay_logger, offer_payload):
    calls = _install_client(monkeypatch, _response(200))

    async def scenario() -> tuple[int, int, int]:
        task = relay_module.dispatch(WEBHOOK_URL, offer_payload)
        before = len(calls)
        pending = len(relay_module._in_flight)
        await task
        await asyncio.sleep(0)
        return before, pending, len(relay_module._in_flight)

    before, pending, after = asyncio.run(scenario())

    assert before == 0
    assert pending == 1
    assert after == 0
    assert len(calls) == 1


def test_non_success_status_and_body_reach_the_log_line(monkeypatch, relay_logs, offer_payload):
    _install_client(monkeypatch, _response(404, "Webhook not registered"))

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    messages = [record.getMessage() for record in relay_logs.records if record.levelname == "ERROR"]
    assert len(messages) == 1
    assert "404" in messages[0]
    assert "Webhook not registered" in messages[0]


def test_transport_error_text_reaches_the_log_line(monkeypatch, relay_logs, offer_payload):
    error = httpx.ConnectError("Name or service not known", request=httpx.Request("POST", WEBHOOK_URL))
    _install_client(monkeypatch, error)

    asyncio.run(relay_module.forward_payload(WEBHOOK_URL, offer_payload))

    messages = [record.getMessage() for record in relay_logs.records if record.levelname == "ERROR"]
    assert any("Name or service not known" in message for message in messages)
    assert any(WEBHOOK_URL in message for message in messages)
