from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep a developer's local .env out of the test run.
os.environ.setdefault("ENV_PATH", str(ROOT / "tests" / ".env.missing"))

VALID_PAYLOAD: dict[str, Any] = {
    "candidateName": "Ada Lovelace",
    "candidateEmail": "ada@example.com",
    "position": "Senior Analyst",
    "department": "Engineering",
    "startDate": "2026-11-02",
    "salary": "$120,000 per year",
    "employmentType": "full-time",
    "hiringManager": "Charles Babbage",
    "companyName": "Analytical Engines Ltd",
}


@pytest.fixture(autouse=True)
def clean_relay_env(monkeypatch: pytest.MonkeyPatch):
    for key in ("N8N_WEBHOOK_URL", "RELAY_TIMEOUT_SECONDS", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(key, raising=False)
    yield


class RecordCollector(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def relay_logs():
    """Collect records from the ``offer_relay`` tree, which does not propagate to root."""

    from offer_relay.utils.logging import ROOT_LOGGER

    project_logger = logging.getLogger(ROOT_LOGGER)
    collector = RecordCollector()
    project_logger.addHandler(collector)
    try:
        yield collector
    finally:
        project_logger.removeHandler(collector)


@pytest.fixture()
def offer_payload() -> dict[str, Any]:
    return dict(VALID_PAYLOAD)


@pytest.fixture()
def api_client():
    from offer_relay.main import app

    client = TestClient(app)
    try:
        yield client
    finally:
        client.close()
