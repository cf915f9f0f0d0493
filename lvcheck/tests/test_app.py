import json
import logging
import sys
from pathlib import Path

from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lvcheck.core.logging import StructuredFormatter  # noqa: E402
from lvcheck.main import create_app  # noqa: E402


def test_health_and_routes_are_mounted():
    client = TestClient(create_app())
    assert client.get("/health").json() == {"status": "ok"}

    calc = client.post("/api/calculate", json={"entry_price": 100, "stop_price": 90, "margin_capital": 1000, "risk_value": 20})
    assert calc.status_code == 200
    assert calc.json()["ready"] is True

    assert client.get("/api/history").json()["total_count"] == 0
    assert client.get("/api/market/exchanges").status_code == 200


def test_structured_formatter_emits_event_and_extras():
    record = logging.LogRecord("lvcheck.api", logging.INFO, __file__, 10, "trade_saved", None, None)
    record.event = "trade_saved"
    record.trade_id = "abc"
    payload = json.loads(StructuredFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "lvcheck.api"
    assert payload["message"] == "trade_saved"
    assert payload["event"] == "trade_saved"
    assert payload["extra"] == {"trade_id": "abc"}
