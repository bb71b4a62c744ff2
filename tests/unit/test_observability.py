"""Unit tests for structured logging and metrics helpers"""

import json
import logging

from prometheus_client import REGISTRY

from gocardless_client.infrastructure.observability.logging import CustomJsonFormatter
from gocardless_client.infrastructure.observability.metrics import record_request


def test_json_formatter_adds_service_metadata():
    """Test log lines are JSON with timestamp, level, service and extra fields"""
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord(
        name="gocardless_client",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="GoCardless API call",
        args=(),
        exc_info=None,
    )
    record.operation = "list_balances"
    record.status_code = 404

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "GoCardless API call"
    assert payload["level"] == "WARNING"
    assert payload["service"] == "gocardless-client"
    assert payload["operation"] == "list_balances"
    assert payload["status_code"] == 404
    assert payload["timestamp"]


def test_record_request_updates_counter_and_histogram():
    labels = {"operation": "unit_probe", "outcome": "success"}
    before = REGISTRY.get_sample_value("gocardless_requests_total", labels) or 0.0

    record_request("unit_probe", "success", 0.2)

    assert REGISTRY.get_sample_value("gocardless_requests_total", labels) == before + 1
    assert REGISTRY.get_sample_value("gocardless_request_duration_seconds_count", {"operation": "unit_probe"}) >= 1
