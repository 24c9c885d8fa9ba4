"""Tests for logging setup and operation metrics."""

import pytest
import structlog
from prometheus_client import REGISTRY

from flux_scheduler.core import observability
from flux_scheduler.core.observability import (
    get_logger,
    setup_structured_logging,
    track_operation,
)


def _count(operation, status):
    value = REGISTRY.get_sample_value(
        "flux_engine_operations_total", {"operation": operation, "status": status}
    )
    return value or 0.0


class TestTrackOperation:
    def test_counts_success(self):
        @track_operation("test_success")
        def operation():
            return 42

        before = _count("test_success", "success")

        assert operation() == 42
        assert _count("test_success", "success") == before + 1

    def test_counts_error_and_reraises(self):
        @track_operation("test_error")
        def operation():
            raise RuntimeError("boom")

        before = _count("test_error", "error")

        with pytest.raises(RuntimeError, match="boom"):
            operation()
        assert _count("test_error", "error") == before + 1

    def test_disabled_metrics(self, monkeypatch):
        monkeypatch.setattr(observability.settings, "ENABLE_METRICS", False)

        @track_operation("test_disabled")
        def operation():
            return "ok"

        assert operation() == "ok"
        assert _count("test_disabled", "success") == 0


class TestLogging:
    def test_setup_and_get_logger(self, monkeypatch):
        monkeypatch.setattr(observability.settings, "LOG_FORMAT", "console")

        setup_structured_logging()
        logger = get_logger("flux_scheduler.tests")

        logger.info("test_event", key="value")
        assert structlog.is_configured()
