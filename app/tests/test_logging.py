import json
import logging

from src.core.logging import (
    add_to_log_context,
    clear_log_context,
    get_log_context,
    get_logging_config,
    log_exception_with_context,
)
from src.core.logging.filters import NO_REQUEST_ID, CombinedContextFilter, NoiseReductionFilter, RequestIdFilter
from src.core.logging.formatters import ProductionFormatter


def make_record(message: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("src.test", logging.ERROR, __file__, 1, message, None, exc_info)


class TestLoggingContext:
    """Test cases for contextual log enrichment"""

    def test_context_is_bound_only_inside_the_block(self):
        with add_to_log_context(owner_id="u1"):
            with add_to_log_context(request_id="r1"):
                assert get_log_context() == {"owner_id": "u1", "request_id": "r1"}
            assert get_log_context() == {"owner_id": "u1"}

        assert get_log_context() == {}

    def test_combined_filter_copies_context_onto_records(self):
        record = make_record("toggling privacy")

        with add_to_log_context(owner_id="u1"):
            assert CombinedContextFilter().filter(record) is True

        assert record.owner_id == "u1"
        assert record.app_name

    def test_noise_reduction_drops_health_checks(self):
        noise = NoiseReductionFilter()

        assert noise.filter(make_record("GET /health/ completed")) is False
        assert noise.filter(make_record("GET /api/v1/accounts completed")) is True

    def test_noise_reduction_accepts_custom_patterns(self):
        noise = NoiseReductionFilter(suppress_patterns=["heartbeat"])

        assert noise.filter(make_record("heartbeat")) is False
        assert noise.filter(make_record("GET /health/ completed")) is True

    def test_request_id_defaults_outside_requests(self):
        record = make_record("starting up")

        RequestIdFilter().filter(record)
        assert record.request_id == NO_REQUEST_ID

        with add_to_log_context(request_id="r1"):
            RequestIdFilter().filter(record)
        assert record.request_id == "r1"

    def test_clear_log_context(self):
        with add_to_log_context(owner_id="u1"):
            clear_log_context()
            assert get_log_context() == {}

    def test_production_formatter_structures_exceptions(self):
        try:
            raise ValueError("broken account")
        except ValueError as exc:
            record = make_record("decode failed", exc_info=(type(exc), exc, exc.__traceback__))

        payload = json.loads(ProductionFormatter().format(record))

        assert payload["level"] == "ERROR"
        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "broken account"

    def test_log_exception_with_context_carries_event_type(self, caplog):
        target = logging.getLogger("src.test.swallowed")

        with caplog.at_level(logging.WARNING), add_to_log_context(request_id="r1"):
            log_exception_with_context(
                RuntimeError("index unavailable"),
                message="Could not remove public location",
                level=logging.WARNING,
                extra_context={"event_type": "public_location_removal_failed"},
                target=target,
            )

        record = caplog.records[-1]
        assert record.event_type == "public_location_removal_failed"
        assert record.request_id == "r1"
        assert record.exception_type == "RuntimeError"


class TestLoggingConfig:
    """Test cases for the dictConfig built for the current environment"""

    def test_local_config_logs_to_console(self):
        config = get_logging_config()

        assert config["version"] == 1
        assert "console" in config["handlers"]
        assert config["loggers"]["src"]["level"] == "DEBUG"
        assert config["loggers"]["src"]["propagate"] is False
        assert config["root"]["handlers"] == ["console"]
        assert config["loggers"]["uvicorn.access"]["propagate"] is False
