"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys

from conftest import RecordingMetricsHook


class TestStructuredFormatter:
    def _get_record(
        self,
        msg,
        level=logging.INFO,
        exc_info=None,
        stack_info=None,
        extra_fields=None,
    ):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        if stack_info is not None:
            record.stack_info = stack_info
        return record

    def test_basic_format(self):
        from imgupload.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        result = json.loads(fmt.format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert "ts" in result

    def test_extra_fields_merged(self):
        from imgupload.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", extra_fields={"op": "resize", "outcome": "degraded"})
        result = json.loads(fmt.format(record))
        assert result["op"] == "resize"
        assert result["outcome"] == "degraded"

    def test_exception_info_included(self):
        from imgupload.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(fmt.format(self._get_record("error msg", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_stack_info_included(self):
        from imgupload.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        result = json.loads(fmt.format(self._get_record("msg", stack_info="Stack Trace Here")))
        assert result["stack_info"] == "Stack Trace Here"


class TestGetLogger:
    def test_returns_logger_with_handler(self):
        from imgupload.observability.logger import get_logger

        logger = get_logger("test.observability.unique1")
        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) > 0
        assert logger.propagate is False

    def test_string_level(self):
        from imgupload.observability.logger import get_logger

        logger = get_logger("test.observability.unique2", level="WARNING")
        assert logger.level == logging.WARNING

    def test_idempotent_no_duplicate_handlers(self):
        from imgupload.observability.logger import get_logger

        name = "test.observability.unique3"
        handler_count = len(get_logger(name).handlers)
        assert len(get_logger(name).handlers) == handler_count

    def test_custom_stream_receives_json(self):
        from imgupload.observability.logger import get_logger

        stream = io.StringIO()
        logger = get_logger("test.observability.stream_unique", stream=stream)
        logger.info("test message", extra={"extra_fields": {"key": "val"}})
        line = json.loads(stream.getvalue().strip())
        assert line["key"] == "val"
        assert line["logger"] == "test.observability.stream_unique"


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        from imgupload.observability.metrics import MetricsHook, NoopMetricsHook

        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_recording_hook_satisfies_protocol(self):
        from imgupload.observability.metrics import MetricsHook

        assert isinstance(RecordingMetricsHook(), MetricsHook)

    def test_noop_methods_return_none(self):
        from imgupload.observability.metrics import NoopMetricsHook

        hook = NoopMetricsHook()
        assert hook.increment("imgupload.runs_total") is None
        assert hook.timing("imgupload.upload_duration_ms", 12.5) is None
        assert hook.gauge("imgupload.in_flight", 1.0, tags={"env": "test"}) is None

    def test_resolve_metrics(self):
        from imgupload.observability.metrics import NoopMetricsHook, resolve_metrics

        hook = RecordingMetricsHook()
        assert resolve_metrics(hook) is hook
        assert isinstance(resolve_metrics(None), NoopMetricsHook)
