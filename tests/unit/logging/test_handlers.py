"""Tests for logging/handlers.py module."""

import json
import logging
import sys
from pathlib import Path

from teacrush.logging.handlers import JSONFormatter


def make_record(msg: str = "hello %s", args=("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "teacrush.pipeline", logging.WARNING, __file__, 10, msg, args, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self) -> None:
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "hello world"
        assert entry["logger"] == "teacrush.pipeline"
        assert entry["timestamp"].endswith("+00:00")
        assert "context" not in entry
        assert "exception" not in entry

    def test_extra_fields_in_context(self) -> None:
        record = make_record(stage="Pass 1 (Analysis)", returncode=1)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["context"] == {"stage": "Pass 1 (Analysis)", "returncode": 1}

    def test_job_context_included_when_set(self) -> None:
        record = make_record(job_id="a1b2c3d4", input_path="/v/clip.mp4", job_tag="x")
        entry = json.loads(JSONFormatter().format(record))
        assert entry["context"] == {"job_id": "a1b2c3d4", "input_path": "/v/clip.mp4"}

    def test_empty_job_context_omitted(self) -> None:
        record = make_record(job_id=None, input_path=None, job_tag="")
        entry = json.loads(JSONFormatter().format(record))
        assert "context" not in entry

    def test_non_serializable_values(self) -> None:
        record = make_record(output_path=Path("/v/out.mp4"))
        entry = json.loads(JSONFormatter().format(record))
        assert entry["context"]["output_path"] == "/v/out.mp4"

    def test_exception(self) -> None:
        try:
            raise ValueError("bad value")
        except ValueError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad value" in entry["exception"]

    def test_root_logger_name_omitted(self) -> None:
        record = logging.LogRecord("root", logging.INFO, __file__, 1, "m", (), None)
        entry = json.loads(JSONFormatter().format(record))
        assert "logger" not in entry
