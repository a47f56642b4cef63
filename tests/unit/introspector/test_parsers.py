"""Tests for introspector/parsers.py module."""

import json
from pathlib import Path

import pytest

from teacrush.exceptions import ProbeError
from teacrush.introspector.parsers import parse_duration, parse_probe_output

FIXTURES_DIR = Path(__file__).parent.parent.parent / "fixtures" / "ffprobe"


def load_ffprobe_fixture(name: str) -> dict:
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text())


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_string_seconds(self) -> None:
        assert parse_duration("125.500000") == pytest.approx(125.5)

    def test_number(self) -> None:
        assert parse_duration(12) == 12.0

    @pytest.mark.parametrize("value", [None, "N/A", "-3.0"])
    def test_unknown_is_zero(self, value) -> None:
        assert parse_duration(value) == 0.0

    def test_malformed_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        assert parse_duration("soon") == 0.0
        assert "Unparseable duration" in caplog.text


class TestParseProbeOutput:
    """Tests for parse_probe_output function."""

    def test_video_with_audio(self) -> None:
        info = parse_probe_output(load_ffprobe_fixture("video_with_audio"))
        assert info.duration == pytest.approx(2.0)
        assert info.has_audio is True
        assert info.stream_types == frozenset({"video", "audio"})

    def test_video_only(self) -> None:
        info = parse_probe_output(load_ffprobe_fixture("video_only"))
        assert info.duration == pytest.approx(125.5)
        assert info.has_audio is False
        assert info.stream_types == frozenset({"video"})

    def test_unknown_duration(self) -> None:
        """Live or broken containers report N/A; duration becomes 0.0."""
        info = parse_probe_output(load_ffprobe_fixture("unknown_duration"))
        assert info.duration == 0.0
        assert info.has_audio is True
        assert "subtitle" in info.stream_types

    def test_format_without_duration(self) -> None:
        info = parse_probe_output({"streams": [], "format": {}})
        assert info.duration == 0.0
        assert info.has_audio is False

    def test_missing_streams(self) -> None:
        with pytest.raises(ProbeError, match="Missing 'streams'"):
            parse_probe_output({"format": {}}, "clip.mp4")

    def test_missing_format(self) -> None:
        with pytest.raises(ProbeError, match="Missing 'format' in ffprobe output for x"):
            parse_probe_output({"streams": []}, "x")

    def test_not_an_object(self) -> None:
        with pytest.raises(ProbeError, match="not a JSON object"):
            parse_probe_output([])  # type: ignore[arg-type]
