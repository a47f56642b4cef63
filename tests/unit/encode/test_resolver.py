"""Tests for encode/resolver.py module."""

import logging

import pytest

from teacrush.encode.resolver import (
    compute_video_bitrate,
    estimate_quality_mode_size,
    parse_timestamp,
    resolve_rate,
    trim_duration,
)
from teacrush.exceptions import ConfigurationError


class TestComputeVideoBitrate:
    """Tests for compute_video_bitrate function."""

    def test_reserves_audio_bitrate(self) -> None:
        """8 MB over 60s with audio leaves 916 kbit/s for video."""
        # (8 * 8388608 / 60 - 131072) * 0.95 / 1024 = 916.05
        assert compute_video_bitrate(8, 60, has_audio=True) == 916

    def test_without_audio(self) -> None:
        """Without audio the whole budget goes to video."""
        # 8 * 8388608 / 60 * 0.95 / 1024 = 1037.6
        assert compute_video_bitrate(8, 60, has_audio=False) == 1037

    def test_floor_at_fifty_kbit(self) -> None:
        """Tiny budgets are floored at 50 kbit/s."""
        assert compute_video_bitrate(1, 3600, has_audio=True) == 50
        assert compute_video_bitrate(0.01, 600, has_audio=False) == 50

    def test_result_is_truncated(self) -> None:
        """The kbit/s value is truncated, not rounded."""
        # 1 * 8388608 / 10 * 0.95 / 1024 = 778.24
        assert compute_video_bitrate(1, 10, has_audio=False) == 778

    @pytest.mark.parametrize("duration", [0, -1.5])
    def test_rejects_non_positive_duration(self, duration: float) -> None:
        """Zero or negative durations never divide."""
        with pytest.raises(ConfigurationError):
            compute_video_bitrate(8, duration, has_audio=False)

    def test_rejects_non_positive_target(self) -> None:
        """A zero size budget is invalid."""
        with pytest.raises(ConfigurationError):
            compute_video_bitrate(0, 60, has_audio=False)


class TestResolveRate:
    """Tests for resolve_rate function."""

    def test_no_target_is_quality_mode(self) -> None:
        """A missing target selects quality mode."""
        decision = resolve_rate(None, 60, has_audio=True)
        assert decision.quality_mode is True
        assert decision.bitrate_kbit is None
        assert decision.forced_fallback is False

    def test_target_resolves_bitrate(self) -> None:
        """A target with a known duration resolves to a bitrate."""
        decision = resolve_rate(8, 60, has_audio=True)
        assert decision.quality_mode is False
        assert decision.bitrate_kbit == 916

    def test_unknown_duration_falls_back_to_quality_mode(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Zero duration forces quality mode and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="teacrush.encode.resolver"):
            decision = resolve_rate(8, 0.0, has_audio=True)

        assert decision.quality_mode is True
        assert decision.forced_fallback is True
        assert decision.bitrate_kbit is None
        assert "Duration unknown" in caplog.text


class TestEstimateQualityModeSize:
    """Tests for estimate_quality_mode_size function."""

    def test_midpoint_is_sixty_percent(self) -> None:
        """Slider 5 estimates 60% of the original."""
        assert estimate_quality_mode_size(100, 5) == pytest.approx(60.0)

    def test_each_step_scales_by_one_point_two(self) -> None:
        """Moving the slider one step changes the estimate by 1.2x."""
        assert estimate_quality_mode_size(100, 4) == pytest.approx(72.0)
        assert estimate_quality_mode_size(100, 6) == pytest.approx(50.0)

    def test_decreases_with_slider(self) -> None:
        """Higher slider values mean smaller files."""
        sizes = [estimate_quality_mode_size(50, s) for s in range(11)]
        assert sizes == sorted(sizes, reverse=True)


class TestParseTimestamp:
    """Tests for parse_timestamp function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("90", 90.0),
            ("01:30", 90.0),
            ("00:01:30", 90.0),
            ("00:01:30.5", 90.5),
            ("1:00:00", 3600.0),
            ("5s", 5.0),
            ("2.5s", 2.5),
            (" 12 ", 12.0),
        ],
    )
    def test_valid_timestamps(self, value: str, expected: float) -> None:
        """Seconds, MM:SS and HH:MM:SS forms are accepted."""
        assert parse_timestamp(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "s", "abc", "1:2:3:4", "00:-1", "1:xx"])
    def test_invalid_timestamps(self, value: str) -> None:
        """Malformed timestamps raise ValueError."""
        with pytest.raises(ValueError):
            parse_timestamp(value)

    @pytest.mark.parametrize(
        "value", ["nan", "inf", "-inf", "infinity", "00:nan", "1:inf"]
    )
    def test_non_finite_timestamps(self, value: str) -> None:
        """NaN and infinity are not timestamps."""
        with pytest.raises(ValueError):
            parse_timestamp(value)


class TestTrimDuration:
    """Tests for trim_duration function."""

    def test_end_after_start(self) -> None:
        """Duration is end minus start."""
        assert trim_duration("00:00:10", "00:00:25") == pytest.approx(15.0)

    def test_mixed_forms(self) -> None:
        """Start and end may use different forms."""
        assert trim_duration("5s", "01:00") == pytest.approx(55.0)

    def test_end_not_after_start(self) -> None:
        """A non-increasing range yields None."""
        assert trim_duration("00:00:30", "00:00:30") is None
        assert trim_duration("40", "10") is None
