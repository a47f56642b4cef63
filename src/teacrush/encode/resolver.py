"""Rate resolution: size budget to bitrate, or quality mode.

Pure functions. The only state they see is the job's size target, the
effective duration and whether an audio track is kept.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from teacrush.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BITS_PER_MB = 8 * 1024 * 1024
AUDIO_BITRATE_BPS = 128 * 1024
MIN_VIDEO_BITRATE_BPS = 50 * 1024
SAFETY_MARGIN = 0.95


@dataclass(frozen=True)
class RateDecision:
    """Outcome of rate resolution for one job."""

    bitrate_kbit: int | None
    """Video bitrate in kbit/s, None in quality mode."""

    quality_mode: bool
    forced_fallback: bool = False
    """True when a size target was set but the duration was unknown."""


def compute_video_bitrate(target_mb: float, duration: float, has_audio: bool) -> int:
    """Compute the video bitrate that fits a size budget.

    Args:
        target_mb: Size budget in megabytes.
        duration: Effective duration in seconds.
        has_audio: Whether an audio track is kept (reserves 128 kbit/s).

    Returns:
        Video bitrate in kbit/s, never below 50.

    Raises:
        ConfigurationError: If the target or the duration is not positive.
    """
    if target_mb <= 0:
        raise ConfigurationError(f"Target size must be positive, got {target_mb}")
    if duration <= 0:
        raise ConfigurationError(
            f"Cannot compute a bitrate for a duration of {duration}s"
        )

    rate = target_mb * BITS_PER_MB / duration
    if has_audio:
        rate -= AUDIO_BITRATE_BPS
    rate *= SAFETY_MARGIN
    rate = max(rate, MIN_VIDEO_BITRATE_BPS)
    return int(rate / 1024)


def resolve_rate(
    target_mb: float | None, duration: float, has_audio: bool
) -> RateDecision:
    """Resolve a job's rate control.

    A missing target means quality mode. A target with an unknown duration
    falls back to quality mode with a warning rather than dividing by zero.
    """
    if target_mb is None:
        return RateDecision(bitrate_kbit=None, quality_mode=True)

    if duration <= 0:
        logger.warning(
            "Duration unknown, ignoring the %.2f MB size target and "
            "encoding in quality mode",
            target_mb,
            extra={"target_mb": target_mb, "duration": duration},
        )
        return RateDecision(bitrate_kbit=None, quality_mode=True, forced_fallback=True)

    bitrate = compute_video_bitrate(target_mb, duration, has_audio)
    logger.debug(
        "Resolved video bitrate",
        extra={
            "target_mb": target_mb,
            "duration": duration,
            "has_audio": has_audio,
            "bitrate_kbit": bitrate,
        },
    )
    return RateDecision(bitrate_kbit=bitrate, quality_mode=False)


def estimate_quality_mode_size(original_mb: float, crf_slider: int) -> float:
    """Rough output size hint for quality mode.

    Each step of the slider toward smaller files shrinks the estimate by
    roughly 20 percent, anchored at 60 percent of the original at slider 5.
    """
    return original_mb * 0.6 * 1.2 ** (5 - crf_slider)


def parse_timestamp(value: str) -> float:
    """Parse a trim timestamp into seconds.

    Accepts "SS", "MM:SS" and "HH:MM:SS", each optionally fractional and
    with a trailing "s" (e.g. "90s", "01:30", "00:01:30.5").

    Raises:
        ValueError: If the value is empty or not a timestamp.
    """
    text = value.strip()
    if text.endswith("s"):
        text = text[:-1]
    if not text:
        raise ValueError(f"Invalid timestamp: {value!r}")

    parts = text.split(":")
    if len(parts) > 3:
        raise ValueError(f"Invalid timestamp: {value!r}")

    total = 0.0
    for part in parts:
        try:
            number = float(part)
        except ValueError as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e
        if not math.isfinite(number) or number < 0:
            raise ValueError(f"Invalid timestamp: {value!r}")
        total = total * 60 + number
    return total


def trim_duration(start: str, end: str) -> float | None:
    """Length of a trim range in seconds, or None if end is not after start."""
    start_seconds = parse_timestamp(start)
    end_seconds = parse_timestamp(end)
    if end_seconds > start_seconds:
        return end_seconds - start_seconds
    return None
