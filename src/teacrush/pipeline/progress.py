"""FFmpeg progress parsing.

ffmpeg started with ``-progress pipe:1`` writes blocks of key=value lines to
stdout. Only ``out_time_us`` drives the completion fraction; every other
key is ignored.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from teacrush.domain.models import ProgressSample
from teacrush.pipeline.channel import ProgressChannel

logger = logging.getLogger(__name__)

PROGRESS_KEY = "out_time_us"

# ETA is only published once the estimate has something to stand on
ETA_THRESHOLD = 0.01


def parse_out_time(line: str) -> float | None:
    """Extract the encoded position in seconds from a progress line.

    Args:
        line: A single line of progress output (e.g., "out_time_us=1500000").

    Returns:
        Position in seconds, or None for other keys, N/A and malformed values.
    """
    key, sep, value = line.strip().partition("=")
    if not sep or key.strip() != PROGRESS_KEY:
        return None
    value = value.strip()
    if not value or value == "N/A":
        return None
    try:
        return int(value) / 1_000_000
    except ValueError:
        return None


class ProgressMonitor:
    """Turns a stage's progress stream into ProgressSamples.

    The fraction is clamped to [0, 1] and never decreases within a stage.
    """

    def __init__(
        self,
        total_duration: float,
        label: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._total = total_duration
        self._label = label
        self._clock = clock
        self._started = clock()
        self._fraction = 0.0

    @property
    def fraction(self) -> float:
        return self._fraction

    def feed(self, line: str) -> ProgressSample | None:
        """Consume one line; return a sample if it carried a position."""
        position = parse_out_time(line)
        if position is None:
            return None

        if self._total > 0:
            fraction = min(max(position / self._total, 0.0), 1.0)
            self._fraction = max(self._fraction, fraction)

        return ProgressSample(
            fraction=self._fraction,
            eta_seconds=self._eta(),
            label=self._label,
        )

    def _eta(self) -> float | None:
        if self._fraction <= ETA_THRESHOLD:
            return None
        elapsed = self._clock() - self._started
        return max(0.0, elapsed * (1 / self._fraction - 1))

    def final_sample(self) -> ProgressSample:
        """Terminal sample for a stage that exited successfully."""
        self._fraction = 1.0
        return ProgressSample(
            fraction=1.0, eta_seconds=0.0, label=self._label, final=True
        )


async def pump_progress(
    stream: asyncio.StreamReader,
    monitor: ProgressMonitor,
    channel: ProgressChannel[ProgressSample],
) -> None:
    """Read the progress stream to EOF, sending each sample on the channel."""
    while True:
        raw = await stream.readline()
        if not raw:
            break
        sample = monitor.feed(raw.decode("utf-8", errors="replace"))
        if sample is not None:
            await channel.send(sample)
