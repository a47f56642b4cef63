"""Terminal progress display for the encode command."""

from __future__ import annotations

import sys
from typing import TextIO

from teacrush.domain.models import ProgressSample, StageEvent

BAR_WIDTH = 30


def format_eta(seconds: float | None) -> str:
    """Format an ETA as "eta MM:SS", or "..." while it is unknown."""
    if seconds is None:
        return "..."
    total = int(seconds)
    return f"eta {total // 60:02d}:{total % 60:02d}"


def render_bar(fraction: float, width: int = BAR_WIDTH) -> str:
    filled = int(round(min(max(fraction, 0.0), 1.0) * width))
    return "#" * filled + "-" * (width - filled)


class StderrJobReporter:
    """Pipeline listener that writes in-place progress to stderr.

    Stage changes and fine-grained samples share one status line; verbose
    command lines are printed on their own lines above it.
    """

    def __init__(self, enabled: bool = True, stream: TextIO | None = None) -> None:
        """Initialize stderr reporter.

        Args:
            enabled: If False, suppresses output (for tests or quiet runs).
            stream: Output stream, stderr by default.
        """
        self.enabled = enabled
        self._stream = stream
        self._last_len = 0

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def on_stage(self, event: StageEvent) -> None:
        self._write_status(f"{event.label} [{render_bar(event.fraction)}]")

    def on_progress(self, sample: ProgressSample) -> None:
        line = (
            f"{sample.label} [{render_bar(sample.fraction)}] "
            f"{sample.percent:5.1f}% ({format_eta(sample.eta_seconds)})"
        )
        self._write_status(line)

    def on_command(self, command: str) -> None:
        if not self.enabled:
            return
        self._clear()
        self.stream.write(f"$ {command}\n")
        self.stream.flush()

    def finish(self) -> None:
        """End the status line."""
        if self.enabled and self._last_len:
            self.stream.write("\n")
            self.stream.flush()
            self._last_len = 0

    def _clear(self) -> None:
        if self._last_len:
            self.stream.write("\r" + " " * self._last_len + "\r")
            self._last_len = 0

    def _write_status(self, line: str) -> None:
        if not self.enabled:
            return
        padding = " " * max(self._last_len - len(line), 0)
        self.stream.write(f"\r{line}{padding}")
        self.stream.flush()
        self._last_len = len(line)
