"""Scratch artifacts of a job.

Two-pass statistics and the GIF palette live in a temporary directory under
names unique to the process and the moment, and are removed on every exit
path.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)


class ScratchArtifacts:
    """Owner of a job's intermediate files.

    Use as a context manager; cleanup() runs on exit whatever the outcome.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = Path(directory or tempfile.gettempdir())
        token = f"{os.getpid()}_{time.monotonic_ns()}"
        self.passlog_path = self.directory / f"teacrush_passlog_{token}"
        """Prefix handed to -passlogfile; ffmpeg appends its own suffixes."""

        self.palette_path = self.directory / f"teacrush_palette_{token}.png"

    def existing_files(self) -> list[Path]:
        """Scratch files currently present on disk."""
        # Encoders append their own suffixes, plus .temp ones while a pass runs
        name = self.passlog_path.name
        found = sorted(
            [*self.directory.glob(f"{name}.*"), *self.directory.glob(f"{name}-*")]
        )
        if self.palette_path.exists():
            found.append(self.palette_path)
        return found

    def cleanup(self) -> None:
        """Remove every scratch file that exists."""
        for path in self.existing_files():
            try:
                path.unlink()
                logger.debug("Cleaned up scratch file: %s", path)
            except OSError as e:
                logger.warning("Could not clean up scratch file %s: %s", path, e)

    def __enter__(self) -> ScratchArtifacts:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
