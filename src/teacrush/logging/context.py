"""Job context for structured logging.

Provides context propagation using contextvars, enabling automatic injection
of the job id and input path into log records emitted while a job runs.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_input_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_path", default=None
)


def set_job_context(job_id: str, input_path: Path | str | None = None) -> None:
    """Set the current job context.

    Args:
        job_id: Short job identifier.
        input_path: Path of the file being encoded, or None.
    """
    _job_id.set(job_id)
    _input_path.set(str(input_path) if input_path is not None else None)


def clear_job_context() -> None:
    """Clear the current job context."""
    _job_id.set(None)
    _input_path.set(None)


def get_job_context() -> tuple[str | None, str | None]:
    """Get current job context as (job_id, input_path)."""
    return _job_id.get(), _input_path.get()


@contextmanager
def job_context(
    job_id: str, input_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Context manager for job processing context.

    Sets job context on entry and restores the previous context on exit.

    Example:
        with job_context("a1b2c3d4", "/videos/clip.mp4"):
            logger.info("Encoding")  # Automatically includes context
    """
    old_job_id = _job_id.get()
    old_input_path = _input_path.get()
    try:
        set_job_context(job_id, input_path)
        yield
    finally:
        _job_id.set(old_job_id)
        _input_path.set(old_input_path)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and input_path attributes for JSON output, and a compact
    job_tag such as "[job:a1b2c3d4] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, input_path = get_job_context()

        record.job_id = job_id
        record.input_path = input_path
        record.job_tag = f"[job:{job_id}] " if job_id else ""

        return True  # Never filter out records
