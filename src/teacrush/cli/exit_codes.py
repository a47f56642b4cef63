"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (job, config)
    30-39: Tool/dependency errors
    40-49: Operation errors
    50-59: Analysis errors
"""

from enum import IntEnum

from teacrush.exceptions import (
    ConfigurationError,
    JobCancelledError,
    ProbeError,
    ResourceError,
    StageError,
    ToolNotFoundError,
)


class ExitCode(IntEnum):
    """Exit codes for teacrush CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # Ctrl+C / SIGINT

    # Validation errors (10-19)
    INVALID_JOB = 10
    CONFIG_ERROR = 11

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    OPERATION_FAILED = 40
    OUTPUT_UNREADABLE = 41

    # Analysis errors (50-59)
    ANALYSIS_ERROR = 50


def exit_code_for(error: BaseException | None) -> ExitCode:
    """Map a job error to its exit code."""
    if error is None:
        return ExitCode.SUCCESS
    if isinstance(error, JobCancelledError):
        return ExitCode.INTERRUPTED
    if isinstance(error, ToolNotFoundError):
        return ExitCode.TOOL_NOT_AVAILABLE
    if isinstance(error, ConfigurationError):
        return ExitCode.INVALID_JOB
    if isinstance(error, ProbeError):
        return ExitCode.ANALYSIS_ERROR
    if isinstance(error, StageError):
        return ExitCode.OPERATION_FAILED
    if isinstance(error, ResourceError):
        return ExitCode.OUTPUT_UNREADABLE
    return ExitCode.GENERAL_ERROR
