"""Tests for cli/exit_codes.py module."""

import pytest

from teacrush.cli.exit_codes import ExitCode, exit_code_for
from teacrush.exceptions import (
    ConfigurationError,
    JobCancelledError,
    ProbeError,
    ResourceError,
    StageError,
    TeacrushError,
    ToolNotFoundError,
)


class TestExitCodeFor:
    """Tests for exit_code_for function."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (None, ExitCode.SUCCESS),
            (JobCancelledError("cancelled"), ExitCode.INTERRUPTED),
            (ToolNotFoundError("ffmpeg"), ExitCode.TOOL_NOT_AVAILABLE),
            (ConfigurationError("bad"), ExitCode.INVALID_JOB),
            (ProbeError("bad"), ExitCode.ANALYSIS_ERROR),
            (StageError("Pass 1 (Analysis)", "boom", 1), ExitCode.OPERATION_FAILED),
            (ResourceError("gone"), ExitCode.OUTPUT_UNREADABLE),
            (TeacrushError("other"), ExitCode.GENERAL_ERROR),
        ],
    )
    def test_mapping(self, error, expected: ExitCode) -> None:
        assert exit_code_for(error) is expected

    def test_codes_are_unique(self) -> None:
        values = [code.value for code in ExitCode]
        assert len(values) == len(set(values))
