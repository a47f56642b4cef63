"""Exception types for teacrush.

Every job failure is reported as one of these types. None of them are
retried: they describe bad input, a missing tool, or an engine error, not
transient faults.
"""


class TeacrushError(Exception):
    """Base exception for all teacrush errors.

    Callers can catch every job-level failure with a single except clause.
    """


class ConfigurationError(TeacrushError):
    """Raised when job input or configuration is invalid.

    Always raised before any subprocess is launched.
    """


class ToolNotFoundError(ConfigurationError):
    """Raised when a required external tool (ffmpeg, ffprobe) is unavailable."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"{tool} is not installed or not in PATH. "
            f"Configure a custom path via TEACRUSH_{tool.upper()}_PATH "
            "or ~/.teacrush/config.toml"
        )


class PresetTableError(ConfigurationError):
    """Raised when the encoder preset table is missing or malformed entries."""


class ProbeError(TeacrushError):
    """Raised when media inspection fails or returns unusable metadata."""


class StageError(TeacrushError):
    """Raised when an encode or palette subprocess exits nonzero.

    Attributes:
        stage: Name of the stage that failed.
        diagnostics: Captured stderr text of the engine, verbatim.
        returncode: Process exit code.
    """

    def __init__(self, stage: str, diagnostics: str, returncode: int) -> None:
        self.stage = stage
        self.diagnostics = diagnostics
        self.returncode = returncode
        super().__init__(
            f"{stage} failed (exit code {returncode})\nLog: {diagnostics}"
        )


class ResourceError(TeacrushError):
    """Raised when the output artifact cannot be inspected after encoding."""


class JobCancelledError(TeacrushError):
    """Raised when a running job is cancelled by the caller."""
