"""Domain models for teacrush.

These are plain dataclasses shared across the prober, the planner and the
pipeline. Everything that crosses a stage boundary is frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .enums import HardwareBackend, OutputMode, PipelineState


@dataclass(frozen=True)
class TrimRange:
    """Trim range as entered by the user, plus its parsed bounds."""

    start: str
    """Start timestamp as passed to ffmpeg (e.g. "00:01:00" or "5s")."""

    end: str
    """End timestamp as passed to ffmpeg."""

    start_seconds: float
    end_seconds: float

    @property
    def duration(self) -> float:
        """Length of the trimmed range in seconds."""
        return self.end_seconds - self.start_seconds


@dataclass(frozen=True)
class JobConfig:
    """Immutable, validated configuration of one encode job.

    Built once by JobDraft.finalize(). The pipeline only ever sees this
    finalized value.
    """

    input_path: Path
    output_mode: OutputMode
    codec: str
    backend: HardwareBackend = HardwareBackend.CPU
    target_size_mb: float | None = None
    """Size budget in MB, or None for quality (CRF) mode."""

    resolution: str = ""
    fps: str = ""
    trim: TrimRange | None = None
    quality_level: int = 2
    """Speed/quality tradeoff, 0 (fastest) to 4 (slowest)."""

    crf_slider: int = 5
    """Quality slider, 0 (best quality) to 10 (smallest file)."""

    output_path: Path | None = None
    verbose: bool = False

    @property
    def quality_mode(self) -> bool:
        """True when no size target is set and CRF/quality drives the encoder."""
        return self.target_size_mb is None


@dataclass(frozen=True)
class MediaInfo:
    """Metadata extracted from the input by the prober."""

    duration: float
    """Container duration in seconds, 0.0 when unknown."""

    has_audio: bool
    stream_types: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class EncodePlan:
    """Everything needed to render the stage argument vectors of a job."""

    input_path: Path
    output_path: Path
    output_mode: OutputMode
    backend: HardwareBackend
    codec: str
    duration: float
    """Effective duration in seconds (trimmed length when trimming)."""

    pass_count: int = 1
    bitrate_kbit: int | None = None
    format_args: tuple[str, ...] = ()
    filter_chain: str | None = None
    encoder_args: tuple[str, ...] = ()
    audio_args: tuple[str, ...] = ("-an",)
    trim_args: tuple[str, ...] = ()
    passlog_path: Path | None = None
    """Two-pass statistics prefix (ffmpeg appends its own suffixes)."""

    palette_path: Path | None = None

    @property
    def two_pass(self) -> bool:
        """True when the plan uses two-pass rate control."""
        return self.pass_count == 2


@dataclass(frozen=True)
class StageSpec:
    """One rendered subprocess invocation of the pipeline."""

    state: PipelineState
    name: str
    """Short stage name used in errors (e.g. "Pass 1 (Analysis)")."""

    args: tuple[str, ...]
    """Engine arguments, without the executable and the progress prefix."""


@dataclass(frozen=True)
class ProgressSample:
    """Fine-grained progress of the active stage."""

    fraction: float
    eta_seconds: float | None
    label: str
    final: bool = False

    @property
    def percent(self) -> float:
        """Completion as a percentage (0.0 to 100.0)."""
        return self.fraction * 100


@dataclass(frozen=True)
class StageEvent:
    """Coarse progress emitted on every pipeline transition."""

    state: PipelineState
    label: str
    fraction: float


@dataclass
class JobOutcome:
    """Terminal result of a job: success or failure, never partial."""

    state: PipelineState
    output_path: Path | None = None
    size_bytes: int | None = None
    error: Exception | None = None
    failed_stage: str | None = None

    @property
    def succeeded(self) -> bool:
        """True if the job reached DONE."""
        return self.state is PipelineState.DONE

    @property
    def size_mb(self) -> float | None:
        """Output size in MB, or None if unknown."""
        if self.size_bytes is None:
            return None
        return self.size_bytes / 1024 / 1024
