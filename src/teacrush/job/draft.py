"""Job drafts and their validation.

A JobDraft is filled step by step by an interactive front end or by the
command line. finalize() validates it once, through a frozen pydantic model,
and produces the immutable JobConfig the pipeline runs.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from teacrush.domain.enums import HardwareBackend, OutputMode
from teacrush.domain.models import JobConfig, TrimRange
from teacrush.encode.filters import is_valid_fps, is_valid_resolution
from teacrush.encode.presets import (
    IMAGE_ENCODERS,
    MAX_CRF_SLIDER,
    QUALITY_LEVELS,
    default_codec,
    find_codec,
)
from teacrush.encode.resolver import parse_timestamp
from teacrush.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def clean_path(value: str) -> str:
    """Strip surrounding whitespace and quotes (drag-and-drop paths)."""
    return value.strip().strip("\"'")


def _clean_optional(value: Any) -> Any:
    if isinstance(value, str):
        value = clean_path(value)
        return value or None
    return value


class JobConfigModel(BaseModel):
    """Pydantic model validating a job draft."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_path: Path
    output_mode: OutputMode = OutputMode.VIDEO
    target_size_mb: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    resolution: str = ""
    fps: str = ""
    trim_start: str | None = None
    trim_end: str | None = None
    backend: HardwareBackend = HardwareBackend.CPU
    codec: str | None = None
    quality_level: int = Field(default=2, ge=0, le=QUALITY_LEVELS - 1)
    crf_slider: int = Field(default=5, ge=0, le=MAX_CRF_SLIDER)
    output_path: Path | None = None
    verbose: bool = False

    @field_validator("input_path", mode="before")
    @classmethod
    def clean_input_path(cls, v: Any) -> Any:
        """Strip whitespace and quotes from the input path."""
        if isinstance(v, str):
            v = clean_path(v)
            if not v:
                raise ValueError("input path is required")
        return v

    @field_validator("input_path")
    @classmethod
    def validate_input_exists(cls, v: Path) -> Path:
        """Require an existing input file."""
        v = v.expanduser()
        if not v.is_file():
            raise ValueError(f"file not found: {v}")
        return v

    @field_validator("output_path", mode="before")
    @classmethod
    def clean_output_path(cls, v: Any) -> Any:
        return _clean_optional(v)

    @field_validator("output_path")
    @classmethod
    def validate_output_parent(cls, v: Path | None) -> Path | None:
        """Require the custom output's directory to exist."""
        if v is None:
            return v
        v = v.expanduser()
        if not v.parent.is_dir():
            raise ValueError(f"output directory does not exist: {v.parent}")
        return v

    @field_validator("target_size_mb", mode="before")
    @classmethod
    def empty_size_is_quality_mode(cls, v: Any) -> Any:
        """An empty size means quality mode."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("resolution")
    @classmethod
    def validate_resolution(cls, v: str) -> str:
        """Accept "", a positive divisor, or WxH / W:H."""
        v = v.strip()
        if not is_valid_resolution(v):
            raise ValueError(
                f"invalid resolution '{v}'. Use a divisor (e.g. 2) "
                "or an explicit size (e.g. 1280x720)"
            )
        return v

    @field_validator("fps")
    @classmethod
    def validate_fps(cls, v: str) -> str:
        """Accept "", a positive number, a N/D rational or a named rate."""
        v = v.strip()
        if not is_valid_fps(v):
            raise ValueError(
                f"invalid fps '{v}'. Must be a positive number, N/D or a named rate"
            )
        return v

    @field_validator("trim_start", "trim_end", mode="before")
    @classmethod
    def empty_trim_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("trim_start", "trim_end")
    @classmethod
    def validate_timestamp(cls, v: str | None) -> str | None:
        """Require [[HH:]MM:]SS[.ff][s] timestamps."""
        if v is not None:
            parse_timestamp(v)
        return v

    @model_validator(mode="after")
    def validate_trim_range(self) -> JobConfigModel:
        """Both or neither trim bounds, with end after start."""
        if (self.trim_start is None) != (self.trim_end is None):
            raise ValueError("trim needs both a start and an end")
        if self.trim_start is not None and self.trim_end is not None:
            if parse_timestamp(self.trim_end) <= parse_timestamp(self.trim_start):
                raise ValueError(
                    f"trim end '{self.trim_end}' must be after "
                    f"start '{self.trim_start}'"
                )
        return self

    @model_validator(mode="after")
    def validate_codec(self) -> JobConfigModel:
        """The codec must be offered by the backend (AV1 only for AVIF)."""
        if not self.output_mode.is_bitrate_driven or self.codec is None:
            return self
        info = find_codec(self.codec, self.backend)
        if info is None:
            raise ValueError(
                f"codec '{self.codec}' is not available for {self.backend.value}"
            )
        if self.output_mode is OutputMode.AVIF and not info.is_av1:
            raise ValueError(f"AVIF output requires an AV1 codec, got '{self.codec}'")
        return self

    def to_job_config(self) -> JobConfig:
        """Convert to the immutable JobConfig."""
        mode = self.output_mode
        if mode.is_bitrate_driven:
            backend = self.backend
            codec = self.codec or default_codec(
                backend, avif_only=mode is OutputMode.AVIF
            ).encoder
        else:
            # GIF and APNG use ffmpeg's built-in image encoders
            backend = HardwareBackend.CPU
            codec = IMAGE_ENCODERS[mode]

        trim = None
        if self.trim_start is not None and self.trim_end is not None:
            trim = TrimRange(
                start=self.trim_start,
                end=self.trim_end,
                start_seconds=parse_timestamp(self.trim_start),
                end_seconds=parse_timestamp(self.trim_end),
            )

        return JobConfig(
            input_path=self.input_path,
            output_mode=mode,
            codec=codec,
            backend=backend,
            target_size_mb=self.target_size_mb,
            resolution=self.resolution,
            fps=self.fps,
            trim=trim,
            quality_level=self.quality_level,
            crf_slider=self.crf_slider,
            output_path=self.output_path,
            verbose=self.verbose,
        )


def _format_validation_error(error: ValidationError) -> str:
    """Format a pydantic validation error into a user-friendly message."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Invalid job: {loc}: {msg}"
        return f"Invalid job: {msg}"
    return f"Invalid job: {error}"


@dataclass
class JobDraft:
    """Mutable job settings, filled in one step at a time."""

    input_path: str = ""
    output_mode: OutputMode = OutputMode.VIDEO
    target_size_mb: float | str | None = None
    resolution: str = ""
    fps: str = ""
    trim_start: str = ""
    trim_end: str = ""
    backend: HardwareBackend = HardwareBackend.CPU
    codec: str | None = None
    quality_level: int = 2
    crf_slider: int = 5
    output_path: str | None = None
    verbose: bool = False

    def finalize(self) -> JobConfig:
        """Validate the draft and freeze it.

        Raises:
            ConfigurationError: If any field is invalid.
        """
        try:
            model = JobConfigModel.model_validate(asdict(self))
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e

        job = model.to_job_config()
        logger.debug(
            "Finalized job",
            extra={
                "input": str(job.input_path),
                "output_mode": job.output_mode.value,
                "backend": job.backend.value,
                "codec": job.codec,
            },
        )
        return job
