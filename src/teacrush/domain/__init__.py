"""Domain models and enums for teacrush.

Usage:
    from teacrush.domain import JobConfig, MediaInfo, OutputMode
"""

from .enums import HardwareBackend, OutputMode, PipelineState
from .models import (
    EncodePlan,
    JobConfig,
    JobOutcome,
    MediaInfo,
    ProgressSample,
    StageEvent,
    StageSpec,
    TrimRange,
)

__all__ = [
    # Enums
    "HardwareBackend",
    "OutputMode",
    "PipelineState",
    # Models
    "EncodePlan",
    "JobConfig",
    "JobOutcome",
    "MediaInfo",
    "ProgressSample",
    "StageEvent",
    "StageSpec",
    "TrimRange",
]
