"""Domain enums for teacrush.

This module contains enums shared by the planner, the pipeline and the CLI.
"""

from enum import Enum


class OutputMode(Enum):
    """Kind of artifact a job produces."""

    VIDEO = "video"  # Regular video container (mp4/webm)
    GIF = "gif"  # Palette-based animated GIF
    APNG = "apng"  # Animated PNG
    AVIF = "avif"  # Animated AVIF (AV1 codecs only)

    @property
    def is_palette_based(self) -> bool:
        """True if the format needs a palette generated from the source."""
        return self is OutputMode.GIF

    @property
    def is_bitrate_driven(self) -> bool:
        """True if the format is encoded with a video codec and rate control.

        GIF and APNG are encoded by built-in image encoders and are always
        single pass regardless of the size target.
        """
        return self in (OutputMode.VIDEO, OutputMode.AVIF)


class HardwareBackend(Enum):
    """Execution context used for encoding."""

    CPU = "cpu"
    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL = "intel"

    @property
    def label(self) -> str:
        """Human-readable backend name."""
        return _BACKEND_LABELS[self]

    @property
    def is_hardware(self) -> bool:
        """True for vendor accelerators, False for the general-purpose CPU."""
        return self is not HardwareBackend.CPU


_BACKEND_LABELS = {
    HardwareBackend.CPU: "CPU (Software, Best Quality)",
    HardwareBackend.NVIDIA: "NVIDIA (NVENC)",
    HardwareBackend.AMD: "AMD (AMF)",
    HardwareBackend.INTEL: "Intel (QSV)",
}


class PipelineState(Enum):
    """States of the encode pipeline.

    IDLE -> PROBING -> [PALETTE_GEN] -> ENCODING_1 -> [ENCODING_2]
    -> FINALIZING -> DONE, with FAILED reachable from every active state.
    """

    IDLE = "idle"
    PROBING = "probing"
    PALETTE_GEN = "palette_gen"
    ENCODING_1 = "encoding_1"
    ENCODING_2 = "encoding_2"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for DONE and FAILED."""
        return self in (PipelineState.DONE, PipelineState.FAILED)
