"""Codec catalog and encoder preset mapping.

The catalog lists the encoders offered per backend. The preset table maps
each (encoder, backend) pair to its speed tokens and quality scale, so the
planner never branches on codec names.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from teacrush.domain.enums import HardwareBackend, OutputMode
from teacrush.exceptions import ConfigurationError, PresetTableError

QUALITY_LEVELS = 5
"""Number of speed/quality steps, index 0 is fastest."""

MAX_CRF_SLIDER = 10

QUALITY_PLACEHOLDER = "{q}"


@dataclass(frozen=True)
class CodecInfo:
    """One entry of the codec catalog."""

    name: str
    """Display name (e.g. "H.264 (Fast)")."""

    encoder: str
    """ffmpeg encoder name (e.g. "libx264")."""

    extension: str
    """Default container extension, with leading dot."""

    @property
    def is_av1(self) -> bool:
        return "av1" in self.encoder


CODEC_CATALOG: Mapping[HardwareBackend, tuple[CodecInfo, ...]] = {
    HardwareBackend.CPU: (
        CodecInfo("AV1 (SVT-AV1, Balanced, Recommended)", "libsvtav1", ".webm"),
        CodecInfo("AV1 (AOM, Reference/Slow)", "libaom-av1", ".webm"),
        CodecInfo("AV1 (rav1e)", "librav1e", ".webm"),
        CodecInfo("VP9 (Medium Quality)", "libvpx-vp9", ".webm"),
        CodecInfo("H.264 (Fast)", "libx264", ".mp4"),
        CodecInfo("H.265 (High Efficiency)", "libx265", ".mp4"),
    ),
    HardwareBackend.NVIDIA: (
        CodecInfo("H.264 (NVENC)", "h264_nvenc", ".mp4"),
        CodecInfo("HEVC (NVENC)", "hevc_nvenc", ".mp4"),
        CodecInfo("AV1 (NVENC - RTX 40xx+)", "av1_nvenc", ".webm"),
    ),
    HardwareBackend.AMD: (
        CodecInfo("H.264 (AMF)", "h264_amf", ".mp4"),
        CodecInfo("HEVC (AMF)", "hevc_amf", ".mp4"),
        CodecInfo("AV1 (AMF - RX 7000+)", "av1_amf", ".webm"),
    ),
    HardwareBackend.INTEL: (
        CodecInfo("H.264 (QSV)", "h264_qsv", ".mp4"),
        CodecInfo("HEVC (QSV)", "hevc_qsv", ".mp4"),
        CodecInfo("VP9 (QSV)", "vp9_qsv", ".webm"),
        CodecInfo("AV1 (QSV - Arc GPU)", "av1_qsv", ".webm"),
    ),
}

# Built-in image encoders, used by GIF and APNG regardless of backend
IMAGE_ENCODERS: Mapping[OutputMode, str] = {
    OutputMode.GIF: "gif",
    OutputMode.APNG: "apng",
}


@dataclass(frozen=True)
class EncoderPreset:
    """Speed and quality mapping for one encoder.

    The quality value for a CRF slider position s is
    ``quality_base + int(s * quality_step)`` and is substituted for every
    ``{q}`` in quality_args.
    """

    speed_flag: str
    speed_tokens: tuple[str, ...]
    """Speed tokens ordered fastest to slowest, one per quality level."""

    quality_base: int
    quality_step: float
    quality_args: tuple[str, ...]
    """Rate-control flags in quality mode."""

    bitrate_args: tuple[str, ...] = ()
    """Rate-control flags added when a bitrate drives the encoder."""

    fixed_args: tuple[str, ...] = ()
    """Encoder-specific flags always emitted after the speed token."""

    def quality_value(self, crf_slider: int) -> int:
        return self.quality_base + int(crf_slider * self.quality_step)


_CRF = ("-crf", QUALITY_PLACEHOLDER)

_X264_PRESETS = ("ultrafast", "veryfast", "faster", "medium", "veryslow")
_X265_PRESETS = ("ultrafast", "veryfast", "fast", "medium", "veryslow")

# Hardware encoders share one quality scale (19-34)
_HW_BASE = 19
_HW_STEP = 1.5

_NVENC = EncoderPreset(
    speed_flag="-preset",
    speed_tokens=("p1", "p2", "p4", "p6", "p7"),
    quality_base=_HW_BASE,
    quality_step=_HW_STEP,
    quality_args=("-rc", "vbr", "-cq", QUALITY_PLACEHOLDER),
    bitrate_args=("-rc", "vbr", "-cq", "0"),
)
_AMF_QUALITY_ARGS = (
    "-rc",
    "cqp",
    "-qp_i",
    QUALITY_PLACEHOLDER,
    "-qp_p",
    QUALITY_PLACEHOLDER,
)
_AMF = EncoderPreset(
    speed_flag="-quality",
    speed_tokens=("speed", "speed", "balanced", "quality", "quality"),
    quality_base=_HW_BASE,
    quality_step=_HW_STEP,
    quality_args=_AMF_QUALITY_ARGS,
)
_AMF_AV1 = EncoderPreset(
    speed_flag="-quality",
    speed_tokens=("speed", "balanced", "quality", "high_quality", "high_quality"),
    quality_base=_HW_BASE,
    quality_step=_HW_STEP,
    quality_args=_AMF_QUALITY_ARGS,
)
_QSV = EncoderPreset(
    speed_flag="-preset",
    speed_tokens=("veryfast", "faster", "balanced", "slow", "veryslow"),
    quality_base=_HW_BASE,
    quality_step=_HW_STEP,
    quality_args=("-global_quality", QUALITY_PLACEHOLDER),
)

PRESET_TABLE: Mapping[tuple[str, HardwareBackend], EncoderPreset] = {
    ("libsvtav1", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-preset",
        speed_tokens=("12", "10", "8", "6", "4"),
        quality_base=20,
        quality_step=3,
        quality_args=_CRF,
    ),
    ("libaom-av1", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-cpu-used",
        speed_tokens=("8", "7", "6", "4", "3"),
        quality_base=20,
        quality_step=3,
        quality_args=_CRF,
        fixed_args=("-row-mt", "1", "-tiles", "2x2"),
    ),
    ("librav1e", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-speed",
        speed_tokens=("10", "8", "6", "4", "2"),
        quality_base=60,
        quality_step=8,
        quality_args=_CRF,
    ),
    ("libvpx-vp9", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-speed",
        speed_tokens=("8", "7", "6", "4", "1"),
        quality_base=20,
        quality_step=2.5,
        # Constant quality in libvpx needs the bitrate ceiling lifted
        quality_args=("-crf", QUALITY_PLACEHOLDER, "-b:v", "0"),
        fixed_args=("-row-mt", "1", "-tile-columns", "2"),
    ),
    ("libx264", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-preset",
        speed_tokens=_X264_PRESETS,
        quality_base=18,
        quality_step=1.5,
        quality_args=_CRF,
    ),
    ("libx265", HardwareBackend.CPU): EncoderPreset(
        speed_flag="-preset",
        speed_tokens=_X265_PRESETS,
        quality_base=20,
        quality_step=1.6,
        quality_args=_CRF,
    ),
    ("h264_nvenc", HardwareBackend.NVIDIA): _NVENC,
    ("hevc_nvenc", HardwareBackend.NVIDIA): _NVENC,
    ("av1_nvenc", HardwareBackend.NVIDIA): _NVENC,
    ("h264_amf", HardwareBackend.AMD): _AMF,
    ("hevc_amf", HardwareBackend.AMD): _AMF,
    ("av1_amf", HardwareBackend.AMD): _AMF_AV1,
    ("h264_qsv", HardwareBackend.INTEL): _QSV,
    ("hevc_qsv", HardwareBackend.INTEL): _QSV,
    ("vp9_qsv", HardwareBackend.INTEL): _QSV,
    ("av1_qsv", HardwareBackend.INTEL): _QSV,
}


def validate_preset_table(
    catalog: Mapping[HardwareBackend, tuple[CodecInfo, ...]] = CODEC_CATALOG,
    table: Mapping[tuple[str, HardwareBackend], EncoderPreset] = PRESET_TABLE,
) -> None:
    """Check that every catalog entry has a well-formed preset.

    Raises:
        PresetTableError: On a missing entry, a token array that does not
            have one token per quality level, or quality args without a
            quality placeholder.
    """
    problems: list[str] = []
    for backend, codecs in catalog.items():
        for codec in codecs:
            preset = table.get((codec.encoder, backend))
            if preset is None:
                problems.append(f"no preset for {codec.encoder} on {backend.value}")
                continue
            if len(preset.speed_tokens) != QUALITY_LEVELS:
                problems.append(
                    f"{codec.encoder} on {backend.value} has "
                    f"{len(preset.speed_tokens)} speed tokens, "
                    f"expected {QUALITY_LEVELS}"
                )
            if any(not token for token in preset.speed_tokens):
                problems.append(f"{codec.encoder} on {backend.value} has empty tokens")
            if QUALITY_PLACEHOLDER not in preset.quality_args:
                problems.append(
                    f"{codec.encoder} on {backend.value} has no quality placeholder"
                )
    if problems:
        raise PresetTableError("Invalid preset table: " + "; ".join(problems))


def codecs_for(
    backend: HardwareBackend, avif_only: bool = False
) -> tuple[CodecInfo, ...]:
    """Codecs offered for a backend, restricted to AV1 encoders for AVIF."""
    codecs = CODEC_CATALOG[backend]
    if avif_only:
        return tuple(c for c in codecs if c.is_av1)
    return codecs


def find_codec(encoder: str, backend: HardwareBackend) -> CodecInfo | None:
    """Look up a catalog entry by encoder name."""
    for codec in CODEC_CATALOG[backend]:
        if codec.encoder == encoder:
            return codec
    return None


def default_codec(backend: HardwareBackend, avif_only: bool = False) -> CodecInfo:
    """First catalog entry for a backend, the recommended choice."""
    codecs = codecs_for(backend, avif_only)
    if not codecs:
        raise ConfigurationError(f"No codecs available for {backend.value}")
    return codecs[0]


def map_preset(
    codec: str,
    backend: HardwareBackend,
    quality_level: int,
    crf_slider: int | None = None,
) -> tuple[str, ...]:
    """Map a speed level and optional CRF slider to encoder flags.

    Args:
        codec: ffmpeg encoder name.
        backend: Hardware backend the encoder runs on.
        quality_level: 0 (fastest) to 4 (slowest).
        crf_slider: 0 (best) to 10 (smallest) in quality mode, or None when
            a bitrate drives the encoder.

    Returns:
        Speed flag and token, fixed flags, then rate-control flags.

    Raises:
        ConfigurationError: If the pair is not in the table or a level is
            out of range.
    """
    preset = PRESET_TABLE.get((codec, backend))
    if preset is None:
        raise ConfigurationError(f"No encoder preset for {codec} on {backend.value}")
    if not 0 <= quality_level < QUALITY_LEVELS:
        raise ConfigurationError(
            f"quality level must be 0-{QUALITY_LEVELS - 1}, got {quality_level}"
        )

    args: list[str] = [preset.speed_flag, preset.speed_tokens[quality_level]]
    args.extend(preset.fixed_args)

    if crf_slider is None:
        args.extend(preset.bitrate_args)
    else:
        if not 0 <= crf_slider <= MAX_CRF_SLIDER:
            raise ConfigurationError(
                f"CRF slider must be 0-{MAX_CRF_SLIDER}, got {crf_slider}"
            )
        value = str(preset.quality_value(crf_slider))
        args.extend(
            value if arg == QUALITY_PLACEHOLDER else arg for arg in preset.quality_args
        )
    return tuple(args)


validate_preset_table()
