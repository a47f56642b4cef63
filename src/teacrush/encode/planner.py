"""Encode planning.

Combines a finalized job, the probed media info and the scratch artifact
paths into an EncodePlan. The plan holds every decision; rendering it into
argument vectors is done by teacrush.encode.command.
"""

from __future__ import annotations

import logging
from pathlib import Path

from teacrush.domain.enums import HardwareBackend, OutputMode
from teacrush.domain.models import EncodePlan, JobConfig, MediaInfo
from teacrush.encode.filters import build_filter_chain
from teacrush.encode.presets import IMAGE_ENCODERS, CodecInfo, find_codec, map_preset
from teacrush.encode.resolver import RateDecision, resolve_rate
from teacrush.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_compressed"

AUDIO_BITRATE = "128k"

_MODE_EXTENSIONS = {
    OutputMode.GIF: ".gif",
    OutputMode.APNG: ".png",
    OutputMode.AVIF: ".avif",
}

_MODE_FORMATS = {
    OutputMode.GIF: "gif",
    OutputMode.APNG: "apng",
    OutputMode.AVIF: "avif",
}


def output_extension(mode: OutputMode, codec: CodecInfo | None) -> str:
    """Extension of the default output file for a mode and codec."""
    if mode in _MODE_EXTENSIONS:
        return _MODE_EXTENSIONS[mode]
    if codec is None:
        raise ConfigurationError("Video output requires a codec")
    return codec.extension


def default_output_path(input_path: Path, extension: str) -> Path:
    """<input dir>/<stem>_compressed<extension>."""
    return input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}{extension}")


def build_format_args(
    mode: OutputMode, codec: CodecInfo | None, custom_output: bool
) -> tuple[str, ...]:
    """Container flags: explicit -f for custom paths, faststart for MP4."""
    args: list[str] = []
    if custom_output:
        fmt = _MODE_FORMATS.get(mode)
        if fmt is None:
            fmt = output_extension(mode, codec).lstrip(".")
        args.extend(["-f", fmt])
    if mode is OutputMode.VIDEO and codec is not None and codec.extension == ".mp4":
        args.extend(["-movflags", "+faststart"])
    return tuple(args)


def build_audio_args(audio_kept: bool, codec: CodecInfo | None) -> tuple[str, ...]:
    """AAC for MP4 containers, Opus otherwise, or -an when audio is dropped."""
    if not audio_kept:
        return ("-an",)
    if codec is not None and codec.extension == ".mp4":
        return ("-c:a", "aac", "-b:a", AUDIO_BITRATE)
    return ("-c:a", "libopus", "-b:a", AUDIO_BITRATE)


def effective_duration(job: JobConfig, media: MediaInfo) -> float:
    """Trimmed length when a valid trim is set, else the probed duration."""
    if job.trim is not None and job.trim.duration > 0:
        return job.trim.duration
    return media.duration


def build_plan(
    job: JobConfig,
    media: MediaInfo,
    *,
    passlog_path: Path | None = None,
    palette_path: Path | None = None,
) -> EncodePlan:
    """Resolve every encode decision for a job.

    Args:
        job: Finalized job configuration.
        media: Probe result for the job's input.
        passlog_path: Scratch prefix for two-pass statistics.
        palette_path: Scratch path for the GIF palette image.

    Returns:
        The EncodePlan. passlog_path is only kept for two-pass plans and
        palette_path only for GIF plans.

    Raises:
        ConfigurationError: If the codec is not offered by the backend, or a
            required scratch path is missing.
    """
    mode = job.output_mode
    duration = effective_duration(job, media)
    trim_args: tuple[str, ...] = ()
    if job.trim is not None:
        trim_args = ("-ss", job.trim.start, "-to", job.trim.end)

    filter_chain = build_filter_chain(job.resolution, job.fps)

    codec_info: CodecInfo | None = None
    if mode.is_bitrate_driven:
        codec_info = find_codec(job.codec, job.backend)
        if codec_info is None:
            raise ConfigurationError(
                f"Codec {job.codec} is not available for {job.backend.value}"
            )

    extension = output_extension(mode, codec_info)
    output_path = job.output_path or default_output_path(job.input_path, extension)
    format_args = build_format_args(mode, codec_info, job.output_path is not None)

    if not mode.is_bitrate_driven:
        encoder_args: tuple[str, ...] = ()
        if mode is OutputMode.APNG:
            encoder_args = ("-plays", "0")
        if mode.is_palette_based and palette_path is None:
            raise ConfigurationError("GIF output requires a palette path")
        plan = EncodePlan(
            input_path=job.input_path,
            output_path=output_path,
            output_mode=mode,
            backend=HardwareBackend.CPU,
            codec=IMAGE_ENCODERS[mode],
            duration=duration,
            pass_count=1,
            format_args=format_args,
            filter_chain=filter_chain,
            encoder_args=encoder_args,
            audio_args=("-an",),
            trim_args=trim_args,
            palette_path=palette_path if mode.is_palette_based else None,
        )
        _log_plan(plan)
        return plan

    audio_kept = media.has_audio and mode is OutputMode.VIDEO
    rate: RateDecision = resolve_rate(job.target_size_mb, duration, audio_kept)

    two_pass = not job.backend.is_hardware and not rate.quality_mode
    if two_pass and passlog_path is None:
        raise ConfigurationError("Two-pass encoding requires a pass log path")

    encoder_args_list = ["-pix_fmt", "yuv420p"]
    if mode is OutputMode.AVIF:
        encoder_args_list.extend(["-still-picture", "0"])
    encoder_args_list.extend(
        map_preset(
            job.codec,
            job.backend,
            job.quality_level,
            job.crf_slider if rate.quality_mode else None,
        )
    )

    plan = EncodePlan(
        input_path=job.input_path,
        output_path=output_path,
        output_mode=mode,
        backend=job.backend,
        codec=job.codec,
        duration=duration,
        pass_count=2 if two_pass else 1,
        bitrate_kbit=rate.bitrate_kbit,
        format_args=format_args,
        filter_chain=filter_chain,
        encoder_args=tuple(encoder_args_list),
        audio_args=build_audio_args(audio_kept, codec_info),
        trim_args=trim_args,
        passlog_path=passlog_path if two_pass else None,
    )
    _log_plan(plan)
    return plan


def _log_plan(plan: EncodePlan) -> None:
    logger.info(
        "Planned %s encode with %s",
        plan.output_mode.value,
        plan.codec,
        extra={
            "backend": plan.backend.value,
            "pass_count": plan.pass_count,
            "bitrate_kbit": plan.bitrate_kbit,
            "duration": plan.duration,
            "output_path": str(plan.output_path),
        },
    )
