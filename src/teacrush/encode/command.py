"""FFmpeg command rendering.

render_stages() is the single place where an EncodePlan becomes argument
vectors. Each stage is rendered without the executable and the progress
prefix; build_engine_argv() adds both at launch time.
"""

from __future__ import annotations

import os
import shlex

from teacrush.domain.enums import OutputMode, PipelineState
from teacrush.domain.models import EncodePlan, StageSpec
from teacrush.encode.filters import build_palette_filters

PROGRESS_ARGS = ("-hide_banner", "-nostats", "-progress", "pipe:1")

STAGE_PALETTE = "GIF Palette"
STAGE_GIF_ENCODE = "GIF Encode"
STAGE_APNG_ENCODE = "APNG Encode"
STAGE_QUALITY_ENCODE = "Encoding (CRF)"
STAGE_PASS_1 = "Pass 1 (Analysis)"
STAGE_PASS_2 = "Pass 2 (Encoding)"
STAGE_HW_ENCODE = "GPU Encoding"


def null_device(platform_name: str | None = None) -> str:
    """Platform null sink for the analysis pass."""
    return "NUL" if (platform_name or os.name) == "nt" else "/dev/null"


def _kbit(value: int) -> str:
    return f"{value}k"


def _filter_args(plan: EncodePlan) -> list[str]:
    if plan.filter_chain:
        return ["-vf", plan.filter_chain]
    return []


def _input_args(plan: EncodePlan) -> list[str]:
    args = ["-y"]
    args.extend(plan.trim_args)
    args.extend(["-i", str(plan.input_path)])
    return args


def _render_gif(plan: EncodePlan) -> list[StageSpec]:
    if plan.palette_path is None:
        raise ValueError("GIF plan has no palette path")
    palettegen, paletteuse = build_palette_filters(plan.filter_chain or "")

    palette_args = _input_args(plan)
    palette_args.extend(["-vf", palettegen, str(plan.palette_path)])

    encode_args = _input_args(plan)
    encode_args.extend(["-i", str(plan.palette_path), "-lavfi", paletteuse])
    encode_args.extend(plan.format_args)
    encode_args.append(str(plan.output_path))

    return [
        StageSpec(PipelineState.PALETTE_GEN, STAGE_PALETTE, tuple(palette_args)),
        StageSpec(PipelineState.ENCODING_1, STAGE_GIF_ENCODE, tuple(encode_args)),
    ]


def _render_apng(plan: EncodePlan) -> list[StageSpec]:
    args = _input_args(plan)
    args.extend(_filter_args(plan))
    args.extend(["-c:v", plan.codec])
    args.extend(plan.encoder_args)
    args.extend(plan.format_args)
    args.append(str(plan.output_path))
    return [StageSpec(PipelineState.ENCODING_1, STAGE_APNG_ENCODE, tuple(args))]


def _render_hardware(plan: EncodePlan) -> list[StageSpec]:
    args = ["-y", "-hwaccel", "auto"]
    args.extend(plan.trim_args)
    args.extend(["-i", str(plan.input_path), "-c:v", plan.codec])
    if plan.bitrate_kbit is not None:
        args.extend(
            [
                "-b:v",
                _kbit(plan.bitrate_kbit),
                "-maxrate",
                _kbit(plan.bitrate_kbit),
                "-bufsize",
                _kbit(plan.bitrate_kbit * 2),
            ]
        )
    args.extend(_filter_args(plan))
    args.extend(plan.encoder_args)
    args.extend(plan.audio_args)
    args.extend(plan.format_args)
    args.append(str(plan.output_path))
    return [StageSpec(PipelineState.ENCODING_1, STAGE_HW_ENCODE, tuple(args))]


def _render_two_pass(plan: EncodePlan) -> list[StageSpec]:
    if plan.passlog_path is None or plan.bitrate_kbit is None:
        raise ValueError("Two-pass plan needs a pass log path and a bitrate")
    bitrate = _kbit(plan.bitrate_kbit)
    passlog = str(plan.passlog_path)

    pass1 = _input_args(plan)
    pass1.extend(["-c:v", plan.codec, "-b:v", bitrate])
    pass1.extend(["-pass", "1", "-passlogfile", passlog, "-an"])
    pass1.extend(_filter_args(plan))
    pass1.extend(plan.encoder_args)
    pass1.extend(["-f", "null", null_device()])

    pass2 = _input_args(plan)
    pass2.extend(["-c:v", plan.codec, "-b:v", bitrate])
    pass2.extend(["-pass", "2", "-passlogfile", passlog])
    pass2.extend(_filter_args(plan))
    pass2.extend(plan.encoder_args)
    pass2.extend(plan.audio_args)
    pass2.extend(plan.format_args)
    pass2.append(str(plan.output_path))

    return [
        StageSpec(PipelineState.ENCODING_1, STAGE_PASS_1, tuple(pass1)),
        StageSpec(PipelineState.ENCODING_2, STAGE_PASS_2, tuple(pass2)),
    ]


def _render_single_pass(plan: EncodePlan) -> list[StageSpec]:
    args = _input_args(plan)
    args.extend(["-c:v", plan.codec])
    args.extend(plan.encoder_args)
    args.extend(_filter_args(plan))
    args.extend(plan.audio_args)
    args.extend(plan.format_args)
    args.append(str(plan.output_path))
    return [StageSpec(PipelineState.ENCODING_1, STAGE_QUALITY_ENCODE, tuple(args))]


def render_stages(plan: EncodePlan) -> list[StageSpec]:
    """Render every subprocess stage of a plan, in execution order."""
    if plan.output_mode is OutputMode.GIF:
        return _render_gif(plan)
    if plan.output_mode is OutputMode.APNG:
        return _render_apng(plan)
    if plan.backend.is_hardware:
        return _render_hardware(plan)
    if plan.two_pass:
        return _render_two_pass(plan)
    return _render_single_pass(plan)


def build_engine_argv(ffmpeg_path: os.PathLike[str] | str, stage: StageSpec) -> list[str]:
    """Full argv for a stage: executable, progress prefix, stage args."""
    return [str(ffmpeg_path), *PROGRESS_ARGS, *stage.args]


def format_command(argv: list[str]) -> str:
    """Shell-quoted command line for display in verbose mode."""
    return shlex.join(argv)
