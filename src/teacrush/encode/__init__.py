"""Encode planning for teacrush.

Pure functions that turn a finalized job into ffmpeg argument vectors:
rate resolution, filter graphs, encoder presets, plans and stage rendering.
"""

from teacrush.encode.command import build_engine_argv, format_command, render_stages
from teacrush.encode.filters import (
    build_filter_chain,
    build_palette_filters,
    build_scale_filter,
    scaled_dimensions,
)
from teacrush.encode.planner import build_plan
from teacrush.encode.presets import (
    CODEC_CATALOG,
    PRESET_TABLE,
    CodecInfo,
    EncoderPreset,
    codecs_for,
    map_preset,
    validate_preset_table,
)
from teacrush.encode.resolver import (
    RateDecision,
    compute_video_bitrate,
    estimate_quality_mode_size,
    parse_timestamp,
    resolve_rate,
    trim_duration,
)

__all__ = [
    "CODEC_CATALOG",
    "PRESET_TABLE",
    "CodecInfo",
    "EncoderPreset",
    "RateDecision",
    "build_engine_argv",
    "build_filter_chain",
    "build_palette_filters",
    "build_plan",
    "build_scale_filter",
    "codecs_for",
    "compute_video_bitrate",
    "estimate_quality_mode_size",
    "format_command",
    "map_preset",
    "parse_timestamp",
    "render_stages",
    "resolve_rate",
    "scaled_dimensions",
    "trim_duration",
    "validate_preset_table",
]
