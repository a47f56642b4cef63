"""Encode pipeline for teacrush.

- Pipeline: state machine running one job
- StageRunner: one ffmpeg subprocess at a time
- ProgressMonitor / ProgressChannel: progress parsing and delivery
- ScratchArtifacts: intermediate file ownership
"""

from teacrush.pipeline.artifacts import ScratchArtifacts
from teacrush.pipeline.channel import ChannelClosedError, ProgressChannel
from teacrush.pipeline.orchestrator import NullListener, Pipeline, PipelineListener
from teacrush.pipeline.progress import ProgressMonitor, parse_out_time
from teacrush.pipeline.runner import StageRunner

__all__ = [
    "ChannelClosedError",
    "NullListener",
    "Pipeline",
    "PipelineListener",
    "ProgressChannel",
    "ProgressMonitor",
    "ScratchArtifacts",
    "StageRunner",
    "parse_out_time",
]
