"""CLI encode command for teacrush."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

import click

from teacrush.cli.exit_codes import ExitCode, exit_code_for
from teacrush.cli.progress import StderrJobReporter
from teacrush.config.models import TeacrushConfig
from teacrush.domain.enums import HardwareBackend, OutputMode
from teacrush.domain.models import JobConfig, JobOutcome
from teacrush.encode.resolver import estimate_quality_mode_size
from teacrush.exceptions import ConfigurationError, ToolNotFoundError
from teacrush.introspector import FFprobeIntrospector
from teacrush.job import JobDraft
from teacrush.pipeline import Pipeline
from teacrush.tools import require_tool

logger = logging.getLogger(__name__)


def _select_mode(gif: bool, apng: bool, avif: bool) -> OutputMode:
    if gif + apng + avif > 1:
        raise click.UsageError("--gif, --apng and --avif are mutually exclusive.")
    if gif:
        return OutputMode.GIF
    if apng:
        return OutputMode.APNG
    if avif:
        return OutputMode.AVIF
    return OutputMode.VIDEO


async def _run_pipeline(pipeline: Pipeline) -> JobOutcome:
    """Run a pipeline, cancelling it on Ctrl+C."""
    loop = asyncio.get_running_loop()
    handler_installed = False
    try:
        loop.add_signal_handler(signal.SIGINT, pipeline.cancel)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        # Windows event loops do not support signal handlers
        logger.debug("SIGINT handler not supported on this platform")
    try:
        return await pipeline.run()
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)


def _echo_estimate(job: JobConfig) -> None:
    if not job.quality_mode or not job.output_mode.is_bitrate_driven:
        return
    try:
        original_mb = job.input_path.stat().st_size / 1024 / 1024
    except OSError:
        return
    estimate = estimate_quality_mode_size(original_mb, job.crf_slider)
    click.echo(f"Estimated size: ~{estimate:.2f} MB", err=True)


@click.command("encode")
@click.argument("input_file", metavar="INPUT")
@click.option(
    "--size",
    "size_mb",
    type=float,
    default=None,
    help="Target size in MB. Omit to encode in quality (CRF) mode.",
)
@click.option(
    "--res",
    "resolution",
    default="",
    help="Divisor (e.g. 2 halves each side) or explicit size (e.g. 1280x720).",
)
@click.option("--fps", default="", help="Output frame rate (default: source).")
@click.option("--gif", is_flag=True, help="Produce an animated GIF.")
@click.option("--apng", is_flag=True, help="Produce an animated PNG.")
@click.option("--avif", is_flag=True, help="Produce an animated AVIF (AV1 codecs).")
@click.option(
    "--hw",
    "backend",
    type=click.Choice([b.value for b in HardwareBackend], case_sensitive=False),
    default=HardwareBackend.CPU.value,
    show_default=True,
    help="Encoding backend.",
)
@click.option(
    "--codec",
    default=None,
    help="ffmpeg encoder name (see 'teacrush codecs'). Default: backend's first.",
)
@click.option(
    "--quality",
    "quality_level",
    type=int,
    default=2,
    show_default=True,
    help="Speed/quality tradeoff, 0 (fastest) to 4 (slowest).",
)
@click.option(
    "--crf",
    "crf_slider",
    type=int,
    default=5,
    show_default=True,
    help="Quality mode slider, 0 (best quality) to 10 (smallest file).",
)
@click.option(
    "--trim",
    nargs=2,
    type=str,
    default=None,
    metavar="START END",
    help="Encode only START..END (e.g. 00:01:00 00:01:30).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    default=None,
    help="Custom output path (default: <input>_compressed.<ext>).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show ffmpeg command lines.")
@click.pass_context
def encode_command(
    ctx: click.Context,
    input_file: str,
    size_mb: float | None,
    resolution: str,
    fps: str,
    gif: bool,
    apng: bool,
    avif: bool,
    backend: str,
    codec: str | None,
    quality_level: int,
    crf_slider: int,
    trim: tuple[str, str] | None,
    output_path: str | None,
    verbose: bool,
) -> None:
    """Compress a video to a size budget or quality level.

    INPUT is the media file to encode.
    """
    config: TeacrushConfig = ctx.obj["config"]

    draft = JobDraft(
        input_path=input_file,
        output_mode=_select_mode(gif, apng, avif),
        target_size_mb=size_mb,
        resolution=resolution,
        fps=fps,
        backend=HardwareBackend(backend.lower()),
        codec=codec,
        quality_level=quality_level,
        crf_slider=crf_slider,
        output_path=output_path,
        verbose=verbose,
    )
    if trim:
        draft.trim_start, draft.trim_end = trim

    try:
        job = draft.finalize()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.INVALID_JOB)

    try:
        ffmpeg_path = require_tool("ffmpeg", config.tools)
        ffprobe_path = require_tool("ffprobe", config.tools)
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.TOOL_NOT_AVAILABLE)

    _echo_estimate(job)

    reporter = StderrJobReporter(enabled=sys.stderr.isatty() or verbose)
    pipeline = Pipeline(
        job,
        ffmpeg_path,
        FFprobeIntrospector(ffprobe_path, config.behavior.probe_timeout_seconds),
        listener=reporter,
        temp_directory=config.behavior.temp_directory,
    )
    outcome = asyncio.run(_run_pipeline(pipeline))
    reporter.finish()

    if not outcome.succeeded:
        click.echo(f"Error: {outcome.error}", err=True)
        ctx.exit(exit_code_for(outcome.error))

    click.echo(f"Saved: {outcome.output_path}")
    if outcome.size_mb is not None:
        click.echo(f"Size: {outcome.size_mb:.2f} MB")
