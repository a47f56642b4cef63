"""Encode pipeline state machine.

Sequences one job through probing, the optional palette stage, one or two
encode passes and finalization. Job failures are reported through the
returned JobOutcome and never escape run().
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path
from typing import Protocol

from teacrush.domain.enums import PipelineState
from teacrush.domain.models import (
    EncodePlan,
    JobConfig,
    JobOutcome,
    MediaInfo,
    ProgressSample,
    StageEvent,
    StageSpec,
)
from teacrush.encode.command import build_engine_argv, format_command, render_stages
from teacrush.encode.planner import build_plan
from teacrush.exceptions import (
    JobCancelledError,
    ResourceError,
    StageError,
    TeacrushError,
)
from teacrush.introspector.interface import MediaProber
from teacrush.logging.context import job_context
from teacrush.pipeline.artifacts import ScratchArtifacts
from teacrush.pipeline.channel import ProgressChannel
from teacrush.pipeline.progress import ProgressMonitor
from teacrush.pipeline.runner import StageRunner

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.PROBING, PipelineState.FAILED}),
    PipelineState.PROBING: frozenset(
        {PipelineState.PALETTE_GEN, PipelineState.ENCODING_1, PipelineState.FAILED}
    ),
    PipelineState.PALETTE_GEN: frozenset(
        {PipelineState.ENCODING_1, PipelineState.FAILED}
    ),
    PipelineState.ENCODING_1: frozenset(
        {PipelineState.ENCODING_2, PipelineState.FINALIZING, PipelineState.FAILED}
    ),
    PipelineState.ENCODING_2: frozenset(
        {PipelineState.FINALIZING, PipelineState.FAILED}
    ),
    PipelineState.FINALIZING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}

_STATE_LABELS = {
    PipelineState.PROBING: "Analyzing file...",
    PipelineState.PALETTE_GEN: "Generating Palette...",
    PipelineState.FINALIZING: "Finalizing...",
    PipelineState.DONE: "Done",
    PipelineState.FAILED: "Failed",
}


class PipelineListener(Protocol):
    """Receiver of pipeline progress.

    Implementations provide context-specific display:
    - CLI: stderr progress line
    - Tests: recording listener
    """

    def on_stage(self, event: StageEvent) -> None:
        """Called on every state transition, before any subprocess launch."""
        ...

    def on_progress(self, sample: ProgressSample) -> None:
        """Called for every fine-grained progress sample of a stage."""
        ...

    def on_command(self, command: str) -> None:
        """Called with each rendered command line in verbose mode."""
        ...


class NullListener:
    """Listener that discards everything."""

    def on_stage(self, event: StageEvent) -> None:
        pass

    def on_progress(self, sample: ProgressSample) -> None:
        pass

    def on_command(self, command: str) -> None:
        pass


class Pipeline:
    """Runs one encode job.

    Example:
        pipeline = Pipeline(job, ffmpeg_path, prober)
        outcome = await pipeline.run()
    """

    def __init__(
        self,
        job: JobConfig,
        ffmpeg_path: Path,
        prober: MediaProber,
        listener: PipelineListener | None = None,
        runner: StageRunner | None = None,
        temp_directory: Path | None = None,
    ) -> None:
        self.job = job
        self._ffmpeg_path = ffmpeg_path
        self._prober = prober
        self._listener = listener or NullListener()
        self._runner = runner or StageRunner()
        self._temp_directory = temp_directory
        self._state = PipelineState.IDLE
        self._completed = 0
        self._total = 1
        self._task: asyncio.Task | None = None
        self._cancel_requested = False
        self.job_id = uuid.uuid4().hex[:8]

    @property
    def state(self) -> PipelineState:
        return self._state

    def cancel(self) -> None:
        """Request cancellation.

        Kills the active subprocess; run() then returns a FAILED outcome
        carrying JobCancelledError.
        """
        if self._state.is_terminal or self._cancel_requested:
            return
        self._cancel_requested = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _transition(self, new_state: PipelineState, label: str | None = None) -> None:
        if new_state not in _ALLOWED_TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Illegal pipeline transition {self._state.value} -> {new_state.value}"
            )
        logger.debug(
            "Pipeline %s -> %s",
            self._state.value,
            new_state.value,
            extra={"from_state": self._state.value, "to_state": new_state.value},
        )
        self._state = new_state
        if new_state is PipelineState.DONE:
            fraction = 1.0
        else:
            fraction = min(self._completed / self._total, 1.0)
        event = StageEvent(
            state=new_state,
            label=label or _STATE_LABELS.get(new_state, new_state.value),
            fraction=fraction,
        )
        self._listener.on_stage(event)

    async def run(self) -> JobOutcome:
        """Run the job to a terminal state."""
        if self._state is not PipelineState.IDLE:
            raise RuntimeError("Pipeline.run() can only be called once")
        self._task = asyncio.current_task()

        with job_context(self.job_id, self.job.input_path):
            start = time.monotonic()
            with ScratchArtifacts(self._temp_directory) as scratch:
                outcome = await self._run_guarded(scratch)
            elapsed = time.monotonic() - start

            if outcome.succeeded:
                logger.info(
                    "Encode complete: %s",
                    outcome.output_path,
                    extra={
                        "elapsed_seconds": round(elapsed, 2),
                        "size_bytes": outcome.size_bytes,
                    },
                )
            else:
                logger.error(
                    "Encode failed in %s: %s",
                    outcome.failed_stage,
                    outcome.error,
                    extra={"elapsed_seconds": round(elapsed, 2)},
                )
            return outcome

    async def _run_guarded(self, scratch: ScratchArtifacts) -> JobOutcome:
        stage_name: str | None = None
        try:
            self._check_cancelled()
            stage_name = "Probe"
            self._transition(PipelineState.PROBING)
            media = await self._prober.probe(self.job.input_path)

            plan = self._plan(media, scratch)
            stages = render_stages(plan)
            self._total = len(stages) + 2

            self._completed = 1
            for stage in stages:
                self._check_cancelled()
                stage_name = stage.name
                await self._run_stage(plan, stage)
                self._completed += 1

            stage_name = "Finalize"
            self._transition(PipelineState.FINALIZING)
            size = await self._stat_output(plan.output_path)
            self._transition(PipelineState.DONE)
            return JobOutcome(
                state=PipelineState.DONE,
                output_path=plan.output_path,
                size_bytes=size,
            )
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            return self._fail(JobCancelledError("Job cancelled"), stage_name)
        except TeacrushError as e:
            return self._fail(e, stage_name)

    def _check_cancelled(self) -> None:
        if self._cancel_requested:
            raise JobCancelledError("Job cancelled")

    def _plan(self, media: MediaInfo, scratch: ScratchArtifacts) -> EncodePlan:
        return build_plan(
            self.job,
            media,
            passlog_path=scratch.passlog_path,
            palette_path=scratch.palette_path,
        )

    async def _run_stage(self, plan: EncodePlan, stage: StageSpec) -> None:
        label = stage.name
        if stage.state is PipelineState.PALETTE_GEN:
            label = _STATE_LABELS[PipelineState.PALETTE_GEN]
        self._transition(stage.state, label)

        argv = build_engine_argv(self._ffmpeg_path, stage)
        if self.job.verbose:
            self._listener.on_command(format_command(argv))

        channel: ProgressChannel[ProgressSample] = ProgressChannel()
        monitor = ProgressMonitor(plan.duration, stage.name)
        forwarder = asyncio.create_task(self._forward_progress(channel))
        try:
            await self._runner.run(argv, stage.name, monitor, channel)
        finally:
            await channel.close()
            await forwarder

    async def _forward_progress(
        self, channel: ProgressChannel[ProgressSample]
    ) -> None:
        async for sample in channel:
            try:
                self._listener.on_progress(sample)
            except Exception:
                logger.exception("Progress listener failed")

    async def _stat_output(self, path: Path) -> int:
        try:
            stat = await asyncio.to_thread(path.stat)
        except OSError as e:
            raise ResourceError(f"Cannot read output file {path}: {e}") from e
        return stat.st_size

    def _fail(self, error: TeacrushError, stage_name: str | None) -> JobOutcome:
        if isinstance(error, StageError):
            stage_name = error.stage
        if not self._state.is_terminal:
            label = f"Failed: {stage_name}" if stage_name else None
            self._transition(PipelineState.FAILED, label)
        return JobOutcome(
            state=PipelineState.FAILED,
            error=error,
            failed_stage=stage_name,
        )
