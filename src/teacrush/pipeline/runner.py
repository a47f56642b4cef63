"""Stage subprocess runner.

Spawns one ffmpeg process per stage, streams its progress and captures its
stderr. At most one process is active, and it is killed and reaped on
every exit path, including cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from contextlib import suppress

from teacrush.domain.models import ProgressSample
from teacrush.exceptions import StageError
from teacrush.pipeline.channel import ProgressChannel
from teacrush.pipeline.progress import ProgressMonitor, pump_progress

logger = logging.getLogger(__name__)


async def _drain(stream: asyncio.StreamReader) -> str:
    data = await stream.read()
    return data.decode("utf-8", errors="replace")


class StageRunner:
    """Runs stage subprocesses one at a time."""

    def __init__(self) -> None:
        self._active: asyncio.subprocess.Process | None = None

    @property
    def active(self) -> asyncio.subprocess.Process | None:
        """The running process, or None between stages."""
        return self._active

    async def run(
        self,
        argv: Sequence[str],
        stage: str,
        monitor: ProgressMonitor,
        channel: ProgressChannel[ProgressSample],
    ) -> None:
        """Run one stage to completion.

        Args:
            argv: Full command line, executable first.
            stage: Stage name for errors and logs.
            monitor: Parser for this stage's progress stream.
            channel: Where progress samples are delivered.

        Raises:
            StageError: If the process cannot start or exits nonzero.
        """
        if self._active is not None:
            raise RuntimeError("A stage subprocess is already running")

        logger.debug("Starting stage %s", stage, extra={"argv": list(argv)})
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise StageError(stage, str(e), -1) from e

        self._active = process
        assert process.stdout is not None
        assert process.stderr is not None
        stderr_task = asyncio.create_task(_drain(process.stderr))
        try:
            await pump_progress(process.stdout, monitor, channel)
            returncode = await process.wait()
            diagnostics = await stderr_task
            if returncode != 0:
                logger.warning(
                    "Stage %s exited with code %d",
                    stage,
                    returncode,
                    extra={"stage": stage, "returncode": returncode},
                )
                raise StageError(stage, diagnostics, returncode)
            await channel.send(monitor.final_sample())
        finally:
            await self._reap(process)
            if not stderr_task.done():
                stderr_task.cancel()
                with suppress(asyncio.CancelledError):
                    await stderr_task
            self._active = None

    async def _reap(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        logger.info("Killing ffmpeg process %d", process.pid)
        with suppress(ProcessLookupError):
            process.kill()
        await process.wait()
