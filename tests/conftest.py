"""Shared test fixtures for teacrush."""

import json
import logging
import shutil
import stat
import sys
import tempfile
from pathlib import Path

import pytest

from teacrush.domain.models import ProgressSample, StageEvent

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Fake ffmpeg: records its argv, streams progress, writes its outputs.
# Behavior is selected through FAKE_FFMPEG_* environment variables.
_FAKE_FFMPEG = """
import json
import os
import sys
import time
from pathlib import Path

args = sys.argv[1:]
log = os.environ.get("FAKE_FFMPEG_LOG")
if log:
    with open(log, "a") as f:
        f.write(json.dumps(args) + "\\n")

mode = os.environ.get("FAKE_FFMPEG_MODE", "ok")
is_pass2 = "-pass" in args and args[args.index("-pass") + 1] == "2"
if mode == "fail" or (mode == "fail_pass2" and is_pass2):
    sys.stderr.write("Error while encoding: simulated failure\\n")
    sys.exit(1)

total_us = int(os.environ.get("FAKE_FFMPEG_DURATION_US", "2000000"))

if mode == "hang":
    if "-passlogfile" in args:
        prefix = args[args.index("-passlogfile") + 1]
        Path(prefix + "-0.log.temp").write_text("partial")
        Path(prefix + "-0.log.mbtree.temp").write_text("partial")
    pidfile = os.environ.get("FAKE_FFMPEG_PIDFILE")
    if pidfile:
        Path(pidfile).write_text(str(os.getpid()))
    print("out_time_us=%d" % (total_us // 4), flush=True)
    time.sleep(60)
    sys.exit(0)

if "-passlogfile" in args:
    prefix = args[args.index("-passlogfile") + 1]
    Path(prefix + "-0.log").write_text("stats")
    Path(prefix + "-0.log.mbtree").write_text("tree")

for step in range(5):
    print("frame=%d" % (step * 10))
    print("out_time_us=%d" % (total_us * step // 4))
    print("progress=continue", flush=True)
print("progress=end", flush=True)
sys.stderr.write("fake ffmpeg finished\\n")

out = args[-1]
if out not in ("/dev/null", "NUL"):
    size = int(os.environ.get("FAKE_FFMPEG_OUTPUT_BYTES", "2097152"))
    Path(out).write_bytes(b"\\0" * size)
"""

# Fake ffprobe: prints a fixture document or misbehaves on request.
_FAKE_FFPROBE = """
import os
import sys
import time

mode = os.environ.get("FAKE_FFPROBE_MODE", "ok")
if mode == "fail":
    sys.stderr.write("Invalid data found when processing input\\n")
    sys.exit(1)
if mode == "garbage":
    print("this is not json")
    sys.exit(0)
if mode == "hang":
    time.sleep(60)

with open(os.environ["FAKE_FFPROBE_JSON"]) as f:
    sys.stdout.write(f.read())
"""


def _write_script(path: Path, body: str) -> Path:
    path.write_text(f"#!{sys.executable}\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def sample_input(temp_dir: Path) -> Path:
    """A placeholder input file (content is never decoded)."""
    path = temp_dir / "clip.mp4"
    path.write_bytes(b"\0" * 4096)
    return path


@pytest.fixture
def scratch_dir(temp_dir: Path) -> Path:
    """Directory for pass logs and palettes."""
    path = temp_dir / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def ffmpeg_log(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File where the fake ffmpeg records each invocation's argv."""
    path = temp_dir / "ffmpeg_calls.jsonl"
    monkeypatch.setenv("FAKE_FFMPEG_LOG", str(path))
    return path


@pytest.fixture
def fake_ffmpeg(temp_dir: Path, ffmpeg_log: Path) -> Path:
    """Executable standing in for ffmpeg."""
    return _write_script(temp_dir / "ffmpeg", _FAKE_FFMPEG)


@pytest.fixture
def fake_ffprobe(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Executable standing in for ffprobe, serving the video_with_audio fixture."""
    monkeypatch.setenv(
        "FAKE_FFPROBE_JSON", str(FIXTURES_DIR / "ffprobe" / "video_with_audio.json")
    )
    return _write_script(temp_dir / "ffprobe", _FAKE_FFPROBE)


def read_ffmpeg_calls(log: Path) -> list[list[str]]:
    """Argv of every fake ffmpeg invocation, in order."""
    if not log.exists():
        return []
    return [json.loads(line) for line in log.read_text().splitlines() if line]


@pytest.fixture
def ffmpeg_calls(ffmpeg_log: Path):
    """Callable returning the recorded fake ffmpeg invocations."""
    return lambda: read_ffmpeg_calls(ffmpeg_log)


class RecordingListener:
    """Pipeline listener that keeps everything it receives."""

    def __init__(self) -> None:
        self.events: list[StageEvent] = []
        self.samples: list[ProgressSample] = []
        self.commands: list[str] = []

    def on_stage(self, event: StageEvent) -> None:
        self.events.append(event)

    def on_progress(self, sample: ProgressSample) -> None:
        self.samples.append(sample)

    def on_command(self, command: str) -> None:
        self.commands.append(command)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def reset_root_logger():
    """Save and restore root logger state around a test."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
