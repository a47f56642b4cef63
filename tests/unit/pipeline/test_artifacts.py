"""Tests for pipeline/artifacts.py module."""

from pathlib import Path

import pytest

from teacrush.pipeline.artifacts import ScratchArtifacts

# Completed passes and passes interrupted mid-write (x264, x265).
PASSLOG_FILES = (
    "-0.log",
    "-0.log.mbtree",
    "-0.log.temp",
    "-0.log.mbtree.temp",
    ".log",
    ".log.cutree",
    ".log.temp",
    ".log.cutree.temp",
)


class TestScratchArtifacts:
    """Tests for ScratchArtifacts."""

    def test_paths_live_in_directory(self, scratch_dir: Path) -> None:
        artifacts = ScratchArtifacts(scratch_dir)
        assert artifacts.passlog_path.parent == scratch_dir
        assert artifacts.palette_path.parent == scratch_dir
        assert artifacts.palette_path.suffix == ".png"

    def test_names_are_unique(self, scratch_dir: Path) -> None:
        first = ScratchArtifacts(scratch_dir)
        second = ScratchArtifacts(scratch_dir)
        assert first.passlog_path != second.passlog_path
        assert first.palette_path != second.palette_path

    def test_cleanup_removes_every_scratch_file(self, scratch_dir: Path) -> None:
        artifacts = ScratchArtifacts(scratch_dir)
        for suffix in PASSLOG_FILES:
            Path(f"{artifacts.passlog_path}{suffix}").write_text("stats")
        artifacts.palette_path.write_bytes(b"png")
        assert len(artifacts.existing_files()) == len(PASSLOG_FILES) + 1

        artifacts.cleanup()

        assert artifacts.existing_files() == []
        assert list(scratch_dir.iterdir()) == []

    @pytest.mark.parametrize("suffix", [".log.temp", "-0.log.mbtree.temp"])
    def test_cleanup_removes_in_progress_logs(
        self, scratch_dir: Path, suffix: str
    ) -> None:
        with ScratchArtifacts(scratch_dir) as artifacts:
            Path(f"{artifacts.passlog_path}{suffix}").write_text("partial")
        assert list(scratch_dir.iterdir()) == []

    def test_cleanup_leaves_other_files(self, scratch_dir: Path) -> None:
        keep = scratch_dir / "unrelated.log"
        keep.write_text("keep me")
        artifacts = ScratchArtifacts(scratch_dir)
        other = Path(f"{ScratchArtifacts(scratch_dir).passlog_path}-0.log")
        other.write_text("another job")
        artifacts.palette_path.write_bytes(b"png")

        artifacts.cleanup()

        assert keep.exists()
        assert other.exists()

    def test_context_manager_cleans_up_on_error(self, scratch_dir: Path) -> None:
        try:
            with ScratchArtifacts(scratch_dir) as artifacts:
                Path(f"{artifacts.passlog_path}-0.log").write_text("stats")
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert list(scratch_dir.iterdir()) == []

    def test_cleanup_without_files(self, scratch_dir: Path) -> None:
        ScratchArtifacts(scratch_dir).cleanup()
