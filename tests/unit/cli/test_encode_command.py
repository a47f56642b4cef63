"""Tests for the encode CLI command."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from teacrush.cli import main
from teacrush.cli.exit_codes import ExitCode


@pytest.fixture
def cli_env(monkeypatch, temp_dir: Path, scratch_dir: Path, reset_root_logger):
    """Isolate the CLI from the user's config file and logging state."""
    monkeypatch.setenv("TEACRUSH_CONFIG_PATH", str(temp_dir / "absent.toml"))
    monkeypatch.setenv("TEACRUSH_TEMP_DIR", str(scratch_dir))
    for var in ("TEACRUSH_FFMPEG_PATH", "TEACRUSH_FFPROBE_PATH", "TEACRUSH_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("teacrush.cli._logging_configured", False)


@pytest.fixture
def invoke(cli_env, fake_ffmpeg: Path, fake_ffprobe: Path):
    """Run the CLI with the fake tools configured."""

    def run(*args: str):
        runner = CliRunner()
        return runner.invoke(
            main,
            ["--ffmpeg", str(fake_ffmpeg), "--ffprobe", str(fake_ffprobe), *args],
        )

    return run


class TestEncodeCommand:
    """Tests for teacrush encode."""

    def test_quality_mode(self, invoke, sample_input: Path, scratch_dir: Path) -> None:
        result = invoke("encode", str(sample_input))

        assert result.exit_code == ExitCode.SUCCESS, result.output
        output = sample_input.with_name("clip_compressed.webm")
        assert f"Saved: {output}" in result.output
        assert "Size: 2.00 MB" in result.output
        assert "Estimated size: ~" in result.output
        assert output.exists()
        assert list(scratch_dir.iterdir()) == []

    def test_size_target_two_pass(
        self, invoke, sample_input: Path, ffmpeg_calls
    ) -> None:
        result = invoke("encode", str(sample_input), "--size", "8", "--codec", "libx264")

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Estimated size" not in result.output
        assert len(ffmpeg_calls()) == 2

    def test_gif(self, invoke, sample_input: Path, ffmpeg_calls) -> None:
        result = invoke("encode", str(sample_input), "--gif", "--fps", "10")

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert sample_input.with_name("clip_compressed.gif").exists()
        assert len(ffmpeg_calls()) == 2

    def test_custom_output_and_trim(
        self, invoke, sample_input: Path, temp_dir: Path, ffmpeg_calls
    ) -> None:
        out = temp_dir / "short.mp4"
        result = invoke(
            "encode",
            str(sample_input),
            "--codec",
            "libx264",
            "--trim",
            "0",
            "1.5",
            "-o",
            str(out),
        )

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert out.exists()
        (call,) = ffmpeg_calls()
        assert call[call.index("-ss") + 1] == "0"
        assert call[call.index("-to") + 1] == "1.5"
        assert call[call.index("-f") + 1] == "mp4"

    def test_verbose_prints_commands(self, invoke, sample_input: Path) -> None:
        result = invoke("encode", str(sample_input), "-v")

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "$ " in result.output
        assert "-progress pipe:1" in result.output

    def test_exclusive_modes(self, invoke, sample_input: Path) -> None:
        result = invoke("encode", str(sample_input), "--gif", "--apng")
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_invalid_job(self, invoke, temp_dir: Path, ffmpeg_calls) -> None:
        result = invoke("encode", str(temp_dir / "missing.mp4"))

        assert result.exit_code == ExitCode.INVALID_JOB
        assert "Invalid job" in result.output
        assert ffmpeg_calls() == []

    def test_avif_rejects_non_av1(self, invoke, sample_input: Path) -> None:
        result = invoke("encode", str(sample_input), "--avif", "--codec", "libx264")
        assert result.exit_code == ExitCode.INVALID_JOB
        assert "AV1" in result.output

    def test_encoder_failure(self, invoke, sample_input: Path, monkeypatch) -> None:
        monkeypatch.setenv("FAKE_FFMPEG_MODE", "fail")
        result = invoke("encode", str(sample_input))

        assert result.exit_code == ExitCode.OPERATION_FAILED
        assert "Error: Encoding (CRF) failed (exit code 1)" in result.output
        assert "simulated failure" in result.output

    def test_probe_failure(self, invoke, sample_input: Path, monkeypatch) -> None:
        monkeypatch.setenv("FAKE_FFPROBE_MODE", "garbage")
        result = invoke("encode", str(sample_input))
        assert result.exit_code == ExitCode.ANALYSIS_ERROR


class TestEncodeCommandSetup:
    """Tests for configuration and tool resolution failures."""

    def test_missing_tool(
        self, cli_env, sample_input: Path, temp_dir: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr("shutil.which", lambda name: None)
        result = CliRunner().invoke(
            main, ["--ffmpeg", str(temp_dir / "nope"), "encode", str(sample_input)]
        )

        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE
        assert "ffmpeg is not installed" in result.output

    def test_unparseable_config(self, cli_env, temp_dir: Path) -> None:
        bad = temp_dir / "bad.toml"
        bad.write_text("[tools\n")
        result = CliRunner().invoke(main, ["--config", str(bad), "codecs"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Could not parse config file" in result.output
