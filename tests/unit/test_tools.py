"""Tests for tools.py module."""

from pathlib import Path

import pytest

from teacrush.config.models import ToolPathsConfig
from teacrush.exceptions import ConfigurationError, ToolNotFoundError
from teacrush.tools import find_tool, require_tool


class TestFindTool:
    """Tests for find_tool function."""

    def test_configured_path_wins(self, fake_ffmpeg: Path, monkeypatch) -> None:
        monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/ffmpeg")
        assert find_tool("ffmpeg", fake_ffmpeg) == fake_ffmpeg

    def test_falls_back_to_path(self, temp_dir: Path, monkeypatch, caplog) -> None:
        monkeypatch.setattr("shutil.which", lambda name: f"/opt/bin/{name}")
        assert find_tool("ffmpeg", temp_dir / "missing") == Path("/opt/bin/ffmpeg")
        assert "not a file" in caplog.text

    def test_not_found(self, monkeypatch) -> None:
        monkeypatch.setattr("shutil.which", lambda name: None)
        assert find_tool("ffprobe") is None


class TestRequireTool:
    """Tests for require_tool function."""

    def test_uses_configured_paths(self, fake_ffprobe: Path) -> None:
        tools = ToolPathsConfig(ffprobe=fake_ffprobe)
        assert require_tool("ffprobe", tools) == fake_ffprobe

    def test_missing_tool(self, monkeypatch) -> None:
        monkeypatch.setattr("shutil.which", lambda name: None)
        with pytest.raises(ToolNotFoundError) as exc_info:
            require_tool("ffmpeg", ToolPathsConfig())
        assert exc_info.value.tool == "ffmpeg"
        assert "TEACRUSH_FFMPEG_PATH" in str(exc_info.value)
        assert isinstance(exc_info.value, ConfigurationError)

    def test_unknown_tool(self) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            require_tool("mkvmerge")
