"""Integration tests for the CLI."""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import Mock, patch

from typer.testing import CliRunner

from video_link_preview.cli import app

runner = CliRunner()

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _write_settings(path: Path, **values: object) -> Path:
    path.write_text(json.dumps(values), encoding="utf-8")
    return path


def test_version_command() -> None:
    """Test the version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "video-link-preview" in result.stdout


def test_help_command() -> None:
    """Test the help command."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Video Link Preview" in result.stdout


class TestEnrichCommand:
    """Tests for `vlp enrich`."""

    def test_enrich_file_to_output(
        self, tmp_path: Path, routed_get: Callable[..., Mock]
    ) -> None:
        """Test enriching a file and writing the result."""
        settings_file = _write_settings(
            tmp_path / "settings.json", show_channel_icon=True, youtube_api_key="test-yt-key"
        )
        source = tmp_path / "note.html"
        source.write_text(f'<p><a href="{VIDEO_URL}">video</a></p>', encoding="utf-8")
        output = tmp_path / "note.enriched.html"

        with patch("video_link_preview.metadata.httpx.get", side_effect=routed_get):
            result = runner.invoke(
                app,
                ["enrich", str(source), "-o", str(output), "--settings", str(settings_file)],
            )

        assert result.exit_code == 0
        assert "Replaced 1/1" in result.output
        enriched = output.read_text(encoding="utf-8")
        assert "video-metadata-container" in enriched
        assert "Never Gonna Give You Up" in enriched
        assert "https://yt3.ggpht.com/rick=s88" in enriched

    def test_enrich_stdin_text_mode(
        self, tmp_path: Path, routed_get: Callable[..., Mock]
    ) -> None:
        """Test reading from stdin with bare URL scanning."""
        settings_file = _write_settings(
            tmp_path / "settings.json", show_channel_icon=False, show_thumbnail=False
        )

        with patch("video_link_preview.metadata.httpx.get", side_effect=routed_get):
            result = runner.invoke(
                app,
                ["enrich", "-", "--mode", "text", "--settings", str(settings_file)],
                input=f"<p>{VIDEO_URL}</p>",
            )

        assert result.exit_code == 0
        assert result.stdout.startswith("<p><a ")
        assert "video-thumbnail" not in result.stdout
        assert "video-channel-icon" not in result.stdout

    def test_enrich_overrides_are_not_saved(
        self, tmp_path: Path, routed_get: Callable[..., Mock]
    ) -> None:
        """Test that --no-thumbnail only affects the current run."""
        settings_file = _write_settings(
            tmp_path / "settings.json", show_thumbnail=True, show_channel_icon=False
        )
        source = tmp_path / "note.html"
        source.write_text(f'<p><a href="{VIDEO_URL}">video</a></p>', encoding="utf-8")

        with patch("video_link_preview.metadata.httpx.get", side_effect=routed_get):
            result = runner.invoke(
                app, ["enrich", str(source), "--no-thumbnail", "--settings", str(settings_file)]
            )

        assert result.exit_code == 0
        assert "video-thumbnail" not in result.stdout
        assert json.loads(settings_file.read_text())["show_thumbnail"] is True

    def test_enrich_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing input file fails cleanly."""
        result = runner.invoke(app, ["enrich", str(tmp_path / "missing.html")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_enrich_invalid_mode(self, tmp_path: Path) -> None:
        """Test that an unknown mode is rejected."""
        source = tmp_path / "note.html"
        source.write_text("<p></p>", encoding="utf-8")

        result = runner.invoke(app, ["enrich", str(source), "--mode", "dom"])

        assert result.exit_code == 1
        assert "Unknown mode" in result.output

    def test_enrich_warns_about_missing_key(self, tmp_path: Path) -> None:
        """Test the notice when channel icons are on without a key."""
        settings_file = tmp_path / "settings.json"
        source = tmp_path / "note.html"
        source.write_text("<p>no links here</p>", encoding="utf-8")

        result = runner.invoke(app, ["enrich", str(source), "--settings", str(settings_file)])

        assert result.exit_code == 0
        assert "no API key is set" in result.output


class TestConfigCommands:
    """Tests for `vlp config`."""

    def test_show_defaults(self, tmp_path: Path) -> None:
        """Test showing settings before anything was saved."""
        result = runner.invoke(
            app, ["config", "show", "--settings", str(tmp_path / "settings.json")]
        )

        assert result.exit_code == 0
        assert "Show thumbnail:    on" in result.stdout
        assert "Show channel icon: on" in result.stdout
        assert "(not set)" in result.stdout

    def test_show_masks_key(self, tmp_path: Path) -> None:
        """Test that the stored key is masked."""
        settings_file = _write_settings(
            tmp_path / "settings.json", youtube_api_key="AIzaSyTESTKEY1234"
        )

        result = runner.invoke(app, ["config", "show", "--settings", str(settings_file)])

        assert "AIzaSyTESTKEY1234" not in result.stdout
        assert "AIza" in result.stdout and "1234" in result.stdout

    def test_show_key_unused_when_icons_off(self, tmp_path: Path) -> None:
        """Test that the key is reported unused while channel icons are off."""
        settings_file = _write_settings(tmp_path / "settings.json", show_channel_icon=False)

        result = runner.invoke(app, ["config", "show", "--settings", str(settings_file)])

        assert "unused while channel icons are off" in result.stdout

    def test_set_and_save(self, tmp_path: Path) -> None:
        """Test saving valid settings."""
        settings_file = tmp_path / "settings.json"

        result = runner.invoke(
            app,
            [
                "config",
                "set",
                "--no-thumbnail",
                "--channel-icon",
                "--api-key",
                " key-123 ",
                "--settings",
                str(settings_file),
            ],
        )

        assert result.exit_code == 0
        assert "Settings saved" in result.stdout
        data = json.loads(settings_file.read_text())
        assert data == {
            "show_thumbnail": False,
            "show_channel_icon": True,
            "youtube_api_key": "key-123",
        }

    def test_set_rejected_without_key(self, tmp_path: Path) -> None:
        """Test that enabling channel icons without a key is refused."""
        settings_file = _write_settings(
            tmp_path / "settings.json",
            show_thumbnail=True,
            show_channel_icon=False,
            youtube_api_key="",
        )
        before = settings_file.read_text()

        result = runner.invoke(
            app,
            ["config", "set", "--no-thumbnail", "--channel-icon", "--settings", str(settings_file)],
        )

        assert result.exit_code == 1
        assert "Settings not saved" in result.output
        assert settings_file.read_text() == before

    def test_clearing_key_with_icons_on_rejected(self, tmp_path: Path) -> None:
        """Test that removing the key while icons stay on is refused."""
        settings_file = _write_settings(
            tmp_path / "settings.json", show_channel_icon=True, youtube_api_key="key-123"
        )

        result = runner.invoke(
            app, ["config", "set", "--api-key", "", "--settings", str(settings_file)]
        )

        assert result.exit_code == 1
        assert json.loads(settings_file.read_text())["youtube_api_key"] == "key-123"
