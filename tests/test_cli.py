"""Tests for the notemark command line."""

import logging
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from notemark.cli import main
from notemark.exceptions import DiagramRenderError, HandledRenderError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "notemark.yml"
    path.write_text("notes:\n  path: notes\nattachments:\n  path: files\n")
    return path


@pytest.fixture
def note(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("# Title\n\nSee [[Plan]] and **this**.\n")
    return path


class TestRender:
    def test_render_html(self, runner, config_file, note):
        result = runner.invoke(main, ["--config", str(config_file), "render", str(note)])

        assert result.exit_code == 0
        assert "<h1>Title</h1>" in result.output
        assert '<a href="@note/Plan.md">Plan</a>' in result.output

    def test_render_plain(self, runner, note):
        result = runner.invoke(main, ["render", "--plain", str(note)])

        assert result.exit_code == 0
        assert "Title\n\nSee [[Plan]] and this." in result.output

    def test_render_to_file(self, runner, config_file, note, tmp_path):
        output = tmp_path / "note.html"

        result = runner.invoke(
            main,
            ["--config", str(config_file), "render", str(note), "--output", str(output)],
        )

        assert result.exit_code == 0
        assert "<h1>Title</h1>" in output.read_text()

    def test_invalid_front_matter(self, runner, tmp_path):
        note = tmp_path / "bad.md"
        note.write_text("---\ntitle: [unclosed\n---\nBody\n")

        result = runner.invoke(main, ["render", str(note)])

        assert result.exit_code == 1
        assert "Invalid front matter" in result.output

    def test_diagram_failure(self, runner, note):
        error = DiagramRenderError("mermaid-1", "mmdc exploded")

        with patch("notemark.cli.NoteRenderer.render", side_effect=error):
            result = runner.invoke(main, ["render", str(note)])

        assert result.exit_code == 1
        assert "mmdc exploded" in result.output

    def test_missing_note(self, runner, tmp_path):
        result = runner.invoke(main, ["render", str(tmp_path / "missing.md")])

        assert result.exit_code != 0


class TestConfig:
    def test_show_config(self, runner, config_file, tmp_path):
        result = runner.invoke(main, ["--config", str(config_file), "config"])

        assert result.exit_code == 0
        assert "Notes path:" in result.output
        assert "@attachment" in result.output

    def test_show_config_yaml(self, runner, config_file, tmp_path):
        result = runner.invoke(main, ["--config", str(config_file), "config", "--yaml"])

        assert result.exit_code == 0
        dumped = yaml.safe_load(result.output)
        assert dumped["notes"]["path"] == str(tmp_path / "notes")

    def test_invalid_config(self, runner, tmp_path):
        config_file = tmp_path / "bad.yml"
        config_file.write_text("diagrams:\n  renderer: graphviz\n")

        result = runner.invoke(main, ["--config", str(config_file), "config"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "Traceback" not in result.output
        assert not isinstance(result.exception, HandledRenderError)


def test_log_level_option(runner, note):
    result = runner.invoke(main, ["--log-level", "DEBUG", "render", "--plain", str(note)])

    assert result.exit_code == 0
    assert logging.getLogger("notemark").level == logging.DEBUG

    runner.invoke(main, ["--log-level", "WARNING", "render", "--plain", str(note)])
    assert logging.getLogger("notemark").level == logging.WARNING
