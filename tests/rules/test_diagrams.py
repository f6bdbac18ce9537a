"""Tests for the mermaid fence rule and the diagram renderers."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from notemark.config import DiagramConfig
from notemark.diagrams import (
    MermaidCliRenderer,
    MermaidSourceRenderer,
    build_diagram_renderer,
)
from notemark.exceptions import DiagramRenderError
from notemark.rules.diagrams import diagram_id, diagram_rule
from notemark.rules.wikilinks import PlaceholderVault

SOURCE = "```mermaid\ngraph TD\n  A-->B\n```"


class TestDiagramId:
    def test_same_source_same_id(self):
        assert diagram_id("graph TD") == diagram_id("graph TD")

    def test_different_source_different_id(self):
        assert diagram_id("graph TD\nA-->B") != diagram_id("graph TD\nA-->C")

    def test_format(self):
        assert diagram_id("graph TD").startswith("mermaid-")
        assert diagram_id("graph TD")[len("mermaid-") :].isdigit()


class TestDiagramRule:
    def test_renders_fenced_block(self, diagram_renderer):
        rule = diagram_rule(diagram_renderer)

        text = rule.apply(f"Before\n\n{SOURCE}\n\nAfter", PlaceholderVault())

        body = "\ngraph TD\n  A-->B\n"
        assert diagram_renderer.calls == [(diagram_id(body), body)]
        assert (
            f'<div class="mermaid"><svg id="{diagram_id(body)}"></svg></div>' in text
        )
        assert text.startswith("Before")
        assert text.endswith("After")

    def test_stashed_output_is_its_own_block(self, diagram_renderer):
        rule = diagram_rule(diagram_renderer)
        stashed = []

        def stash(html: str) -> str:
            stashed.append(html)
            return "STASHED"

        text = rule.apply(f"Intro {SOURCE}", PlaceholderVault(), stash=stash)

        assert text == "Intro \n\nSTASHED\n\n"
        assert stashed[0].startswith('<div class="mermaid">')

    def test_other_fences_untouched(self, diagram_renderer):
        rule = diagram_rule(diagram_renderer)
        text = "```python\nprint('hi')\n```"

        assert rule.apply(text, PlaceholderVault()) == text
        assert diagram_renderer.calls == []


class TestMermaidSourceRenderer:
    def test_escapes_source(self):
        markup = MermaidSourceRenderer().render("mermaid-1", "\nA-->B & C<D\n")

        assert markup == (
            '<pre id="mermaid-1" class="mermaid-source">A--&gt;B &amp; C&lt;D</pre>'
        )


class TestMermaidCliRenderer:
    @pytest.fixture
    def renderer(self):
        return MermaidCliRenderer(DiagramConfig(renderer="cli", executable="mmdc"))

    def test_missing_executable(self, renderer):
        with patch("notemark.diagrams.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(DiagramRenderError) as exc_info:
                renderer.render("mermaid-1", "graph TD")

        assert exc_info.value.diagram_id == "mermaid-1"
        assert "not found" in str(exc_info.value)

    def test_failed_render(self, renderer):
        failed = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="Parse error on line 1"
        )
        with patch("notemark.diagrams.subprocess.run", return_value=failed):
            with pytest.raises(DiagramRenderError, match="Parse error on line 1"):
                renderer.render("mermaid-1", "graph ???")

    def test_successful_render(self, renderer):
        def fake_run(cmd, **kwargs):
            assert Path(cmd[cmd.index("--input") + 1]).read_text() == "graph TD"
            assert cmd[cmd.index("--svgId") + 1] == "mermaid-1"
            output = Path(cmd[cmd.index("--output") + 1])
            output.write_text('<svg id="mermaid-1"></svg>')
            return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

        with patch("notemark.diagrams.subprocess.run", side_effect=fake_run) as run:
            markup = renderer.render("mermaid-1", "graph TD")

        assert markup == '<svg id="mermaid-1"></svg>'
        assert run.call_args.args[0][0] == "mmdc"


def test_build_diagram_renderer():
    assert isinstance(build_diagram_renderer(DiagramConfig()), MermaidSourceRenderer)
    assert isinstance(
        build_diagram_renderer(DiagramConfig(renderer="cli")), MermaidCliRenderer
    )
