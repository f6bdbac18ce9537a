"""Diagram renderers used by the mermaid fence rule."""

import json
import subprocess
from html import escape
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Protocol

from notemark.config import DiagramConfig
from notemark.exceptions import DiagramRenderError
from notemark.logger import get_logger

logger = get_logger(__name__)


class DiagramRenderer(Protocol):
    def render(self, diagram_id: str, source: str) -> str:
        """Return markup for one diagram. `diagram_id` is stable per source."""
        ...


class MermaidSourceRenderer:
    """Emit the diagram source for mermaid.js to render in the browser."""

    def render(self, diagram_id: str, source: str) -> str:
        return f'<pre id="{diagram_id}" class="mermaid-source">{escape(source.strip())}</pre>'


class MermaidCliRenderer:
    """Render diagrams to inline SVG with the Mermaid CLI (`mmdc`)."""

    def __init__(self, config: DiagramConfig) -> None:
        self.config = config

    def render(self, diagram_id: str, source: str) -> str:
        with TemporaryDirectory() as directory:
            input_path = Path(directory) / f"{diagram_id}.mmd"
            output_path = Path(directory) / f"{diagram_id}.svg"
            config_path = Path(directory) / "mermaid.json"

            input_path.write_text(source, encoding="utf-8")
            config_path.write_text(json.dumps(self.config.settings), encoding="utf-8")

            cmd = [
                self.config.executable,
                "--input",
                str(input_path),
                "--output",
                str(output_path),
                "--configFile",
                str(config_path),
                "--svgId",
                diagram_id,
                "--quiet",
            ]

            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError:
                raise DiagramRenderError(
                    diagram_id,
                    f"Mermaid CLI '{self.config.executable}' not found. "
                    "Install it with: npm install -g @mermaid-js/mermaid-cli",
                ) from None

            if result.returncode != 0:
                raise DiagramRenderError(diagram_id, result.stderr or "Unknown error")

            logger.debug(f"Rendered {diagram_id} with {self.config.executable}")
            return output_path.read_text(encoding="utf-8")


def build_diagram_renderer(config: DiagramConfig) -> DiagramRenderer:
    if config.renderer == "cli":
        return MermaidCliRenderer(config)
    return MermaidSourceRenderer()
