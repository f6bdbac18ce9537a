"""Fenced mermaid diagram rule."""

import re
import zlib
from typing import TYPE_CHECKING

from notemark.rules.base import SourceRule

if TYPE_CHECKING:
    from notemark.diagrams import DiagramRenderer

DIAGRAM_PATTERN = re.compile(r"```mermaid([^`]*)```")


def diagram_id(source: str) -> str:
    """
    Stable DOM id for a diagram, derived from its source.

    Uses CRC32, so two different diagrams on one page can in principle
    share an id; that case is not handled.
    """
    return f"mermaid-{zlib.crc32(source.encode('utf-8'))}"


def diagram_rule(renderer: "DiagramRenderer") -> SourceRule:
    def replace(match: re.Match[str], vault) -> str:
        source = match.group(1)
        markup = renderer.render(diagram_id(source), source)
        return f'<div class="mermaid">{markup}</div>'

    return SourceRule(
        name="diagrams", pattern=DIAGRAM_PATTERN, replace=replace, raw_html=True
    )
