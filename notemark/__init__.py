"""Render notes to HTML with attachment, note, tag and wikilink resolution."""

from .cache import RenderCache
from .config import NotemarkConfig
from .pipeline import ExtensionPipeline
from .plaintext import PlainTextProjector
from .renderer import NoteRenderer, get_renderer, render, strip

__all__ = [
    "ExtensionPipeline",
    "NoteRenderer",
    "NotemarkConfig",
    "PlainTextProjector",
    "RenderCache",
    "get_renderer",
    "render",
    "strip",
]
