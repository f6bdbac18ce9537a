"""Entry points for rendering notes."""

from typing import Any

from notemark.cache import RenderCache
from notemark.config import NotemarkConfig
from notemark.diagrams import DiagramRenderer
from notemark.metadata import split_front_matter
from notemark.pipeline import ExtensionPipeline
from notemark.plaintext import PlainTextProjector


class NoteRenderer:
    """Cached HTML rendering and plain-text stripping for one configuration."""

    def __init__(
        self,
        config: NotemarkConfig | None = None,
        diagram_renderer: DiagramRenderer | None = None,
    ) -> None:
        self.config = config or NotemarkConfig()
        self.pipeline = ExtensionPipeline(self.config, diagram_renderer)
        self.cache = RenderCache(self.pipeline.render)
        self.projector = PlainTextProjector()

    def render(self, source: str) -> str:
        return self.cache.render(source)

    def metadata(self, source: str) -> dict[str, Any]:
        """Front matter of `source`, independent of the render cache."""
        return split_front_matter(source)[0]

    async def strip(self, source: str) -> str:
        return await self.projector.strip(source)


_renderer: NoteRenderer | None = None


def get_renderer() -> NoteRenderer:
    """Process-wide renderer built from environment configuration."""
    global _renderer
    if _renderer is None:
        _renderer = NoteRenderer()
    return _renderer


def render(source: str) -> str:
    return get_renderer().render(source)


async def strip(source: str) -> str:
    return await get_renderer().strip(source)
