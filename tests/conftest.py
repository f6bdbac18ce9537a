import pytest

from notemark.config import NotemarkConfig
from notemark.renderer import NoteRenderer

ATTACHMENTS_ROOT = "/vault/files"
NOTES_ROOT = "/vault/notes"


class FakeDiagramRenderer:
    """Records every render call and returns a predictable SVG."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def render(self, diagram_id: str, source: str) -> str:
        self.calls.append((diagram_id, source))
        return f'<svg id="{diagram_id}"></svg>'


@pytest.fixture
def config():
    return NotemarkConfig(
        attachments={"path": ATTACHMENTS_ROOT},
        notes={"path": NOTES_ROOT},
    )


@pytest.fixture
def bare_config():
    """No attachment or note roots configured."""
    return NotemarkConfig()


@pytest.fixture
def diagram_renderer():
    return FakeDiagramRenderer()


@pytest.fixture
def renderer(config, diagram_renderer):
    return NoteRenderer(config, diagram_renderer)
