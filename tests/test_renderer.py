"""Tests for NoteRenderer and the module-level entry points."""

import pytest

import notemark
from notemark import renderer as renderer_module
from notemark.renderer import NoteRenderer, get_renderer


@pytest.fixture
def fresh_renderer(monkeypatch):
    monkeypatch.setattr(renderer_module, "_renderer", None)


def test_get_renderer_is_shared(fresh_renderer):
    assert get_renderer() is get_renderer()


def test_module_render(fresh_renderer):
    assert notemark.render("**a**") == "<p><strong>a</strong></p>"


@pytest.mark.asyncio
async def test_module_strip(fresh_renderer):
    assert await notemark.strip("**a**") == "a"


def test_default_config():
    renderer = NoteRenderer()

    assert renderer.config.notes.path is None
    assert renderer.pipeline.config is renderer.config


def test_render_goes_through_cache(renderer):
    html = renderer.render("See [[Plan]]")

    assert "See [[Plan]]" in renderer.cache
    assert '<a href="@note/Plan.md">Plan</a>' in html


def test_metadata_follows_the_source_not_the_cache(renderer):
    first = "---\ntitle: First\n---\nBody"
    second = "---\ntitle: Second\n---\nBody"

    renderer.render(first)
    renderer.render(second)
    renderer.render(first)

    assert renderer.metadata(first) == {"title": "First"}
    assert renderer.metadata(second) == {"title": "Second"}
    assert renderer.metadata("No front matter") == {}
