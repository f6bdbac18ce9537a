"""Plain-text projection of notes for previews and search."""

import asyncio

import markdown
from bs4 import BeautifulSoup

from notemark.metadata import split_front_matter

STRIP_EXTENSIONS = [
    "markdown.extensions.fenced_code",
    "markdown.extensions.tables",
    "markdown.extensions.sane_lists",
    "pymdownx.tilde",
    "pymdownx.tasklist",
]


class PlainTextProjector:
    """Strip markdown formatting, keeping one paragraph per block."""

    async def strip(self, source: str) -> str:
        # Every call builds its own converter, so strips can run concurrently
        return await asyncio.to_thread(self._strip, source)

    def _strip(self, source: str) -> str:
        _, body = split_front_matter(source)
        html = markdown.markdown(body, extensions=STRIP_EXTENSIONS)
        soup = BeautifulSoup(html, "html.parser")
        blocks = (element.get_text().strip() for element in soup.find_all(recursive=False))
        return "\n\n".join(block for block in blocks if block)
