"""Exact-input memoization of rendered HTML."""

from collections.abc import Callable

from notemark.logger import get_logger

logger = get_logger(__name__)


class RenderCache:
    """
    Remember rendered HTML per source string.

    Entries are never evicted or invalidated: configuration is fixed for the
    lifetime of the process and notes are small. A render that raises is not
    stored, so the next call with the same source tries again.
    """

    def __init__(self, render: Callable[[str], str]) -> None:
        self._render = render
        self._entries: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, source: str) -> bool:
        return source in self._entries

    def render(self, source: str) -> str:
        if source in self._entries:
            logger.debug("Render cache hit")
            return self._entries[source]

        html = self._render(source)
        self._entries[source] = html
        return html
