"""Wikilink protection and restoration.

`[[target]]` and `[[target|display]]` would be mangled by the markdown
engine's own link syntax, so they are swapped for opaque placeholders before
conversion and turned into note links once the HTML exists.

The markdown engine strips STX/ETX from its input, so placeholders built
from them can never clash with text the author wrote.
"""

import re
from html import escape

from notemark.logger import get_logger
from notemark.paths import decode_reference
from notemark.rules.base import OutputFilter, SourceRule

logger = get_logger(__name__)

# Fenced blocks and code spans are matched so they can be skipped whole
FENCED_CODE = r"(?P<fence>^(?P<marker>`{3,}|~{3,})[^\n]*\n(?:.*?\n)?(?P=marker)[ ]*$)"
CODE_SPAN = r"(?P<span>(?<!\\)(?P<ticks>`+)(?:[^\n]|\n(?![ \t]*\n))+?(?<!`)(?P=ticks)(?!`))"
# Not preceded by a backtick or a backslash escape
WIKILINK = r"(?<![`\\])\[\[(?P<wikilink>[^\n]*?)\]\]"

WIKILINK_PATTERN = re.compile(
    "|".join((FENCED_CODE, CODE_SPAN, WIKILINK)), re.MULTILINE | re.DOTALL
)


class PlaceholderVault:
    """Wikilink captures for a single render call."""

    prefix = "\x02wikilink:"
    suffix = "\x03"

    def __init__(self) -> None:
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def placeholder(cls, index: int) -> str:
        return f"{cls.prefix}{index}{cls.suffix}"

    def capture(self, raw: str) -> str:
        """Store the inner text of a wikilink and return its placeholder."""
        self._entries.append(raw)
        return self.placeholder(len(self._entries) - 1)

    def entries(self) -> list[tuple[int, str]]:
        return list(enumerate(self._entries))

    def literal(self, text: str) -> str:
        """Replace placeholders in `text` with the wikilinks they stand for."""
        for index, raw in self.entries():
            text = text.replace(self.placeholder(index), f"[[{raw}]]")
        return text

    def clear(self) -> None:
        self._entries.clear()


def parse_wikilink(raw: str) -> tuple[str, str]:
    """Split wikilink content into (target, display text)."""
    target, separator, display = raw.partition("|")
    target = target.strip()
    display = display.strip() if separator else target
    return target, display or target


def note_basename(target: str, pattern: re.Pattern[str], default_extension: str) -> str:
    """Decode a wikilink target and give it a note extension if it has none."""
    target = decode_reference(target)
    if pattern.search(target):
        return target
    return f"{target}.{default_extension}"


def wikilink_capture_rule() -> SourceRule:
    def replace(match: re.Match[str], vault: PlaceholderVault) -> str:
        raw = match.group("wikilink")
        if raw is None:
            return match.group(0)
        return vault.capture(raw)

    return SourceRule(name="wikilink_capture", pattern=WIKILINK_PATTERN, replace=replace)


def wikilink_restore_filter(
    token: str, pattern: re.Pattern[str], default_extension: str
) -> OutputFilter:
    """
    Replace every placeholder with a note link and empty the vault.

    Links point at `<token>/<basename>` and are intentionally left unresolved;
    whatever displays the HTML maps them onto the notes directory.
    """

    def apply(html: str, vault: PlaceholderVault) -> str:
        try:
            for index, raw in vault.entries():
                target, display = parse_wikilink(raw)
                basename = note_basename(target, pattern, default_extension)
                href = escape(f"{token}/{basename}")
                link = f'<a href="{href}">{escape(display)}</a>'
                html = html.replace(vault.placeholder(index), link)
            logger.debug(f"Restored {len(vault)} wikilinks")
        finally:
            vault.clear()
        return html

    return OutputFilter(name="wikilink_restore", apply=apply)
