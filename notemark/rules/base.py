"""Rewrite rule types shared by every rule family."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from bs4 import BeautifulSoup, Tag

if TYPE_CHECKING:
    from notemark.rules.wikilinks import PlaceholderVault


class Stage(str, Enum):
    """Where in the conversion a rule runs."""

    SOURCE = "source"
    OUTPUT = "output"


class Shape(Enum):
    """Tag shapes an output rule can target.

    BUTTON only matches anchors with an empty body, so it has to be tried
    before ANCHOR, which matches the opening tag of any anchor.
    """

    IMAGE = ("img", "src", re.compile(r"<img\b[^>]*>", re.IGNORECASE))
    BUTTON = ("a", "href", re.compile(r"<a\b[^>]*></a>", re.IGNORECASE))
    ANCHOR = ("a", "href", re.compile(r"<a\b[^>]*>", re.IGNORECASE))

    def __init__(self, tag_name: str, attribute: str, pattern: re.Pattern[str]):
        self.tag_name = tag_name
        self.attribute = attribute
        self.pattern = pattern


SourceAction = Callable[[re.Match[str], "PlaceholderVault"], str]
Rewrite = Callable[[BeautifulSoup, Tag, str], None]
FilterAction = Callable[[str, "PlaceholderVault"], str]
Stash = Callable[[str], str]


@dataclass(frozen=True)
class SourceRule:
    """A regex rewrite of the raw markdown source."""

    name: str
    pattern: re.Pattern[str]
    replace: SourceAction
    # Replacement is finished HTML that the markdown engine must not touch
    raw_html: bool = False

    stage: ClassVar[Stage] = Stage.SOURCE

    def apply(
        self, text: str, vault: "PlaceholderVault", stash: Stash | None = None
    ) -> str:
        def substitute(match: re.Match[str]) -> str:
            replacement = self.replace(match, vault)
            if self.raw_html and stash is not None:
                # Blank lines around the placeholder make it its own block
                return f"\n\n{stash(replacement)}\n\n"
            return replacement

        return self.pattern.sub(substitute, text)


@dataclass(frozen=True)
class OutputRule:
    """A rewrite of one tag shape in the generated HTML.

    Candidate tags are located by shape, parsed as standalone fragments and
    only rewritten when their src/href starts with one of `prefixes`. The
    rewrite callback receives the parsed tag and the reference that follows
    the matched prefix, and mutates the tag in place.
    """

    name: str
    shape: Shape
    prefixes: tuple[str, ...]
    rewrite: Rewrite

    stage: ClassVar[Stage] = Stage.OUTPUT

    def apply(self, html: str) -> str:
        if not any(prefix in html for prefix in self.prefixes):
            return html
        return self.shape.pattern.sub(self._rewrite_fragment, html)

    def _rewrite_fragment(self, match: re.Match[str]) -> str:
        fragment = match.group(0)
        if not any(prefix in fragment for prefix in self.prefixes):
            return fragment

        # An opening anchor tag is parsed with a closing tag so the element
        # keeps whatever children the rewrite inserts, then cut back off.
        open_only = self.shape is Shape.ANCHOR
        soup = BeautifulSoup(f"{fragment}</a>" if open_only else fragment, "html.parser")
        tag = soup.find(self.shape.tag_name)
        if not isinstance(tag, Tag):
            return fragment

        value = tag.get(self.shape.attribute)
        if not isinstance(value, str):
            return fragment

        for prefix in self.prefixes:
            if value.startswith(prefix) and len(value) > len(prefix):
                self.rewrite(soup, tag, value[len(prefix) :])
                break
        else:
            return fragment

        markup = str(tag)
        return markup[: -len("</a>")] if open_only else markup


@dataclass(frozen=True)
class OutputFilter:
    """A whole-document pass over the HTML, run after every output rule."""

    name: str
    apply: FilterAction

    stage: ClassVar[Stage] = Stage.OUTPUT


@dataclass(frozen=True)
class RuleSet:
    """Ordered, immutable rules for both stages of a render."""

    source: tuple[SourceRule, ...] = field(default_factory=tuple)
    output: tuple[OutputRule, ...] = field(default_factory=tuple)
    filters: tuple[OutputFilter, ...] = field(default_factory=tuple)

    def apply_source(
        self, text: str, vault: "PlaceholderVault", stash: Stash | None = None
    ) -> str:
        for rule in self.source:
            text = rule.apply(text, vault, stash)
        return text

    def apply_output(self, html: str, vault: "PlaceholderVault") -> str:
        for rule in self.output:
            html = rule.apply(html)
        for output_filter in self.filters:
            html = output_filter.apply(html, vault)
        return html

    @property
    def names(self) -> list[str]:
        return [rule.name for rule in (*self.source, *self.output, *self.filters)]


def add_classes(tag: Tag, *classes: str) -> None:
    """Append CSS classes to a tag, keeping any it already has."""
    existing = tag.get("class") or []
    if isinstance(existing, str):
        existing = existing.split()
    tag["class"] = [*existing, *(name for name in classes if name not in existing)]
