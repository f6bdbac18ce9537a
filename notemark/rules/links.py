"""Rules for attachment, note, tag and external links."""

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from notemark.logger import get_logger
from notemark.paths import decode_reference, encode_reference, resolve_reference
from notemark.rules.base import OutputRule, Shape, SourceRule, add_classes

logger = get_logger(__name__)

# (href, data attribute name, data attribute value, button label)
LinkTarget = tuple[str, str, str, str]


def special_link_encoder(tokens: Iterable[str]) -> SourceRule:
    """
    Percent-encode `[text](TOKEN/path)` links before conversion.

    Paths with spaces or other reserved characters would otherwise not be
    recognized as links by the markdown engine. A quoted link title after
    the path is kept as written.
    """
    alternatives = "|".join(re.escape(token) for token in tokens)
    pattern = re.compile(
        rf"\[([^\]]*)\]\(((?:{alternatives})/[^\)]*?)"
        r"(\s+\"[^\"]*\"|\s+'[^']*')?\)"
    )

    def replace(match: re.Match[str], vault) -> str:
        text, reference, title = match.group(1, 2, 3)
        return f"[{text}]({encode_reference(reference)}{title or ''})"

    return SourceRule(name="encode_special_links", pattern=pattern, replace=replace)


def _icon(soup: BeautifulSoup, name: str, size: str) -> Tag:
    icon = soup.new_tag("i", attrs={"class": f"icon {size}"})
    icon.string = name
    return icon


def _reference_rules(
    kind: str, token: str, icon: str, target: Callable[[str], LinkTarget]
) -> list[OutputRule]:
    """Build the button and inline anchor rules for one reference kind."""
    prefix = f"{token}/"

    def button(soup: BeautifulSoup, tag: Tag, reference: str) -> None:
        href, data_name, data_value, label = target(reference)
        tag["href"] = href
        add_classes(tag, kind, "button", "gray")
        tag[data_name] = data_value
        tag.append(_icon(soup, icon, "small"))
        span = soup.new_tag("span")
        span.string = label
        tag.append(span)

    def anchor(soup: BeautifulSoup, tag: Tag, reference: str) -> None:
        href, data_name, data_value, _ = target(reference)
        tag["href"] = href
        add_classes(tag, kind)
        tag[data_name] = data_value
        tag.insert(0, _icon(soup, icon, "xsmall"))

    return [
        OutputRule(f"{kind}_button", Shape.BUTTON, (prefix,), button),
        OutputRule(f"{kind}_link", Shape.ANCHOR, (prefix,), anchor),
    ]


def attachment_rules(root: Path | None, token: str) -> list[OutputRule]:
    """Resolve attachment images, buttons and links against the attachments root."""
    if root is None:
        logger.debug("No attachments path configured, skipping attachment rules")
        return []

    def target(reference: str) -> LinkTarget:
        resolved = resolve_reference(root, reference)
        return resolved.url, "data-filename", resolved.name, resolved.basename

    def image(soup: BeautifulSoup, tag: Tag, reference: str) -> None:
        resolved = resolve_reference(root, reference)
        tag["src"] = resolved.url
        add_classes(tag, "attachment")
        tag["data-filename"] = resolved.name

    return [
        OutputRule("attachment_image", Shape.IMAGE, (f"{token}/",), image),
        *_reference_rules("attachment", token, "paperclip", target),
    ]


def note_rules(root: Path | None, token: str) -> list[OutputRule]:
    if root is None:
        logger.debug("No notes path configured, skipping note rules")
        return []

    def target(reference: str) -> LinkTarget:
        resolved = resolve_reference(root, reference)
        return resolved.url, "data-filepath", resolved.path, resolved.basename

    return _reference_rules("note", token, "note", target)


def tag_rules(token: str) -> list[OutputRule]:
    """Tags are handled in-app, so they link to "#" and carry the tag name."""

    def target(reference: str) -> LinkTarget:
        tag_name = decode_reference(reference)
        return "#", "data-tag", tag_name, tag_name

    return _reference_rules("tag", token, "tag", target)


def external_link_rule() -> OutputRule:
    """Open web links outside the app."""

    def rewrite(soup: BeautifulSoup, tag: Tag, reference: str) -> None:
        tag["target"] = "_blank"
        tag["rel"] = "noopener noreferrer"

    return OutputRule(
        "external_links", Shape.ANCHOR, ("http://", "https://"), rewrite
    )
