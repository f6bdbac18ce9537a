"""Front matter handling for notes."""

from typing import Any

import frontmatter


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """
    Separate `---` fenced YAML front matter from the note body.

    Only a fenced block at the very start of the note counts. Leading
    `Key: value` lines without a fence are ordinary content.
    """
    if not frontmatter.checks(source):
        return {}, source

    metadata, content = frontmatter.parse(source)
    return metadata, content
