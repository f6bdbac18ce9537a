"""Assemble the ordered rule set from configuration."""

import re
from typing import TYPE_CHECKING

from notemark.config import NotemarkConfig
from notemark.logger import get_logger
from notemark.rules.base import OutputFilter, OutputRule, RuleSet, SourceRule
from notemark.rules.diagrams import diagram_rule
from notemark.rules.links import (
    attachment_rules,
    external_link_rule,
    note_rules,
    special_link_encoder,
    tag_rules,
)
from notemark.rules.wikilinks import wikilink_capture_rule, wikilink_restore_filter

if TYPE_CHECKING:
    from notemark.diagrams import DiagramRenderer

logger = get_logger(__name__)


def build_rule_set(config: NotemarkConfig, diagram_renderer: "DiagramRenderer") -> RuleSet:
    """
    Build the rules for both stages in the order they must run.

    Source stage: special links are encoded first, diagrams are rendered
    and stashed before wikilinks are captured, so `[[...]]` inside a diagram
    is left alone.

    Output stage: attachment, note and tag rules, then external links, then
    the wikilink restore filter. Restored wikilinks carry the note token in
    their href and must not be picked up by the note rules.

    Reference kinds without a configured path contribute no rules.
    """
    notes = config.notes

    source: list[SourceRule] = [special_link_encoder(config.tokens)]
    if config.diagrams.enabled:
        source.append(diagram_rule(diagram_renderer))
    if notes.path is not None:
        source.append(wikilink_capture_rule())

    output: list[OutputRule] = [
        *attachment_rules(config.attachments.path, config.attachments.token),
        *note_rules(notes.path, notes.token),
        *tag_rules(config.tags.token),
        external_link_rule(),
    ]

    filters: list[OutputFilter] = []
    if notes.path is not None:
        pattern = re.compile(notes.pattern, re.IGNORECASE)
        filters.append(
            wikilink_restore_filter(notes.token, pattern, notes.default_extension)
        )
    else:
        logger.debug("No notes path configured, wikilinks stay literal")

    rule_set = RuleSet(source=tuple(source), output=tuple(output), filters=tuple(filters))
    logger.info(f"Built rule set: {rule_set.names}")
    return rule_set
