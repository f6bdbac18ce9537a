"""Rewrite rules applied around markdown conversion."""

from .base import OutputFilter, OutputRule, RuleSet, Shape, SourceRule, Stage
from .builder import build_rule_set
from .diagrams import diagram_id, diagram_rule
from .links import (
    attachment_rules,
    external_link_rule,
    note_rules,
    special_link_encoder,
    tag_rules,
)
from .wikilinks import (
    PlaceholderVault,
    parse_wikilink,
    wikilink_capture_rule,
    wikilink_restore_filter,
)

__all__ = [
    "OutputFilter",
    "OutputRule",
    "PlaceholderVault",
    "RuleSet",
    "Shape",
    "SourceRule",
    "Stage",
    "attachment_rules",
    "build_rule_set",
    "diagram_id",
    "diagram_rule",
    "external_link_rule",
    "note_rules",
    "parse_wikilink",
    "special_link_encoder",
    "tag_rules",
    "wikilink_capture_rule",
    "wikilink_restore_filter",
]
