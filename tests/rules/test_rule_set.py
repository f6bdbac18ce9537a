"""Tests for rule set assembly and ordering."""

from notemark.config import NotemarkConfig
from notemark.rules import build_rule_set


def test_full_rule_order(config, diagram_renderer):
    rule_set = build_rule_set(config, diagram_renderer)

    assert rule_set.names == [
        "encode_special_links",
        "diagrams",
        "wikilink_capture",
        "attachment_image",
        "attachment_button",
        "attachment_link",
        "note_button",
        "note_link",
        "tag_button",
        "tag_link",
        "external_links",
        "wikilink_restore",
    ]


def test_unconfigured_roots_contribute_no_rules(bare_config, diagram_renderer):
    rule_set = build_rule_set(bare_config, diagram_renderer)

    assert rule_set.names == [
        "encode_special_links",
        "diagrams",
        "tag_button",
        "tag_link",
        "external_links",
    ]


def test_diagrams_disabled(diagram_renderer):
    config = NotemarkConfig(diagrams={"enabled": False})

    assert "diagrams" not in build_rule_set(config, diagram_renderer).names


def test_stages(config, diagram_renderer):
    rule_set = build_rule_set(config, diagram_renderer)

    assert {rule.stage.value for rule in rule_set.source} == {"source"}
    assert {rule.stage.value for rule in (*rule_set.output, *rule_set.filters)} == {
        "output"
    }
