"""Markdown conversion wrapped with the note rewrite rules."""

import threading
import time
import xml.etree.ElementTree as etree
from collections.abc import Iterator
from contextlib import contextmanager

import markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from notemark.config import NotemarkConfig
from notemark.diagrams import DiagramRenderer, build_diagram_renderer
from notemark.logger import get_logger
from notemark.metadata import split_front_matter
from notemark.rules import PlaceholderVault, RuleSet, build_rule_set

logger = get_logger(__name__)

# Between whitespace normalization (30) and fenced code (25), so special
# syntax is handled before any other preprocessor can see it
SOURCE_STAGE_PRIORITY = 28
# Before code highlighting (30) and inline processing (20)
CODE_GUARD_PRIORITY = 31
# After raw HTML has been put back (30) and ampersands restored (20)
OUTPUT_STAGE_PRIORITY = 5

MARKDOWN_EXTENSIONS = [
    "markdown.extensions.fenced_code",
    "markdown.extensions.tables",
    "markdown.extensions.codehilite",
    "markdown.extensions.nl2br",
    "markdown.extensions.sane_lists",
    "pymdownx.arithmatex",
    "pymdownx.tilde",
    "pymdownx.tasklist",
    "pymdownx.magiclink",
]


class SourceStagePreprocessor(Preprocessor):
    """Apply source-stage rules to the raw markdown."""

    def __init__(self, md: markdown.Markdown, extension: "NoteExtension") -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        text = self.extension.rule_set.apply_source(
            text, self.extension.vault, stash=self.md.htmlStash.store
        )
        return text.split("\n")


class CodeBlockGuard(Treeprocessor):
    """Put captured wikilinks inside indented code blocks back as literal text."""

    def __init__(self, md: markdown.Markdown, extension: "NoteExtension") -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: etree.Element) -> None:
        vault = self.extension.vault
        if not len(vault):
            return
        for code in root.iter("code"):
            if code.text:
                code.text = AtomicString(vault.literal(code.text))


class OutputStagePostprocessor(Postprocessor):
    """Apply output-stage rules and filters to the final HTML."""

    def __init__(self, md: markdown.Markdown, extension: "NoteExtension") -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, text: str) -> str:
        return self.extension.rule_set.apply_output(text, self.extension.vault)


class NoteExtension(Extension):
    """Python-Markdown extension hooking a RuleSet into both stages."""

    def __init__(self, rule_set: RuleSet, **kwargs) -> None:
        self.rule_set = rule_set
        self._vault: PlaceholderVault | None = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.registerExtension(self)
        md.preprocessors.register(
            SourceStagePreprocessor(md, self), "notemark_source", SOURCE_STAGE_PRIORITY
        )
        md.treeprocessors.register(
            CodeBlockGuard(md, self), "notemark_code_guard", CODE_GUARD_PRIORITY
        )
        md.postprocessors.register(
            OutputStagePostprocessor(md, self), "notemark_output", OUTPUT_STAGE_PRIORITY
        )

    @property
    def vault(self) -> PlaceholderVault:
        if self._vault is None:
            raise RuntimeError("No placeholder vault bound, convert through ExtensionPipeline")
        return self._vault

    @contextmanager
    def bind(self, vault: PlaceholderVault) -> Iterator[PlaceholderVault]:
        """Attach a vault for the duration of one conversion."""
        self._vault = vault
        try:
            yield vault
        finally:
            vault.clear()
            self._vault = None


class ExtensionPipeline:
    """
    Renders note markdown to HTML.

    The rule set and the markdown converter are built on the first render and
    reused afterwards. Renders are serialized: the converter carries state
    while converting, and each call gets its own placeholder vault.

    Fenced front matter is dropped from the output; read it with
    `notemark.metadata.split_front_matter`.
    """

    def __init__(
        self, config: NotemarkConfig, diagram_renderer: DiagramRenderer | None = None
    ) -> None:
        self.config = config
        self.diagram_renderer = diagram_renderer or build_diagram_renderer(
            config.diagrams
        )
        self._converter: markdown.Markdown | None = None
        self._extension: NoteExtension | None = None
        self._lock = threading.Lock()

    def get_converter(self) -> markdown.Markdown:
        if self._converter is not None:
            return self._converter

        rule_set = build_rule_set(self.config, self.diagram_renderer)
        self._extension = NoteExtension(rule_set)
        self._converter = markdown.Markdown(
            extensions=[self._extension, *MARKDOWN_EXTENSIONS],
            extension_configs={
                "markdown.extensions.codehilite": self.config.highlight,
                "pymdownx.arithmatex": self.config.math,
            },
            output_format="html",
        )
        logger.info("Markdown converter initialized")
        return self._converter

    @property
    def rule_set(self) -> RuleSet:
        self.get_converter()
        return self._extension.rule_set

    def render(self, source: str) -> str:
        _, body = split_front_matter(source)

        with self._lock:
            converter = self.get_converter()
            converter.reset()

            start_time = time.perf_counter()
            with self._extension.bind(PlaceholderVault()):
                html = converter.convert(body)
            duration = time.perf_counter() - start_time
            logger.debug(f"Rendered {len(source)} characters in {duration:.4f}s")

            return html
