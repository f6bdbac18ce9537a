"""Configuration management for notemark."""

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .paths import resolve_paths_recursively

DEFAULT_NOTE_PATTERN = r"\.(?:md|mkd|mdwn|mdown|markdown|markdn|mdtxt|mdtext|txt)$"


class AttachmentsConfig(BaseModel):
    """Where attachment references point to.

    Example YAML configuration:
    ```yaml
    attachments:
      path: "./attachments"
      token: "@attachment"
    ```
    """

    path: Path | None = Field(
        default=None,
        description="Attachments root; attachment rules are skipped when unset",
    )
    token: str = Field(default="@attachment", description="Reference prefix")


class NotesConfig(BaseModel):
    """Where note references and wikilinks point to.

    Example YAML configuration:
    ```yaml
    notes:
      path: "./notes"
      token: "@note"
      default_extension: "md"
    ```
    """

    path: Path | None = Field(
        default=None,
        description="Notes root; note and wikilink rules are skipped when unset",
    )
    token: str = Field(default="@note", description="Reference prefix")
    pattern: str = Field(
        default=DEFAULT_NOTE_PATTERN,
        description="Case-insensitive regex for paths that already name a note file",
    )
    default_extension: str = Field(
        default="md", description="Extension appended to bare wikilink targets"
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that don't compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid note pattern '{v}': {e}") from e
        return v

    @field_validator("default_extension")
    @classmethod
    def validate_default_extension(cls, v: str) -> str:
        return v.lstrip(".")


class TagsConfig(BaseModel):
    """Tag references are always in-app, so only the token is configurable."""

    token: str = Field(default="@tag", description="Reference prefix")


class DiagramConfig(BaseModel):
    """Configuration for fenced mermaid diagrams.

    Example YAML configuration:
    ```yaml
    diagrams:
      enabled: true
      renderer: cli
      executable: mmdc
      settings:
        theme: forest
    ```
    """

    enabled: bool = True
    renderer: Literal["source", "cli"] = Field(
        default="source",
        description="'source' leaves rendering to mermaid.js in the browser, "
        "'cli' renders SVG through the Mermaid CLI",
    )
    executable: str = Field(default="mmdc", description="Mermaid CLI executable")
    settings: dict[str, Any] = Field(
        default_factory=lambda: {"theme": "default"},
        description="Mermaid configuration passed to the renderer",
    )


class NotemarkConfig(BaseSettings):
    """Main configuration for the note renderer."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEMARK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    attachments: AttachmentsConfig = Field(default_factory=AttachmentsConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)

    math: dict[str, Any] = Field(
        default_factory=lambda: {"generic": True},
        description="Options for the pymdownx.arithmatex extension",
    )
    highlight: dict[str, Any] = Field(
        default_factory=lambda: {"css_class": "highlight", "guess_lang": False},
        description="Options for the codehilite extension",
    )
    diagrams: DiagramConfig = Field(default_factory=DiagramConfig)

    _config_file: Path | None = PrivateAttr(default=None)

    def __init__(self, config_file: Path | None = None, **kwargs: Any) -> None:
        if config_file is not None and config_file.exists():
            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
            # Explicit kwargs win over the file
            kwargs = {**config_data, **kwargs}

        super().__init__(**kwargs)

        self._config_file = config_file

        # Relative roots in a config file are relative to that file
        if config_file is not None:
            resolve_paths_recursively(self, config_file.parent)

    @property
    def config_file(self) -> Path | None:
        return self._config_file

    @property
    def tokens(self) -> tuple[str, str, str]:
        """Reference tokens in rule order: attachment, note, tag."""
        return (self.attachments.token, self.notes.token, self.tags.token)

    def dump_yaml(self) -> str:
        """Serialize the active configuration to YAML."""
        return yaml.dump(
            self.model_dump(mode="json"), default_flow_style=False, indent=2
        )
