"""Path helpers: reference resolution and config-relative paths."""

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote

from pydantic import BaseModel

# Characters encodeURI leaves alone, on top of what quote() always keeps
ENCODE_URI_SAFE = ";,/?:@&=+$!*'()#"


@dataclass(frozen=True)
class ResolvedReference:
    """A reference token path turned into a concrete location."""

    name: str
    path: str
    basename: str

    @property
    def url(self) -> str:
        return f"file://{self.path}"


def encode_reference(reference: str) -> str:
    """
    Percent-encode a reference path the way a browser's encodeURI would.

    The reference is decoded first, so already encoded input comes back
    unchanged instead of having its "%" escaped a second time.
    """
    return quote(unquote(reference), safe=ENCODE_URI_SAFE)


def decode_reference(reference: str) -> str:
    return unquote(reference)


def resolve_reference(root: str | Path | None, reference: str) -> ResolvedReference:
    """
    Decode `reference` and join it onto `root`.

    Uses plain join semantics with no protection against ".." segments.
    When `root` is unset the decoded reference is passed through as the path.
    """
    name = decode_reference(reference)
    basename = os.path.basename(name.rstrip("/"))

    if root is None:
        return ResolvedReference(name=name, path=name, basename=basename)

    path = os.path.normpath(os.path.join(str(root), name.lstrip("/")))
    return ResolvedReference(name=name, path=path, basename=basename)


def resolve_path(path: str | Path, base_dir: Path | None) -> Path:
    """Resolve a path, making it relative to base_dir if it's relative."""
    path_obj = Path(os.path.expanduser(str(path)))

    if path_obj.is_absolute() or base_dir is None:
        return path_obj

    return base_dir / path_obj


def resolve_paths_recursively(obj: BaseModel, base_dir: Path) -> None:
    """Resolve every Path field of a (nested) pydantic model against base_dir."""
    for field_name in obj.__class__.model_fields:
        value = getattr(obj, field_name)
        if isinstance(value, Path):
            setattr(obj, field_name, resolve_path(value, base_dir))
        elif isinstance(value, BaseModel):
            resolve_paths_recursively(value, base_dir)
