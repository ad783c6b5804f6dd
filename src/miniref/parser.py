"""YAML-frontmatter note parser."""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from miniref.errors import InvalidFrontMatter, MalformedDocument, MissingField
from miniref.note import Note

# Opening "---" line, YAML, closing "---" line (which may end the file).
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_REQUIRED = ("id", "title")


def split_frontmatter(content: str, *, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; a document without a front-matter
    block raises :class:`~miniref.errors.MalformedDocument`.
    """
    content = content.removeprefix("\ufeff")
    match = _FRONTMATTER_RE.match(content)
    if not match:
        raise MalformedDocument("document does not start with a '---' front-matter block", path=path)
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise InvalidFrontMatter(f"front-matter is not valid YAML: {exc}", path=path) from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise InvalidFrontMatter(
            f"front-matter must be a mapping, got {type(meta).__name__}", path=path
        )
    return meta, content[match.end() :]


def _scalar(value: Any, key: str, path: Path | None) -> str:
    # bool is an int subclass but "id: yes" is almost certainly a mistake
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidFrontMatter(
            f"{key!r} must be a string, got {type(value).__name__}", path=path
        )
    return str(value).strip()


def _string_list(value: Any, key: str, path: Path | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise InvalidFrontMatter(
            f"{key!r} must be a list of strings, got {type(value).__name__}", path=path
        )
    result = []
    for item in items:
        if item is None:
            continue
        text = _scalar(item, key, path)
        if text:
            result.append(text)
    return result


def parse_note(content: str, *, source: Path | None = None) -> Note:
    """Parse a raw note document into a :class:`Note`.

    Raises :class:`~miniref.errors.MalformedDocument`,
    :class:`~miniref.errors.InvalidFrontMatter` or
    :class:`~miniref.errors.MissingField`.
    """
    meta, body = split_frontmatter(content, path=source)

    values: dict[str, str] = {}
    for key in _REQUIRED:
        raw = meta.get(key)
        if raw is None:
            raise MissingField(key, path=source)
        text = _scalar(raw, key, source)
        if not text:
            raise MissingField(key, path=source)
        values[key] = text

    tags = list(dict.fromkeys(_string_list(meta.get("tags"), "tags", source)))
    references = _string_list(meta.get("references"), "references", source)

    return Note(
        id=values["id"],
        title=values["title"],
        body_raw=body,
        tags=tuple(tags),
        references=tuple(references),
        source=source,
        frontmatter=MappingProxyType(dict(meta)),
    )


def parse_note_file(path: Path) -> Note:
    """Read a ``.md`` file and return its :class:`Note`."""
    path = Path(path)
    return parse_note(path.read_text(encoding="utf-8"), source=path)
