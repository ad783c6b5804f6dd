"""Core note records."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Asset:
    """A file attached to a note (stored in ``<note>.assets/``)."""

    name: str
    path: Path
    mime_type: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": str(self.path), "mime_type": self.mime_type}


@dataclass(frozen=True)
class NoteSummary:
    """Lightweight listing entry: no body, no reference resolution."""

    id: str
    title: str
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "tags": list(self.tags)}


@dataclass(frozen=True)
class Note:
    """A single Zettelkasten entry."""

    id: str
    title: str
    body_raw: str = ""
    tags: tuple[str, ...] = ()
    #: Ids of other notes, in display order. May point at missing notes.
    references: tuple[str, ...] = ()
    source: Path | None = field(default=None, compare=False)
    assets: tuple[Asset, ...] = field(default=(), compare=False)
    frontmatter: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )

    @cached_property
    def body_html(self) -> str:
        """HTML fragment for :attr:`body_raw`, rendered on first access."""
        from miniref.render import render_markdown

        return render_markdown(self.body_raw)

    def summary(self) -> NoteSummary:
        return NoteSummary(id=self.id, title=self.title, tags=self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tags": list(self.tags),
            "references": list(self.references),
            "body_raw": self.body_raw,
            "source": str(self.source) if self.source is not None else None,
            "assets": [a.to_dict() for a in self.assets],
        }
