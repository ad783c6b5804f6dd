"""Presentation adapter: store records → JSON-ready view dicts.

Reference resolution only needs an id → title callable, so views can be
built against a plain dict in tests::

    detail_view(note, {"a": "Note A"}.get)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Protocol
from urllib.parse import quote

if TYPE_CHECKING:
    from miniref.note import Note
    from miniref.store import NoteStore

UNKNOWN_TITLE = "unknown"


class TitleLookup(Protocol):
    def __call__(self, note_id: str) -> str | None: ...


@dataclass(frozen=True)
class ReferenceView:
    id: str
    title: str
    missing: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "missing": self.missing}


def resolve_references(ids: Iterable[str], lookup: TitleLookup) -> list[ReferenceView]:
    """Resolve each id to its title; dangling ids are kept as ``unknown``."""
    result: list[ReferenceView] = []
    for ref_id in ids:
        title = lookup(ref_id)
        if title is None:
            result.append(ReferenceView(ref_id, UNKNOWN_TITLE, missing=True))
        else:
            result.append(ReferenceView(ref_id, title))
    return result


def summary_view(note: "Note") -> dict[str, Any]:
    return note.summary().to_dict()


def asset_url(note_id: str, name: str) -> str:
    return f"/api/notes/{quote(note_id, safe='')}/assets/{quote(name, safe='')}"


def detail_view(note: "Note", lookup: TitleLookup) -> dict[str, Any]:
    """Full view of *note* with rendered body and resolved references."""
    return {
        "id": note.id,
        "title": note.title,
        "tags": list(note.tags),
        "references": [r.to_dict() for r in resolve_references(note.references, lookup)],
        "body_html": note.body_html,
        "assets": [
            {"name": a.name, "mime_type": a.mime_type, "url": asset_url(note.id, a.name)}
            for a in note.assets
        ],
    }


def list_view(store: "NoteStore") -> list[dict[str, Any]]:
    return [s.to_dict() for s in store.list()]
