"""MiniRef: a small Zettelkasten note-publishing library."""

from miniref.errors import (
    DuplicateId,
    InvalidFrontMatter,
    LoadError,
    MalformedDocument,
    MissingField,
    NoteNotFound,
    ParseError,
)
from miniref.note import Asset, Note, NoteSummary
from miniref.parser import parse_note, parse_note_file
from miniref.render import render_markdown
from miniref.store import NoteStore
from miniref.views import detail_view, resolve_references, summary_view

__all__ = [
    "Asset",
    "Note",
    "NoteSummary",
    "NoteStore",
    "parse_note",
    "parse_note_file",
    "render_markdown",
    "detail_view",
    "summary_view",
    "resolve_references",
    "ParseError",
    "MalformedDocument",
    "InvalidFrontMatter",
    "MissingField",
    "LoadError",
    "DuplicateId",
    "NoteNotFound",
]
