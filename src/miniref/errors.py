"""Exception hierarchy for MiniRef.

Parse errors are per-document and contained by the store; load errors abort
startup; :class:`NoteNotFound` is a per-request lookup miss.
"""

from __future__ import annotations

from pathlib import Path


class MiniRefError(Exception):
    """Base class for every error raised by :mod:`miniref`."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class ParseError(MiniRefError):
    """A single note document could not be turned into a :class:`Note`."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class MalformedDocument(ParseError):
    """The document has no ``---`` delimited front-matter block."""


class InvalidFrontMatter(ParseError):
    """The front-matter block is not valid YAML or has the wrong shape."""


class MissingField(ParseError):
    """A required front-matter key (``id`` or ``title``) is absent or blank."""

    def __init__(self, field: str, *, path: Path | None = None) -> None:
        super().__init__(f"missing required field {field!r}", path=path)
        self.field = field


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class LoadError(MiniRefError):
    """The note directory could not be loaded; fatal at startup."""


class DirectoryUnreadable(LoadError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot read notes directory {path}: {reason}")
        self.path = path
        self.reason = reason


class DuplicateId(LoadError):
    """Two documents declare the same note id."""

    def __init__(self, note_id: str, paths: tuple[Path | None, ...] = ()) -> None:
        where = ", ".join(str(p) for p in paths if p is not None)
        message = f"duplicate note id {note_id!r}"
        if where:
            message += f" ({where})"
        super().__init__(message)
        self.note_id = note_id
        self.paths = paths


class DocumentRejected(LoadError):
    """Raised in strict mode when any single document fails to parse."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"rejected {path}: {reason}")
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Lookup / configuration
# ---------------------------------------------------------------------------


class NoteNotFound(MiniRefError, KeyError):
    def __init__(self, note_id: str) -> None:
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"note not found: {self.note_id!r}"


class ConfigError(MiniRefError):
    """The configuration file or environment holds an unusable value."""
