"""NoteStore: the in-memory, read-only collection of loaded notes."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from miniref.assets import scan_assets
from miniref.errors import (
    DirectoryUnreadable,
    DocumentRejected,
    DuplicateId,
    NoteNotFound,
    ParseError,
)
from miniref.note import Note, NoteSummary
from miniref.parser import parse_note_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedDocument:
    """A file that was left out of the store because it failed to parse."""

    path: Path
    reason: str


def _sort_key(note: Note) -> tuple[str, str]:
    return (note.title.casefold(), note.id)


def _is_excluded(path: Path, root: Path) -> bool:
    parts = path.relative_to(root).parts
    if any(part.startswith(".") for part in parts):
        return True
    # attachments of another note
    return any(part.endswith(".assets") for part in parts[:-1])


def discover_documents(directory: Path, *, recursive: bool = False) -> list[Path]:
    """Return the ``*.md`` files under *directory* in sorted order.

    Hidden files and directories and ``*.assets`` directories are ignored.
    """
    pattern = "**/*.md" if recursive else "*.md"
    return sorted(
        p
        for p in directory.glob(pattern)
        if p.is_file() and not _is_excluded(p, directory)
    )


class NoteStore:
    """Id-indexed notes, built once and never mutated.

    ``list()`` is ordered by case-folded title, then id. Concurrent readers
    need no locking since nothing changes after construction.
    """

    def __init__(
        self,
        notes: Iterable[Note] = (),
        *,
        skipped: Iterable[SkippedDocument] = (),
        root: Path | None = None,
    ) -> None:
        index: dict[str, Note] = {}
        for note in notes:
            existing = index.get(note.id)
            if existing is not None:
                raise DuplicateId(note.id, (existing.source, note.source))
            index[note.id] = note
        self._index = index
        self._ordered = tuple(sorted(index.values(), key=_sort_key))
        self._summaries = tuple(n.summary() for n in self._ordered)
        self.skipped: tuple[SkippedDocument, ...] = tuple(skipped)
        self.root = root

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        directory: Path | str,
        *,
        recursive: bool = False,
        strict: bool = False,
    ) -> "NoteStore":
        """Scan *directory* for notes and return a populated store.

        Documents that fail to parse are logged and skipped (see
        :attr:`skipped`); with ``strict=True`` the first failure aborts the
        load with :class:`~miniref.errors.DocumentRejected`. A duplicate id
        always aborts with :class:`~miniref.errors.DuplicateId`.
        """
        root = Path(directory)
        if not root.exists():
            raise DirectoryUnreadable(root, "does not exist")
        if not root.is_dir():
            raise DirectoryUnreadable(root, "not a directory")
        try:
            # glob hides permission errors
            with os.scandir(root):
                pass
            paths = discover_documents(root, recursive=recursive)
        except OSError as exc:
            raise DirectoryUnreadable(root, exc.strerror or str(exc)) from exc

        notes: list[Note] = []
        seen: dict[str, Path] = {}
        skipped: list[SkippedDocument] = []
        for path in paths:
            try:
                note = parse_note_file(path)
            except (ParseError, OSError, UnicodeDecodeError) as exc:
                reason = exc.message if isinstance(exc, ParseError) else str(exc)
                if strict:
                    raise DocumentRejected(path, reason) from exc
                logger.warning("Skipping %s: %s", path, reason)
                skipped.append(SkippedDocument(path, reason))
                continue

            if note.id in seen:
                raise DuplicateId(note.id, (seen[note.id], path))
            seen[note.id] = path
            notes.append(dataclasses.replace(note, assets=scan_assets(path)))

        store = cls(notes, skipped=skipped, root=root)
        logger.info(
            "Loaded %d notes from %s (%d skipped)", len(store), root, len(store.skipped)
        )
        if skipped:
            logger.info("Skipped documents: %s", ", ".join(s.path.name for s in skipped))
        return store

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def list(self) -> list[NoteSummary]:
        return list(self._summaries)

    def get(self, note_id: str) -> Note:
        """Return the note with *note_id* or raise :class:`NoteNotFound`."""
        try:
            return self._index[note_id]
        except KeyError:
            raise NoteNotFound(note_id) from None

    def find(self, note_id: str) -> Note | None:
        return self._index.get(note_id)

    def title_of(self, note_id: str) -> str | None:
        """Id → title lookup used to resolve references."""
        note = self._index.get(note_id)
        return note.title if note is not None else None

    def ids(self) -> list[str]:
        return [n.id for n in self._ordered]

    def tags(self) -> list[str]:
        return sorted({tag for note in self._ordered for tag in note.tags})

    def with_tag(self, tag: str) -> list[Note]:
        return [n for n in self._ordered if tag in n.tags]

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._index

    def __iter__(self) -> Iterator[Note]:
        return iter(self._ordered)

    def __repr__(self) -> str:
        return f"NoteStore(root={self.root!r}, notes={len(self)}, skipped={len(self.skipped)})"
