"""Unit tests for miniref.parser."""

import textwrap
from pathlib import Path

import pytest

from miniref.errors import InvalidFrontMatter, MalformedDocument, MissingField, ParseError
from miniref.parser import parse_note, parse_note_file, split_frontmatter

# ---------------------------------------------------------------------------
# split_frontmatter
# ---------------------------------------------------------------------------


class TestSplitFrontmatter:
    def test_basic_frontmatter(self):
        raw = textwrap.dedent("""\
            ---
            title: My Note
            tags: [a, b]
            ---
            Body here.
        """)
        meta, body = split_frontmatter(raw)
        assert meta["title"] == "My Note"
        assert meta["tags"] == ["a", "b"]
        assert body == "Body here.\n"

    def test_no_frontmatter_is_malformed(self):
        with pytest.raises(MalformedDocument):
            split_frontmatter("Just some text.")

    def test_frontmatter_not_at_start_is_malformed(self):
        with pytest.raises(MalformedDocument):
            split_frontmatter("Intro\n---\ntitle: Nope\n---\nMore text.")

    def test_unclosed_frontmatter_is_malformed(self):
        with pytest.raises(MalformedDocument):
            split_frontmatter("---\nid: a\ntitle: A\nBody without closing marker.\n")

    def test_empty_frontmatter_block(self):
        meta, body = split_frontmatter("---\n---\nBody.")
        assert meta == {}
        assert body == "Body."

    def test_closing_marker_at_end_of_file(self):
        meta, body = split_frontmatter("---\nid: a\n---")
        assert meta == {"id": "a"}
        assert body == ""

    def test_crlf_line_endings(self):
        meta, body = split_frontmatter("---\r\nid: a\r\ntitle: A\r\n---\r\nBody.\r\n")
        assert meta == {"id": "a", "title": "A"}
        assert body == "Body.\r\n"

    def test_byte_order_mark_is_ignored(self):
        meta, _ = split_frontmatter("\ufeff---\nid: a\n---\n")
        assert meta == {"id": "a"}

    def test_invalid_yaml(self):
        with pytest.raises(InvalidFrontMatter):
            split_frontmatter("---\ntitle: [unclosed\n---\nBody.")

    def test_non_mapping_yaml(self):
        with pytest.raises(InvalidFrontMatter):
            split_frontmatter("---\n- just\n- a list\n---\nBody.")


# ---------------------------------------------------------------------------
# parse_note
# ---------------------------------------------------------------------------


class TestParseNote:
    def test_full_note(self):
        note = parse_note(
            textwrap.dedent("""\
                ---
                id: zettel-1
                title: "First Zettel"
                tags: [method, start]
                references: [zettel-2, zettel-3]
                ---
                # Heading

                Body text.
            """)
        )
        assert note.id == "zettel-1"
        assert note.title == "First Zettel"
        assert note.tags == ("method", "start")
        assert note.references == ("zettel-2", "zettel-3")
        assert note.body_raw == "# Heading\n\nBody text.\n"

    def test_optional_fields_default_empty(self):
        note = parse_note("---\nid: a\ntitle: A\n---\nBody.\n")
        assert note.tags == ()
        assert note.references == ()

    def test_null_lists_default_empty(self):
        note = parse_note("---\nid: a\ntitle: A\ntags:\nreferences: ~\n---\n")
        assert note.tags == ()
        assert note.references == ()

    def test_body_is_verbatim(self):
        body = "  indented\n\n\n---\ntrailing marker stays in the body\n"
        note = parse_note("---\nid: a\ntitle: A\n---\n" + body)
        assert note.body_raw == body

    def test_reference_order_is_preserved(self):
        note = parse_note("---\nid: a\ntitle: A\nreferences: [z, b, m]\n---\n")
        assert note.references == ("z", "b", "m")

    def test_duplicate_tags_collapsed(self):
        note = parse_note("---\nid: a\ntitle: A\ntags: [x, y, x]\n---\n")
        assert note.tags == ("x", "y")

    def test_comma_separated_tags_string(self):
        note = parse_note("---\nid: a\ntitle: A\ntags: 'one, two'\n---\n")
        assert note.tags == ("one", "two")

    def test_numeric_id_is_stringified(self):
        note = parse_note("---\nid: 202401011200\ntitle: A\n---\n")
        assert note.id == "202401011200"

    def test_extra_frontmatter_kept(self):
        note = parse_note("---\nid: a\ntitle: A\nstatus: draft\n---\n")
        assert note.frontmatter["status"] == "draft"

    def test_source_attached(self, tmp_path: Path):
        note = parse_note("---\nid: a\ntitle: A\n---\n", source=tmp_path / "a.md")
        assert note.source == tmp_path / "a.md"


class TestParseNoteErrors:
    def test_missing_id(self):
        with pytest.raises(MissingField) as excinfo:
            parse_note("---\ntitle: No id\n---\nBody.\n")
        assert excinfo.value.field == "id"

    def test_missing_title(self):
        with pytest.raises(MissingField) as excinfo:
            parse_note("---\nid: a\n---\nBody.\n")
        assert excinfo.value.field == "title"

    def test_id_checked_before_title(self):
        with pytest.raises(MissingField) as excinfo:
            parse_note("---\ntags: [x]\n---\n")
        assert excinfo.value.field == "id"

    def test_blank_id_is_missing(self):
        with pytest.raises(MissingField) as excinfo:
            parse_note("---\nid: '  '\ntitle: A\n---\n")
        assert excinfo.value.field == "id"

    def test_list_title_is_invalid(self):
        with pytest.raises(InvalidFrontMatter):
            parse_note("---\nid: a\ntitle: [x, y]\n---\n")

    def test_mapping_tags_are_invalid(self):
        with pytest.raises(InvalidFrontMatter):
            parse_note("---\nid: a\ntitle: A\ntags: {x: 1}\n---\n")

    def test_no_frontmatter(self):
        with pytest.raises(MalformedDocument):
            parse_note("# Just a heading\n")

    def test_all_errors_are_parse_errors(self):
        for raw in ("plain", "---\n[\n---\n", "---\ntitle: A\n---\n"):
            with pytest.raises(ParseError):
                parse_note(raw)

    def test_error_message_names_path(self, tmp_path: Path):
        with pytest.raises(MissingField) as excinfo:
            parse_note("---\ntitle: A\n---\n", source=tmp_path / "x.md")
        assert "x.md" in str(excinfo.value)


class TestParseNoteFile:
    def test_reads_file(self, tmp_path: Path):
        md = tmp_path / "b.md"
        md.write_text("---\nid: b\ntitle: B\nreferences: [a]\n---\nSee a.\n", encoding="utf-8")
        note = parse_note_file(md)
        assert note.id == "b"
        assert note.title == "B"
        assert note.references == ("a",)
        assert note.source == md
