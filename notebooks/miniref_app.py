import marimo

__generated_with = "0.13.10"
app = marimo.App(width="full", app_title="MiniRef")


# ---------------------------------------------------------------------------
# Bootstrap: settings, logging, note store
# ---------------------------------------------------------------------------


@app.cell
def _setup():
    import sys
    from pathlib import Path

    _ROOT = Path(__file__).parent.parent
    _SRC = _ROOT / "src"

    if str(_SRC) not in sys.path:
        sys.path.insert(0, str(_SRC))

    from miniref.config import load_settings
    from miniref.highlight import stylesheet
    from miniref.logging_setup import setup_logging
    from miniref.store import NoteStore

    _settings = load_settings()
    setup_logging(_settings.log_level)

    store = NoteStore.load(
        _settings.notes_dir, recursive=_settings.recursive, strict=_settings.strict
    )
    css = stylesheet()
    return css, store


@app.cell
def _imports():
    import marimo as mo

    return (mo,)


# ---------------------------------------------------------------------------
# Reactive state
# ---------------------------------------------------------------------------


@app.cell
def _state(mo):
    # reference buttons in the note view update the selection they read
    selected_id = mo.state("", allow_self_loops=True)
    return (selected_id,)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------


@app.cell
def _tag_filter(mo, store):
    tag_filter = mo.ui.dropdown(
        options=["(all)"] + store.tags(), value="(all)", label="Tag"
    )
    return (tag_filter,)


@app.cell
def _sidebar(mo, store, selected_id, tag_filter):
    _set_id = selected_id[1]

    _tag = tag_filter.value
    if _tag and _tag != "(all)":
        _summaries = [n.summary() for n in store.with_tag(_tag)]
    else:
        _summaries = store.list()

    def _make_link(summary):
        return mo.ui.button(
            label=summary.title,
            on_click=lambda _, i=summary.id: _set_id(i),
            kind="ghost",
            full_width=True,
        )

    _skipped_note = (
        mo.md(f"_{len(store.skipped)} document(s) skipped_")
        if store.skipped
        else mo.md("")
    )

    sidebar = mo.vstack(
        [
            mo.md("## MiniRef"),
            mo.md("_Digital Zettelkasten_"),
            tag_filter,
            mo.divider(),
            mo.md("### Notes"),
            *[_make_link(s) for s in _summaries],
            _skipped_note,
        ],
        gap="4px",
    )
    return (sidebar,)


# ---------------------------------------------------------------------------
# Note view
# ---------------------------------------------------------------------------


@app.cell
def _note_view(mo, css, store, selected_id):
    from miniref.views import detail_view

    _set_id = selected_id[1]
    _note = store.find(selected_id[0]) if selected_id[0] else None

    if _note is None:
        note_content = mo.md("_Select a note from the sidebar._")
        references_content = mo.md("")
        assets_content = mo.md("")
    else:
        _view = detail_view(_note, store.title_of)
        _tags_md = " ".join(f"`#{t}`" for t in _view["tags"])

        note_content = mo.vstack(
            [
                mo.md(f"`{_view['id']}`"),
                mo.md(f"# {_view['title']}"),
                mo.md(_tags_md) if _view["tags"] else mo.md(""),
                mo.divider(),
                mo.Html(f"<style>{css}</style>{_view['body_html']}"),
            ]
        )

        def _ref_button(ref):
            if ref["missing"]:
                return mo.md(f"→ ~~{ref['id']}~~ _({ref['title']})_")
            return mo.ui.button(
                label=f"→ {ref['title']}",
                on_click=lambda _, i=ref["id"]: _set_id(i),
                kind="ghost",
            )

        references_content = (
            mo.vstack(
                [mo.md("---\n### References"), *[_ref_button(r) for r in _view["references"]]]
            )
            if _view["references"]
            else mo.md("_No references._")
        )

        assets_content = (
            mo.vstack(
                [
                    mo.md("### Attachments"),
                    mo.md(
                        "\n".join(
                            f"- {a['name']} (`{a['mime_type']}`)" for a in _view["assets"]
                        )
                    ),
                ]
            )
            if _view["assets"]
            else mo.md("")
        )

    return assets_content, note_content, references_content


# ---------------------------------------------------------------------------
# Main layout
# ---------------------------------------------------------------------------


@app.cell
def _main_layout(mo, sidebar, note_content, references_content, assets_content):
    layout = mo.hstack(
        [
            mo.vstack(
                [sidebar],
                style={
                    "width": "240px",
                    "min-width": "180px",
                    "padding": "8px",
                },
            ),
            mo.vstack(
                [note_content, references_content, assets_content],
                style={"flex": "1", "padding": "8px"},
            ),
        ],
        align="start",
        gap="0",
    )
    return (layout,)


@app.cell
def _render(layout):
    layout  # noqa: B018
    return


if __name__ == "__main__":
    app.run()
