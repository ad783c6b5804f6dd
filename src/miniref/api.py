"""Flask JSON API over a loaded :class:`NoteStore`.

Routes::

    GET /api/notes                         [{id, title, tags}, ...]
    GET /api/notes/<id>                    {id, title, tags, references, body_html, assets}
    GET /api/notes/<id>/assets/<name>      attachment file (ids may contain "/")
    GET /api/tags                          ["tag", ...]
    GET /healthz                           {status, notes, skipped}
    GET /highlight.css                     token stylesheet
"""

from __future__ import annotations

import logging
import sys

from flask import Flask, Response, current_app, jsonify, request, send_file

from miniref.config import Settings, load_settings
from miniref.errors import LoadError, MiniRefError, NoteNotFound
from miniref.highlight import stylesheet
from miniref.logging_setup import setup_logging
from miniref.note import Note
from miniref.store import NoteStore
from miniref.views import detail_view, list_view

logger = logging.getLogger(__name__)

EXTENSION_KEY = "miniref"


def get_store() -> NoteStore:
    return current_app.extensions[EXTENSION_KEY]


def _send_asset(note: Note, name: str):
    for asset in note.assets:
        if asset.name == name:
            return send_file(asset.path, mimetype=asset.mime_type)
    return jsonify({"error": "not_found", "message": "Asset not found", "id": note.id}), 404


def create_app(store: NoteStore, settings: Settings | None = None) -> Flask:
    """Return a Flask app serving *store*; the store is shared by all requests."""
    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions[EXTENSION_KEY] = store
    app.config["MINIREF_SETTINGS"] = settings or Settings()

    @app.errorhandler(NoteNotFound)
    def _note_not_found(exc: NoteNotFound):
        return jsonify({"error": "not_found", "message": "Note not found", "id": exc.note_id}), 404

    @app.errorhandler(404)
    def _not_found(exc):
        return jsonify({"error": "not_found", "message": "Not found", "path": request.path}), 404

    @app.route("/api/notes")
    def api_notes():
        return jsonify(list_view(get_store()))

    # ids may contain slashes, so one route serves notes and their assets
    @app.route("/api/notes/<path:target>")
    def api_note(target: str):
        store = get_store()
        if target in store:
            return jsonify(detail_view(store.get(target), store.title_of))
        note_id, sep, name = target.rpartition("/assets/")
        if not sep:
            raise NoteNotFound(target)
        return _send_asset(store.get(note_id), name)

    @app.route("/api/tags")
    def api_tags():
        return jsonify(get_store().tags())

    @app.route("/healthz")
    def healthz():
        store = get_store()
        return jsonify({"status": "ok", "notes": len(store), "skipped": len(store.skipped)})

    @app.route("/highlight.css")
    def highlight_css():
        return Response(stylesheet(), mimetype="text/css")

    return app


def main() -> int:
    try:
        settings = load_settings()
    except MiniRefError as exc:
        setup_logging()
        logger.error("Invalid configuration: %s", exc)
        return 2

    setup_logging(settings.log_level)
    try:
        store = NoteStore.load(
            settings.notes_dir, recursive=settings.recursive, strict=settings.strict
        )
    except LoadError as exc:
        logger.error("Startup failed: %s", exc)
        return 1

    app = create_app(store, settings)
    logger.info("Listening on http://%s:%d", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
