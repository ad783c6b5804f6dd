"""Fixtures for the browser tests.

``live_url`` points at a ``marimo run`` of ``notebooks/miniref_app.py``
serving the sample notes in ``notes/``. One server is shared by the whole
session.
"""

from __future__ import annotations

import os
import subprocess
import sys
import time
from pathlib import Path

import pytest
import requests

_ROOT = Path(__file__).parent.parent.parent
_APP = _ROOT / "notebooks" / "miniref_app.py"
_NOTES = _ROOT / "notes"
_PORT = 2718
_STARTUP_TIMEOUT = 20


def _wait_until_serving(proc: subprocess.Popen, url: str) -> None:
    deadline = time.time() + _STARTUP_TIMEOUT
    while time.time() < deadline:
        if proc.poll() is not None:
            break
        try:
            if requests.get(url, timeout=1).status_code < 500:
                return
        except requests.RequestException:
            time.sleep(0.5)
    proc.terminate()
    stdout, stderr = proc.communicate(timeout=5)
    pytest.fail(
        f"MiniRef notebook not serving on {url} after {_STARTUP_TIMEOUT} s.\n"
        f"stdout: {stdout.decode()}\nstderr: {stderr.decode()}"
    )


@pytest.fixture(scope="session")
def marimo_server():
    env = dict(os.environ, MINIREF_NOTES_DIR=str(_NOTES))
    proc = subprocess.Popen(
        [sys.executable, "-m", "marimo", "run", str(_APP), "--port", str(_PORT), "--headless"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=str(_ROOT),
        env=env,
    )
    _wait_until_serving(proc, f"http://localhost:{_PORT}/")

    yield proc

    proc.terminate()
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


@pytest.fixture(scope="session")
def live_url(marimo_server) -> str:  # noqa: ARG001
    return f"http://localhost:{_PORT}"
