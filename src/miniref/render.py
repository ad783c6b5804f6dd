"""Markdown → HTML fragment rendering.

Pipeline:
  1) Markdown → HTML (fenced code, tables, ``$``/``$$`` math markers)
  2) sanitize HTML with bleach
  3) replace fenced code blocks that name a known language with
     token-classed spans (see :mod:`miniref.highlight`)

Math is left for KaTeX in the browser: ``$x$`` becomes
``<span class="arithmatex">\\(x\\)</span>`` and ``$$…$$`` a matching ``div``.
"""

from __future__ import annotations

import html
import logging
import re

import bleach
import markdown as md

from miniref.highlight import highlight_code

logger = logging.getLogger(__name__)

MD_EXTENSIONS = ["fenced_code", "tables", "sane_lists", "pymdownx.arithmatex"]
MD_EXTENSION_CONFIGS = {
    "tables": {"use_align_attribute": True},
    "pymdownx.arithmatex": {"generic": True},
}

ALLOWED_TAGS = [
    "a", "p", "br", "hr",
    "strong", "em", "b", "i", "del", "s", "sup", "sub",
    "code", "pre", "blockquote",
    "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td",
    "img", "span", "div",
]

ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "code": ["class"],
    "span": ["class"],
    "div": ["class"],
    "ol": ["start"],
    "th": ["align"], "td": ["align"],
    "h1": ["id"], "h2": ["id"], "h3": ["id"],
    "h4": ["id"], "h5": ["id"], "h6": ["id"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

_CODE_BLOCK_RE = re.compile(
    r'<pre><code class="language-([^"]+)">(.*?)</code></pre>', re.DOTALL
)


def sanitize_rendered_html(rendered_html: str) -> str:
    """Strip every tag and attribute not on the allow-lists."""
    return bleach.clean(
        rendered_html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def highlight_code_blocks(rendered_html: str) -> str:
    """Highlight ``<pre><code class="language-X">`` blocks in *rendered_html*.

    Blocks whose language Pygments does not know are returned untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        language = match.group(1)
        code = html.unescape(match.group(2))
        highlighted = highlight_code(code, language)
        if highlighted is None:
            return match.group(0)
        return f'<pre><code class="language-{language}">{highlighted}</code></pre>'

    return _CODE_BLOCK_RE.sub(_replace, rendered_html)


class MarkdownRenderer:
    """Stateless note-body renderer; safe to share between threads."""

    def __init__(self, *, extensions: list[str] | None = None) -> None:
        self.extensions = list(extensions) if extensions is not None else list(MD_EXTENSIONS)
        self.extension_configs = {
            name: cfg for name, cfg in MD_EXTENSION_CONFIGS.items() if name in self.extensions
        }

    def to_html(self, text: str) -> str:
        # A fresh Markdown instance per call: instances carry parse state.
        return md.markdown(
            text,
            extensions=self.extensions,
            extension_configs=self.extension_configs,
            output_format="html",
        )

    def render(self, text: str) -> str:
        """Return the HTML fragment for *text*. Never raises."""
        try:
            rendered = self.to_html(text)
            rendered = sanitize_rendered_html(rendered)
            return highlight_code_blocks(rendered)
        except Exception:  # noqa: BLE001
            logger.exception("Markdown rendering failed; falling back to plain text")
            return f"<pre>{html.escape(text, quote=False)}</pre>"


_default_renderer = MarkdownRenderer()


def render_markdown(text: str) -> str:
    """Render a note body with the default :class:`MarkdownRenderer`."""
    return _default_renderer.render(text)
