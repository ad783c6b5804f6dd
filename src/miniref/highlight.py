r"""Syntax highlighting for fenced code blocks.

Pygments does the lexing; its open-ended token hierarchy is folded into the
fixed :class:`TokenKind` taxonomy, so every emitted span carries one of the
twelve ``tok-<kind>`` classes::

    >>> highlight_code("x = 1\n", "python")
    'x <span class="tok-operator">=</span> <span class="tok-number">1</span>\n'

Languages Pygments does not know produce ``None`` and the caller keeps the
code block as plain text.
"""

from __future__ import annotations

import html
from enum import Enum
from functools import lru_cache

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    _TokenType,
)
from pygments.util import ClassNotFound


class TokenKind(str, Enum):
    COMMENT = "comment"
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    ATTRIBUTE = "attribute"
    SYMBOL = "symbol"
    TYPE = "type"
    FUNCTION = "function"
    MACRO = "macro"
    CONSTANT = "constant"
    PUNCTUATION = "punctuation"
    OPERATOR = "operator"

    @property
    def css_class(self) -> str:
        return f"tok-{self.value}"


# Most specific Pygments types first; lookups walk up ``ttype.parent``.
_TOKEN_KINDS: dict[_TokenType, TokenKind] = {
    Comment.Preproc: TokenKind.MACRO,
    Comment: TokenKind.COMMENT,
    Keyword.Type: TokenKind.TYPE,
    Keyword.Constant: TokenKind.CONSTANT,
    Keyword: TokenKind.KEYWORD,
    String.Symbol: TokenKind.SYMBOL,
    String: TokenKind.STRING,
    Number: TokenKind.NUMBER,
    Name.Attribute: TokenKind.ATTRIBUTE,
    Name.Decorator: TokenKind.ATTRIBUTE,
    Name.Tag: TokenKind.SYMBOL,
    Name.Label: TokenKind.SYMBOL,
    Name.Entity: TokenKind.SYMBOL,
    Name.Class: TokenKind.TYPE,
    Name.Namespace: TokenKind.TYPE,
    Name.Builtin.Pseudo: TokenKind.CONSTANT,
    Name.Builtin: TokenKind.FUNCTION,
    Name.Function: TokenKind.FUNCTION,
    Name.Constant: TokenKind.CONSTANT,
    Name.Variable.Magic: TokenKind.MACRO,
    Operator.Word: TokenKind.KEYWORD,
    Operator: TokenKind.OPERATOR,
    Punctuation: TokenKind.PUNCTUATION,
}


def classify(ttype: _TokenType) -> TokenKind | None:
    """Map a Pygments token type onto the fixed taxonomy (``None`` = plain text)."""
    current: _TokenType | None = ttype
    while current is not None:
        kind = _TOKEN_KINDS.get(current)
        if kind is not None:
            return kind
        current = current.parent
    return None


@lru_cache(maxsize=128)
def lookup_lexer(language: str) -> Lexer | None:
    """Return a lexer for *language* (alias, case-insensitive) or ``None``."""
    name = language.strip().lower()
    if not name:
        return None
    try:
        return get_lexer_by_name(name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def highlight_code(code: str, language: str | None) -> str | None:
    """Return *code* as HTML with ``tok-*`` classed spans.

    Returns ``None`` when *language* is empty or unknown to Pygments.
    """
    if not language:
        return None
    lexer = lookup_lexer(language)
    if lexer is None:
        return None

    parts: list[str] = []
    run_kind: TokenKind | None = None
    run: list[str] = []

    def flush() -> None:
        if not run:
            return
        text = html.escape("".join(run), quote=False)
        if run_kind is None:
            parts.append(text)
        else:
            parts.append(f'<span class="{run_kind.css_class}">{text}</span>')
        run.clear()

    for ttype, value in lexer.get_tokens(code):
        if not value:
            continue
        kind = classify(ttype)
        if kind is not run_kind:
            flush()
            run_kind = kind
        run.append(value)
    flush()
    return "".join(parts)


# base16-ocean (dark) palette
_PALETTE: dict[TokenKind, str] = {
    TokenKind.COMMENT: "#65737e",
    TokenKind.KEYWORD: "#b48ead",
    TokenKind.STRING: "#a3be8c",
    TokenKind.NUMBER: "#d08770",
    TokenKind.ATTRIBUTE: "#ebcb8b",
    TokenKind.SYMBOL: "#bf616a",
    TokenKind.TYPE: "#ebcb8b",
    TokenKind.FUNCTION: "#8fa1b3",
    TokenKind.MACRO: "#ab7967",
    TokenKind.CONSTANT: "#d08770",
    TokenKind.PUNCTUATION: "#c0c5ce",
    TokenKind.OPERATOR: "#96b5b4",
}


def stylesheet() -> str:
    """CSS rules for every :class:`TokenKind` class."""
    lines = ["pre code { background: #2b303b; color: #c0c5ce; }"]
    lines += [f".{kind.css_class} {{ color: {color}; }}" for kind, color in _PALETTE.items()]
    return "\n".join(lines) + "\n"
