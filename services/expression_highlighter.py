"""Syntax classification for expression previews.

A single left-to-right pass splits an expression into non-overlapping spans.
At each position the classes are tried in precedence order:

1. string literals (``'...'`` / ``"..."``, no escape sequences)
2. operators (``== != >= <= > < && || IN NOT IN``)
3. numbers (digits with at most one decimal point)
4. property paths (identifiers joined by at least one ``.``)
5. whitelisted function names directly followed by ``(``

Everything else is ``plain``. Spans carry raw text; escaping happens once,
in :func:`render_html`, so markup can never be re-classified.
"""

from __future__ import annotations

import re

from jinja2 import BaseLoader, Environment

from schemas.expression import HighlightSpan
from services.operators import HIGHLIGHT_FUNCTIONS, SYMBOLIC_OPERATORS, WORD_OPERATORS

PLACEHOLDER_TEXT = "Enter expression..."

_TOKEN_RE = re.compile(
    r"(?P<string>'[^']*'|\"[^\"]*\")"
    r"|(?P<operator>"
    + "|".join(rf"\b{re.escape(op)}\b" for op in WORD_OPERATORS)
    + "|"
    + "|".join(re.escape(op) for op in SYMBOLIC_OPERATORS)
    + r")"
    r"|(?P<number>\b\d+(?:\.\d+)?\b)"
    r"|(?P<property>\b[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+)"
    r"|(?P<function>\b(?:" + "|".join(HIGHLIGHT_FUNCTIONS) + r")(?=\())"
    # Bare identifiers are consumed whole so no class can match mid-word
    r"|(?P<word>[A-Za-z_]\w*)"
)

_env = Environment(
    loader=BaseLoader(),
    autoescape=True,
    keep_trailing_newline=True,
)

_SPANS_TEMPLATE = _env.from_string(
    "{% for span in spans %}"
    "{% if span.kind == 'plain' %}{{ span.text }}"
    "{% else %}<span class=\"expr-{{ span.kind }}\">{{ span.text }}</span>{% endif %}"
    "{% endfor %}"
)

_PLACEHOLDER_TEMPLATE = _env.from_string(
    "<span class=\"expr-placeholder\">{{ text }}</span>"
)


def highlight(expression: str) -> list[HighlightSpan]:
    """Classify *expression* into ordered, non-overlapping spans."""
    spans: list[HighlightSpan] = []
    pos = 0
    for match in _TOKEN_RE.finditer(expression):
        if match.start() > pos:
            _push(spans, expression[pos:match.start()], "plain")
        kind = match.lastgroup
        _push(spans, match.group(), "plain" if kind == "word" else kind)
        pos = match.end()
    if pos < len(expression):
        _push(spans, expression[pos:], "plain")
    return spans


def render_html(expression: str) -> str:
    """Render highlight spans as escaped ``<span class="expr-...">`` markup."""
    if not expression:
        return _PLACEHOLDER_TEMPLATE.render(text=PLACEHOLDER_TEXT)
    return _SPANS_TEMPLATE.render(spans=highlight(expression))


def _push(spans: list[HighlightSpan], text: str, kind: str) -> None:
    # Adjacent plain fragments collapse into one span
    if kind == "plain" and spans and spans[-1].kind == "plain":
        spans[-1] = HighlightSpan(text=spans[-1].text + text, kind="plain")
    else:
        spans.append(HighlightSpan(text=text, kind=kind))
