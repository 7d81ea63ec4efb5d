"""Operator and function vocabulary shared by the expression editors."""

from __future__ import annotations

# Palette entries insert ``value`` at the cursor, hence the padding spaces.
AVAILABLE_OPERATORS: list[dict[str, str]] = [
    {"value": " == ", "label": "== (equals)"},
    {"value": " != ", "label": "!= (not equals)"},
    {"value": " > ", "label": "> (greater than)"},
    {"value": " < ", "label": "< (less than)"},
    {"value": " >= ", "label": ">= (greater or equal)"},
    {"value": " <= ", "label": "<= (less or equal)"},
    {"value": " IN ", "label": "IN (contains)"},
    {"value": " NOT IN ", "label": "NOT IN (not contains)"},
    {"value": " && ", "label": "&& (and)"},
    {"value": " || ", "label": "|| (or)"},
]

# Longest first so the tokenizer never splits ``>=`` into ``>`` + ``=``.
SYMBOLIC_OPERATORS: tuple[str, ...] = ("==", "!=", ">=", "<=", "&&", "||", ">", "<")
WORD_OPERATORS: tuple[str, ...] = ("NOT IN", "IN")

HIGHLIGHT_FUNCTIONS: tuple[str, ...] = ("len", "sum", "avg", "min", "max", "count")
