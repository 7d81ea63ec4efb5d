"""Lexical sanity checks for condition / mapping expressions.

Checks are independent and cumulative. Nothing is parsed: operator
precedence, identifiers and nesting order (``)(`` passes) are not examined,
and a backslash does not escape a quote. Empty expressions are valid here;
non-emptiness is enforced separately at save time.
"""

from __future__ import annotations

import logging
import re

from schemas.expression import ExpressionValidation

logger = logging.getLogger(__name__)

UNMATCHED_SINGLE_QUOTE = "Unmatched single quote"
UNMATCHED_DOUBLE_QUOTE = "Unmatched double quote"
UNMATCHED_PARENTHESES = "Unmatched parentheses"
INVALID_OPERATOR = "Invalid operator (use == or !=)"

_STRICT_EQUALITY_RE = re.compile(r"={3,}|!={2,}")


def validate(expression: str) -> ExpressionValidation:
    errors: list[str] = []

    if expression.count("'") % 2 != 0:
        errors.append(UNMATCHED_SINGLE_QUOTE)

    if expression.count('"') % 2 != 0:
        errors.append(UNMATCHED_DOUBLE_QUOTE)

    if expression.count("(") != expression.count(")"):
        errors.append(UNMATCHED_PARENTHESES)

    if _STRICT_EQUALITY_RE.search(expression):
        errors.append(INVALID_OPERATOR)

    if errors:
        logger.debug("Expression %r failed lexical checks: %s", expression, errors)
    return ExpressionValidation(valid=not errors, errors=errors)
