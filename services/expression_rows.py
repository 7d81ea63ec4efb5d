"""Key → expression rows of an expression component."""

from __future__ import annotations

import logging
from typing import Any

from schemas.expression import ExpressionRow
from services.errors import IncompleteConfiguration

logger = logging.getLogger(__name__)


def default_rows() -> list[ExpressionRow]:
    """Sample mappings shown when an expression component is first opened."""
    return [
        ExpressionRow(
            key="status",
            expression='len(user.servers) > 2 ? "very-active" : len(user.servers) > 0 ? "active" : "inactive"',
        ),
        ExpressionRow(key="admin", expression='user.role == "super" ? "admin" : "not admin"'),
    ]


def rows_from_config(config: dict[str, Any]) -> list[ExpressionRow]:
    raw = config.get("rows")
    if raw is None:
        return default_rows()
    return [ExpressionRow.model_validate(r) for r in raw]


def rows_to_config(config: dict[str, Any], rows: list[ExpressionRow]) -> dict[str, Any]:
    return {**config, "rows": [r.model_dump() for r in rows]}


def add_row(rows: list[ExpressionRow]) -> list[ExpressionRow]:
    return [*rows, ExpressionRow()]


def remove_row(rows: list[ExpressionRow], index: int) -> list[ExpressionRow]:
    if not 0 <= index < len(rows):
        return rows
    if len(rows) <= 1:
        raise IncompleteConfiguration("You must have at least one expression row")
    return rows[:index] + rows[index + 1:]


def update_row(
    rows: list[ExpressionRow],
    index: int,
    key: str | None = None,
    expression: str | None = None,
) -> list[ExpressionRow]:
    if not 0 <= index < len(rows):
        return rows
    update: dict[str, str] = {}
    if key is not None:
        update["key"] = key
    if expression is not None:
        update["expression"] = expression
    updated = list(rows)
    updated[index] = rows[index].model_copy(update=update)
    return updated


def ensure_complete(rows: list[ExpressionRow]) -> list[ExpressionRow]:
    blank = [i for i, row in enumerate(rows) if not row.key.strip()]
    if blank:
        logger.info("Refusing to save expression rows, blank keys at %s", blank)
        raise IncompleteConfiguration("Please fill in all keys")
    return rows
