"""Shared helpers for API routers."""

from __future__ import annotations

from fastapi import HTTPException

from config import settings
from logging_config import component_id_var, editor_id_var
from schemas.expression import ExpressionRow
from schemas.graph import EditorGraph
from schemas.switch import SwitchChain
from services.expression_validator import validate


def bind_context(editor_id: str, component_id: str = "") -> None:
    """Stamp the editor / component ids onto log records for this request."""
    editor_id_var.set(editor_id)
    component_id_var.set(component_id)


def check_expression_length(expression: str) -> None:
    if len(expression) > settings.MAX_EXPRESSION_LENGTH:
        raise HTTPException(
            status_code=422,
            detail=f"Expression exceeds {settings.MAX_EXPRESSION_LENGTH} characters.",
        )


def check_config_expressions(component_type: str, config: dict | None) -> None:
    """Apply the expression length cap to expressions embedded in a config blob."""
    if not config:
        return
    if component_type == "switch":
        entries = config.get("conditions")
    elif component_type == "expression":
        entries = config.get("rows")
    else:
        return
    # Malformed shapes are left for the graph layer to reject
    if not isinstance(entries, list):
        return
    for entry in entries:
        expression = entry.get("expression") if isinstance(entry, dict) else None
        if isinstance(expression, str):
            check_expression_length(expression)


def serialize_editor(editor_id: str, graph: EditorGraph) -> dict:
    """Serialize an editor graph to EditorOut shape."""
    return {
        "editor_id": editor_id,
        "components": list(graph.components),
        "connections": list(graph.connections),
    }


def serialize_chain(component_id: str, chain: SwitchChain) -> dict:
    """Serialize a switch chain to SwitchChainOut shape, with advisory validation."""
    return {
        "component_id": component_id,
        "mode": chain.mode,
        "conditions": [
            {
                "id": c.id,
                "type": c.type,
                "label": c.label,
                "expression": c.expression,
                "target_component_id": c.target_component_id,
                "validation": None if c.is_else else validate(c.expression or ""),
            }
            for c in chain.conditions
        ],
    }


def serialize_rows(component_id: str, rows: list[ExpressionRow]) -> dict:
    return {"component_id": component_id, "rows": rows}
