"""Expression component rows router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api._helpers import bind_context, check_expression_length, serialize_rows
from schemas.expression import ExpressionRowsIn, ExpressionRowsOut, ExpressionRowUpdate
from services import graph as graph_ops
from services.sessions import EditorSessionStore, get_store

router = APIRouter()


@router.get("/{editor_id}/components/{component_id}/rows/", response_model=ExpressionRowsOut)
def list_rows(editor_id: str, component_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    return serialize_rows(component_id, graph_ops.get_expression_rows(store.get(editor_id), component_id))


@router.post("/{editor_id}/components/{component_id}/rows/", response_model=ExpressionRowsOut, status_code=201)
def add_row(editor_id: str, component_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    rows = store.apply(editor_id, lambda g: graph_ops.add_expression_row(g, component_id))
    return serialize_rows(component_id, rows)


@router.patch("/{editor_id}/components/{component_id}/rows/{index}/", response_model=ExpressionRowsOut)
def update_row(
    editor_id: str,
    component_id: str,
    index: int,
    payload: ExpressionRowUpdate,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    if payload.expression is not None:
        check_expression_length(payload.expression)
    rows = store.apply(editor_id, lambda g: graph_ops.update_expression_row(
        g, component_id, index, key=payload.key, expression=payload.expression,
    ))
    return serialize_rows(component_id, rows)


@router.delete("/{editor_id}/components/{component_id}/rows/{index}/", response_model=ExpressionRowsOut)
def remove_row(editor_id: str, component_id: str, index: int, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    rows = store.apply(editor_id, lambda g: graph_ops.remove_expression_row(g, component_id, index))
    return serialize_rows(component_id, rows)


@router.post("/{editor_id}/components/{component_id}/rows/save/", response_model=ExpressionRowsOut)
def save_rows(
    editor_id: str,
    component_id: str,
    payload: ExpressionRowsIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    for row in payload.rows:
        check_expression_length(row.expression)
    rows = store.apply(editor_id, lambda g: graph_ops.save_expression_rows(g, component_id, payload.rows))
    return serialize_rows(component_id, rows)
