"""Connection router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api._helpers import bind_context
from schemas.graph import Connection, ConnectionIn
from services import graph as graph_ops
from services.sessions import EditorSessionStore, get_store

router = APIRouter()


@router.get("/{editor_id}/connections/", response_model=list[Connection])
def list_connections(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    return list(store.get(editor_id).connections)


@router.post("/{editor_id}/connections/", response_model=Connection, status_code=201)
def create_connection(
    editor_id: str,
    payload: ConnectionIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, payload.from_component_id)
    return store.apply(editor_id, lambda g: graph_ops.create_connection(
        g,
        payload.from_component_id,
        payload.to_component_id,
        payload.from_position,
        payload.to_position,
        payload.from_condition_id,
    ))


@router.delete("/{editor_id}/connections/{connection_id}/", status_code=204)
def delete_connection(editor_id: str, connection_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    store.apply(editor_id, lambda g: (graph_ops.delete_connection(g, connection_id), None))
