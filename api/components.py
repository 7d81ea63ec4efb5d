"""Component CRUD router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api._helpers import bind_context, check_config_expressions
from schemas.graph import Component, ComponentIn, ConfigUpdate, PositionUpdate
from services import graph as graph_ops
from services.sessions import EditorSessionStore, get_store

router = APIRouter()


@router.get("/{editor_id}/components/", response_model=list[Component])
def list_components(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    return list(store.get(editor_id).components)


@router.post("/{editor_id}/components/", response_model=Component, status_code=201)
def create_component(
    editor_id: str,
    payload: ComponentIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id)
    check_config_expressions(payload.type, payload.config)
    return store.apply(editor_id, lambda g: graph_ops.create_component(
        g, payload.type, payload.x, payload.y, payload.config,
    ))


@router.get("/{editor_id}/components/{component_id}/", response_model=Component)
def get_component(editor_id: str, component_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    return graph_ops.require_component(store.get(editor_id), component_id)


@router.patch("/{editor_id}/components/{component_id}/position/", response_model=Component)
def update_component_position(
    editor_id: str,
    component_id: str,
    payload: PositionUpdate,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    return store.apply(editor_id, lambda g: graph_ops.update_position(g, component_id, payload.x, payload.y))


@router.put("/{editor_id}/components/{component_id}/config/", response_model=Component)
def update_component_config(
    editor_id: str,
    component_id: str,
    payload: ConfigUpdate,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    check_config_expressions(
        graph_ops.require_component(store.get(editor_id), component_id).type, payload.config,
    )
    return store.apply(editor_id, lambda g: graph_ops.update_config(g, component_id, payload.config))


@router.delete("/{editor_id}/components/{component_id}/", status_code=204)
def delete_component(editor_id: str, component_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    store.apply(editor_id, lambda g: (graph_ops.delete_component(g, component_id), None))
