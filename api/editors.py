"""Editor session router — create, inspect, clear, validate and drop editors."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api._helpers import bind_context, serialize_editor
from schemas.graph import EditorOut, ValidationOut
from services import graph as graph_ops
from services.sessions import EditorSessionStore, get_store
from validation.graph import GraphValidator, validate_graph

router = APIRouter()


@router.get("/component-types/")
def list_component_types():
    from schemas.component_types import COMPONENT_TYPE_REGISTRY
    return {ct: spec.model_dump() for ct, spec in COMPONENT_TYPE_REGISTRY.items()}


@router.post("/editors/", response_model=EditorOut, status_code=201)
def create_editor(store: EditorSessionStore = Depends(get_store)):
    editor_id = store.create()
    return serialize_editor(editor_id, store.get(editor_id))


@router.get("/editors/{editor_id}/", response_model=EditorOut)
def get_editor(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    return serialize_editor(editor_id, store.get(editor_id))


@router.get("/editors/{editor_id}/export/")
def export_editor(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    return graph_ops.export(store.get(editor_id))


@router.post("/editors/{editor_id}/clear/", response_model=EditorOut)
def clear_editor(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    store.apply(editor_id, lambda g: (graph_ops.clear(g), None))
    return serialize_editor(editor_id, store.get(editor_id))


@router.post("/editors/{editor_id}/validate/", response_model=ValidationOut)
def validate_editor(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    graph = store.get(editor_id)
    errors = validate_graph(graph)
    warnings = GraphValidator.expression_warnings(graph)
    return {"valid": len(errors) == 0, "errors": errors, "warnings": warnings}


@router.delete("/editors/{editor_id}/", status_code=204)
def delete_editor(editor_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id)
    store.delete(editor_id)
