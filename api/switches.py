"""Switch condition chain router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api._helpers import bind_context, check_expression_length, serialize_chain
from schemas.graph import EditorGraph
from schemas.switch import (
    ConditionAppendIn,
    ConditionExpressionIn,
    SwitchChainOut,
    SwitchModeIn,
    SwitchSaveIn,
)
from services import graph as graph_ops
from services.errors import ChainShapeViolation
from services.sessions import EditorSessionStore, get_store

router = APIRouter()


@router.get("/{editor_id}/components/{component_id}/switch/", response_model=SwitchChainOut)
def get_switch(editor_id: str, component_id: str, store: EditorSessionStore = Depends(get_store)):
    bind_context(editor_id, component_id)
    chain = graph_ops.get_switch_chain(store.get(editor_id), component_id)
    return serialize_chain(component_id, chain)


@router.post(
    "/{editor_id}/components/{component_id}/switch/conditions/",
    response_model=SwitchChainOut,
    status_code=201,
)
def append_condition(
    editor_id: str,
    component_id: str,
    payload: ConditionAppendIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    chain = store.apply(editor_id, lambda g: graph_ops.append_condition(g, component_id, payload.type))
    return serialize_chain(component_id, chain)


@router.patch(
    "/{editor_id}/components/{component_id}/switch/conditions/{condition_id}/",
    response_model=SwitchChainOut,
)
def update_condition_expression(
    editor_id: str,
    component_id: str,
    condition_id: str,
    payload: ConditionExpressionIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    check_expression_length(payload.expression)
    chain = store.apply(editor_id, lambda g: graph_ops.update_condition_expression(
        g, component_id, condition_id, payload.expression,
    ))
    return serialize_chain(component_id, chain)


@router.delete(
    "/{editor_id}/components/{component_id}/switch/conditions/{condition_id}/",
    response_model=SwitchChainOut,
)
def remove_condition(
    editor_id: str,
    component_id: str,
    condition_id: str,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)

    def _remove(g: EditorGraph):
        chain = graph_ops.get_switch_chain(g, component_id)
        # The editor always keeps at least one branch on a switch
        if len(chain) == 1 and chain.get(condition_id) is not None:
            raise ChainShapeViolation("A switch needs at least one condition.")
        return graph_ops.remove_condition(g, component_id, condition_id)

    chain = store.apply(editor_id, _remove)
    return serialize_chain(component_id, chain)


@router.put("/{editor_id}/components/{component_id}/switch/mode/", response_model=SwitchChainOut)
def set_switch_mode(
    editor_id: str,
    component_id: str,
    payload: SwitchModeIn,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    chain = store.apply(editor_id, lambda g: graph_ops.set_switch_mode(g, component_id, payload.mode))
    return serialize_chain(component_id, chain)


@router.post("/{editor_id}/components/{component_id}/switch/save/", response_model=SwitchChainOut)
def save_switch(
    editor_id: str,
    component_id: str,
    payload: SwitchSaveIn | None = None,
    store: EditorSessionStore = Depends(get_store),
):
    bind_context(editor_id, component_id)
    mode = payload.mode if payload else None
    chain = store.apply(editor_id, lambda g: graph_ops.save_switch(g, component_id, mode))
    return serialize_chain(component_id, chain)
