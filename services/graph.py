"""Graph model — component and connection registry of one editor.

Operations take an :class:`EditorGraph` and return a new one; nothing is
mutated in place, so a failed operation leaves the caller's graph as it was.
Connections belong to the graph rather than to either endpoint, which is
what lets :func:`delete_component` cascade without back-references.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

from pydantic import ValidationError

from schemas.component_types import default_config, get_component_type
from schemas.expression import ExpressionRow
from schemas.graph import AnchorStr, Component, ComponentTypeStr, Connection, EditorGraph
from schemas.switch import ConditionTypeStr, EvaluationModeStr, SwitchChain
from services import expression_rows, switch_chain
from services.errors import ChainShapeViolation, ComponentNotFound, ConnectionRejected, WrongComponentType

logger = logging.getLogger(__name__)


def new_component_id(component_type: str) -> str:
    return f"{component_type}-{secrets.token_hex(4)}"


def new_connection_id() -> str:
    return f"conn-{secrets.token_hex(4)}"


# ── Components ────────────────────────────────────────────────────────────────


def create_component(
    graph: EditorGraph,
    component_type: ComponentTypeStr,
    x: int,
    y: int,
    config: dict[str, Any] | None = None,
) -> tuple[EditorGraph, Component]:
    if get_component_type(component_type) is None:
        raise WrongComponentType(f"Unknown component type '{component_type}'.")
    if config is None:
        config = default_config(component_type)
    config = _normalize_config(component_type, config)

    component = Component(id=new_component_id(component_type), type=component_type, x=x, y=y, config=config)
    logger.info("Created %s component %s at %s", component_type, component.id, component.position)
    return graph.model_copy(update={"components": graph.components + (component,)}), component


def update_position(graph: EditorGraph, component_id: str, x: int, y: int) -> tuple[EditorGraph, Component]:
    component = require_component(graph, component_id).with_position(x, y)
    return _replace_component(graph, component), component


def update_config(graph: EditorGraph, component_id: str, config: dict[str, Any]) -> tuple[EditorGraph, Component]:
    current = require_component(graph, component_id)
    component = current.with_config(_normalize_config(current.type, config))
    logger.info("Replaced config of %s", component_id)
    return _replace_component(graph, component), component


def delete_component(graph: EditorGraph, component_id: str) -> EditorGraph:
    require_component(graph, component_id)
    components = tuple(c for c in graph.components if c.id != component_id)
    connections = tuple(c for c in graph.connections if not c.touches(component_id))
    dropped = len(graph.connections) - len(connections)
    logger.info("Deleted component %s and %d connection(s)", component_id, dropped)
    graph = graph.model_copy(update={"components": components, "connections": connections})
    return _clear_targets_to(graph, component_id)


def require_component(graph: EditorGraph, component_id: str) -> Component:
    component = graph.get_component(component_id)
    if component is None:
        raise ComponentNotFound(component_id)
    return component


# ── Connections ───────────────────────────────────────────────────────────────


def is_valid_connection(from_component_id: str, to_component_id: str) -> bool:
    return from_component_id != to_component_id


def create_connection(
    graph: EditorGraph,
    from_component_id: str,
    to_component_id: str,
    from_position: AnchorStr = "right",
    to_position: AnchorStr = "left",
    from_condition_id: str | None = None,
) -> tuple[EditorGraph, Connection]:
    """Connect two components.

    Self-loops are always rejected. ``from_condition_id`` is stored as given;
    when it names a condition of the source switch, that condition's target
    is pointed at the new destination.
    """
    if not is_valid_connection(from_component_id, to_component_id):
        logger.info("Rejected self-loop connection on %s", from_component_id)
        raise ConnectionRejected("Cannot connect a component to itself.")
    source = graph.get_component(from_component_id)
    for component_id, component in (
        (from_component_id, source),
        (to_component_id, graph.get_component(to_component_id)),
    ):
        if component is None:
            raise ConnectionRejected(f"Unknown component '{component_id}'.")

    connection = Connection(
        id=new_connection_id(),
        from_component_id=from_component_id,
        to_component_id=to_component_id,
        from_position=from_position,
        to_position=to_position,
        from_condition_id=from_condition_id,
    )
    graph = graph.model_copy(update={"connections": graph.connections + (connection,)})

    if from_condition_id and source.type == "switch":
        chain = SwitchChain.from_config(source.config)
        if chain.get(from_condition_id) is not None:
            chain = switch_chain.set_target(chain, from_condition_id, to_component_id)
            graph = _replace_component(graph, source.with_config({**source.config, **chain.to_config()}))

    logger.info(
        "Connected %s -> %s as %s%s", from_component_id, to_component_id, connection.id,
        f" (condition {from_condition_id})" if from_condition_id else "",
    )
    return graph, connection


def delete_connection(graph: EditorGraph, connection_id: str) -> EditorGraph:
    """Remove a connection. Unknown ids are a no-op."""
    connection = graph.get_connection(connection_id)
    if connection is None:
        return graph
    graph = graph.model_copy(update={
        "connections": tuple(c for c in graph.connections if c.id != connection_id),
    })
    if connection.is_from_switch_condition:
        graph = _clear_condition_target(graph, connection)
    logger.info("Deleted connection %s", connection_id)
    return graph


def clear(graph: EditorGraph) -> EditorGraph:
    logger.info(
        "Cleared %d component(s) and %d connection(s)", len(graph.components), len(graph.connections),
    )
    return EditorGraph()


def export(graph: EditorGraph) -> dict[str, Any]:
    """Export shape: components as ``{id, type, x, y, config}`` plus connections."""
    return {
        "components": [c.model_dump() for c in graph.components],
        "connections": [c.model_dump(by_alias=True) for c in graph.connections],
    }


# ── Switch components ─────────────────────────────────────────────────────────


def get_switch_chain(graph: EditorGraph, component_id: str) -> SwitchChain:
    component = require_component(graph, component_id)
    if component.type != "switch":
        raise WrongComponentType(f"Component '{component_id}' is not a switch.")
    return SwitchChain.from_config(component.config)


def append_condition(
    graph: EditorGraph, component_id: str, condition_type: ConditionTypeStr,
) -> tuple[EditorGraph, SwitchChain]:
    chain = switch_chain.append(get_switch_chain(graph, component_id), condition_type)
    logger.info("Appended %s condition to %s", condition_type, component_id)
    return _store_chain(graph, component_id, chain), chain


def remove_condition(graph: EditorGraph, component_id: str, condition_id: str) -> tuple[EditorGraph, SwitchChain]:
    """Remove a condition along with the connections leaving from it."""
    chain = switch_chain.remove(get_switch_chain(graph, component_id), condition_id)
    graph = _store_chain(graph, component_id, chain)
    connections = tuple(
        c for c in graph.connections
        if not (c.from_component_id == component_id and c.from_condition_id == condition_id)
    )
    if len(connections) != len(graph.connections):
        graph = graph.model_copy(update={"connections": connections})
    return graph, chain


def update_condition_expression(
    graph: EditorGraph, component_id: str, condition_id: str, expression: str,
) -> tuple[EditorGraph, SwitchChain]:
    chain = switch_chain.update_expression(get_switch_chain(graph, component_id), condition_id, expression)
    return _store_chain(graph, component_id, chain), chain


def set_switch_mode(
    graph: EditorGraph, component_id: str, mode: EvaluationModeStr,
) -> tuple[EditorGraph, SwitchChain]:
    chain = switch_chain.set_mode(get_switch_chain(graph, component_id), mode)
    return _store_chain(graph, component_id, chain), chain


def save_switch(
    graph: EditorGraph, component_id: str, mode: EvaluationModeStr | None = None,
) -> tuple[EditorGraph, SwitchChain]:
    """Commit a switch configuration: every non-else condition needs an expression."""
    chain = get_switch_chain(graph, component_id)
    if mode is not None:
        chain = switch_chain.set_mode(chain, mode)
    switch_chain.ensure_complete(chain)
    logger.info("Saved switch %s (%d conditions, %s)", component_id, len(chain), chain.mode)
    return _store_chain(graph, component_id, chain), chain


# ── Expression components ─────────────────────────────────────────────────────


def get_expression_rows(graph: EditorGraph, component_id: str) -> list[ExpressionRow]:
    component = require_component(graph, component_id)
    if component.type != "expression":
        raise WrongComponentType(f"Component '{component_id}' is not an expression component.")
    return expression_rows.rows_from_config(component.config)


def add_expression_row(graph: EditorGraph, component_id: str) -> tuple[EditorGraph, list[ExpressionRow]]:
    rows = expression_rows.add_row(get_expression_rows(graph, component_id))
    return _store_rows(graph, component_id, rows), rows


def remove_expression_row(
    graph: EditorGraph, component_id: str, index: int,
) -> tuple[EditorGraph, list[ExpressionRow]]:
    rows = expression_rows.remove_row(get_expression_rows(graph, component_id), index)
    return _store_rows(graph, component_id, rows), rows


def update_expression_row(
    graph: EditorGraph,
    component_id: str,
    index: int,
    key: str | None = None,
    expression: str | None = None,
) -> tuple[EditorGraph, list[ExpressionRow]]:
    rows = expression_rows.update_row(get_expression_rows(graph, component_id), index, key, expression)
    return _store_rows(graph, component_id, rows), rows


def save_expression_rows(
    graph: EditorGraph, component_id: str, rows: list[ExpressionRow],
) -> tuple[EditorGraph, list[ExpressionRow]]:
    get_expression_rows(graph, component_id)
    expression_rows.ensure_complete(rows)
    logger.info("Saved %d expression row(s) on %s", len(rows), component_id)
    return _store_rows(graph, component_id, rows), rows


# ── Helpers ───────────────────────────────────────────────────────────────────


def _normalize_config(component_type: str, config: dict[str, Any]) -> dict[str, Any]:
    """Re-serialize embedded switch chains so stored configs are always well-formed."""
    if component_type != "switch":
        return dict(config)
    try:
        chain = SwitchChain.from_config(config)
    except ValidationError as exc:
        raise ChainShapeViolation(f"Malformed switch configuration: {exc.error_count()} invalid field(s).") from exc
    switch_chain.ensure_well_formed(chain)
    return {**config, **chain.to_config()}


def _replace_component(graph: EditorGraph, component: Component) -> EditorGraph:
    components = tuple(component if c.id == component.id else c for c in graph.components)
    return graph.model_copy(update={"components": components})


def _store_chain(graph: EditorGraph, component_id: str, chain: SwitchChain) -> EditorGraph:
    component = require_component(graph, component_id)
    return _replace_component(graph, component.with_config({**component.config, **chain.to_config()}))


def _store_rows(graph: EditorGraph, component_id: str, rows: list[ExpressionRow]) -> EditorGraph:
    component = require_component(graph, component_id)
    return _replace_component(graph, component.with_config(expression_rows.rows_to_config(component.config, rows)))


def _clear_targets_to(graph: EditorGraph, component_id: str) -> EditorGraph:
    """Reset every switch condition still targeting *component_id*."""
    for source in graph.components:
        if source.type != "switch":
            continue
        chain = SwitchChain.from_config(source.config)
        stale = [c.id for c in chain.conditions if c.target_component_id == component_id]
        if not stale:
            continue
        for condition_id in stale:
            chain = switch_chain.set_target(chain, condition_id, None)
        logger.info("Cleared target of condition(s) %s on %s", stale, source.id)
        graph = _store_chain(graph, source.id, chain)
    return graph


def _clear_condition_target(graph: EditorGraph, removed: Connection) -> EditorGraph:
    source = graph.get_component(removed.from_component_id)
    if source is None or source.type != "switch":
        return graph
    chain = SwitchChain.from_config(source.config)
    condition = chain.get(removed.from_condition_id)
    if condition is None or condition.target_component_id != removed.to_component_id:
        return graph
    still_linked = any(
        c.from_component_id == removed.from_component_id
        and c.from_condition_id == removed.from_condition_id
        and c.to_component_id == removed.to_component_id
        for c in graph.connections
    )
    if still_linked:
        return graph
    chain = switch_chain.set_target(chain, condition.id, None)
    return _store_chain(graph, source.id, chain)
