"""Graph validation — dangling connections, condition links, incomplete configs."""

from __future__ import annotations

from pydantic import ValidationError

from schemas.graph import EditorGraph
from schemas.switch import SwitchChain
from services import expression_rows, switch_chain
from services.errors import EditorError
from services.expression_validator import validate


class GraphValidator:
    @staticmethod
    def validate_connections(graph: EditorGraph) -> list[str]:
        """Check connection endpoints and the conditions they originate from."""
        errors: list[str] = []
        chains: dict[str, SwitchChain | None] = {}

        for conn in graph.connections:
            src = graph.get_component(conn.from_component_id)
            tgt = graph.get_component(conn.to_component_id)
            if not src:
                errors.append(f"Connection {conn.id} references unknown source component '{conn.from_component_id}'")
                continue
            if not tgt:
                errors.append(f"Connection {conn.id} references unknown target component '{conn.to_component_id}'")
                continue
            if conn.from_component_id == conn.to_component_id:
                errors.append(f"Connection {conn.id} connects '{conn.from_component_id}' to itself")

            if conn.from_condition_id is None:
                continue
            if src.type != "switch":
                errors.append(
                    f"Connection {conn.id} names condition '{conn.from_condition_id}' "
                    f"but '{src.id}' is not a switch"
                )
                continue
            if src.id not in chains:
                chains[src.id] = _parse_chain(src.config)
            chain = chains[src.id]
            if chain is not None and chain.get(conn.from_condition_id) is None:
                errors.append(
                    f"Connection {conn.id} references unknown condition "
                    f"'{conn.from_condition_id}' of switch '{src.id}'"
                )

        return errors

    @staticmethod
    def validate_switches(graph: EditorGraph) -> list[str]:
        errors: list[str] = []
        for component in graph.components:
            if component.type != "switch":
                continue
            chain = _parse_chain(component.config)
            if chain is None:
                errors.append(f"Switch '{component.id}' has a malformed condition list")
                continue
            for condition in chain.conditions:
                target = condition.target_component_id
                if target is not None and graph.get_component(target) is None:
                    errors.append(
                        f"Switch '{component.id}' {condition.label} ({condition.id}) "
                        f"targets unknown component '{target}'"
                    )
            try:
                switch_chain.ensure_well_formed(chain)
                switch_chain.ensure_complete(chain)
            except EditorError as exc:
                errors.append(f"Switch '{component.id}': {exc.message}")
        return errors

    @staticmethod
    def validate_expression_components(graph: EditorGraph) -> list[str]:
        errors: list[str] = []
        for component in graph.components:
            if component.type != "expression":
                continue
            try:
                expression_rows.ensure_complete(expression_rows.rows_from_config(component.config))
            except ValidationError:
                errors.append(f"Expression component '{component.id}' has malformed rows")
            except EditorError as exc:
                errors.append(f"Expression component '{component.id}': {exc.message}")
        return errors

    @staticmethod
    def expression_warnings(graph: EditorGraph) -> list[str]:
        """Advisory lexical problems in stored expressions. Never blocks a save."""
        warnings: list[str] = []
        for component in graph.components:
            if component.type == "switch":
                chain = _parse_chain(component.config)
                for condition in chain.conditions if chain else ():
                    if condition.is_else or not condition.expression:
                        continue
                    for err in validate(condition.expression).errors:
                        warnings.append(f"Switch '{component.id}' {condition.label} ({condition.id}): {err}")
            elif component.type == "expression":
                try:
                    rows = expression_rows.rows_from_config(component.config)
                except ValidationError:
                    continue
                for row in rows:
                    for err in validate(row.expression).errors:
                        warnings.append(f"Expression component '{component.id}' key '{row.key}': {err}")
        return warnings


def _parse_chain(config: dict) -> SwitchChain | None:
    try:
        return SwitchChain.from_config(config)
    except ValidationError:
        return None


def validate_graph(graph: EditorGraph) -> list[str]:
    """Blocking problems across the whole graph. Empty when the graph can be saved."""
    return (
        GraphValidator.validate_connections(graph)
        + GraphValidator.validate_switches(graph)
        + GraphValidator.validate_expression_components(graph)
    )
