"""Tests for the graph model — components, connections, switch and row commands."""

from __future__ import annotations

import pytest

from schemas.expression import ExpressionRow
from schemas.graph import EditorGraph
from services import graph as graph_ops
from services.errors import (
    ChainShapeViolation,
    ComponentNotFound,
    ConnectionRejected,
    IncompleteConfiguration,
    WrongComponentType,
)


def _two(graph, a="request", b="response"):
    graph, first = graph_ops.create_component(graph, a, 0, 0)
    graph, second = graph_ops.create_component(graph, b, 100, 0)
    return graph, first, second


class TestComponents:
    def test_create_component(self, graph):
        new_graph, component = graph_ops.create_component(graph, "request", 10, 20)
        assert component.id.startswith("request-")
        assert component.position == {"x": 10, "y": 20}
        assert new_graph.components == (component,)
        assert graph.components == ()

    def test_switch_gets_default_chain(self, switch_component):
        _, switch = switch_component
        conditions = switch.config["conditions"]
        assert len(conditions) == 1
        assert conditions[0]["type"] == "if"
        assert conditions[0]["expression"] == ""
        assert switch.config["mode"] == "first-match"

    def test_expression_gets_default_rows(self, graph):
        _, component = graph_ops.create_component(graph, "expression", 0, 0)
        assert [r["key"] for r in component.config["rows"]] == ["status", "admin"]

    def test_explicit_config_kept(self, graph):
        _, component = graph_ops.create_component(graph, "function", 0, 0, {"name": "f"})
        assert component.config == {"name": "f"}

    def test_malformed_switch_config_rejected(self, graph):
        bad = {"conditions": [{"id": "a", "type": "else"}, {"id": "b", "type": "if", "expression": "x"}]}
        with pytest.raises(ChainShapeViolation):
            graph_ops.create_component(graph, "switch", 0, 0, bad)

    def test_invalid_switch_config_types_rejected(self, graph):
        with pytest.raises(ChainShapeViolation, match="Malformed"):
            graph_ops.create_component(graph, "switch", 0, 0, {"conditions": [{"type": "maybe"}]})

    def test_update_position(self, graph):
        graph, component = graph_ops.create_component(graph, "request", 0, 0)
        graph, moved = graph_ops.update_position(graph, component.id, 50, 60)
        assert (moved.x, moved.y) == (50, 60)
        assert graph.get_component(component.id).x == 50

    def test_update_missing_component(self, graph):
        with pytest.raises(ComponentNotFound):
            graph_ops.update_position(graph, "nope", 1, 1)

    def test_update_config(self, graph):
        graph, component = graph_ops.create_component(graph, "decision-table", 0, 0)
        graph, updated = graph_ops.update_config(graph, component.id, {"rules": []})
        assert updated.config == {"rules": []}

    def test_delete_cascades_connections(self, graph):
        graph, a, b = _two(graph)
        graph, c = graph_ops.create_component(graph, "function", 50, 50)
        graph, _ = graph_ops.create_connection(graph, a.id, b.id)
        graph, _ = graph_ops.create_connection(graph, c.id, a.id)
        graph, keep = graph_ops.create_connection(graph, c.id, b.id)

        graph = graph_ops.delete_component(graph, a.id)
        assert graph.get_component(a.id) is None
        assert graph.connections == (keep,)
        assert not any(conn.touches(a.id) for conn in graph.connections)

    def test_delete_clears_condition_targets(self, wired_graph):
        graph, ids = wired_graph
        graph = graph_ops.delete_component(graph, ids["response"])
        chain = graph_ops.get_switch_chain(graph, ids["switch"])
        assert chain.get(ids["if"]).target_component_id is None

    def test_delete_keeps_unrelated_targets(self, wired_graph):
        graph, ids = wired_graph
        graph = graph_ops.delete_component(graph, ids["request"])
        chain = graph_ops.get_switch_chain(graph, ids["switch"])
        assert chain.get(ids["if"]).target_component_id == ids["response"]

    def test_unregistered_type_rejected(self, graph, monkeypatch):
        monkeypatch.setattr(graph_ops, "get_component_type", lambda _: None)
        with pytest.raises(WrongComponentType, match="Unknown component type"):
            graph_ops.create_component(graph, "function", 0, 0)

    def test_delete_missing_component(self, graph):
        with pytest.raises(ComponentNotFound):
            graph_ops.delete_component(graph, "ghost")


class TestConnections:
    def test_defaults(self, graph):
        graph, a, b = _two(graph)
        graph, conn = graph_ops.create_connection(graph, a.id, b.id)
        assert conn.id.startswith("conn-")
        assert conn.from_position == "right"
        assert conn.to_position == "left"
        assert conn.from_condition_id is None
        assert not conn.is_from_switch_condition

    @pytest.mark.parametrize("from_position,to_position,condition", [
        ("right", "left", None),
        ("top", "bottom", "cond-x"),
    ])
    def test_self_loop_always_rejected(self, switch_component, from_position, to_position, condition):
        graph, switch = switch_component
        with pytest.raises(ConnectionRejected):
            graph_ops.create_connection(graph, switch.id, switch.id, from_position, to_position, condition)

    def test_unknown_endpoint_rejected(self, graph):
        graph, a = graph_ops.create_component(graph, "request", 0, 0)
        with pytest.raises(ConnectionRejected, match="Unknown component"):
            graph_ops.create_connection(graph, a.id, "missing")

    def test_condition_connection_sets_target(self, wired_graph):
        graph, ids = wired_graph
        chain = graph_ops.get_switch_chain(graph, ids["switch"])
        assert chain.get(ids["if"]).target_component_id == ids["response"]

    def test_unknown_condition_id_stored_as_given(self, graph):
        graph, switch = graph_ops.create_component(graph, "switch", 0, 0)
        graph, target = graph_ops.create_component(graph, "response", 0, 0)
        graph, conn = graph_ops.create_connection(graph, switch.id, target.id, from_condition_id="cond-unknown")
        assert conn.from_condition_id == "cond-unknown"

    def test_delete_connection_clears_target(self, wired_graph):
        graph, ids = wired_graph
        conn = next(c for c in graph.connections if c.from_condition_id == ids["if"])
        graph = graph_ops.delete_connection(graph, conn.id)
        assert graph.get_connection(conn.id) is None
        assert graph_ops.get_switch_chain(graph, ids["switch"]).get(ids["if"]).target_component_id is None

    def test_delete_unknown_connection_is_noop(self, graph):
        assert graph_ops.delete_connection(graph, "conn-x") is graph

    def test_clear(self, wired_graph):
        graph, _ = wired_graph
        assert graph_ops.clear(graph) == EditorGraph()

    def test_export_shape(self, wired_graph):
        graph, ids = wired_graph
        exported = graph_ops.export(graph)
        switch = next(c for c in exported["components"] if c["id"] == ids["switch"])
        assert set(switch) == {"id", "type", "x", "y", "config"}
        assert set(switch["config"]) == {"conditions", "mode"}
        assert set(switch["config"]["conditions"][0]) == {"id", "type", "expression", "targetComponentId"}
        assert set(exported["connections"][0]) == {
            "id", "fromComponentId", "toComponentId", "fromPosition", "toPosition", "fromConditionId",
        }


class TestSwitchCommands:
    def test_end_to_end_chain(self, switch_component):
        graph, switch = switch_component
        chain = graph_ops.get_switch_chain(graph, switch.id)
        assert [(c.type, c.expression) for c in chain.conditions] == [("if", "")]
        assert chain.mode == "first-match"

        graph, chain = graph_ops.append_condition(graph, switch.id, "elseif")
        assert len(chain) == 2 and chain.conditions[1].type == "elseif"

        graph, chain = graph_ops.append_condition(graph, switch.id, "else")
        assert len(chain) == 3 and chain.conditions[-1].type == "else"

        with pytest.raises(ChainShapeViolation):
            graph_ops.append_condition(graph, switch.id, "elseif")
        assert len(graph_ops.get_switch_chain(graph, switch.id)) == 3

    def test_chain_ops_on_non_switch(self, graph):
        graph, comp = graph_ops.create_component(graph, "request", 0, 0)
        with pytest.raises(WrongComponentType):
            graph_ops.append_condition(graph, comp.id, "elseif")

    def test_remove_condition_drops_its_connections(self, wired_graph):
        graph, ids = wired_graph
        graph, chain = graph_ops.append_condition(graph, ids["switch"], "else")
        graph, chain = graph_ops.remove_condition(graph, ids["switch"], ids["if"])
        assert chain.get(ids["if"]) is None
        assert not any(c.from_condition_id == ids["if"] for c in graph.connections)
        # The plain request -> switch edge survives
        assert any(c.to_component_id == ids["switch"] for c in graph.connections)

    def test_update_expression_and_save(self, switch_component):
        graph, switch = switch_component
        if_id = graph_ops.get_switch_chain(graph, switch.id).conditions[0].id

        with pytest.raises(IncompleteConfiguration):
            graph_ops.save_switch(graph, switch.id)

        graph, _ = graph_ops.update_condition_expression(graph, switch.id, if_id, "user.age >= 18")
        graph, chain = graph_ops.save_switch(graph, switch.id, mode="all-matches")
        assert chain.mode == "all-matches"
        assert graph.get_component(switch.id).config["mode"] == "all-matches"

    def test_failed_save_leaves_mode_untouched(self, switch_component):
        graph, switch = switch_component
        with pytest.raises(IncompleteConfiguration):
            graph_ops.save_switch(graph, switch.id, mode="all-matches")
        assert graph_ops.get_switch_chain(graph, switch.id).mode == "first-match"

    def test_set_mode(self, switch_component):
        graph, switch = switch_component
        graph, chain = graph_ops.set_switch_mode(graph, switch.id, "all-matches")
        assert graph.get_component(switch.id).config["mode"] == "all-matches"


class TestExpressionRowCommands:
    def test_row_lifecycle(self, graph):
        graph, comp = graph_ops.create_component(graph, "expression", 0, 0)
        graph, rows = graph_ops.add_expression_row(graph, comp.id)
        assert len(rows) == 3
        graph, rows = graph_ops.update_expression_row(graph, comp.id, 2, key="score", expression="a + b")
        assert rows[2] == ExpressionRow(key="score", expression="a + b")
        graph, rows = graph_ops.remove_expression_row(graph, comp.id, 0)
        assert [r.key for r in rows] == ["admin", "score"]
        assert graph.get_component(comp.id).config["rows"][1]["key"] == "score"

    def test_save_requires_keys(self, graph):
        graph, comp = graph_ops.create_component(graph, "expression", 0, 0)
        with pytest.raises(IncompleteConfiguration):
            graph_ops.save_expression_rows(graph, comp.id, [ExpressionRow(key="", expression="1")])

    def test_save_rows(self, graph):
        graph, comp = graph_ops.create_component(graph, "expression", 0, 0)
        graph, rows = graph_ops.save_expression_rows(graph, comp.id, [ExpressionRow(key="k", expression="1")])
        assert graph.get_component(comp.id).config["rows"] == [{"key": "k", "expression": "1"}]

    def test_rows_on_switch_rejected(self, switch_component):
        graph, switch = switch_component
        with pytest.raises(WrongComponentType):
            graph_ops.get_expression_rows(graph, switch.id)
