"""Component, Connection and EditorGraph schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ComponentTypeStr = Literal[
    "request", "response", "switch", "expression", "function", "decision", "decision-table",
]
AnchorStr = Literal["right", "left", "top", "bottom"]


class Component(BaseModel):
    """A node on the canvas. Exported as ``{id, type, x, y, config}``."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ComponentTypeStr
    x: int = 0
    y: int = 0
    config: dict[str, Any] = {}

    @property
    def position(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def with_position(self, x: int, y: int) -> "Component":
        return self.model_copy(update={"x": x, "y": y})

    def with_config(self, config: dict[str, Any]) -> "Component":
        return self.model_copy(update={"config": config})


class Connection(BaseModel):
    """A directed edge between two components."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    from_component_id: str
    to_component_id: str
    from_position: AnchorStr = "right"
    to_position: AnchorStr = "left"
    from_condition_id: str | None = None

    @property
    def is_from_switch_condition(self) -> bool:
        return self.from_condition_id is not None

    def touches(self, component_id: str) -> bool:
        return component_id in (self.from_component_id, self.to_component_id)


class EditorGraph(BaseModel):
    """Component + connection registry owned by one editor session."""

    model_config = ConfigDict(frozen=True)

    components: tuple[Component, ...] = ()
    connections: tuple[Connection, ...] = ()

    def get_component(self, component_id: str) -> Component | None:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def get_connection(self, connection_id: str) -> Connection | None:
        for connection in self.connections:
            if connection.id == connection_id:
                return connection
        return None


# ── Request / response payloads ───────────────────────────────────────────────


class ComponentIn(BaseModel):
    type: ComponentTypeStr
    x: int = 0
    y: int = 0
    config: dict[str, Any] | None = None


class PositionUpdate(BaseModel):
    x: int
    y: int


class ConfigUpdate(BaseModel):
    config: dict[str, Any]


class ConnectionIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_component_id: str
    to_component_id: str
    from_position: AnchorStr = "right"
    to_position: AnchorStr = "left"
    from_condition_id: str | None = None


class EditorOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    editor_id: str
    components: list[Component]
    connections: list[Connection]


class ValidationOut(BaseModel):
    valid: bool
    errors: list[str] = []
    warnings: list[str] = []
