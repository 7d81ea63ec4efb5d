"""Component type registry with default configurations."""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel

from schemas.graph import AnchorStr


class ComponentTypeSpec(BaseModel):
    component_type: str
    display_name: str
    description: str = ""
    category: str = "general"
    anchors: list[AnchorStr] = ["right", "left", "top", "bottom"]
    # Switch branches connect from their own per-condition anchors
    condition_anchors: bool = False
    configurable: bool = False


COMPONENT_TYPE_REGISTRY: dict[str, ComponentTypeSpec] = {}
_DEFAULT_CONFIGS: dict[str, Callable[[], dict[str, Any]]] = {}


def register_component_type(
    spec: ComponentTypeSpec,
    default_config: Callable[[], dict[str, Any]] | None = None,
) -> ComponentTypeSpec:
    COMPONENT_TYPE_REGISTRY[spec.component_type] = spec
    if default_config is not None:
        _DEFAULT_CONFIGS[spec.component_type] = default_config
    return spec


def get_component_type(component_type: str) -> ComponentTypeSpec | None:
    return COMPONENT_TYPE_REGISTRY.get(component_type)


def default_config(component_type: str) -> dict[str, Any]:
    """Fresh default config for a newly dropped component."""
    factory = _DEFAULT_CONFIGS.get(component_type)
    return factory() if factory else {}


def _switch_defaults() -> dict[str, Any]:
    from services.switch_chain import create_initial
    return create_initial().to_config()


def _expression_defaults() -> dict[str, Any]:
    from services.expression_rows import default_rows
    return {"rows": [row.model_dump() for row in default_rows()]}


# ── Built-in component types ──────────────────────────────────────────────────

register_component_type(ComponentTypeSpec(
    component_type="request",
    display_name="Request",
    description="Entry point carrying the incoming payload",
    category="io",
))

register_component_type(ComponentTypeSpec(
    component_type="response",
    display_name="Response",
    description="Terminal node producing the decision result",
    category="io",
))

register_component_type(
    ComponentTypeSpec(
        component_type="switch",
        display_name="Switch",
        description="Routes to branches through an ordered if / else if / else chain",
        category="logic",
        condition_anchors=True,
        configurable=True,
    ),
    default_config=_switch_defaults,
)

register_component_type(
    ComponentTypeSpec(
        component_type="expression",
        display_name="Expression",
        description="Maps output keys to expressions",
        category="logic",
        configurable=True,
    ),
    default_config=_expression_defaults,
)

register_component_type(ComponentTypeSpec(
    component_type="function",
    display_name="Function",
    description="Custom function step",
    category="logic",
))

register_component_type(ComponentTypeSpec(
    component_type="decision",
    display_name="Decision",
    description="Embedded decision graph",
    category="logic",
))

register_component_type(ComponentTypeSpec(
    component_type="decision-table",
    display_name="Decision Table",
    description="Rule table evaluated against the input",
    category="logic",
))
