"""Switch condition schemas — conditions, chains, and chain mutation payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from schemas.expression import ExpressionValidation

ConditionTypeStr = Literal["if", "elseif", "else"]
EvaluationModeStr = Literal["first-match", "all-matches"]

CONDITION_LABELS: dict[str, str] = {
    "if": "If",
    "elseif": "Else If",
    "else": "Else",
}


class Condition(BaseModel):
    """One branch of a switch component."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    type: ConditionTypeStr
    expression: str | None = None
    target_component_id: str | None = None

    @property
    def is_else(self) -> bool:
        return self.type == "else"

    @property
    def label(self) -> str:
        return CONDITION_LABELS[self.type]

    def has_valid_expression(self) -> bool:
        # Else is the default branch and needs no expression
        if self.is_else:
            return True
        return bool(self.expression)


class SwitchChain(BaseModel):
    """Ordered conditions of one switch component plus its evaluation mode."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    conditions: tuple[Condition, ...] = ()
    mode: EvaluationModeStr = "first-match"

    def __len__(self) -> int:
        return len(self.conditions)

    @property
    def has_else(self) -> bool:
        return any(c.is_else for c in self.conditions)

    def get(self, condition_id: str) -> Condition | None:
        for condition in self.conditions:
            if condition.id == condition_id:
                return condition
        return None

    def to_config(self) -> dict[str, Any]:
        """Serialize into the owning component's config blob."""
        return {
            "conditions": [c.model_dump(by_alias=True) for c in self.conditions],
            "mode": self.mode,
        }

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SwitchChain":
        return cls.model_validate({
            "conditions": config.get("conditions") or [],
            "mode": config.get("mode") or "first-match",
        })


# ── Request / response payloads ───────────────────────────────────────────────


class ConditionAppendIn(BaseModel):
    type: ConditionTypeStr


class ConditionExpressionIn(BaseModel):
    expression: str


class SwitchModeIn(BaseModel):
    mode: EvaluationModeStr


class SwitchSaveIn(BaseModel):
    mode: EvaluationModeStr | None = None


class ConditionOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: ConditionTypeStr
    label: str
    expression: str | None = None
    target_component_id: str | None = None
    validation: ExpressionValidation | None = None


class SwitchChainOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    component_id: str
    mode: EvaluationModeStr
    conditions: list[ConditionOut]
