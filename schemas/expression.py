"""Expression tooling schemas — validation results, highlight spans, rows."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HighlightClassStr = Literal["string", "operator", "number", "property", "function", "plain"]


class ExpressionIn(BaseModel):
    expression: str = ""


class ExpressionValidation(BaseModel):
    valid: bool
    errors: list[str] = []


class HighlightSpan(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    kind: HighlightClassStr = Field("plain", alias="class")


class HighlightOut(BaseModel):
    spans: list[HighlightSpan]
    html: str


class OperatorOption(BaseModel):
    value: str
    label: str


class OperatorsOut(BaseModel):
    operators: list[OperatorOption]
    functions: list[str]


class ExpressionRow(BaseModel):
    """One key → expression mapping of an expression component."""

    model_config = ConfigDict(frozen=True)

    key: str = ""
    expression: str = ""


class ExpressionRowUpdate(BaseModel):
    key: str | None = None
    expression: str | None = None


class ExpressionRowsIn(BaseModel):
    rows: list[ExpressionRow]


class ExpressionRowsOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    component_id: str
    rows: list[ExpressionRow]
