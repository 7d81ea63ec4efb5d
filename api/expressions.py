"""Stateless expression tooling: validation, highlighting, operator palette."""

from __future__ import annotations

from fastapi import APIRouter

from api._helpers import check_expression_length
from schemas.expression import ExpressionIn, ExpressionValidation, HighlightOut, OperatorsOut
from services.expression_highlighter import highlight, render_html
from services.expression_validator import validate
from services.operators import AVAILABLE_OPERATORS, HIGHLIGHT_FUNCTIONS

router = APIRouter()


@router.post("/validate/", response_model=ExpressionValidation)
def validate_expression(payload: ExpressionIn):
    check_expression_length(payload.expression)
    return validate(payload.expression)


@router.post("/highlight/", response_model=HighlightOut)
def highlight_expression(payload: ExpressionIn):
    check_expression_length(payload.expression)
    return {
        "spans": highlight(payload.expression),
        "html": render_html(payload.expression),
    }


@router.get("/operators/", response_model=OperatorsOut)
def list_operators():
    return {"operators": AVAILABLE_OPERATORS, "functions": list(HIGHLIGHT_FUNCTIONS)}
