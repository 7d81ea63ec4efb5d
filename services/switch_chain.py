"""Switch condition chain — ordered if / elseif / else branches of a switch.

Every operation is pure: it takes a :class:`SwitchChain` and returns a new
one (or raises :class:`ChainShapeViolation`, leaving the input untouched).

Shape rules enforced on append:

* the first condition of a chain is always ``if``
* ``if`` can never be appended to a non-empty chain
* nothing can be appended once an ``else`` exists
* ``elseif`` / ``else`` are only ever appended, never inserted
"""

from __future__ import annotations

import logging
import secrets

from schemas.switch import Condition, ConditionTypeStr, EvaluationModeStr, SwitchChain
from services.errors import ChainShapeViolation, IncompleteConfiguration, InvalidEvaluationMode

logger = logging.getLogger(__name__)

EVALUATION_MODES: tuple[str, ...] = ("first-match", "all-matches")


def new_condition_id() -> str:
    return f"cond-{secrets.token_hex(4)}"


def create_initial() -> SwitchChain:
    """A fresh chain: a single empty ``if`` in first-match mode."""
    return SwitchChain(
        conditions=(Condition(id=new_condition_id(), type="if", expression=""),),
        mode="first-match",
    )


def append(chain: SwitchChain, condition_type: ConditionTypeStr) -> SwitchChain:
    if not chain.conditions:
        if condition_type != "if":
            raise ChainShapeViolation("A switch chain must start with an 'if' condition.")
    elif condition_type == "if":
        raise ChainShapeViolation("An 'if' condition can only start a switch chain.")
    elif condition_type == "else" and chain.has_else:
        raise ChainShapeViolation("Else condition already exists.")
    elif chain.has_else:
        raise ChainShapeViolation("Cannot add more conditions after 'Else'.")

    expression = None if condition_type == "else" else ""
    condition = Condition(id=new_condition_id(), type=condition_type, expression=expression)
    logger.debug("Appending %s condition %s", condition_type, condition.id)
    return chain.model_copy(update={"conditions": chain.conditions + (condition,)})


def remove(chain: SwitchChain, condition_id: str) -> SwitchChain:
    """Drop the matching condition wherever it sits. Unknown ids are a no-op.

    Removing the last remaining condition is allowed here; callers that need
    at least one branch enforce that themselves.
    """
    remaining = tuple(c for c in chain.conditions if c.id != condition_id)
    if len(remaining) == len(chain.conditions):
        return chain
    return chain.model_copy(update={"conditions": remaining})


def update_expression(chain: SwitchChain, condition_id: str, expression: str) -> SwitchChain:
    """Replace one condition's expression without validating it.

    Else conditions carry no expression, so updates to them are ignored.
    """
    return _replace(chain, condition_id, lambda c: (
        c if c.is_else else c.model_copy(update={"expression": expression})
    ))


def set_target(chain: SwitchChain, condition_id: str, target_component_id: str | None) -> SwitchChain:
    return _replace(chain, condition_id, lambda c: c.model_copy(
        update={"target_component_id": target_component_id},
    ))


def set_mode(chain: SwitchChain, mode: EvaluationModeStr) -> SwitchChain:
    if mode not in EVALUATION_MODES:
        raise InvalidEvaluationMode(f"Unknown evaluation mode '{mode}'. Expected one of {list(EVALUATION_MODES)}")
    return chain.model_copy(update={"mode": mode})


def ensure_well_formed(chain: SwitchChain) -> SwitchChain:
    """Check the full shape of a chain supplied from outside (e.g. a config blob)."""
    conditions = chain.conditions
    if not conditions:
        return chain
    if conditions[0].type != "if":
        raise ChainShapeViolation("A switch chain must start with an 'if' condition.")
    if any(c.type == "if" for c in conditions[1:]):
        raise ChainShapeViolation("An 'if' condition can only start a switch chain.")
    else_positions = [i for i, c in enumerate(conditions) if c.is_else]
    if len(else_positions) > 1:
        raise ChainShapeViolation("Else condition already exists.")
    if else_positions and else_positions[0] != len(conditions) - 1:
        raise ChainShapeViolation("Cannot add more conditions after 'Else'.")
    ids = [c.id for c in conditions]
    if len(set(ids)) != len(ids):
        raise ChainShapeViolation("Condition ids must be unique within a switch chain.")
    return chain


def ensure_complete(chain: SwitchChain) -> SwitchChain:
    """Every non-else condition needs a non-blank expression before saving."""
    missing = [
        c.id for c in chain.conditions
        if not c.is_else and not (c.expression or "").strip()
    ]
    if missing:
        logger.info("Refusing to save switch chain, empty expressions on %s", missing)
        raise IncompleteConfiguration("Please fill in all condition expressions")
    return chain


def _replace(chain: SwitchChain, condition_id: str, fn) -> SwitchChain:
    if chain.get(condition_id) is None:
        return chain
    conditions = tuple(fn(c) if c.id == condition_id else c for c in chain.conditions)
    return chain.model_copy(update={"conditions": conditions})
