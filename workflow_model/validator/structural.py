"""
Structural validation of decoded states.

Runs only on values the decoder produced. Every rule is evaluated and all
violations are reported together.
"""

from __future__ import annotations

from typing import List, Optional, TypeVar, Union

from workflow_model.errors import StateValidationError, Violation
from workflow_model.logger import get_logger
from workflow_model.registry.state_registry import BUILTIN_REGISTRY, StateKindRegistry
from workflow_model.schema.models import BaseState, StateReference
from workflow_model.validator.rules import RuleChecker
from workflow_model.validator.states import validate_state_reference

logger = get_logger(__name__)

StateT = TypeVar("StateT", bound=Union[BaseState, StateReference])


def collect_violations(
    state: Union[BaseState, StateReference],
    *,
    registry: Optional[StateKindRegistry] = None,
) -> List[Violation]:
    if isinstance(state, StateReference):
        checker = RuleChecker(type(state).__name__)
        validate_state_reference(state, checker)
        return checker.violations

    if not isinstance(state, BaseState):
        raise TypeError(
            f"Expected a decoded state, received {type(state).__name__}; decode it first"
        )

    state_kind = (registry or BUILTIN_REGISTRY).for_model(type(state))
    checker = RuleChecker(type(state).__name__)
    state_kind.validate(state, checker)
    return checker.violations


def validate_state(state: StateT, *, registry: Optional[StateKindRegistry] = None) -> StateT:
    """
    Raise StateValidationError listing every violation, or return the state.
    """

    violations = collect_violations(state, registry=registry)
    if violations:
        logger.debug("State failed %d rule(s): %s", len(violations), [v.rule for v in violations])
        raise StateValidationError(violations)
    return state
