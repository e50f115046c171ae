"""
Public entrypoint for decoding and validating workflow states.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from workflow_model.decoder.state import decode_state
from workflow_model.errors import (
    DecodeError,
    StateValidationError,
    Violation,
    WorkflowModelError,
)
from workflow_model.logger import get_logger
from workflow_model.registry.state_registry import (
    RegistryFrozenError,
    StateKind,
    StateKindNotFoundError,
    StateKindRegistry,
    default_registry,
)
from workflow_model.schema.intstr import IntOrString, IntOrStringType
from workflow_model.schema.models import (
    Action,
    BaseState,
    ForEachModeType,
    ForEachState,
    StateReference,
)
from workflow_model.validator.structural import collect_violations, validate_state

logger = get_logger(__name__)


def load_state(
    raw: Any,
    kind: Optional[str] = None,
    *,
    registry: Optional[StateKindRegistry] = None,
) -> Union[BaseState, StateReference]:
    """
    Decode a state fragment and validate it.

    Raises DecodeError when the fragment has an unsupported shape (validation
    never runs in that case) and StateValidationError listing every rule the
    decoded state breaks.
    """

    try:
        state = decode_state(raw, kind, registry=registry)
    except DecodeError as exc:
        logger.warning("Rejected state fragment: %s", exc)
        raise
    try:
        return validate_state(state, registry=registry)
    except StateValidationError as exc:
        logger.warning(
            "State '%s' failed validation with %d violation(s)",
            getattr(state, "name", getattr(state, "ref", "")),
            len(exc.violations),
        )
        raise


__all__ = [
    "Action",
    "BaseState",
    "DecodeError",
    "ForEachModeType",
    "ForEachState",
    "IntOrString",
    "IntOrStringType",
    "RegistryFrozenError",
    "StateKind",
    "StateKindNotFoundError",
    "StateKindRegistry",
    "StateReference",
    "StateValidationError",
    "Violation",
    "WorkflowModelError",
    "collect_violations",
    "decode_state",
    "default_registry",
    "load_state",
    "validate_state",
]
