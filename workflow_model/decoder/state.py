"""
Decode a raw document fragment into a typed state.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Optional, Union

from pydantic import ValidationError

from workflow_model.decoder.shapes import Shape, classify_object_or_string
from workflow_model.errors import DecodeError
from workflow_model.logger import get_logger
from workflow_model.registry.state_registry import (
    BUILTIN_REGISTRY,
    StateKind,
    StateKindNotFoundError,
    StateKindRegistry,
)
from workflow_model.schema.models import BaseState, StateReference

logger = get_logger(__name__)


def decode_state(
    raw: Any,
    kind: Optional[str] = None,
    *,
    registry: Optional[StateKindRegistry] = None,
) -> Union[BaseState, StateReference]:
    """
    Decode the fragment found at a state position.

    `kind` names the expected state type. Without it the fragment must be an
    object carrying a registered `type`. Objects decode into the kind's model
    with defaults applied; strings become a StateReference. Any failure
    raises DecodeError and no partial state is returned.
    """

    registry = registry or BUILTIN_REGISTRY
    state_kind = _resolve_kind(raw, kind, registry)

    try:
        shape = classify_object_or_string(state_kind.label, raw)
    except ValueError as exc:
        raise DecodeError(state_kind.label, raw) from exc

    if shape == Shape.string:
        if not state_kind.allow_shorthand:
            raise DecodeError(state_kind.label, raw, accepted="an object")
        logger.debug("Decoded %s reference '%s'", state_kind.type, raw)
        return StateReference(kind=state_kind.type, ref=raw)

    try:
        # Decoded states must not share containers with the caller's document.
        state = state_kind.model.model_validate(deepcopy(raw))
    except ValidationError as exc:
        field, reason = _describe_first_error(exc)
        raise DecodeError(state_kind.label, raw, field=field, reason=reason) from exc

    logger.debug("Decoded %s state '%s'", state_kind.type, state.name)
    return state


def _resolve_kind(raw: Any, kind: Optional[str], registry: StateKindRegistry) -> StateKind:
    if kind is None:
        if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
            raise DecodeError(
                "state",
                raw,
                accepted="an object with a string 'type' when no kind is given",
            )
        kind = raw["type"]

    try:
        return registry.get(kind)
    except StateKindNotFoundError as exc:
        raise DecodeError(
            "state",
            raw,
            reason=f"unknown state type '{kind}'",
            accepted=f"one of: {', '.join(registry.kinds())}",
        ) from exc


def _describe_first_error(exc: ValidationError) -> tuple[str, str]:
    errors = exc.errors()
    first = errors[0]
    reason = first["msg"]
    if len(errors) > 1:
        reason += f" (and {len(errors) - 1} more)"
    return _format_loc(first["loc"]), reason


def _format_loc(loc: tuple) -> str:
    path = ""
    for token in loc:
        if isinstance(token, int):
            path += f"[{token}]"
        elif path:
            path += f".{token}"
        else:
            path = str(token)
    return path or "$"
