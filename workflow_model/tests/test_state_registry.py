from __future__ import annotations

import pytest

from workflow_model.decoder.state import decode_state
from workflow_model.errors import DecodeError, StateValidationError
from workflow_model.registry.state_registry import (
    BUILTIN_REGISTRY,
    RegistryFrozenError,
    StateKind,
    StateKindNotFoundError,
    StateKindRegistry,
    default_registry,
)
from workflow_model.schema.intstr import IntOrString
from workflow_model.schema.models import (
    ActionModeType,
    BaseState,
    CompletionType,
    ForEachState,
    InjectState,
    OperationState,
    ParallelState,
    SleepState,
)
from workflow_model.validator.rules import RuleChecker
from workflow_model.validator.structural import collect_violations, validate_state


class EchoState(BaseState):
    message: str = ""


def _validate_echo_state(state: EchoState, checker: RuleChecker) -> None:
    checker.required("message", state.message)


def _echo_registry() -> StateKindRegistry:
    registry = default_registry()
    registry.register(
        StateKind("echo", "echoState", EchoState, _validate_echo_state, allow_shorthand=False)
    )
    return registry


def _rules(state, registry: StateKindRegistry | None = None) -> list[tuple[str, str]]:
    return [(v.namespace, v.rule) for v in collect_violations(state, registry=registry)]


def test_default_registry_lists_builtin_kinds() -> None:
    registry = default_registry()

    assert registry.kinds() == ["foreach", "inject", "operation", "parallel", "sleep"]
    assert registry.get("foreach").model is ForEachState
    assert registry.maybe_get("switch") is None
    with pytest.raises(StateKindNotFoundError):
        registry.get("switch")


def test_decode_dispatches_on_type_when_kind_is_omitted() -> None:
    state = decode_state({"type": "sleep", "name": "Pause", "duration": "PT5S"})

    assert isinstance(state, SleepState)
    assert validate_state(state) is state


@pytest.mark.parametrize("raw", ["Pause", {"name": "Pause"}, {"type": 3}])
def test_decode_without_kind_requires_typed_object(raw) -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_state(raw)

    assert excinfo.value.label == "state"


def test_decode_rejects_unknown_kind() -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_state({"type": "switch"})

    assert "unknown state type 'switch'" in str(excinfo.value)


def test_registered_kind_decodes_and_validates() -> None:
    registry = _echo_registry()

    state = decode_state({"name": "Say", "type": "echo", "message": "hi"}, "echo", registry=registry)

    assert isinstance(state, EchoState)
    assert validate_state(state, registry=registry) is state

    with pytest.raises(StateValidationError) as excinfo:
        validate_state(EchoState(name="Say", type="echo"), registry=registry)
    assert excinfo.value.violations[0].namespace == "EchoState.message"


def test_kind_without_shorthand_rejects_strings() -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_state("Say", "echo", registry=_echo_registry())

    assert "it must be an object" in str(excinfo.value)
    assert "or string" not in str(excinfo.value)


def test_registering_a_kind_leaves_the_builtin_registry_alone() -> None:
    _echo_registry()

    with pytest.raises(DecodeError):
        decode_state({"message": "hi"}, "echo")


def test_operation_state_defaults_to_sequential_action_mode() -> None:
    state = decode_state({"name": "Op", "type": "operation", "actions": [{}]}, "operation")

    assert isinstance(state, OperationState)
    assert state.action_mode == ActionModeType.sequential
    assert _rules(state) == []

    with pytest.raises(DecodeError):
        decode_state({"actionMode": "random"}, "operation")


def test_parallel_state_completion_rules() -> None:
    base = {"name": "Fan", "type": "parallel", "branches": [{"name": "a", "actions": [{}]}]}

    state = decode_state(base, "parallel")
    assert isinstance(state, ParallelState)
    assert state.completion_type == CompletionType.all_of
    assert _rules(state) == []

    missing = decode_state({**base, "completionType": "atLeast"}, "parallel")
    assert _rules(missing) == [("ParallelState.numCompleted", "required_if")]

    zero = decode_state({**base, "completionType": "atLeast", "numCompleted": "0"}, "parallel")
    assert _rules(zero) == [("ParallelState.numCompleted", "gt0")]

    two = decode_state({**base, "completionType": "atLeast", "numCompleted": 2}, "parallel")
    assert two.num_completed == IntOrString.from_int(2)
    assert _rules(two) == []


def test_parallel_state_requires_named_branches() -> None:
    state = decode_state({"name": "Fan", "type": "parallel", "branches": [{"actions": [{}]}]}, "parallel")
    assert _rules(state) == [("ParallelState.branches[0].name", "required")]

    empty = decode_state({"name": "Fan", "type": "parallel"}, "parallel")
    assert _rules(empty) == [("ParallelState.branches", "min")]


@pytest.mark.parametrize(
    "duration, expected",
    [
        ("PT5S", []),
        ("P1DT2H", []),
        ("PT0.5S", []),
        ("", [("SleepState.duration", "required")]),
        ("5 seconds", [("SleepState.duration", "iso8601duration")]),
        ("P", [("SleepState.duration", "iso8601duration")]),
        ("PT", [("SleepState.duration", "iso8601duration")]),
    ],
)
def test_sleep_state_duration(duration, expected) -> None:
    state = decode_state({"name": "Pause", "type": "sleep", "duration": duration}, "sleep")

    assert _rules(state) == expected


def test_inject_state_requires_data() -> None:
    state = decode_state({"name": "Seed", "type": "inject", "data": {"count": 1}}, "inject")
    assert isinstance(state, InjectState)
    assert _rules(state) == []

    empty = decode_state({"name": "Seed", "type": "inject"}, "inject")
    assert _rules(empty) == [("InjectState.data", "required")]


def test_builtin_registry_is_read_only() -> None:
    hijack = StateKind("foreach", "hijacked", ForEachState, _validate_echo_state)

    with pytest.raises(RegistryFrozenError):
        BUILTIN_REGISTRY.register(hijack)

    assert BUILTIN_REGISTRY.get("foreach").label == "forEachState"
    assert decode_state({}, "foreach").mode.value == "parallel"


class AuditedForEachState(ForEachState):
    auditor: str = ""


def _validate_audited_for_each(state: AuditedForEachState, checker: RuleChecker) -> None:
    checker.required("auditor", state.auditor)


def test_subclassed_model_requires_its_own_registry() -> None:
    registry = default_registry()
    registry.register(
        StateKind("auditedForeach", "auditedForEachState", AuditedForEachState, _validate_audited_for_each)
    )

    state = decode_state({"name": "Loop"}, "auditedForeach", registry=registry)

    assert _rules(state, registry) == [("AuditedForEachState.auditor", "required")]
    with pytest.raises(StateKindNotFoundError):
        collect_violations(state)
