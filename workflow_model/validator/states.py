"""
Per-kind structural validators.

Each validator receives a decoded state and a RuleChecker rooted at the
state's model name, and appends every violation it finds.
"""

from __future__ import annotations

from typing import List, Optional, Union

from workflow_model.config import config
from workflow_model.logger import get_logger
from workflow_model.schema.models import (
    Action,
    BaseState,
    Branch,
    CompletionType,
    End,
    ForEachState,
    InjectState,
    OnError,
    OperationState,
    ParallelState,
    SleepState,
    StateReference,
    Transition,
)
from workflow_model.validator.rules import (
    ISO8601_DURATION,
    MIN,
    REQUIRED_IF,
    RuleChecker,
    is_iso8601_duration,
)

logger = get_logger(__name__)


def validate_base_state(state: BaseState, checker: RuleChecker) -> None:
    checker.required("name", state.name)
    checker.required("type", state.type)
    if state.transition is not None:
        _validate_transition(state.transition, checker.child("transition"))
    if isinstance(state.end, End):
        _validate_end(state.end, checker.child("end"))
    for index, on_error in enumerate(state.on_errors):
        _validate_on_error(on_error, checker.item("onErrors", index))


def validate_for_each_state(state: ForEachState, checker: RuleChecker) -> None:
    validate_base_state(state, checker)
    checker.required("inputCollection", state.input_collection)
    # Checked whenever present, regardless of mode.
    if state.batch_size is not None:
        checker.greater_than_zero("batchSize", state.batch_size)
    _validate_actions(state.actions, checker, owner=state.name)


def validate_operation_state(state: OperationState, checker: RuleChecker) -> None:
    validate_base_state(state, checker)
    _validate_actions(state.actions, checker, owner=state.name)


def validate_parallel_state(state: ParallelState, checker: RuleChecker) -> None:
    validate_base_state(state, checker)
    if not state.branches:
        checker.report("branches", MIN, "branches must contain at least one branch")
    for index, branch in enumerate(state.branches):
        _validate_branch(branch, checker.item("branches", index))

    if state.completion_type == CompletionType.at_least:
        if state.num_completed is None:
            checker.report(
                "numCompleted",
                REQUIRED_IF,
                'numCompleted is required when completionType is "atLeast"',
            )
        else:
            checker.greater_than_zero("numCompleted", state.num_completed)


def validate_sleep_state(state: SleepState, checker: RuleChecker) -> None:
    validate_base_state(state, checker)
    if checker.required("duration", state.duration) and not is_iso8601_duration(state.duration):
        checker.report(
            "duration",
            ISO8601_DURATION,
            f"duration '{state.duration}' is not an ISO 8601 duration",
        )


def validate_inject_state(state: InjectState, checker: RuleChecker) -> None:
    validate_base_state(state, checker)
    checker.required("data", state.data)


def validate_state_reference(state: StateReference, checker: RuleChecker) -> None:
    checker.required("ref", state.ref)


def _validate_actions(actions: List[Action], checker: RuleChecker, *, owner: str) -> None:
    if not actions:
        # Unverified convention, enforced only when require_actions is set.
        if config.require_actions:
            checker.report("actions", MIN, "actions must contain at least one action")
        else:
            logger.warning("State '%s' declares no actions", owner or "<unnamed>")
    for index, action in enumerate(actions):
        _validate_action(action, checker.item("actions", index))


def _validate_action(action: Action, checker: RuleChecker) -> None:
    if action.function_ref is not None:
        checker.child("functionRef").required("refName", action.function_ref.ref_name)
    if action.sub_flow_ref is not None:
        checker.child("subFlowRef").required("workflowId", action.sub_flow_ref.workflow_id)
    if action.event_ref is not None:
        event_checker = checker.child("eventRef")
        event_checker.required("triggerEventRef", action.event_ref.trigger_event_ref)
        event_checker.required("resultEventRef", action.event_ref.result_event_ref)
    if action.sleep is not None:
        sleep_checker = checker.child("sleep")
        _check_optional_duration(sleep_checker, "before", action.sleep.before)
        _check_optional_duration(sleep_checker, "after", action.sleep.after)


def _validate_branch(branch: Branch, checker: RuleChecker) -> None:
    checker.required("name", branch.name)
    _validate_actions(branch.actions, checker, owner=branch.name)


def _validate_transition(transition: Transition, checker: RuleChecker) -> None:
    checker.required("nextState", transition.next_state)
    for index, event in enumerate(transition.produce_events):
        checker.item("produceEvents", index).required("eventRef", event.event_ref)


def _validate_end(end: End, checker: RuleChecker) -> None:
    for index, event in enumerate(end.produce_events):
        checker.item("produceEvents", index).required("eventRef", event.event_ref)


def _validate_on_error(on_error: OnError, checker: RuleChecker) -> None:
    if not on_error.error_ref and not on_error.error_refs:
        checker.report("errorRef", REQUIRED_IF, "errorRef is required when errorRefs is empty")
    if on_error.transition is not None:
        _validate_transition(on_error.transition, checker.child("transition"))
    end: Optional[Union[bool, End]] = on_error.end
    if isinstance(end, End):
        _validate_end(end, checker.child("end"))


def _check_optional_duration(checker: RuleChecker, field: str, value: str) -> None:
    if value and not is_iso8601_duration(value):
        checker.report(field, ISO8601_DURATION, f"{field} '{value}' is not an ISO 8601 duration")
