"""
Pydantic models describing workflow states.

Field names follow Python conventions; aliases carry the author-facing
camelCase names used in workflow documents. Decoding only checks shapes and
fills defaults. Required-ness and value ranges are checked afterwards by
`workflow_model.validator`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator

from workflow_model.decoder.shapes import expand_shorthand
from workflow_model.schema.intstr import IntOrString


class DocumentModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )


# -----------------------------
# Enumerations
# -----------------------------
class ForEachModeType(str, Enum):
    sequential = "sequential"
    parallel = "parallel"


class ActionModeType(str, Enum):
    sequential = "sequential"
    parallel = "parallel"


class CompletionType(str, Enum):
    all_of = "allOf"
    at_least = "atLeast"


class InvokeKind(str, Enum):
    sync = "sync"
    async_ = "async"


class OnParentCompleteType(str, Enum):
    terminate = "terminate"
    continue_ = "continue"


# -----------------------------
# Flow control
# -----------------------------
class ProduceEvent(DocumentModel):
    event_ref: str = Field(default="", alias="eventRef")
    data: Optional[Union[str, Dict[str, Any]]] = None
    context_attributes: Dict[str, str] = Field(default_factory=dict, alias="contextAttributes")


class Transition(DocumentModel):
    """
    Accepts {"nextState": "..."} or the bare state name.
    """

    next_state: str = Field(default="", alias="nextState")
    produce_events: List[ProduceEvent] = Field(default_factory=list, alias="produceEvents")
    compensate: bool = False

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        return expand_shorthand("transition", value, "nextState")


class End(DocumentModel):
    terminate: bool = False
    produce_events: List[ProduceEvent] = Field(default_factory=list, alias="produceEvents")
    compensate: bool = False


class StateDataFilter(DocumentModel):
    input: str = ""
    output: str = ""


class OnError(DocumentModel):
    error_ref: str = Field(default="", alias="errorRef")
    error_refs: List[str] = Field(default_factory=list, alias="errorRefs")
    transition: Optional[Transition] = None
    end: Optional[Union[StrictBool, End]] = None


class StateExecTimeout(DocumentModel):
    """
    Accepts {"single": ..., "total": ...} or a bare total duration.
    """

    single: str = ""
    total: str = ""

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        return expand_shorthand("stateExecTimeout", value, "total")


class StateTimeouts(DocumentModel):
    state_exec_timeout: Optional[StateExecTimeout] = Field(default=None, alias="stateExecTimeout")
    action_exec_timeout: str = Field(default="", alias="actionExecTimeout")


# -----------------------------
# Actions
# -----------------------------
class FunctionRef(DocumentModel):
    ref_name: str = Field(default="", alias="refName")
    arguments: Dict[str, Any] = Field(default_factory=dict)
    selection_set: str = Field(default="", alias="selectionSet")
    invoke: InvokeKind = InvokeKind.sync

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        return expand_shorthand("functionRef", value, "refName")


class SubFlowRef(DocumentModel):
    workflow_id: str = Field(default="", alias="workflowId")
    version: str = ""
    invoke: InvokeKind = InvokeKind.sync
    on_parent_complete: OnParentCompleteType = Field(
        default=OnParentCompleteType.terminate, alias="onParentComplete"
    )

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        return expand_shorthand("subFlowRef", value, "workflowId")


class EventRef(DocumentModel):
    trigger_event_ref: str = Field(default="", alias="triggerEventRef")
    result_event_ref: str = Field(default="", alias="resultEventRef")
    result_event_timeout: str = Field(default="", alias="resultEventTimeout")
    data: Optional[Union[str, Dict[str, Any]]] = None
    context_attributes: Dict[str, Any] = Field(default_factory=dict, alias="contextAttributes")
    invoke: InvokeKind = InvokeKind.sync


class Sleep(DocumentModel):
    before: str = ""
    after: str = ""


class ActionDataFilter(DocumentModel):
    from_state_data: str = Field(default="", alias="fromStateData")
    use_results: bool = Field(default=True, alias="useResults")
    results: str = ""
    to_state_data: str = Field(default="", alias="toStateData")


class Action(DocumentModel):
    id: str = ""
    name: str = ""
    function_ref: Optional[FunctionRef] = Field(default=None, alias="functionRef")
    event_ref: Optional[EventRef] = Field(default=None, alias="eventRef")
    sub_flow_ref: Optional[SubFlowRef] = Field(default=None, alias="subFlowRef")
    sleep: Optional[Sleep] = None
    retry_ref: str = Field(default="", alias="retryRef")
    non_retryable_errors: List[str] = Field(default_factory=list, alias="nonRetryableErrors")
    retryable_errors: List[str] = Field(default_factory=list, alias="retryableErrors")
    action_data_filter: ActionDataFilter = Field(
        default_factory=ActionDataFilter, alias="actionDataFilter"
    )
    condition: str = ""


# -----------------------------
# States
# -----------------------------
class BaseState(DocumentModel):
    id: str = ""
    name: str = ""
    type: str = ""
    on_errors: List[OnError] = Field(default_factory=list, alias="onErrors")
    transition: Optional[Transition] = None
    state_data_filter: Optional[StateDataFilter] = Field(default=None, alias="stateDataFilter")
    compensated_by: str = Field(default="", alias="compensatedBy")
    end: Optional[Union[StrictBool, End]] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class ForEachState(BaseState):
    input_collection: str = Field(default="", alias="inputCollection")
    output_collection: str = Field(default="", alias="outputCollection")
    iteration_param: str = Field(default="", alias="iterationParam")
    # Only meaningful when mode is parallel, but accepted either way.
    batch_size: Optional[IntOrString] = Field(default=None, alias="batchSize")
    actions: List[Action] = Field(default_factory=list)
    timeouts: Optional[StateTimeouts] = None
    used_for_compensation: bool = Field(default=False, alias="usedForCompensation")
    mode: ForEachModeType = ForEachModeType.parallel


class OperationState(BaseState):
    action_mode: ActionModeType = Field(default=ActionModeType.sequential, alias="actionMode")
    actions: List[Action] = Field(default_factory=list)
    timeouts: Optional[StateTimeouts] = None
    used_for_compensation: bool = Field(default=False, alias="usedForCompensation")


class BranchTimeouts(DocumentModel):
    action_exec_timeout: str = Field(default="", alias="actionExecTimeout")
    branch_exec_timeout: str = Field(default="", alias="branchExecTimeout")


class Branch(DocumentModel):
    name: str = ""
    actions: List[Action] = Field(default_factory=list)
    timeouts: Optional[BranchTimeouts] = None


class ParallelState(BaseState):
    branches: List[Branch] = Field(default_factory=list)
    completion_type: CompletionType = Field(default=CompletionType.all_of, alias="completionType")
    num_completed: Optional[IntOrString] = Field(default=None, alias="numCompleted")
    timeouts: Optional[StateTimeouts] = None
    used_for_compensation: bool = Field(default=False, alias="usedForCompensation")


class SleepState(BaseState):
    duration: str = ""
    timeouts: Optional[StateTimeouts] = None


class InjectState(BaseState):
    data: Dict[str, Any] = Field(default_factory=dict)
    timeouts: Optional[StateTimeouts] = None
    used_for_compensation: bool = Field(default=False, alias="usedForCompensation")


class StateReference(DocumentModel):
    """
    A state written as a bare string. Resolving `ref` is up to the runtime.
    """

    kind: str
    ref: str


State = Union[ForEachState, OperationState, ParallelState, SleepState, InjectState]
