"""
Registry of state kinds.

Each kind pairs the pydantic model used to decode its object form with the
validator that checks the decoded value. The decoder and the validator only
ever go through the registry, so adding a kind means registering it here.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Type

from workflow_model.schema.models import (
    BaseState,
    ForEachState,
    InjectState,
    OperationState,
    ParallelState,
    SleepState,
)
from workflow_model.validator.rules import RuleChecker
from workflow_model.validator.states import (
    validate_for_each_state,
    validate_inject_state,
    validate_operation_state,
    validate_parallel_state,
    validate_sleep_state,
)


StateValidator = Callable[[BaseState, RuleChecker], None]


@dataclass(frozen=True)
class StateKind:
    type: str
    label: str
    model: Type[BaseState]
    validate: StateValidator
    allow_shorthand: bool = True


class StateKindNotFoundError(KeyError):
    """Raised when attempting to access an unknown state kind."""


class RegistryFrozenError(TypeError):
    """Raised when registering into a read-only registry."""


class StateKindRegistry:
    """
    Maps state type discriminators (e.g. "foreach") to their StateKind.
    """

    def __init__(self, initial: Mapping[str, StateKind] | None = None) -> None:
        self._kinds: Dict[str, StateKind] = dict(initial or {})

    def register(self, kind: StateKind) -> None:
        """
        Register (or override) a state kind.
        """
        self._kinds[kind.type] = kind

    def get(self, type_: str) -> StateKind:
        try:
            return self._kinds[type_]
        except KeyError as exc:
            raise StateKindNotFoundError(f"State kind '{type_}' is not registered") from exc

    def maybe_get(self, type_: str) -> Optional[StateKind]:
        return self._kinds.get(type_)

    def for_model(self, model: Type[BaseState]) -> StateKind:
        """
        Find the kind registered for exactly this model class.

        Subclasses of a registered model are not matched: a state decoded
        through a custom registry must be validated with that same registry.
        """
        for kind in self._kinds.values():
            if kind.model is model:
                return kind
        raise StateKindNotFoundError(
            f"No state kind is registered for model {model.__name__}; "
            "pass the registry used to decode it"
        )

    def kinds(self) -> List[str]:
        return sorted(self._kinds)


class FrozenStateKindRegistry(StateKindRegistry):
    """
    Read-only registry. Safe to share across threads without locking.
    """

    def __init__(self, initial: Mapping[str, StateKind] | None = None) -> None:
        super().__init__(initial)
        self._kinds = MappingProxyType(dict(self._kinds))  # type: ignore[assignment]

    def register(self, kind: StateKind) -> None:
        raise RegistryFrozenError(
            f"Cannot register '{kind.type}': this registry is read-only, "
            "build one with default_registry() instead"
        )


BUILTIN_KINDS = (
    StateKind("foreach", "forEachState", ForEachState, validate_for_each_state),
    StateKind("operation", "operationState", OperationState, validate_operation_state),
    StateKind("parallel", "parallelState", ParallelState, validate_parallel_state),
    StateKind("sleep", "sleepState", SleepState, validate_sleep_state),
    StateKind("inject", "injectState", InjectState, validate_inject_state),
)


def default_registry() -> StateKindRegistry:
    """
    Fresh, mutable registry holding the built-in state kinds.
    """
    registry = StateKindRegistry()
    for kind in BUILTIN_KINDS:
        registry.register(kind)
    return registry


# Used by decode_state/validate_state when no registry is passed.
BUILTIN_REGISTRY = FrozenStateKindRegistry({kind.type: kind for kind in BUILTIN_KINDS})
