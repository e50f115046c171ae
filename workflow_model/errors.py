"""
Shared exception hierarchy for workflow state decoding and validation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


class WorkflowModelError(Exception):
    """Base class for all workflow model errors."""


def render_literal(value: Any) -> str:
    """
    Render a raw document value the way an author would have written it.
    """

    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def unsupported_value_message(label: str, value: Any, accepted: str = "an object or string") -> str:
    return f"{label} value '{render_literal(value)}' is not supported, it must be {accepted}"


class DecodeError(WorkflowModelError):
    """Raised when a raw fragment does not match any accepted shape."""

    def __init__(
        self,
        label: str,
        value: Any,
        *,
        field: Optional[str] = None,
        reason: Optional[str] = None,
        accepted: str = "an object or string",
    ) -> None:
        self.label = label
        self.value = value
        self.field = field
        self.reason = reason
        self.accepted = accepted
        super().__init__(self._format())

    def _format(self) -> str:
        message = unsupported_value_message(self.label, self.value, self.accepted)
        if self.field and self.reason:
            message += f" ({self.field}: {self.reason})"
        elif self.reason:
            message += f" ({self.reason})"
        return message


@dataclass(frozen=True)
class Violation:
    """
    A single failed rule on a decoded value.

    namespace is the dotted path from the state model down to the field,
    using author-facing field names (e.g. "ForEachState.batchSize").
    """

    namespace: str
    field: str
    rule: str
    message: str

    def __str__(self) -> str:
        return (
            f"Key: '{self.namespace}' Error:Field validation for '{self.field}' "
            f"failed on the '{self.rule}' tag"
        )


class StateValidationError(WorkflowModelError):
    """Raised when a decoded state fails one or more structural rules."""

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations: List[Violation] = list(violations)
        super().__init__("\n".join(str(violation) for violation in self.violations))

    @property
    def rules(self) -> List[str]:
        return [violation.rule for violation in self.violations]
