"""
Rule primitives and the violation collector used by the state validators.
"""

from __future__ import annotations

import re
from typing import List, Optional

from workflow_model.errors import Violation
from workflow_model.schema.intstr import IntOrString


REQUIRED = "required"
REQUIRED_IF = "required_if"
GT0 = "gt0"
MIN = "min"
ISO8601_DURATION = "iso8601duration"

_ISO8601_DURATION_RE = re.compile(
    r"P(?!$)(\d+Y)?(\d+M)?(\d+W)?(\d+D)?(T(?=\d)(\d+H)?(\d+M)?(\d+(\.\d+)?S)?)?"
)


def resolves_above_zero(value: IntOrString) -> bool:
    """
    True when the value resolves to an integer greater than zero.

    An unparsable string counts as a failure, same as zero or a negative.
    """

    try:
        return value.int_value() > 0
    except ValueError:
        return False


def is_iso8601_duration(value: str) -> bool:
    return bool(_ISO8601_DURATION_RE.fullmatch(value))


class RuleChecker:
    """
    Collects violations under a dotted namespace.

    Children share the parent's violation list, so nested checks append in
    document order.
    """

    def __init__(self, namespace: str, violations: Optional[List[Violation]] = None) -> None:
        self.namespace = namespace
        self.violations: List[Violation] = violations if violations is not None else []

    def child(self, field: str) -> "RuleChecker":
        return RuleChecker(f"{self.namespace}.{field}", self.violations)

    def item(self, field: str, index: int) -> "RuleChecker":
        return RuleChecker(f"{self.namespace}.{field}[{index}]", self.violations)

    def report(self, field: str, rule: str, message: str) -> None:
        self.violations.append(
            Violation(
                namespace=f"{self.namespace}.{field}",
                field=field,
                rule=rule,
                message=message,
            )
        )

    def required(self, field: str, value: object) -> bool:
        if value:
            return True
        self.report(field, REQUIRED, f"{field} is required")
        return False

    def greater_than_zero(self, field: str, value: IntOrString) -> bool:
        if resolves_above_zero(value):
            return True
        self.report(field, GT0, f"{field} must be greater than zero, received '{value}'")
        return False
