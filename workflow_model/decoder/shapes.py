"""
Shape helpers shared by the state models and the state decoder.

The document format lets authors write several fields either as a full object
or as a bare string shorthand. These helpers branch on the raw shape and
reject everything else explicitly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel

from workflow_model.errors import unsupported_value_message


class Shape(str, Enum):
    object = "object"
    string = "string"


def classify_object_or_string(label: str, value: Any) -> Shape:
    if isinstance(value, dict):
        return Shape.object
    if isinstance(value, str):
        return Shape.string
    raise ValueError(unsupported_value_message(label, value))


def expand_shorthand(label: str, value: Any, key: str) -> Any:
    """
    Normalize an object-or-string field into its object form.

    A string is bound to `key`; objects (and already-built models) pass
    through untouched so pydantic can decode them field by field.
    """

    if isinstance(value, BaseModel):
        return value
    if classify_object_or_string(label, value) == Shape.string:
        return {key: value}
    return value
