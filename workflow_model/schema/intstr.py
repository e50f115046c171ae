"""
Numeric-or-text values.

Some workflow fields accept either a literal integer or a string (the string
may be a templated expression evaluated by the runtime). The decoder keeps the
author's representation untouched; integer resolution only happens when a
rule actually needs the number.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


class IntOrStringType(str, Enum):
    int = "int"
    string = "string"


@dataclass(frozen=True)
class IntOrString:
    """
    Holds exactly one of an integer or a string.

    Examples:
      - IntOrString.from_int(4)
      - IntOrString.from_string("${ .batch }")
    """

    type: IntOrStringType
    int_val: int = 0
    str_val: str = ""

    def __post_init__(self) -> None:
        if self.type == IntOrStringType.int:
            if isinstance(self.int_val, bool) or not isinstance(self.int_val, int):
                raise TypeError(f"int_val must be an int, received {type(self.int_val).__name__}")
            if self.str_val != "":
                raise ValueError("IntOrString of type int cannot carry a string value")
        else:
            if not isinstance(self.str_val, str):
                raise TypeError(f"str_val must be a str, received {type(self.str_val).__name__}")
            if self.int_val != 0:
                raise ValueError("IntOrString of type string cannot carry an int value")

    @classmethod
    def from_int(cls, value: int) -> "IntOrString":
        return cls(type=IntOrStringType.int, int_val=value)

    @classmethod
    def from_string(cls, value: str) -> "IntOrString":
        return cls(type=IntOrStringType.string, str_val=value)

    @classmethod
    def decode(cls, value: Any) -> "IntOrString":
        """
        Build an IntOrString from a raw JSON value.

        Strings are stored verbatim. Integral numbers become the int variant,
        fractional numbers and booleans are rejected.
        """

        if isinstance(value, IntOrString):
            return value
        if isinstance(value, bool):
            raise ValueError(f"value {value!r} is not supported, it must be an integer or string")
        if isinstance(value, int):
            return cls.from_int(value)
        if isinstance(value, float):
            if not math.isfinite(value) or not value.is_integer():
                raise ValueError(f"value {value!r} is not supported, fractional numbers are not allowed")
            return cls.from_int(int(value))
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValueError(
            f"value of type {type(value).__name__} is not supported, it must be an integer or string"
        )

    @property
    def is_int(self) -> bool:
        return self.type == IntOrStringType.int

    def int_value(self) -> int:
        """
        Resolve to an integer, parsing the string variant as base 10.

        Raises ValueError when the string is not a plain decimal integer.
        """

        if self.is_int:
            return self.int_val
        if not _DECIMAL_RE.fullmatch(self.str_val):
            raise ValueError(f"'{self.str_val}' is not a valid integer")
        return int(self.str_val, 10)

    def raw(self) -> Union[int, str]:
        return self.int_val if self.is_int else self.str_val

    def __str__(self) -> str:
        return str(self.raw())

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.decode,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.raw()
            ),
        )
