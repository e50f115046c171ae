from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from workflow_model.schema.intstr import IntOrString, IntOrStringType
from workflow_model.schema.models import ForEachState


def test_decode_keeps_author_representation() -> None:
    assert IntOrString.decode(3) == IntOrString.from_int(3)
    assert IntOrString.decode("3") == IntOrString.from_string("3")
    assert IntOrString.decode("${ .size }").type == IntOrStringType.string


def test_decode_accepts_integral_floats() -> None:
    value = IntOrString.decode(4.0)

    assert value.is_int
    assert value.int_val == 4


@pytest.mark.parametrize("raw", [0.5, float("nan"), float("inf"), True, False, None, [], {}])
def test_decode_rejects_other_values(raw) -> None:
    with pytest.raises(ValueError):
        IntOrString.decode(raw)


def test_int_and_string_forms_resolve_to_same_integer() -> None:
    as_int = IntOrString.from_int(1)
    as_text = IntOrString.from_string("1")

    assert as_int != as_text
    assert as_int.int_value() == as_text.int_value() == 1


@pytest.mark.parametrize("text, expected", [("42", 42), ("+5", 5), ("-3", -3), ("007", 7)])
def test_int_value_parses_decimal_strings(text, expected) -> None:
    assert IntOrString.from_string(text).int_value() == expected


@pytest.mark.parametrize("text", ["", "a", " 1", "1 ", "1.0", "1_000", "0x10", "${ .n }"])
def test_int_value_rejects_non_decimal_strings(text) -> None:
    with pytest.raises(ValueError):
        IntOrString.from_string(text).int_value()


def test_exactly_one_representation_is_populated() -> None:
    with pytest.raises(ValueError):
        IntOrString(type=IntOrStringType.int, int_val=1, str_val="1")
    with pytest.raises(ValueError):
        IntOrString(type=IntOrStringType.string, int_val=1, str_val="1")
    with pytest.raises(TypeError):
        IntOrString(type=IntOrStringType.int, int_val=True)


def test_values_are_immutable() -> None:
    value = IntOrString.from_int(2)

    with pytest.raises(FrozenInstanceError):
        value.int_val = 3


def test_serializes_back_to_original_representation() -> None:
    numeric = ForEachState.model_validate({"batchSize": 4})
    textual = ForEachState.model_validate({"batchSize": "4"})

    assert numeric.model_dump(by_alias=True)["batchSize"] == 4
    assert textual.model_dump(by_alias=True)["batchSize"] == "4"
    assert "batchSize" not in ForEachState().model_dump(by_alias=True, exclude_none=True)
