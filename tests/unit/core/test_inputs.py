"""Unit tests for the resolved input hierarchy."""

import pytest
from pydantic import ValidationError

from parley.core.inputs import (
    ControlInput,
    GeneralInput,
    NoInput,
    OrdinalInput,
    ResolvedInput,
    ScreenEventInput,
    SlotValue,
    ValueInput,
    YesInput,
    parse_input,
)


class TestParse:
    def test_parse_value_input(self):
        """
        GIVEN a dict with type 'value'
        WHEN parsed
        THEN a ValueInput with its slot values is returned
        """
        parsed = ResolvedInput.parse(
            {"type": "value", "slot_type": "Color", "values": ["red"], "action": "builtin_set"}
        )

        assert isinstance(parsed, ValueInput)
        assert parsed.value == "red"
        assert parsed.er_match is True
        assert parsed.action == "builtin_set"

    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"type": "general", "action": "builtin_change"}, GeneralInput),
            ({"type": "ordinal", "ordinal": 2}, OrdinalInput),
            ({"type": "screen_event", "arguments": ["color", 1]}, ScreenEventInput),
            ({"type": "yes"}, YesInput),
            ({"type": "no"}, NoInput),
        ],
    )
    def test_parse_each_shape(self, data, expected):
        assert isinstance(parse_input(data), expected)

    def test_parse_missing_type(self):
        with pytest.raises(ValueError, match="missing 'type'"):
            ResolvedInput.parse({"ordinal": 1})

    def test_parse_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown input type"):
            ResolvedInput.parse({"type": "telepathy"})


class TestValueInput:
    def test_values_accept_dicts_with_er_match(self):
        request = ValueInput(slot_type="Color", values=[{"value": "teal", "er_match": False}])

        assert request.values == [SlotValue(value="teal", er_match=False)]
        assert request.er_match is False

    def test_empty_values(self):
        request = ValueInput(slot_type="Color")

        assert request.value is None
        assert request.er_match is False

    def test_inputs_are_frozen(self):
        request = ValueInput(slot_type="Color", values=["red"])

        with pytest.raises(ValidationError):
            request.slot_type = "Size"


class TestControlInput:
    def test_wraps_dict_request(self):
        """
        GIVEN a plain dict request
        WHEN a ControlInput is built
        THEN the request is parsed into its typed shape
        """
        control_input = ControlInput(request={"type": "yes"}, turn_number=3)

        assert isinstance(control_input.request, YesInput)
        assert control_input.turn_number == 3

    def test_of_keeps_typed_request(self):
        request = OrdinalInput(ordinal=1)

        control_input = ControlInput.of(request)

        assert control_input.request is request

    def test_screen_event_control_id(self):
        assert ScreenEventInput(arguments=["color", 2]).control_id == "color"
        assert ScreenEventInput().control_id is None
