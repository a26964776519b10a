"""Tests for control configuration models."""

import pytest
from pydantic import ValidationError

from parley.config.models import (
    ControlsConfig,
    ListControlProps,
    MultiValueListControlProps,
)
from parley.core.constants import DEFAULT_PAGE_SIZE, Action, Target
from parley.core.validation import ValidatorRegistry


class TestListControlProps:
    def test_defaults(self):
        props = ListControlProps(id="color", slot_type="Color")

        assert props.kind == "list"
        assert props.page_size == DEFAULT_PAGE_SIZE
        assert props.required is True
        assert props.confirmation_required is False
        assert props.validation == []
        assert props.list_item_ids == []
        assert props.interaction_model.targets == [Target.CHOICE.value, Target.IT.value]
        assert props.interaction_model.actions.set == [Action.SET.value, Action.SELECT.value]
        assert props.interaction_model.actions.change == [Action.CHANGE.value]
        assert props.value_renderer("red", None) == "red"

    def test_filtered_slot_type_defaults_to_slot_type(self):
        props = ListControlProps(id="color", slot_type="Color")

        extensions = props.interaction_model.slot_value_conflict_extensions
        assert extensions.filtered_slot_type == "Color"
        assert extensions.intent_to_value_mapper(object()) is None

    def test_explicit_filtered_slot_type_kept(self):
        props = ListControlProps(
            id="color",
            slot_type="Color",
            interaction_model={"slot_value_conflict_extensions": {"filtered_slot_type": "Safe"}},
        )

        assert props.interaction_model.slot_value_conflict_extensions.filtered_slot_type == "Safe"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"id": ""},
            {"slot_type": ""},
            {"page_size": 0},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValidationError):
            ListControlProps(**{"id": "color", "slot_type": "Color", **overrides})

    def test_validators_resolved_by_name(self):
        props = ListControlProps(id="color", slot_type="Color", validation=["er_match"])

        assert props.validation == [ValidatorRegistry.get("er_match")]

    def test_single_validator_wrapped_in_list(self):
        def check(state, control_input):
            return True

        props = ListControlProps(id="color", slot_type="Color", validation=check)

        assert props.validation == [check]

    def test_unknown_validator_name_rejected(self):
        with pytest.raises(ValidationError, match="not registered"):
            ListControlProps(id="color", slot_type="Color", validation="nope")

    def test_callable_props_accepted(self):
        def supplier(control, control_input):
            return ["a"]

        props = ListControlProps(
            id="color",
            slot_type="Color",
            list_item_ids=supplier,
            required=lambda control_input: False,
        )

        assert props.list_item_ids is supplier
        assert callable(props.required)


class TestMultiValueListControlProps:
    def test_action_defaults(self):
        props = MultiValueListControlProps(id="toppings", slot_type="Topping")

        actions = props.interaction_model.actions
        assert props.kind == "multi_value_list"
        assert actions.add == [Action.SELECT.value, Action.ADD.value]
        assert actions.remove == [Action.REMOVE.value, Action.DELETE.value, Action.IGNORE.value]
        assert actions.clear == [Action.CLEAR.value]
        assert props.interaction_model.slot_value_conflict_extensions.filtered_slot_type == "Topping"


class TestControlsConfig:
    def test_discriminates_on_kind(self):
        config = ControlsConfig.model_validate(
            {
                "controls": [
                    {"kind": "list", "id": "size", "slot_type": "Size"},
                    {"kind": "multi_value_list", "id": "toppings", "slot_type": "Topping"},
                ]
            }
        )

        assert isinstance(config.get("size"), ListControlProps)
        assert isinstance(config.get("toppings"), MultiValueListControlProps)

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate control ids"):
            ControlsConfig.model_validate(
                {
                    "controls": [
                        {"kind": "list", "id": "size", "slot_type": "Size"},
                        {"kind": "list", "id": "size", "slot_type": "Other"},
                    ]
                }
            )

    def test_get_unknown_id(self):
        with pytest.raises(KeyError):
            ControlsConfig().get("missing")
