"""Tests for the interaction-model export."""

from parley.controls.list_control import ListControl
from parley.controls.multi_value_list_control import MultiValueListControl
from parley.interaction_model.generator import (
    ACTION_SLOT_TYPE,
    TARGET_SLOT_TYPE,
    ControlAssociation,
    InteractionModelData,
    build_interaction_model,
    value_control_intent_name,
)


def _slot_values(data, slot_type):
    return {v.id: v.synonyms for v in data.slot_types.get(slot_type, [])}


def test_value_control_intent_name():
    assert value_control_intent_name("Color") == "Color_ValueControlIntent"


def test_add_intent_is_idempotent():
    data = InteractionModelData().add_intent("A").add_intent("A").add_yes_and_no_intents()

    assert data.intents == ["A", "YesIntent", "NoIntent"]


def test_synonyms_merge_per_value():
    data = InteractionModelData()
    data.add_values_to_slot_type("action", "builtin_add", ["add"])
    data.add_values_to_slot_type("action", "builtin_add", ["add", "include"])

    assert _slot_values(data, "action") == {"builtin_add": ["add", "include"]}


def test_add_control_replaces_same_id():
    data = InteractionModelData()
    data.add_control(ControlAssociation(control_id="c", slot_type="A"))
    data.add_control(ControlAssociation(control_id="c", slot_type="B"))

    assert [c.slot_type for c in data.controls] == ["B"]


def test_list_control_contribution():
    control = ListControl(
        id="color",
        slot_type="Color",
        interaction_model={"slot_value_conflict_extensions": {"filtered_slot_type": "SafeColor"}},
    )

    data = build_interaction_model([control])

    assert data.intents == [
        "GeneralControlIntent",
        "Color_ValueControlIntent",
        "SafeColor_ValueControlIntent",
        "OrdinalControlIntent",
        "YesIntent",
        "NoIntent",
    ]
    assert "builtin_choice" in _slot_values(data, TARGET_SLOT_TYPE)
    assert "builtin_select" in _slot_values(data, ACTION_SLOT_TYPE)
    association = data.controls[0]
    assert association.control_id == "color"
    assert association.actions["set"] == ["builtin_set", "builtin_select"]


def test_tree_export_is_shared():
    """
    GIVEN a list and a multi-value list
    WHEN the interaction model is built
    THEN shared intents appear once and each control is associated
    """
    controls = [
        ListControl(id="size", slot_type="Size"),
        MultiValueListControl(id="toppings", slot_type="Topping"),
    ]

    exported = build_interaction_model(controls).to_dict()

    assert exported["intents"].count("GeneralControlIntent") == 1
    assert "Topping_ValueControlIntent" in exported["intents"]
    actions = {v["id"] for v in exported["slot_types"][ACTION_SLOT_TYPE]}
    assert {"builtin_select", "builtin_add", "builtin_remove", "builtin_clear"} <= actions
    assert [c["control_id"] for c in exported["controls"]] == ["size", "toppings"]
