"""Tests for StateStore."""

import pytest

from parley.controls.list_control import ListControl
from parley.controls.multi_value_list_control import MultiValueListControl
from parley.runtime.persistence import StateStore


def _controls(colors):
    return [
        ListControl(id="color", slot_type="Color", list_item_ids=colors),
        MultiValueListControl(id="toppings", slot_type="Color", list_item_ids=colors),
    ]


@pytest.mark.asyncio
async def test_state_survives_rebuild(colors, inputs):
    """
    GIVEN controls that changed state during a turn
    WHEN the state is saved, serialized and restored into new controls
    THEN the new controls hold the same state
    """
    controls = _controls(colors)
    color, toppings = controls
    color.set_value("red")
    toppings.add_value("blue")
    toppings.state.spoken_page_index = 1
    store = StateStore()

    store.save(controls)
    restored = StateStore.from_json(store.to_json())
    rebuilt = _controls(colors)
    restored.restore(rebuilt)

    assert rebuilt[0].state == color.state
    assert rebuilt[1].state == toppings.state


def test_unknown_control_starts_empty(colors):
    store = StateStore({"other": {"value": "x"}})
    controls = _controls(colors)
    controls[0].set_value("red")

    store.restore(controls)

    assert controls[0].state.value is None
    assert controls[1].state.value == []


def test_to_json_is_stable(colors):
    store = StateStore({"b": {"value": None}, "a": {"value": "x"}})

    assert store.to_json() == '{"a": {"value": "x"}, "b": {"value": null}}'


def test_from_empty_json():
    assert StateStore.from_json("").states == {}
