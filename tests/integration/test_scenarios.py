"""End-to-end conversations across several turns.

Controls are rebuilt from persisted state on every turn, the way a hosted
skill would run them.
"""

import pytest

from parley import (
    ControlInput,
    ListControl,
    ListControlProps,
    MultiValueListControl,
    MultiValueListControlProps,
    StateStore,
    run_turn,
)
from parley.core.inputs import YesInput

pytestmark = pytest.mark.integration


class Conversation:
    def __init__(self, *props):
        self.props = props
        self.store = StateStore()
        self.turn_number = 0

    def controls(self):
        return [
            MultiValueListControl(p) if isinstance(p, MultiValueListControlProps) else ListControl(p)
            for p in self.props
        ]

    async def say(self, request):
        self.turn_number += 1
        controls = self.controls()
        self.store.restore(controls)
        result = await run_turn(controls, ControlInput.of(request, turn_number=self.turn_number))
        self.store.save(controls)
        return result

    def state(self, control_id):
        return self.store.states[control_id]


@pytest.mark.asyncio
async def test_pizza_order():
    """
    GIVEN a size list and a toppings list that needs confirmation
    WHEN the user picks a size, adds toppings by voice and touch, and confirms
    THEN every turn ends with one question until the order is complete
    """
    conversation = Conversation(
        ListControlProps(id="size", slot_type="Size", list_item_ids=["small", "medium", "large"]),
        MultiValueListControlProps(
            id="toppings",
            slot_type="Topping",
            list_item_ids=["cheese", "ham", "olives", "peppers"],
            confirmation_required=True,
            validation=["er_match"],
        ),
    )

    opening = await conversation.say({"type": "intent", "name": "LaunchRequest"})
    assert opening.prompt == "What is your selection? Some suggestions are small, medium or large."

    sized = await conversation.say({"type": "ordinal", "ordinal": 3})
    assert sized.handled_by == "size"
    assert conversation.state("size")["value"] == "large"
    assert sized.initiative_act.control_id == "toppings"

    added = await conversation.say(
        {"type": "value", "slot_type": "Topping", "values": ["ham", "olives"], "action": "builtin_add"}
    )
    assert added.prompt == "OK, added ham and olives. OK, I have ham and olives. Is that all?"

    touched = await conversation.say({"type": "screen_event", "arguments": ["toppings", "Select", 4]})
    assert [a.name.value for a in touched.acts] == ["ValueAdded", "ConfirmValue"]
    assert touched.acts[-1].value == ["ham", "olives", "peppers"]

    done = await conversation.say({"type": "yes"})
    assert [a.name.value for a in done.acts] == ["ValueConfirmed"]
    assert done.initiative_act is None
    toppings = conversation.state("toppings")["value"]
    assert [item["id"] for item in toppings] == ["ham", "olives", "peppers"]
    assert all(item["confirmed"] for item in toppings)


@pytest.mark.asyncio
async def test_unresolved_topping_is_rejected():
    conversation = Conversation(
        MultiValueListControlProps(
            id="toppings",
            slot_type="Topping",
            list_item_ids=["cheese", "ham"],
            validation=["er_match"],
        ),
    )

    result = await conversation.say(
        {
            "type": "value",
            "slot_type": "Topping",
            "values": [{"value": "pineapple", "er_match": False}],
        }
    )

    assert [a.name.value for a in result.acts] == ["InvalidValue", "RequestValue"]
    assert result.prompt.startswith(
        "Sorry, pineapple can't be added as it is not one of the options."
    )
    assert conversation.state("toppings")["value"] == []


@pytest.mark.asyncio
async def test_change_with_confirmation_then_fix():
    """
    GIVEN a single-value control that confirms values
    WHEN the user rejects the value and then picks another by ordinal
    THEN the second value is confirmed on the next yes
    """
    conversation = Conversation(
        ListControlProps(
            id="color",
            slot_type="Color",
            list_item_ids=["red", "green", "blue", "yellow"],
            confirmation_required=True,
        ),
    )

    first = await conversation.say(
        {"type": "value", "slot_type": "Color", "values": ["red"], "action": "builtin_set"}
    )
    assert first.prompt == "OK, red. Was that red?"

    rejected = await conversation.say({"type": "no"})
    assert [a.name.value for a in rejected.acts] == ["ValueDisconfirmed", "RequestValue"]

    picked = await conversation.say({"type": "ordinal", "ordinal": 2})
    assert picked.prompt == "OK, green. Was that green?"

    confirmed = await conversation.say({"type": "yes"})
    assert confirmed.prompt == "Great."
    assert conversation.state("color")["confirmed"] is True


@pytest.mark.asyncio
async def test_list_value_that_collides_with_yes():
    """
    GIVEN a yes/no/maybe list whose "yes" is recognized as the yes intent
    WHEN the user answers the question with a bare yes
    THEN the mapper turns it into the list value
    """

    def yes_no_maybe(request):
        return "yes" if isinstance(request, YesInput) else None

    conversation = Conversation(
        ListControlProps(
            id="answer",
            slot_type="YesNoMaybe",
            list_item_ids=["yes", "no", "maybe"],
            interaction_model={
                "slot_value_conflict_extensions": {
                    "filtered_slot_type": "YesNoMaybe_filtered",
                    "intent_to_value_mapper": yes_no_maybe,
                }
            },
        ),
    )

    await conversation.say({"type": "intent", "name": "LaunchRequest"})
    result = await conversation.say({"type": "yes"})

    assert result.prompt == "OK, yes."
    assert conversation.state("answer")["value"] == "yes"


@pytest.mark.asyncio
async def test_spoken_paging_of_out_of_range_ordinal():
    conversation = Conversation(
        ListControlProps(
            id="color", slot_type="Color", list_item_ids=["red", "green", "blue", "yellow"]
        ),
    )

    result = await conversation.say({"type": "ordinal", "ordinal": 4})

    assert result.prompt == (
        "Sorry, I'm not sure how to do that. "
        "What is your selection? Some suggestions are red, green or blue."
    )
    assert conversation.state("color")["value"] is None
