"""Content acts: what happened to the control's value this turn."""

from typing import Any

from parley.acts.base import ContentAct
from parley.core.constants import ActName

ValueType = str | list[str] | None


class ValueSetAct(ContentAct):
    """A value was set."""

    name = ActName.VALUE_SET
    prompt_slot = "value_set"

    value: ValueType = None
    rendered_value: str = ""


class ValueChangedAct(ContentAct):
    """A value replaced a previous one."""

    name = ActName.VALUE_CHANGED
    prompt_slot = "value_changed"

    value: ValueType = None
    rendered_value: str = ""
    previous_value: ValueType = None
    rendered_previous_value: str = ""

    def template_args(self) -> dict[str, Any]:
        return {"value": self.rendered_value, "previous_value": self.rendered_previous_value}


class ValueAddedAct(ContentAct):
    name = ActName.VALUE_ADDED
    prompt_slot = "value_added"

    value: ValueType = None
    rendered_value: str = ""


class ValueRemovedAct(ContentAct):
    name = ActName.VALUE_REMOVED
    prompt_slot = "value_removed"

    value: ValueType = None
    rendered_value: str = ""


class ValueClearedAct(ContentAct):
    name = ActName.VALUE_CLEARED
    prompt_slot = "value_cleared"

    value: ValueType = None
    rendered_value: str = ""


class InvalidValueAct(ContentAct):
    """A value failed validation.

    Rendered with the reason when one is available, otherwise with the
    general form.
    """

    name = ActName.INVALID_VALUE
    prompt_slot = "invalid_value"

    value: ValueType = None
    rendered_value: str = ""
    reason_code: str | None = None
    rendered_reason: str | None = None

    def slot(self) -> str:
        return "invalid_value" if self.rendered_reason else "general_invalid_value"

    def template_args(self) -> dict[str, Any]:
        return {"value": self.rendered_value, "reason": self.rendered_reason or ""}


class InvalidRemoveValueAct(ContentAct):
    """The user asked to remove values that are not in the list."""

    name = ActName.INVALID_REMOVE_VALUE
    prompt_slot = "invalid_remove_value"

    value: list[str]
    rendered_value: str = ""


class UnusableInputValueAct(ContentAct):
    """The input referred to something the control cannot use, e.g. a spoken
    ordinal past the end of the page."""

    name = ActName.UNUSABLE_INPUT_VALUE
    prompt_slot = "unusable_input_value"

    value: Any = None
    rendered_value: str = ""
    reason_code: str
    rendered_reason: str

    def template_args(self) -> dict[str, Any]:
        return {"value": self.rendered_value, "reason": self.rendered_reason}


class ValueConfirmedAct(ContentAct):
    name = ActName.VALUE_CONFIRMED
    prompt_slot = "value_confirmed"

    value: ValueType = None
    rendered_value: str = ""


class ValueDisconfirmedAct(ContentAct):
    name = ActName.VALUE_DISCONFIRMED
    prompt_slot = "value_disconfirmed"

    value: ValueType = None
    rendered_value: str = ""
