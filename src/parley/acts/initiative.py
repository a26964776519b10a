"""Initiative acts: questions that end the turn."""

from typing import Any

from pydantic import Field

from parley.acts.base import InitiativeAct
from parley.core.constants import ActName
from parley.rendering.response import join_list


class RequestValueByListAct(InitiativeAct):
    """Ask for a value, offering the spoken page of choices."""

    name = ActName.REQUEST_VALUE
    prompt_slot = "request_value"

    choices_from_active_page: list[str] = Field(default_factory=list)
    all_choices: list[str] = Field(default_factory=list)
    rendered_choices_from_active_page: list[str] = Field(default_factory=list)
    rendered_all_choices: list[str] = Field(default_factory=list)

    def template_args(self) -> dict[str, Any]:
        return {"suggestions": join_list(self.rendered_choices_from_active_page)}


class RequestChangedValueByListAct(InitiativeAct):
    """Ask what the current value should be changed to."""

    name = ActName.REQUEST_CHANGED_VALUE
    prompt_slot = "request_changed_value"

    current_value: str | list[str] | None = None
    rendered_value: str = ""
    choices_from_active_page: list[str] = Field(default_factory=list)
    all_choices: list[str] = Field(default_factory=list)
    rendered_choices_from_active_page: list[str] = Field(default_factory=list)
    rendered_all_choices: list[str] = Field(default_factory=list)

    def template_args(self) -> dict[str, Any]:
        return {
            "value": self.rendered_value,
            "suggestions": join_list(self.rendered_choices_from_active_page),
        }


class RequestRemovedValueByListAct(InitiativeAct):
    """Ask which of the held values should be removed."""

    name = ActName.REQUEST_REMOVED_VALUE
    prompt_slot = "request_removed_value"

    available_choices_from_active_page: list[str] = Field(default_factory=list)
    available_choices: list[str] = Field(default_factory=list)
    rendered_choices_from_active_page: list[str] = Field(default_factory=list)
    rendered_available_choices: list[str] = Field(default_factory=list)

    def slot(self) -> str:
        if self.available_choices:
            return "request_removed_value"
        return "general_request_removed_value"

    def template_args(self) -> dict[str, Any]:
        return {"suggestions": join_list(self.rendered_choices_from_active_page)}


class ConfirmValueAct(InitiativeAct):
    """Ask the user to confirm the value (or the listed values)."""

    name = ActName.CONFIRM_VALUE
    prompt_slot = "confirm_value"

    value: str | list[str] | None = None
    rendered_value: str = ""
