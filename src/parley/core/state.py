"""Persisted control state.

State models hold plain data only, so ``model_dump(mode="json")`` is always
safe to hand to external storage and ``model_validate`` restores it.
"""

from pydantic import BaseModel, Field

from parley.core.constants import ActName


class LastInitiative(BaseModel):
    """The most recent initiative act issued and the value ids it concerns."""

    act_name: ActName
    value_ids: list[str] = Field(default_factory=list)
    turn_number: int = 0


class ControlState(BaseModel):
    """Fields shared by every list control."""

    elicitation_action: str | None = Field(
        default=None, description="Action of the most recent elicitation"
    )
    spoken_page_index: int = Field(default=0, ge=0, description="Spoken pagination cursor")
    last_initiative: LastInitiative | None = None

    def last_initiative_is(self, act_name: ActName) -> bool:
        return self.last_initiative is not None and self.last_initiative.act_name == act_name


class ListControlState(ControlState):
    """State of a single-value list control."""

    value: str | None = None
    er_match: bool | None = None
    previous_value: str | None = None
    confirmed: bool = False


class MultiValueItem(BaseModel):
    """One selected item in a multi-value list."""

    id: str
    confirmed: bool = False
    er_match: bool = True


class MultiValueListControlState(ControlState):
    """State of a multi-value list control. Duplicate ids are permitted."""

    value: list[MultiValueItem] = Field(default_factory=list)
    previous_value: list[str] | None = None

    @property
    def value_ids(self) -> list[str]:
        return [item.id for item in self.value]

    @property
    def unconfirmed_ids(self) -> list[str]:
        return [item.id for item in self.value if not item.confirmed]
