"""Validated configuration for list controls.

Every optional field is defaulted here, once, when the control is created.
Fields that accept code (candidate suppliers, validators, renderers, prompt
callables) can be given as Python callables; validators can also be given by
registered name so the same models load from YAML.
"""

from collections.abc import Callable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from parley.core.constants import DEFAULT_PAGE_SIZE, Action, Target
from parley.core.handlers import InputHandler
from parley.core.validation import ValidatorFn, ValidatorRegistry


def _no_mapping(request: Any) -> str | None:
    return None


def _identity_renderer(value: str, control_input: Any) -> str:
    return value


class SlotValueConflictExtensions(BaseModel):
    """Handling for list values that collide with other intents, e.g. "yes"."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    filtered_slot_type: str | None = Field(
        default=None,
        description="Slot type used for bare values; defaults to the control's slot type",
    )
    intent_to_value_mapper: Callable[[Any], str | None] = Field(
        default=_no_mapping,
        description="Maps a colliding input to a list value, or returns None",
    )


class ListActionProps(BaseModel):
    """Action slot-value ids that a single-value list control responds to."""

    set: list[str] = Field(default_factory=lambda: [Action.SET.value, Action.SELECT.value])
    change: list[str] = Field(default_factory=lambda: [Action.CHANGE.value])


class MultiValueActionProps(BaseModel):
    """Action slot-value ids that a multi-value list control responds to."""

    add: list[str] = Field(default_factory=lambda: [Action.SELECT.value, Action.ADD.value])
    remove: list[str] = Field(
        default_factory=lambda: [Action.REMOVE.value, Action.DELETE.value, Action.IGNORE.value]
    )
    clear: list[str] = Field(default_factory=lambda: [Action.CLEAR.value])
    set: list[str] = Field(default_factory=lambda: [Action.SET.value])
    change: list[str] = Field(default_factory=lambda: [Action.CHANGE.value])


class ListInteractionModelProps(BaseModel):
    targets: list[str] = Field(default_factory=lambda: [Target.CHOICE.value, Target.IT.value])
    actions: ListActionProps = Field(default_factory=ListActionProps)
    slot_value_conflict_extensions: SlotValueConflictExtensions = Field(
        default_factory=SlotValueConflictExtensions
    )


class MultiValueInteractionModelProps(BaseModel):
    targets: list[str] = Field(default_factory=lambda: [Target.CHOICE.value, Target.IT.value])
    actions: MultiValueActionProps = Field(default_factory=MultiValueActionProps)
    slot_value_conflict_extensions: SlotValueConflictExtensions = Field(
        default_factory=SlotValueConflictExtensions
    )


BoolProp = Union[bool, Callable[[Any], bool]]


class BaseListControlProps(BaseModel):
    """Settings shared by both list controls."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., min_length=1, description="Control id, unique in the tree")
    slot_type: str = Field(..., min_length=1, description="Slot type holding the list values")
    list_item_ids: list[str] | Callable[..., list[str]] = Field(
        default_factory=list,
        description="Candidate ids, or a supplier (control, input) -> ids called every turn",
    )
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Choices per spoken page")
    required: BoolProp = Field(default=True, description="Elicit when no value is held")
    confirmation_required: BoolProp = Field(
        default=False, description="Confirm values before considering them final"
    )
    validation: list[ValidatorFn] = Field(
        default_factory=list, description="Validators, run in order; the first failure wins"
    )
    value_renderer: Callable[[str, Any], str] = Field(
        default=_identity_renderer, description="Maps an id to the text spoken for it"
    )
    prompts: dict[str, Any] = Field(
        default_factory=dict, description="Prompt overrides keyed by prompt slot"
    )
    reprompts: dict[str, Any] = Field(
        default_factory=dict, description="Reprompt overrides keyed by prompt slot"
    )
    custom_handlers: list[InputHandler] = Field(
        default_factory=list, description="Extra input handlers evaluated with the built-ins"
    )

    @field_validator("validation", mode="before")
    @classmethod
    def _resolve_validators(cls, v: Any) -> Any:
        if v is None:
            return []
        if callable(v) or isinstance(v, str):
            v = [v]
        return [ValidatorRegistry.get(item) if isinstance(item, str) else item for item in v]


class ListControlProps(BaseListControlProps):
    """Configuration of a single-value list control."""

    kind: Literal["list"] = "list"
    interaction_model: ListInteractionModelProps = Field(default_factory=ListInteractionModelProps)

    @model_validator(mode="after")
    def _default_filtered_slot_type(self) -> "ListControlProps":
        extensions = self.interaction_model.slot_value_conflict_extensions
        if extensions.filtered_slot_type is None:
            extensions.filtered_slot_type = self.slot_type
        return self


class MultiValueListControlProps(BaseListControlProps):
    """Configuration of a multi-value list control."""

    kind: Literal["multi_value_list"] = "multi_value_list"
    interaction_model: MultiValueInteractionModelProps = Field(
        default_factory=MultiValueInteractionModelProps
    )

    @model_validator(mode="after")
    def _default_filtered_slot_type(self) -> "MultiValueListControlProps":
        extensions = self.interaction_model.slot_value_conflict_extensions
        if extensions.filtered_slot_type is None:
            extensions.filtered_slot_type = self.slot_type
        return self


ControlProps = Annotated[
    Union[ListControlProps, MultiValueListControlProps], Field(discriminator="kind")
]


class ControlsConfig(BaseModel):
    """A set of controls loaded from one file."""

    version: str = "1"
    controls: list[ControlProps] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "ControlsConfig":
        ids = [c.id for c in self.controls]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate control ids: {duplicates}")
        return self

    def get(self, control_id: str) -> ListControlProps | MultiValueListControlProps:
        for control in self.controls:
            if control.id == control_id:
                return control
        raise KeyError(control_id)
