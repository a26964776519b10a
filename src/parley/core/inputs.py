"""Resolved input hierarchy consumed by controls.

Each turn, the natural-language layer resolves the user's utterance (or a
screen touch) into exactly one of these shapes. Controls never parse raw text;
they only match on the shape and its fields.
"""

from typing import Any, ClassVar, Literal, Type, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolvedInput(BaseModel):
    """Base resolved input.

    Uses a registry keyed by the ``type`` literal so that plain dictionaries
    (from YAML scripts or persisted transcripts) can be parsed back into the
    right subclass.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Discriminator field for input shape")

    _registry: ClassVar[dict[str, Type["ResolvedInput"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Register subclasses by their ``type`` literal."""
        super().__init_subclass__(**kwargs)
        annotation = cls.__annotations__.get("type")
        if annotation is not None and get_origin(annotation) is Literal:
            args = get_args(annotation)
            if args and isinstance(args[0], str):
                ResolvedInput._registry[args[0]] = cls

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "ResolvedInput":
        """Parse a dictionary into a typed input using the registry."""
        input_type = data.get("type")
        if not input_type:
            raise ValueError("Input data missing 'type' field")

        input_class = cls._registry.get(input_type)
        if not input_class:
            raise ValueError(f"Unknown input type: {input_type}")

        return input_class(**data)


class SlotValue(BaseModel):
    """One resolved slot value."""

    model_config = ConfigDict(frozen=True)

    value: str
    er_match: bool = True


class ValueInput(ResolvedInput):
    """A typed value, optionally with feedback, action and target."""

    type: Literal["value"] = "value"
    slot_type: str
    values: list[SlotValue] = Field(default_factory=list)
    feedback: str | None = None
    action: str | None = None
    target: str | None = None

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [{"value": v}]
        if isinstance(v, list):
            return [{"value": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def value(self) -> str | None:
        """First resolved value, or None."""
        return self.values[0].value if self.values else None

    @property
    def er_match(self) -> bool:
        return self.values[0].er_match if self.values else False


class GeneralInput(ResolvedInput):
    """A control-directed utterance carrying no value, e.g. "change it"."""

    type: Literal["general"] = "general"
    feedback: str | None = None
    action: str | None = None
    target: str | None = None


class OrdinalInput(ResolvedInput):
    """A spoken ordinal reference such as "the second one"."""

    type: Literal["ordinal"] = "ordinal"
    ordinal: int
    feedback: str | None = None
    action: str | None = None
    target: str | None = None


class ScreenEventInput(ResolvedInput):
    """A touch event; ``arguments[0]`` is the id of the control touched."""

    type: Literal["screen_event"] = "screen_event"
    arguments: list[Any] = Field(default_factory=list)

    @property
    def control_id(self) -> str | None:
        if not self.arguments:
            return None
        return str(self.arguments[0])


class YesInput(ResolvedInput):
    """A bare affirmation."""

    type: Literal["yes"] = "yes"


class NoInput(ResolvedInput):
    """A bare disaffirmation."""

    type: Literal["no"] = "no"


class IntentInput(ResolvedInput):
    """Any other named intent, e.g. one whose utterances collide with list values."""

    type: Literal["intent"] = "intent"
    name: str
    slots: dict[str, str] = Field(default_factory=dict)


class ControlInput(BaseModel):
    """Everything a control sees for one turn."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: ResolvedInput
    turn_number: int = 0
    supports_display: bool = False
    context: dict[str, Any] = Field(default_factory=dict)

    @field_validator("request", mode="before")
    @classmethod
    def _parse_request(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return ResolvedInput.parse(v)
        return v

    @classmethod
    def of(cls, request: ResolvedInput | dict[str, Any], **kwargs: Any) -> "ControlInput":
        """Wrap a resolved input for the current turn."""
        return cls(request=request, **kwargs)


def parse_input(data: dict[str, Any]) -> ResolvedInput:
    """Convenience wrapper around ``ResolvedInput.parse``."""
    return ResolvedInput.parse(data)
