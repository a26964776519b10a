"""Base system act.

Acts are immutable records of what a control communicated this turn (content
acts) or is asking for (initiative acts). Building one never touches control
state; state changes happen before the act is constructed.
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Type

from pydantic import BaseModel, ConfigDict

from parley.core.constants import ActName
from parley.rendering.response import ControlResponseBuilder, PromptProp, evaluate_prompt
from parley.rendering.strings import LIST_PROMPTS, LIST_REPROMPTS


class SystemAct(BaseModel):
    """An act attributed to one control."""

    model_config = ConfigDict(frozen=True)

    name: ClassVar[ActName]
    takes_initiative: ClassVar[bool] = False
    prompt_slot: ClassVar[str]

    control_id: str

    _registry: ClassVar[dict[ActName, Type["SystemAct"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.__dict__.get("name")
        if isinstance(name, ActName):
            SystemAct._registry[name] = cls

    @classmethod
    def for_name(cls, name: ActName | str) -> Type["SystemAct"]:
        return cls._registry[ActName(name)]

    def slot(self) -> str:
        """Prompt slot used to render this act."""
        return self.prompt_slot

    def template_args(self) -> dict[str, Any]:
        rendered = getattr(self, "rendered_value", None)
        return {"value": rendered if rendered is not None else ""}

    def render(
        self,
        control_input: Any,
        builder: ControlResponseBuilder,
        prompts: Mapping[str, PromptProp] | None = None,
        reprompts: Mapping[str, PromptProp] | None = None,
    ) -> None:
        """Add this act's prompt and reprompt fragments to the builder."""
        prompts = LIST_PROMPTS if prompts is None else prompts
        reprompts = LIST_REPROMPTS if reprompts is None else reprompts
        slot = self.slot()
        args = self.template_args()
        builder.add_prompt_fragment(evaluate_prompt(prompts[slot], self, control_input, args))
        if slot in reprompts:
            builder.add_reprompt_fragment(
                evaluate_prompt(reprompts[slot], self, control_input, args)
            )

    def to_dict(self) -> dict[str, Any]:
        return {"act": self.name.value, **self.model_dump(mode="json")}


class ContentAct(SystemAct):
    """Informational act that does not end the turn."""

    takes_initiative: ClassVar[bool] = False


class InitiativeAct(SystemAct):
    """Proactive act that ends the turn awaiting a reply."""

    takes_initiative: ClassVar[bool] = True
