"""Response assembly for rendered acts."""

import random
from collections.abc import Callable, Sequence
from typing import Any, Union

from parley.core.errors import RenderError

# A prompt override: a template, a list of templates (one is picked at random)
# or a callable (act, input) -> str | list[str] whose result is used verbatim.
PromptProp = Union[str, list[str], Callable[[Any, Any], Union[str, list[str]]]]


def join_list(items: Sequence[str], conjunction: str = "or") -> str:
    """Join items for speech: ``a, b or c``."""
    items = [str(item) for item in items]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} {conjunction} {items[-1]}"


def evaluate_prompt(prop: PromptProp, act: Any, control_input: Any, args: dict[str, Any]) -> str:
    """Resolve a prompt override into text for one act."""
    if callable(prop):
        result = prop(act, control_input)
        return random.choice(result) if isinstance(result, list) else result

    template = random.choice(prop) if isinstance(prop, list) else prop
    try:
        return template.format(**args)
    except (KeyError, IndexError) as e:
        raise RenderError(
            f"Cannot render {type(act).__name__} with template {template!r}: missing {e}"
        ) from e


class ControlResponseBuilder:
    """Collects prompt and reprompt fragments for a turn's response."""

    def __init__(self) -> None:
        self.prompt_fragments: list[str] = []
        self.reprompt_fragments: list[str] = []

    def add_prompt_fragment(self, fragment: str) -> "ControlResponseBuilder":
        if fragment:
            self.prompt_fragments.append(fragment)
        return self

    def add_reprompt_fragment(self, fragment: str) -> "ControlResponseBuilder":
        if fragment:
            self.reprompt_fragments.append(fragment)
        return self

    def build_prompt(self) -> str:
        return " ".join(self.prompt_fragments)

    def build_reprompt(self) -> str:
        return " ".join(self.reprompt_fragments)
