"""Single-turn driver.

Hands one resolved input to the control that can consume it, lets a control
take the initiative when the handling one did not, and renders the acts into
a response.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from parley.acts.base import SystemAct
from parley.controls.base import Control, ControlResultBuilder
from parley.core.errors import HandlerConflictError
from parley.core.inputs import ControlInput
from parley.rendering.response import ControlResponseBuilder

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of one turn."""

    acts: list[SystemAct] = field(default_factory=list)
    prompt: str = ""
    reprompt: str = ""
    handled_by: str | None = None

    @property
    def initiative_act(self) -> SystemAct | None:
        return next((act for act in self.acts if act.takes_initiative), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "acts": [act.to_dict() for act in self.acts],
            "prompt": self.prompt,
            "reprompt": self.reprompt,
            "handled_by": self.handled_by,
        }


async def _select_handling_control(
    controls: Sequence[Control], control_input: ControlInput
) -> Control | None:
    candidates = [c for c in controls if await c.can_handle(control_input)]
    if len(candidates) > 1:
        # The control that asked most recently has first claim on the reply.
        asked = {
            c.id: c.state.last_initiative.turn_number
            for c in candidates
            if getattr(c.state, "last_initiative", None) is not None
        }
        if asked:
            latest = max(asked.values())
            asking = [c for c in candidates if asked.get(c.id) == latest]
            if len(asking) == 1:
                return asking[0]
        names = [c.id for c in candidates]
        logger.error(
            f"More than one control can handle the input: {names}",
            extra={"controls": names, "turn_number": control_input.turn_number},
        )
        raise HandlerConflictError("<root>", "control", names)
    return candidates[0] if candidates else None


async def run_turn(
    controls: Control | Sequence[Control], control_input: ControlInput
) -> TurnResult:
    """Run one canHandle/handle/initiative cycle and render the result."""
    if isinstance(controls, Control):
        controls = [controls]

    result_builder = ControlResultBuilder()
    handler = await _select_handling_control(controls, control_input)
    if handler is not None:
        await handler.handle(control_input, result_builder)
    else:
        logger.info(
            "No control can handle the input",
            extra={"input_type": control_input.request.type, "turn_number": control_input.turn_number},
        )

    if not result_builder.has_initiative_act():
        for control in controls:
            if await control.can_take_initiative(control_input):
                await control.take_initiative(control_input, result_builder)
                break

    if not result_builder.has_initiative_act():
        logger.warning(
            "Turn ended without an initiative act",
            extra={"turn_number": control_input.turn_number},
        )

    by_id = {c.id: c for c in controls}
    response = ControlResponseBuilder()
    for act in result_builder.acts:
        by_id[act.control_id].render_act(act, control_input, response)

    return TurnResult(
        acts=list(result_builder.acts),
        prompt=response.build_prompt(),
        reprompt=response.build_reprompt(),
        handled_by=handler.id if handler is not None else None,
    )
