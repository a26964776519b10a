"""Declarative handler tables and their evaluation.

A control declares an ordered tuple of handlers per phase. ``can_handle``
evaluates every input handler and keeps the single match as a
:class:`HandlerMatch` that the following ``handle`` consumes. Initiative
handlers are evaluated in priority order and the first true predicate wins.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from parley.core.errors import HandlerConflictError

logger = logging.getLogger(__name__)

Predicate = Callable[..., bool | Awaitable[bool]]
HandlerFn = Callable[..., None | Awaitable[None]]


@dataclass(frozen=True)
class InputHandler:
    """``can_handle(control, input)`` paired with ``handle(control, input, result_builder)``."""

    name: str
    can_handle: Predicate
    handle: HandlerFn


@dataclass(frozen=True)
class InitiativeHandler:
    """``can_take_initiative(control, input)`` paired with ``take_initiative(control, input, result_builder)``."""

    name: str
    can_take_initiative: Predicate
    take_initiative: HandlerFn


@dataclass(frozen=True)
class HandlerMatch:
    """The handler selected for one phase of one turn."""

    phase: str
    handler: InputHandler | InitiativeHandler
    turn_number: int = 0

    @property
    def name(self) -> str:
        return self.handler.name


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if asyncio.iscoroutine(result):
        result = await result
    return result


async def match_input_handler(
    control: Any, control_input: Any, handlers: Sequence[InputHandler]
) -> HandlerMatch | None:
    """Find the single input handler that accepts the input.

    Raises:
        HandlerConflictError: If more than one handler matches
    """
    matches = [h for h in handlers if await _call(h.can_handle, control, control_input)]
    if len(matches) > 1:
        names = [h.name for h in matches]
        logger.error(
            f"More than one handler matched for control '{control.id}': {names}",
            extra={"control_id": control.id, "handlers": names},
        )
        raise HandlerConflictError(control.id, "input", names)
    if not matches:
        return None
    logger.debug(
        f"Control '{control.id}' matched handler '{matches[0].name}'",
        extra={"control_id": control.id, "handler": matches[0].name},
    )
    return HandlerMatch(
        phase="input",
        handler=matches[0],
        turn_number=getattr(control_input, "turn_number", 0),
    )


async def match_initiative_handler(
    control: Any, control_input: Any, handlers: Sequence[InitiativeHandler]
) -> HandlerMatch | None:
    """Return the first initiative handler, in priority order, that wants to act."""
    for handler in handlers:
        if await _call(handler.can_take_initiative, control, control_input):
            logger.debug(
                f"Control '{control.id}' takes initiative via '{handler.name}'",
                extra={"control_id": control.id, "handler": handler.name},
            )
            return HandlerMatch(
                phase="initiative",
                handler=handler,
                turn_number=getattr(control_input, "turn_number", 0),
            )
    return None


async def run_handler(match: HandlerMatch, control: Any, control_input: Any, result_builder: Any) -> None:
    handler = match.handler
    if isinstance(handler, InputHandler):
        await _call(handler.handle, control, control_input, result_builder)
    else:
        await _call(handler.take_initiative, control, control_input, result_builder)
