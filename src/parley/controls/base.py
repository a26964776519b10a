"""Control base class and the per-turn result builder.

A turn runs through ``can_handle -> handle -> can_take_initiative ->
take_initiative``. Each control declares its handler tables as class
attributes; the base class owns the dispatch discipline.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from parley.acts.base import SystemAct
from parley.core.errors import ContractViolationError, StateConsistencyError
from parley.core.handlers import (
    HandlerMatch,
    InitiativeHandler,
    InputHandler,
    match_initiative_handler,
    match_input_handler,
    run_handler,
)
from parley.core.inputs import ControlInput
from parley.interaction_model.generator import InteractionModelData
from parley.observability.logging import control_logger
from parley.rendering.response import ControlResponseBuilder

StateT = TypeVar("StateT", bound=BaseModel)


class ControlResultBuilder:
    """Ordered acts produced for one turn. Holds at most one initiative act."""

    def __init__(self) -> None:
        self.acts: list[SystemAct] = []

    def add_act(self, act: SystemAct) -> "ControlResultBuilder":
        if act.takes_initiative and self.has_initiative_act():
            raise StateConsistencyError(
                f"Cannot add {act.name.value}: the turn already has an initiative act "
                f"({self.initiative_act().name.value})."
            )
        self.acts.append(act)
        return self

    def has_initiative_act(self) -> bool:
        return any(act.takes_initiative for act in self.acts)

    def initiative_act(self) -> SystemAct | None:
        for act in self.acts:
            if act.takes_initiative:
                return act
        return None

    def __len__(self) -> int:
        return len(self.acts)


class Control(ABC, Generic[StateT]):
    """A named, stateful dialogue unit."""

    state_class: ClassVar[type[BaseModel]]
    input_handlers: ClassVar[tuple[InputHandler, ...]] = ()
    initiative_handlers: ClassVar[tuple[InitiativeHandler, ...]] = ()

    def __init__(self, control_id: str):
        self.id = control_id
        self.state: StateT = self.state_class()  # type: ignore[assignment]
        self._input_match: HandlerMatch | None = None
        self._initiative_match: HandlerMatch | None = None
        self.log = control_logger(type(self).__module__, control_id)

    # --- handler tables -------------------------------------------------

    def get_input_handlers(self) -> Sequence[InputHandler]:
        return self.input_handlers

    def get_initiative_handlers(self) -> Sequence[InitiativeHandler]:
        return self.initiative_handlers

    # --- dispatch -------------------------------------------------------

    async def match_input(self, control_input: ControlInput) -> HandlerMatch | None:
        """Find the handler for this input without keeping it."""
        return await match_input_handler(self, control_input, self.get_input_handlers())

    async def can_handle(self, control_input: ControlInput) -> bool:
        """Whether this control can consume the input.

        Does not change persisted state; the match is kept only for the
        following ``handle`` call.
        """
        self._input_match = await self.match_input(control_input)
        return self._input_match is not None

    async def handle(
        self,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        match: HandlerMatch | None = None,
    ) -> None:
        """Consume the input, then take initiative if nothing else did.

        Args:
            control_input: The turn's input
            result_builder: Collects the acts for this turn
            match: The match returned by ``match_input``; defaults to the one
                kept by the last ``can_handle``

        Raises:
            StateConsistencyError: If there is no matched handler
        """
        match = match or self._input_match
        self._input_match = None
        if match is None or match.phase != "input":
            self.log.error("handle called without a matching can_handle")
            raise StateConsistencyError(
                f"Control '{self.id}': handle called without a prior successful can_handle."
            )

        await run_handler(match, self, control_input, result_builder)
        if not result_builder.has_initiative_act() and await self.can_take_initiative(control_input):
            await self.take_initiative(control_input, result_builder)

    async def can_take_initiative(self, control_input: ControlInput) -> bool:
        self._initiative_match = await match_initiative_handler(
            self, control_input, self.get_initiative_handlers()
        )
        return self._initiative_match is not None

    async def take_initiative(
        self,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        match: HandlerMatch | None = None,
    ) -> None:
        match = match or self._initiative_match
        self._initiative_match = None
        if match is None or match.phase != "initiative":
            self.log.error("take_initiative called without a matching can_take_initiative")
            raise ContractViolationError(
                f"Control '{self.id}': take_initiative called without a prior "
                "successful can_take_initiative."
            )
        await run_handler(match, self, control_input, result_builder)

    # --- helpers --------------------------------------------------------

    @staticmethod
    def evaluate_bool_prop(prop: Any, control_input: ControlInput) -> bool:
        return bool(prop(control_input)) if callable(prop) else bool(prop)

    # --- state ----------------------------------------------------------

    def get_serializable_state(self) -> dict[str, Any]:
        return self.state.model_dump(mode="json")

    def set_serializable_state(self, data: dict[str, Any] | None) -> None:
        self.state = self.state_class.model_validate(data or {})  # type: ignore[assignment]

    # --- exports --------------------------------------------------------

    @abstractmethod
    def render_act(
        self, act: SystemAct, control_input: ControlInput, builder: ControlResponseBuilder
    ) -> None:
        """Render an act this control produced."""

    @abstractmethod
    def stringify_state_for_diagram(self) -> str:
        """One-line summary of the state for debugging diagrams."""

    @abstractmethod
    def update_interaction_model(self, data: InteractionModelData) -> None:
        """Register the intents and slot values this control claims."""

    @abstractmethod
    def get_target_ids(self) -> list[str]:
        """Target slot-value ids this control answers to."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
