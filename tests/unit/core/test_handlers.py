"""Tests for handler table evaluation."""

import pytest

from parley.core.errors import HandlerConflictError
from parley.core.handlers import (
    HandlerMatch,
    InitiativeHandler,
    InputHandler,
    match_initiative_handler,
    match_input_handler,
    run_handler,
)
from parley.core.inputs import ControlInput, YesInput


class FakeControl:
    def __init__(self):
        self.id = "fake"
        self.calls = []


def _yes():
    return ControlInput(request=YesInput(), turn_number=4)


def _record(name):
    def handle(control, control_input, result_builder):
        control.calls.append(name)

    return handle


class TestMatchInputHandler:
    @pytest.mark.asyncio
    async def test_single_match(self):
        handlers = [
            InputHandler("No", lambda c, i: False, _record("No")),
            InputHandler("Yes", lambda c, i: True, _record("Yes")),
        ]

        match = await match_input_handler(FakeControl(), _yes(), handlers)

        assert isinstance(match, HandlerMatch)
        assert match.name == "Yes"
        assert match.phase == "input"
        assert match.turn_number == 4

    @pytest.mark.asyncio
    async def test_no_match(self):
        handlers = [InputHandler("No", lambda c, i: False, _record("No"))]

        assert await match_input_handler(FakeControl(), _yes(), handlers) is None

    @pytest.mark.asyncio
    async def test_two_matches_raise(self):
        """
        GIVEN two handlers that both accept the input
        WHEN matched
        THEN HandlerConflictError names both instead of picking one
        """
        handlers = [
            InputHandler("A", lambda c, i: True, _record("A")),
            InputHandler("B", lambda c, i: True, _record("B")),
        ]

        with pytest.raises(HandlerConflictError) as exc_info:
            await match_input_handler(FakeControl(), _yes(), handlers)

        assert exc_info.value.handler_names == ["A", "B"]

    @pytest.mark.asyncio
    async def test_async_predicate(self):
        async def accepts(control, control_input):
            return True

        match = await match_input_handler(
            FakeControl(), _yes(), [InputHandler("Async", accepts, _record("Async"))]
        )

        assert match.name == "Async"


class TestMatchInitiativeHandler:
    @pytest.mark.asyncio
    async def test_first_true_wins_and_later_predicates_not_evaluated(self):
        evaluated = []

        def predicate(name, result):
            def _p(control, control_input):
                evaluated.append(name)
                return result

            return _p

        handlers = [
            InitiativeHandler("Confirm", predicate("Confirm", False), _record("Confirm")),
            InitiativeHandler("Fix", predicate("Fix", True), _record("Fix")),
            InitiativeHandler("Elicit", predicate("Elicit", True), _record("Elicit")),
        ]

        match = await match_initiative_handler(FakeControl(), _yes(), handlers)

        assert match.name == "Fix"
        assert evaluated == ["Confirm", "Fix"]


class TestRunHandler:
    @pytest.mark.asyncio
    async def test_runs_input_and_initiative_handlers(self):
        control = FakeControl()
        input_match = HandlerMatch("input", InputHandler("In", lambda c, i: True, _record("in")))
        initiative_match = HandlerMatch(
            "initiative", InitiativeHandler("Init", lambda c, i: True, _record("init"))
        )

        await run_handler(input_match, control, _yes(), None)
        await run_handler(initiative_match, control, _yes(), None)

        assert control.calls == ["in", "init"]
