"""Common fixtures for Parley tests."""

import logging
from typing import Any

import pytest

from parley.controls.base import ControlResultBuilder
from parley.core.constants import Action
from parley.core.inputs import (
    ControlInput,
    GeneralInput,
    IntentInput,
    NoInput,
    OrdinalInput,
    ScreenEventInput,
    ValueInput,
    YesInput,
)

COLORS = ["red", "green", "blue", "yellow"]


class InputFactory:
    """Builds ControlInput objects for the common resolved-input shapes."""

    def __init__(self, slot_type: str = "Color"):
        self.slot_type = slot_type
        self.turn_number = 0

    def _wrap(self, request: Any) -> ControlInput:
        self.turn_number += 1
        return ControlInput(request=request, turn_number=self.turn_number)

    def value(self, *values: str, action: str | None = None, **kwargs: Any) -> ControlInput:
        slot_type = kwargs.pop("slot_type", self.slot_type)
        return self._wrap(
            ValueInput(slot_type=slot_type, values=list(values), action=action, **kwargs)
        )

    def set(self, value: str) -> ControlInput:
        return self.value(value, action=Action.SET.value)

    def change(self, value: str) -> ControlInput:
        return self.value(value, action=Action.CHANGE.value)

    def add(self, *values: str) -> ControlInput:
        return self.value(*values, action=Action.ADD.value)

    def remove(self, *values: str) -> ControlInput:
        return self.value(*values, action=Action.REMOVE.value)

    def general(self, action: str, **kwargs: Any) -> ControlInput:
        return self._wrap(GeneralInput(action=action, **kwargs))

    def ordinal(self, n: int, **kwargs: Any) -> ControlInput:
        return self._wrap(OrdinalInput(ordinal=n, **kwargs))

    def touch(self, *arguments: Any) -> ControlInput:
        return self._wrap(ScreenEventInput(arguments=list(arguments)))

    def yes(self) -> ControlInput:
        return self._wrap(YesInput())

    def no(self) -> ControlInput:
        return self._wrap(NoInput())

    def intent(self, name: str, **slots: str) -> ControlInput:
        return self._wrap(IntentInput(name=name, slots=slots))


@pytest.fixture
def inputs() -> InputFactory:
    """Factory for turn inputs against the ``Color`` slot type."""
    return InputFactory()


@pytest.fixture
def result_builder() -> ControlResultBuilder:
    return ControlResultBuilder()


@pytest.fixture
def colors() -> list[str]:
    return list(COLORS)


def act_names(builder: ControlResultBuilder) -> list[str]:
    return [act.name.value for act in builder.acts]


@pytest.fixture
def names():
    """Returns a helper listing the act names in a result builder."""
    return act_names


@pytest.fixture(autouse=True)
def reset_parley_logger():
    """Undo setup_logging so caplog sees package records in later tests."""
    yield
    logger = logging.getLogger("parley")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
