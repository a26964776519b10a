"""Per-control state persistence between turns."""

import json
from collections.abc import Iterable
from typing import Any

from parley.controls.base import Control


class StateStore:
    """Maps control ids to serialized control state."""

    def __init__(self, states: dict[str, dict[str, Any]] | None = None):
        self.states: dict[str, dict[str, Any]] = dict(states or {})

    def save(self, controls: Iterable[Control]) -> None:
        for control in controls:
            self.states[control.id] = control.get_serializable_state()

    def restore(self, controls: Iterable[Control]) -> None:
        """Load saved state into freshly built controls; unknown ids start empty."""
        for control in controls:
            control.set_serializable_state(self.states.get(control.id))

    def to_json(self) -> str:
        return json.dumps(self.states, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "StateStore":
        return cls(json.loads(text) if text else {})
