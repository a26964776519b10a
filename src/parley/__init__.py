"""Parley - mixed-initiative dialogue controls.

Controls acquire values from a user over several turns: they consume
resolved inputs, keep their own state, and ask the next question when no
one else does.

Quick start:
    from parley import ControlInput, ListControl, run_turn

    control = ListControl(id="color", slot_type="Color", list_item_ids=["red", "green"])
    result = await run_turn(control, ControlInput.of({"type": "general", "action": "builtin_set"}))
    print(result.prompt)
"""

from parley.__version__ import __version__
from parley.config.loader import ConfigLoader
from parley.config.models import ControlsConfig, ListControlProps, MultiValueListControlProps
from parley.controls import (
    Control,
    ControlResultBuilder,
    ListControl,
    MultiValueListControl,
    build_control,
)
from parley.core.errors import (
    ConfigError,
    ContractViolationError,
    HandlerConflictError,
    ParleyError,
    RenderError,
    StateConsistencyError,
)
from parley.core.inputs import ControlInput
from parley.core.validation import ValidationFailure, ValidatorRegistry
from parley.rendering.response import ControlResponseBuilder
from parley.runtime.persistence import StateStore
from parley.runtime.turn import TurnResult, run_turn

__all__ = [
    # Version info
    "__version__",
    # Controls
    "Control",
    "ControlInput",
    "ControlResultBuilder",
    "ControlResponseBuilder",
    "ListControl",
    "MultiValueListControl",
    "build_control",
    # Configuration
    "ConfigLoader",
    "ControlsConfig",
    "ListControlProps",
    "MultiValueListControlProps",
    # Validation
    "ValidationFailure",
    "ValidatorRegistry",
    # Runtime
    "StateStore",
    "TurnResult",
    "run_turn",
    # Errors
    "ParleyError",
    "ConfigError",
    "ContractViolationError",
    "HandlerConflictError",
    "RenderError",
    "StateConsistencyError",
]
