"""Core control errors."""


class ParleyError(Exception):
    """Base class for all Parley errors."""

    pass


class ContractViolationError(ParleyError):
    """Raised when a control is driven in a way its protocol forbids."""

    pass


class HandlerConflictError(ContractViolationError):
    """Raised when more than one handler matches in a single phase."""

    def __init__(self, control_id: str, phase: str, handler_names: list[str]):
        self.control_id = control_id
        self.phase = phase
        self.handler_names = handler_names
        super().__init__(
            f"Control '{control_id}': more than one {phase} handler matched: {handler_names}"
        )


class StateConsistencyError(ParleyError):
    """Raised when control state disagrees with what the input refers to."""

    pass


class ConfigError(ParleyError):
    """Raised when configuration is invalid."""


class RenderError(ParleyError):
    """Raised when an act cannot be rendered."""

    pass
