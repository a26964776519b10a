"""Value validation for list controls.

A validator receives the value under test and the current turn's input and
returns ``True`` or a :class:`ValidationFailure`. Validators can be sync or
async; the single-value control passes its state, the multi-value control
passes the candidate items.

Usage:
    from parley.core.validation import ValidationFailure, ValidatorRegistry

    @ValidatorRegistry.register("not_blue")
    def not_blue(state, input):
        if state.value == "blue":
            return ValidationFailure(reason_code="Blue", rendered_reason="blue is sold out")
        return True
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from parley.core.state import ListControlState, MultiValueItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationFailure:
    """Why a value was rejected."""

    reason_code: str | None = None
    rendered_reason: str | None = None
    invalid_values: list[str] = field(default_factory=list)


ValidationResult = bool | ValidationFailure
ValidatorFn = Callable[[Any, Any], ValidationResult | Awaitable[ValidationResult]]

_validators: dict[str, ValidatorFn] = {}
_validators_lock = Lock()


async def evaluate_validators(
    validators: Sequence[ValidatorFn], subject: Any, control_input: Any
) -> ValidationResult:
    """Run validators in order; the first failure wins.

    Exceptions raised by a validator propagate unchanged.
    """
    for validator in validators:
        result = validator(subject, control_input)
        if asyncio.iscoroutine(result) or isinstance(result, Awaitable):
            result = await result
        if result is not True:
            failure = result if isinstance(result, ValidationFailure) else ValidationFailure()
            logger.debug(
                f"Validation failed: {failure.reason_code}",
                extra={
                    "reason_code": failure.reason_code,
                    "invalid_values": failure.invalid_values,
                },
            )
            return failure
    return True


class ValidatorRegistry:
    """
    Thread-safe registry of named validators.

    Names let YAML configuration refer to validators defined in code.
    """

    @classmethod
    def register(cls, name: str) -> Callable[[ValidatorFn], ValidatorFn]:
        """
        Register a validator under a name.

        Args:
            name: Name referenced from configuration

        Returns:
            Decorator function
        """

        def decorator(func: ValidatorFn) -> ValidatorFn:
            with _validators_lock:
                if name in _validators:
                    logger.warning(
                        f"Validator '{name}' already registered, overwriting",
                        extra={"validator_name": name},
                    )
                _validators[name] = func
            return func

        return decorator

    @classmethod
    def get(cls, name: str) -> ValidatorFn:
        """
        Get validator by name.

        Raises:
            ValueError: If validator is not registered
        """
        with _validators_lock:
            if name not in _validators:
                raise ValueError(
                    f"Validator '{name}' not registered. Available: {list(_validators.keys())}"
                )
            return _validators[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        with _validators_lock:
            return name in _validators

    @classmethod
    def list_validators(cls) -> list[str]:
        with _validators_lock:
            return list(_validators.keys())

    @classmethod
    def unregister(cls, name: str) -> None:
        with _validators_lock:
            _validators.pop(name, None)


def _items_of(subject: Any) -> list[tuple[str, bool]]:
    if isinstance(subject, ListControlState):
        if subject.value is None:
            return []
        return [(subject.value, bool(subject.er_match))]
    return [(item.id, item.er_match) for item in subject if isinstance(item, MultiValueItem)]


@ValidatorRegistry.register("er_match")
def require_er_match(subject: Any, control_input: Any) -> ValidationResult:
    """Reject values that did not resolve to a known catalog id."""
    invalid = [value_id for value_id, er_match in _items_of(subject) if not er_match]
    if invalid:
        return ValidationFailure(
            reason_code="NotAnEntityResolutionMatch",
            rendered_reason="it is not one of the options",
            invalid_values=invalid,
        )
    return True


@ValidatorRegistry.register("no_duplicates")
def reject_duplicates(subject: Any, control_input: Any) -> ValidationResult:
    """Reject values that appear more than once."""
    seen: set[str] = set()
    invalid: list[str] = []
    for value_id, _ in _items_of(subject):
        if value_id in seen and value_id not in invalid:
            invalid.append(value_id)
        seen.add(value_id)
    if invalid:
        return ValidationFailure(
            reason_code="Duplicate",
            rendered_reason="it is already in the list",
            invalid_values=invalid,
        )
    return True


def one_of(choices: Sequence[str], rendered_reason: str = "it is not available") -> ValidatorFn:
    """Build a validator accepting only the given ids."""

    def _validate(subject: Any, control_input: Any) -> ValidationResult:
        invalid = [value_id for value_id, _ in _items_of(subject) if value_id not in choices]
        if invalid:
            return ValidationFailure(
                reason_code="NotInChoices",
                rendered_reason=rendered_reason,
                invalid_values=invalid,
            )
        return True

    return _validate
