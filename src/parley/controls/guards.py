"""Shape checks shared by handler predicates."""

from collections.abc import Iterable

from parley.core.constants import Feedback
from parley.core.inputs import ControlInput, NoInput, ScreenEventInput, YesInput

ANY_FEEDBACK = (Feedback.AFFIRM.value, Feedback.DISAFFIRM.value)


def target_is_match_or_none(target: str | None, targets: Iterable[str]) -> bool:
    return target is None or target in targets


def feedback_is_match_or_none(feedback: str | None, allowed: Iterable[str] = ANY_FEEDBACK) -> bool:
    return feedback is None or feedback in allowed


def action_is_match(action: str | None, actions: Iterable[str]) -> bool:
    return action is not None and action in actions


def action_is_match_or_none(action: str | None, actions: Iterable[str]) -> bool:
    return action is None or action in actions


def is_bare_yes(control_input: ControlInput) -> bool:
    return isinstance(control_input.request, YesInput)


def is_bare_no(control_input: ControlInput) -> bool:
    return isinstance(control_input.request, NoInput)


def screen_event_for(control_input: ControlInput, control_id: str) -> ScreenEventInput | None:
    """The touch event addressed to this control, if that is what the input is."""
    request = control_input.request
    if isinstance(request, ScreenEventInput) and request.control_id == control_id:
        return request
    return None
