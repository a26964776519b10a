"""Single-value list control.

Acquires one value from a list of candidate ids. The user may answer with a
typed value ("blue", "change it to blue"), a spoken ordinal ("the second
one"), a touch on a rendered list, or yes/no to a confirmation question.
"""

from typing import Any

from parley.acts.base import SystemAct
from parley.acts.content import (
    InvalidValueAct,
    UnusableInputValueAct,
    ValueChangedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    ValueSetAct,
)
from parley.acts.initiative import (
    ConfirmValueAct,
    RequestChangedValueByListAct,
    RequestValueByListAct,
)
from parley.config.models import ListControlProps
from parley.controls.base import Control, ControlResultBuilder
from parley.controls.guards import (
    action_is_match,
    action_is_match_or_none,
    feedback_is_match_or_none,
    is_bare_no,
    is_bare_yes,
    screen_event_for,
    target_is_match_or_none,
)
from parley.core.constants import (
    ORDINAL_OUT_OF_RANGE,
    ORDINAL_OUT_OF_RANGE_REASON,
    Action,
    ActName,
    Target,
)
from parley.core.errors import ContractViolationError, RenderError, StateConsistencyError
from parley.core.handlers import InitiativeHandler, InputHandler
from parley.core.inputs import ControlInput, GeneralInput, OrdinalInput, ValueInput
from parley.core.pagination import page_window
from parley.core.state import LastInitiative, ListControlState
from parley.core.validation import ValidationResult, evaluate_validators
from parley.interaction_model.generator import (
    ACTION_SLOT_TYPE,
    GENERAL_CONTROL_INTENT,
    ORDINAL_CONTROL_INTENT,
    TARGET_SLOT_TYPE,
    ControlAssociation,
    InteractionModelData,
    value_control_intent_name,
)
from parley.rendering.response import ControlResponseBuilder
from parley.rendering.strings import (
    ACTION_SELECT_SYNONYMS,
    LIST_PROMPTS,
    LIST_REPROMPTS,
    TARGET_CHOICE_SYNONYMS,
)


class ListControl(Control[ListControlState]):
    """Control that acquires a single value from a list."""

    state_class = ListControlState

    renderable_acts = frozenset(
        {
            ActName.REQUEST_VALUE,
            ActName.REQUEST_CHANGED_VALUE,
            ActName.UNUSABLE_INPUT_VALUE,
            ActName.INVALID_VALUE,
            ActName.VALUE_SET,
            ActName.VALUE_CHANGED,
            ActName.CONFIRM_VALUE,
            ActName.VALUE_CONFIRMED,
            ActName.VALUE_DISCONFIRMED,
        }
    )

    def __init__(self, props: ListControlProps | dict[str, Any] | None = None, **kwargs: Any):
        if not isinstance(props, ListControlProps):
            props = ListControlProps.model_validate({**(props or {}), **kwargs})
        super().__init__(props.id)
        self.props = props
        self.prompts = {**LIST_PROMPTS, **props.prompts}
        self.reprompts = {**LIST_REPROMPTS, **props.reprompts}

    def get_input_handlers(self) -> list[InputHandler]:
        return [*self.input_handlers, *self.props.custom_handlers]

    # --- public operations ----------------------------------------------

    def set_value(self, value: str, er_match: bool = True) -> None:
        """Directly set the value; resets confirmation and records the previous value."""
        self.state.previous_value = self.state.value
        self.state.value = value
        self.state.er_match = er_match
        self.state.confirmed = False

    def clear(self) -> None:
        self.state = ListControlState()

    def get_choices(self, control_input: ControlInput) -> list[str]:
        """All candidate ids, recomputed on every call."""
        supplier = self.props.list_item_ids
        choices = supplier(self, control_input) if callable(supplier) else supplier
        if choices is None:
            raise ContractViolationError(f"Control '{self.id}': candidate supplier returned None")
        return list(choices)

    def get_spoken_choices(self, all_choices: list[str]) -> list[str]:
        return page_window(all_choices, self.state.spoken_page_index, self.props.page_size)

    async def validate(self, control_input: ControlInput) -> ValidationResult:
        return await evaluate_validators(self.props.validation, self.state, control_input)

    def render_value(self, value: str, control_input: ControlInput) -> str:
        return self.props.value_renderer(value, control_input)

    # --- input handlers -------------------------------------------------

    def _typed_value(self, control_input: ControlInput) -> ValueInput | None:
        request = control_input.request
        if (
            isinstance(request, ValueInput)
            and request.value is not None
            and target_is_match_or_none(request.target, self.props.interaction_model.targets)
        ):
            return request
        return None

    def _general(self, control_input: ControlInput) -> GeneralInput | None:
        request = control_input.request
        if (
            isinstance(request, GeneralInput)
            and target_is_match_or_none(request.target, self.props.interaction_model.targets)
            and feedback_is_match_or_none(request.feedback)
        ):
            return request
        return None

    def is_set_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_value(control_input)
        return (
            request is not None
            and request.slot_type == self.props.slot_type
            and feedback_is_match_or_none(request.feedback)
            and action_is_match(request.action, self.props.interaction_model.actions.set)
        )

    async def handle_set_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        request: ValueInput = control_input.request  # type: ignore[assignment]
        self.set_value(request.value, request.er_match)  # type: ignore[arg-type]
        await self.validate_and_add_acts(control_input, result_builder, Action.SET.value)

    def is_change_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_value(control_input)
        return (
            request is not None
            and request.slot_type == self.props.slot_type
            and feedback_is_match_or_none(request.feedback)
            and action_is_match(request.action, self.props.interaction_model.actions.change)
        )

    async def handle_change_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        request: ValueInput = control_input.request  # type: ignore[assignment]
        self.set_value(request.value, request.er_match)  # type: ignore[arg-type]
        await self.validate_and_add_acts(control_input, result_builder, Action.CHANGE.value)

    def is_set_without_value(self, control_input: ControlInput) -> bool:
        request = self._general(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.set
        )

    def handle_set_without_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.ask_elicitation_question(control_input, result_builder, Action.SET.value)

    def is_change_without_value(self, control_input: ControlInput) -> bool:
        request = self._general(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.change
        )

    def handle_change_without_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        # Nothing to change yet, so the reply sets the value.
        action = Action.CHANGE.value if self.state.value is not None else Action.SET.value
        self.ask_elicitation_question(control_input, result_builder, action)

    def is_bare_value(self, control_input: ControlInput) -> bool:
        request = self._typed_value(control_input)
        extensions = self.props.interaction_model.slot_value_conflict_extensions
        return (
            request is not None
            and request.feedback is None
            and request.action is None
            and request.slot_type == extensions.filtered_slot_type
        )

    async def handle_bare_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        request: ValueInput = control_input.request  # type: ignore[assignment]
        self.set_value(request.value, request.er_match)  # type: ignore[arg-type]
        await self.validate_and_add_acts(
            control_input, result_builder, self.state.elicitation_action or Action.SET.value
        )

    def _mapped_value(self, control_input: ControlInput) -> str | None:
        mapper = self.props.interaction_model.slot_value_conflict_extensions.intent_to_value_mapper
        return mapper(control_input.request)

    def is_mapped_bare_value(self, control_input: ControlInput) -> bool:
        return (
            self.state.last_initiative_is(ActName.REQUEST_VALUE)
            and self._mapped_value(control_input) is not None
        )

    async def handle_mapped_bare_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.set_value(self._mapped_value(control_input), True)  # type: ignore[arg-type]
        await self.validate_and_add_acts(
            control_input, result_builder, self.state.elicitation_action or Action.SET.value
        )

    def is_confirmation_affirmed(self, control_input: ControlInput) -> bool:
        return is_bare_yes(control_input) and self.state.last_initiative_is(ActName.CONFIRM_VALUE)

    def handle_confirmation_affirmed(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.state.confirmed = True
        self.state.last_initiative = None
        result_builder.add_act(
            ValueConfirmedAct(
                control_id=self.id,
                value=self.state.value,
                rendered_value=self.render_value(self.state.value or "", control_input),
            )
        )

    def is_confirmation_disaffirmed(self, control_input: ControlInput) -> bool:
        return is_bare_no(control_input) and self.state.last_initiative_is(ActName.CONFIRM_VALUE)

    def handle_confirmation_disaffirmed(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.state.confirmed = False
        self.state.last_initiative = None
        result_builder.add_act(
            ValueDisconfirmedAct(
                control_id=self.id,
                value=self.state.value,
                rendered_value=self.render_value(self.state.value or "", control_input),
            )
        )
        self.ask_elicitation_question(control_input, result_builder, Action.SET.value)

    def is_ordinal_screen_event(self, control_input: ControlInput) -> bool:
        return screen_event_for(control_input, self.id) is not None

    def handle_ordinal_screen_event(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        event = screen_event_for(control_input, self.id)
        all_choices = self.get_choices(control_input)
        try:
            ordinal = int(event.arguments[1])  # type: ignore[union-attr]
        except (IndexError, TypeError, ValueError) as e:
            raise StateConsistencyError(
                f"Screen event for '{self.id}' carries no usable ordinal: {event}"
            ) from e
        if ordinal < 1 or ordinal > len(all_choices):
            self.log.error(f"Screen ordinal {ordinal} outside 1..{len(all_choices)}")
            raise StateConsistencyError(
                f"Screen ordinal out of range. ordinal={ordinal} choices={all_choices}"
            )
        value = all_choices[ordinal - 1]
        self.set_value(value, True)
        result_builder.add_act(
            ValueSetAct(
                control_id=self.id, value=value, rendered_value=self.render_value(value, control_input)
            )
        )

    def is_ordinal_selection(self, control_input: ControlInput) -> bool:
        request = control_input.request
        return (
            isinstance(request, OrdinalInput)
            and feedback_is_match_or_none(request.feedback)
            and action_is_match_or_none(request.action, self.props.interaction_model.actions.set)
            and target_is_match_or_none(request.target, self.props.interaction_model.targets)
        )

    def handle_ordinal_selection(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        ordinal = control_input.request.ordinal  # type: ignore[attr-defined]
        spoken_choices = self.get_spoken_choices(self.get_choices(control_input))
        if 1 <= ordinal <= len(spoken_choices):
            value = spoken_choices[ordinal - 1]
            self.set_value(value, True)
            result_builder.add_act(
                ValueSetAct(
                    control_id=self.id,
                    value=value,
                    rendered_value=self.render_value(value, control_input),
                )
            )
            return

        result_builder.add_act(
            UnusableInputValueAct(
                control_id=self.id,
                value=ordinal,
                rendered_value=str(ordinal),
                reason_code=ORDINAL_OUT_OF_RANGE,
                rendered_reason=ORDINAL_OUT_OF_RANGE_REASON,
            )
        )
        action = self.state.elicitation_action or Action.SET.value
        if action == Action.CHANGE and self.state.value is None:
            action = Action.SET.value
        self.ask_elicitation_question(control_input, result_builder, action)

    input_handlers = (
        InputHandler("SetWithValue", is_set_with_value, handle_set_with_value),
        InputHandler("ChangeWithValue", is_change_with_value, handle_change_with_value),
        InputHandler("SetWithoutValue", is_set_without_value, handle_set_without_value),
        InputHandler("ChangeWithoutValue", is_change_without_value, handle_change_without_value),
        InputHandler("BareValue", is_bare_value, handle_bare_value),
        InputHandler("MappedBareValue", is_mapped_bare_value, handle_mapped_bare_value),
        InputHandler("ConfirmationAffirmed", is_confirmation_affirmed, handle_confirmation_affirmed),
        InputHandler(
            "ConfirmationDisaffirmed", is_confirmation_disaffirmed, handle_confirmation_disaffirmed
        ),
        InputHandler("OrdinalScreenEvent", is_ordinal_screen_event, handle_ordinal_screen_event),
        InputHandler("OrdinalSelection", is_ordinal_selection, handle_ordinal_selection),
    )

    # --- initiative handlers --------------------------------------------

    def wants_to_confirm_value(self, control_input: ControlInput) -> bool:
        return (
            self.state.value is not None
            and not self.state.confirmed
            and self.evaluate_bool_prop(self.props.confirmation_required, control_input)
        )

    def confirm_value(self, control_input: ControlInput, result_builder: ControlResultBuilder) -> None:
        self.add_initiative_act(
            ConfirmValueAct(
                control_id=self.id,
                value=self.state.value,
                rendered_value=self.render_value(self.state.value or "", control_input),
            ),
            control_input,
            result_builder,
            value_ids=[self.state.value] if self.state.value is not None else [],
        )

    async def wants_to_fix_invalid_value(self, control_input: ControlInput) -> bool:
        return self.state.value is not None and await self.validate(control_input) is not True

    async def fix_invalid_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        await self.validate_and_add_acts(control_input, result_builder, Action.CHANGE.value)

    def wants_to_elicit_value(self, control_input: ControlInput) -> bool:
        return self.state.value is None and self.evaluate_bool_prop(self.props.required, control_input)

    def elicit_value(self, control_input: ControlInput, result_builder: ControlResultBuilder) -> None:
        self.ask_elicitation_question(control_input, result_builder, Action.SET.value)

    # Priority order: confirm, then fix an invalid value, then elicit.
    initiative_handlers = (
        InitiativeHandler("ConfirmValue", wants_to_confirm_value, confirm_value),
        InitiativeHandler("FixInvalidValue", wants_to_fix_invalid_value, fix_invalid_value),
        InitiativeHandler("ElicitValue", wants_to_elicit_value, elicit_value),
    )

    # --- shared steps ---------------------------------------------------

    async def validate_and_add_acts(
        self,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        elicitation_action: str,
    ) -> None:
        """Validate the held value and report the outcome.

        On success adds ``ValueSetAct`` (set) or ``ValueChangedAct`` (change).
        On failure adds ``InvalidValueAct`` and re-asks with the same action.

        Raises:
            ContractViolationError: If a change is reported with no previous value
        """
        result = await self.validate(control_input)
        value = self.state.value or ""
        if result is True:
            if elicitation_action == Action.CHANGE:
                if self.state.previous_value is None:
                    raise ContractViolationError(
                        "ValueChangedAct should only be used if there is an actual previous value"
                    )
                result_builder.add_act(
                    ValueChangedAct(
                        control_id=self.id,
                        value=self.state.value,
                        rendered_value=self.render_value(value, control_input),
                        previous_value=self.state.previous_value,
                        rendered_previous_value=self.render_value(
                            self.state.previous_value, control_input
                        ),
                    )
                )
            else:
                result_builder.add_act(
                    ValueSetAct(
                        control_id=self.id,
                        value=self.state.value,
                        rendered_value=self.render_value(value, control_input),
                    )
                )
            return

        self.log.debug(f"Value '{value}' failed validation: {result.reason_code}")  # type: ignore[union-attr]
        result_builder.add_act(
            InvalidValueAct(
                control_id=self.id,
                value=self.state.value,
                rendered_value=self.render_value(value, control_input),
                reason_code=result.reason_code,  # type: ignore[union-attr]
                rendered_reason=result.rendered_reason,  # type: ignore[union-attr]
            )
        )
        self.ask_elicitation_question(control_input, result_builder, elicitation_action)

    def ask_elicitation_question(
        self,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        elicitation_action: str,
    ) -> None:
        self.state.elicitation_action = elicitation_action
        all_choices = self.get_choices(control_input)
        spoken_choices = self.get_spoken_choices(all_choices)
        rendered_spoken = [self.render_value(v, control_input) for v in spoken_choices]
        rendered_all = [self.render_value(v, control_input) for v in all_choices]

        if elicitation_action == Action.SET:
            act: SystemAct = RequestValueByListAct(
                control_id=self.id,
                choices_from_active_page=spoken_choices,
                all_choices=all_choices,
                rendered_choices_from_active_page=rendered_spoken,
                rendered_all_choices=rendered_all,
            )
        elif elicitation_action == Action.CHANGE:
            act = RequestChangedValueByListAct(
                control_id=self.id,
                current_value=self.state.value,
                rendered_value=self.render_value(self.state.value or "", control_input),
                choices_from_active_page=spoken_choices,
                all_choices=all_choices,
                rendered_choices_from_active_page=rendered_spoken,
                rendered_all_choices=rendered_all,
            )
        else:
            raise ContractViolationError(f"Unknown elicitation action: {elicitation_action}")

        self.add_initiative_act(act, control_input, result_builder)

    def add_initiative_act(
        self,
        act: SystemAct,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        value_ids: list[str] | None = None,
    ) -> None:
        self.state.last_initiative = LastInitiative(
            act_name=act.name, value_ids=value_ids or [], turn_number=control_input.turn_number
        )
        result_builder.add_act(act)

    # --- exports --------------------------------------------------------

    def render_act(
        self, act: SystemAct, control_input: ControlInput, builder: ControlResponseBuilder
    ) -> None:
        if act.name not in self.renderable_acts:
            raise RenderError(f"{type(self).__name__} cannot render {act.name.value}")
        act.render(control_input, builder, self.prompts, self.reprompts)

    def stringify_state_for_diagram(self) -> str:
        text = self.state.value if self.state.value is not None else "<none>"
        if self.state.elicitation_action is not None:
            text += f"[eliciting, {self.state.elicitation_action}]"
        return text

    def update_interaction_model(self, data: InteractionModelData) -> None:
        interaction_model = self.props.interaction_model
        filtered = interaction_model.slot_value_conflict_extensions.filtered_slot_type
        data.add_intent(GENERAL_CONTROL_INTENT)
        data.add_intent(value_control_intent_name(self.props.slot_type))
        if filtered and filtered != self.props.slot_type:
            data.add_intent(value_control_intent_name(filtered))
        data.add_intent(ORDINAL_CONTROL_INTENT)
        data.add_yes_and_no_intents()

        if Target.CHOICE in interaction_model.targets:
            data.add_values_to_slot_type(TARGET_SLOT_TYPE, Target.CHOICE.value, TARGET_CHOICE_SYNONYMS)
        if Action.SELECT in interaction_model.actions.set:
            data.add_values_to_slot_type(ACTION_SLOT_TYPE, Action.SELECT.value, ACTION_SELECT_SYNONYMS)

        data.add_control(
            ControlAssociation(
                control_id=self.id,
                slot_type=self.props.slot_type,
                targets=list(interaction_model.targets),
                actions=interaction_model.actions.model_dump(),
            )
        )

    def get_target_ids(self) -> list[str]:
        return list(self.props.interaction_model.targets)
