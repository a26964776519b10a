"""Multi-value list control.

Builds an ordered list of ids, e.g. the toppings on a pizza. Values can be
added, changed, removed and cleared by voice, or selected, toggled, removed
and reduced by touch. Duplicates are kept so that a quantity view can count
them.
"""

from typing import Any

from parley.acts.base import SystemAct
from parley.acts.content import (
    InvalidRemoveValueAct,
    InvalidValueAct,
    UnusableInputValueAct,
    ValueAddedAct,
    ValueChangedAct,
    ValueClearedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    ValueRemovedAct,
    ValueSetAct,
)
from parley.acts.initiative import (
    ConfirmValueAct,
    RequestChangedValueByListAct,
    RequestRemovedValueByListAct,
    RequestValueByListAct,
)
from parley.config.models import MultiValueListControlProps
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
    TouchAction,
)
from parley.core.errors import ContractViolationError, RenderError, StateConsistencyError
from parley.core.handlers import InitiativeHandler, InputHandler
from parley.core.inputs import ControlInput, GeneralInput, OrdinalInput, SlotValue, ValueInput
from parley.core.pagination import page_window
from parley.core.state import LastInitiative, MultiValueItem, MultiValueListControlState
from parley.core.validation import ValidationFailure, evaluate_validators
from parley.interaction_model.generator import (
    ACTION_SLOT_TYPE,
    GENERAL_CONTROL_INTENT,
    ORDINAL_CONTROL_INTENT,
    TARGET_SLOT_TYPE,
    ControlAssociation,
    InteractionModelData,
    value_control_intent_name,
)
from parley.rendering.response import ControlResponseBuilder, join_list
from parley.rendering.strings import (
    ACTION_ADD_SYNONYMS,
    ACTION_CLEAR_SYNONYMS,
    ACTION_REMOVE_SYNONYMS,
    MULTI_VALUE_LIST_PROMPTS,
    MULTI_VALUE_LIST_REPROMPTS,
    TARGET_CHOICE_SYNONYMS,
)


class MultiValueListControl(Control[MultiValueListControlState]):
    """Control that acquires an ordered list of values."""

    state_class = MultiValueListControlState

    renderable_acts = frozenset(
        {
            ActName.REQUEST_VALUE,
            ActName.REQUEST_CHANGED_VALUE,
            ActName.REQUEST_REMOVED_VALUE,
            ActName.UNUSABLE_INPUT_VALUE,
            ActName.INVALID_VALUE,
            ActName.INVALID_REMOVE_VALUE,
            ActName.VALUE_SET,
            ActName.VALUE_ADDED,
            ActName.VALUE_CHANGED,
            ActName.VALUE_REMOVED,
            ActName.VALUE_CLEARED,
            ActName.CONFIRM_VALUE,
            ActName.VALUE_CONFIRMED,
            ActName.VALUE_DISCONFIRMED,
        }
    )

    def __init__(
        self, props: MultiValueListControlProps | dict[str, Any] | None = None, **kwargs: Any
    ):
        if not isinstance(props, MultiValueListControlProps):
            props = MultiValueListControlProps.model_validate({**(props or {}), **kwargs})
        super().__init__(props.id)
        self.props = props
        self.prompts = {**MULTI_VALUE_LIST_PROMPTS, **props.prompts}
        self.reprompts = {**MULTI_VALUE_LIST_REPROMPTS, **props.reprompts}

    def get_input_handlers(self) -> list[InputHandler]:
        return [*self.input_handlers, *self.props.custom_handlers]

    # --- public operations ----------------------------------------------

    def add_value(self, value: MultiValueItem | str, er_match: bool = True) -> None:
        item = value if isinstance(value, MultiValueItem) else MultiValueItem(id=value, er_match=er_match)
        self.state.value.append(item)

    def clear(self) -> None:
        self.state = MultiValueListControlState()

    def get_value_ids(self) -> list[str]:
        return self.state.value_ids

    def get_choices(self, control_input: ControlInput) -> list[str]:
        """All candidate ids, recomputed on every call."""
        supplier = self.props.list_item_ids
        choices = supplier(self, control_input) if callable(supplier) else supplier
        if choices is None:
            raise ContractViolationError(f"Control '{self.id}': candidate supplier returned None")
        return list(choices)

    def get_spoken_choices(self, choices: list[str]) -> list[str]:
        return page_window(choices, self.state.spoken_page_index, self.props.page_size)

    async def validate(
        self, items: list[MultiValueItem], control_input: ControlInput
    ) -> bool | ValidationFailure:
        return await evaluate_validators(self.props.validation, items, control_input)

    def render_value(self, value: str, control_input: ControlInput) -> str:
        return self.props.value_renderer(value, control_input)

    def render_values(self, values: str | list[str], control_input: ControlInput) -> str:
        if isinstance(values, str):
            return self.render_value(values, control_input)
        return join_list([self.render_value(v, control_input) for v in values], "and")

    # --- input handlers -------------------------------------------------

    def _slot_types(self) -> list[str]:
        filtered = self.props.interaction_model.slot_value_conflict_extensions.filtered_slot_type
        return [self.props.slot_type] + ([filtered] if filtered else [])

    def _typed_values(self, control_input: ControlInput) -> ValueInput | None:
        request = control_input.request
        if (
            isinstance(request, ValueInput)
            and request.values
            and request.slot_type in self._slot_types()
            and target_is_match_or_none(request.target, self.props.interaction_model.targets)
            and feedback_is_match_or_none(request.feedback)
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

    def _touch_arguments(self, control_input: ControlInput, count: int) -> list[Any] | None:
        event = screen_event_for(control_input, self.id)
        if event is None or len(event.arguments) != count:
            return None
        return event.arguments

    @staticmethod
    def _items_from(values: list[SlotValue]) -> list[MultiValueItem]:
        return [MultiValueItem(id=v.value, er_match=v.er_match) for v in values]

    def is_add_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_values(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.add
        )

    async def handle_add_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        await self.add_values(self._items_from(control_input.request.values), control_input, result_builder)  # type: ignore[attr-defined]

    def is_change_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_values(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.change
        )

    async def handle_change_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        await self.change_values(self._items_from(control_input.request.values), control_input, result_builder)  # type: ignore[attr-defined]

    def is_remove_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_values(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.remove
        )

    def handle_remove_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        ids = [v.value for v in control_input.request.values]  # type: ignore[attr-defined]
        self.remove_values(ids, control_input, result_builder)

    def is_set_with_value(self, control_input: ControlInput) -> bool:
        request = self._typed_values(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.set
        )

    async def handle_set_with_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        await self.set_values(self._items_from(control_input.request.values), control_input, result_builder)  # type: ignore[attr-defined]

    def is_add_without_value(self, control_input: ControlInput) -> bool:
        request = self._general(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.add
        )

    def handle_add_without_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.ask_elicitation_question(control_input, result_builder, Action.ADD.value)

    def is_remove_without_value(self, control_input: ControlInput) -> bool:
        request = self._general(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.remove
        )

    def handle_remove_without_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.ask_elicitation_question(control_input, result_builder, Action.REMOVE.value)

    def is_clear_value(self, control_input: ControlInput) -> bool:
        request = self._general(control_input)
        return request is not None and action_is_match(
            request.action, self.props.interaction_model.actions.clear
        )

    def handle_clear_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        value_ids = self.get_value_ids()
        self.clear()
        result_builder.add_act(
            ValueClearedAct(
                control_id=self.id,
                value=value_ids,
                rendered_value=self.render_values(value_ids, control_input),
            )
        )

    def is_bare_value(self, control_input: ControlInput) -> bool:
        request = self._typed_values(control_input)
        return request is not None and request.action is None and request.feedback is None

    async def handle_bare_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        values: list[SlotValue] = control_input.request.values  # type: ignore[attr-defined]
        action = self.state.elicitation_action or Action.ADD.value
        if action == Action.REMOVE:
            self.remove_values([v.value for v in values], control_input, result_builder)
        elif action == Action.CHANGE:
            await self.change_values(self._items_from(values), control_input, result_builder)
        elif action == Action.SET:
            await self.set_values(self._items_from(values), control_input, result_builder)
        else:
            await self.add_values(self._items_from(values), control_input, result_builder)

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
        item = MultiValueItem(id=self._mapped_value(control_input), er_match=True)  # type: ignore[arg-type]
        await self.add_values([item], control_input, result_builder)

    def is_confirmation_affirmed(self, control_input: ControlInput) -> bool:
        return is_bare_yes(control_input) and self.state.last_initiative_is(ActName.CONFIRM_VALUE)

    def handle_confirmation_affirmed(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        offered = list(self.state.last_initiative.value_ids)  # type: ignore[union-attr]
        self.state.last_initiative = None
        confirmed: list[str] = []
        for value_id in offered:
            item = self._first_unconfirmed(value_id)
            if item is not None:
                item.confirmed = True
                confirmed.append(value_id)
        result_builder.add_act(
            ValueConfirmedAct(
                control_id=self.id,
                value=confirmed,
                rendered_value=self.render_values(confirmed, control_input),
            )
        )

    def is_confirmation_disaffirmed(self, control_input: ControlInput) -> bool:
        return is_bare_no(control_input) and self.state.last_initiative_is(ActName.CONFIRM_VALUE)

    def handle_confirmation_disaffirmed(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        # Only the items just offered are removed; earlier confirmations stand.
        offered = list(self.state.last_initiative.value_ids)  # type: ignore[union-attr]
        self.state.last_initiative = None
        removed: list[str] = []
        for value_id in offered:
            item = self._first_unconfirmed(value_id)
            if item is not None:
                self.state.value.remove(item)
                removed.append(value_id)
        result_builder.add_act(
            ValueDisconfirmedAct(
                control_id=self.id,
                value=removed,
                rendered_value=self.render_values(removed, control_input),
            )
        )

    def is_select_choice_by_touch(self, control_input: ControlInput) -> bool:
        arguments = self._touch_arguments(control_input, 3)
        return arguments is not None and arguments[1] in (TouchAction.SELECT, TouchAction.TOGGLE)

    def handle_select_choice_by_touch(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        arguments = self._touch_arguments(control_input, 3)
        choices = self.get_choices(control_input)
        index = self._touch_index(arguments[2], len(choices))  # type: ignore[index]
        choice_id = choices[index - 1]

        if arguments[1] == TouchAction.SELECT:  # type: ignore[index]
            self._add_touched(choice_id, control_input, result_builder)
        elif choice_id not in self.get_value_ids():
            self._add_touched(choice_id, control_input, result_builder)
        else:
            self.state.value = [item for item in self.state.value if item.id != choice_id]
            result_builder.add_act(
                ValueRemovedAct(
                    control_id=self.id,
                    value=[choice_id],
                    rendered_value=self.render_values([choice_id], control_input),
                )
            )

    def is_remove_choice_by_touch(self, control_input: ControlInput) -> bool:
        arguments = self._touch_arguments(control_input, 3)
        return arguments is not None and arguments[1] in (TouchAction.REMOVE, TouchAction.REDUCE)

    def handle_remove_choice_by_touch(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        arguments = self._touch_arguments(control_input, 3)
        if arguments[1] == TouchAction.REMOVE:  # type: ignore[index]
            # Index into the list as displayed, duplicates included.
            index = self._touch_index(arguments[2], len(self.state.value))  # type: ignore[index]
            removed = self.state.value.pop(index - 1)
        else:
            # Index into the aggregated view, one row per distinct id.
            distinct = list(dict.fromkeys(self.get_value_ids()))
            index = self._touch_index(arguments[2], len(distinct))  # type: ignore[index]
            removed = next(item for item in self.state.value if item.id == distinct[index - 1])
            self.state.value.remove(removed)
        result_builder.add_act(
            ValueRemovedAct(
                control_id=self.id,
                value=[removed.id],
                rendered_value=self.render_values([removed.id], control_input),
            )
        )

    def is_select_done_by_touch(self, control_input: ControlInput) -> bool:
        arguments = self._touch_arguments(control_input, 2)
        return arguments is not None and arguments[1] == TouchAction.COMPLETE

    def handle_select_done_by_touch(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.state.last_initiative = None
        newly_confirmed = self.state.unconfirmed_ids
        for item in self.state.value:
            item.confirmed = True
        if newly_confirmed:
            result_builder.add_act(
                ValueConfirmedAct(
                    control_id=self.id,
                    value=newly_confirmed,
                    rendered_value=self.render_values(newly_confirmed, control_input),
                )
            )

    def is_ordinal_selection(self, control_input: ControlInput) -> bool:
        request = control_input.request
        return (
            isinstance(request, OrdinalInput)
            and feedback_is_match_or_none(request.feedback)
            and action_is_match_or_none(request.action, self.props.interaction_model.actions.add)
            and target_is_match_or_none(request.target, self.props.interaction_model.targets)
        )

    async def handle_ordinal_selection(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        ordinal = control_input.request.ordinal  # type: ignore[attr-defined]
        spoken_choices = self.get_spoken_choices(self.get_choices(control_input))
        if 1 <= ordinal <= len(spoken_choices):
            item = MultiValueItem(id=spoken_choices[ordinal - 1], er_match=True)
            await self.add_values([item], control_input, result_builder)
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
        self.ask_elicitation_question(control_input, result_builder, Action.ADD.value)

    input_handlers = (
        InputHandler("AddWithValue", is_add_with_value, handle_add_with_value),
        InputHandler("ChangeWithValue", is_change_with_value, handle_change_with_value),
        InputHandler("RemoveWithValue", is_remove_with_value, handle_remove_with_value),
        InputHandler("SetWithValue", is_set_with_value, handle_set_with_value),
        InputHandler("AddWithoutValue", is_add_without_value, handle_add_without_value),
        InputHandler("RemoveWithoutValue", is_remove_without_value, handle_remove_without_value),
        InputHandler("ClearValue", is_clear_value, handle_clear_value),
        InputHandler("BareValue", is_bare_value, handle_bare_value),
        InputHandler("MappedBareValue", is_mapped_bare_value, handle_mapped_bare_value),
        InputHandler("ConfirmationAffirmed", is_confirmation_affirmed, handle_confirmation_affirmed),
        InputHandler(
            "ConfirmationDisaffirmed", is_confirmation_disaffirmed, handle_confirmation_disaffirmed
        ),
        InputHandler("SelectChoiceByTouch", is_select_choice_by_touch, handle_select_choice_by_touch),
        InputHandler("RemoveChoiceByTouch", is_remove_choice_by_touch, handle_remove_choice_by_touch),
        InputHandler("SelectDoneByTouch", is_select_done_by_touch, handle_select_done_by_touch),
        InputHandler("OrdinalSelection", is_ordinal_selection, handle_ordinal_selection),
    )

    # --- initiative handlers --------------------------------------------

    def wants_to_confirm_value(self, control_input: ControlInput) -> bool:
        return bool(self.state.unconfirmed_ids) and self.evaluate_bool_prop(
            self.props.confirmation_required, control_input
        )

    def confirm_value(self, control_input: ControlInput, result_builder: ControlResultBuilder) -> None:
        offered = self.state.unconfirmed_ids
        self.add_initiative_act(
            ConfirmValueAct(
                control_id=self.id,
                value=offered,
                rendered_value=self.render_values(offered, control_input),
            ),
            control_input,
            result_builder,
            value_ids=offered,
        )

    async def wants_to_fix_invalid_value(self, control_input: ControlInput) -> bool:
        return bool(self.state.value) and await self.validate(self.state.value, control_input) is not True

    async def fix_invalid_value(
        self, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        result = await self.validate(self.state.value, control_input)
        if result is True:
            return
        failure = result if isinstance(result, ValidationFailure) else ValidationFailure()
        invalid = failure.invalid_values or self.get_value_ids()
        self.state.previous_value = self.get_value_ids()
        self.state.value = [item for item in self.state.value if item.id not in invalid]
        result_builder.add_act(
            InvalidValueAct(
                control_id=self.id,
                value=invalid,
                rendered_value=self.render_values(invalid, control_input),
                reason_code=failure.reason_code,
                rendered_reason=failure.rendered_reason,
            )
        )
        self.ask_elicitation_question(control_input, result_builder, Action.CHANGE.value, invalid)

    def wants_to_elicit_value(self, control_input: ControlInput) -> bool:
        return not self.state.value and self.evaluate_bool_prop(self.props.required, control_input)

    def elicit_value(self, control_input: ControlInput, result_builder: ControlResultBuilder) -> None:
        self.ask_elicitation_question(control_input, result_builder, Action.ADD.value)

    # Priority order: confirm, then fix invalid values, then elicit.
    initiative_handlers = (
        InitiativeHandler("ConfirmValue", wants_to_confirm_value, confirm_value),
        InitiativeHandler("FixInvalidValue", wants_to_fix_invalid_value, fix_invalid_value),
        InitiativeHandler("ElicitValue", wants_to_elicit_value, elicit_value),
    )

    # --- shared steps ---------------------------------------------------

    async def _split_valid(
        self, items: list[MultiValueItem], control_input: ControlInput
    ) -> tuple[list[MultiValueItem], ValidationFailure | None]:
        result = await self.validate(items, control_input)
        if result is True:
            return items, None
        failure = result if isinstance(result, ValidationFailure) else ValidationFailure()
        invalid = set(failure.invalid_values or [item.id for item in items])
        return [item for item in items if item.id not in invalid], failure

    def _report_invalid(
        self,
        items: list[MultiValueItem],
        failure: ValidationFailure,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        elicitation_action: str,
        value_ids: list[str] | None = None,
    ) -> None:
        invalid = failure.invalid_values or [item.id for item in items]
        self.log.debug(f"Values {invalid} failed validation: {failure.reason_code}")
        result_builder.add_act(
            InvalidValueAct(
                control_id=self.id,
                value=invalid,
                rendered_value=self.render_values(invalid, control_input),
                reason_code=failure.reason_code,
                rendered_reason=failure.rendered_reason,
            )
        )
        self.ask_elicitation_question(control_input, result_builder, elicitation_action, value_ids)

    async def add_values(
        self,
        items: list[MultiValueItem],
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
    ) -> None:
        """Add the valid items; report the invalid ones and ask again."""
        valid, failure = await self._split_valid(items, control_input)
        for item in valid:
            self.add_value(item)
        if valid:
            added = [item.id for item in valid]
            result_builder.add_act(
                ValueAddedAct(
                    control_id=self.id,
                    value=added,
                    rendered_value=self.render_values(added, control_input),
                )
            )
        if failure is not None:
            self._report_invalid(items, failure, control_input, result_builder, Action.ADD.value)

    async def set_values(
        self,
        items: list[MultiValueItem],
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
    ) -> None:
        """Replace the whole list with the valid items."""
        valid, failure = await self._split_valid(items, control_input)
        if valid:
            self.state.previous_value = self.get_value_ids()
            self.state.value = list(valid)
            value_ids = [item.id for item in valid]
            result_builder.add_act(
                ValueSetAct(
                    control_id=self.id,
                    value=value_ids,
                    rendered_value=self.render_values(value_ids, control_input),
                )
            )
        if failure is not None:
            self._report_invalid(items, failure, control_input, result_builder, Action.SET.value)

    async def change_values(
        self,
        items: list[MultiValueItem],
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
    ) -> None:
        """Replace the items the last question was about with the new items.

        The replaced items are those named by the last confirmation or
        change request, otherwise the most recently added item. With nothing
        held to replace, the items are added instead. When every new item is
        invalid, the change is asked again about the same items.
        """
        replaced = self._change_targets()
        if not replaced:
            self.log.debug("No held values to change, adding instead")
            await self.add_values(items, control_input, result_builder)
            return

        valid, failure = await self._split_valid(items, control_input)
        if valid:
            self.state.previous_value = self.get_value_ids()
            for value_id in replaced:
                item = self._last_with_id(value_id)
                if item is not None:
                    self.state.value.remove(item)
            for item in valid:
                self.add_value(item)
            self.state.last_initiative = None
            new_ids = [item.id for item in valid]
            result_builder.add_act(
                ValueChangedAct(
                    control_id=self.id,
                    value=new_ids,
                    rendered_value=self.render_values(new_ids, control_input),
                    previous_value=replaced,
                    rendered_previous_value=self.render_values(replaced, control_input),
                )
            )
        if failure is not None:
            if valid:
                # The change went through; the rejected extras can be added later.
                self._report_invalid(items, failure, control_input, result_builder, Action.ADD.value)
            else:
                self._report_invalid(
                    items, failure, control_input, result_builder, Action.CHANGE.value, replaced
                )

    def _change_targets(self) -> list[str]:
        last = self.state.last_initiative
        if (
            last is not None
            and last.act_name in (ActName.CONFIRM_VALUE, ActName.REQUEST_CHANGED_VALUE)
            and last.value_ids
        ):
            held = self.get_value_ids()
            return [value_id for value_id in last.value_ids if value_id in held]
        return self.get_value_ids()[-1:]

    def remove_values(
        self, value_ids: list[str], control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        """Remove one held item per requested id.

        Ids that are not held are reported with ``InvalidRemoveValueAct`` and
        the user is asked again what to remove.
        """
        removed: list[str] = []
        missing: list[str] = []
        for value_id in value_ids:
            item = next((i for i in self.state.value if i.id == value_id), None)
            if item is None:
                missing.append(value_id)
            else:
                self.state.value.remove(item)
                removed.append(value_id)

        if removed:
            result_builder.add_act(
                ValueRemovedAct(
                    control_id=self.id,
                    value=removed,
                    rendered_value=self.render_values(removed, control_input),
                )
            )
        if missing:
            self.log.debug(f"Cannot remove values not in the list: {missing}")
            result_builder.add_act(
                InvalidRemoveValueAct(
                    control_id=self.id,
                    value=missing,
                    rendered_value=self.render_values(missing, control_input),
                )
            )
            self.ask_elicitation_question(control_input, result_builder, Action.REMOVE.value)

    def ask_elicitation_question(
        self,
        control_input: ControlInput,
        result_builder: ControlResultBuilder,
        elicitation_action: str,
        value_ids: list[str] | None = None,
    ) -> None:
        self.state.elicitation_action = elicitation_action

        if elicitation_action == Action.REMOVE:
            available = self.get_value_ids()
            available_page = self.get_spoken_choices(available)
            self.add_initiative_act(
                RequestRemovedValueByListAct(
                    control_id=self.id,
                    available_choices_from_active_page=available_page,
                    available_choices=available,
                    rendered_choices_from_active_page=[
                        self.render_value(v, control_input) for v in available_page
                    ],
                    rendered_available_choices=[self.render_value(v, control_input) for v in available],
                ),
                control_input,
                result_builder,
            )
            return

        all_choices = self.get_choices(control_input)
        spoken_choices = self.get_spoken_choices(all_choices)
        rendered_spoken = [self.render_value(v, control_input) for v in spoken_choices]
        rendered_all = [self.render_value(v, control_input) for v in all_choices]

        if elicitation_action in (Action.ADD, Action.SET):
            act: SystemAct = RequestValueByListAct(
                control_id=self.id,
                choices_from_active_page=spoken_choices,
                all_choices=all_choices,
                rendered_choices_from_active_page=rendered_spoken,
                rendered_all_choices=rendered_all,
            )
        elif elicitation_action == Action.CHANGE:
            current = value_ids if value_ids is not None else self.get_value_ids()
            act = RequestChangedValueByListAct(
                control_id=self.id,
                current_value=current,
                rendered_value=self.render_values(current, control_input),
                choices_from_active_page=spoken_choices,
                all_choices=all_choices,
                rendered_choices_from_active_page=rendered_spoken,
                rendered_all_choices=rendered_all,
            )
        else:
            raise ContractViolationError(f"Unknown elicitation action: {elicitation_action}")

        self.add_initiative_act(act, control_input, result_builder, value_ids=value_ids)

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

    def _first_unconfirmed(self, value_id: str) -> MultiValueItem | None:
        return next((i for i in self.state.value if i.id == value_id and not i.confirmed), None)

    def _last_with_id(self, value_id: str) -> MultiValueItem | None:
        return next((i for i in reversed(self.state.value) if i.id == value_id), None)

    def _add_touched(
        self, choice_id: str, control_input: ControlInput, result_builder: ControlResultBuilder
    ) -> None:
        self.add_value(choice_id, er_match=True)
        result_builder.add_act(
            ValueAddedAct(
                control_id=self.id,
                value=[choice_id],
                rendered_value=self.render_values([choice_id], control_input),
            )
        )

    def _touch_index(self, raw: Any, size: int) -> int:
        try:
            index = int(raw)
        except (TypeError, ValueError) as e:
            raise StateConsistencyError(f"Touch index is not a number: {raw!r}") from e
        if index < 1 or index > size:
            self.log.error(f"Touch index {index} outside 1..{size}")
            raise StateConsistencyError(
                f"Touch index out of range for '{self.id}'. index={index} size={size}"
            )
        return index

    # --- exports --------------------------------------------------------

    def render_act(
        self, act: SystemAct, control_input: ControlInput, builder: ControlResponseBuilder
    ) -> None:
        if act.name not in self.renderable_acts:
            raise RenderError(f"{type(self).__name__} cannot render {act.name.value}")
        act.render(control_input, builder, self.prompts, self.reprompts)

    def stringify_state_for_diagram(self) -> str:
        text = ", ".join(self.get_value_ids()) if self.state.value else "<none>"
        if self.state.elicitation_action is not None:
            text += f"[eliciting, {self.state.elicitation_action}]"
        return text

    def update_interaction_model(self, data: InteractionModelData) -> None:
        interaction_model = self.props.interaction_model
        data.add_intent(GENERAL_CONTROL_INTENT)
        for slot_type in dict.fromkeys(self._slot_types()):
            data.add_intent(value_control_intent_name(slot_type))
        data.add_intent(ORDINAL_CONTROL_INTENT)
        data.add_yes_and_no_intents()

        actions = interaction_model.actions
        if Target.CHOICE in interaction_model.targets:
            data.add_values_to_slot_type(TARGET_SLOT_TYPE, Target.CHOICE.value, TARGET_CHOICE_SYNONYMS)
        if Action.ADD in actions.add:
            data.add_values_to_slot_type(ACTION_SLOT_TYPE, Action.ADD.value, ACTION_ADD_SYNONYMS)
        if Action.REMOVE in actions.remove:
            data.add_values_to_slot_type(ACTION_SLOT_TYPE, Action.REMOVE.value, ACTION_REMOVE_SYNONYMS)
        if Action.CLEAR in actions.clear:
            data.add_values_to_slot_type(ACTION_SLOT_TYPE, Action.CLEAR.value, ACTION_CLEAR_SYNONYMS)

        data.add_control(
            ControlAssociation(
                control_id=self.id,
                slot_type=self.props.slot_type,
                targets=list(interaction_model.targets),
                actions=actions.model_dump(),
            )
        )

    def get_target_ids(self) -> list[str]:
        return list(self.props.interaction_model.targets)
