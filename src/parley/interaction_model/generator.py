"""Interaction-model export.

Controls describe the intents and shared slot values they rely on so that an
NLU schema can be generated from a control tree. This is configuration export
only; nothing here runs during a turn.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Shared slot types that carry control-directed words
TARGET_SLOT_TYPE = "target"
ACTION_SLOT_TYPE = "action"
FEEDBACK_SLOT_TYPE = "feedback"

GENERAL_CONTROL_INTENT = "GeneralControlIntent"
ORDINAL_CONTROL_INTENT = "OrdinalControlIntent"
YES_INTENT = "YesIntent"
NO_INTENT = "NoIntent"


def value_control_intent_name(slot_type: str) -> str:
    return f"{slot_type}_ValueControlIntent"


class SlotTypeValue(BaseModel):
    id: str
    synonyms: list[str] = Field(default_factory=list)


class ControlAssociation(BaseModel):
    """Which target and action ids one control claims."""

    control_id: str
    slot_type: str
    targets: list[str] = Field(default_factory=list)
    actions: dict[str, list[str]] = Field(default_factory=dict)


class InteractionModelData(BaseModel):
    """Collected interaction-model data for a control tree."""

    intents: list[str] = Field(default_factory=list)
    slot_types: dict[str, list[SlotTypeValue]] = Field(default_factory=dict)
    controls: list[ControlAssociation] = Field(default_factory=list)

    def add_intent(self, name: str) -> "InteractionModelData":
        if name not in self.intents:
            self.intents.append(name)
        return self

    def add_yes_and_no_intents(self) -> "InteractionModelData":
        return self.add_intent(YES_INTENT).add_intent(NO_INTENT)

    def add_values_to_slot_type(
        self, slot_type: str, value_id: str, synonyms: list[str]
    ) -> "InteractionModelData":
        values = self.slot_types.setdefault(slot_type, [])
        for existing in values:
            if existing.id == value_id:
                for synonym in synonyms:
                    if synonym not in existing.synonyms:
                        existing.synonyms.append(synonym)
                return self
        values.append(SlotTypeValue(id=value_id, synonyms=list(synonyms)))
        return self

    def add_control(self, association: ControlAssociation) -> "InteractionModelData":
        self.controls = [c for c in self.controls if c.control_id != association.control_id]
        self.controls.append(association)
        logger.debug(
            f"Registered interaction model data for control '{association.control_id}'",
            extra={"control_id": association.control_id},
        )
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def build_interaction_model(controls: list[Any]) -> InteractionModelData:
    """Collect interaction-model data from every control."""
    data = InteractionModelData()
    for control in controls:
        control.update_interaction_model(data)
    return data
