"""Default en-US prompts, keyed by prompt slot.

Templates use ``str.format`` fields: ``{value}``, ``{previous_value}``,
``{reason}`` and ``{suggestions}``.
"""

LIST_PROMPTS: dict[str, str] = {
    "value_set": "OK, {value}.",
    "value_changed": "OK, I changed it to {value}.",
    "general_invalid_value": "Sorry, {value} is not a valid choice.",
    "invalid_value": "Sorry, {value} is not a valid choice because {reason}.",
    "unusable_input_value": "Sorry, I'm not sure how to do that.",
    "request_value": "What is your selection? Some suggestions are {suggestions}.",
    "request_changed_value": "What should I change it to? Some suggestions are {suggestions}.",
    "request_removed_value": "What value do you want to remove? Some suggestions are {suggestions}.",
    "general_request_removed_value": "What value do you want to remove?",
    "confirm_value": "Was that {value}?",
    "value_confirmed": "Great.",
    "value_disconfirmed": "My mistake.",
}

LIST_REPROMPTS: dict[str, str] = dict(LIST_PROMPTS)

MULTI_VALUE_LIST_PROMPTS: dict[str, str] = {
    **LIST_PROMPTS,
    "value_added": "OK, added {value}.",
    "value_removed": "OK, removed {value}.",
    "value_cleared": "OK, cleared {value} from the list.",
    "general_invalid_value": "Sorry, {value} can't be added.",
    "invalid_value": "Sorry, {value} can't be added as {reason}.",
    "invalid_remove_value": "Sorry, {value} is not in the list.",
    "confirm_value": "OK, I have {value}. Is that all?",
    "value_disconfirmed": "You can add new values or update existing values.",
}

MULTI_VALUE_LIST_REPROMPTS: dict[str, str] = {
    **MULTI_VALUE_LIST_PROMPTS,
    "confirm_value": "I have {value}. Is that all?",
}

# Synonyms contributed to shared slot types by the interaction-model export.
TARGET_CHOICE_SYNONYMS = ["choice", "selection", "option"]
ACTION_SELECT_SYNONYMS = ["select", "choose", "pick"]
ACTION_ADD_SYNONYMS = ["add", "include", "put in"]
ACTION_REMOVE_SYNONYMS = ["remove", "delete", "take out", "drop"]
ACTION_CLEAR_SYNONYMS = ["clear", "empty", "reset"]
