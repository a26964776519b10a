"""Core constants and enums."""

from enum import Enum


class Action(str, Enum):
    """Built-in action slot-value ids."""

    SET = "builtin_set"
    SELECT = "builtin_select"
    CHANGE = "builtin_change"
    ADD = "builtin_add"
    REMOVE = "builtin_remove"
    DELETE = "builtin_delete"
    IGNORE = "builtin_ignore"
    CLEAR = "builtin_clear"


class Feedback(str, Enum):
    """Built-in feedback slot-value ids."""

    AFFIRM = "builtin_affirm"
    DISAFFIRM = "builtin_disaffirm"


class Target(str, Enum):
    """Built-in target slot-value ids."""

    CHOICE = "builtin_choice"
    IT = "builtin_it"


class ActName(str, Enum):
    """Closed set of act kinds a control may emit."""

    # content
    VALUE_SET = "ValueSet"
    VALUE_CHANGED = "ValueChanged"
    VALUE_ADDED = "ValueAdded"
    VALUE_REMOVED = "ValueRemoved"
    VALUE_CLEARED = "ValueCleared"
    INVALID_VALUE = "InvalidValue"
    INVALID_REMOVE_VALUE = "InvalidRemoveValue"
    UNUSABLE_INPUT_VALUE = "UnusableInputValue"
    VALUE_CONFIRMED = "ValueConfirmed"
    VALUE_DISCONFIRMED = "ValueDisconfirmed"
    # initiative
    REQUEST_VALUE = "RequestValue"
    REQUEST_CHANGED_VALUE = "RequestChangedValue"
    REQUEST_REMOVED_VALUE = "RequestRemovedValue"
    CONFIRM_VALUE = "ConfirmValue"


class TouchAction(str, Enum):
    """Actions carried by screen events sent from a multi-value list."""

    SELECT = "Select"
    TOGGLE = "Toggle"
    REMOVE = "Remove"
    REDUCE = "Reduce"
    COMPLETE = "Complete"


DEFAULT_PAGE_SIZE = 3

ORDINAL_OUT_OF_RANGE = "OrdinalOutOfRange"
ORDINAL_OUT_OF_RANGE_REASON = "I don't know which you mean."
