"""List controls."""

from parley.config.models import ListControlProps, MultiValueListControlProps
from parley.controls.base import Control, ControlResultBuilder
from parley.controls.list_control import ListControl
from parley.controls.multi_value_list_control import MultiValueListControl


def build_control(props: ListControlProps | MultiValueListControlProps) -> Control:
    """Create the control described by a configuration entry."""
    if isinstance(props, MultiValueListControlProps):
        return MultiValueListControl(props)
    return ListControl(props)


__all__ = [
    "Control",
    "ControlResultBuilder",
    "ListControl",
    "MultiValueListControl",
    "build_control",
]
