"""Spoken-page windowing over a candidate list."""

import math
from collections.abc import Sequence

from parley.core.constants import DEFAULT_PAGE_SIZE


def page_window(
    all_choices: Sequence[str], page_index: int = 0, page_size: int = DEFAULT_PAGE_SIZE
) -> list[str]:
    """Return the choices on the given spoken page.

    The window is ``all_choices[page_index*page_size:(page_index+1)*page_size]``;
    a page past the end is empty.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page_index < 0:
        raise ValueError(f"page_index must not be negative, got {page_index}")
    start = page_index * page_size
    return list(all_choices[start : start + page_size])


def page_count(total: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(total / page_size) if total > 0 else 0
