"""
RankedPageAssembler - slices a fully ordered listing into one page.

Pages of the same snapshot concatenate to exactly total_count distinct ids.
"""
from typing import Any, Optional, Sequence, Tuple

from ..models import Page


def _as_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def clamp_request(page, limit, max_page_size: int, default_limit: int) -> Tuple[int, int]:
    """
    Normalize caller input.

    limit outside [1, max_page_size] is clamped; missing or non-integer limit
    becomes default_limit. page is clamped to >= 0, missing becomes 0.

    Returns:
        (page, limit)
    """
    size = _as_int(limit)
    if size is None:
        size = default_limit
    size = max(1, min(max_page_size, size))

    index = _as_int(page)
    index = max(0, index) if index is not None else 0
    return index, size


def assemble_page(
    ids: Sequence[Any],
    page,
    limit,
    max_page_size: int,
    default_limit: int
) -> Page:
    """
    Page `page` of ids.

    A page past the end is empty but still reports the full total_count.
    """
    index, size = clamp_request(page, limit, max_page_size, default_limit)
    start = min(index * size, len(ids))
    end = min(start + size, len(ids))
    return Page(items=list(ids[start:end]), total_count=len(ids), page=index, limit=size)
