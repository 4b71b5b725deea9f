"""Deterministic ordering of docblock tags."""

from typing import List, Sequence

from ..constants import TAG_SORT_ORDER
from ..docblock.tags import Tag


def _rank(tag: Tag) -> int:
    # Unknown categories rank with the unlabeled entry
    try:
        return TAG_SORT_ORDER.index(tag.name)
    except ValueError:
        return 0


def _sort_bucket(tags: Sequence[Tag]) -> List[Tag]:
    return sorted(tags, key=lambda tag: (_rank(tag), tag.render()))


def sort_tags(tags: Sequence[Tag]) -> List[Tag]:
    """Order tags: static methods and foreign tags first, then the rest by rank.

    Static method tags are never interleaved with instance members. Ties
    within a rank are broken by the rendered tag text.

    Args:
        tags: Pre-existing and newly rendered tags, in any order

    Returns:
        New list in final docblock order
    """
    orderable: List[Tag] = []
    other: List[Tag] = []
    for tag in tags:
        if (tag.name == "method" and tag.is_static) or tag.name not in TAG_SORT_ORDER:
            other.append(tag)
        else:
            orderable.append(tag)

    return _sort_bucket(other) + _sort_bucket(orderable)
