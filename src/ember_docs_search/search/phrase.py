"""Term proximity scoring for multi-word queries.

Rewards items where the first occurrences of the query terms sit close
together. Positions are character offsets into the lowercased content.
"""

from __future__ import annotations

from collections.abc import Iterable


def get_span(positions: Iterable[int]) -> int | None:
    """Distance between the earliest and latest distinct position.

    Returns None when fewer than two distinct positions are given.
    """
    distinct = sorted(set(positions))
    if len(distinct) < 2:
        return None
    return distinct[-1] - distinct[0]


def proximity_bonus(positions: Iterable[int], threshold: int, divisor: int) -> int:
    """Bonus inversely proportional to the span of the positions.

    Closer terms score higher; spans at or beyond ``threshold`` earn nothing.
    """
    span = get_span(positions)
    if span is None or span >= threshold:
        return 0
    return (threshold - span) // divisor
