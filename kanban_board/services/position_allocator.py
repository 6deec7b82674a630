"""Fractional ordering keys for drag-and-drop.

Siblings are ordered by ascending float ``position``. Inserting between two
siblings takes the midpoint, so a move writes exactly one row and never
renumbers the rest of the container. Repeated splits of the same gap eat into
float precision; ``gap_is_exhausted`` detects that and ``respaced_positions``
provides the evenly spaced replacement keys.
"""
from typing import List, Optional

DEFAULT_POSITION = 1.0
POSITION_STEP = 1.0


def allocate_position(prev: Optional[float], next: Optional[float]) -> float:
    """Return a position strictly between ``prev`` and ``next``.

    Either neighbour may be ``None``:
    - both present: midpoint
    - no ``prev`` (insert at head): ``next / 2``, or ``next - 1`` when
      ``next`` is not positive, since halving would not move it down
    - no ``next`` (insert at tail): ``prev + 1``
    - neither (empty container): ``1.0``
    """
    if prev is not None and next is not None:
        return (prev + next) / 2
    if next is not None:
        if next > 0:
            return next / 2
        return next - POSITION_STEP
    if prev is not None:
        return prev + POSITION_STEP
    return DEFAULT_POSITION


def append_position(max_position: Optional[float]) -> float:
    """Position for a plain append: one past the current maximum"""
    if max_position is None:
        return DEFAULT_POSITION
    return max_position + POSITION_STEP


def gap_is_exhausted(
    prev: Optional[float],
    position: float,
    next: Optional[float],
    min_gap: float,
) -> bool:
    """True when ``position`` sits closer than ``min_gap`` to a neighbour"""
    if prev is not None and position - prev < min_gap:
        return True
    if next is not None and next - position < min_gap:
        return True
    return False


def respaced_positions(count: int) -> List[float]:
    """Evenly spaced keys 1.0, 2.0, ... for ``count`` siblings"""
    return [DEFAULT_POSITION + POSITION_STEP * index for index in range(count)]
