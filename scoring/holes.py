"""Selecting and validating the active hole set of a round."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from models import Course, Hole

from .exceptions import InconsistentStateError

VALID_HOLE_COUNTS = (9, 18)


def active_holes(course: Course, num_holes: int, holes_range: Optional[str] = None) -> List[Hole]:
    """
    Holes played for a round configuration, ordered by hole number.

    A 9-hole course played over 18 holes is looped: the second loop is
    numbered 10-18 and stroke indices are spread so the first loop holds the
    odd indices and the second loop the even ones.
    """
    if num_holes not in VALID_HOLE_COUNTS:
        raise InconsistentStateError(f"A round is 9 or 18 holes, not {num_holes}")

    holes = sorted(course.holes, key=lambda h: h.number)

    if num_holes == 18 and len(holes) == 9:
        front = [h.model_copy(update={"stroke_index": 2 * h.stroke_index - 1}) for h in holes]
        back = [
            h.model_copy(update={"number": h.number + 9, "stroke_index": 2 * h.stroke_index})
            for h in holes
        ]
        selected = front + back
    elif num_holes == 9 and holes_range == "10-18":
        selected = [h for h in holes if 10 <= h.number <= 18]
    else:
        selected = [h for h in holes if h.number <= num_holes]

    if len(selected) != num_holes:
        label = f"holes {holes_range}" if holes_range else f"{num_holes} holes"
        raise InconsistentStateError(
            f"Course '{course.name}' has {len(holes)} holes and cannot supply {label}"
        )

    validate_hole_set(selected)
    return selected


def validate_hole_set(holes: Sequence[Hole]) -> None:
    """
    Check a hole set can be used for stroke allocation.

    Hole numbers and stroke indices must be distinct. An 18-hole set must use
    every index 1-18; a 9-hole set may carry the gapped indices of an 18-hole
    card and is ranked by them.
    """
    if len(holes) not in VALID_HOLE_COUNTS:
        raise InconsistentStateError(f"Expected 9 or 18 holes, got {len(holes)}")

    numbers = [h.number for h in holes]
    if len(set(numbers)) != len(numbers):
        raise InconsistentStateError(f"Duplicate hole numbers in {sorted(numbers)}")

    indices = [h.stroke_index for h in holes]
    if len(set(indices)) != len(indices):
        raise InconsistentStateError(f"Duplicate stroke indices in {sorted(indices)}")

    if len(holes) == 18 and sorted(indices) != list(range(1, 19)):
        raise InconsistentStateError(f"Stroke indices {sorted(indices)} are not 1-18")


def stroke_ranks(holes: Sequence[Hole]) -> Dict[int, int]:
    """Map hole number -> difficulty rank among the set (1 = lowest stroke index)."""
    ordered = sorted(holes, key=lambda h: h.stroke_index)
    return {hole.number: rank for rank, hole in enumerate(ordered, start=1)}
