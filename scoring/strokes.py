"""Strokes received, net strokes and Stableford points for a single hole."""

from __future__ import annotations

import numbers
from typing import Dict, Iterable, Sequence

from models import CalculatedScore, Hole, ScoreEntry

from .exceptions import InconsistentStateError, InvalidInputError
from .holes import stroke_ranks, validate_hole_set


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    return int(value)


def allocate_strokes(playing_handicap: int, holes: Sequence[Hole]) -> Dict[int, int]:
    """
    Spread a playing handicap over the hole set, keyed by hole number.

    Every hole gets ``handicap // n``; the ``handicap % n`` hardest holes
    (lowest stroke index) get one more. A plus handicap works the other way
    round: strokes are given back, the easiest holes (highest stroke index)
    giving back the extra ones first. Values always sum to the handicap.
    """
    playing_handicap = _require_int("Playing handicap", playing_handicap)
    validate_hole_set(holes)

    n = len(holes)
    ranks = stroke_ranks(holes)
    base, extra = divmod(abs(playing_handicap), n)

    allocation: Dict[int, int] = {}
    for number, rank in ranks.items():
        if playing_handicap >= 0:
            allocation[number] = base + (1 if rank <= extra else 0)
        else:
            allocation[number] = -(base + (1 if rank > n - extra else 0))
    return allocation


def stableford_points(net_strokes: int, par: int) -> int:
    """Two points for a net par, one more per stroke under, one less per stroke over, never below zero."""
    net_strokes = _require_int("Net strokes", net_strokes)
    par = _require_int("Par", par)
    return max(0, par - net_strokes + 2)


def compute_score(
    gross_strokes: int,
    playing_handicap: int,
    hole: Hole,
    total_holes: int,
    holes: Sequence[Hole],
) -> CalculatedScore:
    """Derive strokes received, net strokes and Stableford points for one hole."""
    gross_strokes = _require_int("Gross strokes", gross_strokes)
    if gross_strokes < 1:
        raise InvalidInputError(f"Gross strokes must be at least 1, got {gross_strokes}")
    if total_holes not in (9, 18):
        raise InvalidInputError(f"A round is 9 or 18 holes, not {total_holes}")
    if len(holes) != total_holes:
        raise InconsistentStateError(
            f"Round of {total_holes} holes was given {len(holes)} holes to allocate over"
        )

    allocation = allocate_strokes(playing_handicap, holes)
    if not any(h.number == hole.number and h.stroke_index == hole.stroke_index for h in holes):
        raise InconsistentStateError(
            f"Hole {hole.number} (stroke index {hole.stroke_index}) is not part of the round's holes"
        )

    strokes_received = allocation[hole.number]
    net_strokes = gross_strokes - strokes_received
    return CalculatedScore(
        strokes_received=strokes_received,
        net_strokes=net_strokes,
        stableford_points=stableford_points(net_strokes, hole.par),
    )


def total_stableford_points(scores: Iterable[ScoreEntry]) -> int:
    return sum(s.stableford_points for s in scores)
