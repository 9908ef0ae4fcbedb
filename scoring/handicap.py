"""Exact handicap -> playing handicap for a round configuration."""

from __future__ import annotations

import math
import numbers
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import config
from models import Course, RoundConfig

from .exceptions import InvalidInputError

STANDARD_SLOPE = 113
MIN_SLOPE = 55
MAX_SLOPE = 155


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (7.5 -> 8, -7.5 -> -8)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _require_number(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return float(value)


def validate_slope(slope) -> int:
    if isinstance(slope, bool) or not isinstance(slope, numbers.Integral):
        raise InvalidInputError(f"Slope must be an integer, got {slope!r}")
    if not MIN_SLOPE <= slope <= MAX_SLOPE:
        raise InvalidInputError(f"Slope {slope} outside USGA range ({MIN_SLOPE}-{MAX_SLOPE})")
    return int(slope)


def compute_playing_handicap(
    exact_handicap: float,
    slope: Optional[int] = None,
    use_slope: bool = False,
) -> int:
    """
    Whole strokes a player receives for the round.

    ``exact_handicap`` must already be scaled to the round's hole count.
    Without slope play the handicap is simply rounded; with it the handicap
    is scaled by ``slope / 113`` first.
    """
    exact = _require_number("Exact handicap", exact_handicap)
    if not use_slope:
        return round_half_away(exact)

    slope = validate_slope(config.DEFAULT_SLOPE if slope is None else slope)
    return round_half_away(exact * slope / STANDARD_SLOPE)


def scale_exact_handicap(exact_handicap: float, num_holes: int) -> float:
    """Scale a 9-hole exact handicap to the round's hole count."""
    exact = _require_number("Exact handicap", exact_handicap)
    if num_holes == 18:
        return exact * 2
    if num_holes == 9:
        return exact
    raise InvalidInputError(f"A round is 9 or 18 holes, not {num_holes}")


def resolve_slope(round_config: RoundConfig, course: Optional[Course] = None) -> int:
    """
    Slope for a round: manual slope, else the round's tee, else neutral.

    A 9-hole round uses the tee's front-nine or back-nine slope.
    """
    if round_config.manual_slope is not None:
        return round_config.manual_slope

    if course and round_config.tee_name:
        tee = course.get_tee(round_config.tee_name)
        if tee:
            slope = tee.slope_for(round_config.num_holes, round_config.holes_range)
            if slope is not None:
                return slope

    return config.DEFAULT_SLOPE


def playing_handicap_for(
    exact_handicap: float,
    round_config: RoundConfig,
    course: Optional[Course] = None,
) -> int:
    """Playing handicap of a 9-hole-basis exact handicap under a round configuration."""
    scaled = scale_exact_handicap(exact_handicap, round_config.num_holes)
    if not round_config.use_slope:
        return compute_playing_handicap(scaled)
    return compute_playing_handicap(scaled, resolve_slope(round_config, course), use_slope=True)
