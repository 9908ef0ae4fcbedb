"""Post-round handicap adjustment.

The top half of the field comes down a stroke and the bottom half goes up
one, split at the median. With an odd field the middle player holds. Rises
stop at the ceiling; there is no floor.

The adjustment is not idempotent: ranking the same field twice moves every
handicap twice, so callers must apply it once per completed round.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import config
from models.base import BaseGolfModel

from .leaderboard import Standing

logger = logging.getLogger(__name__)

DOWN = "down"
HOLD = "hold"
UP = "up"


class HandicapAdjustment(BaseGolfModel):
    player_id: str
    player_name: str
    profile_id: Optional[str] = None
    previous_handicap: float
    new_handicap: float

    @property
    def change(self) -> float:
        return self.new_handicap - self.previous_handicap


def handicap_band(index: int, total_players: int) -> str:
    """Direction for the player at 0-based ``index`` of a ranked field."""
    if not 0 <= index < total_players:
        raise IndexError(f"Position {index} outside a field of {total_players}")

    middle = total_players // 2
    if index < middle:
        return DOWN
    if total_players % 2 == 1 and index == middle:
        return HOLD
    return UP


def adjusted_handicap(
    current: float,
    band: str,
    *,
    ceiling: Optional[float] = None,
    step: Optional[float] = None,
) -> float:
    ceiling = config.HANDICAP_CEILING if ceiling is None else ceiling
    step = config.HANDICAP_STEP if step is None else step

    if band == DOWN:
        return current - step
    if band == UP and current < ceiling:
        return current + step
    return current


def adjust_handicaps_after_round(
    ranked: Sequence[Standing],
    *,
    ceiling: Optional[float] = None,
    step: Optional[float] = None,
) -> List[HandicapAdjustment]:
    """New exact handicaps for a field already ordered by ``rank_players``."""
    total = len(ranked)
    adjustments: List[HandicapAdjustment] = []
    for index, standing in enumerate(ranked):
        band = handicap_band(index, total)
        new_handicap = adjusted_handicap(
            standing.exact_handicap, band, ceiling=ceiling, step=step
        )
        adjustments.append(
            HandicapAdjustment(
                player_id=standing.player_id,
                player_name=standing.player_name,
                profile_id=standing.profile_id,
                previous_handicap=standing.exact_handicap,
                new_handicap=new_handicap,
            )
        )

    logger.debug(
        "Adjusted %d handicaps: %s",
        total,
        ", ".join(f"{a.player_name} {a.previous_handicap:g}->{a.new_handicap:g}" for a in adjustments),
    )
    return adjustments
