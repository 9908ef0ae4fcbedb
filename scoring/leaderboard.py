"""Ranked standings for a round.

The same ordering is used for the live leaderboard, the post-round handicap
adjustment, the awards summary and the archived ranking.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from pydantic import Field

from models import RoundPlayer, ScoreEntry
from models.base import BaseGolfModel

from .strokes import total_stableford_points


class Standing(BaseGolfModel):
    """One player's line on the leaderboard."""
    player_id: str
    player_name: str
    total_points: int = Field(0, ge=0)
    playing_handicap: int = 0
    exact_handicap: float = 0.0
    holes_played: int = Field(0, ge=0)
    profile_id: Optional[str] = None
    position: Optional[int] = Field(None, ge=1)


def ranking_key(standing: Standing) -> Tuple[int, int]:
    """Points descending, then lower playing handicap first."""
    return (-standing.total_points, standing.playing_handicap)


def build_standings(
    players: Iterable[RoundPlayer], scores: Iterable[ScoreEntry]
) -> List[Standing]:
    """Sum Stableford points per player, in player order (unranked)."""
    scores = list(scores)
    standings: List[Standing] = []
    for player in players:
        player_scores = [s for s in scores if s.player_id == player.id]
        standings.append(
            Standing(
                player_id=player.id,
                player_name=player.name,
                total_points=total_stableford_points(player_scores),
                playing_handicap=player.playing_handicap,
                exact_handicap=player.exact_handicap,
                holes_played=len(player_scores),
                profile_id=player.profile_id,
            )
        )
    return standings


def rank_players(standings: Iterable[Standing]) -> List[Standing]:
    """Sort standings and number them 1..n. Full ties keep their input order."""
    ordered = sorted(standings, key=ranking_key)
    return [
        standing.model_copy(update={"position": index})
        for index, standing in enumerate(ordered, start=1)
    ]
