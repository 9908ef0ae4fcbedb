"""Snapshot of a completed round kept after the live round is gone."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from models import Round
from models.base import BaseGolfModel

from .adjustment import DOWN, UP, handicap_band
from .leaderboard import Standing, build_standings, rank_players


class HoleResults(BaseGolfModel):
    """Detailed result counts; unlike the quick-play awards, eagles stand on their own."""
    eagles: int = 0
    birdies: int = 0
    pars: int = 0
    bogeys: int = 0
    double_bogeys: int = 0  # double bogey or worse


class ArchivedPlayer(BaseGolfModel):
    player_id: str
    player_name: str
    profile_id: Optional[str] = None
    playing_handicap: int
    exact_handicap: float
    no_paso_rojas_count: int = 0
    total_holes_played: int = 0
    rounds_won: int = Field(0, ge=0, le=1)   # the round of drinks
    rounds_paid: int = Field(0, ge=0, le=1)
    hole_results: HoleResults = Field(default_factory=HoleResults)


class ArchivedScore(BaseGolfModel):
    player_id: str
    player_name: str
    hole_number: int
    par: int
    gross_strokes: int
    net_strokes: int
    stableford_points: int
    result: str
    no_paso_rojas: bool = False


class RoundArchive(BaseGolfModel):
    round_id: str
    course_name: Optional[str] = None
    num_holes: int
    final_ranking: List[Standing] = Field(default_factory=list)
    player_stats: List[ArchivedPlayer] = Field(default_factory=list)
    hole_scores: List[ArchivedScore] = Field(default_factory=list)


def hole_result(net_to_par: int) -> str:
    if net_to_par <= -2:
        return "eagle"
    if net_to_par == -1:
        return "birdie"
    if net_to_par == 0:
        return "par"
    if net_to_par == 1:
        return "bogey"
    if net_to_par == 2:
        return "double_bogey"
    return "triple_bogey_plus"


def forfeit_split(position: int, total_players: int) -> Dict[str, int]:
    """
    Who wins and who pays the round of drinks, by 1-based finishing position.

    Follows the handicap bands: the half coming down wins, the half going up
    pays, and the held middle player of an odd field does neither.
    """
    band = handicap_band(position - 1, total_players)
    return {
        "rounds_won": 1 if band == DOWN else 0,
        "rounds_paid": 1 if band == UP else 0,
    }


def build_round_archive(round_: Round) -> RoundArchive:
    """Final ranking, per-player statistics and per-hole results of a round."""
    ranking = rank_players(build_standings(round_.players, round_.scores))
    pars = {h.number: h.par for h in round_.holes}
    names = {p.id: p.name for p in round_.players}
    total = len(ranking)

    player_stats: List[ArchivedPlayer] = []
    for standing in ranking:
        own = round_.scores_for(standing.player_id)
        results = HoleResults()
        for score in own:
            par = pars.get(score.hole_number)
            if par is None:
                continue
            diff = score.to_par(par)
            if diff <= -2:
                results.eagles += 1
            elif diff == -1:
                results.birdies += 1
            elif diff == 0:
                results.pars += 1
            elif diff == 1:
                results.bogeys += 1
            else:
                results.double_bogeys += 1

        player_stats.append(
            ArchivedPlayer(
                player_id=standing.player_id,
                player_name=standing.player_name,
                profile_id=standing.profile_id,
                playing_handicap=standing.playing_handicap,
                exact_handicap=standing.exact_handicap,
                no_paso_rojas_count=sum(1 for s in own if s.no_paso_rojas),
                total_holes_played=len(own),
                hole_results=results,
                **forfeit_split(standing.position, total),
            )
        )

    hole_scores = [
        ArchivedScore(
            player_id=score.player_id,
            player_name=names[score.player_id],
            hole_number=score.hole_number,
            par=pars[score.hole_number],
            gross_strokes=score.gross_strokes,
            net_strokes=score.net_strokes,
            stableford_points=score.stableford_points,
            result=hole_result(score.to_par(pars[score.hole_number])),
            no_paso_rojas=score.no_paso_rojas,
        )
        for score in sorted(round_.scores, key=lambda s: (s.hole_number, s.player_id))
        if score.player_id in names and score.hole_number in pars
    ]

    return RoundArchive(
        round_id=round_.id,
        course_name=round_.course.name,
        num_holes=round_.config.num_holes,
        final_ranking=ranking,
        player_stats=player_stats,
        hole_scores=hole_scores,
    )
