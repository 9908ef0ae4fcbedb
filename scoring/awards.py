"""Highlights and awards for a finished round.

Everything here is a pure function of the round's players, scores and
holes. Abandoned entries are left out of every figure.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from pydantic import Field

from models import Hole, RoundPlayer, ScoreEntry
from models.base import BaseGolfModel

from .leaderboard import Standing, build_standings, rank_players
from .score_to_par import ScoreToPar, compute_score_to_par

# Quick-play buckets; eagles count as birdies here, unlike the archive.
QUICK_BUCKETS = ("birdies", "pars", "bogeys", "double_bogey_plus")


class HoleResult(BaseGolfModel):
    hole_number: int
    points: int


class PlayerHighlights(BaseGolfModel):
    """One player's round at a glance."""
    player_id: str
    player_name: str
    total_points: int = 0
    total_gross_strokes: int = 0
    score_to_par: ScoreToPar = Field(default_factory=ScoreToPar.sentinel)
    birdies: int = 0
    pars: int = 0
    bogeys: int = 0
    double_bogey_plus: int = 0
    best_hole: Optional[HoleResult] = None
    worst_hole: Optional[HoleResult] = None
    no_paso_rojas: int = 0
    holes_in_one: int = 0

    @property
    def variability(self) -> int:
        if self.best_hole is None or self.worst_hole is None:
            return 0
        return self.best_hole.points - self.worst_hole.points


class PlayerCount(BaseGolfModel):
    player_id: str
    player_name: str
    count: int


class PlayerHole(BaseGolfModel):
    player_id: str
    player_name: str
    hole_number: int
    points: int


class HoleAverage(BaseGolfModel):
    hole_number: int
    par: int
    average_points: float
    sample_size: int


class MarginOfVictory(BaseGolfModel):
    winner_id: str
    winner_name: str
    winner_points: int
    loser_id: str
    loser_name: str
    loser_points: int

    @property
    def difference(self) -> int:
        return self.winner_points - self.loser_points


class AwardsSummary(BaseGolfModel):
    """Shareable summary of a round."""
    ranking: List[Standing] = Field(default_factory=list)
    highlights: List[PlayerHighlights] = Field(default_factory=list)
    most_double_bogeys: Optional[PlayerCount] = None
    most_no_paso_rojas: Optional[PlayerCount] = None
    holes_in_one: List[PlayerCount] = Field(default_factory=list)
    hardest_hole: Optional[HoleAverage] = None
    easiest_hole: Optional[HoleAverage] = None
    margin_of_victory: Optional[MarginOfVictory] = None
    most_birdies: Optional[PlayerCount] = None
    most_bogeys: Optional[PlayerCount] = None
    biggest_variability: Optional[PlayerCount] = None
    best_single_hole: Optional[PlayerHole] = None
    worst_single_hole: Optional[PlayerHole] = None


def quick_bucket(net_to_par: int) -> str:
    if net_to_par <= -1:
        return "birdies"
    if net_to_par == 0:
        return "pars"
    if net_to_par == 1:
        return "bogeys"
    return "double_bogey_plus"


def player_highlights(
    player: RoundPlayer,
    scores: Sequence[ScoreEntry],
    holes: Sequence[Hole],
) -> PlayerHighlights:
    """Highlights for one player. ``scores`` may contain other players' entries."""
    own = sorted((s for s in scores if s.player_id == player.id), key=lambda s: s.hole_number)
    clean = [s for s in own if not s.abandoned]
    pars: Dict[int, int] = {h.number: h.par for h in holes}

    highlights = PlayerHighlights(player_id=player.id, player_name=player.name)
    counts = {name: 0 for name in QUICK_BUCKETS}
    best: Optional[HoleResult] = None
    worst: Optional[HoleResult] = None

    for score in clean:
        par = pars.get(score.hole_number)
        if par is None:
            continue
        counts[quick_bucket(score.to_par(par))] += 1
        if best is None or score.stableford_points > best.points:
            best = HoleResult(hole_number=score.hole_number, points=score.stableford_points)
        if worst is None or score.stableford_points < worst.points:
            worst = HoleResult(hole_number=score.hole_number, points=score.stableford_points)

    total_gross = sum(s.gross_strokes for s in clean)
    incomplete = len(clean) != len(own) or len(clean) < len(holes)

    highlights.total_points = sum(s.stableford_points for s in clean)
    highlights.total_gross_strokes = total_gross
    highlights.score_to_par = compute_score_to_par(
        total_gross,
        sum(h.par for h in holes),
        player.playing_handicap,
        len(holes),
        abandoned=incomplete,
    )
    for name, value in counts.items():
        setattr(highlights, name, value)
    highlights.best_hole = best
    highlights.worst_hole = worst
    highlights.no_paso_rojas = sum(1 for s in clean if s.no_paso_rojas)
    highlights.holes_in_one = sum(1 for s in clean if s.gross_strokes == 1)
    return highlights


def _leader(
    highlights: Sequence[PlayerHighlights], metric: Callable[[PlayerHighlights], int]
) -> Optional[PlayerCount]:
    """Player with the highest positive ``metric``; ties go to the earlier (better ranked) one."""
    leader: Optional[PlayerHighlights] = None
    for h in highlights:
        if metric(h) > 0 and (leader is None or metric(h) > metric(leader)):
            leader = h
    if leader is None:
        return None
    return PlayerCount(player_id=leader.player_id, player_name=leader.player_name, count=metric(leader))


def hole_averages(scores: Sequence[ScoreEntry], holes: Sequence[Hole]) -> List[HoleAverage]:
    """Mean Stableford points per hole, skipping holes nobody finished."""
    averages: List[HoleAverage] = []
    for hole in sorted(holes, key=lambda h: h.number):
        points = [s.stableford_points for s in scores if s.hole_number == hole.number and not s.abandoned]
        if not points:
            continue
        averages.append(
            HoleAverage(
                hole_number=hole.number,
                par=hole.par,
                average_points=sum(points) / len(points),
                sample_size=len(points),
            )
        )
    return averages


def margin_of_victory(ranking: Sequence[Standing]) -> Optional[MarginOfVictory]:
    """Winner against last place; only when there is a gap to report."""
    if len(ranking) < 2:
        return None
    winner, last = ranking[0], ranking[-1]
    if winner.total_points - last.total_points <= 0:
        return None
    return MarginOfVictory(
        winner_id=winner.player_id,
        winner_name=winner.player_name,
        winner_points=winner.total_points,
        loser_id=last.player_id,
        loser_name=last.player_name,
        loser_points=last.total_points,
    )


def derive_awards(
    players: Sequence[RoundPlayer],
    scores: Sequence[ScoreEntry],
    holes: Sequence[Hole],
) -> AwardsSummary:
    """Build the awards summary for a round."""
    if not players:
        return AwardsSummary()

    clean = [s for s in scores if not s.abandoned]
    ranking = rank_players(build_standings(players, clean))
    by_id = {p.id: p for p in players}
    highlights = [player_highlights(by_id[s.player_id], scores, holes) for s in ranking]

    summary = AwardsSummary(ranking=ranking, highlights=highlights)
    summary.most_double_bogeys = _leader(highlights, lambda h: h.double_bogey_plus)
    summary.most_no_paso_rojas = _leader(highlights, lambda h: h.no_paso_rojas)
    summary.most_birdies = _leader(highlights, lambda h: h.birdies)
    summary.most_bogeys = _leader(highlights, lambda h: h.bogeys)
    summary.biggest_variability = _leader(highlights, lambda h: h.variability)
    summary.holes_in_one = [
        PlayerCount(player_id=h.player_id, player_name=h.player_name, count=h.holes_in_one)
        for h in highlights
        if h.holes_in_one > 0
    ]

    averages = hole_averages(clean, holes)
    if averages:
        summary.hardest_hole = min(averages, key=lambda a: a.average_points)
        summary.easiest_hole = max(averages, key=lambda a: a.average_points)

    summary.margin_of_victory = margin_of_victory(ranking)

    for h in highlights:
        if h.best_hole and (
            summary.best_single_hole is None or h.best_hole.points > summary.best_single_hole.points
        ):
            summary.best_single_hole = PlayerHole(
                player_id=h.player_id, player_name=h.player_name, **h.best_hole.model_dump()
            )
        if h.worst_hole and (
            summary.worst_single_hole is None or h.worst_hole.points < summary.worst_single_hole.points
        ):
            summary.worst_single_hole = PlayerHole(
                player_id=h.player_id, player_name=h.player_name, **h.worst_hole.model_dump()
            )

    return summary
