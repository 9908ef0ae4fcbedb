from .adjustment import HandicapAdjustment, adjust_handicaps_after_round, handicap_band
from .archive import RoundArchive, build_round_archive, forfeit_split, hole_result
from .awards import AwardsSummary, PlayerHighlights, derive_awards, player_highlights
from .exceptions import InconsistentStateError, InvalidInputError, ScoringError
from .handicap import (
    compute_playing_handicap,
    playing_handicap_for,
    resolve_slope,
    round_half_away,
    scale_exact_handicap,
)
from .holes import active_holes, stroke_ranks, validate_hole_set
from .leaderboard import Standing, build_standings, rank_players, ranking_key
from .score_to_par import ScoreToPar, compute_score_to_par
from .strokes import allocate_strokes, compute_score, stableford_points, total_stableford_points

__all__ = [
    "AwardsSummary",
    "HandicapAdjustment",
    "InconsistentStateError",
    "InvalidInputError",
    "PlayerHighlights",
    "RoundArchive",
    "ScoreToPar",
    "ScoringError",
    "Standing",
    "active_holes",
    "adjust_handicaps_after_round",
    "allocate_strokes",
    "build_round_archive",
    "build_standings",
    "compute_playing_handicap",
    "compute_score",
    "compute_score_to_par",
    "derive_awards",
    "forfeit_split",
    "handicap_band",
    "hole_result",
    "player_highlights",
    "playing_handicap_for",
    "rank_players",
    "ranking_key",
    "resolve_slope",
    "round_half_away",
    "scale_exact_handicap",
    "stableford_points",
    "stroke_ranks",
    "total_stableford_points",
    "validate_hole_set",
]
