from .base import BaseGolfModel
from .course import Course
from .hole import Hole
from .player import PlayerProfile, RoundPlayer
from .round import Round, RoundConfig, RoundStatus
from .score import CalculatedScore, ScoreEntry
from .tee import Tee

__all__ = [
    "BaseGolfModel",
    "CalculatedScore",
    "Course",
    "Hole",
    "PlayerProfile",
    "Round",
    "RoundConfig",
    "RoundPlayer",
    "RoundStatus",
    "ScoreEntry",
    "Tee",
]
