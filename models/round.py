from datetime import datetime
from enum import Enum
from pydantic import Field, model_validator
from typing import List, Literal, Optional

from .base import BaseGolfModel
from .course import Course
from .hole import Hole
from .player import RoundPlayer
from .score import ScoreEntry


class RoundStatus(str, Enum):
    """Lifecycle of a round."""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RoundConfig(BaseGolfModel):
    """How a round is being played. Any change recalculates every handicap and score."""
    num_holes: Literal[9, 18] = 18
    holes_range: Optional[Literal["1-9", "10-18"]] = None
    use_slope: bool = False
    manual_slope: Optional[int] = Field(None, ge=55, le=155)
    tee_name: Optional[str] = None

    @model_validator(mode='after')
    def validate_holes_range(self):
        if self.holes_range is not None and self.num_holes != 9:
            raise ValueError("holes_range only applies to 9-hole rounds")
        return self


class Round(BaseGolfModel):
    """A round being played: active holes, players and their recorded scores."""
    id: str
    course: Course
    config: RoundConfig = Field(default_factory=RoundConfig)
    holes: List[Hole] = Field(default_factory=list)
    players: List[RoundPlayer] = Field(default_factory=list)
    scores: List[ScoreEntry] = Field(default_factory=list)
    status: RoundStatus = RoundStatus.ACTIVE
    created_at: Optional[datetime] = None

    def get_player(self, player_id: str) -> Optional[RoundPlayer]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_hole(self, hole_number: int) -> Optional[Hole]:
        for hole in self.holes:
            if hole.number == hole_number:
                return hole
        return None

    def get_score(self, player_id: str, hole_number: int) -> Optional[ScoreEntry]:
        for score in self.scores:
            if score.player_id == player_id and score.hole_number == hole_number:
                return score
        return None

    def scores_for(self, player_id: str) -> List[ScoreEntry]:
        """A player's scores ordered by hole number."""
        return sorted(
            (s for s in self.scores if s.player_id == player_id),
            key=lambda s: s.hole_number,
        )

    def upsert_score(self, entry: ScoreEntry) -> None:
        """Insert or overwrite the entry for the same player and hole."""
        self.scores = [
            s for s in self.scores
            if not (s.player_id == entry.player_id and s.hole_number == entry.hole_number)
        ] + [entry]

    def remove_score(self, player_id: str, hole_number: int) -> bool:
        """Delete a score entry. Returns True if one was removed."""
        before = len(self.scores)
        self.scores = [
            s for s in self.scores
            if not (s.player_id == player_id and s.hole_number == hole_number)
        ]
        return len(self.scores) != before

    @property
    def par(self) -> int:
        """Par of the active hole set."""
        return sum(h.par for h in self.holes)

    @property
    def is_active(self) -> bool:
        return self.status == RoundStatus.ACTIVE
