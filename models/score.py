from pydantic import Field

from .base import BaseGolfModel


class CalculatedScore(BaseGolfModel):
    """Values derived from gross strokes on one hole."""
    strokes_received: int
    net_strokes: int
    stableford_points: int = Field(..., ge=0)


class ScoreEntry(BaseGolfModel):
    """A player's recorded result on a single hole. Unique per round, player and hole."""
    round_id: str
    player_id: str
    hole_number: int = Field(..., ge=1, le=18)
    gross_strokes: int = Field(..., ge=1)
    strokes_received: int = 0  # negative for plus handicaps
    net_strokes: int = 0
    stableford_points: int = Field(0, ge=0)
    no_paso_rojas: bool = False
    abandoned: bool = False

    @property
    def key(self):
        return (self.round_id, self.player_id, self.hole_number)

    def to_par(self, par: int) -> int:
        """Net score relative to par (+2, -1, etc.)."""
        return self.net_strokes - par
