from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class PlayerProfile(BaseGolfModel):
    """Persistent golfer record whose handicap moves after each completed round."""
    id: str
    name: str
    exact_handicap: float = Field(..., le=54)  # no floor


class RoundPlayer(BaseGolfModel):
    """A player taking part in one round.

    ``exact_handicap`` is kept on a 9-hole basis; it is doubled before the
    playing handicap is worked out for an 18-hole round.
    """
    id: str
    name: str
    exact_handicap: float = Field(..., le=54)  # no floor
    playing_handicap: int = 0
    profile_id: Optional[str] = None
