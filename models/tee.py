from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class Tee(BaseGolfModel):
    """A tee box with its slope for each way the course can be played."""
    name: str
    color: Optional[str] = None
    slope_18: Optional[int] = Field(None, ge=55, le=155)
    slope_9_i: Optional[int] = Field(None, ge=55, le=155)   # front nine alone
    slope_9_ii: Optional[int] = Field(None, ge=55, le=155)  # back nine alone

    def slope_for(self, num_holes: int, holes_range: Optional[str] = None) -> Optional[int]:
        """Slope that applies to the given hole count and range."""
        if num_holes == 9:
            return self.slope_9_ii if holes_range == "10-18" else self.slope_9_i
        return self.slope_18
