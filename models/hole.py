from pydantic import Field

from .base import BaseGolfModel


class Hole(BaseGolfModel):
    """A single hole in a round's active hole set."""
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=5)
    stroke_index: int = Field(..., ge=1, le=18)  # 1 = hardest, gets strokes first
