from pydantic import Field, model_validator
from typing import List, Optional

from .base import BaseGolfModel
from .hole import Hole
from .tee import Tee


class Course(BaseGolfModel):
    """Golf course with its holes and tee options."""
    id: Optional[str] = None
    name: Optional[str] = None
    holes: List[Hole] = Field(default_factory=list)
    tees: List[Tee] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_hole_numbers(self):
        numbers = [h.number for h in self.holes]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Hole numbers must be unique within a course")
        return self

    def get_tee(self, name: str) -> Optional[Tee]:
        """Get a tee by its name (case-insensitive)."""
        for tee in self.tees:
            if tee.name.lower() == name.lower():
                return tee
        return None

    def get_hole(self, number: int) -> Optional[Hole]:
        """Get a hole by its number."""
        for hole in self.holes:
            if hole.number == number:
                return hole
        return None

    @property
    def hole_count(self) -> int:
        return len(self.holes)

    @property
    def par(self) -> int:
        return sum(h.par for h in self.holes)
