"""Total score against a personal par (course par plus playing handicap)."""

from __future__ import annotations

from models.base import BaseGolfModel

NOT_COMPARABLE = "-"


class ScoreToPar(BaseGolfModel):
    value: int
    display: str

    @classmethod
    def sentinel(cls) -> "ScoreToPar":
        """Placeholder for rounds that cannot be compared (abandoned or no strokes)."""
        return cls(value=0, display=NOT_COMPARABLE)

    @property
    def is_comparable(self) -> bool:
        return self.display != NOT_COMPARABLE


def format_to_par(value: int) -> str:
    if value == 0:
        return "E"
    if value > 0:
        return f"+{value}"
    return str(value)


def compute_score_to_par(
    total_gross: int,
    course_par: int,
    playing_handicap: int,
    total_holes: int,
    abandoned: bool = False,
) -> ScoreToPar:
    """
    Score relative to ``course_par + playing_handicap``.

    ``total_holes`` is informational; the course par already reflects the
    holes played.
    """
    if abandoned or total_gross <= 0:
        return ScoreToPar.sentinel()

    value = total_gross - (course_par + playing_handicap)
    return ScoreToPar(value=value, display=format_to_par(value))
