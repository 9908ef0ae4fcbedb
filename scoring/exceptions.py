class ScoringError(Exception):
    """Base for all scoring engine errors."""


class InvalidInputError(ScoringError, ValueError):
    """A single input is malformed or out of range (gross strokes, slope, par...)."""


class InconsistentStateError(ScoringError):
    """The round's hole set cannot support a stroke allocation."""
