from rounds.exceptions import NotFoundError, PermissionDeniedError, RoundError, RoundStateError
from rounds.repository import InMemoryRoundRepository, RoundRepository
from rounds.service import RoundService

__all__ = [
    "InMemoryRoundRepository",
    "NotFoundError",
    "PermissionDeniedError",
    "RoundError",
    "RoundRepository",
    "RoundService",
    "RoundStateError",
]
