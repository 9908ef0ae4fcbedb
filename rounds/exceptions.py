class RoundError(Exception):
    """Base for all round lifecycle errors."""


class NotFoundError(RoundError):
    """Round, player or score not found."""


class RoundStateError(RoundError):
    """Operation not allowed in the round's current status."""


class PermissionDeniedError(RoundError):
    """Operation needs a capability the caller did not pass."""
