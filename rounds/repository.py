import threading
from typing import Callable, Dict, Optional, Protocol

from models import PlayerProfile, Round, RoundStatus


class RoundRepository(Protocol):
    """Interface for round and player storage.

    ``update_round`` and ``compare_and_set_status`` must be atomic with
    respect to every other write on the same round.
    """

    def get_round(self, round_id: str) -> Optional[Round]:
        ...

    def save_round(self, round_: Round) -> None:
        ...

    def delete_round(self, round_id: str) -> bool:
        ...

    def update_round(self, round_id: str, change: Callable[[Round], Round]) -> Optional[Round]:
        """
        Read, change and write a round as one step.

        ``change`` receives a copy of the stored round and returns the round
        to store. If it raises, nothing is written. Returns None when the
        round does not exist.
        """
        ...

    def get_profile(self, profile_id: str) -> Optional[PlayerProfile]:
        ...

    def save_profile(self, profile: PlayerProfile) -> None:
        ...

    def compare_and_set_status(
        self, round_id: str, expected: RoundStatus, new: RoundStatus
    ) -> bool:
        """Move the round to ``new`` only if it is currently ``expected``."""
        ...


class InMemoryRoundRepository:
    """Process-local storage. Hands out copies so callers never share state.

    One re-entrant lock covers rounds and profiles, so an ``update_round``
    change may read profiles.
    """

    def __init__(self):
        self._rounds: Dict[str, Round] = {}
        self._profiles: Dict[str, PlayerProfile] = {}
        self._lock = threading.RLock()

    def get_round(self, round_id: str) -> Optional[Round]:
        with self._lock:
            round_ = self._rounds.get(round_id)
            return round_.snapshot() if round_ else None

    def save_round(self, round_: Round) -> None:
        with self._lock:
            self._rounds[round_.id] = round_.snapshot()

    def delete_round(self, round_id: str) -> bool:
        with self._lock:
            return self._rounds.pop(round_id, None) is not None

    def update_round(self, round_id: str, change: Callable[[Round], Round]) -> Optional[Round]:
        with self._lock:
            current = self._rounds.get(round_id)
            if current is None:
                return None
            updated = change(current.snapshot())
            self._rounds[round_id] = updated.snapshot()
            return updated

    def get_profile(self, profile_id: str) -> Optional[PlayerProfile]:
        with self._lock:
            profile = self._profiles.get(profile_id)
            return profile.snapshot() if profile else None

    def save_profile(self, profile: PlayerProfile) -> None:
        with self._lock:
            self._profiles[profile.id] = profile.snapshot()

    def compare_and_set_status(
        self, round_id: str, expected: RoundStatus, new: RoundStatus
    ) -> bool:
        with self._lock:
            round_ = self._rounds.get(round_id)
            if round_ is None or round_.status != expected:
                return False
            round_.status = new
            return True
