"""Round lifecycle: players, score entry, reconfiguration and completion."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from models import Course, Hole, PlayerProfile, Round, RoundConfig, RoundPlayer, RoundStatus, ScoreEntry
from scoring import (
    AwardsSummary,
    HandicapAdjustment,
    RoundArchive,
    Standing,
    active_holes,
    adjust_handicaps_after_round,
    build_round_archive,
    build_standings,
    compute_score,
    derive_awards,
    playing_handicap_for,
    rank_players,
)
from rounds.exceptions import NotFoundError, PermissionDeniedError, RoundStateError
from rounds.repository import RoundRepository

logger = logging.getLogger(__name__)

_UNSET = object()


class RoundService:
    """Operations on rounds stored in a ``RoundRepository``.

    Every change to a round runs inside ``RoundRepository.update_round``:
    it sees the latest stored round, recalculates whatever depends on the
    change, and is written only if it completes. Concurrent writers are
    applied one after the other, never on top of a stale copy.
    """

    def __init__(self, repository: RoundRepository):
        self._repo = repository

    # ================================================================
    # Private helpers
    # ================================================================

    def _require_round(self, round_id: str) -> Round:
        round_ = self._repo.get_round(round_id)
        if round_ is None:
            raise NotFoundError(f"Round {round_id} not found")
        return round_

    def _update_active(self, round_id: str, change: Callable[[Round], Round]) -> Round:
        """Apply ``change`` atomically to an active round."""
        def guarded(current: Round) -> Round:
            if not current.is_active:
                raise RoundStateError(f"Round {round_id} is {current.status.value}, not active")
            return change(current)

        updated = self._repo.update_round(round_id, guarded)
        if updated is None:
            raise NotFoundError(f"Round {round_id} not found")
        return updated

    @staticmethod
    def _recompute(round_: Round, config: RoundConfig, course: Course) -> Round:
        """New round snapshot with every handicap and score derived from ``config`` and ``course``."""
        holes = active_holes(course, config.num_holes, config.holes_range)
        by_number = {h.number: h for h in holes}

        players = [
            p.model_copy(update={"playing_handicap": playing_handicap_for(p.exact_handicap, config, course)})
            for p in round_.players
        ]
        handicaps = {p.id: p.playing_handicap for p in players}

        scores: List[ScoreEntry] = []
        for score in round_.scores:
            hole = by_number.get(score.hole_number)
            if hole is None or score.player_id not in handicaps:
                logger.debug(
                    "Dropping score for player %s on hole %d, no longer in play",
                    score.player_id, score.hole_number,
                )
                continue
            result = compute_score(
                score.gross_strokes, handicaps[score.player_id], hole, config.num_holes, holes
            )
            scores.append(score.model_copy(update=result.model_dump()))

        return Round(
            id=round_.id,
            course=course,
            config=config,
            holes=holes,
            players=players,
            scores=scores,
            status=round_.status,
            created_at=round_.created_at,
        )

    def _adjusted_profiles(self, adjustments: List[HandicapAdjustment]) -> List[PlayerProfile]:
        """Validated profile records carrying the new handicaps."""
        profiles = []
        for adjustment in adjustments:
            if adjustment.profile_id is None or adjustment.change == 0:
                continue
            profile = self._repo.get_profile(adjustment.profile_id)
            if profile is None:
                logger.warning(
                    "Profile %s for %s is gone; handicap not updated",
                    adjustment.profile_id, adjustment.player_name,
                )
                continue
            profiles.append(
                PlayerProfile(**{**profile.model_dump(), "exact_handicap": adjustment.new_handicap})
            )
        return profiles

    # ================================================================
    # Rounds
    # ================================================================

    def get_round(self, round_id: str) -> Round:
        return self._require_round(round_id)

    def create_round(self, course: Course, config: Optional[RoundConfig] = None) -> Round:
        """Start an active round. Fails if the course cannot supply the configured holes."""
        config = config or RoundConfig()
        round_ = Round(
            id=str(uuid4()),
            course=course,
            config=config,
            holes=active_holes(course, config.num_holes, config.holes_range),
            created_at=datetime.now(timezone.utc),
        )
        self._repo.save_round(round_)
        logger.info("Created %d-hole round %s on %s", config.num_holes, round_.id, course.name)
        return round_

    def reconfigure(
        self,
        round_id: str,
        *,
        num_holes=_UNSET,
        holes_range=_UNSET,
        use_slope=_UNSET,
        manual_slope=_UNSET,
        tee_name=_UNSET,
        course: Optional[Course] = None,
    ) -> Round:
        """
        Change how a round is played and recalculate everything that depends on it.

        Changing the course or hole count rewrites the hole set; scores on
        holes that are no longer played are dropped.
        """
        changes = {
            name: value
            for name, value in (
                ("num_holes", num_holes),
                ("holes_range", holes_range),
                ("use_slope", use_slope),
                ("manual_slope", manual_slope),
                ("tee_name", tee_name),
            )
            if value is not _UNSET
        }
        if changes.get("num_holes") == 18 and "holes_range" not in changes:
            changes["holes_range"] = None

        def apply(current: Round) -> Round:
            config = RoundConfig(**{**current.config.model_dump(), **changes})
            return self._recompute(current, config, course or current.course)

        updated = self._update_active(round_id, apply)
        logger.info("Reconfigured round %s: %s", round_id, changes or "course change")
        return updated

    def edit_hole(
        self,
        round_id: str,
        hole_number: int,
        *,
        par: Optional[int] = None,
        stroke_index: Optional[int] = None,
        admin: bool = False,
    ) -> Round:
        """Correct a hole's par or stroke index mid-round. Needs ``admin``."""
        if not admin:
            raise PermissionDeniedError("Editing holes requires admin rights")

        changes = {}
        if par is not None:
            changes["par"] = par
        if stroke_index is not None:
            changes["stroke_index"] = stroke_index

        def apply(current: Round) -> Round:
            course = current.course
            target = course.get_hole(hole_number)
            if target is None and course.hole_count == 9 and hole_number > 9:
                target = course.get_hole(hole_number - 9)  # looped nine
            if target is None:
                raise NotFoundError(f"Hole {hole_number} not found on course {course.name}")

            edited = Course(
                id=course.id,
                name=course.name,
                tees=course.tees,
                holes=[
                    Hole(**{**h.model_dump(), **changes}) if h.number == target.number else h
                    for h in course.holes
                ],
            )
            return self._recompute(current, current.config, edited)

        updated = self._update_active(round_id, apply)
        logger.info("Edited hole %d of round %s: %s", hole_number, round_id, changes)
        return updated

    def cancel_round(self, round_id: str) -> None:
        self._require_round(round_id)
        if not self._repo.compare_and_set_status(round_id, RoundStatus.ACTIVE, RoundStatus.CANCELLED):
            raise RoundStateError(f"Round {round_id} is no longer active")

    # ================================================================
    # Players
    # ================================================================

    def register_profile(self, name: str, exact_handicap: float) -> PlayerProfile:
        profile = PlayerProfile(id=str(uuid4()), name=name, exact_handicap=exact_handicap)
        self._repo.save_profile(profile)
        return profile

    def get_profile(self, profile_id: str) -> PlayerProfile:
        profile = self._repo.get_profile(profile_id)
        if profile is None:
            raise NotFoundError(f"Player {profile_id} not found")
        return profile

    def add_player(
        self,
        round_id: str,
        name: str,
        exact_handicap: float,
        profile_id: Optional[str] = None,
    ) -> RoundPlayer:
        """Add a player; ``exact_handicap`` is on the 9-hole basis."""
        if profile_id is not None:
            self.get_profile(profile_id)

        player = RoundPlayer(
            id=str(uuid4()),
            name=name,
            exact_handicap=exact_handicap,
            profile_id=profile_id,
        )

        def apply(current: Round) -> Round:
            player.playing_handicap = playing_handicap_for(exact_handicap, current.config, current.course)
            current.players = current.players + [player]
            return current

        self._update_active(round_id, apply)
        return player

    def add_profile_to_round(self, round_id: str, profile_id: str) -> RoundPlayer:
        profile = self.get_profile(profile_id)
        return self.add_player(round_id, profile.name, profile.exact_handicap, profile_id=profile.id)

    def remove_player(self, round_id: str, player_id: str) -> None:
        """Withdraw a player together with their scores."""
        def apply(current: Round) -> Round:
            if current.get_player(player_id) is None:
                raise NotFoundError(f"Player {player_id} is not in round {round_id}")
            current.players = [p for p in current.players if p.id != player_id]
            current.scores = [s for s in current.scores if s.player_id != player_id]
            return current

        self._update_active(round_id, apply)

    # ================================================================
    # Scores
    # ================================================================

    def record_score(
        self,
        round_id: str,
        player_id: str,
        hole_number: int,
        gross_strokes: int,
        no_paso_rojas: bool = False,
        abandoned: bool = False,
    ) -> ScoreEntry:
        """Record (or overwrite) a player's gross strokes on a hole."""
        recorded: List[ScoreEntry] = []

        def apply(current: Round) -> Round:
            player = current.get_player(player_id)
            if player is None:
                raise NotFoundError(f"Player {player_id} is not in round {round_id}")
            hole = current.get_hole(hole_number)
            if hole is None:
                raise NotFoundError(f"Hole {hole_number} is not played in round {round_id}")

            result = compute_score(
                gross_strokes, player.playing_handicap, hole, current.config.num_holes, current.holes
            )
            entry = ScoreEntry(
                round_id=round_id,
                player_id=player_id,
                hole_number=hole_number,
                gross_strokes=gross_strokes,
                no_paso_rojas=no_paso_rojas,
                abandoned=abandoned,
                **result.model_dump(),
            )
            current.upsert_score(entry)
            recorded.append(entry)
            return current

        self._update_active(round_id, apply)
        return recorded[0]

    def clear_score(self, round_id: str, player_id: str, hole_number: int) -> bool:
        """Remove a score entry. Returns False if there was nothing to remove."""
        removed: List[bool] = []

        def apply(current: Round) -> Round:
            removed.append(current.remove_score(player_id, hole_number))
            return current

        self._update_active(round_id, apply)
        return removed[0]

    # ================================================================
    # Results
    # ================================================================

    def standings(self, round_id: str) -> List[Standing]:
        round_ = self._require_round(round_id)
        return rank_players(build_standings(round_.players, round_.scores))

    def awards(self, round_id: str) -> AwardsSummary:
        round_ = self._require_round(round_id)
        return derive_awards(round_.players, round_.scores, round_.holes)

    def complete_round(self, round_id: str) -> List[HandicapAdjustment]:
        """
        Close the round and move the players' handicaps.

        The ranking, the adjustments and the new profile records are all
        worked out before the round is marked completed; if any of them
        fails the round stays active. Only one caller can complete a round,
        any later call raises ``RoundStateError``.
        """
        outcome = {}

        def apply(current: Round) -> Round:
            ranking = rank_players(build_standings(current.players, current.scores))
            adjustments = adjust_handicaps_after_round(ranking)
            outcome["adjustments"] = adjustments
            outcome["profiles"] = self._adjusted_profiles(adjustments)
            current.status = RoundStatus.COMPLETED
            return current

        self._update_active(round_id, apply)

        for profile in outcome["profiles"]:
            self._repo.save_profile(profile)

        logger.info("Completed round %s with %d players", round_id, len(outcome["adjustments"]))
        return outcome["adjustments"]

    def archive(self, round_id: str) -> RoundArchive:
        round_ = self._require_round(round_id)
        if round_.status != RoundStatus.COMPLETED:
            raise RoundStateError(f"Round {round_id} must be completed before archiving")
        return build_round_archive(round_)
