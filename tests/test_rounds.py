import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pydantic import ValidationError

import config
from data.score_round import load_round
from models import Course, Hole, RoundConfig, RoundStatus, Tee
from rounds import (
    InMemoryRoundRepository,
    NotFoundError,
    PermissionDeniedError,
    RoundService,
    RoundStateError,
)
from scoring import InconsistentStateError, InvalidInputError

EIGHTEEN = [
    (4, 5), (3, 17), (5, 1), (4, 7), (4, 11), (3, 15), (5, 3), (4, 9), (4, 13),
    (4, 6), (5, 2), (3, 18), (4, 8), (4, 12), (5, 4), (3, 16), (4, 10), (4, 14),
]
NINE = [(4, 5), (3, 9), (5, 1), (4, 4), (4, 6), (3, 8), (5, 2), (4, 3), (4, 7)]


def _course(layout, name="Demo Course"):
    holes = [Hole(number=i, par=par, stroke_index=si) for i, (par, si) in enumerate(layout, start=1)]
    tees = [Tee(name="Amarillas", slope_18=128, slope_9_i=126, slope_9_ii=130)]
    return Course(id=name.lower().replace(" ", "-"), name=name, holes=holes, tees=tees)


@pytest.fixture
def service():
    return RoundService(InMemoryRoundRepository())


# ================================================================
# Rounds and players
# ================================================================

def test_create_round_selects_holes(service):
    round_ = service.create_round(_course(EIGHTEEN), RoundConfig(num_holes=9, holes_range="10-18"))

    stored = service.get_round(round_.id)
    assert [h.number for h in stored.holes] == list(range(10, 19))
    assert stored.status == RoundStatus.ACTIVE
    assert stored.created_at is not None


def test_create_round_rejects_impossible_layout(service):
    with pytest.raises(InconsistentStateError):
        service.create_round(_course(NINE), RoundConfig(num_holes=9, holes_range="10-18"))


def test_unknown_round(service):
    with pytest.raises(NotFoundError):
        service.get_round("missing")
    with pytest.raises(NotFoundError):
        service.standings("missing")


def test_add_player_computes_playing_handicap(service):
    round_ = service.create_round(_course(EIGHTEEN))

    player = service.add_player(round_.id, "Ana", 5.6)
    assert player.playing_handicap == 11          # 5.6 doubled, rounded

    slope_round = service.create_round(
        _course(EIGHTEEN), RoundConfig(use_slope=True, tee_name="Amarillas")
    )
    player = service.add_player(slope_round.id, "Ana", 5.6)
    assert player.playing_handicap == 13          # 11.2 * 128 / 113 = 12.69


def test_add_profile_to_round(service):
    profile = service.register_profile("Luis", 7.0)
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))

    player = service.add_profile_to_round(round_.id, profile.id)
    assert player.profile_id == profile.id
    assert player.name == "Luis"
    assert player.playing_handicap == 7

    with pytest.raises(NotFoundError):
        service.add_player(round_.id, "Ghost", 3, profile_id="nope")


def test_remove_player_drops_scores(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 5)
    luis = service.add_player(round_.id, "Luis", 5)
    service.record_score(round_.id, ana.id, 1, 5)
    service.record_score(round_.id, luis.id, 1, 4)

    service.remove_player(round_.id, ana.id)

    stored = service.get_round(round_.id)
    assert [p.id for p in stored.players] == [luis.id]
    assert [s.player_id for s in stored.scores] == [luis.id]

    with pytest.raises(NotFoundError):
        service.remove_player(round_.id, ana.id)


# ================================================================
# Scores
# ================================================================

def test_record_score_derives_values(service):
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5.6)   # playing 11

    entry = service.record_score(round_.id, ana.id, 3, 6)   # par 5, index 1
    assert (entry.strokes_received, entry.net_strokes, entry.stableford_points) == (1, 5, 2)

    entry = service.record_score(round_.id, ana.id, 12, 3)  # par 3, index 18
    assert (entry.strokes_received, entry.net_strokes, entry.stableford_points) == (0, 3, 2)


def test_record_score_is_an_upsert(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 0)

    service.record_score(round_.id, ana.id, 1, 6)
    service.record_score(round_.id, ana.id, 1, 4, no_paso_rojas=True)

    stored = service.get_round(round_.id)
    assert len(stored.scores) == 1
    assert stored.scores[0].gross_strokes == 4
    assert stored.scores[0].stableford_points == 2
    assert stored.scores[0].no_paso_rojas is True


def test_clear_score_removes_entry(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 0)
    service.record_score(round_.id, ana.id, 1, 6)

    assert service.clear_score(round_.id, ana.id, 1) is True
    assert service.clear_score(round_.id, ana.id, 1) is False
    assert service.get_round(round_.id).scores == []


def test_invalid_score_is_rejected_and_not_stored(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 0)

    with pytest.raises(InvalidInputError):
        service.record_score(round_.id, ana.id, 1, 0)
    with pytest.raises(InvalidInputError):
        service.record_score(round_.id, ana.id, 1, 4.5)
    with pytest.raises(NotFoundError):
        service.record_score(round_.id, ana.id, 10, 4)     # not played
    with pytest.raises(NotFoundError):
        service.record_score(round_.id, "nobody", 1, 4)

    assert service.get_round(round_.id).scores == []


def test_concurrent_score_entry_keeps_every_hole(service):
    round_ = service.create_round(_course(EIGHTEEN))
    players = [service.add_player(round_.id, name, 5) for name in ("Ana", "Luis", "Bea")]

    jobs = [(p.id, hole) for p in players for hole in range(1, 19)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(lambda job: service.record_score(round_.id, job[0], job[1], 5), jobs))

    assert len(service.get_round(round_.id).scores) == 54


def test_standings_and_awards(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 4)
    luis = service.add_player(round_.id, "Luis", 8)
    for hole in range(1, 10):
        service.record_score(round_.id, ana.id, hole, 5)
        service.record_score(round_.id, luis.id, hole, 5)

    standings = service.standings(round_.id)
    assert [s.player_id for s in standings] == [luis.id, ana.id]
    assert standings[0].total_points > standings[1].total_points

    awards = service.awards(round_.id)
    assert awards.ranking == standings
    assert awards.margin_of_victory.winner_id == luis.id


# ================================================================
# Reconfiguration
# ================================================================

def test_reconfigure_to_nine_holes_recomputes_everything(service):
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5.6)
    service.record_score(round_.id, ana.id, 3, 6)
    service.record_score(round_.id, ana.id, 12, 3)

    updated = service.reconfigure(round_.id, num_holes=9)

    assert updated.config.num_holes == 9
    assert [h.number for h in updated.holes] == list(range(1, 10))
    assert updated.get_player(ana.id).playing_handicap == 6
    assert [s.hole_number for s in updated.scores] == [3]       # hole 12 no longer played
    assert updated.get_score(ana.id, 3).strokes_received == 1
    assert service.get_round(round_.id) == updated


def test_reconfigure_slope_rescores_holes(service):
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5.6)              # playing 11
    entry = service.record_score(round_.id, ana.id, 9, 5)        # index 13: no stroke
    assert entry.stableford_points == 1

    updated = service.reconfigure(round_.id, use_slope=True, manual_slope=150)

    assert updated.get_player(ana.id).playing_handicap == 15     # 11.2 * 150 / 113
    score = updated.get_score(ana.id, 9)
    assert (score.strokes_received, score.net_strokes, score.stableford_points) == (1, 4, 2)


def test_reconfigure_back_to_eighteen_clears_range(service):
    round_ = service.create_round(_course(EIGHTEEN), RoundConfig(num_holes=9, holes_range="10-18"))

    updated = service.reconfigure(round_.id, num_holes=18)
    assert updated.config.holes_range is None
    assert len(updated.holes) == 18


def test_reconfigure_course_swap(service):
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 3)
    service.record_score(round_.id, ana.id, 2, 3)

    updated = service.reconfigure(round_.id, course=_course(NINE, name="Short Course"))

    assert updated.course.name == "Short Course"
    assert len(updated.holes) == 18                               # nine holes played twice
    score = updated.get_score(ana.id, 2)
    assert score.strokes_received == 0                            # looped index 17
    assert score.stableford_points == 2


def test_failed_reconfigure_leaves_round_untouched(service):
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 4)
    service.record_score(round_.id, ana.id, 1, 5)
    before = service.get_round(round_.id)

    with pytest.raises(InconsistentStateError):
        service.reconfigure(round_.id, holes_range="10-18")
    with pytest.raises(ValidationError):
        service.reconfigure(round_.id, manual_slope=300)

    assert service.get_round(round_.id) == before


# ================================================================
# Hole edits
# ================================================================

def test_edit_hole_requires_admin(service):
    round_ = service.create_round(_course(EIGHTEEN))

    with pytest.raises(PermissionDeniedError):
        service.edit_hole(round_.id, 12, par=4)


def test_edit_hole_rescores(service):
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5.6)
    service.record_score(round_.id, ana.id, 12, 3)

    updated = service.edit_hole(round_.id, 12, par=4, admin=True)

    assert updated.get_hole(12).par == 4
    assert updated.get_score(ana.id, 12).stableford_points == 3


def test_edit_hole_duplicate_index_is_rejected(service):
    round_ = service.create_round(_course(EIGHTEEN))
    before = service.get_round(round_.id)

    with pytest.raises(InconsistentStateError):
        service.edit_hole(round_.id, 1, stroke_index=1, admin=True)
    with pytest.raises(ValidationError):
        service.edit_hole(round_.id, 1, par=7, admin=True)
    with pytest.raises(NotFoundError):
        service.edit_hole(round_.id, 19, par=4, admin=True)

    assert service.get_round(round_.id) == before


# ================================================================
# Completion
# ================================================================

def _played_round(service):
    round_ = service.create_round(_course(EIGHTEEN))
    profiles = [service.register_profile(name, 10) for name in ("Ana", "Luis", "Bea")]
    players = [service.add_profile_to_round(round_.id, p.id) for p in profiles]
    # playing 20: two strokes on index 1 (hole 3, par 5)
    for player, gross in zip(players, (4, 5, 7)):
        service.record_score(round_.id, player.id, 3, gross)
    return round_, profiles


def test_complete_round_adjusts_profiles(service):
    round_, profiles = _played_round(service)

    adjustments = service.complete_round(round_.id)

    assert [a.new_handicap for a in adjustments] == [9, 10, 11]
    assert [service.get_profile(p.id).exact_handicap for p in profiles] == [9, 10, 11]
    assert service.get_round(round_.id).status == RoundStatus.COMPLETED


def test_complete_round_only_once(service):
    round_, profiles = _played_round(service)
    service.complete_round(round_.id)

    with pytest.raises(RoundStateError):
        service.complete_round(round_.id)

    assert [service.get_profile(p.id).exact_handicap for p in profiles] == [9, 10, 11]


def test_completed_round_is_read_only(service):
    round_, _ = _played_round(service)
    player_id = service.get_round(round_.id).players[0].id
    service.complete_round(round_.id)

    with pytest.raises(RoundStateError):
        service.record_score(round_.id, player_id, 1, 4)
    with pytest.raises(RoundStateError):
        service.reconfigure(round_.id, num_holes=9)


def test_archive_needs_completed_round(service):
    round_, _ = _played_round(service)

    with pytest.raises(RoundStateError):
        service.archive(round_.id)

    service.complete_round(round_.id)
    archive = service.archive(round_.id)

    assert [s.player_name for s in archive.final_ranking] == ["Ana", "Luis", "Bea"]
    assert [p.rounds_won for p in archive.player_stats] == [1, 0, 0]
    assert [p.rounds_paid for p in archive.player_stats] == [0, 0, 1]


def test_cancel_round(service):
    round_, _ = _played_round(service)
    service.cancel_round(round_.id)

    assert service.get_round(round_.id).status == RoundStatus.CANCELLED
    with pytest.raises(RoundStateError):
        service.complete_round(round_.id)
    with pytest.raises(RoundStateError):
        service.cancel_round(round_.id)


# ================================================================
# Sample round loader
# ================================================================

def test_load_sample_round(service):
    sample = Path(__file__).resolve().parent.parent / "data" / "sample_round.json"
    round_id = load_round(service, json.loads(sample.read_text()))

    round_ = service.get_round(round_id)
    assert len(round_.players) == 3
    assert len(round_.scores) == 27
    assert round_.get_player(round_.players[0].id).playing_handicap == 9   # 8.4 * 126 / 113
    assert len(service.standings(round_id)) == 3


# ================================================================
# Handicap updates at completion
# ================================================================

def test_complete_round_lowers_plus_handicap_without_floor(service):
    round_ = service.create_round(_course(EIGHTEEN))
    pro = service.register_profile("Pro", -9.5)
    club = service.register_profile("Club", 5)
    pro_player = service.add_profile_to_round(round_.id, pro.id)      # playing -19
    club_player = service.add_profile_to_round(round_.id, club.id)    # playing 10
    service.record_score(round_.id, pro_player.id, 3, 3)              # gives one back: net 4, 3 pts
    service.record_score(round_.id, club_player.id, 3, 7)             # one stroke: net 6, 1 pt

    adjustments = service.complete_round(round_.id)

    assert [a.new_handicap for a in adjustments] == [-10.5, 6]
    assert service.get_profile(pro.id).exact_handicap == -10.5
    assert service.get_profile(club.id).exact_handicap == 6
    assert service.get_round(round_.id).status == RoundStatus.COMPLETED


def test_failed_completion_leaves_round_active(service, monkeypatch):
    monkeypatch.setattr(config, "HANDICAP_CEILING", 100)
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    good = service.register_profile("Good", 10)
    worst = service.register_profile("Worst", 54)
    good_player = service.add_profile_to_round(round_.id, good.id)
    worst_player = service.add_profile_to_round(round_.id, worst.id)
    service.record_score(round_.id, good_player.id, 1, 4)
    service.record_score(round_.id, worst_player.id, 1, 12)

    with pytest.raises(ValidationError):
        service.complete_round(round_.id)        # 54 would rise past the maximum

    assert service.get_round(round_.id).status == RoundStatus.ACTIVE
    assert service.get_profile(good.id).exact_handicap == 10
    assert service.get_profile(worst.id).exact_handicap == 54


# ================================================================
# Concurrent changes
# ================================================================

class _PausingRepository(InMemoryRoundRepository):
    """Holds the next update open for a moment once armed."""

    def __init__(self):
        super().__init__()
        self.armed = False
        self.inside = threading.Event()

    def update_round(self, round_id, change):
        def paused(current):
            if self.armed:
                self.armed = False
                self.inside.set()
                time.sleep(0.2)
            return change(current)
        return super().update_round(round_id, paused)


def _race(repo, first, second):
    """Start ``first``, and start ``second`` while ``first`` is mid-update."""
    repo.armed = True
    with ThreadPoolExecutor(max_workers=2) as executor:
        first_done = executor.submit(first)
        assert repo.inside.wait(timeout=5)
        second_done = executor.submit(second)
        return first_done.result(), second_done.result()


def test_score_recorded_while_player_joins_is_kept():
    repo = _PausingRepository()
    service = RoundService(repo)
    round_ = service.create_round(_course(NINE), RoundConfig(num_holes=9))
    ana = service.add_player(round_.id, "Ana", 4)

    luis, _ = _race(
        repo,
        lambda: service.add_player(round_.id, "Luis", 8),
        lambda: service.record_score(round_.id, ana.id, 1, 4),
    )

    stored = service.get_round(round_.id)
    assert stored.get_player(luis.id) is not None
    assert stored.get_score(ana.id, 1).gross_strokes == 4


def test_score_recorded_while_reconfiguring_uses_new_handicap():
    repo = _PausingRepository()
    service = RoundService(repo)
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5.6)              # playing 11

    _race(
        repo,
        lambda: service.reconfigure(round_.id, use_slope=True, manual_slope=150),
        lambda: service.record_score(round_.id, ana.id, 9, 5),   # index 13
    )

    stored = service.get_round(round_.id)
    assert stored.get_player(ana.id).playing_handicap == 15
    score = stored.get_score(ana.id, 9)
    assert (score.strokes_received, score.stableford_points) == (1, 2)


def test_score_for_withdrawing_player_is_rejected():
    repo = _PausingRepository()
    service = RoundService(repo)
    round_ = service.create_round(_course(EIGHTEEN))
    ana = service.add_player(round_.id, "Ana", 5)

    _race(
        repo,
        lambda: service.remove_player(round_.id, ana.id),
        lambda: pytest.raises(NotFoundError, service.record_score, round_.id, ana.id, 1, 4),
    )

    assert service.get_round(round_.id).scores == []
