"""Assignment Enforcement — tests for the pure team, spin and advancement rules.

Tests cover:
    - check_team_name: strip, empty, case-insensitive duplicate, reserved admin name
    - check_round_capacity boundary
    - check_can_spin / choose_question / check_question_deletable
    - round_phase transitions
    - plan_advance: split, error precedence, capacity
"""

import random
from dataclasses import dataclass

import pytest

from spinround.core.domain_types import RoundPhase
from spinround.core.enforce_assignment import (
    name_key,
    check_team_name,
    check_round_capacity,
    check_can_spin,
    choose_question,
    check_question_deletable,
    round_phase,
    count_unassigned,
    plan_advance,
)
from spinround.core.errors import (
    AlreadySpunError,
    DuplicateNameError,
    EmptyNameError,
    EmptySelectionError,
    FinalRoundError,
    LockedQuestionError,
    NoQuestionsAvailableError,
    ReservedNameError,
    RoundCapacityError,
    RoundNotCompleteError,
    UnknownTeamSelectionError,
)


@dataclass
class FakeTeam:
    id: str
    name: str = "Team"
    round_number: int = 1
    has_spun: bool = False
    assigned_question_id: str | None = None
    marks: int | None = None
    reason: str | None = None


def _assigned(team_id: str) -> FakeTeam:
    return FakeTeam(id=team_id, has_spun=True, assigned_question_id=f"q-{team_id}")


# ─── names ───────────────────────────────────────────────────────

def test_name_key_strips_and_lowercases():
    assert name_key("  Team Alpha ") == "team alpha"


def test_check_team_name_returns_stripped():
    assert check_team_name("  Alpha  ", [], "uxcellence") == "Alpha"


def test_check_team_name_rejects_blank():
    with pytest.raises(EmptyNameError):
        check_team_name("   ", [], "uxcellence")


def test_check_team_name_rejects_case_insensitive_duplicate():
    with pytest.raises(DuplicateNameError):
        check_team_name("team alpha", ["Team Alpha"], "uxcellence")


@pytest.mark.parametrize("name", ["uxcellence", "UXcellence", "UXCELLENCE"])
def test_check_team_name_rejects_admin_name(name):
    with pytest.raises(ReservedNameError):
        check_team_name(name, [], "uxcellence")


def test_duplicate_is_reported_before_reserved():
    with pytest.raises(DuplicateNameError):
        check_team_name("UXcellence", ["uxcellence"], "uxcellence")


# ─── capacity ────────────────────────────────────────────────────

def test_capacity_allows_below_max():
    check_round_capacity(1, 29, 30)


def test_capacity_rejects_at_max():
    with pytest.raises(RoundCapacityError) as exc:
        check_round_capacity(1, 30, 30)
    assert exc.value.max_teams == 30


# ─── spin ────────────────────────────────────────────────────────

def test_check_can_spin_allows_fresh_team():
    check_can_spin(FakeTeam(id="t1"))


def test_check_can_spin_rejects_spun_team():
    with pytest.raises(AlreadySpunError):
        check_can_spin(_assigned("t1"))


def test_check_can_spin_rejects_holder_without_flag():
    with pytest.raises(AlreadySpunError):
        check_can_spin(FakeTeam(id="t1", assigned_question_id="q1"))


def test_choose_question_rejects_empty_pool():
    with pytest.raises(NoQuestionsAvailableError) as exc:
        choose_question([], 2)
    assert exc.value.context.round_number == 2


def test_choose_question_picks_from_candidates():
    rng = random.Random(3)
    picks = {choose_question(["a", "b", "c"], 1, rng) for _ in range(50)}
    assert picks == {"a", "b", "c"}


def test_locked_question_is_not_deletable():
    with pytest.raises(LockedQuestionError):
        check_question_deletable("q1", True)
    check_question_deletable("q1", False)


# ─── round phase ─────────────────────────────────────────────────

def test_round_phase_empty():
    assert round_phase([]) == RoundPhase.EMPTY


def test_round_phase_spinning_until_all_assigned():
    teams = [_assigned("t1"), FakeTeam(id="t2")]
    assert round_phase(teams) == RoundPhase.SPINNING
    assert count_unassigned(teams) == 1


def test_round_phase_all_assigned():
    assert round_phase([_assigned("t1"), _assigned("t2")]) == RoundPhase.ALL_ASSIGNED


# ─── plan_advance ────────────────────────────────────────────────

def test_plan_advance_splits_selection():
    teams = [_assigned("t1"), _assigned("t2"), _assigned("t3")]
    plan = plan_advance(1, 3, teams, ["t1", "t3"])
    assert plan.from_round == 1
    assert plan.to_round == 2
    assert plan.promoted == ("t1", "t3")
    assert plan.eliminated == ("t2",)


def test_plan_advance_ignores_repeated_ids():
    plan = plan_advance(1, 3, [_assigned("t1"), _assigned("t2")], ["t1", "t1"])
    assert plan.promoted == ("t1",)


def test_plan_advance_rejects_final_round_first():
    with pytest.raises(FinalRoundError):
        plan_advance(3, 3, [], [])


def test_plan_advance_rejects_incomplete_round():
    with pytest.raises(RoundNotCompleteError) as exc:
        plan_advance(1, 3, [_assigned("t1"), FakeTeam(id="t2")], ["t1"])
    assert exc.value.unassigned == 1


def test_plan_advance_rejects_round_without_teams():
    with pytest.raises(RoundNotCompleteError):
        plan_advance(1, 3, [], ["t1"])


def test_plan_advance_rejects_empty_selection():
    with pytest.raises(EmptySelectionError):
        plan_advance(1, 3, [_assigned("t1")], [])


def test_plan_advance_rejects_unknown_ids():
    with pytest.raises(UnknownTeamSelectionError) as exc:
        plan_advance(1, 3, [_assigned("t1")], ["t1", "t9"])
    assert exc.value.team_ids == ["t9"]


def test_plan_advance_enforces_next_round_capacity():
    teams = [_assigned("t1"), _assigned("t2"), _assigned("t3")]
    with pytest.raises(RoundCapacityError):
        plan_advance(1, 3, teams, ["t1", "t2", "t3"], next_round_capacity=2)
    plan = plan_advance(1, 3, teams, ["t1", "t2"], next_round_capacity=2)
    assert plan.eliminated == ("t3",)
