"""Assignment Enforcement — pure rules behind team creation, spins and round advancement.

Invariants:
    - Name comparison is case-insensitive everywhere (strip + lower)
    - A question is eligible for a spin iff it is unlocked in the team's round
    - A team may spin iff it has neither spun nor holds a question
    - Advancement requires every team in the round to hold a question
    - plan_advance is PURE: returns the plan, the shell applies it

Design Decisions:
    - Rules raise typed errors (core/errors.py) instead of returning error dicts:
      every caller is an HTTP handler that maps them through one global handler
"""

import random
from dataclasses import dataclass
from typing import Iterable, Sequence, TypeVar

from spinround.core.domain_types import TeamId, RoundPhase
from spinround.core.errors import (
    EmptyNameError,
    DuplicateNameError,
    ReservedNameError,
    RoundCapacityError,
    AlreadySpunError,
    NoQuestionsAvailableError,
    LockedQuestionError,
    FinalRoundError,
    RoundNotCompleteError,
    EmptySelectionError,
    UnknownTeamSelectionError,
)
from spinround.core.repository_protocols import TeamLike

T = TypeVar("T")


def name_key(name: str) -> str:
    """Canonical form used for every name comparison."""
    return name.strip().lower()


# ─── Team creation ───────────────────────────────────────────────

def check_team_name(
    name: str, existing_names: Iterable[str], admin_name: str,
) -> str:
    """Validate a new team name. Returns the stripped name."""
    stripped = name.strip()
    if not stripped:
        raise EmptyNameError()

    key = name_key(stripped)
    if any(name_key(existing) == key for existing in existing_names):
        raise DuplicateNameError(stripped)
    if key == name_key(admin_name):
        raise ReservedNameError(stripped)
    return stripped


def check_round_capacity(
    round_number: int, team_count: int, max_teams: int,
) -> None:
    if team_count >= max_teams:
        raise RoundCapacityError(round_number, max_teams)


# ─── Spin ────────────────────────────────────────────────────────

def check_can_spin(team: TeamLike) -> None:
    if team.has_spun or team.assigned_question_id:
        raise AlreadySpunError(team.id)


def choose_question(
    candidates: Sequence[T], round_number: int,
    rng: random.Random | None = None,
) -> T:
    """Uniform random pick among the currently unlocked questions."""
    if not candidates:
        raise NoQuestionsAvailableError(round_number)
    return (rng or random).choice(list(candidates))


def check_question_deletable(question_id: str, is_locked: bool) -> None:
    if is_locked:
        raise LockedQuestionError(question_id)


# ─── Round state ─────────────────────────────────────────────────

def round_phase(teams: Sequence[TeamLike]) -> RoundPhase:
    """EMPTY (no teams) → SPINNING → ALL_ASSIGNED (every team holds a question)."""
    if not teams:
        return RoundPhase.EMPTY
    if all(t.assigned_question_id for t in teams):
        return RoundPhase.ALL_ASSIGNED
    return RoundPhase.SPINNING


def count_unassigned(teams: Sequence[TeamLike]) -> int:
    return sum(1 for t in teams if not t.assigned_question_id)


@dataclass(frozen=True)
class AdvancePlan:
    """Which teams move on and which are eliminated."""
    from_round: int
    to_round: int
    promoted: tuple[TeamId, ...]
    eliminated: tuple[TeamId, ...]


def plan_advance(
    current_round: int,
    final_round: int,
    teams: Sequence[TeamLike],
    selected_ids: Sequence[str],
    next_round_capacity: int | None = None,
) -> AdvancePlan:
    """Validate an advancement and compute the elimination split.

    teams must be exactly the teams of current_round. next_round_capacity
    is None when capacity is not enforced.
    """
    if current_round >= final_round:
        raise FinalRoundError(current_round)

    unassigned = count_unassigned(teams)
    if not teams or unassigned:
        raise RoundNotCompleteError(current_round, unassigned)

    selected = list(dict.fromkeys(selected_ids))
    if not selected:
        raise EmptySelectionError()

    in_round = {t.id for t in teams}
    unknown = [team_id for team_id in selected if team_id not in in_round]
    if unknown:
        raise UnknownTeamSelectionError(unknown)

    if next_round_capacity is not None and len(selected) > next_round_capacity:
        raise RoundCapacityError(current_round + 1, next_round_capacity)

    chosen = set(selected)
    return AdvancePlan(
        from_round=current_round,
        to_round=current_round + 1,
        promoted=tuple(TeamId(t.id) for t in teams if t.id in chosen),
        eliminated=tuple(TeamId(t.id) for t in teams if t.id not in chosen),
    )
