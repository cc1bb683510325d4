"""Snapshot Rules — defaults and within-collection checks for full-replacement writes.

Invariants:
    - Round ordinals are contiguous starting at 1
    - Team ids and case-insensitive names are unique within a replacement
    - No two teams reference the same question
    - Question ids are unique within a replacement
    - A question is locked exactly when a team holds it
    - A round replacement keeps the current round
    - Checks are per collection only: a client replacing teams and questions
      in two requests passes through a transiently inconsistent pair

Design Decisions:
    - Validators collect every problem before raising, so the admin sees
      the whole list at once
"""

from collections import Counter
from typing import Sequence

from spinround.core.enforce_assignment import name_key
from spinround.core.errors import SnapshotValidationError


DEFAULT_ROUNDS: tuple[dict, ...] = (
    {
        "number": 1,
        "name": "Style Battle",
        "max_teams": 30,
        "description": "Test on HTML + CSS skills",
    },
    {
        "number": 2,
        "name": "Design Remix",
        "max_teams": 20,
        "description": "Creative design twist challenge",
    },
    {
        "number": 3,
        "name": "UXcellence Grand Showdown",
        "max_teams": 10,
        "description": "Final design presentation & justification",
    },
)


def _duplicates(values: Sequence) -> list:
    return sorted(v for v, n in Counter(values).items() if n > 1)


def validate_teams(teams: Sequence) -> None:
    """teams: objects exposing id, name, has_spun, assigned_question_id."""
    problems = []
    for team_id in _duplicates([t.id for t in teams]):
        problems.append(f"duplicate team id '{team_id}'")
    for key in _duplicates([name_key(t.name) for t in teams]):
        problems.append(f"duplicate team name '{key}'")
    for question_id in _duplicates(
        [t.assigned_question_id for t in teams if t.assigned_question_id],
    ):
        problems.append(f"question '{question_id}' assigned to several teams")
    for t in teams:
        if not t.name.strip():
            problems.append(f"team '{t.id}' has an empty name")
        if t.assigned_question_id and not t.has_spun:
            problems.append(f"team '{t.id}' holds a question without having spun")
    if problems:
        raise SnapshotValidationError("teams", problems)


def validate_questions(questions: Sequence) -> None:
    """questions: objects exposing id, is_locked, assigned_to_team_id."""
    problems = []
    for question_id in _duplicates([q.id for q in questions]):
        problems.append(f"duplicate question id '{question_id}'")
    for team_id in _duplicates(
        [q.assigned_to_team_id for q in questions if q.assigned_to_team_id],
    ):
        problems.append(f"team '{team_id}' holds several questions")
    for q in questions:
        if q.is_locked and not q.assigned_to_team_id:
            problems.append(f"question '{q.id}' is locked but held by no team")
        elif q.assigned_to_team_id and not q.is_locked:
            problems.append(f"question '{q.id}' is held by a team but not locked")
    if problems:
        raise SnapshotValidationError("questions", problems)


def validate_rounds(rounds: Sequence, current_round: int | None = None) -> None:
    """rounds: objects exposing number. current_round must survive the write."""
    numbers = sorted(r.number for r in rounds)
    if not numbers:
        raise SnapshotValidationError("rounds", ["at least one round is required"])
    if numbers != list(range(1, len(numbers) + 1)):
        raise SnapshotValidationError(
            "rounds", [f"round numbers must be 1..{len(numbers)}, got {numbers}"],
        )
    if current_round is not None and current_round not in numbers:
        raise SnapshotValidationError(
            "rounds", [f"current round {current_round} would be removed"],
        )


def validate_current_round(current_round: int, round_numbers: Sequence[int]) -> None:
    if current_round not in round_numbers:
        raise SnapshotValidationError(
            "currentRound", [f"round {current_round} does not exist"],
        )
