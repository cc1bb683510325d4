"""Snapshot Rules — within-collection validation of full-replacement writes."""

from types import SimpleNamespace

import pytest

from spinround.core.errors import SnapshotValidationError
from spinround.core.snapshot import (
    DEFAULT_ROUNDS,
    validate_teams,
    validate_questions,
    validate_rounds,
    validate_current_round,
)


def _team(team_id, name, has_spun=False, assigned_question_id=None):
    return SimpleNamespace(
        id=team_id, name=name, has_spun=has_spun,
        assigned_question_id=assigned_question_id,
    )


def _question(question_id, assigned_to_team_id=None, is_locked=None):
    if is_locked is None:
        is_locked = assigned_to_team_id is not None
    return SimpleNamespace(
        id=question_id, assigned_to_team_id=assigned_to_team_id, is_locked=is_locked,
    )


def test_default_rounds():
    assert [(r["number"], r["name"], r["max_teams"]) for r in DEFAULT_ROUNDS] == [
        (1, "Style Battle", 30),
        (2, "Design Remix", 20),
        (3, "UXcellence Grand Showdown", 10),
    ]


def test_valid_teams_pass():
    validate_teams([
        _team("t1", "Alpha", True, "q1"),
        _team("t2", "Beta"),
    ])


def test_teams_collects_every_problem():
    with pytest.raises(SnapshotValidationError) as exc:
        validate_teams([
            _team("t1", "Alpha", True, "q1"),
            _team("t1", "alpha", True, "q1"),
            _team("t3", "Gamma", False, "q3"),
        ])
    problems = exc.value.problems
    assert "duplicate team id 't1'" in problems
    assert "duplicate team name 'alpha'" in problems
    assert "question 'q1' assigned to several teams" in problems
    assert "team 't3' holds a question without having spun" in problems


def test_teams_reject_blank_name():
    with pytest.raises(SnapshotValidationError):
        validate_teams([_team("t1", "  ")])


def test_questions_reject_duplicate_ids_and_double_holders():
    with pytest.raises(SnapshotValidationError) as exc:
        validate_questions([
            _question("q1", "t1"), _question("q1"), _question("q2", "t1"),
        ])
    assert exc.value.collection == "questions"
    assert len(exc.value.problems) == 2


def test_questions_lock_matches_holder():
    validate_questions([_question("q1", "t1"), _question("q2")])
    with pytest.raises(SnapshotValidationError) as exc:
        validate_questions([
            _question("q1", is_locked=True),
            _question("q2", "t2", is_locked=False),
        ])
    assert exc.value.problems == [
        "question 'q1' is locked but held by no team",
        "question 'q2' is held by a team but not locked",
    ]


def test_rounds_must_be_contiguous_from_one():
    validate_rounds([SimpleNamespace(number=n) for n in (2, 1, 3)])
    with pytest.raises(SnapshotValidationError):
        validate_rounds([SimpleNamespace(number=n) for n in (1, 3)])
    with pytest.raises(SnapshotValidationError):
        validate_rounds([SimpleNamespace(number=0)])
    with pytest.raises(SnapshotValidationError):
        validate_rounds([])


def test_current_round_must_exist():
    validate_current_round(2, [1, 2, 3])
    with pytest.raises(SnapshotValidationError):
        validate_current_round(4, [1, 2, 3])


def test_rounds_must_keep_current_round():
    validate_rounds([SimpleNamespace(number=n) for n in (1, 2)], current_round=2)
    with pytest.raises(SnapshotValidationError) as exc:
        validate_rounds([SimpleNamespace(number=1)], current_round=2)
    assert exc.value.problems == ["current round 2 would be removed"]
