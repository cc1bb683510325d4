"""Reveal Gate — countdown lifecycle and the participant's assignment view.

Tests cover:
    - start requires every team assigned (configurable)
    - remaining time derives from the shared start timestamp
    - restart re-arms from the full duration
    - stop deactivates; an absent record is never revealed
    - description withheld until revealed
"""

from datetime import timedelta

import pytest

from spinround.core.errors import ResourceNotFoundError, RoundNotCompleteError
from spinround.services.reveal_gate import RevealGate


@pytest.fixture
async def assigned_round(engine, add_questions, add_teams):
    """Round 1 with two teams that have both spun."""
    await add_questions(2)
    teams = await add_teams("A", "B")
    for team in teams:
        await engine.spin(team.id)
    return teams


async def test_status_without_record_is_inactive(gate):
    view = await gate.status(1)
    assert view.is_active is False
    assert view.revealed is False
    assert view.remaining_seconds == 0.0
    assert view.duration_seconds == 3


async def test_start_requires_all_teams_assigned(gate, engine, add_questions, add_teams):
    await add_questions(2)
    a, b = await add_teams("A", "B")
    await engine.spin(a.id)

    with pytest.raises(RoundNotCompleteError) as exc:
        await gate.start_countdown(1)
    assert exc.value.unassigned == 1


async def test_start_on_empty_round_is_rejected(gate):
    with pytest.raises(RoundNotCompleteError):
        await gate.start_countdown(1)


async def test_start_precondition_can_be_disabled(test_db, settings, feed, clock):
    settings.countdown_requires_all_assigned = False
    gate = RevealGate(test_db, settings, feed=feed, clock=clock)
    view = await gate.start_countdown(1)
    assert view.is_active is True


async def test_countdown_ticks_and_reveals(gate, clock, assigned_round):
    started = await gate.start_countdown(1)
    assert started.is_active is True
    assert started.remaining_seconds == 3.0
    assert started.tick == 3
    assert started.revealed is False

    clock.now += timedelta(seconds=1.2)
    view = await gate.status(1)
    assert view.tick == 2
    assert view.revealed is False

    clock.now += timedelta(seconds=2)
    view = await gate.status(1)
    assert view.remaining_seconds == 0.0
    assert view.tick is None
    assert view.revealed is True


async def test_restart_rearms_full_duration(gate, clock, assigned_round):
    await gate.start_countdown(1)
    clock.now += timedelta(seconds=2)

    view = await gate.start_countdown(1)

    assert view.remaining_seconds == 3.0
    assert view.started_at == clock.now


async def test_stop_deactivates_and_hides(gate, clock, assigned_round):
    await gate.start_countdown(1)
    clock.now += timedelta(seconds=5)

    view = await gate.stop_countdown(1)

    assert view.is_active is False
    assert view.revealed is False


async def test_unknown_round_is_not_found(gate):
    with pytest.raises(ResourceNotFoundError):
        await gate.status(9)


async def test_reset_round_stops_countdown(gate, engine, assigned_round):
    await gate.start_countdown(1)
    await engine.reset_round(1)
    view = await gate.status(1)
    assert view.is_active is False


async def test_assignment_withholds_description_until_revealed(
    gate, clock, assigned_round,
):
    team_id = assigned_round[0].id

    before = await gate.participant_assignment(team_id)
    assert before["hasSpun"] is True
    assert before["question"]["description"] is None
    assert before["question"]["descriptionVisible"] is False
    assert before["question"]["question"].startswith("Question 1.")

    await gate.start_countdown(1)
    clock.now += timedelta(seconds=3)

    after = await gate.participant_assignment(team_id)
    assert after["question"]["description"].startswith("Details 1.")
    assert after["question"]["descriptionVisible"] is True
    assert after["countdown"]["revealed"] is True


async def test_assignment_before_spin_has_no_question(gate, engine):
    team = await engine.create_team("Alpha")
    view = await gate.participant_assignment(team.id)
    assert view["question"] is None
    assert view["hasSpun"] is False


async def test_assignment_for_unknown_team_is_not_found(gate):
    with pytest.raises(ResourceNotFoundError):
        await gate.participant_assignment("missing")
