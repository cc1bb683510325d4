"""Reveal Gate — pure countdown arithmetic."""

from datetime import datetime, timedelta, timezone

from spinround.core.reveal_gate import (
    as_utc,
    display_tick,
    evaluate_countdown,
    remaining_seconds,
    withhold_description,
)

START = datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2026, 5, 1, 12, 0, 0)
    assert as_utc(naive) == START


def test_remaining_counts_down():
    assert remaining_seconds(START, 3, START + timedelta(seconds=1)) == 2.0


def test_remaining_never_negative():
    assert remaining_seconds(START, 3, START + timedelta(minutes=5)) == 0.0


def test_remaining_clamped_under_clock_skew():
    assert remaining_seconds(START, 3, START - timedelta(seconds=10)) == 3.0


def test_display_tick():
    assert display_tick(3.0) == 3
    assert display_tick(2.01) == 3
    assert display_tick(0.4) == 1
    assert display_tick(0.0) is None


def test_inactive_record_is_never_revealed():
    view = evaluate_countdown(1, False, START, 3, START + timedelta(hours=1))
    assert view.revealed is False
    assert view.is_active is False
    assert view.remaining_seconds == 0.0


def test_absent_start_is_never_revealed():
    view = evaluate_countdown(1, True, None, 3, START)
    assert view.revealed is False


def test_active_countdown_reveals_at_expiry():
    assert evaluate_countdown(1, True, START, 3, START + timedelta(seconds=2.9)).revealed is False
    assert evaluate_countdown(1, True, START, 3, START + timedelta(seconds=3)).revealed is True


def test_view_serializes_camel_case():
    data = evaluate_countdown(2, True, START, 3, START).to_dict()
    assert data["roundNumber"] == 2
    assert data["isActive"] is True
    assert data["startedAt"] == START.isoformat()
    assert data["durationSeconds"] == 3
    assert data["tick"] == 3
    assert data["serverTime"] == START.isoformat()


def test_withhold_description_before_reveal():
    question = {"id": "q1", "question": "Prompt", "description": "Secret"}
    hidden = withhold_description(question, revealed=False)
    assert hidden["description"] is None
    assert hidden["descriptionVisible"] is False
    assert question["description"] == "Secret"


def test_withhold_description_after_reveal():
    shown = withhold_description({"description": "Secret"}, revealed=True)
    assert shown == {"description": "Secret", "descriptionVisible": True}
