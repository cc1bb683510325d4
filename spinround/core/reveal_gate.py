"""Reveal Gate — pure countdown arithmetic shared by every observing client.

Invariants:
    - The server stores only is_active + started_at + duration; remaining time
      is derived from the shared start timestamp
    - revealed is False whenever the record is inactive or absent
    - Restarting re-arms from the full duration (no accumulation)
    - Remaining time never exceeds the duration, even under clock skew

Design Decisions:
    - Naive datetimes are treated as UTC (SQLite drops tzinfo on round-trip)
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone

DEFAULT_COUNTDOWN_SECONDS: int = 3


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class CountdownView:
    """What a client needs to run its local countdown."""
    round_number: int
    is_active: bool
    started_at: datetime | None
    duration_seconds: int
    remaining_seconds: float
    tick: int | None
    revealed: bool
    server_time: datetime

    def to_dict(self) -> dict:
        return {
            "roundNumber": self.round_number,
            "isActive": self.is_active,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "durationSeconds": self.duration_seconds,
            "remainingSeconds": self.remaining_seconds,
            "tick": self.tick,
            "revealed": self.revealed,
            "serverTime": self.server_time.isoformat(),
        }


def remaining_seconds(
    started_at: datetime, duration_seconds: int, now: datetime,
) -> float:
    elapsed = (as_utc(now) - as_utc(started_at)).total_seconds()
    return min(float(duration_seconds), max(0.0, duration_seconds - elapsed))


def display_tick(remaining: float) -> int | None:
    """3, 2, 1 while counting down; None once the description is shown."""
    if remaining <= 0:
        return None
    return math.ceil(remaining)


def evaluate_countdown(
    round_number: int,
    is_active: bool,
    started_at: datetime | None,
    duration_seconds: int,
    now: datetime,
) -> CountdownView:
    """Project a stored countdown record onto the current instant."""
    now = as_utc(now)
    if not is_active or started_at is None:
        return CountdownView(
            round_number=round_number,
            is_active=False,
            started_at=as_utc(started_at) if started_at else None,
            duration_seconds=duration_seconds,
            remaining_seconds=0.0,
            tick=None,
            revealed=False,
            server_time=now,
        )

    remaining = remaining_seconds(started_at, duration_seconds, now)
    return CountdownView(
        round_number=round_number,
        is_active=True,
        started_at=as_utc(started_at),
        duration_seconds=duration_seconds,
        remaining_seconds=remaining,
        tick=display_tick(remaining),
        revealed=remaining <= 0,
        server_time=now,
    )


def withhold_description(question: dict, revealed: bool) -> dict:
    """Participant copy of a question: description only once revealed."""
    visible = dict(question)
    if not revealed:
        visible["description"] = None
    visible["descriptionVisible"] = revealed
    return visible
