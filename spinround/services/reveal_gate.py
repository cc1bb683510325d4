"""Reveal Gate Service — arms, stops and reports the per-round countdown.

Invariants:
    - start_countdown writes a fresh started_at every time (restart = full duration)
    - With countdown_requires_all_assigned, a round must be ALL_ASSIGNED to start
    - Participants never receive a question description before revealed=True
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from spinround.config import Settings, get_settings
from spinround.core.domain_types import ChangeKind, RoundPhase
from spinround.core.enforce_assignment import round_phase, count_unassigned
from spinround.core.errors import ResourceNotFoundError, RoundNotCompleteError
from spinround.core.reveal_gate import (
    CountdownView, evaluate_countdown, withhold_description,
)
from spinround.infrastructure.change_feed import ChangeFeed, change_feed
from spinround.infrastructure.repositories import (
    TeamRepository, QuestionRepository, RoundRepository, CountdownRepository,
)
from spinround.schemas.snapshot import QuestionSnapshot

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RevealGate:
    """Shared countdown keyed by round."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.feed = feed or change_feed
        self.clock = clock or _utcnow
        self.teams = TeamRepository(db)
        self.questions = QuestionRepository(db)
        self.rounds = RoundRepository(db)
        self.countdowns = CountdownRepository(db)

    async def _check_round(self, round_number: int) -> None:
        numbers = [r.number for r in await self.rounds.list_or_defaults()]
        if round_number not in numbers:
            raise ResourceNotFoundError("Round", str(round_number))

    async def start_countdown(self, round_number: int) -> CountdownView:
        await self._check_round(round_number)
        if self.settings.countdown_requires_all_assigned:
            teams = await self.teams.list_in_round(round_number)
            if round_phase(teams) != RoundPhase.ALL_ASSIGNED:
                raise RoundNotCompleteError(round_number, count_unassigned(teams))

        countdown = await self.countdowns.start(
            round_number, self.clock(), self.settings.countdown_seconds,
        )
        await self.db.commit()

        logger.info(
            f"Countdown started for round {round_number} "
            f"({countdown.duration_seconds}s)",
            extra={"round_number": round_number},
        )
        self.feed.publish(ChangeKind.COUNTDOWN, "started", round=round_number)
        return self._view(round_number, countdown)

    async def stop_countdown(self, round_number: int) -> CountdownView:
        await self._check_round(round_number)
        stopped = await self.countdowns.deactivate(round_number)
        await self.db.commit()
        if stopped:
            logger.info(
                f"Countdown stopped for round {round_number}",
                extra={"round_number": round_number},
            )
            self.feed.publish(ChangeKind.COUNTDOWN, "stopped", round=round_number)
        return await self.status(round_number)

    async def status(self, round_number: int) -> CountdownView:
        await self._check_round(round_number)
        return self._view(round_number, await self.countdowns.get(round_number))

    def _view(self, round_number: int, countdown) -> CountdownView:
        if countdown is None:
            return evaluate_countdown(
                round_number, False, None, self.settings.countdown_seconds,
                self.clock(),
            )
        return evaluate_countdown(
            round_number,
            countdown.is_active,
            countdown.started_at,
            countdown.duration_seconds,
            self.clock(),
        )

    async def participant_assignment(self, team_id: str) -> dict:
        """The team's question as the participant may see it right now."""
        team = await self.teams.get(team_id)
        if team is None:
            raise ResourceNotFoundError("Team", team_id)

        view = await self.status(team.round_number)
        question = None
        if team.assigned_question_id:
            row = await self.questions.get(team.assigned_question_id)
            if row is not None:
                question = withhold_description(
                    QuestionSnapshot.from_row(row).to_wire(), view.revealed,
                )
        return {
            "teamId": team.id,
            "teamName": team.name,
            "round": team.round_number,
            "hasSpun": team.has_spun,
            "question": question,
            "countdown": view.to_dict(),
        }
