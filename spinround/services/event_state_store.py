"""Event State Store — the whole-collection snapshot contract over the relational store.

Invariants:
    - load() returns teams, questions, currentRound and rounds, with the
      default rounds when none are stored
    - Each replace_* call validates its own collection only, then replaces it
      in one transaction
    - The assignment ledger is rebuilt after a team or question replacement:
      current holdings are recorded as held rows, earlier rows survive as
      released history when they still point at existing teams and questions

Design Decisions:
    - Replacement is delete-all + insert; created_at of surviving ids is kept
      so list order stays stable across writes
    - currentRound must name a known round, and a round write may not drop it;
      nothing else is cross-checked
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from spinround.core.domain_types import ChangeKind
from spinround.core.snapshot import (
    validate_teams, validate_questions, validate_rounds, validate_current_round,
)
from spinround.infrastructure.change_feed import ChangeFeed, change_feed
from spinround.infrastructure.repositories import (
    TeamRepository,
    QuestionRepository,
    AssignmentRepository,
    RoundRepository,
    EventStateRepository,
)
from spinround.models.question import Question
from spinround.models.team import Team
from spinround.schemas.snapshot import (
    EventSnapshot, TeamSnapshot, QuestionSnapshot, RoundSnapshot,
)

logger = logging.getLogger(__name__)


def _created_at(previous: dict, item_id: str, now: datetime, offset: int) -> datetime:
    if item_id in previous:
        return previous[item_id]
    return now + timedelta(microseconds=offset)


class EventStateStore:
    def __init__(self, db: AsyncSession, feed: ChangeFeed | None = None):
        self.db = db
        self.feed = feed or change_feed
        self.teams = TeamRepository(db)
        self.questions = QuestionRepository(db)
        self.assignments = AssignmentRepository(db)
        self.rounds = RoundRepository(db)
        self.event_state = EventStateRepository(db)

    async def load(self) -> EventSnapshot:
        teams = await self.teams.list_all()
        questions = await self.questions.list_all()
        rounds = await self.rounds.list_or_defaults()
        return EventSnapshot(
            teams=[TeamSnapshot.from_row(t) for t in teams],
            questions=[QuestionSnapshot.from_row(q) for q in questions],
            current_round=await self.event_state.current_round(),
            rounds=[RoundSnapshot.from_row(r) for r in rounds],
        )

    async def replace_teams(self, teams: Sequence[TeamSnapshot]) -> None:
        validate_teams(teams)
        previous = {t.id: t.created_at for t in await self.teams.list_all()}
        ledger = await self._ledger_rows()

        await self.assignments.delete_all()
        await self.teams.delete_all()

        now = datetime.now(timezone.utc)
        self.db.add_all([
            Team(
                id=t.id,
                name=t.name.strip(),
                round_number=t.round,
                has_spun=t.has_spun,
                assigned_question_id=t.assigned_question_id,
                marks=t.marks,
                reason=t.reason,
                created_at=_created_at(previous, t.id, now, i),
            )
            for i, t in enumerate(teams)
        ])
        await self.db.flush()
        await self._rebuild_ledger(ledger)
        await self.db.commit()

        logger.info(f"Teams replaced ({len(teams)} team(s))")
        self.feed.publish(ChangeKind.TEAMS, "replaced")

    async def replace_questions(self, questions: Sequence[QuestionSnapshot]) -> None:
        validate_questions(questions)
        previous = {q.id: q.created_at for q in await self.questions.list_all()}
        ledger = await self._ledger_rows()

        await self.assignments.delete_all()
        await self.questions.delete_all()

        now = datetime.now(timezone.utc)
        self.db.add_all([
            Question(
                id=q.id,
                round_number=q.round,
                prompt=q.question,
                description=q.description,
                is_locked=q.is_locked,
                assigned_team_id=q.assigned_to_team_id,
                created_at=_created_at(previous, q.id, now, i),
            )
            for i, q in enumerate(questions)
        ])
        await self.db.flush()
        await self._rebuild_ledger(ledger)
        await self.db.commit()

        logger.info(f"Questions replaced ({len(questions)} question(s))")
        self.feed.publish(ChangeKind.QUESTIONS, "replaced")

    async def replace_rounds(self, rounds: Sequence[RoundSnapshot]) -> None:
        validate_rounds(rounds, await self.event_state.current_round())
        await self.rounds.replace([
            {
                "number": r.number,
                "name": r.name,
                "max_teams": r.max_teams,
                "description": r.description,
            }
            for r in sorted(rounds, key=lambda r: r.number)
        ])
        await self.db.commit()

        logger.info(f"Rounds replaced ({len(rounds)} round(s))")
        self.feed.publish(ChangeKind.ROUNDS, "replaced")

    async def set_current_round(self, current_round: int) -> None:
        numbers = [r.number for r in await self.rounds.list_or_defaults()]
        validate_current_round(current_round, numbers)
        await self.event_state.set_current_round(current_round)
        await self.db.commit()

        logger.info(
            f"Current round set to {current_round}",
            extra={"round_number": current_round},
        )
        self.feed.publish(
            ChangeKind.CURRENT_ROUND, "replaced", currentRound=current_round,
        )

    async def _ledger_rows(self) -> list[tuple]:
        return [
            (a.team_id, a.question_id, a.round_number, a.assigned_at, a.released_at)
            for a in await self.assignments.list_all()
        ]

    async def _rebuild_ledger(self, previous: Sequence[tuple]) -> None:
        """Re-derive held ledger rows from the teams' current holdings.

        Earlier rows whose team and question still exist come back as released
        history, so they never block a claim.
        """
        teams = await self.teams.list_all()
        question_ids = {q.id for q in await self.questions.list_all()}
        team_ids = {t.id for t in teams}
        now = datetime.now(timezone.utc)

        current = {
            (t.id, t.assigned_question_id): t.round_number
            for t in teams
            if t.assigned_question_id in question_ids
        }
        assigned_at = {}

        for team_id, question_id, round_number, at, released_at in previous:
            if team_id not in team_ids or question_id not in question_ids:
                continue
            if released_at is None and (team_id, question_id) in current:
                assigned_at[(team_id, question_id)] = at
                continue
            await self.assignments.insert(
                team_id, question_id, round_number, at, released_at or now,
            )

        for (team_id, question_id), round_number in current.items():
            await self.assignments.insert(
                team_id, question_id, round_number,
                assigned_at.get((team_id, question_id)),
            )
