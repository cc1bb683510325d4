"""SQLAlchemy Repositories — scoped persistence operations for every event entity.

Invariants:
    - Repositories never commit; the calling service owns the transaction
    - QuestionRepository.claim and TeamRepository.mark_spun are conditional
      single-statement updates; a False return means another writer got there first
    - Team, question, ledger and countdown reads load with populate_existing,
      so rows already in the session pick up what bulk updates wrote
    - Ledger rows are released, not deleted, when a round completes

Design Decisions:
    - Satisfy core/repository_protocols.py structurally (no inheritance)
    - RoundRepository serves DEFAULT_ROUNDS transiently until rounds are written
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from spinround.core.enforce_assignment import name_key
from spinround.core.snapshot import DEFAULT_ROUNDS
from spinround.models.team import Team
from spinround.models.question import Question
from spinround.models.round import Round
from spinround.models.assignment import Assignment
from spinround.models.countdown import Countdown
from spinround.models.event_state import EventState, SINGLETON_ID

FRESH = {"populate_existing": True}


class TeamRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, team_id: str) -> Team | None:
        return await self.db.get(Team, team_id, populate_existing=True)

    async def get_by_name(self, name: str) -> Team | None:
        result = await self.db.execute(
            select(Team)
            .execution_options(**FRESH)
            .where(Team.name_key == name_key(name)),
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[Team]:
        result = await self.db.execute(
            select(Team)
            .execution_options(**FRESH)
            .order_by(Team.created_at, Team.id),
        )
        return result.scalars().all()

    async def list_in_round(self, round_number: int) -> Sequence[Team]:
        result = await self.db.execute(
            select(Team)
            .execution_options(**FRESH)
            .where(Team.round_number == round_number)
            .order_by(Team.created_at, Team.id),
        )
        return result.scalars().all()

    async def count_in_round(self, round_number: int) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Team)
            .where(Team.round_number == round_number),
        )
        return result.scalar_one()

    async def insert(self, name: str, round_number: int) -> Team:
        team = Team(name=name, round_number=round_number, has_spun=False)
        self.db.add(team)
        await self.db.flush()
        return team

    async def update(self, team_id: str, **patch: object) -> None:
        await self.db.execute(
            update(Team).where(Team.id == team_id).values(**patch),
        )

    async def mark_spun(self, team_id: str, question_id: str) -> bool:
        result = await self.db.execute(
            update(Team)
            .where(Team.id == team_id, Team.has_spun == False)  # noqa: E712
            .values(has_spun=True, assigned_question_id=question_id),
        )
        return result.rowcount == 1

    async def promote(self, team_ids: Sequence[str], to_round: int) -> None:
        await self.db.execute(
            update(Team)
            .where(Team.id.in_(team_ids))
            .values(
                round_number=to_round, has_spun=False, assigned_question_id=None,
            ),
        )

    async def clear_spins_in_round(self, round_number: int) -> None:
        await self.db.execute(
            update(Team)
            .where(Team.round_number == round_number)
            .values(has_spun=False, assigned_question_id=None),
        )

    async def reset_all(self) -> None:
        await self.db.execute(
            update(Team).values(
                round_number=1, has_spun=False, assigned_question_id=None,
                marks=None, reason=None,
            ),
        )

    async def delete(self, team_id: str) -> None:
        await self.db.execute(delete(Team).where(Team.id == team_id))

    async def delete_many(self, team_ids: Sequence[str]) -> None:
        if team_ids:
            await self.db.execute(delete(Team).where(Team.id.in_(team_ids)))

    async def delete_all(self) -> None:
        await self.db.execute(delete(Team))


class QuestionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, question_id: str) -> Question | None:
        return await self.db.get(Question, question_id, populate_existing=True)

    async def list_all(self) -> Sequence[Question]:
        result = await self.db.execute(
            select(Question)
            .execution_options(**FRESH)
            .order_by(Question.round_number, Question.created_at, Question.id),
        )
        return result.scalars().all()

    async def list_in_round(self, round_number: int) -> Sequence[Question]:
        result = await self.db.execute(
            select(Question)
            .execution_options(**FRESH)
            .where(Question.round_number == round_number)
            .order_by(Question.created_at, Question.id),
        )
        return result.scalars().all()

    async def list_unlocked(self, round_number: int) -> Sequence[Question]:
        result = await self.db.execute(
            select(Question)
            .execution_options(**FRESH)
            .where(
                Question.round_number == round_number,
                Question.is_locked == False,  # noqa: E712
            )
            .order_by(Question.created_at, Question.id),
        )
        return result.scalars().all()

    async def insert(
        self, prompt: str, description: str, round_number: int,
    ) -> Question:
        question = Question(
            prompt=prompt, description=description,
            round_number=round_number, is_locked=False,
        )
        self.db.add(question)
        await self.db.flush()
        return question

    async def claim(self, question_id: str, team_id: str) -> bool:
        """Lock the question iff it is currently unlocked."""
        result = await self.db.execute(
            update(Question)
            .where(
                Question.id == question_id,
                Question.is_locked == False,  # noqa: E712
            )
            .values(is_locked=True, assigned_team_id=team_id),
        )
        return result.rowcount == 1

    async def release_held_by(self, team_id: str) -> int:
        result = await self.db.execute(
            update(Question)
            .where(Question.assigned_team_id == team_id)
            .values(is_locked=False, assigned_team_id=None),
        )
        return result.rowcount

    async def release_round(self, round_number: int) -> None:
        await self.db.execute(
            update(Question)
            .where(Question.round_number == round_number)
            .values(is_locked=False, assigned_team_id=None),
        )

    async def release_all(self) -> None:
        await self.db.execute(
            update(Question).values(is_locked=False, assigned_team_id=None),
        )

    async def delete(self, question_id: str) -> None:
        await self.db.execute(delete(Question).where(Question.id == question_id))

    async def delete_all(self) -> None:
        await self.db.execute(delete(Question))


class AssignmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(
        self, team_id: str, question_id: str, round_number: int,
        assigned_at: datetime | None = None,
        released_at: datetime | None = None,
    ) -> Assignment:
        assignment = Assignment(
            team_id=team_id, question_id=question_id, round_number=round_number,
            released_at=released_at,
        )
        if assigned_at is not None:
            assignment.assigned_at = assigned_at
        self.db.add(assignment)
        await self.db.flush()
        return assignment

    async def list_all(self) -> Sequence[Assignment]:
        result = await self.db.execute(
            select(Assignment)
            .execution_options(**FRESH)
            .order_by(Assignment.assigned_at),
        )
        return result.scalars().all()

    async def list_in_round(self, round_number: int) -> Sequence[Assignment]:
        result = await self.db.execute(
            select(Assignment)
            .execution_options(**FRESH)
            .where(Assignment.round_number == round_number)
            .order_by(Assignment.assigned_at),
        )
        return result.scalars().all()

    async def release_round(self, round_number: int, released_at: datetime) -> None:
        """Turn the round's held rows into history; their questions become claimable."""
        await self.db.execute(
            update(Assignment)
            .where(
                Assignment.round_number == round_number,
                Assignment.released_at.is_(None),
            )
            .values(released_at=released_at),
        )

    async def delete_for_teams(self, team_ids: Sequence[str]) -> None:
        if team_ids:
            await self.db.execute(
                delete(Assignment).where(Assignment.team_id.in_(team_ids)),
            )

    async def delete_for_question(self, question_id: str) -> None:
        await self.db.execute(
            delete(Assignment).where(Assignment.question_id == question_id),
        )

    async def delete_round(self, round_number: int) -> None:
        await self.db.execute(
            delete(Assignment).where(Assignment.round_number == round_number),
        )

    async def delete_all(self) -> None:
        await self.db.execute(delete(Assignment))


class RoundRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_stored(self) -> Sequence[Round]:
        result = await self.db.execute(select(Round).order_by(Round.number))
        return result.scalars().all()

    async def list_or_defaults(self) -> list[Round]:
        """Stored rounds, or transient default rounds when none are stored."""
        stored = await self.list_stored()
        if stored:
            return list(stored)
        return [Round(**fields) for fields in DEFAULT_ROUNDS]

    async def ensure_stored(self) -> list[Round]:
        """Persist the default rounds on first write, then return all rounds."""
        stored = await self.list_stored()
        if stored:
            return list(stored)
        rounds = [Round(**fields) for fields in DEFAULT_ROUNDS]
        self.db.add_all(rounds)
        await self.db.flush()
        return rounds

    async def replace(self, rounds: Sequence[dict]) -> None:
        await self.db.execute(delete(Round))
        self.db.add_all([Round(**fields) for fields in rounds])
        await self.db.flush()


class CountdownRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, round_number: int) -> Countdown | None:
        return await self.db.get(Countdown, round_number, populate_existing=True)

    async def start(
        self, round_number: int, started_at: datetime, duration_seconds: int,
    ) -> Countdown:
        countdown = await self.get(round_number)
        if countdown is None:
            countdown = Countdown(round_number=round_number)
            self.db.add(countdown)
        countdown.is_active = True
        countdown.started_at = started_at
        countdown.duration_seconds = duration_seconds
        await self.db.flush()
        return countdown

    async def deactivate(self, round_number: int) -> bool:
        result = await self.db.execute(
            update(Countdown)
            .where(
                Countdown.round_number == round_number,
                Countdown.is_active == True,  # noqa: E712
            )
            .values(is_active=False),
        )
        return result.rowcount == 1

    async def deactivate_all(self) -> None:
        await self.db.execute(update(Countdown).values(is_active=False))


class EventStateRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create(self) -> EventState:
        state = await self.db.get(EventState, SINGLETON_ID)
        if state is None:
            state = EventState(id=SINGLETON_ID, current_round=1)
            self.db.add(state)
            await self.db.flush()
        return state

    async def current_round(self) -> int:
        state = await self.db.get(EventState, SINGLETON_ID)
        return state.current_round if state else 1

    async def set_current_round(self, round_number: int) -> None:
        state = await self.get_or_create()
        state.current_round = round_number
        await self.db.flush()
