"""Assignment Engine — one question per team per round, one team per question.

Invariants:
    - spin() claims with a conditional update (locked only if currently
      unlocked); a lost race raises QuestionAlreadyLockedError and the client
      spins again with a fresh random pick
    - claim, team update and ledger insert commit together or not at all
    - advance_round deletes every unselected team of the current round and
      moves the selected ones to the next round with spin state cleared
    - delete_team releases the question the team held
    - Change events are published after commit only

Design Decisions:
    - rng injectable: tests pass a seeded random.Random; production uses SystemRandom
    - Completed rounds release their question locks on advance; their ledger
      rows stay as released history so the questions can be claimed again
"""

import logging
import random
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spinround.config import Settings, get_settings
from spinround.core.domain_types import ChangeKind, RoundPhase
from spinround.core.enforce_assignment import (
    check_team_name,
    check_round_capacity,
    check_can_spin,
    choose_question,
    check_question_deletable,
    plan_advance,
    round_phase,
)
from spinround.core.errors import (
    DuplicateNameError,
    AlreadySpunError,
    QuestionAlreadyLockedError,
    ResourceNotFoundError,
)
from spinround.infrastructure.change_feed import ChangeFeed, change_feed
from spinround.infrastructure.repositories import (
    TeamRepository,
    QuestionRepository,
    AssignmentRepository,
    RoundRepository,
    CountdownRepository,
    EventStateRepository,
)
from spinround.models.question import Question
from spinround.models.round import Round
from spinround.models.team import Team
from spinround.services.reveal_gate import RevealGate

logger = logging.getLogger(__name__)


class AssignmentEngine:
    """Team, question and round operations behind the admin and spin endpoints."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        feed: ChangeFeed | None = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.rng = rng or random.SystemRandom()
        self.feed = feed or change_feed
        self.teams = TeamRepository(db)
        self.questions = QuestionRepository(db)
        self.assignments = AssignmentRepository(db)
        self.rounds = RoundRepository(db)
        self.countdowns = CountdownRepository(db)
        self.event_state = EventStateRepository(db)

    # ─── Lookups ─────────────────────────────────────────────────

    async def current_round(self) -> int:
        return await self.event_state.current_round()

    async def get_team(self, team_id: str) -> Team:
        team = await self.teams.get(team_id)
        if team is None:
            raise ResourceNotFoundError("Team", team_id)
        return team

    async def get_question(self, question_id: str) -> Question:
        question = await self.questions.get(question_id)
        if question is None:
            raise ResourceNotFoundError("Question", question_id)
        return question

    async def get_round(self, round_number: int) -> Round:
        for round_row in await self.rounds.list_or_defaults():
            if round_row.number == round_number:
                return round_row
        raise ResourceNotFoundError("Round", str(round_number))

    async def round_phase(self, round_number: int) -> RoundPhase:
        return round_phase(await self.teams.list_in_round(round_number))

    async def round_overview(self) -> list[dict]:
        """Per-round roster size, capacity, question pool and phase."""
        current = await self.current_round()
        overview = []
        for round_row in await self.rounds.list_or_defaults():
            teams = await self.teams.list_in_round(round_row.number)
            questions = await self.questions.list_in_round(round_row.number)
            overview.append({
                "number": round_row.number,
                "name": round_row.name,
                "description": round_row.description,
                "maxTeams": round_row.max_teams,
                "teamCount": len(teams),
                "questionCount": len(questions),
                "unlockedQuestionCount": sum(1 for q in questions if not q.is_locked),
                "phase": round_phase(teams).value,
                "isCurrent": round_row.number == current,
            })
        return overview

    # ─── Teams ───────────────────────────────────────────────────

    async def create_team(self, name: str) -> Team:
        clash = await self.teams.get_by_name(name)
        clean = check_team_name(
            name, [clash.name] if clash else [], self.settings.admin_name,
        )
        current = await self.current_round()
        if self.settings.enforce_round_capacity:
            round_row = await self.get_round(current)
            check_round_capacity(
                current, await self.teams.count_in_round(current),
                round_row.max_teams,
            )

        try:
            team = await self.teams.insert(clean, current)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateNameError(clean)

        logger.info(
            f"Team '{clean}' created in round {current}",
            extra={"team_id": team.id, "round_number": current},
        )
        self.feed.publish(ChangeKind.TEAMS, "created", teamId=team.id)
        return team

    async def delete_team(self, team_id: str) -> int:
        """Delete a team. Returns the number of questions released."""
        team = await self.get_team(team_id)
        released = await self.questions.release_held_by(team.id)
        await self.assignments.delete_for_teams([team.id])
        await self.teams.delete(team.id)
        await self.db.commit()

        logger.info(
            f"Team '{team.name}' deleted ({released} question(s) released)",
            extra={"team_id": team_id},
        )
        self.feed.publish(ChangeKind.TEAMS, "deleted", teamId=team_id)
        if released:
            self.feed.publish(ChangeKind.QUESTIONS, "released", teamId=team_id)
        return released

    async def record_marks(self, team_id: str, marks: int, reason: str) -> Team:
        team = await self.get_team(team_id)
        team.marks = marks
        team.reason = reason
        await self.db.commit()
        logger.info(
            f"Marks recorded for '{team.name}': {marks}",
            extra={"team_id": team_id},
        )
        self.feed.publish(ChangeKind.TEAMS, "marked", teamId=team_id)
        return team

    # ─── Questions ───────────────────────────────────────────────

    async def create_question(
        self, prompt: str, description: str, round_number: int | None = None,
    ) -> Question:
        if round_number is None:
            round_number = await self.current_round()
        await self.get_round(round_number)

        question = await self.questions.insert(prompt, description, round_number)
        await self.db.commit()
        logger.info(
            f"Question added to round {round_number}",
            extra={"question_id": question.id, "round_number": round_number},
        )
        self.feed.publish(ChangeKind.QUESTIONS, "created", questionId=question.id)
        return question

    async def delete_question(self, question_id: str) -> None:
        question = await self.get_question(question_id)
        check_question_deletable(question.id, question.is_locked)
        await self.assignments.delete_for_question(question.id)
        await self.questions.delete(question.id)
        await self.db.commit()
        logger.info("Question deleted", extra={"question_id": question_id})
        self.feed.publish(ChangeKind.QUESTIONS, "deleted", questionId=question_id)

    # ─── Spin ────────────────────────────────────────────────────

    async def spin(self, team_id: str) -> Question:
        """Claim a random unlocked question of the team's round."""
        team = await self.get_team(team_id)
        check_can_spin(team)
        round_number = team.round_number

        candidates = await self.questions.list_unlocked(round_number)
        question = choose_question(candidates, round_number, self.rng)
        question_id = question.id
        team_name = team.name

        # rollback expires loaded rows, so ids are read up front
        if not await self.questions.claim(question_id, team_id):
            await self.db.rollback()
            logger.warning(
                "Spin lost the race for a question",
                extra={"team_id": team_id, "question_id": question_id},
            )
            raise QuestionAlreadyLockedError(question_id, team_id)

        if not await self.teams.mark_spun(team_id, question_id):
            await self.db.rollback()
            raise AlreadySpunError(team_id)

        try:
            await self.assignments.insert(team_id, question_id, round_number)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Assignment ledger rejected spin, lock rolled back",
                extra={"team_id": team_id, "question_id": question_id},
            )
            raise QuestionAlreadyLockedError(question_id, team_id)

        question = await self.get_question(question_id)
        logger.info(
            f"Team '{team_name}' spun a question in round {round_number}",
            extra={
                "team_id": team_id, "question_id": question_id,
                "round_number": round_number,
            },
        )
        self.feed.publish(
            ChangeKind.TEAMS, "spun", teamId=team_id, questionId=question_id,
        )
        self.feed.publish(ChangeKind.QUESTIONS, "locked", questionId=question_id)

        if self.settings.countdown_auto_start:
            await self._auto_start_countdown(round_number)
        return question

    async def _auto_start_countdown(self, round_number: int) -> None:
        if await self.round_phase(round_number) != RoundPhase.ALL_ASSIGNED:
            return
        gate = RevealGate(self.db, self.settings, feed=self.feed)
        await gate.start_countdown(round_number)
        logger.info(
            "Every team assigned, countdown started automatically",
            extra={"round_number": round_number},
        )

    # ─── Rounds ──────────────────────────────────────────────────

    async def advance_round(self, selected_team_ids: Sequence[str]) -> dict:
        """Promote the selected teams, delete the rest, move to the next round."""
        current = await self.current_round()
        rounds = await self.rounds.list_or_defaults()
        final_round = max(r.number for r in rounds)
        teams = await self.teams.list_in_round(current)

        capacity = None
        if self.settings.enforce_round_capacity:
            next_round = next((r for r in rounds if r.number == current + 1), None)
            capacity = next_round.max_teams if next_round else None

        plan = plan_advance(current, final_round, teams, selected_team_ids, capacity)

        await self.assignments.delete_for_teams(plan.eliminated)
        await self.questions.release_round(plan.from_round)
        await self.assignments.release_round(
            plan.from_round, datetime.now(timezone.utc),
        )
        await self.teams.delete_many(plan.eliminated)
        await self.teams.promote(plan.promoted, plan.to_round)
        await self.event_state.set_current_round(plan.to_round)
        await self.db.commit()

        logger.info(
            f"Round {plan.from_round} completed, advanced to round {plan.to_round}",
            extra={
                "round_number": plan.to_round,
                "promoted": len(plan.promoted),
                "eliminated": len(plan.eliminated),
            },
        )
        self.feed.publish(ChangeKind.TEAMS, "advanced")
        self.feed.publish(ChangeKind.QUESTIONS, "released", round=plan.from_round)
        self.feed.publish(ChangeKind.CURRENT_ROUND, "advanced", currentRound=plan.to_round)
        return {
            "currentRound": plan.to_round,
            "promoted": list(plan.promoted),
            "eliminated": list(plan.eliminated),
        }

    async def reset_round(self, round_number: int) -> None:
        """Clear spins, locks, ledger and countdown of one round. Marks stay."""
        await self.get_round(round_number)
        await self.teams.clear_spins_in_round(round_number)
        await self.questions.release_round(round_number)
        await self.assignments.delete_round(round_number)
        await self.countdowns.deactivate(round_number)
        await self.db.commit()

        logger.info(
            f"Round {round_number} reset", extra={"round_number": round_number},
        )
        self.feed.publish(ChangeKind.TEAMS, "reset", round=round_number)
        self.feed.publish(ChangeKind.QUESTIONS, "reset", round=round_number)
        self.feed.publish(ChangeKind.COUNTDOWN, "stopped", round=round_number)

    async def reset_all(self) -> None:
        """Everyone back to round 1 with spins, marks and locks cleared."""
        await self.teams.reset_all()
        await self.questions.release_all()
        await self.assignments.delete_all()
        await self.countdowns.deactivate_all()
        await self.event_state.set_current_round(1)
        await self.db.commit()

        logger.info("All rounds reset, event restarted from round 1")
        self.feed.publish(ChangeKind.TEAMS, "reset")
        self.feed.publish(ChangeKind.QUESTIONS, "reset")
        self.feed.publish(ChangeKind.COUNTDOWN, "stopped")
        self.feed.publish(ChangeKind.CURRENT_ROUND, "reset", currentRound=1)

    async def update_round_capacity(self, round_number: int, max_teams: int) -> Round:
        rounds = await self.rounds.ensure_stored()
        round_row = next((r for r in rounds if r.number == round_number), None)
        if round_row is None:
            raise ResourceNotFoundError("Round", str(round_number))
        round_row.max_teams = max_teams
        await self.db.commit()

        logger.info(
            f"Round {round_number} capacity set to {max_teams}",
            extra={"round_number": round_number},
        )
        self.feed.publish(ChangeKind.ROUNDS, "updated", round=round_number)
        return round_row
