"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Writes are scoped (insert / update-by-id / delete-by-id), never whole-collection
    - claim() is the single atomic check-and-set in the system

Design Decisions:
    - Protocol over ABC: structural subtyping, ORM rows satisfy TeamLike directly
    - Async in Protocol: implementations do IO; core functions that read
      TeamLike/QuestionLike stay synchronous and pure
"""

from typing import Protocol, Sequence

from spinround.core.domain_types import TeamId, QuestionId


class TeamLike(Protocol):
    """Structural contract for a team row."""
    id: str
    name: str
    round_number: int
    has_spun: bool
    assigned_question_id: str | None
    marks: int | None
    reason: str | None


class QuestionLike(Protocol):
    """Structural contract for a question row."""
    id: str
    round_number: int
    prompt: str
    description: str
    is_locked: bool
    assigned_team_id: str | None


class RoundLike(Protocol):
    """Structural contract for a round configuration row."""
    number: int
    name: str
    description: str
    max_teams: int


class TeamRepository(Protocol):
    """Contract for team persistence, implemented by shell."""
    async def get(self, team_id: TeamId) -> TeamLike | None: ...
    async def get_by_name(self, name: str) -> TeamLike | None: ...
    async def list_all(self) -> Sequence[TeamLike]: ...
    async def list_in_round(self, round_number: int) -> Sequence[TeamLike]: ...
    async def insert(self, name: str, round_number: int) -> TeamLike: ...
    async def update(self, team_id: TeamId, **patch: object) -> None: ...
    async def mark_spun(self, team_id: TeamId, question_id: QuestionId) -> bool: ...
    async def delete(self, team_id: TeamId) -> None: ...


class QuestionRepository(Protocol):
    """Contract for question persistence, implemented by shell."""
    async def get(self, question_id: QuestionId) -> QuestionLike | None: ...
    async def list_in_round(self, round_number: int) -> Sequence[QuestionLike]: ...
    async def list_unlocked(self, round_number: int) -> Sequence[QuestionLike]: ...
    async def insert(
        self, prompt: str, description: str, round_number: int,
    ) -> QuestionLike: ...
    async def claim(self, question_id: QuestionId, team_id: TeamId) -> bool: ...
    async def release_held_by(self, team_id: TeamId) -> int: ...
    async def delete(self, question_id: QuestionId) -> None: ...
