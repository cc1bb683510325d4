"""Snapshot Schemas — camelCase wire shapes of the whole-collection state contract.

Invariants:
    - Field names match the published payloads (hasSpun, assignedQuestionId, ...)
    - Optional fields are omitted from responses when unset (exclude_none)
    - marks bounded 0–100, maxTeams >= 1, round numbers >= 1

Design Decisions:
    - alias_generator=to_camel with populate_by_name: Python side stays snake_case
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from spinround.core.domain_types import MIN_MARKS, MAX_MARKS


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TeamSnapshot(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=100)
    round: int = Field(ge=1)
    has_spun: bool = False
    assigned_question_id: str | None = None
    marks: int | None = Field(None, ge=MIN_MARKS, le=MAX_MARKS)
    reason: str | None = None

    @classmethod
    def from_row(cls, team) -> "TeamSnapshot":
        return cls(
            id=team.id,
            name=team.name,
            round=team.round_number,
            has_spun=team.has_spun,
            assigned_question_id=team.assigned_question_id,
            marks=team.marks,
            reason=team.reason,
        )


class QuestionSnapshot(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    round: int = Field(ge=1)
    question: str
    description: str = ""
    is_locked: bool = False
    assigned_to_team_id: str | None = None

    @classmethod
    def from_row(cls, question) -> "QuestionSnapshot":
        return cls(
            id=question.id,
            round=question.round_number,
            question=question.prompt,
            description=question.description,
            is_locked=question.is_locked,
            assigned_to_team_id=question.assigned_team_id,
        )


class RoundSnapshot(CamelModel):
    number: int = Field(ge=1)
    name: str
    max_teams: int = Field(ge=1)
    description: str = ""

    @classmethod
    def from_row(cls, round_row) -> "RoundSnapshot":
        return cls(
            number=round_row.number,
            name=round_row.name,
            max_teams=round_row.max_teams,
            description=round_row.description,
        )


class CurrentRoundUpdate(CamelModel):
    current_round: int = Field(ge=1)


class EventSnapshot(CamelModel):
    teams: list[TeamSnapshot]
    questions: list[QuestionSnapshot]
    current_round: int
    rounds: list[RoundSnapshot]

    def to_wire(self) -> dict:
        return {
            "teams": [t.to_wire() for t in self.teams],
            "questions": [q.to_wire() for q in self.questions],
            "currentRound": self.current_round,
            "rounds": [r.to_wire() for r in self.rounds],
        }
