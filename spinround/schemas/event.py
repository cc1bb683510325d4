"""Event Schemas — request bodies for scoped admin and participant operations.

Invariants:
    - Names are stripped; emptiness is a domain error (EmptyNameError), not a 422
    - Question prompt and description are non-empty after stripping
    - marks 0–100 enforced here (the engine overwrites unconditionally)
"""

from pydantic import Field, field_validator

from spinround.core.domain_types import MIN_MARKS, MAX_MARKS
from spinround.schemas.snapshot import CamelModel


class TeamCreate(CamelModel):
    name: str = Field(max_length=100)


class QuestionCreate(CamelModel):
    question: str = Field(min_length=1, max_length=2000)
    description: str = Field(min_length=1, max_length=10_000)
    round: int | None = Field(None, ge=1)

    @field_validator("question", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class MarksUpdate(CamelModel):
    marks: int = Field(ge=MIN_MARKS, le=MAX_MARKS)
    reason: str = Field("", max_length=2000)


class AdvanceRequest(CamelModel):
    selected_team_ids: list[str]


class CapacityUpdate(CamelModel):
    max_teams: int = Field(ge=1, le=10_000)


class LoginRequest(CamelModel):
    name: str = Field(max_length=100)
    password: str | None = Field(None, max_length=200)


class RefreshRequest(CamelModel):
    team_id: str | None = None
    name: str = Field(max_length=100)
