"""Question ORM — a prompt in a round's pool, claimable by one team.

Invariants:
    - is_locked=True iff assigned_team_id is set
    - a locked question's team references it back (Team.assigned_question_id)
    - never deleted while locked

Design Decisions:
    - prompt column is exposed as "question" on the wire (snapshot contract)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from spinround.db.base import Base, new_id


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_team_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
