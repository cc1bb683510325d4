"""Assignment ORM — ledger binding one team to one question within one round.

Invariants:
    - Among held rows (released_at IS NULL) question_id is unique: a question
      is held by at most one team
    - Among held rows (team_id, round_number) is unique: one question per team
      per round
    - Released rows are history only and never block a later claim
    - rows for a round are cleared by reset; all rows by full reset

Design Decisions:
    - Partial unique indexes back up the conditional question claim, so a
      double assignment fails at commit even if the claim were bypassed
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from spinround.db.base import Base, new_id

HELD = text("released_at IS NULL")


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        Index(
            "uq_assignments_held_question", "question_id",
            unique=True, sqlite_where=HELD, postgresql_where=HELD,
        ),
        Index(
            "uq_assignments_held_team_round", "team_id", "round_number",
            unique=True, sqlite_where=HELD, postgresql_where=HELD,
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    team_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False,
    )
    question_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False,
    )
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    released_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
