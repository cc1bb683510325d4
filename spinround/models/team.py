"""Team ORM — a competing team and its spin state for its current round.

Invariants:
    - name_key (stripped, lower-cased name) is unique: names clash case-insensitively
    - belongs to exactly one round (round_number) at a time
    - has_spun=False implies assigned_question_id is None
    - marks, when present, are 0–100 (validated at the API boundary)

Design Decisions:
    - String id: snapshot clients supply their own ids
    - name_key maintained by a @validates hook so every write path keeps it in sync
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, validates

from spinround.db.base import Base, new_id


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    round_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, index=True,
    )
    has_spun: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_question_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True,
    )
    marks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @validates("name")
    def _sync_name_key(self, key: str, value: str) -> str:
        self.name_key = value.strip().lower()
        return value
