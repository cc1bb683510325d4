"""Countdown ORM — the shared reveal-gate record, one per round.

Invariants:
    - is_active=True implies started_at is set
    - clients derive remaining time from started_at + duration_seconds
"""

from datetime import datetime

from sqlalchemy import Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from spinround.db.base import Base


class Countdown(Base):
    __tablename__ = "countdowns"

    round_number: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
