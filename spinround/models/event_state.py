"""EventState ORM — singleton row holding the event's current round.

Invariants:
    - exactly one row, id == SINGLETON_ID (created lazily on first access)
    - current_round only increments, except through a full reset
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from spinround.db.base import Base

SINGLETON_ID = 1


class EventState(Base):
    __tablename__ = "event_state"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False, default=SINGLETON_ID,
    )
    current_round: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
