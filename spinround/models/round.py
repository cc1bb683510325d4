"""Round ORM — configuration of one numbered phase of the event.

Invariants:
    - number is the primary key; numbers are contiguous from 1
    - max_teams >= 1
"""

from sqlalchemy import String, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column

from spinround.db.base import Base


class Round(Base):
    __tablename__ = "rounds"

    number: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    max_teams: Mapped[int] = mapped_column(Integer, nullable=False)
