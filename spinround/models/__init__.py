"""ORM Models — SQLAlchemy declarative models for all event entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Team ↔ Question references are plain id columns (no FK cycle); the
      assignment ledger carries the foreign keys

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from spinround.models.team import Team  # noqa: F401
from spinround.models.question import Question  # noqa: F401
from spinround.models.round import Round  # noqa: F401
from spinround.models.assignment import Assignment  # noqa: F401
from spinround.models.countdown import Countdown  # noqa: F401
from spinround.models.event_state import EventState  # noqa: F401
