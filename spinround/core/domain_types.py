"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TeamId, QuestionId wrap strings; ids may be client-supplied (snapshot contract)
    - Marks are bounded 0–100
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TeamId = NewType("TeamId", str)
QuestionId = NewType("QuestionId", str)
RoundNumber = NewType("RoundNumber", int)

# Participant context for a name with no team record yet
UNREGISTERED_TEAM_ID = TeamId("unregistered")


# ─── Value Types ─────────────────────────────────────────────────

Marks = NewType("Marks", int)   # 0–100

MIN_MARKS: int = 0
MAX_MARKS: int = 100


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Who is on the other end of the session."""
    ADMIN = "admin"
    PARTICIPANT = "participant"


class RegistrationStatus(str, Enum):
    """Participant sessions may precede their team record."""
    REGISTERED = "registered"
    UNREGISTERED = "unregistered"


class RoundPhase(str, Enum):
    """Per-round state observed through the team/question pair."""
    EMPTY = "empty"
    SPINNING = "spinning"
    ALL_ASSIGNED = "all_assigned"


class ChangeKind(str, Enum):
    """Change-feed topics: one per snapshot key plus the countdown."""
    TEAMS = "teams"
    QUESTIONS = "questions"
    ROUNDS = "rounds"
    CURRENT_ROUND = "currentRound"
    COUNTDOWN = "countdown"


class ExportFormat(str, Enum):
    """Marks sheet export formats."""
    CSV = "csv"
    TSV = "tsv"
