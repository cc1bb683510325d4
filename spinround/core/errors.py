"""Error Hierarchy — typed, categorized exceptions for every SpinRound failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and precondition errors are 4xx and never retried automatically
    - Transport errors (DatabaseError) are 503; the caller retries explicitly
    - to_response() produces the REST envelope; to_sse_event() the change-feed envelope

Design Decisions:
    - Single hierarchy with SpinRoundError base: one FastAPI handler catches all
    - Precondition failures map to 409: the request was well-formed but the
      event state does not allow it right now
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where in the event the error happened."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    team_id: str | None = None
    question_id: str | None = None
    round_number: int | None = None
    user_message: str | None = None


class SpinRoundError(Exception):
    """Base exception for all SpinRound errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "team_id": self.context.team_id,
                    "question_id": self.context.question_id,
                    "round_number": self.context.round_number,
                },
            }
        }

    def to_sse_event(self) -> dict:
        """Convert to change-feed error event."""
        return {
            "type": "error",
            "data": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "severity": self.severity.value,
            },
        }


# ─── Validation Errors (400) ────────────────────────────────────

class ValidationError(SpinRoundError):
    """Submitted data is malformed for the operation."""
    def __init__(
        self, message: str, code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class EmptyNameError(ValidationError):
    """Blank team or login name."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Please enter a team name", "EMPTY_NAME", context)


class DuplicateNameError(ValidationError):
    """A team with the same name (case-insensitive) already exists."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Team name '{name}' already exists. Please choose a different name.",
            "DUPLICATE_NAME", context,
        )
        self.name = name


class ReservedNameError(ValidationError):
    """The name is reserved for the administrator."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{name}' is reserved. Please choose a different team name.",
            "RESERVED_NAME", context,
        )
        self.name = name


class EmptySelectionError(ValidationError):
    """advance_round called with no teams selected."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Select at least one team to advance to the next round",
            "EMPTY_SELECTION", context,
        )


class UnknownTeamSelectionError(ValidationError):
    """advance_round selection names teams outside the current round."""
    def __init__(self, team_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Teams not in the current round: {', '.join(team_ids)}",
            "UNKNOWN_TEAM_SELECTION", context,
        )
        self.team_ids = team_ids


class SnapshotValidationError(ValidationError):
    """A full-replacement collection breaks a within-collection invariant."""
    def __init__(self, collection: str, problems: list[str]):
        super().__init__(
            f"Invalid {collection}: {'; '.join(problems)}",
            "INVALID_SNAPSHOT",
        )
        self.collection = collection
        self.problems = problems


# ─── Precondition Errors (409) ──────────────────────────────────

class PreconditionError(SpinRoundError):
    """The event state does not allow this operation right now."""
    def __init__(
        self, message: str, code: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.PRECONDITION,
            ErrorSeverity.WARNING, context, 409,
        )


class RoundNotCompleteError(PreconditionError):
    """Not every team in the round has been assigned a question."""
    def __init__(self, round_number: int, unassigned: int):
        super().__init__(
            f"Round {round_number} is not complete: "
            f"{unassigned} team(s) still need to spin",
            "ROUND_NOT_COMPLETE",
            ErrorContext(round_number=round_number),
        )
        self.unassigned = unassigned


class FinalRoundError(PreconditionError):
    """advance_round attempted at the final round."""
    def __init__(self, round_number: int):
        super().__init__(
            f"Round {round_number} is the final round",
            "FINAL_ROUND", ErrorContext(round_number=round_number),
        )


class LockedQuestionError(PreconditionError):
    """A locked question cannot be deleted."""
    def __init__(self, question_id: str):
        super().__init__(
            "Question is assigned to a team and cannot be deleted",
            "QUESTION_LOCKED", ErrorContext(question_id=question_id),
        )


class AlreadySpunError(PreconditionError):
    """The team already holds a question this round."""
    def __init__(self, team_id: str):
        super().__init__(
            "Team has already spun the wheel this round",
            "ALREADY_SPUN", ErrorContext(team_id=team_id),
        )


class NoQuestionsAvailableError(PreconditionError):
    """No unlocked question left in the round."""
    def __init__(self, round_number: int):
        super().__init__(
            "No questions available",
            "NO_QUESTIONS_AVAILABLE", ErrorContext(round_number=round_number),
        )


class RoundCapacityError(PreconditionError):
    """The round already holds its configured maximum of teams."""
    def __init__(self, round_number: int, max_teams: int):
        super().__init__(
            f"Round {round_number} is full ({max_teams} teams maximum)",
            "ROUND_FULL", ErrorContext(round_number=round_number),
        )
        self.max_teams = max_teams


# ─── Concurrency (409) ──────────────────────────────────────────

class QuestionAlreadyLockedError(SpinRoundError):
    """Another spin claimed the question between selection and lock."""
    def __init__(self, question_id: str, team_id: str | None = None):
        super().__init__(
            "Question was claimed by another team. Please spin again.",
            "QUESTION_ALREADY_LOCKED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING,
            ErrorContext(question_id=question_id, team_id=team_id), 409,
        )


# ─── Not Found (404) ────────────────────────────────────────────

class ResourceNotFoundError(SpinRoundError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Authentication (401) ───────────────────────────────────────

class AuthenticationError(SpinRoundError):
    """Missing or wrong credential."""
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, None, 401,
        )


# ─── Transport (503) ────────────────────────────────────────────

class DatabaseError(SpinRoundError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
