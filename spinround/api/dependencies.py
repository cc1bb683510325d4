"""API Dependencies — bearer-secret guard and per-request service construction.

Invariants:
    - Every router is mounted behind require_api_secret
    - Services get the request-scoped session from get_db; nothing is shared
      between requests except the change feed

Design Decisions:
    - HTTPBearer(auto_error=False): a missing header raises AuthenticationError
      so the 401 goes through the same error envelope as every other failure
    - Service factories are dependencies so tests can override them
      (seeded rng, fake clock)
"""

import hmac

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from spinround.config import get_settings
from spinround.core.errors import AuthenticationError
from spinround.infrastructure.database import get_db
from spinround.services.assignment_engine import AssignmentEngine
from spinround.services.event_state_store import EventStateStore
from spinround.services.marks_sheet import MarksSheet
from spinround.services.reveal_gate import RevealGate
from spinround.services.session_resolver import SessionResolver

_bearer = HTTPBearer(auto_error=False)


async def require_api_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    if credentials is None:
        raise AuthenticationError("Missing bearer credential")
    expected = get_settings().api_secret
    if not hmac.compare_digest(credentials.credentials.encode(), expected.encode()):
        raise AuthenticationError("Invalid bearer credential")


def get_engine(db: AsyncSession = Depends(get_db)) -> AssignmentEngine:
    return AssignmentEngine(db)


def get_reveal_gate(db: AsyncSession = Depends(get_db)) -> RevealGate:
    return RevealGate(db)


def get_session_resolver(db: AsyncSession = Depends(get_db)) -> SessionResolver:
    return SessionResolver(db)


def get_state_store(db: AsyncSession = Depends(get_db)) -> EventStateStore:
    return EventStateStore(db)


def get_marks_sheet(db: AsyncSession = Depends(get_db)) -> MarksSheet:
    return MarksSheet(db)
