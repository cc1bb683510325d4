"""Session Resolver — login and identity repair for admin and participant clients.

Invariants:
    - Admin login is password-checked; a wrong password is a 401, never a
      silent downgrade to participant
    - Unknown team names resolve to the unregistered participant context
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from spinround.config import Settings, get_settings
from spinround.core.domain_types import UNREGISTERED_TEAM_ID
from spinround.core.errors import AuthenticationError
from spinround.core.resolve_session import (
    ResolvedSession,
    normalize_login_name,
    is_admin_identity,
    resolve_admin,
    resolve_participant,
    repair_participant,
)
from spinround.infrastructure.repositories import TeamRepository

logger = logging.getLogger(__name__)


class SessionResolver:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.teams = TeamRepository(db)

    async def login(self, name: str, password: str | None = None) -> ResolvedSession:
        clean = normalize_login_name(name)
        if is_admin_identity(clean, self.settings.admin_name):
            try:
                session = resolve_admin(clean, password, self.settings.admin_password)
            except AuthenticationError:
                logger.warning("Admin login rejected")
                raise
            logger.info("Admin session resolved")
            return session

        team = await self.teams.get_by_name(clean)
        session = resolve_participant(clean, team)
        if team is None:
            logger.info(f"Login for unregistered team name '{clean}'")
        else:
            logger.info(
                f"Participant session resolved for '{team.name}'",
                extra={"team_id": team.id},
            )
        return session

    async def refresh(self, team_id: str | None, name: str) -> ResolvedSession:
        """Re-resolve a stored participant session, repairing a stale team id."""
        clean = normalize_login_name(name)
        by_id = None
        if team_id and team_id != UNREGISTERED_TEAM_ID:
            by_id = await self.teams.get(team_id)
        by_name = None if by_id else await self.teams.get_by_name(clean)

        session = repair_participant(team_id, clean, by_id, by_name)
        if session.repaired:
            logger.info(
                f"Session for '{clean}' repaired: {team_id} → {session.team_id}",
                extra={"team_id": session.team_id},
            )
        return session
