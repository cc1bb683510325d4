"""Session Resolution — maps a submitted display name to a role and a team identity.

Invariants:
    - Admin match is case-insensitive on the configured admin name
    - Admin access ALWAYS requires the configured password (never name alone)
    - An unknown team name still resolves to a participant context carrying
      the raw name and UNREGISTERED_TEAM_ID, never to an auth failure
    - repair_participant prefers the id, falls back to the name

Design Decisions:
    - Password comparison via hmac.compare_digest (constant time)
    - An empty configured admin password disables admin login entirely
"""

import hmac
from dataclasses import dataclass

from spinround.core.domain_types import (
    Role, RegistrationStatus, UNREGISTERED_TEAM_ID,
)
from spinround.core.enforce_assignment import name_key
from spinround.core.errors import AuthenticationError, EmptyNameError
from spinround.core.repository_protocols import TeamLike


@dataclass(frozen=True)
class ResolvedSession:
    role: Role
    name: str
    team_id: str | None = None
    status: RegistrationStatus | None = None
    repaired: bool = False

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "name": self.name,
            "teamId": self.team_id,
            "status": self.status.value if self.status else None,
            "repaired": self.repaired,
        }


def normalize_login_name(name: str) -> str:
    stripped = name.strip()
    if not stripped:
        raise EmptyNameError()
    return stripped


def is_admin_identity(name: str, admin_name: str) -> bool:
    return name_key(name) == name_key(admin_name)


def resolve_admin(
    name: str, password: str | None, admin_password: str,
) -> ResolvedSession:
    if not admin_password or not hmac.compare_digest(
        (password or "").encode(), admin_password.encode(),
    ):
        raise AuthenticationError("Invalid admin credentials")
    return ResolvedSession(role=Role.ADMIN, name=name)


def resolve_participant(name: str, team: TeamLike | None) -> ResolvedSession:
    if team is None:
        return ResolvedSession(
            role=Role.PARTICIPANT,
            name=name,
            team_id=UNREGISTERED_TEAM_ID,
            status=RegistrationStatus.UNREGISTERED,
        )
    return ResolvedSession(
        role=Role.PARTICIPANT,
        name=team.name,
        team_id=team.id,
        status=RegistrationStatus.REGISTERED,
    )


def repair_participant(
    team_id: str | None,
    name: str,
    by_id: TeamLike | None,
    by_name: TeamLike | None,
) -> ResolvedSession:
    """Re-resolve a stored participant session.

    by_id is the lookup result for team_id, by_name for name. A session whose
    id no longer matches (or was the sentinel) is repaired from the name.
    """
    if by_id is not None:
        return resolve_participant(by_id.name, by_id)
    resolved = resolve_participant(name, by_name)
    if by_name is not None and by_name.id != team_id:
        return ResolvedSession(
            role=resolved.role,
            name=resolved.name,
            team_id=resolved.team_id,
            status=resolved.status,
            repaired=True,
        )
    return resolved
