"""Session Resolver — admin/participant resolution and stale-session repair."""

import pytest

from spinround.core.domain_types import Role, RegistrationStatus, UNREGISTERED_TEAM_ID
from spinround.core.errors import AuthenticationError, EmptyNameError


async def test_admin_login_with_password(resolver):
    session = await resolver.login("UXcellence", "admin-pass")
    assert session.role == Role.ADMIN
    assert session.team_id is None


async def test_admin_login_with_wrong_password_is_rejected(resolver):
    with pytest.raises(AuthenticationError):
        await resolver.login("uxcellence", "guess")


async def test_admin_login_without_password_is_rejected(resolver):
    with pytest.raises(AuthenticationError):
        await resolver.login("uxcellence")


async def test_participant_login_matches_case_insensitively(resolver, engine):
    team = await engine.create_team("Team Alpha")
    session = await resolver.login("  team ALPHA ")
    assert session.role == Role.PARTICIPANT
    assert session.team_id == team.id
    assert session.name == "Team Alpha"
    assert session.status == RegistrationStatus.REGISTERED


async def test_unknown_name_gets_unregistered_context(resolver):
    session = await resolver.login("Late Team")
    assert session.role == Role.PARTICIPANT
    assert session.team_id == UNREGISTERED_TEAM_ID
    assert session.name == "Late Team"
    assert session.status == RegistrationStatus.UNREGISTERED


async def test_blank_login_is_rejected(resolver):
    with pytest.raises(EmptyNameError):
        await resolver.login("  ")


async def test_refresh_repairs_unregistered_session(resolver, engine):
    await resolver.login("Late Team")
    team = await engine.create_team("Late Team")

    session = await resolver.refresh(UNREGISTERED_TEAM_ID, "Late Team")

    assert session.team_id == team.id
    assert session.repaired is True


async def test_refresh_repairs_stale_team_id(resolver, engine):
    team = await engine.create_team("Alpha")
    session = await resolver.refresh("old-id", "alpha")
    assert session.team_id == team.id
    assert session.repaired is True


async def test_refresh_keeps_valid_session(resolver, engine):
    team = await engine.create_team("Alpha")
    session = await resolver.refresh(team.id, "Alpha")
    assert session.team_id == team.id
    assert session.repaired is False


async def test_refresh_for_still_unknown_team_stays_unregistered(resolver):
    session = await resolver.refresh(UNREGISTERED_TEAM_ID, "Nobody")
    assert session.team_id == UNREGISTERED_TEAM_ID
    assert session.repaired is False
