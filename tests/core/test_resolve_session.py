"""Session Resolution — pure admin/participant mapping and repair."""

from dataclasses import dataclass

import pytest

from spinround.core.domain_types import Role, RegistrationStatus, UNREGISTERED_TEAM_ID
from spinround.core.errors import AuthenticationError, EmptyNameError
from spinround.core.resolve_session import (
    normalize_login_name,
    is_admin_identity,
    resolve_admin,
    resolve_participant,
    repair_participant,
)


@dataclass
class FakeTeam:
    id: str
    name: str


def test_normalize_login_name():
    assert normalize_login_name("  Alpha ") == "Alpha"
    with pytest.raises(EmptyNameError):
        normalize_login_name(" ")


def test_admin_identity_is_case_insensitive():
    assert is_admin_identity("UXcellence", "uxcellence")
    assert not is_admin_identity("uxcellence2", "uxcellence")


def test_resolve_admin_accepts_matching_password():
    session = resolve_admin("uxcellence", "s3cret", "s3cret")
    assert session.role == Role.ADMIN


@pytest.mark.parametrize("password", [None, "", "wrong"])
def test_resolve_admin_rejects_bad_password(password):
    with pytest.raises(AuthenticationError):
        resolve_admin("uxcellence", password, "s3cret")


def test_resolve_admin_disabled_without_configured_password():
    with pytest.raises(AuthenticationError):
        resolve_admin("uxcellence", "", "")


def test_resolve_participant_known_team():
    session = resolve_participant("alpha", FakeTeam(id="t1", name="Alpha"))
    assert session.team_id == "t1"
    assert session.name == "Alpha"
    assert session.status == RegistrationStatus.REGISTERED


def test_resolve_participant_unknown_team():
    session = resolve_participant("Late", None)
    assert session.team_id == UNREGISTERED_TEAM_ID
    assert session.status == RegistrationStatus.UNREGISTERED
    assert session.to_dict() == {
        "role": "participant",
        "name": "Late",
        "teamId": "unregistered",
        "status": "unregistered",
        "repaired": False,
    }


def test_repair_prefers_id_match():
    team = FakeTeam(id="t1", name="Alpha")
    session = repair_participant("t1", "Alpha", team, None)
    assert session.team_id == "t1"
    assert session.repaired is False


def test_repair_falls_back_to_name():
    team = FakeTeam(id="t2", name="Alpha")
    session = repair_participant("t1", "alpha", None, team)
    assert session.team_id == "t2"
    assert session.repaired is True


def test_repair_without_any_match_stays_unregistered():
    session = repair_participant("t1", "Ghost", None, None)
    assert session.team_id == UNREGISTERED_TEAM_ID
    assert session.repaired is False
