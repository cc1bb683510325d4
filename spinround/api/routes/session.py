"""Session Routes — resolve a login name to admin or participant, and repair stale sessions."""

from fastapi import APIRouter, Depends

from spinround.api.dependencies import get_session_resolver
from spinround.schemas.event import LoginRequest, RefreshRequest
from spinround.services.session_resolver import SessionResolver

router = APIRouter(prefix="/api/v1/session", tags=["session"])


@router.post("")
async def login(
    body: LoginRequest,
    resolver: SessionResolver = Depends(get_session_resolver),
):
    session = await resolver.login(body.name, body.password)
    return session.to_dict()


@router.post("/refresh")
async def refresh(
    body: RefreshRequest,
    resolver: SessionResolver = Depends(get_session_resolver),
):
    session = await resolver.refresh(body.team_id, body.name)
    return session.to_dict()
