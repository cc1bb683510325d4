"""Snapshot Routes — whole-collection read and full-replacement writes.

Invariants:
    - Request and response bodies are the bare camelCase shapes clients
      already exchange (arrays for teams/questions/rounds)
    - Every write answers {"success": true} after commit
"""

from fastapi import APIRouter, Depends

from spinround.api.dependencies import get_state_store
from spinround.schemas.snapshot import (
    TeamSnapshot, QuestionSnapshot, RoundSnapshot, CurrentRoundUpdate,
)
from spinround.services.event_state_store import EventStateStore

router = APIRouter(tags=["state"])

_SUCCESS = {"success": True}


@router.get("/state")
async def get_state(store: EventStateStore = Depends(get_state_store)):
    snapshot = await store.load()
    return snapshot.to_wire()


@router.post("/teams")
async def replace_teams(
    teams: list[TeamSnapshot],
    store: EventStateStore = Depends(get_state_store),
):
    await store.replace_teams(teams)
    return _SUCCESS


@router.post("/questions")
async def replace_questions(
    questions: list[QuestionSnapshot],
    store: EventStateStore = Depends(get_state_store),
):
    await store.replace_questions(questions)
    return _SUCCESS


@router.post("/rounds")
async def replace_rounds(
    rounds: list[RoundSnapshot],
    store: EventStateStore = Depends(get_state_store),
):
    await store.replace_rounds(rounds)
    return _SUCCESS


@router.post("/currentRound")
async def set_current_round(
    body: CurrentRoundUpdate,
    store: EventStateStore = Depends(get_state_store),
):
    await store.set_current_round(body.current_round)
    return _SUCCESS
