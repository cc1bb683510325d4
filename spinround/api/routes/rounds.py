"""Round Routes — overview, advancement, resets and capacity.

Invariants:
    - advance is the only way forward; it refuses the final round and
      incomplete rounds
    - reset-all is the only way back to round 1
"""

from fastapi import APIRouter, Depends, Path

from spinround.api.dependencies import get_engine
from spinround.schemas.event import AdvanceRequest, CapacityUpdate
from spinround.schemas.snapshot import RoundSnapshot
from spinround.services.assignment_engine import AssignmentEngine

router = APIRouter(prefix="/api/v1/rounds", tags=["rounds"])


@router.get("")
async def list_rounds(engine: AssignmentEngine = Depends(get_engine)):
    return {
        "currentRound": await engine.current_round(),
        "pollIntervalSeconds": engine.settings.poll_interval_seconds,
        "rounds": await engine.round_overview(),
    }


@router.post("/advance")
async def advance_round(
    body: AdvanceRequest, engine: AssignmentEngine = Depends(get_engine),
):
    return await engine.advance_round(body.selected_team_ids)


@router.post("/reset-all")
async def reset_all(engine: AssignmentEngine = Depends(get_engine)):
    await engine.reset_all()
    return {"currentRound": 1}


@router.post("/{round_number}/reset")
async def reset_round(
    round_number: int = Path(ge=1),
    engine: AssignmentEngine = Depends(get_engine),
):
    await engine.reset_round(round_number)
    return {"reset": round_number}


@router.put("/{round_number}/capacity")
async def update_capacity(
    body: CapacityUpdate,
    round_number: int = Path(ge=1),
    engine: AssignmentEngine = Depends(get_engine),
):
    round_row = await engine.update_round_capacity(round_number, body.max_teams)
    return RoundSnapshot.from_row(round_row).to_wire()
