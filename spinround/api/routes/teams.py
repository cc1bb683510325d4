"""Team Routes — create, delete, spin, marks and the participant's assignment view."""

from fastapi import APIRouter, Depends, status

from spinround.api.dependencies import get_engine, get_reveal_gate
from spinround.schemas.event import TeamCreate, MarksUpdate
from spinround.schemas.snapshot import TeamSnapshot, QuestionSnapshot
from spinround.services.assignment_engine import AssignmentEngine
from spinround.services.reveal_gate import RevealGate

router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_team(
    body: TeamCreate, engine: AssignmentEngine = Depends(get_engine),
):
    team = await engine.create_team(body.name)
    return TeamSnapshot.from_row(team).to_wire()


@router.delete("/{team_id}")
async def delete_team(
    team_id: str, engine: AssignmentEngine = Depends(get_engine),
):
    released = await engine.delete_team(team_id)
    return {"deleted": team_id, "releasedQuestions": released}


@router.post("/{team_id}/spin")
async def spin(
    team_id: str, engine: AssignmentEngine = Depends(get_engine),
):
    """Claim a random unlocked question. 409 QUESTION_ALREADY_LOCKED means spin again."""
    question = await engine.spin(team_id)
    team = await engine.get_team(team_id)
    return {
        "team": TeamSnapshot.from_row(team).to_wire(),
        "question": QuestionSnapshot.from_row(question).to_wire(),
    }


@router.put("/{team_id}/marks")
async def record_marks(
    team_id: str,
    body: MarksUpdate,
    engine: AssignmentEngine = Depends(get_engine),
):
    team = await engine.record_marks(team_id, body.marks, body.reason)
    return TeamSnapshot.from_row(team).to_wire()


@router.get("/{team_id}/assignment")
async def get_assignment(
    team_id: str, gate: RevealGate = Depends(get_reveal_gate),
):
    return await gate.participant_assignment(team_id)
