"""Question Routes — add to and remove from a round's pool."""

from fastapi import APIRouter, Depends, status

from spinround.api.dependencies import get_engine
from spinround.schemas.event import QuestionCreate
from spinround.schemas.snapshot import QuestionSnapshot
from spinround.services.assignment_engine import AssignmentEngine

router = APIRouter(prefix="/api/v1/questions", tags=["questions"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_question(
    body: QuestionCreate, engine: AssignmentEngine = Depends(get_engine),
):
    question = await engine.create_question(
        body.question, body.description, body.round,
    )
    return QuestionSnapshot.from_row(question).to_wire()


@router.delete("/{question_id}")
async def delete_question(
    question_id: str, engine: AssignmentEngine = Depends(get_engine),
):
    await engine.delete_question(question_id)
    return {"deleted": question_id}
