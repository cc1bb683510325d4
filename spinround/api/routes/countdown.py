"""Countdown Routes — start, stop and read the reveal countdown of a round."""

from fastapi import APIRouter, Depends, Path

from spinround.api.dependencies import get_reveal_gate
from spinround.services.reveal_gate import RevealGate

router = APIRouter(prefix="/api/v1/rounds", tags=["countdown"])


@router.get("/{round_number}/countdown")
async def countdown_status(
    round_number: int = Path(ge=1),
    gate: RevealGate = Depends(get_reveal_gate),
):
    view = await gate.status(round_number)
    return view.to_dict()


@router.post("/{round_number}/countdown")
async def start_countdown(
    round_number: int = Path(ge=1),
    gate: RevealGate = Depends(get_reveal_gate),
):
    view = await gate.start_countdown(round_number)
    return view.to_dict()


@router.delete("/{round_number}/countdown")
async def stop_countdown(
    round_number: int = Path(ge=1),
    gate: RevealGate = Depends(get_reveal_gate),
):
    view = await gate.stop_countdown(round_number)
    return view.to_dict()
