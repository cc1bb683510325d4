"""Marks Sheet Service — per-round marks table, summary and delimited export."""

from sqlalchemy.ext.asyncio import AsyncSession

from spinround.core.domain_types import ExportFormat
from spinround.core.errors import ResourceNotFoundError
from spinround.core.marks_sheet import (
    build_rows, summarize, render_delimited, export_filename,
)
from spinround.infrastructure.repositories import (
    TeamRepository, QuestionRepository, RoundRepository,
)


class MarksSheet:
    def __init__(self, db: AsyncSession):
        self.teams = TeamRepository(db)
        self.questions = QuestionRepository(db)
        self.rounds = RoundRepository(db)

    async def _round_name(self, round_number: int) -> str:
        for round_row in await self.rounds.list_or_defaults():
            if round_row.number == round_number:
                return round_row.name
        raise ResourceNotFoundError("Round", str(round_number))

    async def _rows(self, round_number: int):
        teams = await self.teams.list_in_round(round_number)
        questions = {q.id: q for q in await self.questions.list_all()}
        return build_rows(teams, questions)

    async def sheet(self, round_number: int) -> dict:
        name = await self._round_name(round_number)
        rows = await self._rows(round_number)
        return {
            "round": round_number,
            "roundName": name,
            "rows": [r.to_dict() for r in rows],
            "summary": summarize(rows),
        }

    async def export(self, round_number: int, fmt: ExportFormat) -> tuple[str, str]:
        """Returns (filename, body)."""
        name = await self._round_name(round_number)
        rows = await self._rows(round_number)
        return export_filename(round_number, name, fmt), render_delimited(rows, fmt)
