"""Marks Routes — per-round marks sheet and CSV/TSV download."""

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from spinround.api.dependencies import get_marks_sheet
from spinround.core.domain_types import ExportFormat
from spinround.services.marks_sheet import MarksSheet

router = APIRouter(prefix="/api/v1/rounds", tags=["marks"])

_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.TSV: "text/tab-separated-values",
}


@router.get("/{round_number}/marks")
async def marks_sheet(
    round_number: int = Path(ge=1),
    sheet: MarksSheet = Depends(get_marks_sheet),
):
    return await sheet.sheet(round_number)


@router.get("/{round_number}/marks/export")
async def export_marks(
    round_number: int = Path(ge=1),
    fmt: ExportFormat = Query(ExportFormat.CSV, alias="format"),
    sheet: MarksSheet = Depends(get_marks_sheet),
):
    filename, body = await sheet.export(round_number, fmt)
    return Response(
        content=body,
        media_type=_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
