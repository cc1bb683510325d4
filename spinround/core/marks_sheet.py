"""Marks Sheet — per-round rows of team, question, marks and reason.

Invariants:
    - Rows keep team order and are numbered from 1
    - Missing values render as 'Not assigned', 'N/A' and '-'
    - Average is over marked teams only; None when nobody is marked
"""

import csv
import io
from dataclasses import dataclass
from typing import Mapping, Sequence

from spinround.core.domain_types import ExportFormat
from spinround.core.repository_protocols import TeamLike, QuestionLike

EXPORT_HEADERS = ("#", "Team Name", "Question", "Marks", "Reason")


@dataclass(frozen=True)
class MarksRow:
    index: int
    team_id: str
    team_name: str
    question: str | None
    marks: int | None
    reason: str | None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "teamId": self.team_id,
            "teamName": self.team_name,
            "question": self.question,
            "marks": self.marks,
            "reason": self.reason,
        }

    def to_cells(self) -> list:
        return [
            self.index,
            self.team_name,
            self.question or "Not assigned",
            self.marks if self.marks is not None else "N/A",
            self.reason or "-",
        ]


def build_rows(
    teams: Sequence[TeamLike], questions: Mapping[str, QuestionLike],
) -> list[MarksRow]:
    rows = []
    for index, team in enumerate(teams, start=1):
        question = questions.get(team.assigned_question_id or "")
        rows.append(MarksRow(
            index=index,
            team_id=team.id,
            team_name=team.name,
            question=question.prompt if question else None,
            marks=team.marks,
            reason=team.reason,
        ))
    return rows


def summarize(rows: Sequence[MarksRow]) -> dict:
    marked = [r.marks for r in rows if r.marks is not None]
    return {
        "teamCount": len(rows),
        "markedCount": len(marked),
        "averageMarks": round(sum(marked) / len(marked), 1) if marked else None,
    }


def render_delimited(rows: Sequence[MarksRow], fmt: ExportFormat) -> str:
    """Comma- or tab-separated dump with a header row."""
    buffer = io.StringIO()
    if fmt == ExportFormat.CSV:
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    else:
        writer = csv.writer(buffer, delimiter="\t", lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        writer.writerow(row.to_cells())
    return buffer.getvalue()


def export_filename(round_number: int, round_name: str, fmt: ExportFormat) -> str:
    slug = "_".join(round_name.split())
    return f"Round{round_number}_{slug}.{fmt.value}"
