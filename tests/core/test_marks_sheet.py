"""Marks Sheet — row building, summary and delimited rendering."""

from types import SimpleNamespace

from spinround.core.domain_types import ExportFormat
from spinround.core.marks_sheet import (
    build_rows, summarize, render_delimited, export_filename,
)


def _rows():
    teams = [
        SimpleNamespace(id="t1", name="Alpha", assigned_question_id="q1", marks=90, reason="Sharp"),
        SimpleNamespace(id="t2", name="Beta", assigned_question_id=None, marks=None, reason=None),
        SimpleNamespace(id="t3", name="Gamma", assigned_question_id="q2", marks=75, reason=""),
    ]
    questions = {
        "q1": SimpleNamespace(prompt="Build a navbar"),
        "q2": SimpleNamespace(prompt="Style a form"),
    }
    return build_rows(teams, questions)


def test_rows_are_numbered_in_team_order():
    rows = _rows()
    assert [r.index for r in rows] == [1, 2, 3]
    assert rows[0].question == "Build a navbar"
    assert rows[1].question is None


def test_summary_averages_marked_teams_only():
    assert summarize(_rows()) == {
        "teamCount": 3, "markedCount": 2, "averageMarks": 82.5,
    }


def test_summary_without_marks():
    assert summarize([])["averageMarks"] is None


def test_csv_quotes_every_field_and_fills_placeholders():
    lines = render_delimited(_rows(), ExportFormat.CSV).splitlines()
    assert lines[0] == '"#","Team Name","Question","Marks","Reason"'
    assert lines[2] == '"2","Beta","Not assigned","N/A","-"'
    assert lines[3] == '"3","Gamma","Style a form","75","-"'


def test_tsv_uses_tabs():
    lines = render_delimited(_rows(), ExportFormat.TSV).splitlines()
    assert lines[0] == "#\tTeam Name\tQuestion\tMarks\tReason"
    assert lines[1] == "1\tAlpha\tBuild a navbar\t90\tSharp"


def test_export_filename():
    assert export_filename(3, "UXcellence Grand Showdown", ExportFormat.TSV) == (
        "Round3_UXcellence_Grand_Showdown.tsv"
    )
