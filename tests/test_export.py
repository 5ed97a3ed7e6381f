"""Tests for Markdown and CSV report generation."""

from datetime import date, datetime

from export import export_filename, generate_csv, generate_markdown

SESSIONS = [
    {"date": "2026-03-04", "time_of_day": "evening", "systolic": 145, "diastolic": 95, "pulse": 80, "notes": "stressful day"},
    {"date": "2026-03-03", "time_of_day": "morning", "systolic": 135, "diastolic": 85, "pulse": None, "notes": None},
    {"date": "2026-03-02", "time_of_day": "morning", "systolic": 118, "diastolic": 76, "pulse": 66, "notes": None},
    {"date": "2026-03-01", "time_of_day": "morning", "systolic": 114, "diastolic": 74, "pulse": 64, "notes": None},
]


class TestMarkdown:
    def test_empty(self):
        assert "No readings available." in generate_markdown([], "htnCanada2025")

    def test_summary_sections(self):
        md = generate_markdown(SESSIONS, "htnCanada2025", generated_at=datetime(2026, 3, 5, 9, 0))
        assert "**Analysis Period:** 2026-03-01 to 2026-03-04" in md
        assert "**Total Readings:** 4" in md
        assert "**Guideline:** HTN Canada 2025" in md
        assert "| Normal | 2 | 50.0% |" in md
        assert "| Hypertension | 1 | 25.0% |" in md
        assert "| HTN (Treat) | 1 | 25.0% |" in md
        assert "- **Average Blood Pressure:** 128/83 mmHg" in md
        assert "- **Average Pulse:** 70 bpm" in md
        assert "classified as **Hypertension**" in md
        assert "**Note:** 2 of 4 readings (50.0%) were above normal range." in md
        assert "| 2026-03-04 | Evening | 145 | 95 | 80 | HTN (Treat) |" in md
        assert "| 2026-03-03 | Morning | 135 | 85 | - | Hypertension |" in md
        assert md.endswith("*Generated on 2026-03-05 09:00*\n")

    def test_distribution_follows_guideline(self):
        md = generate_markdown(SESSIONS, "simple")
        assert "| Hypertension | 2 | 50.0% |" in md


class TestCsv:
    def test_quoted_rows(self):
        lines = generate_csv(SESSIONS[:2], "htnCanada2025").splitlines()
        assert lines[0] == '"Date","Time","Systolic","Diastolic","Pulse","Category","Notes"'
        assert lines[1] == '"2026-03-04","Evening","145","95","80","HTN (Treat)","stressful day"'
        assert lines[2] == '"2026-03-03","Morning","135","85","","Hypertension",""'

    def test_empty_has_header(self):
        assert generate_csv([], "simple").strip() == '"Date","Time","Systolic","Diastolic","Pulse","Category","Notes"'


def test_export_filename():
    assert export_filename("csv", date(2026, 3, 5)) == "blood-pressure-export-2026-03-05.csv"
