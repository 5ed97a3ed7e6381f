# export.py
import csv
from datetime import date, datetime
from typing import Dict, List, Optional

import pandas as pd

from config import EXPORT
from stats import calculate_full_stats, calculate_stats, category_distribution
from triage import get_bp_category, get_category_info, get_guideline


def _label(session: Dict, guideline_key: str) -> str:
    cat = get_bp_category(session.get("systolic"), session.get("diastolic"), guideline_key)
    return get_category_info(cat).label if cat else "-"


def generate_markdown(sessions: List[Dict], guideline_key: str, generated_at: Optional[datetime] = None) -> str:
    """Markdown summary report. Sessions are expected newest first, as fetch_sessions returns them."""
    if not sessions:
        return "# Blood Pressure Summary\n\nNo readings available.\n"

    dates = sorted(s["date"] for s in sessions if s.get("date"))
    guideline = get_guideline(guideline_key)
    total = len(sessions)

    md = "# Blood Pressure Summary\n\n"
    if dates:
        md += f"**Analysis Period:** {dates[0]} to {dates[-1]}\n"
    md += f"**Total Readings:** {total}\n"
    if guideline is not None:
        md += f"**Guideline:** {guideline.name}\n"
    md += "\n"

    counts = category_distribution(sessions, guideline_key)
    md += "## Reading Distribution\n\n"
    md += "| Category | Count | Percentage |\n"
    md += "|----------|-------|------------|\n"
    for cat, count in counts.items():
        pct = count / total * 100.0
        md += f"| {get_category_info(cat).label} | {count} | {pct:.1f}% |\n"
    md += "\n"

    stats = calculate_stats(list(reversed(sessions)), guideline_key)
    full = calculate_full_stats(sessions)
    md += "## Statistics\n\n"
    md += f"- **Average Blood Pressure:** {stats['avg_systolic']}/{stats['avg_diastolic']} mmHg\n"
    md += f"- **Systolic Range:** {stats['min_systolic']} - {stats['max_systolic']} mmHg\n"
    md += f"- **Diastolic Range:** {stats['min_diastolic']} - {stats['max_diastolic']} mmHg\n"
    if stats["avg_pulse"]:
        md += f"- **Average Pulse:** {stats['avg_pulse']} bpm\n"
    md += f"- **Average Pulse Pressure:** {full['pp']['avg']:.1f} mmHg\n"
    md += f"- **Average MAP:** {full['map']['avg']:.1f} mmHg\n"
    md += "\n"

    avg_cat = get_bp_category(stats["avg_systolic"], stats["avg_diastolic"], guideline_key)
    if avg_cat:
        md += "## Assessment\n\n"
        md += f"Based on the average readings, blood pressure is classified as **{get_category_info(avg_cat).label}**.\n\n"

    if guideline is not None:
        above = sum(n for cat, n in counts.items() if cat != guideline.baseline)
        if above:
            md += f"**Note:** {above} of {total} readings ({above / total * 100.0:.1f}%) were above normal range.\n\n"

    n = EXPORT["recent_rows"]
    md += f"## Recent Readings (Last {n})\n\n"
    md += "| Date | Time | Systolic | Diastolic | Pulse | Category |\n"
    md += "|------|------|----------|-----------|-------|----------|\n"
    for s in sessions[:n]:
        md += (
            f"| {s['date']} | {str(s.get('time_of_day') or '').title()} | {s['systolic']} | "
            f"{s['diastolic']} | {s.get('pulse') or '-'} | {_label(s, guideline_key)} |\n"
        )
    md += "\n"

    md += "---\n"
    md += f"*Generated on {(generated_at or datetime.now()).strftime('%Y-%m-%d %H:%M')}*\n"
    return md


def generate_csv(sessions: List[Dict], guideline_key: str) -> str:
    df = pd.DataFrame(
        [
            {
                "Date": s["date"],
                "Time": str(s.get("time_of_day") or "").title(),
                "Systolic": s["systolic"],
                "Diastolic": s["diastolic"],
                "Pulse": s.get("pulse") or "",
                "Category": _label(s, guideline_key),
                "Notes": s.get("notes") or "",
            }
            for s in sessions
        ],
        columns=["Date", "Time", "Systolic", "Diastolic", "Pulse", "Category", "Notes"],
    )
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def export_filename(extension: str, today: Optional[date] = None) -> str:
    return f"{EXPORT['filename_prefix']}-{(today or date.today()).isoformat()}.{extension}"
