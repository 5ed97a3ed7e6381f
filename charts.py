# charts.py
from typing import Dict, List

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.patches import Rectangle

from stats import linear_trend
from triage import get_bp_category, get_category_info, get_reference_lines, get_reference_zones

SYSTOLIC_COLOR = "#ef4444"
DIASTOLIC_COLOR = "#3b82f6"


def sessions_frame(sessions: List[Dict]) -> pd.DataFrame:
    """Oldest-first frame with a parsed date column."""
    df = pd.DataFrame(sessions, columns=["date", "time_of_day", "systolic", "diastolic", "pulse"])
    if df.empty:
        return df
    df["date"] = pd.to_datetime(df["date"])
    return df.iloc[::-1].reset_index(drop=True)


def bp_time_chart(sessions: List[Dict], guideline_key: str, show_trend: bool = True):
    df = sessions_frame(sessions)
    fig, ax = plt.subplots(figsize=(9, 4))
    if df.empty:
        ax.set_title("No readings")
        return fig

    ax.plot(df["date"], df["systolic"], marker="o", color=SYSTOLIC_COLOR, label="Systolic")
    ax.plot(df["date"], df["diastolic"], marker="o", color=DIASTOLIC_COLOR, label="Diastolic")

    lines = get_reference_lines(guideline_key)
    for line in lines.get("systolic", []) + lines.get("diastolic", []):
        ax.axhline(line["value"], color=line["color"], linestyle="--", linewidth=0.8, alpha=0.7)

    if show_trend:
        for col, color in (("systolic", SYSTOLIC_COLOR), ("diastolic", DIASTOLIC_COLOR)):
            fit = linear_trend(df[col].tolist())
            if fit:
                slope, intercept = fit
                ax.plot(df["date"], [intercept + slope * i for i in range(len(df))],
                        color=color, linestyle=":", alpha=0.8)

    ax.set_ylabel("mmHg")
    ax.legend(loc="upper left")
    fig.autofmt_xdate(rotation=30)
    return fig


def bp_scatter_chart(sessions: List[Dict], guideline_key: str):
    x_range, y_range = (40, 130), (70, 200)
    fig, ax = plt.subplots(figsize=(6, 5))

    for zone in get_reference_zones(guideline_key, y_range, x_range):
        ax.add_patch(Rectangle(
            (zone["x1"], zone["y1"]), zone["x2"] - zone["x1"], zone["y2"] - zone["y1"],
            color=get_category_info(zone["category"]).chart_color, alpha=0.15, linewidth=0,
        ))

    for s in sessions:
        cat = get_bp_category(s["systolic"], s["diastolic"], guideline_key)
        ax.scatter(s["diastolic"], s["systolic"], color=get_category_info(cat).chart_color,
                   edgecolors="black", linewidths=0.5, zorder=3)

    ax.set_xlim(*x_range)
    ax.set_ylim(*y_range)
    ax.set_xlabel("Diastolic (mmHg)")
    ax.set_ylabel("Systolic (mmHg)")
    return fig
