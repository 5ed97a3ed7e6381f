"""Smoke tests for chart figures (Agg backend, see conftest)."""

import matplotlib.pyplot as plt

from charts import bp_scatter_chart, bp_time_chart, sessions_frame

SESSIONS = [
    {"date": "2026-03-03", "time_of_day": "morning", "systolic": 135, "diastolic": 85, "pulse": 70},
    {"date": "2026-03-02", "time_of_day": "morning", "systolic": 128, "diastolic": 82, "pulse": None},
    {"date": "2026-03-01", "time_of_day": "evening", "systolic": 118, "diastolic": 76, "pulse": 66},
]


def test_frame_is_oldest_first():
    df = sessions_frame(SESSIONS)
    assert df["systolic"].tolist() == [118, 128, 135]


def test_time_chart_has_reference_and_trend_lines():
    fig = bp_time_chart(SESSIONS, "htnCanada2025")
    ax = fig.axes[0]
    # 2 series + 4 reference lines + 2 trendlines
    assert len(ax.lines) == 8
    plt.close(fig)


def test_time_chart_without_trend():
    fig = bp_time_chart(SESSIONS, "simple", show_trend=False)
    assert len(fig.axes[0].lines) == 4
    plt.close(fig)


def test_time_chart_empty():
    fig = bp_time_chart([], "simple")
    assert fig.axes[0].get_title() == "No readings"
    plt.close(fig)


def test_scatter_chart_zones():
    fig = bp_scatter_chart(SESSIONS, "aha2017")
    ax = fig.axes[0]
    assert len(ax.patches) == 8
    assert len(ax.collections) == 3
    plt.close(fig)
