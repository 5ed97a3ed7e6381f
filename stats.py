# stats.py
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import TIME_OF_DAY
from guidelines import DEFAULT_GUIDELINE
from triage import get_bp_category, get_guideline


def avg(xs: List[float]) -> Optional[float]:
    if not xs:
        return None
    return sum(xs) / len(xs)


def round_half_up(x: float) -> int:
    # .5 always rounds up (82.5 -> 83)
    return int(math.floor(x + 0.5))


def avg_rounded(xs: List[float]) -> Optional[int]:
    a = avg(xs)
    return None if a is None else round_half_up(a)


def calc_stats(values: List[float]) -> Dict[str, Optional[float]]:
    if not values:
        return {"min": None, "max": None, "avg": None}
    return {"min": min(values), "max": max(values), "avg": avg(values)}


def standard_deviation(values: List[float]) -> float:
    if len(values) < 2:
        return 0.0
    m = avg(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def _pulses(readings: List[Dict]) -> List[float]:
    return [r["pulse"] for r in readings if r.get("pulse")]


def calculate_stats(readings: Optional[List[Dict]], guideline_key: str = DEFAULT_GUIDELINE) -> Optional[Dict]:
    """Rounded averages, ranges and the latest reading's category. Readings oldest -> newest."""
    if not readings:
        return None

    systolics = [r["systolic"] for r in readings]
    diastolics = [r["diastolic"] for r in readings]

    return {
        "avg_systolic": avg_rounded(systolics),
        "avg_diastolic": avg_rounded(diastolics),
        "avg_pulse": avg_rounded(_pulses(readings)),
        "min_systolic": min(systolics),
        "max_systolic": max(systolics),
        "min_diastolic": min(diastolics),
        "max_diastolic": max(diastolics),
        "count": len(readings),
        "latest_category": get_bp_category(systolics[-1], diastolics[-1], guideline_key),
    }


def pulse_pressure(systolic: float, diastolic: float) -> float:
    return systolic - diastolic


def mean_arterial_pressure(systolic: float, diastolic: float) -> float:
    return diastolic + pulse_pressure(systolic, diastolic) / 3


def calculate_full_stats(readings: Optional[List[Dict]]) -> Optional[Dict]:
    if not readings:
        return None

    return {
        "systolic": calc_stats([r["systolic"] for r in readings]),
        "diastolic": calc_stats([r["diastolic"] for r in readings]),
        "pulse": calc_stats(_pulses(readings)),
        "pp": calc_stats([pulse_pressure(r["systolic"], r["diastolic"]) for r in readings]),
        "map": calc_stats([mean_arterial_pressure(r["systolic"], r["diastolic"]) for r in readings]),
        "count": len(readings),
    }


def calculate_daily_average(readings: Optional[List[Dict]]) -> Optional[Dict[str, int]]:
    if not readings:
        return None
    return {
        "systolic": avg_rounded([r["systolic"] for r in readings]),
        "diastolic": avg_rounded([r["diastolic"] for r in readings]),
    }


def category_distribution(readings: List[Dict], guideline_key: str = DEFAULT_GUIDELINE) -> Dict[str, int]:
    """Count per category, in the guideline's severity order. Unclassifiable readings are skipped."""
    counts: Dict[str, int] = {}
    for r in readings:
        cat = get_bp_category(r.get("systolic"), r.get("diastolic"), guideline_key)
        if cat:
            counts[cat] = counts.get(cat, 0) + 1

    guideline = get_guideline(guideline_key)
    if guideline is None:
        return counts
    return {c: counts[c] for c in guideline.categories if c in counts}


def linear_trend(values: List[float]) -> Optional[Tuple[float, float]]:
    """Least-squares (slope, intercept) over index positions."""
    if len(values) < 2:
        return None
    slope, intercept = np.polyfit(np.arange(len(values)), np.asarray(values, dtype=float), 1)
    return float(slope), float(intercept)


def _direction(diff: float) -> str:
    if diff > 0:
        return "up"
    if diff < 0:
        return "down"
    return "stable"


def _chronological_key(r: Dict) -> Tuple:
    tod = r.get("time_of_day")
    return (
        str(r["date"]),
        TIME_OF_DAY.index(tod) if tod in TIME_OF_DAY else 0,
        str(r.get("created_at") or ""),
    )


def get_trend(readings: List[Dict]) -> Optional[Dict]:
    if len(readings) < 2:
        return None

    ordered = sorted(readings, key=_chronological_key)
    latest, previous = ordered[-1], ordered[-2]

    trend = {}
    for dim in ("systolic", "diastolic"):
        diff = latest[dim] - previous[dim]
        trend[dim] = {"diff": diff, "direction": _direction(diff), "is_improving": diff < 0}
    return trend


def _as_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _match_time(r: Dict, time_of_day: str) -> bool:
    return time_of_day == "all" or r.get("time_of_day") == time_of_day


def filter_readings(
    readings: List[Dict],
    date_range: str = "all",
    time_of_day: str = "all",
    today: Optional[date] = None,
) -> List[Dict]:
    today = today or date.today()
    out = [r for r in readings if _match_time(r, time_of_day)]
    if date_range == "all":
        return out

    start = today - timedelta(days=int(date_range))
    return [r for r in out if (_as_date(r.get("date")) or date.min) > start]


def get_previous_period_readings(
    readings: List[Dict],
    date_range: str,
    time_of_day: str = "all",
    today: Optional[date] = None,
) -> List[Dict]:
    """Readings from the equal-length window just before the current one."""
    if not readings or date_range == "all":
        return []

    today = today or date.today()
    days = int(date_range)
    end = today - timedelta(days=days)
    start = end - timedelta(days=days)

    out = []
    for r in readings:
        d = _as_date(r.get("date"))
        if d is not None and start < d <= end and _match_time(r, time_of_day):
            out.append(r)
    return out
