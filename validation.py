# validation.py
import re
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from config import BP_LIMITS, TIME_OF_DAY

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _is_number(x) -> bool:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return x == x  # NaN check


def _is_whole(x) -> bool:
    return isinstance(x, int) or float(x).is_integer()


def sanitize_string(text: Optional[str], max_length: int = BP_LIMITS["notes_max_length"]) -> str:
    if not text:
        return ""
    return _CONTROL_CHARS.sub("", str(text)).strip()[:max_length]


def validate_bp_reading(reading: Optional[Dict]) -> Tuple[bool, List[str]]:
    """
    Returns:
      valid: True when no errors were found
      errors: list of human-readable problems
    """
    if not reading:
        return False, ["Reading is required"]

    errors: List[str] = []
    systolic = reading.get("systolic")
    diastolic = reading.get("diastolic")
    pulse = reading.get("pulse")

    if not _is_number(systolic):
        errors.append("Systolic must be a number")
    elif not _is_whole(systolic):
        errors.append("Systolic must be a whole number")
    elif not BP_LIMITS["systolic_min"] <= systolic <= BP_LIMITS["systolic_max"]:
        errors.append(f"Systolic must be between {BP_LIMITS['systolic_min']} and {BP_LIMITS['systolic_max']}")

    if not _is_number(diastolic):
        errors.append("Diastolic must be a number")
    elif not _is_whole(diastolic):
        errors.append("Diastolic must be a whole number")
    elif not BP_LIMITS["diastolic_min"] <= diastolic <= BP_LIMITS["diastolic_max"]:
        errors.append(f"Diastolic must be between {BP_LIMITS['diastolic_min']} and {BP_LIMITS['diastolic_max']}")

    if pulse is not None:
        if not _is_number(pulse):
            errors.append("Pulse must be a number")
        elif not _is_whole(pulse):
            errors.append("Pulse must be a whole number")
        elif not BP_LIMITS["pulse_min"] <= pulse <= BP_LIMITS["pulse_max"]:
            errors.append(f"Pulse must be between {BP_LIMITS['pulse_min']} and {BP_LIMITS['pulse_max']}")

    if _is_number(systolic) and _is_number(diastolic) and systolic <= diastolic:
        errors.append("Systolic must be greater than diastolic")

    if reading.get("arm") not in (None, "L", "R"):
        errors.append("Arm must be L, R or empty")

    return len(errors) == 0, errors


def _parse_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def validate_bp_session(session: Optional[Dict]) -> Tuple[bool, List[str]]:
    if not session:
        return False, ["Session is required"]

    errors: List[str] = []

    if not session.get("date"):
        errors.append("Date is required")
    elif _parse_date(session["date"]) is None:
        errors.append("Invalid date format")

    if session.get("time_of_day") not in TIME_OF_DAY:
        errors.append(f"Time of day must be one of: {', '.join(TIME_OF_DAY)}")

    readings = session.get("readings")
    if not isinstance(readings, list):
        errors.append("Readings list is required")
    elif not readings:
        errors.append("At least one reading is required")
    else:
        for i, reading in enumerate(readings, start=1):
            ok, reading_errors = validate_bp_reading(reading)
            if not ok:
                errors.append(f"Reading {i}: {', '.join(reading_errors)}")

    notes = session.get("notes")
    if notes and len(notes) > BP_LIMITS["notes_max_length"]:
        errors.append(f"Notes must be at most {BP_LIMITS['notes_max_length']} characters")

    return len(errors) == 0, errors
