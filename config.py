# config.py
# Reading limits + app settings (tweak thresholds in guidelines.py, not here)
import logging
import os

BP_LIMITS = {
    # Plausible cuff readings; anything outside is treated as an entry error
    "systolic_min": 60,
    "systolic_max": 250,
    "diastolic_min": 40,
    "diastolic_max": 150,
    "pulse_min": 30,
    "pulse_max": 220,

    "notes_max_length": 1000,
}

TIME_OF_DAY = ["morning", "afternoon", "evening"]

TIME_OF_DAY_OPTIONS = [
    ("all", "All times"),
    ("morning", "Morning"),
    ("afternoon", "Afternoon"),
    ("evening", "Evening"),
]

DATE_RANGE_OPTIONS = [
    ("7", "Last 7 days"),
    ("14", "Last 14 days"),
    ("30", "Last 30 days"),
    ("90", "Last 90 days"),
    ("all", "All time"),
]

EXPORT = {
    "recent_rows": 5,
    "filename_prefix": "blood-pressure-export",
}

APP = {
    "title": "Blood Pressure Log",
    "disclaimer": (
        "Personal tracking tool only. Not medical advice. "
        "Categories follow published guideline thresholds and do not replace "
        "a clinician's assessment. If readings are very high or you feel unwell, seek medical care."
    )
}


def get_setting(name: str, default: str = "") -> str:
    """Environment first, then Streamlit secrets, then the default."""
    value = os.getenv(name, "").strip()
    if value:
        return value
    try:
        import streamlit as st
        value = str(st.secrets.get(name, "")).strip()
    except Exception:
        value = ""
    return value or default


SETTINGS = {
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "sqlite_path": os.getenv("BP_SQLITE_PATH", "data.db"),
    "groq_base_url": "https://api.groq.com/openai/v1",
    "groq_model": "llama-3.3-70b-versatile",
}


def configure_logging(level: str = "") -> None:
    logging.basicConfig(
        level=(level or SETTINGS["log_level"]).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
