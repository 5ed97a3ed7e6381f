# storage.py
import logging
import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import (
    create_engine, MetaData, Table, Column,
    Integer, String, Date, DateTime, Text
)
from sqlalchemy.sql import select, insert, update, delete
from sqlalchemy.pool import NullPool

from config import SETTINGS, TIME_OF_DAY, get_setting
from stats import avg_rounded
from triage import get_guideline
from validation import sanitize_string, validate_bp_session

logger = logging.getLogger(__name__)

_engine = None

def get_engine():
    global _engine
    if _engine is None:
        db_url = get_setting("DATABASE_URL")
        if db_url:
            _engine = create_engine(db_url, pool_pre_ping=True, poolclass=NullPool)
        else:
            _engine = create_engine(
                f"sqlite:///{SETTINGS['sqlite_path']}",
                connect_args={"check_same_thread": False},
            )
    return _engine

def set_engine(engine) -> None:
    global _engine
    _engine = engine

metadata = MetaData()

profiles = Table(
    "profiles", metadata,
    Column("user_key", String(80), primary_key=True),
    Column("full_name", String(200), nullable=True),
    Column("phone_last4", String(8), nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

bp_readings = Table(
    "bp_readings", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_key", String(80), nullable=False, index=True),
    Column("session_id", String(36), nullable=False, index=True),
    Column("reading_date", Date, nullable=False),
    Column("time_of_day", String(20), nullable=False),
    Column("position", Integer, nullable=False),
    Column("systolic", Integer, nullable=False),
    Column("diastolic", Integer, nullable=False),
    Column("pulse", Integer, nullable=True),
    Column("arm", String(1), nullable=True),
    Column("notes", Text, nullable=True),
    Column("created_at", DateTime, nullable=False),
)

user_settings = Table(
    "user_settings", metadata,
    Column("user_key", String(80), primary_key=True),
    Column("bp_guideline", String(40), nullable=True),
    Column("updated_at", DateTime, nullable=False),
)

def init_db() -> None:
    metadata.create_all(get_engine())

# -------------------------
# Profiles
# -------------------------
def get_profile(user_key: str) -> Optional[Dict]:
    with get_engine().begin() as conn:
        row = conn.execute(
            select(profiles).where(profiles.c.user_key == user_key)
        ).fetchone()
    return dict(row._mapping) if row else None

def upsert_profile(user_key: str, data: Dict) -> None:
    now = datetime.now()
    payload = {
        "full_name": data.get("full_name"),
        "phone_last4": data.get("phone_last4"),
        "updated_at": now,
    }

    with get_engine().begin() as conn:
        exists = conn.execute(
            select(profiles.c.user_key).where(profiles.c.user_key == user_key)
        ).fetchone()

        if exists:
            conn.execute(
                update(profiles).where(profiles.c.user_key == user_key).values(**payload)
            )
        else:
            payload["user_key"] = user_key
            payload["created_at"] = now
            conn.execute(insert(profiles).values(**payload))

# -------------------------
# Settings
# -------------------------
def get_guideline_preference(user_key: str) -> Optional[str]:
    with get_engine().begin() as conn:
        row = conn.execute(
            select(user_settings.c.bp_guideline).where(user_settings.c.user_key == user_key)
        ).fetchone()
    return row[0] if row else None

def set_guideline_preference(user_key: str, guideline_key: str) -> None:
    if get_guideline(guideline_key) is None:
        raise ValueError(f"Unknown BP guideline: {guideline_key}")

    now = datetime.now()
    with get_engine().begin() as conn:
        exists = conn.execute(
            select(user_settings.c.user_key).where(user_settings.c.user_key == user_key)
        ).fetchone()
        if exists:
            conn.execute(
                update(user_settings).where(user_settings.c.user_key == user_key)
                .values(bp_guideline=guideline_key, updated_at=now)
            )
        else:
            conn.execute(insert(user_settings).values(
                user_key=user_key, bp_guideline=guideline_key, updated_at=now
            ))
    logger.info("Saved BP guideline preference '%s'", guideline_key)

# -------------------------
# Blood pressure sessions
# -------------------------
def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))

def _session_rows(user_key: str, session_id: str, session: Dict) -> List[Dict]:
    ok, errors = validate_bp_session(session)
    if not ok:
        raise ValueError("; ".join(errors))

    notes = sanitize_string(session.get("notes")) or None
    reading_date = _to_date(session["date"])
    now = datetime.now()

    rows = []
    for i, r in enumerate(session["readings"]):
        rows.append({
            "user_key": user_key,
            "session_id": session_id,
            "reading_date": reading_date,
            "time_of_day": session["time_of_day"],
            "position": i,
            "systolic": int(r["systolic"]),
            "diastolic": int(r["diastolic"]),
            "pulse": int(r["pulse"]) if r.get("pulse") else None,
            "arm": r.get("arm"),
            # session notes live on the first reading
            "notes": notes if i == 0 else None,
            "created_at": now,
        })
    return rows

def add_session(user_key: str, session: Dict) -> str:
    """Validate and store a session of one or more readings. Returns the new session id."""
    session_id = str(uuid.uuid4())
    rows = _session_rows(user_key, session_id, session)
    with get_engine().begin() as conn:
        conn.execute(insert(bp_readings), rows)
    logger.info("Added BP session with %d reading(s)", len(rows))
    return session_id

def update_session(user_key: str, session_id: str, session: Dict) -> None:
    rows = _session_rows(user_key, session_id, session)
    with get_engine().begin() as conn:
        conn.execute(
            delete(bp_readings)
            .where(bp_readings.c.user_key == user_key)
            .where(bp_readings.c.session_id == session_id)
        )
        conn.execute(insert(bp_readings), rows)
    logger.info("Updated BP session with %d reading(s)", len(rows))

def delete_session(user_key: str, session_id: str) -> bool:
    with get_engine().begin() as conn:
        result = conn.execute(
            delete(bp_readings)
            .where(bp_readings.c.user_key == user_key)
            .where(bp_readings.c.session_id == session_id)
        )
    logger.info("Deleted BP session (%d reading(s))", result.rowcount)
    return result.rowcount > 0

def _build_session(session_id: str, readings: List[Dict]) -> Dict:
    readings.sort(key=lambda r: r["position"])
    first = readings[0]
    notes = "\n".join(r["notes"] for r in readings if r["notes"])
    return {
        "session_id": session_id,
        "date": first["date"],
        "time_of_day": first["time_of_day"],
        "systolic": avg_rounded([r["systolic"] for r in readings]),
        "diastolic": avg_rounded([r["diastolic"] for r in readings]),
        "pulse": avg_rounded([r["pulse"] for r in readings if r["pulse"]]),
        "notes": notes or None,
        "readings": readings,
        "reading_count": len(readings),
        "created_at": first["created_at"],
    }

def fetch_sessions(user_key: str) -> List[Dict]:
    """Sessions newest first, each averaged over its readings."""
    with get_engine().begin() as conn:
        rows = conn.execute(
            select(bp_readings).where(bp_readings.c.user_key == user_key)
        ).fetchall()

    grouped: Dict[str, List[Dict]] = {}
    for row in rows:
        m = row._mapping
        grouped.setdefault(m["session_id"], []).append({
            "id": m["id"],
            "session_id": m["session_id"],
            "date": m["reading_date"].isoformat(),
            "time_of_day": m["time_of_day"],
            "position": m["position"],
            "systolic": m["systolic"],
            "diastolic": m["diastolic"],
            "pulse": m["pulse"],
            "arm": m["arm"],
            "notes": m["notes"],
            "created_at": m["created_at"],
        })

    sessions = [_build_session(sid, readings) for sid, readings in grouped.items()]
    sessions.sort(
        key=lambda s: (s["date"], TIME_OF_DAY.index(s["time_of_day"]), s["created_at"]),
        reverse=True,
    )
    return sessions
