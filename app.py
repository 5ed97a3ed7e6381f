import hashlib
import re
from datetime import date
from typing import Dict, List

import streamlit as st
import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from config import APP, BP_LIMITS, DATE_RANGE_OPTIONS, TIME_OF_DAY, TIME_OF_DAY_OPTIONS, configure_logging, get_setting
from guidelines import DEFAULT_GUIDELINE
from triage import (
    format_range,
    get_bp_category,
    get_category_info,
    get_guideline,
    get_threshold_table,
    list_guidelines,
    resolve_guideline_key,
)
from stats import calculate_full_stats, calculate_stats, filter_readings, get_previous_period_readings, get_trend
from charts import bp_scatter_chart, bp_time_chart
from export import export_filename, generate_csv, generate_markdown
from llm import generate_bp_tips

from storage import (
    init_db,
    get_profile,
    upsert_profile,
    add_session,
    update_session,
    delete_session,
    fetch_sessions,
    get_guideline_preference,
    set_guideline_preference,
)

configure_logging()
st.set_page_config(page_title=APP["title"], layout="wide")

init_db()

# -------------------------
# Header + Disclaimer
# -------------------------
st.title(APP["title"])
st.info(APP["disclaimer"])

# -------------------------
# Quick Access Login (Name + Phone)
# -------------------------
def normalize_phone(phone: str) -> str:
    phone = phone.strip()
    phone = re.sub(r"[^\d+]", "", phone)
    return phone

def user_key_from_phone(phone: str) -> str:
    salt = get_setting("PHONE_SALT", "dev-salt-change-me")
    return hashlib.sha256((salt + phone).encode("utf-8")).hexdigest()

def last4(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)
    return digits[-4:] if len(digits) >= 4 else digits

if "user_key" not in st.session_state:
    st.subheader("Quick Access Login")
    st.caption("Enter phone with country code, e.g., +1..., +44...")

    full_name = st.text_input("Full Name")
    phone = st.text_input("Phone Number")

    if st.button("Continue"):
        phone_n = normalize_phone(phone)

        if not full_name.strip():
            st.error("Enter your full name.")
            st.stop()
        if not phone_n.startswith("+") or len(phone_n) < 8:
            st.error("Enter a valid phone number with +country code.")
            st.stop()

        user_key = user_key_from_phone(phone_n)
        st.session_state["user_key"] = user_key
        st.session_state["phone_last4"] = last4(phone_n)

        prof = get_profile(user_key)
        if prof:
            st.session_state["display_name"] = prof.get("full_name") or full_name.strip()
        else:
            st.session_state["display_name"] = full_name.strip()
            upsert_profile(user_key, {
                "full_name": full_name.strip(),
                "phone_last4": st.session_state.get("phone_last4"),
            })

        st.rerun()

    st.stop()

st.sidebar.success(f"Logged in: {st.session_state.get('display_name','User')}")
if st.sidebar.button("Logout"):
    for k in ["user_key", "display_name", "phone_last4", "undo_session"]:
        st.session_state.pop(k, None)
    st.rerun()

user = st.session_state["user_key"]

# -------------------------
# Active guideline (stored preference -> fallback default)
# -------------------------
default_guideline = get_setting("BP_DEFAULT_GUIDELINE", DEFAULT_GUIDELINE)
saved_guideline = get_guideline_preference(user)
guideline_key, fell_back = resolve_guideline_key(saved_guideline, default_guideline)
guideline = get_guideline(guideline_key)
if fell_back and saved_guideline:
    st.sidebar.warning(
        f"Saved guideline is no longer available. Using {guideline.name}; pick one in Settings."
    )
st.sidebar.caption(f"Guideline: {guideline.name}")

# -------------------------
# Filters
# -------------------------
range_labels = dict(DATE_RANGE_OPTIONS)
tod_labels = dict(TIME_OF_DAY_OPTIONS)
date_range = st.sidebar.selectbox("Period", list(range_labels), index=2, format_func=range_labels.get)
time_of_day = st.sidebar.selectbox("Time of day", list(tod_labels), format_func=tod_labels.get)

all_sessions = fetch_sessions(user)
sessions = filter_readings(all_sessions, date_range, time_of_day)
previous = get_previous_period_readings(all_sessions, date_range, time_of_day)

tabs = st.tabs(["1) Log reading", "2) Readings", "3) Statistics", "4) Charts", "5) Export", "6) Settings"])

# -------------------------
# Helpers
# -------------------------
def _badge(systolic, diastolic) -> str:
    cat = get_bp_category(systolic, diastolic, guideline_key)
    if cat is None:
        return ""
    info = get_category_info(cat)
    return f":{_streamlit_color(info.color)}[{info.badge}]"

def _streamlit_color(color: str) -> str:
    return {"green": "green", "amber": "orange", "orange": "orange", "red": "red"}.get(color, "gray")

def _session_form(prefix: str, initial: Dict) -> Dict:
    """Inputs for a session; returns the session dict (not yet validated)."""
    c1, c2 = st.columns(2)
    with c1:
        reading_date = st.date_input("Date", value=date.fromisoformat(initial.get("date", date.today().isoformat())),
                                     key=f"{prefix}_date")
    with c2:
        tod = st.selectbox("Time of day", TIME_OF_DAY, key=f"{prefix}_tod",
                           index=TIME_OF_DAY.index(initial.get("time_of_day", "morning")),
                           format_func=str.title)

    existing = initial.get("readings") or [{}]
    count = st.number_input("Number of readings", min_value=1, max_value=5, value=len(existing), key=f"{prefix}_count")

    readings: List[Dict] = []
    for i in range(int(count)):
        prev = existing[i] if i < len(existing) else {}
        r1, r2, r3, r4 = st.columns(4)
        with r1:
            sys_v = st.number_input(f"Systolic #{i + 1}", min_value=0, max_value=BP_LIMITS["systolic_max"],
                                    value=int(prev.get("systolic") or 120), key=f"{prefix}_sys_{i}")
        with r2:
            dia_v = st.number_input(f"Diastolic #{i + 1}", min_value=0, max_value=BP_LIMITS["diastolic_max"],
                                    value=int(prev.get("diastolic") or 80), key=f"{prefix}_dia_{i}")
        with r3:
            pulse_v = st.number_input(f"Pulse #{i + 1} (optional)", min_value=0, max_value=BP_LIMITS["pulse_max"],
                                      value=int(prev.get("pulse") or 0), key=f"{prefix}_pulse_{i}")
        with r4:
            arm_options = ["", "L", "R"]
            arm = st.selectbox(f"Arm #{i + 1}", arm_options, key=f"{prefix}_arm_{i}",
                               index=arm_options.index(prev.get("arm") or ""))
        readings.append({
            "systolic": int(sys_v),
            "diastolic": int(dia_v),
            "pulse": int(pulse_v) if pulse_v > 0 else None,
            "arm": arm or None,
        })
        st.caption(_badge(sys_v, dia_v))

    notes = st.text_input("Notes (optional)", value=initial.get("notes") or "", key=f"{prefix}_notes")
    return {"date": reading_date, "time_of_day": tod, "readings": readings, "notes": notes.strip()}

# -------------------------
# 1) Log reading
# -------------------------
with tabs[0]:
    st.subheader("Log a blood pressure session")
    st.caption("Take 2-3 readings a minute apart; the session average is what gets classified.")

    new_session = _session_form("new", {})
    if st.button("Save session"):
        try:
            add_session(user, new_session)
        except (ValueError, SQLAlchemyError) as e:
            st.error(str(e))
        else:
            st.success("Saved ✅")
            st.rerun()

# -------------------------
# 2) Readings
# -------------------------
with tabs[1]:
    st.subheader("Readings")

    undo = st.session_state.get("undo_session")
    if undo:
        c1, c2 = st.columns([4, 1])
        with c1:
            st.info(f"Deleted session from {undo['date']}.")
        with c2:
            if st.button("Undo"):
                try:
                    add_session(user, undo)
                except (ValueError, SQLAlchemyError) as e:
                    st.error(str(e))
                else:
                    st.session_state.pop("undo_session", None)
                    st.rerun()

    if not sessions:
        st.info("No readings in this period.")
    for s in sessions:
        title = f"{s['date']} · {s['time_of_day'].title()} · {s['systolic']}/{s['diastolic']}"
        if s["pulse"]:
            title += f" · {s['pulse']} bpm"
        with st.expander(title):
            st.markdown(_badge(s["systolic"], s["diastolic"]))
            if s["reading_count"] > 1:
                st.caption(f"Average of {s['reading_count']} readings")
            if s["notes"]:
                st.write(s["notes"])

            edited = _session_form(f"edit_{s['session_id']}", s)
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Save changes", key=f"save_{s['session_id']}"):
                    try:
                        update_session(user, s["session_id"], edited)
                    except (ValueError, SQLAlchemyError) as e:
                        st.error(str(e))
                    else:
                        st.rerun()
            with c2:
                if st.button("Delete", key=f"del_{s['session_id']}"):
                    try:
                        delete_session(user, s["session_id"])
                    except SQLAlchemyError as e:
                        st.error(str(e))
                        st.stop()
                    st.session_state["undo_session"] = {
                        "date": s["date"],
                        "time_of_day": s["time_of_day"],
                        "readings": [
                            {k: r[k] for k in ("systolic", "diastolic", "pulse", "arm")} for r in s["readings"]
                        ],
                        "notes": s["notes"],
                    }
                    st.rerun()

# -------------------------
# 3) Statistics
# -------------------------
with tabs[2]:
    st.subheader(f"Statistics ({range_labels[date_range]})")

    stats = calculate_stats(list(reversed(sessions)), guideline_key)
    full = calculate_full_stats(sessions)
    if not stats:
        st.info("No readings in this period.")
    else:
        prev_stats = calculate_stats(list(reversed(previous)), guideline_key)
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Average", f"{stats['avg_systolic']}/{stats['avg_diastolic']}",
                  delta=(f"{stats['avg_systolic'] - prev_stats['avg_systolic']:+d} systolic" if prev_stats else None),
                  delta_color="inverse")
        m2.metric("Pulse", f"{stats['avg_pulse']} bpm" if stats["avg_pulse"] else "-")
        m3.metric("Pulse pressure", f"{full['pp']['avg']:.0f} mmHg")
        m4.metric("MAP", f"{full['map']['avg']:.0f} mmHg")

        avg_cat = get_bp_category(stats["avg_systolic"], stats["avg_diastolic"], guideline_key)
        st.write(f"Average classified as **{get_category_info(avg_cat).label}** under {guideline.name}.")

        trend = get_trend(sessions)
        if trend:
            st.caption(
                f"Since previous session: systolic {trend['systolic']['diff']:+d}, "
                f"diastolic {trend['diastolic']['diff']:+d}"
            )

        rows = []
        for name, key in [("Systolic", "systolic"), ("Diastolic", "diastolic"), ("Pulse", "pulse"),
                          ("Pulse pressure", "pp"), ("MAP", "map")]:
            rows.append({"Metric": name, "Min": full[key]["min"], "Avg": full[key]["avg"], "Max": full[key]["max"]})
        st.dataframe(pd.DataFrame(rows).round(1), use_container_width=True)

        if st.button("Get lifestyle tips"):
            summary = (
                f"Average {stats['avg_systolic']}/{stats['avg_diastolic']} mmHg over {stats['count']} sessions, "
                f"category {get_category_info(avg_cat).label}"
            )
            for t in generate_bp_tips(summary):
                st.write("•", t)

# -------------------------
# 4) Charts
# -------------------------
with tabs[3]:
    st.subheader("Charts")
    if not sessions:
        st.info("No readings in this period.")
    else:
        show_trend = st.toggle("Show trendlines", value=True)
        st.pyplot(bp_time_chart(sessions, guideline_key, show_trend=show_trend))
        st.pyplot(bp_scatter_chart(sessions, guideline_key))

# -------------------------
# 5) Export
# -------------------------
with tabs[4]:
    st.subheader("Export")
    md = generate_markdown(sessions, guideline_key)
    st.download_button("Download Markdown", md, file_name=export_filename("md"), mime="text/markdown")
    st.download_button("Download CSV", generate_csv(sessions, guideline_key),
                       file_name=export_filename("csv"), mime="text/csv")
    with st.expander("Preview"):
        st.markdown(md)

# -------------------------
# 6) Settings
# -------------------------
with tabs[5]:
    st.subheader("Classification guideline")

    options = list_guidelines()
    keys = [g.key for g in options]
    choice = st.radio("Guideline", keys, index=keys.index(guideline_key),
                      format_func=lambda k: get_guideline(k).name)
    st.caption(get_guideline(choice).description)

    table = pd.DataFrame([
        {
            "Category": row["label"],
            "Systolic": format_range(row["systolic_min"], row["systolic_max"]),
            "Diastolic": format_range(row["diastolic_min"], row["diastolic_max"]),
        }
        for row in get_threshold_table(choice)
    ])
    st.table(table)

    if choice != guideline_key and st.button("Use this guideline"):
        try:
            set_guideline_preference(user, choice)
        except (ValueError, SQLAlchemyError) as e:
            st.error(str(e))
        else:
            st.rerun()
