"""
Knock · Explore — pick a member, see who they match with, and book a date
on one of the suggested slots.
"""
import sys
import logging
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from engines.conflict_engine import detect_booking_conflicts, has_blocking_conflicts
from engines.matching_engine import score_candidates
from engines.scheduling_engine import suggest_slots_for_profiles
from models.date_request import DateRequest
from models.errors import ValidationError
from services import profile_store
from utils.settings import ScoringConfig, SchedulingConfig

# ─────────────────────────────────────
# Logging
# ─────────────────────────────────────
logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s — %(message)s")
logger = logging.getLogger(__name__)

# ─────────────────────────────────────
# Page Config — MUST be first Streamlit call
# ─────────────────────────────────────
st.set_page_config(page_title="Knock · Explore", page_icon="💌", layout="wide")


# ─────────────────────────────────────
# Data
# ─────────────────────────────────────
@st.cache_resource
def get_profiles():
    profile_store.connect_sheets()
    return profile_store.load_profiles()


scoring_config = ScoringConfig.from_env()
scheduling_config = SchedulingConfig.from_env()
profiles = get_profiles()

if not profiles:
    st.warning("No profiles found. Add rows to data/profiles.csv to get started.")
    st.stop()

st.title("💌 Explore")
st.caption(
    "Data source: Google Sheets" if profile_store.is_sheets_connected()
    else "Data source: local CSV (set KNOCK_SHEET_ID to sync with Google Sheets)"
)

subject = st.selectbox(
    "Exploring as",
    profiles,
    format_func=lambda p: p.display_name,
    key="subject",
)
matches = score_candidates(subject, profiles, scoring_config)

if not matches:
    st.info("No compatible matches right now. Try adding more activities or opening up your availability.")
    st.stop()

# ─────────────────────────────────────
# Ranked matches + score breakdown
# ─────────────────────────────────────
left_col, right_col = st.columns([1.2, 1], gap="medium")

with left_col:
    st.subheader("Your matches")
    st.dataframe(
        pd.DataFrame([
            {"name": m.candidate.display_name, **m.breakdown()} for m in matches
        ]),
        use_container_width=True,
        hide_index=True,
    )

with right_col:
    names = [m.candidate.display_name for m in matches]
    fig = go.Figure(data=[
        go.Bar(name="Visual", x=names, y=[m.visual_score * scoring_config.visual_weight for m in matches]),
        go.Bar(name="Activities", x=names, y=[m.activity_score * scoring_config.activity_weight for m in matches]),
        go.Bar(name="Availability", x=names, y=[m.availability_score * scoring_config.availability_weight for m in matches]),
    ])
    fig.update_layout(barmode="stack", height=320, yaxis=dict(range=[0, 1], title="Score"),
                      margin=dict(l=10, r=10, t=30, b=10))
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})

# ─────────────────────────────────────
# Scheduling
# ─────────────────────────────────────
st.subheader("Plan a date")
chosen = st.selectbox("With", matches, format_func=lambda m: m.candidate.display_name, key="chosen")
suggestions = suggest_slots_for_profiles(subject, chosen.candidate, config=scheduling_config)

if not suggestions:
    st.info(
        "No shared free time in the next "
        f"{scheduling_config.horizon_days} days. Send {chosen.candidate.display_name} a custom time instead."
    )
    st.stop()

slot = st.radio("Suggested times", suggestions, format_func=lambda s: s.label, key="slot")
venue = st.text_input("Venue")
note = st.text_area("Note (optional)")

if st.button("Send date request", type="primary"):
    try:
        request = DateRequest(
            sender_id=subject.id,
            recipient_id=chosen.candidate.id,
            slot=slot,
            venue=venue,
            note=note,
        )
    except ValidationError as e:
        st.error(str(e))
    else:
        conflicts = detect_booking_conflicts(request, profiles, profile_store.load_date_requests())
        for conflict in conflicts:
            st.warning(str(conflict))
        if has_blocking_conflicts(conflicts):
            st.error("This slot can't be booked. Pick another time.")
        else:
            profile_store.save_date_request(request)
            logger.info(f"Date request {request.request_id} booked for {slot.date}")
            st.success(
                f"Date request sent! Your confirmation code is **{request.confirmation_code}** — "
                "share it with your match when you meet."
            )
