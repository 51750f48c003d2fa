import asyncio
import logging

import streamlit as st

from components.report_section import render_report_section
from goodsong.config import load_settings
from goodsong.dashboard import Dashboard, build_source

settings = load_settings()
logging.basicConfig(level=settings.log_level,
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Goodsong Analysis", layout="wide")
st.title("🏃 Goodsong Analysis")

# One controller per browser session; it owns all page state.
if "dashboard" not in st.session_state:
    dashboard = Dashboard(build_source(settings), settings=settings)
    with st.spinner("Loading club data..."):
        asyncio.run(dashboard.refresh())
    st.session_state["dashboard"] = dashboard
dashboard: Dashboard = st.session_state["dashboard"]

# ------------------------------ Sidebar ------------------------------
with st.sidebar:
    st.markdown("### Data")
    if st.button("🔄 Refresh", use_container_width=True):
        with st.spinner("Reloading sheet..."):
            asyncio.run(dashboard.refresh())
    state = dashboard.state
    loaded = state.loaded_at.strftime("%H:%M:%S") if state.loaded_at else "never"
    st.caption(f"{state.source_label} • {len(state.records)} logs • loaded {loaded}")
    st.caption(f"AI coach: {'on' if settings.gemini_api_key else 'fallback only (no API key)'}")

# ------------------------------ Search ------------------------------
with st.form("search_form", clear_on_submit=False):
    c1, c2 = st.columns([5, 1])
    term = c1.text_input("Member name", placeholder="Enter a member name (e.g. 김철수)",
                         label_visibility="collapsed")
    submitted = c2.form_submit_button("Search", use_container_width=True)

if submitted and term.strip():
    with st.spinner("The AI coach is analysing..."):
        asyncio.run(dashboard.search(term))

# ------------------------------ Notices ------------------------------
notice = dashboard.state.notice
if notice is not None:
    if notice.kind == "ingestion":
        st.error(notice.message)
    else:
        st.warning(notice.message)
        # a missed search is reported once, not on every rerun
        dashboard.dismiss_lookup_notice()

# ------------------------------ Report ------------------------------
if dashboard.state.selected_member:
    render_report_section(dashboard)
elif not dashboard.state.records:
    st.info("No training data loaded yet. Try Refresh in the sidebar.")
else:
    st.info("Search for a member to see their report.")
