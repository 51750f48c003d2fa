import plotly.express as px
import streamlit as st

from goodsong.dashboard import Dashboard
from goodsong.stats import heart_rate_frame, history_frame


def _fmt(value, suffix=""):
    return "—" if value is None else f"{value}{suffix}"


def render_report_section(dashboard: Dashboard):
    state = dashboard.state
    name = state.selected_member
    logs = dashboard.selected_logs()
    stats = dashboard.selected_stats()

    # --- AI coach ---
    with st.container(border=True):
        st.caption("AI COACH")
        st.header(f"{name}'s Report")
        if state.feedback:
            st.markdown(f"> {state.feedback.ai_insight}")

    # --- Stat tiles ---
    c1, c2, c3 = st.columns(3)
    c1.metric("Avg heart rate", _fmt(stats.avg_heart_rate if stats else None, " BPM"))
    c2.metric("Avg intensity", _fmt(stats.avg_intensity if stats else None, "/10"))
    c3.metric("Sessions", _fmt(stats.count if stats else None))

    # --- Recommendations ---
    recs = state.feedback.recommendations if state.feedback else []
    if recs:
        cols = st.columns(len(recs))
        for i, (col, rec) in enumerate(zip(cols, recs), start=1):
            with col, st.container(border=True):
                st.markdown(f"### {i}")
                st.write(rec)

    # --- Heart rate over time ---
    st.subheader("Heart rate")
    hr = heart_rate_frame(logs)
    if hr.empty:
        st.info("No heart rate recorded yet.")
    else:
        fig = px.area(hr, x="date", y="heart_rate", markers=True,
                      labels={"date": "Date", "heart_rate": "BPM"})
        st.plotly_chart(fig, use_container_width=True)

    # --- Session history ---
    st.subheader("Training history")
    st.dataframe(history_frame(logs), use_container_width=True, hide_index=True)
