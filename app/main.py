import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import datetime
from pathlib import Path

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go

from analytics.config import AnalyticsConfig, load_config
from analytics.events import BUDGET_ALERT, EventBus, register_default_handlers
from analytics.frames import (
    anomaly_frame,
    budget_frame,
    category_frame,
    monthly_series,
    seasonal_frame,
    transactions_frame,
)
from analytics.history import HistoryManager, delete_expense_action
from analytics.services import AnalyticsService, default_analyzers
from analytics.streak import streak_message
from analytics.transforms import add_transaction, load_seed, remove_transaction

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

ROOT = Path(__file__).resolve().parent.parent

st.set_page_config(page_title="Expense Analytics", layout="wide")

settings_path = ROOT / "config" / "settings.yaml"
config = load_config(settings_path) if settings_path.exists() else AnalyticsConfig()

seed_path = st.sidebar.text_input("Snapshot", value=str(ROOT / "data" / "seed.json"))
categories, transactions, budgets = load_seed(seed_path)

if "history" not in st.session_state:
    st.session_state.history = HistoryManager(config.history_size)
    st.session_state.removed = ()
history = st.session_state.history

snapshot = transactions
for tid in st.session_state.removed:
    snapshot = remove_transaction(snapshot, tid)

st.sidebar.markdown("### Edit")
to_remove = st.sidebar.selectbox("Remove transaction", [""] + [t.id for t in snapshot])
if st.sidebar.button("Remove", disabled=not to_remove):
    removed = next(t for t in snapshot if t.id == to_remove)
    history.add_action(delete_expense_action(removed))
    st.session_state.removed += (removed.id,)
    snapshot = remove_transaction(snapshot, removed.id)

u1, u2 = st.sidebar.columns(2)
if u1.button("Undo", disabled=not history.can_undo()):
    action = history.undo()
    st.session_state.removed = tuple(tid for tid in st.session_state.removed if tid != action.data.id)
    snapshot = add_transaction(snapshot, action.data)
if u2.button("Redo", disabled=not history.can_redo()):
    action = history.redo()
    st.session_state.removed += (action.data.id,)
    snapshot = remove_transaction(snapshot, action.data.id)

as_of = st.sidebar.date_input("As of", value=datetime.now().date())
now = datetime.combine(as_of, datetime.now().time())

bus = register_default_handlers(EventBus())
payload = {"transactions": snapshot, "budgets": budgets, "now": now, "week_start": config.week_start}
for out in bus.publish(BUDGET_ALERT, payload):
    for alert in out.get("alerts", []):
        st.sidebar.warning(alert)

report = AnalyticsService(default_analyzers(config)).run(snapshot, budgets, now)
result = report["result"]
stats = result["stats"]

if report["validation"]:
    st.sidebar.warning(f"{len(report['validation'])} invalid transaction(s) skipped")
    st.sidebar.dataframe(report["validation"], use_container_width=True)

st.title("Expense Analytics")

k1, k2, k3, k4, k5 = st.columns(5)
k1.metric("Today", f"{stats.today:,.0f}")
k2.metric("This Week", f"{stats.this_week:,.0f}")
mom = result["month_over_month"]
k3.metric("This Month", f"{stats.this_month:,.0f}", f"{mom.change_percent:+.1f}% vs last month")
k4.metric("Year to Date", f"{stats.year_to_date:,.0f}")
k5.metric("Avg / Day", f"{stats.average_daily:,.0f}")

streak = result["streak"]
st.caption(f"Logging streak: {streak.current_streak} day(s). {streak_message(streak.current_streak)}")

tab_trend, tab_budget, tab_patterns, tab_data = st.tabs(["Forecast", "Budgets", "Patterns", "Transactions"])

with tab_trend:
    prediction = result["prediction"]
    trend = result["trend"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Next Month Forecast", f"{prediction.value:,.0f}", prediction.trend)
    c2.metric("Forecast Accuracy", f"{prediction.accuracy * 100:.0f}%")
    c3.metric("Trend", f"{trend.direction} ({trend.strength})", f"{trend.slope:+.2f} / day")

    monthly = monthly_series(result["monthly_totals"])
    fig_ts = go.Figure()
    fig_ts.add_trace(go.Scatter(x=list(monthly.index), y=monthly.values, mode="lines+markers", name="Actual"))
    if len(monthly):
        next_label = "Forecast"
        fig_ts.add_trace(go.Scatter(
            x=[next_label, next_label],
            y=[prediction.confidence_interval.lower, prediction.confidence_interval.upper],
            mode="lines", name="Confidence", line=dict(dash="dot"),
        ))
        fig_ts.add_trace(go.Scatter(x=[next_label], y=[prediction.value], mode="markers", name="Forecast"))
    fig_ts.update_layout(title="Monthly Spending", template="plotly_dark")
    st.plotly_chart(fig_ts, use_container_width=True)

    vol = result["volatility"]
    momentum = result["momentum"]
    v1, v2, v3 = st.columns(3)
    v1.metric("Consistency", f"{vol.consistency_score:.0f}/100", vol.volatility_level)
    v2.metric("Short MA", f"{momentum.short_ma:,.0f}", momentum.signal)
    v3.metric("Long MA", f"{momentum.long_ma:,.0f}")

with tab_budget:
    df_budget = budget_frame(stats.budget_status)
    if df_budget.empty:
        st.info("No active budgets.")
    else:
        fig = px.bar(df_budget, x="Category", y=["Spent", "Limit"], barmode="group",
                     title="Spending vs Budget (this month)", template="plotly_dark")
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(df_budget, use_container_width=True)

with tab_patterns:
    col_left, col_right = st.columns(2)
    with col_left:
        df_cat = category_frame(stats.by_category)
        if not df_cat.empty:
            st.plotly_chart(px.pie(df_cat, names="Category", values="Amount", title="By Category"),
                            use_container_width=True)
    with col_right:
        df_days = seasonal_frame(result["seasonal"])
        if not df_days.empty:
            st.plotly_chart(px.bar(df_days, x="Day", y="Average", title="Average Spend by Weekday",
                                   template="plotly_dark"), use_container_width=True)

    st.subheader("Anomalies")
    df_anom = anomaly_frame(result["anomalies"])
    if df_anom.empty:
        st.success("No unusual transactions.")
    else:
        st.dataframe(df_anom, use_container_width=True)

    for line in result["insights"]:
        st.write(f"- {line}")

with tab_data:
    st.dataframe(transactions_frame(snapshot), use_container_width=True)
