# ui_components.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from models import SavingsProjection

SCORE_BANDS: Tuple[Tuple[int, str, str], ...] = (
    (90, "Excellent Solar Potential", "#34d399"),
    (80, "Great Solar Potential", "#22d3ee"),
    (70, "Good Solar Potential", "#fbbf24"),
    (60, "Moderate Solar Potential", "#f59e0b"),
)
LIMITED_BAND = ("Limited Solar Potential", "#f87171")


def score_label(score: int) -> Tuple[str, str]:
    """(label, color) for a sun score."""
    for floor, label, color in SCORE_BANDS:
        if score >= floor:
            return label, color
    return LIMITED_BAND


def savings_frame(projection: SavingsProjection) -> pd.DataFrame:
    """Long-format frame of the cost curves, ready for px.line."""
    rows = []
    for row in projection.yearly_cost_series:
        rows.append({"Year": row.year, "Series": "Utility (cumulative)", "Cost": row.cumulative_utility_cost_usd})
        rows.append({"Year": row.year, "Series": "Solar (one-time)", "Cost": row.flat_solar_cost_usd})
    return pd.DataFrame(rows)


def stat_card(title: str, value: str, caption: str | None = None):
    with st.container(border=True):
        st.metric(title, value)
        if caption:
            st.caption(caption)


def stat_row(items: Iterable[Tuple[str, str, str | None]]):
    items = list(items)
    cols = st.columns(len(items))
    for col, (title, value, caption) in zip(cols, items):
        with col:
            stat_card(title, value, caption)


def sun_score_gauge(score: int, sun_hours: float):
    label, color = score_label(score)
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=score,
            number={"suffix": "/100"},
            gauge={"axis": {"range": [0, 100]}, "bar": {"color": color}},
            title={"text": f"SunScore<br><span style='font-size:0.8em'>{label}</span>"},
        )
    )
    fig.update_layout(height=260, margin=dict(l=20, r=20, t=60, b=10))
    st.plotly_chart(fig, width="stretch")
    st.caption(f"{sun_hours:.1f} peak sun hours per day (NREL)")


def savings_chart(projection: SavingsProjection):
    fig = px.line(
        savings_frame(projection),
        x="Year",
        y="Cost",
        color="Series",
        labels={"Cost": "Cumulative cost (USD)"},
        title="Utility bills vs. going solar",
    )
    fig.update_layout(yaxis_tickprefix="$", yaxis_tickformat=",.0f", legend_title_text="")
    st.plotly_chart(fig, width="stretch")


MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def monthly_production_frame(monthly_kwh: Sequence[float]) -> pd.DataFrame:
    return pd.DataFrame({"Month": list(MONTHS[: len(monthly_kwh)]), "kWh": list(monthly_kwh)})


def monthly_production_chart(monthly_kwh: Sequence[float]):
    fig = px.bar(
        monthly_production_frame(monthly_kwh),
        x="Month",
        y="kWh",
        title="Estimated monthly production (NREL PVWatts)",
    )
    fig.update_layout(yaxis_tickformat=",.0f")
    st.plotly_chart(fig, width="stretch")


def faq_list(faqs: Iterable[Dict[str, str]]):
    for item in faqs:
        with st.expander(item["question"]):
            st.write(item["answer"])


def link_button_card(
    title: str,
    body: str,
    on_click: Callable | None = None,
    args: tuple = (),
    key: str | None = None,
):
    """Card with a unique button key to avoid duplicate element IDs."""
    with st.container(border=True):
        st.markdown(f"**{title}**")
        st.caption(body)
        if on_click:
            btn_key = key or f"btn_open_{abs(hash(title))}"
            st.button("Open calculator", on_click=on_click, args=args, key=btn_key, width="stretch")


def note(msg: str):
    st.info(msg)
