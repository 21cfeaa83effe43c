from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import streamlit as st

from highwayexec.domain import KPI
from highwayexec.ui.components.formatting import format_inr, format_number, format_percent


@dataclass
class KpiCard:
    label: str
    value: Optional[float] = None
    value_display: Optional[str] = None
    kind: str = "number"  # number | pct | inr
    decimals: int = 0
    help_text: Optional[str] = None


def _format_value(card: KpiCard) -> str:
    if card.value_display is not None:
        return card.value_display
    if card.kind == "inr":
        return format_inr(card.value)
    if card.kind == "pct":
        return format_percent(card.value, decimals=card.decimals or 1)
    return format_number(card.value, decimals=card.decimals)


def kpi_cards(kpi: KPI) -> list[KpiCard]:
    return [
        KpiCard("Total Projects", kpi.total_projects),
        KpiCard(
            "Weighted Physical Progress",
            kpi.weighted_physical_progress_pct,
            kind="pct",
            help_text="Actual physical % weighted by project length (km).",
        ),
        KpiCard("Financial Progress", kpi.financial_progress_pct, kind="pct"),
        KpiCard("Variance (₹)", kpi.total_variance_inr, kind="inr"),
        KpiCard("Variance %", kpi.variance_pct, kind="pct"),
        KpiCard(
            "Projects At Risk",
            kpi.at_risk_projects,
            help_text="Latest actual physical % trails plan by more than 5 points.",
        ),
    ]


def render_kpi_cards(cards: Sequence[KpiCard], columns: int = 3) -> None:
    """
    Render KPI cards in a responsive grid using Streamlit columns.
    """
    cards = list(cards)
    if not cards:
        st.info("No KPIs available for the current data source.")
        return

    columns = max(columns, 1)
    for idx in range(0, len(cards), columns):
        row_cards = cards[idx: idx + columns]
        cols = st.columns(len(row_cards))
        for col, card in zip(cols, row_cards):
            with col:
                st.metric(label=card.label, value=_format_value(card))
                if card.help_text:
                    st.caption(card.help_text)
