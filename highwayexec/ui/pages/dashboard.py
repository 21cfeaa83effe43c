from __future__ import annotations

import streamlit as st

from highwayexec.components.kpis import financial_series, physical_series, project_status_table
from highwayexec.ui.components.charts import line_chart, render_plotly
from highwayexec.ui.components.kpi import kpi_cards, render_kpi_cards
from highwayexec.ui.components.tables import render_table
from highwayexec.ui.pages.context import PageContext

TABLE_FORMAT = {
    "Physical %": {"type": "percent"},
    "Planned %": {"type": "percent"},
    "Cum. Actual": {"type": "inr"},
    "Cum. Planned": {"type": "inr"},
    "Variance": {"type": "inr"},
}


def render(context: PageContext) -> None:
    snapshot = context.snapshot
    st.subheader("Dashboard")
    st.caption(f"KPIs, trends and projects for the {snapshot.source} data source.")

    render_kpi_cards(kpi_cards(snapshot.kpi), columns=3)

    col_fin, col_phys = st.columns(2)
    with col_fin:
        fin = financial_series(snapshot.points)
        if fin.empty:
            st.info("No cumulative financial observations.")
        else:
            render_plotly(
                line_chart(
                    fin.rename(columns={"cumulative_actual": "Actual", "cumulative_planned": "Planned"}),
                    x="date",
                    y=["Actual", "Planned"],
                    title="Cumulative Disbursement",
                    yaxis_title="₹",
                )
            )
    with col_phys:
        phys = physical_series(snapshot.points)
        if phys.empty:
            st.info("No physical progress observations.")
        else:
            render_plotly(
                line_chart(
                    phys.rename(columns={"actual": "Actual", "planned": "Planned"}),
                    x="date",
                    y=["Actual", "Planned"],
                    title="Average Physical Progress",
                    yaxis_title="%",
                )
            )

    st.markdown("#### Projects")
    table = project_status_table(snapshot.projects, snapshot.points)
    render_table(
        table,
        column_config=TABLE_FORMAT,
        export_file_name="highwayexec_projects.csv",
        highlight_cols=["Variance"],
    )
