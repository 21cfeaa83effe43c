"""
Reusable helpers for rendering data tables with consistent configuration.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
import streamlit as st

from highwayexec.ui.components.formatting import format_inr, format_number, format_percent


def format_table(df: pd.DataFrame, column_config: Optional[Dict[str, Dict[str, str]]] = None) -> pd.DataFrame:
    formatted_df = df.copy()
    for column, config in (column_config or {}).items():
        if column not in formatted_df.columns:
            continue
        fmt_type = config.get("type")
        decimals = int(config.get("decimals", 1 if fmt_type == "percent" else 0))
        if fmt_type == "inr":
            formatted_df[column] = formatted_df[column].apply(format_inr)
        elif fmt_type == "percent":
            formatted_df[column] = formatted_df[column].apply(lambda v: format_percent(v, decimals=decimals))
        elif fmt_type == "number":
            formatted_df[column] = formatted_df[column].apply(lambda v: format_number(v, decimals=decimals))
    return formatted_df


def render_table(
    df: pd.DataFrame,
    column_config: Optional[Dict[str, Dict[str, str]]] = None,
    height: int = 400,
    export_file_name: Optional[str] = None,
    highlight_cols: Optional[List[str]] = None,
) -> None:
    if df.empty:
        st.info("No rows to display.")
        return

    formatted_df = format_table(df, column_config)
    dataframe_obj = formatted_df
    if highlight_cols:
        highlight_cols = [col for col in highlight_cols if col in df.columns]
        if highlight_cols:
            def _style_func(val):
                if not isinstance(val, str) or val in ("", "—"):
                    return ""
                if val.startswith("-"):
                    return "color: #d62728;"
                return "color: #2ca02c;"

            dataframe_obj = formatted_df.style.map(_style_func, subset=highlight_cols)

    st.dataframe(
        dataframe_obj,
        use_container_width=True,
        height=height,
        hide_index=True,
    )

    if export_file_name:
        csv_bytes = df.to_csv(index=False).encode("utf-8")
        st.download_button(
            "Download CSV",
            data=csv_bytes,
            file_name=export_file_name,
            mime="text/csv",
        )
