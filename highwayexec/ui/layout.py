"""
Layout helpers for the Streamlit application (page config, sidebar, session objects).
"""

from __future__ import annotations

import streamlit as st

from highwayexec.config import presets_path
from highwayexec.data.presets import JsonPresetStore, PresetStore
from highwayexec.data.source import SAMPLE, UPLOADED, DataSourceContext

SOURCE_KEY = "hx_source"
PRESET_STORE_KEY = "hx_preset_store"


def setup_page() -> None:
    """Set Streamlit page configuration."""
    st.set_page_config(
        page_title="HighwayExec",
        layout="wide",
        page_icon=":construction:",
    )


def get_source() -> DataSourceContext:
    """Per-session data source, seeded with the sample portfolio."""
    if SOURCE_KEY not in st.session_state:
        source = DataSourceContext()
        source.load_samples()
        st.session_state[SOURCE_KEY] = source
    return st.session_state[SOURCE_KEY]


def get_preset_store() -> PresetStore:
    if PRESET_STORE_KEY not in st.session_state:
        st.session_state[PRESET_STORE_KEY] = JsonPresetStore(presets_path())
    return st.session_state[PRESET_STORE_KEY]


def sidebar_source_switch(source: DataSourceContext) -> None:
    st.sidebar.header("Data Source")
    st.sidebar.caption(f"Source: {source.source}")
    col_sample, col_uploaded = st.sidebar.columns(2)
    with col_sample:
        if st.button(
            "Sample Data",
            type="primary" if source.source == SAMPLE else "secondary",
            use_container_width=True,
        ):
            source.switch_to_sample()
            st.rerun()
    with col_uploaded:
        if st.button(
            "Uploaded Data",
            type="primary" if source.source == UPLOADED else "secondary",
            disabled=not source.has_uploaded,
            help=None if source.has_uploaded else "No uploaded data found",
            use_container_width=True,
        ):
            source.switch_to_uploaded()
            st.rerun()
