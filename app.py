import highwayexec.bootstrap_env  # must be first to set env/secrets and logging
import streamlit as st

from highwayexec.config import TABS
from highwayexec.ui.layout import get_preset_store, get_source, setup_page, sidebar_source_switch
from highwayexec.ui.pages import dashboard, summary, upload
from highwayexec.ui.pages.context import PageContext


PAGE_RENDERERS = {
    "upload": upload.render,
    "dashboard": dashboard.render,
    "summary": summary.render,
}


def main() -> None:
    setup_page()
    st.title("HighwayExec: Project Progress & Executive Summary")

    source = get_source()
    sidebar_source_switch(source)

    context = PageContext(
        source=source,
        snapshot=source.snapshot(),
        preset_store=get_preset_store(),
    )

    tab_labels = [tab.label for tab in TABS]
    streamlit_tabs = st.tabs(tab_labels)

    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(context)


if __name__ == "__main__":
    main()
