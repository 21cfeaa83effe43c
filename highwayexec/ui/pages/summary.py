from __future__ import annotations

import logging

import streamlit as st

from highwayexec.reporting.export import (
    DOCX_FILENAME,
    DOCX_MIME,
    PDF_FILENAME,
    PDF_MIME,
    export_text_to_docx,
    export_text_to_pdf,
)
from highwayexec.reporting.tokens import (
    REPORT_TOKENS,
    TEMPLATES,
    build_token_values,
    generate_summary_draft,
    insert_token,
    resolve_tokens,
)
from highwayexec.ui.pages.context import PageContext

logger = logging.getLogger(__name__)

EDITOR_KEY = "hx_summary_text"
EXPORT_TITLE = "Executive Summary"


def render(context: PageContext) -> None:
    kpi = context.snapshot.kpi
    st.subheader("Executive Summary")
    st.caption("Editable draft with KPI tokens, templates, and export actions.")

    template = st.selectbox("Template", TEMPLATES, key="hx_summary_template")
    st.session_state.setdefault(EDITOR_KEY, "")

    col_editor, col_preview = st.columns(2)
    with col_editor:
        if st.button("Generate Draft"):
            st.session_state[EDITOR_KEY] = generate_summary_draft(kpi, template)
        token_cols = st.columns(4)
        for idx, token in enumerate(REPORT_TOKENS):
            with token_cols[idx % 4]:
                if st.button(f"{{{{{token}}}}}", key=f"hx_token_{token}"):
                    st.session_state[EDITOR_KEY] = insert_token(st.session_state[EDITOR_KEY], token)
        st.text_area(
            "Editor",
            key=EDITOR_KEY,
            height=400,
            placeholder="Write or generate your summary here. Use tokens like {{TotalProjects}}.",
        )

    resolved = resolve_tokens(st.session_state[EDITOR_KEY], build_token_values(kpi, template))
    with col_preview:
        st.markdown("**Preview**")
        st.text(resolved)
        try:
            docx_bytes = export_text_to_docx(EXPORT_TITLE, resolved)
            pdf_bytes = export_text_to_pdf(EXPORT_TITLE, resolved)
        except Exception as exc:
            logger.exception("Summary export failed")
            st.error(f"Export failed: {exc}")
            return
        st.download_button("Export PDF", data=pdf_bytes, file_name=PDF_FILENAME, mime=PDF_MIME)
        st.download_button("Export DOCX", data=docx_bytes, file_name=DOCX_FILENAME, mime=DOCX_MIME)
