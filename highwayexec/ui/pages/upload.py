from __future__ import annotations

from typing import Dict, MutableMapping, Optional

import streamlit as st

from highwayexec.components.quality_checks import build_quality_overview, missing_values_summary
from highwayexec.config import PREVIEW_ROW_LIMIT
from highwayexec.data.mapping import (
    FINANCIAL_FEED,
    PHYSICAL_FEED,
    FeedSchema,
    default_mapping,
    suggest_mapping,
    validate_feeds,
)
from highwayexec.data.normalizer import enrich_projects, to_domain
from highwayexec.data.parser import ParseResult, parse_csv_file
from highwayexec.data.presets import MappingPreset, find_preset, upsert_preset
from highwayexec.ui.pages.context import PageContext

RESULT_KEYS = {"physical": "hx_physical_result", "financial": "hx_financial_result"}
MAPPING_KEYS = {"physical": "hx_physical_mapping", "financial": "hx_financial_mapping"}


def _result(schema: FeedSchema) -> Optional[ParseResult]:
    return st.session_state.get(RESULT_KEYS[schema.kind])


def _mapping(schema: FeedSchema) -> Dict[str, str]:
    key = MAPPING_KEYS[schema.kind]
    if key not in st.session_state:
        st.session_state[key] = default_mapping(schema)
    return st.session_state[key]


def _reset_mapping_widgets(state: MutableMapping) -> None:
    # Widgets keep their own state; drop it so the session mapping shows
    for key in [k for k in state if str(k).startswith("hx_map_")]:
        del state[key]


def _parse_uploads(physical_file, financial_file) -> None:
    for schema, upload in ((PHYSICAL_FEED, physical_file), (FINANCIAL_FEED, financial_file)):
        result = parse_csv_file(upload)
        st.session_state[RESULT_KEYS[schema.kind]] = result
        # Keep the user's mapping but fill in any columns already named canonically
        mapping = dict(_mapping(schema))
        for name, header in suggest_mapping(schema, result.headers).items():
            if not mapping.get(name) or mapping[name] not in result.headers:
                mapping[name] = header
        st.session_state[MAPPING_KEYS[schema.kind]] = mapping
    _reset_mapping_widgets(st.session_state)


def _render_preview(schema: FeedSchema, result: ParseResult) -> None:
    st.markdown(f"#### {schema.label} Preview (first {PREVIEW_ROW_LIMIT})")
    st.dataframe(result.frame(limit=PREVIEW_ROW_LIMIT), use_container_width=True, height=320, hide_index=True)

    overview = build_quality_overview(result, schema, _mapping(schema))
    st.caption(
        f"{overview['row_count']:,} rows · {overview['column_count']} columns · "
        f"{overview['distinct_projects'] if overview['distinct_projects'] is not None else '—'} projects · "
        f"{overview['duplicate_observations']} repeated project/date rows"
    )
    if result.errors:
        with st.expander(f"{len(result.errors)} parse issue(s)"):
            for issue in result.errors:
                where = f"Row {issue.row + 1}" if issue.row >= 0 else "File"
                st.write(f"- **{where}** ({issue.code or 'Issue'}): {issue.message}")
    with st.expander("Missing values"):
        st.dataframe(missing_values_summary(result.frame()), use_container_width=True, hide_index=True)


def _render_presets(context: PageContext) -> None:
    presets = context.preset_store.load()
    names = [p.name for p in presets]
    col_select, col_save = st.columns([2, 2])
    with col_select:
        selected = st.selectbox("Preset", names, key="hx_preset_name")
        if st.button("Apply Preset"):
            preset = find_preset(presets, selected)
            if preset is not None:
                st.session_state[MAPPING_KEYS["physical"]] = dict(preset.physical_mapping)
                st.session_state[MAPPING_KEYS["financial"]] = dict(preset.financial_mapping)
                _reset_mapping_widgets(st.session_state)
                st.rerun()
    with col_save:
        new_name = st.text_input("Save current mapping as", key="hx_preset_new_name")
        if st.button("Save Preset", disabled=not new_name.strip()):
            preset = MappingPreset(
                name=new_name.strip(),
                physical_mapping=dict(_mapping(PHYSICAL_FEED)),
                financial_mapping=dict(_mapping(FINANCIAL_FEED)),
            )
            if context.preset_store.save(upsert_preset(presets, preset)):
                st.toast(f"Saved preset '{preset.name}'")
            else:
                st.error("Could not save the preset; see logs for details.")


def _render_mapping_selects(schema: FeedSchema, result: ParseResult) -> None:
    mapping = _mapping(schema)
    options = [""] + result.headers

    def _select(name: str) -> None:
        current = mapping.get(name, "")
        index = options.index(current) if current in options else 0
        mapping[name] = st.selectbox(
            name,
            options,
            index=index,
            key=f"hx_map_{schema.kind}_{name}",
            format_func=lambda v: v or "—",
        )

    st.markdown(f"**{schema.label} Required Fields**")
    for name in schema.required:
        _select(name)
    with st.expander(f"{schema.label} optional fields"):
        for name in schema.optional:
            _select(name)


def render(context: PageContext) -> None:
    st.subheader("Upload & Map Fields")
    st.caption("Upload Physical & Financial CSVs, map columns, and validate.")

    col_phys, col_fin = st.columns(2)
    with col_phys:
        physical_file = st.file_uploader("PhysicalProgress.csv", type=["csv"], key="hx_physical_file")
    with col_fin:
        financial_file = st.file_uploader("FinancialProgress.csv", type=["csv"], key="hx_financial_file")

    if st.button("Parse & Preview", type="primary", disabled=not (physical_file and financial_file)):
        with st.spinner("Parsing…"):
            _parse_uploads(physical_file, financial_file)

    physical = _result(PHYSICAL_FEED)
    financial = _result(FINANCIAL_FEED)
    if physical is None or financial is None:
        st.info("Upload both feeds and parse them to continue.")
        return

    col_phys, col_fin = st.columns(2)
    with col_phys:
        _render_preview(PHYSICAL_FEED, physical)
    with col_fin:
        _render_preview(FINANCIAL_FEED, financial)

    st.markdown("### Map Columns")
    _render_presets(context)
    col_phys, col_fin = st.columns(2)
    with col_phys:
        _render_mapping_selects(PHYSICAL_FEED, physical)
    with col_fin:
        _render_mapping_selects(FINANCIAL_FEED, financial)

    st.markdown("### Validation")
    report = validate_feeds(
        physical.rows,
        _mapping(PHYSICAL_FEED),
        financial.rows,
        _mapping(FINANCIAL_FEED),
    )
    if report.can_proceed:
        st.success("No blocking issues detected. You can proceed.")
    else:
        for message in report.errors:
            st.error(message)

    ready = report.can_proceed and not physical.is_empty and not financial.is_empty
    if st.button("Proceed to Dashboard", disabled=not ready):
        projects, points = to_domain(
            physical.rows,
            _mapping(PHYSICAL_FEED),
            financial.rows,
            _mapping(FINANCIAL_FEED),
        )
        projects = enrich_projects(projects, physical.rows, _mapping(PHYSICAL_FEED))
        context.source.set_uploaded(projects, points)
        st.toast(f"Loaded {len(projects)} projects from the uploaded feeds")
        st.rerun()
