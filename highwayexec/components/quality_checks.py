import pandas as pd
from typing import Dict, Any, Mapping

from highwayexec.data.mapping import DATE, PROJECT_ID, FeedSchema, resolve_header
from highwayexec.data.parser import ParseResult


def missing_values_summary(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["column", "missing_count", "missing_pct"])
    mv_series = df.isna().sum()
    # parsed cells are strings, so blanks are the usual form of "missing"
    for col in df.columns:
        if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
            blanks = df[col].apply(lambda v: isinstance(v, str) and v.strip() == "")
            if blanks.any():
                mv_series[col] += blanks.sum()
    mv = mv_series.reset_index()
    mv.columns = ["column", "missing_count"]
    mv["missing_pct"] = mv["missing_count"] / len(df) * 100
    return mv.sort_values("missing_pct", ascending=False)


def duplicate_observation_count(df: pd.DataFrame, id_col: str, date_col: str) -> int:
    """Rows repeating an earlier (project, date) pair. Reported, never merged."""
    if df.empty or not {id_col, date_col}.issubset(df.columns):
        return 0
    return int(df.duplicated(subset=[id_col, date_col]).sum())


def build_quality_overview(result: ParseResult, schema: FeedSchema, mapping: Mapping[str, str]) -> Dict[str, Any]:
    df = result.frame()
    id_col = resolve_header(schema, mapping, PROJECT_ID)
    date_col = resolve_header(schema, mapping, DATE)
    distinct = None
    if id_col and id_col in df.columns:
        ids = df[id_col].astype(str).str.strip()
        distinct = int(ids[ids != ""].nunique())
    return {
        "row_count": len(df),
        "column_count": len(result.headers),
        "parse_issues": len(result.errors),
        "distinct_projects": distinct,
        "duplicate_observations": duplicate_observation_count(df, id_col or "", date_col or ""),
    }
