"""
Portfolio KPI aggregation over canonical projects and progress points.

Everything here is a pure function of its arguments: no caching, no I/O.
Divisions by zero resolve to 0 so sparse or empty feeds never produce NaN.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from typing import Dict, List, Optional, Sequence

import pandas as pd

from highwayexec.config import AT_RISK_SLIPPAGE_PCT
from highwayexec.domain import KPI, ProgressPoint, Project

POINT_COLUMNS = [f.name for f in fields(ProgressPoint)]
NUMERIC_POINT_COLUMNS = [
    "planned_physical_pct",
    "actual_physical_pct",
    "planned_amount",
    "actual_amount",
    "cumulative_planned",
    "cumulative_actual",
]

STATUS_ON_TRACK = "On Track"
STATUS_MINOR_DELAY = "Minor Delay"
STATUS_MAJOR_DELAY = "Major Delay"
STATUS_AT_RISK = "At Risk"
# Slippage below this is reported as At Risk rather than Major Delay
SEVERE_SLIPPAGE_PCT = -10.0


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def points_frame(points: Sequence[ProgressPoint]) -> pd.DataFrame:
    frame = pd.DataFrame([asdict(p) for p in points], columns=POINT_COLUMNS)
    for col in NUMERIC_POINT_COLUMNS:
        frame[col] = pd.to_numeric(frame[col], errors="coerce")
    frame["date"] = frame["date"].fillna("").astype(str)
    return frame


def latest_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Latest row per project by date string; equal dates keep the last row seen."""
    if frame.empty:
        return frame
    ordered = frame.sort_values("date", kind="mergesort")
    return ordered.groupby("project_id", sort=False).tail(1)


def latest_points(points: Sequence[ProgressPoint]) -> Dict[str, ProgressPoint]:
    latest = latest_frame(points_frame(points))
    return {points[idx].project_id: points[idx] for idx in latest.index}


def _weighted_physical_progress(projects: Sequence[Project], frame: pd.DataFrame) -> float:
    physical = frame[frame[["actual_physical_pct", "planned_physical_pct"]].notna().any(axis=1)]
    if physical.empty:
        return 0.0
    lengths = {p.id: p.length_km for p in projects if p.length_km is not None}
    # Projects without a length fall back to equal weighting
    weights = physical["project_id"].map(lengths).fillna(1.0)
    weighted_actual = float((physical["actual_physical_pct"].fillna(0.0) * weights).sum())
    return _safe_div(weighted_actual, float(weights.sum()))


def slippage(actual_pct: Optional[float], planned_pct: Optional[float]) -> float:
    """Actual minus planned physical %, treating missing sides as 0."""
    actual = 0.0 if actual_pct is None or pd.isna(actual_pct) else float(actual_pct)
    planned = 0.0 if planned_pct is None or pd.isna(planned_pct) else float(planned_pct)
    return actual - planned


def compute_kpis(projects: Sequence[Project], points: Sequence[ProgressPoint]) -> KPI:
    frame = points_frame(points)
    weighted_physical = _weighted_physical_progress(projects, frame)

    latest = latest_frame(frame)
    cum_actual = float(latest["cumulative_actual"].fillna(0.0).sum()) if not latest.empty else 0.0
    cum_planned = float(latest["cumulative_planned"].fillna(0.0).sum()) if not latest.empty else 0.0
    variance = cum_actual - cum_planned

    at_risk = 0
    if not latest.empty:
        diffs = latest["actual_physical_pct"].fillna(0.0) - latest["planned_physical_pct"].fillna(0.0)
        at_risk = int((diffs < AT_RISK_SLIPPAGE_PCT).sum())

    return KPI(
        total_projects=len(projects),
        weighted_physical_progress_pct=weighted_physical,
        financial_progress_pct=_safe_div(cum_actual, cum_planned) * 100,
        total_variance_inr=variance,
        variance_pct=_safe_div(variance, cum_planned) * 100,
        at_risk_projects=at_risk,
    )


def classify_status(diff: Optional[float]) -> Optional[str]:
    if diff is None:
        return None
    if diff >= 0:
        return STATUS_ON_TRACK
    if diff >= AT_RISK_SLIPPAGE_PCT:
        return STATUS_MINOR_DELAY
    if diff >= SEVERE_SLIPPAGE_PCT:
        return STATUS_MAJOR_DELAY
    return STATUS_AT_RISK


def _optional(value) -> Optional[float]:
    return None if value is None or pd.isna(value) else float(value)


def project_status_table(projects: Sequence[Project], points: Sequence[ProgressPoint]) -> pd.DataFrame:
    """One row per project with its latest observation and slippage status."""
    latest = latest_points(points)
    records: List[dict] = []
    for project in projects:
        pt = latest.get(project.id)
        variance = None
        status = None
        if pt is not None:
            if pt.cumulative_actual is not None and pt.cumulative_planned is not None:
                variance = pt.cumulative_actual - pt.cumulative_planned
            if pt.has_physical:
                status = classify_status(slippage(pt.actual_physical_pct, pt.planned_physical_pct))
        records.append(
            {
                "Project ID": project.id,
                "Name": project.name,
                "Last Update": pt.date if pt else None,
                "Physical %": _optional(pt.actual_physical_pct) if pt else None,
                "Planned %": _optional(pt.planned_physical_pct) if pt else None,
                "Cum. Actual": _optional(pt.cumulative_actual) if pt else None,
                "Cum. Planned": _optional(pt.cumulative_planned) if pt else None,
                "Variance": variance,
                "Status": status,
            }
        )
    return pd.DataFrame(
        records,
        columns=[
            "Project ID",
            "Name",
            "Last Update",
            "Physical %",
            "Planned %",
            "Cum. Actual",
            "Cum. Planned",
            "Variance",
            "Status",
        ],
    )


def financial_series(points: Sequence[ProgressPoint]) -> pd.DataFrame:
    """Cumulative actual and planned amounts summed across projects per date."""
    frame = points_frame(points)
    frame = frame[frame["date"] != ""]
    if frame.empty:
        return pd.DataFrame(columns=["date", "cumulative_actual", "cumulative_planned"])
    grouped = frame.groupby("date").agg(
        cumulative_actual=("cumulative_actual", lambda s: s.sum(min_count=1)),
        cumulative_planned=("cumulative_planned", lambda s: s.sum(min_count=1)),
    )
    return grouped.sort_index().reset_index()


def physical_series(points: Sequence[ProgressPoint]) -> pd.DataFrame:
    """Mean actual and planned physical % per date over points that report them."""
    frame = points_frame(points)
    frame = frame[(frame["date"] != "") & frame[["actual_physical_pct", "planned_physical_pct"]].notna().any(axis=1)]
    if frame.empty:
        return pd.DataFrame(columns=["date", "actual", "planned"])
    grouped = frame.groupby("date").agg(
        actual=("actual_physical_pct", "mean"),
        planned=("planned_physical_pct", "mean"),
    )
    return grouped.sort_index().reset_index()
