"""
Canonical domain entities shared by the normaliser, KPI aggregation and reporting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Project:
    id: str
    name: Optional[str] = None
    state: Optional[str] = None
    corridor: Optional[str] = None
    contractor: Optional[str] = None
    length_km: Optional[float] = None
    baseline_cost: Optional[float] = None
    revised_cost: Optional[float] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class ProgressPoint:
    """One observation for a project on a date.

    Dates are kept as strings; "latest" comparisons are lexicographic, so
    feeds must use a sortable form such as ISO 8601 (YYYY-MM-DD).
    """

    project_id: str
    date: str
    planned_physical_pct: Optional[float] = None
    actual_physical_pct: Optional[float] = None
    planned_amount: Optional[float] = None
    actual_amount: Optional[float] = None
    cumulative_planned: Optional[float] = None
    cumulative_actual: Optional[float] = None
    funding_source: Optional[str] = None

    @property
    def has_physical(self) -> bool:
        return self.actual_physical_pct is not None or self.planned_physical_pct is not None


@dataclass(frozen=True)
class KPI:
    total_projects: int
    weighted_physical_progress_pct: float
    financial_progress_pct: float
    total_variance_inr: float
    variance_pct: float
    at_risk_projects: int

    @classmethod
    def empty(cls) -> "KPI":
        return cls(
            total_projects=0,
            weighted_physical_progress_pct=0.0,
            financial_progress_pct=0.0,
            total_variance_inr=0.0,
            variance_pct=0.0,
            at_risk_projects=0,
        )
