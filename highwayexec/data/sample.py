"""
Built-in sample portfolio shown before anything has been uploaded.
"""

from __future__ import annotations

from typing import List, Tuple

from highwayexec.domain import ProgressPoint, Project


def sample_data() -> Tuple[List[Project], List[ProgressPoint]]:
    projects = [
        Project(id="P1", name="Sample Project 1", length_km=50, state="MH"),
        Project(id="P2", name="Sample Project 2", length_km=30, state="GJ"),
    ]
    points = [
        ProgressPoint(
            project_id="P1",
            date="2025-07-01",
            planned_physical_pct=40,
            actual_physical_pct=38,
            cumulative_planned=100,
            cumulative_actual=95,
        ),
        ProgressPoint(
            project_id="P2",
            date="2025-07-01",
            planned_physical_pct=35,
            actual_physical_pct=28,
            cumulative_planned=80,
            cumulative_actual=70,
        ),
    ]
    return projects, points
