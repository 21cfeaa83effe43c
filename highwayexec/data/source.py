"""
The active data source (sample or uploaded) and its cached KPI snapshot.

The composing app owns one DataSourceContext (kept in st.session_state).
Every switch replaces the active collections and the KPI snapshot together
under a lock, so readers never see a half-swapped state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Sequence, Tuple

from highwayexec.components.kpis import compute_kpis
from highwayexec.data.sample import sample_data
from highwayexec.domain import KPI, ProgressPoint, Project

logger = logging.getLogger(__name__)

SAMPLE = "sample"
UPLOADED = "uploaded"


@dataclass(frozen=True)
class SourceSnapshot:
    source: str
    projects: Tuple[Project, ...]
    points: Tuple[ProgressPoint, ...]
    kpi: KPI


class DataSourceContext:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._uploaded: Tuple[Tuple[Project, ...], Tuple[ProgressPoint, ...]] = ((), ())
        self._active = SourceSnapshot(SAMPLE, (), (), KPI.empty())

    def _activate(self, source: str, projects: Sequence[Project], points: Sequence[ProgressPoint]) -> None:
        # Caller holds the lock
        projects, points = tuple(projects), tuple(points)
        self._active = SourceSnapshot(source, projects, points, compute_kpis(projects, points))
        logger.info("Active source is now %s (%d projects, %d points)", source, len(projects), len(points))

    def snapshot(self) -> SourceSnapshot:
        with self._lock:
            return self._active

    @property
    def source(self) -> str:
        return self.snapshot().source

    @property
    def has_uploaded(self) -> bool:
        with self._lock:
            projects, points = self._uploaded
            return bool(projects or points)

    def load_samples(self) -> SourceSnapshot:
        projects, points = sample_data()
        with self._lock:
            self._activate(SAMPLE, projects, points)
            return self._active

    def switch_to_sample(self) -> SourceSnapshot:
        return self.load_samples()

    def set_uploaded(self, projects: Sequence[Project], points: Sequence[ProgressPoint]) -> SourceSnapshot:
        """Store a fresh upload and make it the active source."""
        with self._lock:
            self._uploaded = (tuple(projects), tuple(points))
            self._activate(UPLOADED, *self._uploaded)
            return self._active

    def switch_to_uploaded(self) -> bool:
        """Re-activate the last upload; returns False when nothing was uploaded."""
        with self._lock:
            projects, points = self._uploaded
            if not projects and not points:
                return False
            self._activate(UPLOADED, projects, points)
            return True

    def refresh_kpis(self) -> KPI:
        with self._lock:
            active = self._active
            self._activate(active.source, active.projects, active.points)
            return self._active.kpi
