"""
Turn mapped feed rows into canonical Project and ProgressPoint collections.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from highwayexec.data.mapping import (
    DATE,
    FINANCIAL_FEED,
    PHYSICAL_FEED,
    PROJECT_ID,
    FeedSchema,
    Row,
    cell,
    resolve_header,
)
from highwayexec.domain import ProgressPoint, Project
from highwayexec.utils.validators import coerce_number

logger = logging.getLogger(__name__)

# Physical-feed columns that describe the project rather than an observation
PROJECT_ATTRIBUTES: Dict[str, str] = {
    "ProjectName": "name",
    "State": "state",
    "Corridor": "corridor",
    "Contractor": "contractor",
    "LengthKm": "length_km",
}
NUMERIC_ATTRIBUTES = {"length_km"}


def _text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class _Reader:
    """Reads canonical fields out of raw rows for one feed."""

    def __init__(self, schema: FeedSchema, mapping: Mapping[str, str]):
        self.schema = schema
        self.headers = {name: resolve_header(schema, mapping, name) for name in schema.fields}

    def raw(self, row: Row, name: str) -> object:
        return cell(row, self.headers.get(name))

    def number(self, row: Row, name: str) -> Optional[float]:
        return coerce_number(self.raw(row, name))

    def project_id(self, row: Row) -> str:
        return _text(self.raw(row, PROJECT_ID)) or ""

    def date(self, row: Row) -> str:
        return _text(self.raw(row, DATE)) or ""


def _physical_point(reader: _Reader, row: Row, project_id: str) -> ProgressPoint:
    return ProgressPoint(
        project_id=project_id,
        date=reader.date(row),
        actual_physical_pct=reader.number(row, "ActualPhysicalPct"),
        planned_physical_pct=reader.number(row, "PlannedPhysicalPct"),
    )


def _financial_point(reader: _Reader, row: Row, project_id: str) -> ProgressPoint:
    return ProgressPoint(
        project_id=project_id,
        date=reader.date(row),
        actual_amount=reader.number(row, "ActualAmount"),
        planned_amount=reader.number(row, "PlannedAmount"),
        cumulative_actual=reader.number(row, "CumulativeActual"),
        cumulative_planned=reader.number(row, "CumulativePlanned"),
        funding_source=_text(reader.raw(row, "FundingSource")),
    )


def to_domain(
    physical_rows: Sequence[Row],
    physical_mapping: Mapping[str, str],
    financial_rows: Sequence[Row],
    financial_mapping: Mapping[str, str],
) -> Tuple[List[Project], List[ProgressPoint]]:
    """Build projects (deduplicated by id) and one point per usable row.

    Rows whose project id is blank after trimming are dropped without error.
    Points keep input order, physical feed first.
    """
    projects: Dict[str, Project] = {}
    points: List[ProgressPoint] = []
    dropped = 0

    feeds = (
        (_Reader(PHYSICAL_FEED, physical_mapping), physical_rows, _physical_point),
        (_Reader(FINANCIAL_FEED, financial_mapping), financial_rows, _financial_point),
    )
    for reader, rows, build_point in feeds:
        for row in rows:
            project_id = reader.project_id(row)
            if not project_id:
                dropped += 1
                continue
            if project_id not in projects:
                projects[project_id] = Project(id=project_id)
            points.append(build_point(reader, row, project_id))

    if dropped:
        logger.debug("Dropped %d rows with blank %s", dropped, PROJECT_ID)
    logger.info("Normalised %d projects and %d progress points", len(projects), len(points))
    return list(projects.values()), points


def enrich_projects(
    projects: Sequence[Project],
    physical_rows: Sequence[Row],
    physical_mapping: Mapping[str, str],
) -> List[Project]:
    """Fill descriptive attributes from the first physical row that carries them.

    Returns new Project records in the same order; identity is untouched and
    existing values are never overwritten.
    """
    reader = _Reader(PHYSICAL_FEED, physical_mapping)
    found: Dict[str, Dict[str, object]] = {}
    for row in physical_rows:
        project_id = reader.project_id(row)
        if not project_id:
            continue
        attrs = found.setdefault(project_id, {})
        for column, attr in PROJECT_ATTRIBUTES.items():
            if attr in attrs:
                continue
            value = reader.number(row, column) if attr in NUMERIC_ATTRIBUTES else _text(reader.raw(row, column))
            if value is not None:
                attrs[attr] = value

    enriched = []
    for project in projects:
        updates = {
            attr: value
            for attr, value in found.get(project.id, {}).items()
            if getattr(project, attr) is None
        }
        enriched.append(replace(project, **updates) if updates else project)
    return enriched
