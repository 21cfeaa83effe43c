"""
Field mapping and validation for the two progress feeds.

A mapping ties each canonical field name to the header found in the user's
file. Both feeds share one validator; what differs is the FeedSchema passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from highwayexec.config import PREVIEW_ROW_LIMIT
from highwayexec.utils.validators import coerce_number

FieldMapping = Dict[str, str]
Row = Mapping[str, object]

PROJECT_ID = "ProjectID"
DATE = "Date"


@dataclass(frozen=True)
class FeedSchema:
    kind: str
    label: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()
    # Required numeric field -> (low, high); None means any finite number
    numeric_bounds: Dict[str, Optional[Tuple[float, float]]] = field(default_factory=dict)

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.required + self.optional


PHYSICAL_FEED = FeedSchema(
    kind="physical",
    label="Physical",
    required=(PROJECT_ID, DATE, "ActualPhysicalPct"),
    optional=(
        "ProjectName",
        "State",
        "Corridor",
        "Contractor",
        "LengthKm",
        "PlannedPhysicalPct",
        "Milestone",
    ),
    numeric_bounds={"ActualPhysicalPct": (0.0, 100.0)},
)

FINANCIAL_FEED = FeedSchema(
    kind="financial",
    label="Financial",
    required=(PROJECT_ID, DATE, "ActualAmount"),
    optional=("PlannedAmount", "CumulativePlanned", "CumulativeActual", "FundingSource"),
    numeric_bounds={"ActualAmount": None},
)

FEEDS: Tuple[FeedSchema, ...] = (PHYSICAL_FEED, FINANCIAL_FEED)


@dataclass
class ValidationReport:
    errors: List[str]

    @property
    def can_proceed(self) -> bool:
        return not self.errors


def default_mapping(schema: FeedSchema) -> FieldMapping:
    """Identity mapping for the required fields (header text equals field name)."""
    return {name: name for name in schema.required}


def suggest_mapping(schema: FeedSchema, headers: Sequence[str]) -> FieldMapping:
    by_lower = {h.strip().lower(): h for h in headers}
    mapping: FieldMapping = {}
    for name in schema.fields:
        if name in headers:
            mapping[name] = name
        elif name.lower() in by_lower:
            mapping[name] = by_lower[name.lower()]
    return mapping


def resolve_header(schema: FeedSchema, mapping: Mapping[str, str], name: str) -> Optional[str]:
    """Source header for a canonical field.

    Optional fields fall back to a header spelled like the canonical name, so
    files already using canonical headers work without mapping every column.
    """
    header = mapping.get(name) or ""
    if header:
        return header
    if name in schema.optional:
        return name
    return None


def cell(row: Row, header: Optional[str]) -> object:
    if not header:
        return None
    return row.get(header)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_mapping(schema: FeedSchema, mapping: Mapping[str, str]) -> List[str]:
    return [
        f"{schema.label}: missing mapping for {name}"
        for name in schema.required
        if not (mapping.get(name) or "").strip()
    ]


def validate_rows(
    schema: FeedSchema,
    mapping: Mapping[str, str],
    rows: Sequence[Row],
    limit: int = PREVIEW_ROW_LIMIT,
) -> List[str]:
    """Sanity-check the first `limit` rows; row numbers in messages are 1-based."""
    errors: List[str] = []
    id_header = resolve_header(schema, mapping, PROJECT_ID)
    date_header = resolve_header(schema, mapping, DATE)
    for idx, row in enumerate(rows[:limit]):
        prefix = f"{schema.label} row {idx + 1}"
        if _is_blank(cell(row, id_header)):
            errors.append(f"{prefix}: {PROJECT_ID} blank")
        if _is_blank(cell(row, date_header)):
            errors.append(f"{prefix}: {DATE} blank")
        for name, bounds in schema.numeric_bounds.items():
            value = coerce_number(cell(row, resolve_header(schema, mapping, name)))
            out_of_range = bounds is not None and value is not None and not (bounds[0] <= value <= bounds[1])
            if value is None or out_of_range:
                errors.append(f"{prefix}: {name} invalid")
    return errors


def validate_feeds(
    physical_rows: Sequence[Row],
    physical_mapping: Mapping[str, str],
    financial_rows: Sequence[Row],
    financial_mapping: Mapping[str, str],
    limit: int = PREVIEW_ROW_LIMIT,
) -> ValidationReport:
    """Mapping errors for both feeds first, then row errors, physical before financial."""
    errors = validate_mapping(PHYSICAL_FEED, physical_mapping)
    errors += validate_mapping(FINANCIAL_FEED, financial_mapping)
    errors += validate_rows(PHYSICAL_FEED, physical_mapping, physical_rows, limit)
    errors += validate_rows(FINANCIAL_FEED, financial_mapping, financial_rows, limit)
    return ValidationReport(errors)
