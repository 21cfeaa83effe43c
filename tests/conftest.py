import pytest

from highwayexec.domain import ProgressPoint, Project

PHYSICAL_CSV = """ProjectID,ProjectName,LengthKm,Date,PlannedPhysicalPct,ActualPhysicalPct
P1,Pune Ring Road,50,2025-07-01,40,38
P2,Surat Bypass,30,2025-07-01,35,28
"""

FINANCIAL_CSV = """ProjectID,Date,PlannedAmount,ActualAmount,CumulativePlanned,CumulativeActual,FundingSource
P1,2025-07-01,10,9,100,95,NHAI
P2,2025-07-01,8,7,80,70,
"""


@pytest.fixture
def canonical_projects():
    return [Project(id="P1", length_km=50), Project(id="P2", length_km=30)]


@pytest.fixture
def canonical_points():
    return [
        ProgressPoint(
            project_id="P1",
            date="2025-07-01",
            actual_physical_pct=38,
            planned_physical_pct=40,
            cumulative_actual=95,
            cumulative_planned=100,
        ),
        ProgressPoint(
            project_id="P2",
            date="2025-07-01",
            actual_physical_pct=28,
            planned_physical_pct=35,
            cumulative_actual=70,
            cumulative_planned=80,
        ),
    ]


@pytest.fixture
def physical_csv():
    return PHYSICAL_CSV


@pytest.fixture
def financial_csv():
    return FINANCIAL_CSV
