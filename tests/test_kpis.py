import pytest

from highwayexec.components.kpis import (
    STATUS_AT_RISK,
    STATUS_MAJOR_DELAY,
    STATUS_MINOR_DELAY,
    STATUS_ON_TRACK,
    classify_status,
    compute_kpis,
    financial_series,
    latest_points,
    physical_series,
    project_status_table,
)
from highwayexec.domain import KPI, ProgressPoint, Project


def test_two_project_portfolio(canonical_projects, canonical_points):
    kpi = compute_kpis(canonical_projects, canonical_points)

    assert kpi.total_projects == 2
    assert kpi.weighted_physical_progress_pct == pytest.approx((38 * 50 + 28 * 30) / 80)
    assert kpi.weighted_physical_progress_pct == pytest.approx(34.25)
    assert kpi.financial_progress_pct == pytest.approx(100 * 165 / 180)
    assert kpi.total_variance_inr == pytest.approx(-15)
    assert kpi.variance_pct == pytest.approx(100 * -15 / 180)
    assert kpi.at_risk_projects == 1


def test_empty_inputs_give_zero_snapshot():
    assert compute_kpis([], []) == KPI.empty()


def test_no_physical_points_means_zero_progress():
    projects = [Project(id="P1", length_km=10)]
    points = [ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=5, cumulative_planned=10)]

    kpi = compute_kpis(projects, points)

    assert kpi.weighted_physical_progress_pct == 0
    assert kpi.financial_progress_pct == pytest.approx(50)


def test_zero_planned_sum_gives_zero_ratios():
    projects = [Project(id="P1")]
    points = [ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=40)]

    kpi = compute_kpis(projects, points)

    assert kpi.financial_progress_pct == 0
    assert kpi.variance_pct == 0
    assert kpi.total_variance_inr == pytest.approx(40)


@pytest.mark.parametrize(
    "actual, planned, at_risk",
    [
        (34, 40, 1),  # -6
        (36, 40, 0),  # -4
        (35, 40, 0),  # exactly -5 is not at risk
        (None, 10, 1),  # missing actual counts as 0
        (None, None, 0),
    ],
)
def test_at_risk_threshold_is_strict(actual, planned, at_risk):
    points = [ProgressPoint(project_id="P1", date="2025-07-01", actual_physical_pct=actual, planned_physical_pct=planned)]

    assert compute_kpis([Project(id="P1")], points).at_risk_projects == at_risk


def test_latest_point_by_date_drives_financials():
    points = [
        ProgressPoint(project_id="P1", date="2025-07-15", cumulative_actual=30, cumulative_planned=40),
        ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=10, cumulative_planned=20),
    ]

    kpi = compute_kpis([Project(id="P1")], points)

    assert kpi.total_variance_inr == pytest.approx(-10)
    assert kpi.financial_progress_pct == pytest.approx(75)
    assert latest_points(points)["P1"].date == "2025-07-15"


def test_equal_dates_keep_last_seen_point():
    first = ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=1, cumulative_planned=2)
    second = ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=3, cumulative_planned=4)

    assert latest_points([first, second])["P1"] is second
    assert compute_kpis([Project(id="P1")], [first, second]).total_variance_inr == pytest.approx(-1)


def test_result_does_not_depend_on_point_order(canonical_projects, canonical_points):
    later = [
        ProgressPoint(project_id="P1", date="2025-06-01", actual_physical_pct=20, planned_physical_pct=25,
                      cumulative_actual=50, cumulative_planned=55),
    ]
    points = canonical_points + later

    assert compute_kpis(canonical_projects, points) == compute_kpis(canonical_projects, list(reversed(points)))


def test_planned_only_points_count_towards_weight():
    projects = [Project(id="P1", length_km=10), Project(id="P2", length_km=10)]
    points = [
        ProgressPoint(project_id="P1", date="2025-07-01", actual_physical_pct=50, planned_physical_pct=50),
        ProgressPoint(project_id="P2", date="2025-07-01", planned_physical_pct=40),
    ]

    assert compute_kpis(projects, points).weighted_physical_progress_pct == pytest.approx(25)


def test_missing_length_falls_back_to_equal_weight():
    projects = [Project(id="P1"), Project(id="P2", length_km=3)]
    points = [
        ProgressPoint(project_id="P1", date="2025-07-01", actual_physical_pct=10),
        ProgressPoint(project_id="P2", date="2025-07-01", actual_physical_pct=50),
        ProgressPoint(project_id="P3", date="2025-07-01", actual_physical_pct=90),
    ]

    # weights 1, 3 and 1 for a point whose project is unknown
    assert compute_kpis(projects, points).weighted_physical_progress_pct == pytest.approx((10 + 150 + 90) / 5)


def test_each_point_counts_once_in_weight():
    projects = [Project(id="P1", length_km=2)]
    points = [
        ProgressPoint(project_id="P1", date="2025-07-01", actual_physical_pct=10, planned_physical_pct=20),
        ProgressPoint(project_id="P1", date="2025-07-15", actual_physical_pct=30, planned_physical_pct=35),
    ]

    assert compute_kpis(projects, points).weighted_physical_progress_pct == pytest.approx(20)


@pytest.mark.parametrize(
    "diff, status",
    [
        (3, STATUS_ON_TRACK),
        (0, STATUS_ON_TRACK),
        (-2, STATUS_MINOR_DELAY),
        (-5, STATUS_MINOR_DELAY),
        (-7, STATUS_MAJOR_DELAY),
        (-10, STATUS_MAJOR_DELAY),
        (-12, STATUS_AT_RISK),
        (None, None),
    ],
)
def test_classify_status(diff, status):
    assert classify_status(diff) == status


def test_project_status_table(canonical_projects, canonical_points):
    table = project_status_table(canonical_projects + [Project(id="P3")], canonical_points)

    assert list(table["Project ID"]) == ["P1", "P2", "P3"]
    p1, p2, p3 = table.to_dict("records")
    assert p1["Variance"] == pytest.approx(-5)
    assert p1["Status"] == STATUS_MINOR_DELAY
    assert p2["Status"] == STATUS_MAJOR_DELAY
    assert p2["Last Update"] == "2025-07-01"
    assert p3["Last Update"] is None
    assert p3["Status"] is None


def test_financial_series_sums_per_date():
    points = [
        ProgressPoint(project_id="P1", date="2025-07-15", cumulative_actual=30, cumulative_planned=40),
        ProgressPoint(project_id="P2", date="2025-07-15", cumulative_actual=5),
        ProgressPoint(project_id="P1", date="2025-07-01", cumulative_actual=10, cumulative_planned=20),
        ProgressPoint(project_id="P1", date="", cumulative_actual=99),
    ]

    series = financial_series(points)

    assert list(series["date"]) == ["2025-07-01", "2025-07-15"]
    assert list(series["cumulative_actual"]) == [10, 35]
    assert list(series["cumulative_planned"]) == [20, 40]


def test_physical_series_averages_reported_values():
    points = [
        ProgressPoint(project_id="P1", date="2025-07-01", actual_physical_pct=10, planned_physical_pct=20),
        ProgressPoint(project_id="P2", date="2025-07-01", actual_physical_pct=30),
        ProgressPoint(project_id="P2", date="2025-07-01", cumulative_actual=5),
    ]

    series = physical_series(points)

    assert list(series["date"]) == ["2025-07-01"]
    assert series.loc[0, "actual"] == pytest.approx(20)
    assert series.loc[0, "planned"] == pytest.approx(20)
