"""
Executive-summary drafting and `{{Token}}` substitution.

Drafts contain placeholders rather than values so an author can edit the text
and still have it refreshed from the current KPI snapshot at export time.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping

from highwayexec.config import VARIANCE_ALERT_PCT
from highwayexec.domain import KPI
from highwayexec.ui.components.formatting import MISSING, format_inr, format_percent

TOKEN_PATTERN = re.compile(r"\{\{(.*?)\}\}")

REPORT_TOKENS: List[str] = [
    "ReportPeriod",
    "TotalProjects",
    "WeightedPhysicalProgress",
    "FinancialProgressPct",
    "TotalVarianceINR",
    "VariancePct",
    "ProjectsAtRisk",
]

DEFAULT_TEMPLATE = "Monthly Program Summary"
TEMPLATES: List[str] = [
    DEFAULT_TEMPLATE,
    "Quarterly Financial Review",
    "Delivery Risk Snapshot",
]

ADVERSE_VARIANCE_NOTE = (
    "Significant adverse financial variance observed; corrective cashflow alignment is recommended."
)
FAVORABLE_VARIANCE_NOTE = (
    "Favorable variance against plan; ensure planned commitments are balanced with delivery capacity."
)
SLIPPAGE_NOTE = "{count} project(s) show persistent schedule slippage and require focused expediting."


def generate_summary_draft(kpi: KPI, period: str = DEFAULT_TEMPLATE) -> str:
    lines = [
        f"# {period}",
        "",
        "Total Projects: {{TotalProjects}}",
        "Weighted Physical Progress: {{WeightedPhysicalProgress}}",
        "Financial Progress: {{FinancialProgressPct}}",
        "Total Variance: {{TotalVarianceINR}} ({{VariancePct}})",
        "Projects At Risk: {{ProjectsAtRisk}}",
        "",
    ]
    if kpi.variance_pct > VARIANCE_ALERT_PCT:
        lines.append(ADVERSE_VARIANCE_NOTE)
    elif kpi.variance_pct < -VARIANCE_ALERT_PCT:
        lines.append(FAVORABLE_VARIANCE_NOTE)
    if kpi.at_risk_projects > 0:
        lines.append(SLIPPAGE_NOTE.format(count=kpi.at_risk_projects))
    return "\n".join(lines)


def resolve_tokens(text: str, values: Mapping[str, str]) -> str:
    """Replace each `{{Name}}` with its value, or an em dash when unknown.

    Single pass: substituted values are inserted literally and never rescanned.
    """
    return TOKEN_PATTERN.sub(lambda m: values.get(m.group(1).strip(), MISSING), text)


def build_token_values(kpi: KPI, period: str = DEFAULT_TEMPLATE) -> Dict[str, str]:
    return {
        "ReportPeriod": period,
        "TotalProjects": str(kpi.total_projects),
        "WeightedPhysicalProgress": format_percent(kpi.weighted_physical_progress_pct),
        "FinancialProgressPct": format_percent(kpi.financial_progress_pct),
        "TotalVarianceINR": format_inr(kpi.total_variance_inr),
        "VariancePct": format_percent(kpi.variance_pct),
        "ProjectsAtRisk": str(kpi.at_risk_projects),
    }


def insert_token(text: str, token: str) -> str:
    separator = "" if not text or text.endswith("\n") else " "
    return f"{text}{separator}{{{{{token}}}}}"
