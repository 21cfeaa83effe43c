"""
Application-wide configuration constants and helper utilities.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import streamlit as st


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("upload", "Upload & Map"),
    TabConfig("dashboard", "Dashboard"),
    TabConfig("summary", "Executive Summary"),
]

# Row-level validation only looks at this many rows per feed
PREVIEW_ROW_LIMIT = 50
MAX_CSV_SIZE_MB = 25

# Latest actual minus planned physical % below this marks a project at risk
AT_RISK_SLIPPAGE_PCT = -5.0
# Financial variance % beyond +/- this triggers a narrative sentence
VARIANCE_ALERT_PCT = 5.0

DEFAULT_PRESETS_PATH = Path.home() / ".highwayexec" / "mapping_presets.json"


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Try env first, then st.secrets (if available)."""
    val = os.getenv(name)
    if val:
        return val
    try:
        sec = getattr(st, "secrets", None)
        if sec:
            v = sec.get(name)  # type: ignore[index]
            return str(v) if v is not None else default
    except Exception:
        # st.secrets raises when no secrets.toml exists outside Streamlit Cloud
        pass
    return default


def presets_path() -> Path:
    raw = get_setting("HIGHWAYEXEC_PRESETS_PATH")
    return Path(raw).expanduser() if raw else DEFAULT_PRESETS_PATH


def log_level() -> str:
    return (get_setting("LOG_LEVEL", "INFO") or "INFO").upper()
