from __future__ import annotations

from dataclasses import dataclass

from highwayexec.data.presets import PresetStore
from highwayexec.data.source import DataSourceContext, SourceSnapshot


@dataclass
class PageContext:
    source: DataSourceContext
    snapshot: SourceSnapshot
    preset_store: PresetStore
