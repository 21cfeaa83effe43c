"""
Named field-mapping presets and the key-value stores that persist them.

Callers only see `load()` / `save()`; mapping and validation code never touch
storage directly.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from highwayexec.data.mapping import FINANCIAL_FEED, PHYSICAL_FEED, default_mapping

logger = logging.getLogger(__name__)


@dataclass
class MappingPreset:
    name: str
    physical_mapping: Dict[str, str] = field(default_factory=dict)
    financial_mapping: Dict[str, str] = field(default_factory=dict)


DEFAULT_PRESET = MappingPreset(
    name="Default (exact headers)",
    physical_mapping=default_mapping(PHYSICAL_FEED),
    financial_mapping=default_mapping(FINANCIAL_FEED),
)


def default_presets() -> List[MappingPreset]:
    return [
        MappingPreset(
            name=DEFAULT_PRESET.name,
            physical_mapping=dict(DEFAULT_PRESET.physical_mapping),
            financial_mapping=dict(DEFAULT_PRESET.financial_mapping),
        )
    ]


def find_preset(presets: Sequence[MappingPreset], name: str) -> Optional[MappingPreset]:
    return next((p for p in presets if p.name == name), None)


def upsert_preset(presets: Sequence[MappingPreset], preset: MappingPreset) -> List[MappingPreset]:
    """Drop any preset with the same name and append the new one at the end."""
    return [p for p in presets if p.name != preset.name] + [preset]


def _from_dict(raw: dict) -> MappingPreset:
    return MappingPreset(
        name=str(raw["name"]),
        physical_mapping={str(k): str(v) for k, v in (raw.get("physical_mapping") or {}).items()},
        financial_mapping={str(k): str(v) for k, v in (raw.get("financial_mapping") or {}).items()},
    )


class PresetStore:
    """Narrow persistence interface for mapping presets."""

    def load(self) -> List[MappingPreset]:
        raise NotImplementedError

    def save(self, presets: Sequence[MappingPreset]) -> bool:
        raise NotImplementedError


class MemoryPresetStore(PresetStore):
    def __init__(self, presets: Optional[Sequence[MappingPreset]] = None):
        self._presets = list(presets) if presets else default_presets()

    def load(self) -> List[MappingPreset]:
        return list(self._presets)

    def save(self, presets: Sequence[MappingPreset]) -> bool:
        self._presets = list(presets)
        return True


class JsonPresetStore(PresetStore):
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[MappingPreset]:
        if not self.path.exists():
            return default_presets()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            presets = [_from_dict(item) for item in raw]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Could not read mapping presets from %s: %s", self.path, exc)
            return default_presets()
        return presets or default_presets()

    def save(self, presets: Sequence[MappingPreset]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([asdict(p) for p in presets], indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.error("Could not save mapping presets to %s: %s", self.path, exc)
            return False
        logger.info("Saved %d mapping presets to %s", len(presets), self.path)
        return True
