"""Persistent per-document flow settings.

Each document path maps to a FlowSettings record: the viewport preset,
header and bottom reserves, the spread policy and the spread last on
screen, so reopening a document shows it the same way. Records live in
one JSON file in the OS-appropriate config directory.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .geometry import VIEWPORT_PRESETS, ViewportGeometry

logger = logging.getLogger(__name__)

MAX_RESERVED_LINES = 20


def _is_count(value: Any, limit: Optional[int] = None) -> bool:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        return False
    return limit is None or value <= limit


def validate_setting(key: str, value: Any) -> bool:
    """Check a stored value's type and range. Unknown keys are accepted."""
    if value is None:
        return True
    if key == 'preset':
        return isinstance(value, str) and value in VIEWPORT_PRESETS
    if key == 'right_first':
        return isinstance(value, bool)
    if key in ('reserved_lines', 'bottom_reserve_lines'):
        return _is_count(value, MAX_RESERVED_LINES)
    if key == 'spread_start':
        return _is_count(value) and value % 2 == 0
    return True


@dataclass(frozen=True)
class FlowSettings:
    """How one document is laid out.

    A reserve of None means the preset's own reserve.
    """
    preset: str = "terminal"
    right_first: bool = False
    reserved_lines: Optional[int] = None
    bottom_reserve_lines: Optional[int] = None
    spread_start: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FlowSettings:
        """Build settings from a stored record, dropping invalid values."""
        values = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            value = data[field.name]
            if value is None or not validate_setting(field.name, value):
                logger.debug(f"Ignoring stored {field.name}={value!r}")
                continue
            values[field.name] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def base_viewport(self) -> ViewportGeometry:
        return VIEWPORT_PRESETS[self.preset]

    def resolved_reserves(self) -> tuple[int, int]:
        """Header and bottom reserves, falling back to the preset's."""
        base = self.base_viewport()
        top = base.reserved_lines if self.reserved_lines is None else self.reserved_lines
        bottom = (base.bottom_reserve_lines if self.bottom_reserve_lines is None
                  else self.bottom_reserve_lines)
        return top, bottom

    def with_spread(self, spread_start: int) -> FlowSettings:
        return replace(self, spread_start=spread_start)


class SettingsPersistence:
    """FlowSettings records in a JSON file keyed by absolute document path."""

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = platformdirs.user_config_dir("pageflow")
        self.settings_file = Path(config_dir) / "settings.json"
        self._records: Optional[Dict[str, Any]] = None

    def _read_records(self) -> Dict[str, Any]:
        if self._records is None:
            self._records = {}
            try:
                data = json.loads(self.settings_file.read_text(encoding='utf-8'))
            except FileNotFoundError:
                data = {}
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Could not load settings from {self.settings_file}: {e}")
                data = {}
            if isinstance(data, dict):
                self._records = data
            else:
                logger.warning("Settings file has invalid format (not a dict), ignoring")
        return self._records

    def load(self, document_path: Optional[str]) -> FlowSettings:
        """Settings saved for a document, or the defaults."""
        if document_path is None:
            return FlowSettings()
        record = self._read_records().get(os.path.abspath(document_path))
        if not isinstance(record, dict):
            return FlowSettings()
        return FlowSettings.from_dict(record)

    def save(self, document_path: Optional[str], settings: FlowSettings) -> bool:
        """Store a document's settings, replacing the file atomically.

        Returns:
            True if the settings were written, False otherwise.
        """
        if document_path is None:
            return False
        records = dict(self._read_records())
        records[os.path.abspath(document_path)] = settings.to_dict()
        temp_file = self.settings_file.with_suffix('.tmp')
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            temp_file.write_text(json.dumps(records, indent=2), encoding='utf-8')
            temp_file.replace(self.settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self.settings_file}: {e}")
            temp_file.unlink(missing_ok=True)
            return False
        self._records = records
        return True

    def clear_cache(self) -> None:
        self._records = None


_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
