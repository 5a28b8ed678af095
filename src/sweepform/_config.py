from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".sweepform"
CONFIG_FILE = CONFIG_DIR / "sweepform.cfg"
DEFAULT_CONFIG = {
    "_comment": "Valid units: millimeters (default), meters, inches. Model coordinates and closure_tolerance are in those units; STL export converts to millimeters.",
    "units": "millimeters",
    "closure_tolerance": 1e-6,
    "workers": 1,
}
_UNIT_INFO: Dict[str, Dict[str, Any]] = {
    "millimeters": {"label": "mm", "scale_to_mm": 1.0},
    "meters": {"label": "m", "scale_to_mm": 1000.0},
    "inches": {"label": "in", "scale_to_mm": 25.4},
}
_UNIT_ALIASES = {
    "millimeter": "millimeters",
    "millimeters": "millimeters",
    "mm": "millimeters",
    "meter": "meters",
    "meters": "meters",
    "m": "meters",
    "inch": "inches",
    "inches": "inches",
    "in": "inches",
}


@dataclass(frozen=True)
class UnitSettings:
    """Resolved units from sweepform.cfg."""

    name: str
    label: str
    scale_to_mm: float


@dataclass(frozen=True)
class LoftSettings:
    """Engine defaults from sweepform.cfg."""

    closure_tolerance: float
    workers: int | None


def ensure_user_config() -> None:
    """Ensure ~/.sweepform/sweepform.cfg exists with sane defaults."""

    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    if CONFIG_FILE.exists():
        return

    try:
        CONFIG_FILE.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        loaded = json.loads(CONFIG_FILE.read_text())
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read %s; using defaults.", CONFIG_FILE)
        return DEFAULT_CONFIG.copy()
    if not isinstance(loaded, dict):
        logger.warning("%s must hold a JSON object; using defaults.", CONFIG_FILE)
        return DEFAULT_CONFIG.copy()
    return loaded


def _normalize_units(value: str) -> str | None:
    key = value.strip().lower()
    if key in _UNIT_INFO:
        return key
    return _UNIT_ALIASES.get(key)


def _resolve_units(raw_config: Dict[str, Any]) -> UnitSettings:
    raw_units = str(raw_config.get("units", DEFAULT_CONFIG["units"]))
    normalized = _normalize_units(raw_units)
    if normalized is None:
        logger.warning("Unknown units %r in %s; using millimeters.", raw_units, CONFIG_FILE)
        normalized = DEFAULT_CONFIG["units"]

    info = _UNIT_INFO[normalized]
    return UnitSettings(name=normalized, label=info["label"], scale_to_mm=info["scale_to_mm"])


def get_unit_settings() -> UnitSettings:
    """Return the configured units and the conversion to millimeters."""

    return _resolve_units(_load_user_config())


def get_loft_settings() -> LoftSettings:
    """Return closure tolerance and worker count for loft builds."""

    raw_config = _load_user_config()

    tolerance = raw_config.get("closure_tolerance", DEFAULT_CONFIG["closure_tolerance"])
    try:
        tolerance = float(tolerance)
    except (TypeError, ValueError):
        tolerance = math.nan
    if not math.isfinite(tolerance) or tolerance < 0:
        logger.warning("Invalid closure_tolerance %r; using %g.", raw_config.get("closure_tolerance"), DEFAULT_CONFIG["closure_tolerance"])
        tolerance = DEFAULT_CONFIG["closure_tolerance"]

    workers = raw_config.get("workers", DEFAULT_CONFIG["workers"])
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        logger.warning("Invalid workers %r; running serially.", workers)
        workers = None

    return LoftSettings(closure_tolerance=tolerance, workers=workers)
