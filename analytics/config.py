from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from analytics.periods import WEEK_STARTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsConfig:
    week_start: str = "SUN"          # "MON".."SUN"
    smoothing_alpha: float = 0.3     # level smoothing
    smoothing_beta: float = 0.1      # trend smoothing
    anomaly_threshold: float = 2.0   # |z| above this is flagged
    short_period: int = 7            # days, short moving average
    long_period: int = 30            # days, long moving average
    recent_days: int = 7
    insight_limit: int = 3
    history_size: int = 20           # undo steps kept

    def validate(self) -> "AnalyticsConfig":
        if self.week_start.upper() not in WEEK_STARTS:
            raise ValueError(f"week_start must be one of {', '.join(WEEK_STARTS)}, got {self.week_start!r}")
        for name in ("smoothing_alpha", "smoothing_beta"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.anomaly_threshold < 0:
            raise ValueError(f"anomaly_threshold must be non-negative, got {self.anomaly_threshold}")
        for name in ("short_period", "long_period", "recent_days", "insight_limit", "history_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        return self


def config_from_dict(section: Dict[str, Any]) -> AnalyticsConfig:
    known = {f.name for f in fields(AnalyticsConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown analytics settings: {', '.join(sorted(unknown))}")

    defaults = AnalyticsConfig()
    values = {}
    for name, value in section.items():
        # coerce to the type of the default so YAML ints work for float fields
        values[name] = type(getattr(defaults, name))(value)
    if "week_start" in values:
        values["week_start"] = values["week_start"].upper()
    return AnalyticsConfig(**values).validate()


def load_config(path: Path) -> AnalyticsConfig:
    """Load the ``analytics`` section of a YAML settings file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing {path}. Copy config/settings.yaml as a starting point.")

    y: Dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if "analytics" not in y:
        raise KeyError(f"{path.name} is missing the 'analytics' section")

    cfg = config_from_dict(y["analytics"] or {})
    logger.info("Loaded analytics settings from %s", path)
    return cfg
