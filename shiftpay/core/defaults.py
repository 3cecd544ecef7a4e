from __future__ import annotations

from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_BUILTIN_DEFAULTS: dict = {
    "base_wage": 190,
    "overtime_rule": {
        "threshold_hours": 8,
        "level1_rate": 1.33,
        "level2_rate": 1.67,
        "level3_rate": 2.67,
    },
    "pay_cycle": {"cycles_per_month": 1, "paydays": [5]},
    "holiday_markers": {"typhoon": "颱風", "national": "國定"},
}


def _load_defaults() -> dict:
    path = CONFIG_DIR / "defaults.yaml"
    if not path.exists():
        return dict(_BUILTIN_DEFAULTS)
    with path.open("r", encoding="utf-8") as fp:
        loaded = yaml.safe_load(fp) or {}
    merged = dict(_BUILTIN_DEFAULTS)
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


DEFAULTS = _load_defaults()

DEFAULT_PAYDAY = 5

HOLIDAY_MARKERS: dict[str, str] = dict(DEFAULTS["holiday_markers"])
