from __future__ import annotations
import copy
from pathlib import Path

import yaml

from logic.errors import InvalidFormat
from logic.ratios import DEFAULT_RATIOS, FALLBACK_RATIO, parse_ratio
from logic.registry import DEFAULT_STAFF_TYPES

DEFAULTS = {
    "staff_types": DEFAULT_STAFF_TYPES,
    "default_ratios": DEFAULT_RATIOS,
    "fallback_ratio": FALLBACK_RATIO,
    "carry_forward_census": True,
}


def _check_ratio(label: str, value) -> str:
    # YAML reads an unquoted 1:3 as a sexagesimal int, so ratios must be quoted strings
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a quoted 'number:number' string. Found: {value!r}")
    try:
        return str(parse_ratio(value))
    except InvalidFormat as exc:
        raise ValueError(f"{label}: {exc}. Found: {value!r}") from exc


def load_settings(path: str = "config/settings.yaml") -> dict:
    """
    Load console settings from settings.yaml.
    Missing file or keys fall back to built-in defaults.
    Returns dict with keys: staff_types, default_ratios, fallback_ratio, carry_forward_census
    """
    settings = copy.deepcopy(DEFAULTS)
    p = Path(path)
    if not p.exists():
        return settings

    with open(p, "r") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path} must contain a mapping at the top level.")

    if "staff_types" in cfg:
        types = cfg["staff_types"] or []
        for entry in types:
            if not isinstance(entry, dict) or not {"title", "code"} <= set(entry):
                raise ValueError(f"Each staff_types entry needs title and code. Found: {entry!r}")
        settings["staff_types"] = [{"title": str(e["title"]), "code": str(e["code"])} for e in types]

    if "default_ratios" in cfg:
        ratios = cfg["default_ratios"] or {}
        settings["default_ratios"] = {
            str(code).strip().upper(): _check_ratio(f"default_ratios.{code}", ratio)
            for code, ratio in ratios.items()
        }

    if "fallback_ratio" in cfg:
        settings["fallback_ratio"] = _check_ratio("fallback_ratio", cfg["fallback_ratio"])

    if "carry_forward_census" in cfg:
        value = cfg["carry_forward_census"]
        if not isinstance(value, bool):
            raise ValueError(f"carry_forward_census must be true or false. Found: {value!r}")
        settings["carry_forward_census"] = value

    return settings
