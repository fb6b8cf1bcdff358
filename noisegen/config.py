"""
ent — Configuration
Defaults, overridden by persisted settings, then environment, then CLI flags.
"""

import os
import logging
from dataclasses import dataclass, fields, replace
from typing import Optional, Dict, Any

from noisegen import database as db
from noisegen.filter_graph import parse_resolution

logger = logging.getLogger(__name__)

# ─── Defaults ────────────────────────────────────────────────────────────────
DEFAULT_ENGINE = "ffmpeg"
DEFAULT_VIEWER = "ristretto"
DEFAULT_WM_HELPER = "wmctrl"
DEFAULT_RESOLUTION = "800x600"
DEFAULT_KEEP = 20
DEFAULT_OUTPUT_DIR = os.path.join(os.path.expanduser("~"), "Pictures", "ent")

# Environment variable -> settings field
ENV_VARS = {
    "ENT_OUTPUT_DIR": "output_dir",
    "ENT_RESOLUTION": "resolution",
    "ENT_ENGINE": "engine",
    "ENT_VIEWER": "viewer",
    "ENT_WM_HELPER": "wm_helper",
    "ENT_KEEP": "keep",
}


@dataclass(frozen=True)
class Settings:
    output_dir: str = DEFAULT_OUTPUT_DIR
    resolution: str = DEFAULT_RESOLUTION
    engine: str = DEFAULT_ENGINE
    viewer: str = DEFAULT_VIEWER
    wm_helper: str = DEFAULT_WM_HELPER
    keep: int = DEFAULT_KEEP


_FIELD_NAMES = {f.name for f in fields(Settings)}


def _coerce(name: str, value: Any) -> Any:
    if name == "keep":
        keep = int(value)
        if keep < 0:
            raise ValueError(f"keep must be >= 0, got {keep}")
        return keep
    if name == "resolution":
        parse_resolution(value)
        return str(value).strip()
    if name == "output_dir":
        return os.path.expanduser(str(value))
    return str(value)


def load_settings(overrides: Optional[Dict[str, Any]] = None, use_db: bool = True) -> Settings:
    """
    Resolve the effective settings.

    Args:
        overrides: CLI values; None entries are ignored
        use_db: Read persisted settings from the state database

    Returns:
        Frozen Settings instance
    """
    values: Dict[str, Any] = {}

    if use_db:
        for key, value in db.get_all_settings().items():
            if key in _FIELD_NAMES and value != "":
                values[key] = value

    for env_name, field_name in ENV_VARS.items():
        env_value = os.environ.get(env_name)
        if env_value:
            values[field_name] = env_value

    for key, value in (overrides or {}).items():
        if key in _FIELD_NAMES and value is not None:
            values[key] = value

    coerced = {key: _coerce(key, value) for key, value in values.items()}
    settings = replace(Settings(), **coerced)
    logger.debug("Effective settings: %s", settings)
    return settings


def save_settings(settings: Settings):
    """Persist every field so later runs pick them up as defaults."""
    for f in fields(Settings):
        db.save_setting(f.name, getattr(settings, f.name))
