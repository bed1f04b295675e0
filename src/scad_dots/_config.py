from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from scad_dots.render import RenderQuality

CONFIG_ENV_VAR = "SCAD_DOTS_CONFIG_DIR"
CONFIG_FILE_NAME = "scad_dots.cfg"
DEFAULT_CONFIG = {
    "_comment": "quality: low, medium or high. max_relative: tolerance used by `scad-dots check`.",
    "quality": "low",
    "max_relative": 1e-5,
}


@dataclass(frozen=True)
class RenderSettings:
    """Resolved render settings from scad_dots.cfg."""

    quality: RenderQuality
    max_relative: float


def config_dir() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".scad_dots"


def config_file() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def ensure_user_config() -> None:
    """Ensure the config file exists with sane defaults."""

    directory = config_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    path = directory / CONFIG_FILE_NAME
    if path.exists():
        return

    try:
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        loaded = json.loads(config_file().read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(loaded, dict):
        return DEFAULT_CONFIG.copy()
    return loaded


def _normalize_quality(value: Any) -> RenderQuality | None:
    key = str(value).strip().lower()
    try:
        return RenderQuality(key)
    except ValueError:
        return None


def _normalize_max_relative(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number > 0:
        return None
    return number


def get_render_settings() -> RenderSettings:
    """Return the configured render quality and comparison tolerance."""

    raw_config = _load_user_config()
    quality = _normalize_quality(raw_config.get("quality", DEFAULT_CONFIG["quality"]))
    if quality is None:
        quality = RenderQuality(DEFAULT_CONFIG["quality"])

    max_relative = _normalize_max_relative(raw_config.get("max_relative", DEFAULT_CONFIG["max_relative"]))
    if max_relative is None:
        max_relative = DEFAULT_CONFIG["max_relative"]

    return RenderSettings(quality=quality, max_relative=max_relative)
