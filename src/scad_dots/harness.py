"""Regression harness comparing rendered models against stored OpenSCAD files.

Expected renderings live in ``<models_dir>/good_models/<name>.scad``. A model
that no longer matches is saved to ``<models_dir>/bad_models/<name>.scad`` for
inspection.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from scad_dots.errors import ModelMismatchError, TestError
from scad_dots.parse import first_difference
from scad_dots.render import RenderQuality, to_code

logger = logging.getLogger(__name__)

MAX_RELATIVE = 1e-5
DEFAULT_MODELS_DIR = Path("tests")


class Action(Enum):
    """What to do with a model. Only TEST belongs in committed tests."""

    TEST = "test"
    CREATE = "create"
    PREVIEW = "preview"


def _model_path(models_dir: Path, name: str, good: bool) -> Path:
    folder = "good_models" if good else "bad_models"
    return models_dir / folder / f"{name}.scad"


def _save(path: Path, code: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(code)
    logger.debug("Wrote %s", path)
    return path


def save_temp_file(models_dir: Path, label: str, name: str, code: str) -> Path:
    return _save(Path(models_dir) / "tmp" / f"{label}_{name}.scad", code)


def preview_model(thing, models_dir: Path = DEFAULT_MODELS_DIR, name: str = "") -> Path:
    """Render at low quality to a scratch file and return its path."""

    return save_temp_file(models_dir, "preview", name, to_code(thing, RenderQuality.LOW))


def check_model(
    name: str,
    action: Action,
    build: Callable[[], object],
    models_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Build a model and test, record or preview it according to `action`.

    Returns the path written by CREATE or PREVIEW, or None after a passing TEST.
    """

    models_dir = Path(models_dir) if models_dir is not None else DEFAULT_MODELS_DIR
    actual = to_code(build(), RenderQuality.LOW)

    if action is Action.PREVIEW:
        return save_temp_file(models_dir, "actual", name, actual)

    if action is Action.CREATE:
        path = _save(_model_path(models_dir, name, good=True), actual)
        raise TestError(f"Created {path}. Change the harness action back to Test.")

    expected = _model_path(models_dir, name, good=True).read_text()
    difference = first_difference(actual, expected, MAX_RELATIVE)
    if difference is not None:
        bad_path = _save(_model_path(models_dir, name, good=False), actual)
        raise ModelMismatchError(f"Models don't match ({difference}); saved incorrect model as {bad_path}")
    logger.debug("Model %s matches", name)
    return None
