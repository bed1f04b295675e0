from __future__ import annotations

import numpy as np

from scad_dots.core.dot import Dot, DotSpec
from scad_dots.core.utils import R3, Corner3 as C3


def assert_close(actual, expected, rel: float = 1e-4) -> None:
    """Compare points with a relative tolerance and a matching absolute floor near zero."""

    assert np.allclose(np.asarray(actual, dtype=float), np.asarray(expected, dtype=float), rtol=rel, atol=rel)


def make_dot(pos=(0.0, 0.0, 0.0), size: float = 1.0, rot: R3 | None = None, align=C3.P000, **kwargs) -> Dot:
    return Dot.new(DotSpec(pos=pos, align=align, size=size, rot=rot or R3.identity(), **kwargs))
