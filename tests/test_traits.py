from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np
import pytest

from helpers import assert_close, make_dot
from scad_dots.core import traits
from scad_dots.core.dot import Dot
from scad_dots.core.traits import IGNORE, MapDots, MinMaxCoord
from scad_dots.core.utils import Axis


@dataclass(frozen=True)
class Pair(MapDots, MinMaxCoord):
    first: Dot
    rest: List[Dot]
    label: str = field(default="pair", metadata=IGNORE)


def _pair() -> Pair:
    return Pair(make_dot(), [make_dot(pos=(2.0, 0.0, 0.0)), make_dot(pos=(0.0, -3.0, 1.0), size=2.0)])


def test_map_visits_nested_containers():
    moved = _pair().map_translate((1.0, 1.0, 1.0))
    assert isinstance(moved.rest, list)
    assert_close(moved.first.p000, (1.0, 1.0, 1.0))
    assert_close(moved.rest[1].p000, (1.0, -2.0, 2.0))
    assert moved.label == "pair"


def test_ignored_fields_are_not_measured():
    pair = _pair()
    assert len(pair.all_coords(Axis.X)) == 24
    assert pair.min_coord(Axis.Y) == -3.0
    assert pair.max_coord(Axis.X) == 3.0
    assert pair.bound_length(Axis.Z) == 3.0
    assert pair.midpoint(Axis.Z) == 1.5
    assert_close(pair.midpoint3(), (1.5, -1.0, 1.5))


def test_free_functions_accept_lists_and_points():
    dots = [make_dot(), make_dot(pos=(4.0, 4.0, 4.0))]
    assert traits.max_coord(dots, Axis.Y) == 5.0
    assert traits.min_coord((dots[1], np.array([-1.0, 0.0, 0.0])), Axis.X) == -1.0
    assert traits.bound_length(dots, Axis.Z) == 5.0
    assert_close(traits.midpoint3(dots), (2.5, 2.5, 2.5))
    assert traits.all_coords(np.array([1.0, 2.0]), Axis.Y) == [2.0]


def test_two_dimensional_points_have_no_z():
    with pytest.raises(ValueError):
        traits.all_coords(np.array([1.0, 2.0]), Axis.Z)


def test_map_dots_on_containers():
    dots = (make_dot(), make_dot(pos=(1.0, 0.0, 0.0)))
    mapped = traits.map_dots(dots, lambda d: d.translate((0.0, 0.0, 1.0)))
    assert isinstance(mapped, tuple)
    assert all(dot.p000[2] == 1.0 for dot in mapped)


def test_unknown_values_are_rejected():
    with pytest.raises(TypeError):
        traits.map_dots({"a": make_dot()}, lambda d: d)
    with pytest.raises(TypeError):
        traits.all_coords("dot", Axis.X)


def test_map_rotate_composes_rotations():
    from scad_dots.core.utils import axis_degrees

    rot = axis_degrees(Axis.Z, 90.0)
    turned = _pair().map_rotate(rot)
    assert_close(turned.rest[0].p000, (0.0, 2.0, 0.0))
    assert turned.first.rot.relative_eq(rot)
