from __future__ import annotations

import pytest

from helpers import assert_close, make_dot
from scad_dots.core.cylinder import Centroid, Cylinder, CylinderSpec, EndCenter
from scad_dots.core.extrusion import Extrusion
from scad_dots.core.tree import TreeObject
from scad_dots.core.utils import Axis, Corner1 as C1, axis_degrees


def test_cylinder_aligns():
    rot = axis_degrees(Axis.Y, 90.0)
    spec = CylinderSpec(pos=(0.0, 0.0, 0.0), align=Centroid(), diameter=2.0, height=6.0, rot=rot)
    cylinder = Cylinder.new(spec)
    assert_close(cylinder.pos(Centroid()), (0.0, 0.0, 0.0))
    assert_close(cylinder.pos(EndCenter(C1.P0)), (-3.0, 0.0, 0.0))
    assert_close(cylinder.pos(EndCenter(C1.P1)), (3.0, 0.0, 0.0))
    assert_close(cylinder.axis(), (6.0, 0.0, 0.0))
    assert_close(cylinder.unit_axis(), (1.0, 0.0, 0.0))
    assert cylinder.rot_degs() == pytest.approx(90.0)
    assert_close(cylinder.rot_axis(), (0.0, 1.0, 0.0))


def test_cylinder_is_a_value():
    spec = CylinderSpec(pos=(1.0, 2.0, 3.0), align=EndCenter(C1.P0), diameter=1.0, height=2.0)
    assert Cylinder.new(spec) == Cylinder.new(spec)
    assert Cylinder.new(spec).to_tree() == TreeObject(Cylinder.new(spec))
    with pytest.raises(ValueError):
        Cylinder.new(spec).center_bot_pos[0] = 0.0


def test_solids_hash_like_they_compare():
    spec = CylinderSpec(pos=(1.0, 2.0, 3.0), align=EndCenter(C1.P0), diameter=1.0, height=2.0)
    assert hash(Cylinder.new(spec)) == hash(Cylinder.new(spec))
    assert len({Cylinder.new(spec), Cylinder.new(spec)}) == 1

    def square():
        return Extrusion([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)], 0.0, 1.0)

    assert hash(square()) == hash(square())
    assert len({square(), square()}) == 1
    assert square().to_tree() in {square().to_tree()}


def test_extrusion_from_dot_centers():
    dots = [make_dot(pos=(0.0, 0.0, 5.0)), make_dot(pos=(4.0, 0.0, 5.0)), make_dot(pos=(0.0, 4.0, 9.0))]
    extrusion = Extrusion.from_dot_centers(dots, thickness=2.0, bottom_z=-1.0)
    assert len(extrusion.perimeter) == 3
    assert_close(extrusion.perimeter[1], (4.5, 0.5))
    assert extrusion.bottom_z == -1.0
    assert extrusion.thickness == 2.0
    assert extrusion == Extrusion([(0.5, 0.5), (4.5, 0.5), (0.5, 4.5)], -1.0, 2.0)


def test_extrusion_rejects_3d_points():
    with pytest.raises(ValueError):
        Extrusion([(0.0, 0.0, 0.0)], 0.0, 1.0)
