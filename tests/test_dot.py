from __future__ import annotations

import numpy as np
import pytest

from helpers import assert_close, make_dot
from scad_dots.core.dot import Dot, DotAlign, DotCorner, DotMidpoint, DotShape, DotSpec, mark
from scad_dots.core.tree import TreeObject
from scad_dots.core.utils import R3, Axis, Corner3 as C3, CubeFace, Plane, axis_degrees, rotate
from scad_dots.errors import MidpointError, RotationError

ROTATIONS = [
    R3.identity(),
    axis_degrees(Axis.Z, 30.0),
    axis_degrees((1.0, 1.0, 0.0), 120.0),
    axis_degrees((0.2, -1.0, 3.0), 250.0),
]

ALIGNS = [
    C3.P000,
    C3.P111,
    DotAlign.centroid(),
    DotAlign.center_face(CubeFace.Y1),
    DotAlign.midpoint(C3.P010, C3.P101),
]


@pytest.mark.parametrize("rot", ROTATIONS)
def test_corner_positions_follow_rotation(rot):
    dot = make_dot(pos=(1.0, -2.0, 3.0), size=2.5, rot=rot)
    for corner in C3.all():
        expected = dot.p000 + rotate(rot, corner.unit_vec() * 2.5)
        assert_close(dot.pos(corner), expected)


@pytest.mark.parametrize("rot", ROTATIONS)
@pytest.mark.parametrize("align", ALIGNS)
def test_spec_round_trip(rot, align):
    pos = (4.0, 5.0, -6.0)
    dot = make_dot(pos=pos, size=3.0, rot=rot, align=align)
    assert_close(dot.pos(align), pos)


def test_centroid_of_axis_aligned_dot():
    dot = make_dot(size=2.0)
    assert_close(dot.pos(DotAlign.centroid()), (1.0, 1.0, 1.0))
    assert_close(dot.pos(DotAlign.center_face(CubeFace.Z1)), (1.0, 1.0, 2.0))


def test_midpoint_requires_two_corners():
    assert DotAlign.midpoint(DotCorner(C3.P000), C3.P111) == DotAlign.centroid()
    with pytest.raises(MidpointError):
        DotAlign.midpoint(DotAlign.centroid(), DotAlign.center_face(CubeFace.X0))
    with pytest.raises(MidpointError):
        DotMidpoint(DotAlign.centroid(), DotAlign.centroid())


def test_dots_hash_like_they_compare():
    assert hash(make_dot(pos=(1.0, 2.0, 3.0))) == hash(make_dot(pos=(1.0, 2.0, 3.0)))
    assert len({make_dot(), make_dot(), make_dot(size=2.0)}) == 2


def test_default_is_unit_cube_at_origin():
    dot = Dot.default()
    assert dot.shape is DotShape.CUBE
    assert dot.size == 1.0
    assert_close(dot.p000, (0.0, 0.0, 0.0))


def test_dots_are_immutable_values():
    dot = make_dot()
    with pytest.raises(ValueError):
        dot.p000[0] = 5.0
    moved = dot.translate((1.0, 0.0, 0.0))
    assert_close(dot.p000, (0.0, 0.0, 0.0))
    assert_close(moved.p000, (1.0, 0.0, 0.0))
    assert make_dot() == make_dot()
    assert moved != dot


def test_min_max_coord_of_cube():
    dot = make_dot(size=2.0)
    for axis in Axis:
        assert dot.min_coord(axis) == 0.0
        assert dot.max_coord(axis) == 2.0
        assert dot.bound_length(axis) == 2.0


def test_rotate_turns_about_global_origin():
    dot = make_dot(pos=(2.0, 0.0, 0.0))
    turned = dot.rotate(axis_degrees(Axis.Z, 90.0))
    assert_close(turned.p000, (0.0, 2.0, 0.0))
    assert turned.rot.relative_eq(axis_degrees(Axis.Z, 90.0))


def test_rotate_to_replaces_rotation():
    dot = make_dot(rot=axis_degrees(Axis.X, 30.0))
    target = axis_degrees(Axis.Y, 45.0)
    assert dot.rotate_to(target).rot.relative_eq(target)


def test_translate_to_and_with_coord():
    dot = make_dot(size=2.0)
    moved = dot.translate_to((5.0, 5.0, 5.0), DotAlign.centroid())
    assert_close(moved.p000, (4.0, 4.0, 4.0))
    assert_close(dot.with_coord(7.0, Axis.Y).p000, (0.0, 7.0, 0.0))
    other = make_dot(pos=(3.0, 4.0, 5.0))
    assert_close(dot.copy_to_other_dim(other, Axis.Z).p000, (0.0, 0.0, 5.0))


def test_rot_helpers():
    dot = make_dot(rot=axis_degrees(Axis.Y, 60.0))
    assert dot.rot_degs() == pytest.approx(60.0)
    assert_close(dot.rot_axis(), (0.0, 1.0, 0.0))
    assert_close(dot.dim_unit_vec(Axis.Z), rotate(dot.rot, Axis.Z))
    assert_close(make_dot().rot_axis(), (0.0, 0.0, 1.0))


def test_dist_is_between_anchors():
    assert make_dot().dist(make_dot(pos=(3.0, 4.0, 0.0))) == pytest.approx(5.0)


def test_drop_lands_flat_below_centroid():
    dot = make_dot(pos=(1.0, 2.0, 10.0), size=2.0, rot=axis_degrees(Axis.X, 45.0), align=DotAlign.centroid())
    dropped = dot.drop(0.0, DotShape.CYLINDER)
    assert dropped.shape is DotShape.CYLINDER
    assert dropped.rot == R3.identity()
    assert_close(dropped.pos(DotAlign.center_face(CubeFace.Z0)), (1.0, 2.0, 0.0))
    assert dot.drop_cylinder(0.0) == dropped


def test_drop_along_direction():
    dot = make_dot(pos=(0.0, 0.0, 4.0), size=2.0, align=DotAlign.centroid())
    dropped = dot.drop_along((1.0, 0.0, -1.0), 0.0)
    assert dropped.shape is DotShape.CUBE
    assert_close(dropped.pos(DotAlign.center_face(CubeFace.Z0)), (4.0, 0.0, 0.0))


def test_drop_to_plane_rests_on_plane():
    plane = Plane(z_offset=1.0, xz_slope=0.5, yz_slope=0.0)
    dot = make_dot(pos=(2.0, 0.0, 10.0), size=1.0, align=DotAlign.centroid())
    dropped = dot.drop_to_plane(plane, DotAlign.centroid())
    bottom = dropped.pos(DotAlign.center_face(CubeFace.Z0))
    assert_close(bottom, (2.0, 0.0, 2.0))
    assert_close(rotate(dropped.rot, Axis.Z), plane.normal())


def test_translate_along_until():
    dot = make_dot(pos=(0.0, 0.0, 0.0))
    moved = dot.translate_along_until((0.0, 1.0, 1.0), Axis.Z, 3.0, C3.P111)
    assert_close(moved.pos(C3.P111), (1.0, 3.0, 3.0))


def test_explode_radially_keeps_rotation_and_radius():
    rot = axis_degrees(Axis.X, 20.0)
    dot = make_dot(pos=(1.0, 1.0, 1.0), size=2.0, rot=rot, align=DotAlign.centroid())
    copies = dot.explode_radially(3.0, None, 4, False)
    assert len(copies) == 4
    center = dot.pos(DotAlign.centroid())
    offsets = [copy.pos(DotAlign.centroid()) - center for copy in copies]
    for copy, offset in zip(copies, offsets):
        assert np.linalg.norm(offset) == pytest.approx(3.0)
        assert copy.rot == rot
    for a, b in zip(offsets, offsets[1:]):
        assert np.dot(a, b) == pytest.approx(0.0, abs=1e-9)
    axis = rotate(rot, Axis.Z)
    assert all(np.dot(offset, axis) == pytest.approx(0.0, abs=1e-9) for offset in offsets)


def test_explode_radially_adjusts_rotations():
    dot = make_dot(size=2.0, align=DotAlign.centroid())
    copies = dot.explode_radially(1.0, Axis.Z, 4, True)
    assert copies[1].rot.relative_eq(axis_degrees(Axis.Z, 90.0))
    assert copies[2].rot.relative_eq(axis_degrees(Axis.Z, 180.0))


def test_explode_radially_default_axis_cannot_point_down():
    dot = make_dot(rot=axis_degrees(Axis.X, 180.0), align=DotAlign.centroid())
    with pytest.raises(RotationError):
        dot.explode_radially(1.0, None, 4, False)


def test_map_applies_directly_to_dot():
    dot = make_dot()
    assert dot.map(lambda d: d.with_shape(DotShape.SPHERE)).shape is DotShape.SPHERE
    assert_close(dot.map_translate_z(2.0).p000, (0.0, 0.0, 2.0))


def test_spec_copy_helpers():
    spec = DotSpec(pos=(0.0, 0.0, 0.0), align=C3.P000, size=1.0)
    assert spec.with_size(2.0).size == 2.0
    assert spec.with_shape(DotShape.SPHERE).shape is DotShape.SPHERE
    assert_close(spec.with_pos((1.0, 1.0, 1.0)).with_align(C3.P111).origin(), (0.0, 0.0, 0.0))


def test_mark_is_centered_sphere():
    tree = mark((1.0, 2.0, 3.0), 0.5)
    assert isinstance(tree, TreeObject)
    assert tree.obj.shape is DotShape.SPHERE
    assert_close(tree.obj.pos(DotAlign.centroid()), (1.0, 2.0, 3.0))


def test_less_than_compares_minimums():
    low = make_dot(pos=(0.0, 0.0, 0.0))
    high = make_dot(pos=(0.0, 0.0, 5.0))
    assert low.less_than(high, Axis.Z)
    assert high.greater_than(low, Axis.Z)
    assert not high.less_than(low, Axis.Z)
