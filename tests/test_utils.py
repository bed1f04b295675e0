from __future__ import annotations

import math

import numpy as np
import pytest

from helpers import assert_close
from scad_dots.core.utils import (
    R3,
    Axis,
    ColorSpec,
    Corner1 as C1,
    Corner2 as C2,
    Corner3 as C3,
    CubeFace,
    Fraction,
    Plane,
    RectEdge,
    axis_degrees,
    copy_p3_to,
    copy_p3_to_other_dim,
    cos_deg,
    degrees_between,
    get_plane_normal,
    map_float,
    min_v3_coord,
    midpoint,
    radial_offset,
    relative_less,
    relative_less_eq,
    rotation_between,
    translate_p3,
    translate_p3_along_until,
    unwrap_rot_axis,
    v3,
)
from scad_dots.errors import ArgsError, RatioError, RotationError


def test_quarter_turn_about_z():
    rot = axis_degrees(Axis.Z, 90.0)
    assert_close(rot * Axis.X, (0.0, 1.0, 0.0))
    assert_close(rot.matrix() @ np.array([1.0, 0.0, 0.0]), (0.0, 1.0, 0.0))


def test_composition_applies_right_operand_first():
    about_x = axis_degrees(Axis.X, 90.0)
    about_z = axis_degrees(Axis.Z, 90.0)
    # Y -> Z about X, then Z is unchanged about Z
    assert_close((about_z * about_x) * Axis.Y, (0.0, 0.0, 1.0))
    # Y -> -X about Z, then -X is unchanged about X
    assert_close((about_x * about_z) * Axis.Y, (-1.0, 0.0, 0.0))


def test_inverse_undoes_rotation():
    rot = axis_degrees((1.0, 2.0, 3.0), 40.0)
    assert_close(rot.inverse() * (rot * (0.3, -2.0, 5.0)), (0.3, -2.0, 5.0))


def test_rotation_to_reaches_target():
    start = axis_degrees(Axis.X, 30.0)
    target = axis_degrees((0.0, 1.0, 1.0), 75.0)
    assert (start.rotation_to(target) * start).relative_eq(target)


def test_relative_eq_treats_negated_quaternion_as_equal():
    assert R3(-1.0, 0.0, 0.0, 0.0).relative_eq(R3.identity())
    assert not axis_degrees(Axis.Z, 10.0).relative_eq(R3.identity())


def test_rotation_between_maps_a_onto_b():
    rot = rotation_between(Axis.X, (0.0, 3.0, 0.0))
    assert_close(rot * Axis.X, (0.0, 1.0, 0.0))
    assert rotation_between(Axis.Z, (0.0, 0.0, 2.0)) == R3.identity()
    assert degrees_between(Axis.X, Axis.Y) == pytest.approx(90.0)


@pytest.mark.parametrize("a, b", [((1.0, 0.0, 0.0), (-2.0, 0.0, 0.0)), ((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))])
def test_rotation_between_fails_without_unique_rotation(a, b):
    with pytest.raises(RotationError):
        rotation_between(a, b)


def test_zero_length_axis_is_rejected():
    with pytest.raises(RotationError):
        axis_degrees((0.0, 0.0, 0.0), 10.0)


def test_zero_angle_axis_defaults_to_z():
    assert R3.identity().axis() is None
    assert_close(unwrap_rot_axis(R3.identity()), (0.0, 0.0, 1.0))
    assert_close(unwrap_rot_axis(axis_degrees(Axis.X, 45.0)), (1.0, 0.0, 0.0))


def test_angle_is_in_zero_to_pi():
    assert axis_degrees(Axis.Y, 270.0).angle() == pytest.approx(math.pi / 2)


def test_v3_rejects_wrong_shapes():
    with pytest.raises(ValueError):
        v3((1.0, 2.0))
    assert_close(Axis.Y.v3(2.0), (0.0, 2.0, 0.0))


def test_corner3_offset_scales_then_rotates():
    assert_close(C3.P000.offset((1.0, 2.0, 3.0), R3.identity()), (0.0, 0.0, 0.0))
    assert_close(C3.P111.offset((1.0, 2.0, 3.0), R3.identity()), (1.0, 2.0, 3.0))
    assert_close(C3.P100.offset((2.0, 1.0, 1.0), axis_degrees(Axis.Z, 90.0)), (0.0, 2.0, 0.0))


def test_corner_projections():
    assert C3.P001.copy_invert_all_axes() is C3.P110
    assert C3.P011.copy_invert(Axis.Y) is C3.P001
    assert C2.from_c3(C3.P101) is C2.P10
    assert C1.from_c3(C3.P001) is C1.P1
    assert C2.P10.to_c3(C1.P1) is C3.P101
    assert C3.from_c2(C2.P11) is C3.P110
    assert C3.from_axis(Axis.Y) is C3.P010
    assert len(C3.all()) == 8


def test_corner2_clockwise_order():
    assert C2.all_clockwise() == [C2.P00, C2.P01, C2.P11, C2.P10]
    assert C2.all_clockwise_from(C2.P11) == [C2.P11, C2.P10, C2.P00, C2.P01]


def test_corner2_has_no_z():
    assert C2.P01.is_high(Axis.Y)
    with pytest.raises(ArgsError):
        C2.P01.is_high(Axis.Z)


def test_corner1_offset_is_along_local_z():
    assert_close(C1.P1.offset(2.0, axis_degrees(Axis.X, 90.0)), (0.0, -2.0, 0.0))
    assert C1.P0.sign() == -1.0


def test_cube_face_corners_span_the_face():
    for face in CubeFace.all():
        a, b = face.corners()
        axis = face.axis()
        assert a.is_high(axis) == face.is_high()
        assert b.is_high(axis) == face.is_high()
        others = [other for other in Axis if other is not axis]
        assert all(a.is_high(other) != b.is_high(other) for other in others)


def test_rect_edge():
    assert RectEdge.Y1.is_high()
    assert RectEdge.Y1.axis() is Axis.Y
    assert RectEdge.X0.sign() == -1.0


@pytest.mark.parametrize("value", [-0.1, 1.1])
def test_fraction_rejects_out_of_range(value):
    with pytest.raises(RatioError) as excinfo:
        Fraction(value)
    assert excinfo.value.value == value


def test_fraction_weighted_average():
    assert Fraction(0.5).weighted_average(10.0, 20.0) == 15.0
    assert Fraction(0.25).weighted_average(10.0, 20.0) == pytest.approx(17.5)
    assert Fraction(0.0).complement() == 1.0
    assert_close(midpoint((0.0, 0.0, 0.0), (2.0, 4.0, 6.0)), (1.0, 2.0, 3.0))


def test_plane_normal_points_up_and_is_perpendicular():
    plane = Plane(z_offset=0.0, xz_slope=1.0, yz_slope=0.0)
    normal = plane.normal()
    assert normal[2] > 0
    assert np.linalg.norm(normal) == pytest.approx(1.0)
    along_plane = plane.pos(1.0, 0.0) - plane.pos(0.0, 0.0)
    assert np.dot(along_plane, normal) == pytest.approx(0.0, abs=1e-12)


def test_plane_rot_lays_it_flat():
    plane = Plane(z_offset=2.0, xz_slope=0.5, yz_slope=-0.25)
    assert_close(plane.rot() * plane.normal(), (0.0, 0.0, 1.0))
    assert Plane.new_z0().rot() == R3.identity()


def test_plane_rot_handles_steep_planes():
    plane = Plane(z_offset=0.0, xz_slope=1000.0, yz_slope=-500.0)
    assert_close(plane.rot() * plane.normal(), (0.0, 0.0, 1.0))


def test_plane_offset_moves_along_normal():
    plane = Plane(z_offset=0.0, xz_slope=1.0, yz_slope=0.0)
    shifted = plane.offset(1.0)
    point = plane.pos(0.0, 0.0) + plane.normal()
    assert shifted.z(point[0], point[1]) == pytest.approx(point[2])


def test_plane_project():
    plane = Plane(z_offset=1.0, xz_slope=1.0, yz_slope=0.0)
    projected = plane.project((0.0, 0.0, 3.0))
    assert projected[2] == pytest.approx(plane.z(projected[0], projected[1]))
    offset = np.array([0.0, 0.0, 3.0]) - projected
    assert_close(np.cross(offset, plane.normal()), (0.0, 0.0, 0.0))


def test_translate_along_until():
    assert_close(translate_p3_along_until((0.0, 0.0, 5.0), (1.0, 0.0, -1.0), Axis.Z, 0.0), (5.0, 0.0, 0.0))
    with pytest.raises(ArgsError):
        translate_p3_along_until((0.0, 0.0, 5.0), (1.0, 0.0, 0.0), Axis.Z, 0.0)


def test_radial_offset():
    assert_close(radial_offset(math.pi / 2, 2.0, Axis.Z), (0.0, 2.0, 0.0))
    sideways = radial_offset(0.3, 1.5, Axis.X)
    assert np.linalg.norm(sideways) == pytest.approx(1.5)
    assert sideways[0] == pytest.approx(0.0, abs=1e-12)


def test_map_float_ignores_nan_seed():
    assert map_float(np.fmax, [1.0, 3.0, 2.0]) == 3.0
    assert map_float(np.fmin, [1.0, 3.0, 2.0]) == 1.0
    assert math.isnan(map_float(np.fmax, []))


def test_relative_comparisons():
    assert relative_less(1.0, 2.0)
    assert not relative_less(1.0, 1.00001)
    assert relative_less_eq(1.00001, 1.0)


def test_color_spec():
    assert ColorSpec.RED.rgba() == (1.0, 0.0, 0.0, 0.5)
    assert ColorSpec.GREEN.label == "green"


def test_point_helpers():
    assert_close(copy_p3_to((1.0, 2.0, 3.0), 9.0, Axis.Y), (1.0, 9.0, 3.0))
    assert_close(copy_p3_to_other_dim((1.0, 2.0, 3.0), (7.0, 8.0, 9.0), Axis.Z), (1.0, 2.0, 9.0))
    assert_close(translate_p3((1.0, 2.0, 3.0), -2.0, Axis.X), (-1.0, 2.0, 3.0))
    assert_close(get_plane_normal((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)), (0.0, 0.0, 1.0))
    assert min_v3_coord((3.0, -1.0, 2.0)) == -1.0
    assert Axis.Z.of_p3((1.0, 2.0, 3.0)) == 3.0
    assert_close(Fraction(0.25).weighted_midpoint((0.0, 0.0, 0.0), (4.0, 8.0, 0.0)), (3.0, 6.0, 0.0))
    assert cos_deg(60.0) == pytest.approx(0.5)
