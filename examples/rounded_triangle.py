"""Example scad_dots model: a rounded 30-60-90 triangle, extruded down to the floor."""

from __future__ import annotations

from scad_dots import Axis, Triangle, TriangleSpec, axis_degrees, union
from scad_dots.core.tree import drop_solid


def _triangle() -> Triangle:
    return Triangle.new(
        TriangleSpec(
            deg_b=90.0,
            len_bc=3.0**0.5 * 10.0,
            deg_c=30.0,
            size=3.0,
            point_b=(0.0, -9.0, 4.0),
            rot=axis_degrees(Axis.Z, 30.0),
        )
    )


def dots():
    return _triangle()


def build():
    tri = _triangle()
    return union([tri.link(), drop_solid([tri.a, tri.b, tri.c], 0.0)])
