"""Triangles with rounded corners, made by hulling three cylinder Dots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from scad_dots.core.dot import Dot, DotAlign, DotShape, DotSpec, mark
from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, hull, union
from scad_dots.core.utils import R3, Axis, CubeFace, axis_degrees, rotate, rotation_between, sin_deg, v3
from scad_dots.errors import DimensionError


class TriCorner(Enum):
    A = "A"
    B = "B"
    C = "C"


def opposite(v1: TriCorner, v2: TriCorner) -> TriCorner:
    """The vertex not on side (v1, v2)."""

    if v1 is v2:
        raise ValueError(f"not a valid triangle side: {v1.name}{v2.name}")
    (other,) = set(TriCorner) - {v1, v2}
    return other


@dataclass(frozen=True)
class TriangleSpec:
    """A triangle given by the angles at B and C, the length of side BC and the position of B.

    Side BC runs along the local X axis and the triangle lies in the local XY
    plane. `size` is the diameter of the corner cylinders.
    """

    deg_b: float
    len_bc: float
    deg_c: float
    size: float
    point_b: np.ndarray
    rot: R3 = field(default_factory=R3.identity)

    def __post_init__(self) -> None:
        if self.deg_b <= 0 or self.deg_c <= 0 or self.deg_b + self.deg_c >= 180:
            raise DimensionError(f"angles {self.deg_b} and {self.deg_c} don't make a triangle")
        if self.len_bc <= 0:
            raise DimensionError(f"side length must be positive, got {self.len_bc}")

    def deg(self, vertex: TriCorner) -> float:
        if vertex is TriCorner.A:
            return 180.0 - self.deg_b - self.deg_c
        if vertex is TriCorner.B:
            return self.deg_b
        return self.deg_c

    def point(self, vertex: TriCorner) -> np.ndarray:
        if vertex is TriCorner.B:
            return v3(self.point_b)
        return v3(self.point_b) + self.side(TriCorner.B, vertex)

    def side(self, v1: TriCorner, v2: TriCorner) -> np.ndarray:
        """Vector from vertex `v1` to vertex `v2`."""

        return self.unit_side(v1, v2) * self.length(v1, v2)

    def length(self, v1: TriCorner, v2: TriCorner) -> float:
        # law of sines
        vertex = opposite(v1, v2)
        return self.len_bc / sin_deg(self.deg(TriCorner.A)) * sin_deg(self.deg(vertex))

    def unit_side(self, v1: TriCorner, v2: TriCorner) -> np.ndarray:
        if (v1, v2) == (TriCorner.B, TriCorner.A):
            return self._rot_z(self.deg_b, self._unit(Axis.X))
        if (v1, v2) == (TriCorner.C, TriCorner.A):
            return self._rot_z(-self.deg_c, -self._unit(Axis.X))
        if (v1, v2) == (TriCorner.B, TriCorner.C):
            return self._unit(Axis.X)
        if v1 is v2:
            raise ValueError(f"not a valid triangle side: {v1.name}{v2.name}")
        return -self.unit_side(v2, v1)

    def rot_from_x(self, v1: TriCorner, v2: TriCorner) -> R3:
        return rotation_between(self._unit(Axis.X), self.unit_side(v1, v2))

    def center(self, vertex: TriCorner) -> np.ndarray:
        """Center of the cylinder that rounds off `vertex`."""

        dist = self.size / (2.0 * sin_deg(self.deg(vertex) / 2.0))
        return self.point(vertex) + self._unit_to_center(vertex) * dist

    def _unit_to_center(self, vertex: TriCorner) -> np.ndarray:
        # bisect the angle between the vertex's outgoing side and its incoming one
        following = {TriCorner.C: TriCorner.A, TriCorner.A: TriCorner.B, TriCorner.B: TriCorner.C}
        return self._rot_z(self.deg(vertex) / 2.0, self.unit_side(vertex, following[vertex]))

    def _unit(self, axis: Axis) -> np.ndarray:
        return rotate(self.rot, axis)

    def _rot_z(self, degrees: float, vec) -> np.ndarray:
        return rotate(axis_degrees(self._unit(Axis.Z), degrees), vec)


@dataclass(frozen=True)
class Triangle(MapDots, MinMaxCoord):
    a: Dot
    b: Dot
    c: Dot

    @classmethod
    def new(cls, spec: TriangleSpec) -> "Triangle":
        a_spec = DotSpec(
            pos=spec.center(TriCorner.A),
            align=DotAlign.center_face(CubeFace.Z0),
            size=spec.size,
            rot=spec.rot,
            shape=DotShape.CYLINDER,
        )
        return cls(
            a=Dot.new(a_spec),
            b=Dot.new(a_spec.with_pos(spec.center(TriCorner.B))),
            c=Dot.new(a_spec.with_pos(spec.center(TriCorner.C))),
        )

    @staticmethod
    def mark(spec: TriangleSpec) -> Tree:
        return union(mark(spec.point(v), 1.0) for v in TriCorner)

    def link(self) -> Tree:
        return hull([self.a, self.b, self.c])
