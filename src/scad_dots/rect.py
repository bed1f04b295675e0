"""Rects: four Dots of equal size and rotation placed at the corners of a rectangle."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

import numpy as np

from scad_dots.core.chain import chain_loop
from scad_dots.core.dot import Dot, DotShape, DotSpec, mark
from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, drop_solid, hull, union
from scad_dots.core.utils import R3, Axis, Corner2 as C2, Corner3 as C3, CubeFace, midpoint, v3
from scad_dots.errors import DimensionError, MidpointError, ScadDotsError


class RectAlign:
    """A reference point on a Rect.

    Either a corner (which Dot, and which corner of that Dot) or the midpoint
    of two such corners.
    """

    def offset(self, dot_dims, rect_dims, rot: R3) -> np.ndarray:
        raise NotImplementedError

    @staticmethod
    def origin() -> "RectCorner":
        """The outside P000 corner."""

        return RectAlign.outside(C3.P000)

    @staticmethod
    def outside(corner: C3) -> "RectCorner":
        return RectCorner(rect=C2.from_c3(corner), dot=corner)

    @staticmethod
    def inside(corner: C3) -> "RectCorner":
        """A corner of the hole enclosed by the four Dots, on the Dots' top or bottom face."""

        return RectCorner(rect=C2.from_c3(corner), dot=corner.copy_invert(Axis.X).copy_invert(Axis.Y))

    @staticmethod
    def midpoint(a: "RectAlign", b: "RectAlign") -> "RectMidpoint":
        return RectMidpoint(a, b)

    @staticmethod
    def outside_midpoint(a: C3, b: C3) -> "RectMidpoint":
        return RectMidpoint(RectAlign.outside(a), RectAlign.outside(b))

    @staticmethod
    def inside_midpoint(a: C3, b: C3) -> "RectMidpoint":
        return RectMidpoint(RectAlign.inside(a), RectAlign.inside(b))

    @staticmethod
    def centroid() -> "RectMidpoint":
        return RectAlign.outside_midpoint(C3.P000, C3.P111)

    @staticmethod
    def center_face(face: CubeFace) -> "RectMidpoint":
        a, b = face.corners()
        return RectAlign.outside_midpoint(a, b)

    @staticmethod
    def all_corners() -> List["RectCorner"]:
        return [RectCorner(rect=r, dot=d) for d in C3.all() for r in C2.all_clockwise()]

    @staticmethod
    def from_cuboid_align(align) -> "RectAlign":
        """Project a CuboidAlign onto one of the Cuboid's Rects, discarding its Z bit."""

        return align.to_rect_align()


@dataclass(frozen=True)
class RectCorner(RectAlign):
    rect: C2
    dot: C3

    def offset(self, dot_dims, rect_dims, rot: R3) -> np.ndarray:
        return self.dot.offset(dot_dims, rot) + self.rect.offset(rect_dims, rot)


@dataclass(frozen=True)
class RectMidpoint(RectAlign):
    a: RectCorner
    b: RectCorner

    def __post_init__(self) -> None:
        if not (isinstance(self.a, RectCorner) and isinstance(self.b, RectCorner)):
            raise MidpointError()

    def offset(self, dot_dims, rect_dims, rot: R3) -> np.ndarray:
        return (self.a.offset(dot_dims, rect_dims, rot) + self.b.offset(dot_dims, rect_dims, rot)) / 2.0


@dataclass(frozen=True)
class RectShapes:
    """Per-corner Dot shapes. A plain DotShape applies to all four corners."""

    p00: DotShape = DotShape.CUBE
    p01: DotShape = DotShape.CUBE
    p11: DotShape = DotShape.CUBE
    p10: DotShape = DotShape.CUBE

    @classmethod
    def uniform(cls, shape: DotShape) -> "RectShapes":
        return cls(shape, shape, shape, shape)

    def get(self, corner: C2) -> DotShape:
        return getattr(self, corner.name.lower())


def as_rect_shapes(shapes: Union[DotShape, RectShapes]) -> RectShapes:
    if isinstance(shapes, DotShape):
        return RectShapes.uniform(shapes)
    return shapes


class RectLink(Enum):
    SOLID = "solid"
    FRAME = "frame"
    DOTS = "dots"
    Y_POSTS = "y_posts"
    CHAMFER = "chamfer"


@dataclass(frozen=True)
class RectSpec:
    pos: np.ndarray
    align: RectAlign
    x_length: float
    y_length: float
    size: float
    rot: R3 = field(default_factory=R3.identity)
    shapes: Union[DotShape, RectShapes] = DotShape.CUBE

    @property
    def inner_x_length(self) -> float:
        return self.x_length - 2.0 * self.size

    @property
    def inner_y_length(self) -> float:
        return self.y_length - 2.0 * self.size

    def with_pos(self, new_value) -> "RectSpec":
        return dataclasses.replace(self, pos=new_value)

    def with_align(self, new_value: RectAlign) -> "RectSpec":
        return dataclasses.replace(self, align=new_value)

    def with_rot(self, new_value: R3) -> "RectSpec":
        return dataclasses.replace(self, rot=new_value)

    def dot_spec(self, corner: C2) -> DotSpec:
        if self.size <= 0 or self.x_length < self.size or self.y_length < self.size:
            raise DimensionError(
                f"Rect of {self.x_length} x {self.y_length} can't hold dots of size {self.size}"
            )
        dot_lengths = np.full(3, float(self.size))
        rect_lengths = np.array([self.x_length - self.size, self.y_length - self.size, 0.0])
        origin = v3(self.pos) - self.align.offset(dot_lengths, rect_lengths, self.rot)
        return DotSpec(
            pos=origin + corner.offset(rect_lengths, self.rot),
            align=C3.P000,
            size=self.size,
            rot=self.rot,
            shape=as_rect_shapes(self.shapes).get(corner),
        )


@dataclass(frozen=True)
class Rect(MapDots, MinMaxCoord):
    p00: Dot
    p01: Dot
    p10: Dot
    p11: Dot

    @classmethod
    def new(cls, spec: RectSpec) -> "Rect":
        return cls(
            p00=Dot.new(spec.dot_spec(C2.P00)),
            p01=Dot.new(spec.dot_spec(C2.P01)),
            p10=Dot.new(spec.dot_spec(C2.P10)),
            p11=Dot.new(spec.dot_spec(C2.P11)),
        )

    @property
    def size(self) -> float:
        return self.p00.size

    @property
    def rot(self) -> R3:
        return self.p00.rot

    def get_dot(self, corner: C2) -> Dot:
        return getattr(self, corner.name.lower())

    def dots(self) -> List[Dot]:
        """The four Dots in clockwise order, starting from P00."""

        return [self.get_dot(c) for c in C2.all_clockwise()]

    def pos(self, align: RectAlign) -> np.ndarray:
        if isinstance(align, RectMidpoint):
            return midpoint(self.pos(align.a), self.pos(align.b))
        return self.get_dot(align.rect).pos(align.dot)

    def edge(self, axis: Axis) -> np.ndarray:
        """Vector along one outer edge, in the Rect's own (unrotated) axes."""

        return self.pos(RectAlign.outside(C3.from_axis(axis))) - self.pos(RectAlign.origin())

    def edge_unit_vec(self, axis: Axis) -> np.ndarray:
        edge = self.edge(axis)
        return edge / np.linalg.norm(edge)

    def edge_length(self, axis: Axis) -> float:
        return float(np.linalg.norm(self.edge(axis)))

    def drop_solid(self, bottom_z: float, shape=None) -> Tree:
        return drop_solid(self.dots(), bottom_z, shape)

    def mark_corners(self) -> Tree:
        return union(mark(self.pos(align), 1.0) for align in RectAlign.all_corners())

    def link(self, style: RectLink) -> Tree:
        if style is RectLink.DOTS:
            return union(self.dots())
        if style is RectLink.SOLID:
            return hull(self.dots())
        if style is RectLink.FRAME:
            return chain_loop([self.p00, self.p01, self.p11, self.p10])
        if style is RectLink.Y_POSTS:
            return union([hull([self.p00, self.p01]), hull([self.p10, self.p11])])
        if style is RectLink.CHAMFER:
            try:
                return self._chamfer()
            except ScadDotsError as exc:
                raise exc.context("failed to link Rect in Chamfer style") from exc
        raise ValueError(f"Unknown rect link style: {style}")

    def _chamfer(self) -> Tree:
        from scad_dots.cuboid import Cuboid, ZPost

        new_size = self.size / 100.0
        p00, p01, p10, p11 = (
            Cuboid.from_dot(dot, new_size, DotShape.CUBE) for dot in (self.p00, self.p01, self.p10, self.p11)
        )
        return hull(
            [
                p00.link(ZPost(C2.P11)),
                p00.link(ZPost(C2.P10)),
                p00.link(ZPost(C2.P01)),
                p10.link(ZPost(C2.P01)),
                p10.link(ZPost(C2.P00)),
                p10.link(ZPost(C2.P11)),
                p01.link(ZPost(C2.P10)),
                p01.link(ZPost(C2.P00)),
                p01.link(ZPost(C2.P11)),
                p11.link(ZPost(C2.P00)),
                p11.link(ZPost(C2.P10)),
                p11.link(ZPost(C2.P01)),
            ]
        )
