"""Cuboids: a top and a bottom Rect, eight Dots in all."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

import numpy as np

from scad_dots.core.dot import Dot, DotShape, mark
from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, hull, union
from scad_dots.core.utils import (
    R3,
    Axis,
    Corner1 as C1,
    Corner2 as C2,
    Corner3 as C3,
    CubeFace,
    Fraction,
    midpoint,
    v3,
)
from scad_dots.errors import ArgsError, DimensionError, MidpointError
from scad_dots.post import Post, PostLink
from scad_dots.rect import Rect, RectAlign, RectCorner, RectLink, RectMidpoint, RectShapes, RectSpec


class CuboidAlign:
    def offset(self, cuboid_dims, dot_dims, rot: R3) -> np.ndarray:
        raise NotImplementedError

    def to_rect_align(self) -> RectAlign:
        raise NotImplementedError

    @staticmethod
    def origin() -> "CuboidCorner":
        return CuboidAlign.outside(C3.P000)

    @staticmethod
    def outside(corner: C3) -> "CuboidCorner":
        return CuboidCorner(cuboid=corner, dot=corner)

    @staticmethod
    def inside(corner: C3) -> "CuboidCorner":
        """A corner of the hollow space enclosed by the eight Dots."""

        return CuboidCorner(cuboid=corner, dot=corner.copy_invert_all_axes())

    @staticmethod
    def midpoint(a: "CuboidAlign", b: "CuboidAlign") -> "CuboidMidpoint":
        return CuboidMidpoint(a, b)

    @staticmethod
    def outside_midpoint(a: C3, b: C3) -> "CuboidMidpoint":
        return CuboidMidpoint(CuboidAlign.outside(a), CuboidAlign.outside(b))

    @staticmethod
    def inside_midpoint(a: C3, b: C3) -> "CuboidMidpoint":
        return CuboidMidpoint(CuboidAlign.inside(a), CuboidAlign.inside(b))

    @staticmethod
    def center_face(face: CubeFace) -> "CuboidMidpoint":
        a, b = face.corners()
        return CuboidAlign.outside_midpoint(a, b)

    @staticmethod
    def center_inside_face(face: CubeFace) -> "CuboidMidpoint":
        a, b = face.corners()
        return CuboidAlign.inside_midpoint(a, b)

    @staticmethod
    def centroid() -> "CuboidMidpoint":
        return CuboidAlign.outside_midpoint(C3.P000, C3.P111)

    @staticmethod
    def all_corners() -> List["CuboidCorner"]:
        return [CuboidCorner(cuboid=c, dot=d) for d in C3.all() for c in C3.all()]


@dataclass(frozen=True)
class CuboidCorner(CuboidAlign):
    cuboid: C3
    dot: C3

    def offset(self, cuboid_dims, dot_dims, rot: R3) -> np.ndarray:
        return self.dot.offset(dot_dims, rot) + self.cuboid.offset(cuboid_dims, rot)

    def to_rect_align(self) -> RectCorner:
        return RectCorner(rect=C2.from_c3(self.cuboid), dot=self.dot)


@dataclass(frozen=True)
class CuboidMidpoint(CuboidAlign):
    a: CuboidCorner
    b: CuboidCorner

    def __post_init__(self) -> None:
        if not (isinstance(self.a, CuboidCorner) and isinstance(self.b, CuboidCorner)):
            raise MidpointError()

    def offset(self, cuboid_dims, dot_dims, rot: R3) -> np.ndarray:
        return (self.a.offset(cuboid_dims, dot_dims, rot) + self.b.offset(cuboid_dims, dot_dims, rot)) / 2.0

    def to_rect_align(self) -> RectMidpoint:
        return RectMidpoint(self.a.to_rect_align(), self.b.to_rect_align())


@dataclass(frozen=True)
class CuboidShapes:
    """Per-corner Dot shapes. A plain DotShape applies to all eight corners."""

    p000: DotShape = DotShape.CUBE
    p010: DotShape = DotShape.CUBE
    p110: DotShape = DotShape.CUBE
    p100: DotShape = DotShape.CUBE
    p001: DotShape = DotShape.CUBE
    p011: DotShape = DotShape.CUBE
    p111: DotShape = DotShape.CUBE
    p101: DotShape = DotShape.CUBE

    @classmethod
    def uniform(cls, shape: DotShape) -> "CuboidShapes":
        return cls(*([shape] * 8))

    @classmethod
    def round(cls) -> "CuboidShapes":
        """Spheres on top, cylinders on the bottom."""

        bot, top = DotShape.CYLINDER, DotShape.SPHERE
        return cls(bot, bot, bot, bot, top, top, top, top)

    def get(self, upper_or_lower: C1) -> RectShapes:
        """Shapes for the top (P1) or bottom (P0) Rect."""

        return RectShapes(
            **{c.name.lower(): getattr(self, c.to_c3(upper_or_lower).name.lower()) for c in C2.all_clockwise()}
        )


def as_cuboid_shapes(shapes: Union[DotShape, CuboidShapes]) -> CuboidShapes:
    if isinstance(shapes, DotShape):
        return CuboidShapes.uniform(shapes)
    return shapes


class CuboidLink(Enum):
    SOLID = "solid"
    FRAME = "frame"
    DOTS = "dots"
    SIDES = "sides"
    OPEN_BOT = "open_bot"
    CHAMFER_Z = "chamfer_z"


@dataclass(frozen=True)
class Face:
    """Link style: hull of the four Dots on one face."""

    face: CubeFace


@dataclass(frozen=True)
class ZPost:
    """Link style: hull of the vertical post at one XY corner."""

    corner: C2


@dataclass(frozen=True)
class CuboidSpec:
    pos: np.ndarray
    align: CuboidAlign
    x_length: float
    y_length: float
    z_length: float
    size: float
    rot: R3 = field(default_factory=R3.identity)
    shapes: Union[DotShape, CuboidShapes] = DotShape.CUBE

    def with_pos(self, new_value) -> "CuboidSpec":
        return dataclasses.replace(self, pos=new_value)

    def with_align(self, new_value: CuboidAlign) -> "CuboidSpec":
        return dataclasses.replace(self, align=new_value)

    def with_rot(self, new_value: R3) -> "CuboidSpec":
        return dataclasses.replace(self, rot=new_value)

    def rect_spec(self, upper_or_lower: C1) -> RectSpec:
        if self.z_length < self.size:
            raise DimensionError(f"Cuboid of height {self.z_length} can't hold dots of size {self.size}")
        dot_lengths = np.full(3, float(self.size))
        cuboid_lengths = np.array(
            [self.x_length - self.size, self.y_length - self.size, self.z_length - self.size]
        )
        origin = v3(self.pos) - self.align.offset(cuboid_lengths, dot_lengths, self.rot)
        return RectSpec(
            pos=origin + upper_or_lower.offset(cuboid_lengths[2], self.rot),
            align=RectAlign.origin(),
            x_length=self.x_length,
            y_length=self.y_length,
            size=self.size,
            rot=self.rot,
            shapes=as_cuboid_shapes(self.shapes).get(upper_or_lower),
        )


@dataclass(frozen=True)
class CuboidSpecChamferZHole:
    """A CuboidSpec whose dot size is a fraction of half its shorter XY side."""

    pos: np.ndarray
    align: CuboidAlign
    x_length: float
    y_length: float
    z_length: float
    chamfer: Fraction
    rot: R3 = field(default_factory=R3.identity)
    shapes: Union[DotShape, CuboidShapes] = DotShape.CUBE

    def to_cuboid_spec(self) -> CuboidSpec:
        return CuboidSpec(
            pos=self.pos,
            align=self.align,
            x_length=self.x_length,
            y_length=self.y_length,
            z_length=self.z_length,
            size=self.chamfer.value * min(self.x_length, self.y_length) / 2.0,
            rot=self.rot,
            shapes=self.shapes,
        )

    def rect_spec(self, upper_or_lower: C1) -> RectSpec:
        return self.to_cuboid_spec().rect_spec(upper_or_lower)


@dataclass(frozen=True)
class Cuboid(MapDots, MinMaxCoord):
    top: Rect
    bot: Rect

    @classmethod
    def new(cls, spec: Union[CuboidSpec, CuboidSpecChamferZHole]) -> "Cuboid":
        return cls(top=Rect.new(spec.rect_spec(C1.P1)), bot=Rect.new(spec.rect_spec(C1.P0)))

    @classmethod
    def from_dot(cls, dot: Dot, new_size: float, shapes: Union[DotShape, CuboidShapes] = DotShape.CUBE) -> "Cuboid":
        """A Cuboid of smaller Dots whose outside corners match the corners of `dot`."""

        if dot.shape is not DotShape.CUBE:
            raise ArgsError().context("Cuboid can only be created from a cube-shaped dot")
        return cls.new(
            CuboidSpec(
                pos=dot.p000,
                align=CuboidAlign.origin(),
                x_length=dot.size,
                y_length=dot.size,
                z_length=dot.size,
                size=new_size,
                rot=dot.rot,
                shapes=shapes,
            )
        )

    @property
    def size(self) -> float:
        return self.top.size

    @property
    def rot(self) -> R3:
        return self.top.rot

    def dot(self, corner: C3) -> Dot:
        rect = self.top if corner.is_high(Axis.Z) else self.bot
        return rect.get_dot(C2.from_c3(corner))

    def pos(self, align: CuboidAlign) -> np.ndarray:
        if isinstance(align, CuboidMidpoint):
            return midpoint(self.pos(align.a), self.pos(align.b))
        return self.dot(align.cuboid).pos(align.dot)

    def edge(self, axis: Axis) -> np.ndarray:
        """Vector along one outer edge, in the Cuboid's own (unrotated) axes."""

        if axis is Axis.Z:
            return self.pos(CuboidAlign.outside(C3.P001)) - self.pos(CuboidAlign.origin())
        return self.bot.edge(axis)

    def edge_unit_vec(self, axis: Axis) -> np.ndarray:
        edge = self.edge(axis)
        return edge / np.linalg.norm(edge)

    def edge_length(self, axis: Axis) -> float:
        return float(np.linalg.norm(self.edge(axis)))

    def vertical_post(self, corner: C2) -> Post:
        """The post between the top and bottom Dots at one XY corner."""

        return Post(top=self.top.get_dot(corner), bot=self.bot.get_dot(corner))

    def rect(self, face: CubeFace) -> Rect:
        """The four Dots on one face, as a Rect."""

        if face is CubeFace.Z0:
            return self.bot
        if face is CubeFace.Z1:
            return self.top
        if face is CubeFace.X0:
            low, high = C2.P00, C2.P01
        elif face is CubeFace.X1:
            low, high = C2.P10, C2.P11
        elif face is CubeFace.Y0:
            low, high = C2.P00, C2.P10
        else:
            low, high = C2.P01, C2.P11
        return Rect(
            p00=self.bot.get_dot(low),
            p10=self.bot.get_dot(high),
            p01=self.top.get_dot(low),
            p11=self.top.get_dot(high),
        )

    def mark_corners(self) -> Tree:
        return union(mark(self.pos(align), 1.0) for align in CuboidAlign.all_corners())

    def link(self, style: Union[CuboidLink, Face, ZPost]) -> Tree:
        if isinstance(style, Face):
            return self.rect(style.face).link(RectLink.SOLID)
        if isinstance(style, ZPost):
            return self.vertical_post(style.corner).link(PostLink.SOLID)
        if style is CuboidLink.SOLID:
            return hull([self.bot.link(RectLink.SOLID), self.top.link(RectLink.SOLID)])
        if style is CuboidLink.FRAME:
            return union(
                [
                    self.bot.link(RectLink.FRAME),
                    self.top.link(RectLink.FRAME),
                    self.link(ZPost(C2.P00)),
                    self.link(ZPost(C2.P10)),
                    self.link(ZPost(C2.P11)),
                    self.link(ZPost(C2.P01)),
                ]
            )
        if style is CuboidLink.DOTS:
            return union([self.top.link(RectLink.DOTS), self.bot.link(RectLink.DOTS)])
        if style is CuboidLink.SIDES:
            return union(self.link(Face(face)) for face in (CubeFace.X0, CubeFace.X1, CubeFace.Y0, CubeFace.Y1))
        if style is CuboidLink.OPEN_BOT:
            return union([self.link(CuboidLink.SIDES), self.link(Face(CubeFace.Z1))])
        if style is CuboidLink.CHAMFER_Z:
            return union([self.bot.link(RectLink.CHAMFER), self.top.link(RectLink.CHAMFER)])
        raise ValueError(f"Unknown cuboid link style: {style}")
