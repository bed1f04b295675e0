from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, TreeObject
from scad_dots.core.utils import (
    R3,
    Axis,
    Corner3 as C3,
    CubeFace,
    Plane,
    axis_radians,
    frozen,
    radial_offset,
    radians_to_degrees,
    rotate,
    translate_p3_along_until,
    unwrap_rot_axis,
    v3,
)
from scad_dots.errors import MidpointError


class DotShape(Enum):
    CUBE = "cube"
    SPHERE = "sphere"
    CYLINDER = "cylinder"


class DotAlign:
    """A reference point on a Dot: one of its corners, or the midpoint of two."""

    def offset(self, dot_size: float, rot: R3) -> np.ndarray:
        raise NotImplementedError

    @staticmethod
    def origin() -> "DotCorner":
        return DotCorner(C3.P000)

    @staticmethod
    def centroid() -> "DotMidpoint":
        return DotMidpoint(C3.P000, C3.P111)

    @staticmethod
    def center_face(face: CubeFace) -> "DotMidpoint":
        a, b = face.corners()
        return DotMidpoint(a, b)

    @staticmethod
    def midpoint(a: "DotAlign | C3", b: "DotAlign | C3") -> "DotMidpoint":
        a, b = as_dot_align(a), as_dot_align(b)
        if not (isinstance(a, DotCorner) and isinstance(b, DotCorner)):
            raise MidpointError()
        return DotMidpoint(a.corner, b.corner)


@dataclass(frozen=True)
class DotCorner(DotAlign):
    corner: C3

    def offset(self, dot_size: float, rot: R3) -> np.ndarray:
        return self.corner.offset(np.full(3, dot_size), rot)


@dataclass(frozen=True)
class DotMidpoint(DotAlign):
    a: C3
    b: C3

    def __post_init__(self) -> None:
        if not (isinstance(self.a, C3) and isinstance(self.b, C3)):
            raise MidpointError()

    def offset(self, dot_size: float, rot: R3) -> np.ndarray:
        dims = np.full(3, dot_size)
        return (self.a.offset(dims, rot) + self.b.offset(dims, rot)) / 2.0


DotAlignLike = Union[DotAlign, C3]


def as_dot_align(align: DotAlignLike) -> DotAlign:
    if isinstance(align, C3):
        return DotCorner(align)
    if isinstance(align, DotAlign):
        return align
    raise TypeError(f"Expected a DotAlign or Corner3, got {type(align).__name__}.")


@dataclass(frozen=True)
class DotSpec:
    pos: np.ndarray
    align: DotAlignLike
    size: float
    rot: R3 = field(default_factory=R3.identity)
    shape: DotShape = DotShape.CUBE

    def origin(self) -> np.ndarray:
        return v3(self.pos) - as_dot_align(self.align).offset(self.size, self.rot)

    def with_pos(self, new_value) -> "DotSpec":
        return dataclasses.replace(self, pos=new_value)

    def with_align(self, new_value: DotAlignLike) -> "DotSpec":
        return dataclasses.replace(self, align=new_value)

    def with_rot(self, new_value: R3) -> "DotSpec":
        return dataclasses.replace(self, rot=new_value)

    def with_size(self, new_value: float) -> "DotSpec":
        return dataclasses.replace(self, size=new_value)

    def with_shape(self, new_value: DotShape) -> "DotSpec":
        return dataclasses.replace(self, shape=new_value)


@dataclass(frozen=True, eq=False)
class Dot(MapDots, MinMaxCoord):
    """The smallest building block of a model.

    A cube, sphere or cylinder with equal side lengths, stored by the position
    of its un-rotated corner zero (`p000`) no matter how it was specified.
    """

    shape: DotShape
    p000: np.ndarray
    size: float
    rot: R3 = field(default_factory=R3.identity)

    def __post_init__(self) -> None:
        object.__setattr__(self, "p000", frozen(v3(self.p000)))
        object.__setattr__(self, "size", float(self.size))

    @classmethod
    def new(cls, spec: DotSpec) -> "Dot":
        return cls(shape=spec.shape, p000=spec.origin(), size=spec.size, rot=spec.rot)

    @classmethod
    def default(cls) -> "Dot":
        return cls.new(DotSpec(pos=(0.0, 0.0, 0.0), align=C3.P000, size=1.0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dot):
            return NotImplemented
        return (
            self.shape is other.shape
            and self.size == other.size
            and self.rot == other.rot
            and np.array_equal(self.p000, other.p000)
        )

    def __hash__(self) -> int:
        return hash((self.shape, self.size, self.rot, tuple(float(c) for c in self.p000)))

    def to_tree(self) -> Tree:
        return TreeObject(self)

    def map(self, f):
        return f(self)

    def all_coords(self, axis: Axis) -> List[float]:
        return [float(self.pos(corner)[axis.index]) for corner in C3.all()]

    def pos(self, align: DotAlignLike) -> np.ndarray:
        return self.p000 + as_dot_align(align).offset(self.size, self.rot)

    def dim_unit_vec(self, axis: Axis) -> np.ndarray:
        return rotate(self.rot, axis)

    def translate(self, offset) -> "Dot":
        return dataclasses.replace(self, p000=self.p000 + v3(offset))

    def rotate(self, rot: R3) -> "Dot":
        """Rotate about the global origin, not about the dot itself."""

        return dataclasses.replace(self, p000=rot.apply(self.p000), rot=rot * self.rot)

    def rotate_to(self, new_rot: R3) -> "Dot":
        return self.rotate(self.rot.rotation_to(new_rot))

    def translate_to(self, pos, align: DotAlignLike) -> "Dot":
        """Copy the dot so that its `align` point sits at `pos`."""

        return Dot.new(DotSpec(pos=pos, align=align, size=self.size, rot=self.rot, shape=self.shape))

    def translate_along_until(self, direction, axis: Axis, axis_value: float, align: DotAlignLike) -> "Dot":
        """Slide along `direction` until the `align` point has `axis_value` on `axis`."""

        start = self.pos(align)
        return self.translate_to(translate_p3_along_until(start, direction, axis, axis_value), align)

    def with_coord(self, coordinate: float, dimension: Axis) -> "Dot":
        p000 = self.p000.copy()
        p000[dimension.index] = coordinate
        return dataclasses.replace(self, p000=p000)

    def copy_to_other_dim(self, other: "Dot", dimension: Axis) -> "Dot":
        return self.with_coord(other.p000[dimension.index], dimension)

    def with_shape(self, new_shape: DotShape) -> "Dot":
        return dataclasses.replace(self, shape=new_shape)

    def rot_axis(self) -> np.ndarray:
        return unwrap_rot_axis(self.rot)

    def rot_degs(self) -> float:
        return radians_to_degrees(self.rot.angle())

    def dist(self, other: "Dot") -> float:
        """Distance between anchors, not between surfaces."""

        return float(np.linalg.norm(self.p000 - other.p000))

    def snake(self, other: "Dot", order: Sequence[Axis]) -> Tuple["Dot", "Dot", "Dot", "Dot"]:
        from scad_dots.core.chain import Snake

        return Snake.new(self, other, order).dots

    def drop(self, bottom_z: float, shape: Optional[DotShape] = None) -> "Dot":
        """Copy the dot straight down so it sits flat, un-rotated, on z = `bottom_z`."""

        return self.drop_along(Axis.Z, bottom_z, shape)

    def drop_along(self, direction, bottom_z: float, shape: Optional[DotShape] = None) -> "Dot":
        """Like `drop`, but travel along `direction`; the copy still sits flat on the z plane."""

        pos = translate_p3_along_until(self.pos(DotAlign.centroid()), direction, Axis.Z, bottom_z)
        return Dot.new(
            DotSpec(
                pos=pos,
                align=DotAlign.center_face(CubeFace.Z0),
                size=self.size,
                rot=R3.identity(),
                shape=shape or self.shape,
            )
        )

    def drop_to_plane(self, plane: Plane, align: DotAlignLike, shape: Optional[DotShape] = None) -> "Dot":
        """Copy the dot below its `align` point so its bottom face rests on `plane`."""

        start = self.pos(align)
        pos = plane.pos(start[0], start[1])
        return Dot.new(
            DotSpec(
                pos=pos,
                align=DotAlign.center_face(CubeFace.Z0),
                size=self.size,
                rot=plane.rot().inverse(),
                shape=shape or self.shape,
            )
        )

    def drop_cylinder(self, bottom_z: float) -> "Dot":
        return self.drop(bottom_z, DotShape.CYLINDER)

    def explode_radially(
        self,
        radius: float,
        axis=None,
        count: int = 1,
        adjust_rotations: bool = False,
    ) -> List["Dot"]:
        """Copies of the dot spaced evenly on a circle around its centroid.

        The circle lies in the plane perpendicular to `axis`, which defaults to
        the dot's own Z axis. With `adjust_rotations`, each copy is also turned
        about `axis` by its angle on the circle.

        Raises RotationError when `axis` points straight down (-Z), e.g. the
        default axis of a dot flipped 180 degrees about X or Y, since no unique
        rotation carries Z onto it.
        """

        axis = rotate(self.rot, Axis.Z) if axis is None else v3(axis)
        center = self.pos(DotAlign.centroid())
        dots = []
        for i in range(count):
            radians = i / count * 2.0 * math.pi
            offset = radial_offset(radians, radius, axis)
            rot = axis_radians(axis, radians) * self.rot if adjust_rotations else self.rot
            dots.append(
                Dot.new(
                    DotSpec(
                        pos=center + offset,
                        align=DotAlign.centroid(),
                        size=self.size,
                        rot=rot,
                        shape=self.shape,
                    )
                )
            )
        return dots


def mark(pos, size: float) -> Tree:
    """A small sphere centered on `pos`, for debugging."""

    dot = Dot.new(
        DotSpec(pos=pos, align=DotAlign.centroid(), size=size, rot=R3.identity(), shape=DotShape.SPHERE)
    )
    return dot.to_tree()
