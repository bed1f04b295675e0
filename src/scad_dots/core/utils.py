"""Shared geometric vocabulary: axes, corner selectors, rotations and planes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from scad_dots.errors import ArgsError, RatioError, RotationError

MAX_REL = 1e-4

# Cross products shorter than this are treated as (anti)parallel vectors.
_PARALLEL_EPSILON = 1e-7


class Axis(Enum):
    X = 0
    Y = 1
    Z = 2

    @property
    def index(self) -> int:
        return self.value

    def of_p3(self, pos: Sequence[float]) -> float:
        return float(pos[self.index])

    def v3(self, coordinate: float) -> np.ndarray:
        """Return a vector with `coordinate` on this axis and zeros elsewhere."""

        vec = np.zeros(3)
        vec[self.index] = coordinate
        return vec

    def unit(self) -> np.ndarray:
        return self.v3(1.0)


def v3(value) -> np.ndarray:
    """Coerce an Axis or any 3-element sequence into a fresh float vector."""

    if isinstance(value, Axis):
        return value.unit()
    try:
        arr = np.array(value, dtype=float).reshape(3)
    except (TypeError, ValueError) as exc:
        raise ValueError("Expected a 3D vector.") from exc
    return arr


def p2(value) -> np.ndarray:
    try:
        return np.array(value, dtype=float).reshape(2)
    except (TypeError, ValueError) as exc:
        raise ValueError("Expected a 2D point.") from exc


def frozen(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def _norm(vec: np.ndarray) -> float:
    return float(np.linalg.norm(vec))


@dataclass(frozen=True)
class R3:
    """Unit quaternion (w, x, y, z) describing a 3D rotation."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> "R3":
        return cls()

    @classmethod
    def from_axis_angle(cls, axis, radians: float) -> "R3":
        vec = v3(axis)
        norm = _norm(vec)
        if norm == 0 or not math.isfinite(norm):
            raise RotationError("Rotation axis must be non-zero.")
        vec = vec / norm
        half = radians / 2.0
        s = math.sin(half)
        return cls(math.cos(half), float(vec[0] * s), float(vec[1] * s), float(vec[2] * s))

    @property
    def imag(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __mul__(self, other):
        if isinstance(other, R3):
            w1, x1, y1, z1 = self.w, self.x, self.y, self.z
            w2, x2, y2, z2 = other.w, other.x, other.y, other.z
            return R3(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            )
        return self.apply(other)

    def apply(self, vector) -> np.ndarray:
        vec = v3(vector)
        q = self.imag
        t = 2.0 * np.cross(q, vec)
        return vec + self.w * t + np.cross(q, t)

    def inverse(self) -> "R3":
        return R3(self.w, -self.x, -self.y, -self.z)

    def rotation_to(self, other: "R3") -> "R3":
        """Return the rotation `r` such that `r * self == other`."""

        return other * self.inverse()

    def angle(self) -> float:
        """Rotation angle in radians, within [0, pi]."""

        return 2.0 * math.atan2(_norm(self.imag), abs(self.w))

    def axis(self) -> Optional[np.ndarray]:
        """Unit rotation axis, or None when the rotation has no defined axis."""

        imag = self.imag if self.w >= 0 else -self.imag
        norm = _norm(imag)
        if norm == 0 or not math.isfinite(norm):
            return None
        return imag / norm

    def matrix(self) -> np.ndarray:
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
                [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
                [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
            ],
            dtype=float,
        )

    def relative_eq(self, other: "R3", max_relative: float = MAX_REL) -> bool:
        mine = np.array([self.w, self.x, self.y, self.z])
        theirs = np.array([other.w, other.x, other.y, other.z])
        return bool(
            np.allclose(mine, theirs, rtol=max_relative, atol=max_relative)
            or np.allclose(mine, -theirs, rtol=max_relative, atol=max_relative)
        )


def rotate(rot: R3, vector) -> np.ndarray:
    """Apply a rotation to a vector (or Axis)."""

    return rot.apply(vector)


def radians_to_degrees(rad: float) -> float:
    return rad / math.pi * 180.0


def degrees_to_radians(deg: float) -> float:
    return deg / 180.0 * math.pi


def sin_deg(degrees: float) -> float:
    return math.sin(degrees_to_radians(degrees))


def cos_deg(degrees: float) -> float:
    return math.cos(degrees_to_radians(degrees))


def axis_radians(axis, radians: float) -> R3:
    return R3.from_axis_angle(axis, radians)


def axis_degrees(axis, degrees: float) -> R3:
    return R3.from_axis_angle(axis, degrees_to_radians(degrees))


def rotation_between(a, b) -> R3:
    """Return the smallest rotation that maps direction `a` onto direction `b`."""

    vec_a = v3(a)
    vec_b = v3(b)
    norm_a = _norm(vec_a)
    norm_b = _norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        raise RotationError("failed to get rotation between vectors: zero-length input")
    unit_a = vec_a / norm_a
    unit_b = vec_b / norm_b
    cross = np.cross(unit_a, unit_b)
    sin = _norm(cross)
    cos = float(np.dot(unit_a, unit_b))
    if sin < _PARALLEL_EPSILON:
        if cos > 0:
            return R3.identity()
        raise RotationError("failed to get rotation between vectors: antiparallel input")
    return R3.from_axis_angle(cross / sin, math.atan2(sin, cos))


def degrees_between(vector_a, vector_b) -> float:
    return radians_to_degrees(rotation_between(vector_a, vector_b).angle())


def unwrap_rot_axis(rot: R3) -> np.ndarray:
    """Return the rotation axis, defaulting to Z for a zero-angle rotation."""

    axis = rot.axis()
    if axis is not None:
        return axis
    if rot.angle() == 0.0:
        # Any axis is valid for a zero angle; Z is the convention.
        return Axis.Z.unit()
    raise RotationError("rotation has no well-defined axis")


def radial_offset(radians: float, radius: float, axis) -> np.ndarray:
    """Vector of length `radius` at angle `radians` in the plane perpendicular to `axis`."""

    radius_vec = np.array([radius, 0.0, 0.0])
    rot_around_z = axis_radians(Axis.Z, radians)
    z_to_real_axis = rotation_between(Axis.Z, axis)
    return (z_to_real_axis * rot_around_z).apply(radius_vec)


class RectEdge(Enum):
    X0 = "X0"
    X1 = "X1"
    Y0 = "Y0"
    Y1 = "Y1"

    def is_high(self) -> bool:
        return self in (RectEdge.X1, RectEdge.Y1)

    def axis(self) -> Axis:
        return Axis.X if self.is_x() else Axis.Y

    def is_x(self) -> bool:
        return self in (RectEdge.X0, RectEdge.X1)

    def sign(self) -> float:
        return 1.0 if self.is_high() else -1.0


class Corner1(Enum):
    """Endpoints of a unit segment along the local Z axis."""

    P0 = 0
    P1 = 1

    def unit_vec(self) -> np.ndarray:
        return np.array([0.0, 0.0, float(self.value)])

    def offset(self, length: float, rot: R3) -> np.ndarray:
        return rotate(rot, self.unit_vec() * length)

    def is_high(self) -> bool:
        return self is Corner1.P1

    def sign(self) -> float:
        return 1.0 if self.is_high() else -1.0

    @classmethod
    def from_c3(cls, corner: "Corner3") -> "Corner1":
        """Project down to one dimension, keeping only Z."""

        return cls.P1 if corner.is_high(Axis.Z) else cls.P0


class Corner2(Enum):
    """Corners of a unit square, declared in clockwise order."""

    P00 = (0, 0)
    P01 = (0, 1)
    P11 = (1, 1)
    P10 = (1, 0)

    def unit_vec(self) -> np.ndarray:
        x, y = self.value
        return np.array([float(x), float(y), 0.0])

    def offset(self, dimensions, rot: R3) -> np.ndarray:
        return rotate(rot, self.unit_vec() * v3(dimensions))

    @classmethod
    def all_clockwise(cls) -> List["Corner2"]:
        return [cls.P00, cls.P01, cls.P11, cls.P10]

    @classmethod
    def all_clockwise_from(cls, corner: "Corner2") -> List["Corner2"]:
        order = cls.all_clockwise()
        index = order.index(corner)
        return order[index:] + order[:index]

    def is_high(self, axis: Axis) -> bool:
        if axis is Axis.Z:
            raise ArgsError("The Z value of a Corner2 is not defined")
        return bool(self.value[axis.index])

    def to_c3(self, z: Corner1) -> "Corner3":
        return Corner3.from_c2(self).copy_to(Axis.Z, z.is_high())

    @classmethod
    def from_c3(cls, corner: "Corner3") -> "Corner2":
        """Project down to two dimensions, discarding Z."""

        x, y, _ = corner.value
        return cls((x, y))


class Corner3(Enum):
    """Corners of a unit cube; each value holds the low/high flag per axis."""

    P000 = (0, 0, 0)
    P010 = (0, 1, 0)
    P110 = (1, 1, 0)
    P100 = (1, 0, 0)
    P001 = (0, 0, 1)
    P011 = (0, 1, 1)
    P111 = (1, 1, 1)
    P101 = (1, 0, 1)

    def unit_vec(self) -> np.ndarray:
        return np.array([float(c) for c in self.value])

    def offset(self, dimensions, rot: R3) -> np.ndarray:
        """Scale the corner's unit vector component-wise, then rotate it."""

        return rotate(rot, self.unit_vec() * v3(dimensions))

    def is_high(self, axis: Axis) -> bool:
        return bool(self.value[axis.index])

    def copy_to(self, axis: Axis, new_val: bool) -> "Corner3":
        bits = list(self.value)
        bits[axis.index] = int(new_val)
        return Corner3(tuple(bits))

    def copy_invert(self, axis: Axis) -> "Corner3":
        return self.copy_to(axis, not self.is_high(axis))

    def copy_invert_all_axes(self) -> "Corner3":
        return self.copy_invert(Axis.X).copy_invert(Axis.Y).copy_invert(Axis.Z)

    @classmethod
    def all(cls) -> List["Corner3"]:
        return list(cls)

    @classmethod
    def from_c2(cls, corner: Corner2) -> "Corner3":
        """Lift to three dimensions with Z low."""

        x, y = corner.value
        return cls((x, y, 0))

    @classmethod
    def from_axis(cls, axis: Axis) -> "Corner3":
        bits = [0, 0, 0]
        bits[axis.index] = 1
        return cls(tuple(bits))


class CubeFace(Enum):
    X0 = "X0"
    X1 = "X1"
    Y0 = "Y0"
    Y1 = "Y1"
    Z0 = "Z0"
    Z1 = "Z1"

    def is_high(self) -> bool:
        return self in (CubeFace.X1, CubeFace.Y1, CubeFace.Z1)

    def axis(self) -> Axis:
        return Axis[self.value[0]]

    def corners(self) -> Tuple[Corner3, Corner3]:
        """Two diagonally opposite corners spanning this face."""

        return _FACE_CORNERS[self]

    @classmethod
    def all(cls) -> List["CubeFace"]:
        return [cls.X0, cls.Y0, cls.Z0, cls.X1, cls.Y1, cls.Z1]


_FACE_CORNERS = {
    CubeFace.X0: (Corner3.P000, Corner3.P011),
    CubeFace.X1: (Corner3.P100, Corner3.P111),
    CubeFace.Y0: (Corner3.P000, Corner3.P101),
    CubeFace.Y1: (Corner3.P010, Corner3.P111),
    CubeFace.Z0: (Corner3.P000, Corner3.P110),
    CubeFace.Z1: (Corner3.P001, Corner3.P111),
}


@dataclass(frozen=True)
class Fraction:
    """A scalar constrained to [0, 1]."""

    value: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 1.0:
            raise RatioError(self.value)

    def complement(self) -> float:
        return 1.0 - self.value

    def weighted_average(self, a: float, b: float) -> float:
        return a * self.value + b * self.complement()

    def weighted_midpoint(self, a, b) -> np.ndarray:
        return v3(a) * self.value + v3(b) * self.complement()


class ColorSpec(Enum):
    RED = "red"
    GREEN = "green"

    @property
    def label(self) -> str:
        return self.value

    def rgb(self) -> Tuple[float, float, float]:
        return _COLOR_RGB[self]

    def rgba(self) -> Tuple[float, float, float, float]:
        return (*self.rgb(), 0.5)


_COLOR_RGB = {
    ColorSpec.RED: (1.0, 0.0, 0.0),
    ColorSpec.GREEN: (0.0, 1.0, 0.0),
}


@dataclass(frozen=True)
class Plane:
    """The plane z = z_offset + xz_slope * x + yz_slope * y."""

    z_offset: float = 0.0
    xz_slope: float = 0.0
    yz_slope: float = 0.0

    @classmethod
    def new_z0(cls) -> "Plane":
        return cls()

    def z(self, x: float, y: float) -> float:
        return self.z_offset + self.xz_slope * x + self.yz_slope * y

    def pos(self, x: float, y: float) -> np.ndarray:
        return np.array([x, y, self.z(x, y)], dtype=float)

    def _normal_length(self) -> float:
        return math.sqrt(self.xz_slope**2 + self.yz_slope**2 + 1.0)

    def normal(self) -> np.ndarray:
        """Upward unit normal."""

        return np.array([-self.xz_slope, -self.yz_slope, 1.0]) / self._normal_length()

    def rot(self) -> R3:
        """Rotation that lays the plane flat onto z = const."""

        return rotation_between(self.normal(), Axis.Z)

    def offset(self, dist_along_normal: float) -> "Plane":
        return Plane(
            z_offset=self.z_offset + dist_along_normal * self._normal_length(),
            xz_slope=self.xz_slope,
            yz_slope=self.yz_slope,
        )

    def project(self, pos) -> np.ndarray:
        """Nearest point on the plane."""

        point = v3(pos)
        normal = self.normal()
        signed_dist = float(np.dot(point - self.pos(0.0, 0.0), normal))
        return point - normal * signed_dist


def midpoint(a, b) -> np.ndarray:
    return Fraction(0.5).weighted_midpoint(a, b)


def copy_p3_to(pos, coord: float, axis: Axis) -> np.ndarray:
    new_pos = v3(pos)
    new_pos[axis.index] = coord
    return new_pos


def copy_p3_to_other_dim(self_pos, other_pos, axis: Axis) -> np.ndarray:
    return copy_p3_to(self_pos, v3(other_pos)[axis.index], axis)


def translate_p3(pos, dist: float, axis: Axis) -> np.ndarray:
    new_pos = v3(pos)
    new_pos[axis.index] += dist
    return new_pos


def translate_p3_along_until(pos, direction, axis: Axis, axis_value: float) -> np.ndarray:
    """Move `pos` along `direction` until its `axis` coordinate equals `axis_value`."""

    start = v3(pos)
    vec = v3(direction)
    i = axis.index
    if vec[i] == 0:
        raise ArgsError(f"direction has no {axis.name} component, can't reach {axis_value}")
    m = (axis_value - start[i]) / vec[i]
    return start + m * vec


def get_plane_normal(origin, end1, end2) -> np.ndarray:
    o = v3(origin)
    return np.cross(v3(end1) - o, v3(end2) - o)


def map_float(f: Callable[[float, float], float], floats: Iterable[float]) -> float:
    """Fold `floats` with `f`, seeded with NaN; use NaN-ignoring folds like np.fmax."""

    return float(reduce(f, floats, math.nan))


def min_v3_coord(vec) -> float:
    return map_float(np.fmin, v3(vec))


def relative_eq(a: float, b: float, max_relative: float = MAX_REL) -> bool:
    if a == b:
        return True
    largest = max(abs(a), abs(b))
    return abs(a - b) <= largest * max_relative


def relative_less_eq(a: float, b: float) -> bool:
    return a < b or relative_eq(a, b)


def relative_less(a: float, b: float) -> bool:
    return a < b and not relative_eq(a, b)
