"""Structural traversal over every Dot held by a composite shape.

Composites are dataclasses. Their fields are visited in declaration order;
a field declared with ``field(metadata={"map_dots": False})`` is carried over
unchanged by :meth:`MapDots.map` and skipped by :meth:`MinMaxCoord.all_coords`.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Callable, List

import numpy as np

from scad_dots.core.utils import Axis, map_float

if TYPE_CHECKING:
    from scad_dots.core.dot import Dot

DotFn = Callable[["Dot"], "Dot"]

IGNORE = {"map_dots": False}


def _visited_fields(obj) -> List[dataclasses.Field]:
    return [f for f in dataclasses.fields(obj) if f.metadata.get("map_dots", True)]


def map_dots(value, f: DotFn):
    """Apply `f` to every Dot within `value`, rebuilding containers as needed."""

    if isinstance(value, MapDots):
        return value.map(f)
    if isinstance(value, tuple):
        return tuple(map_dots(item, f) for item in value)
    if isinstance(value, list):
        return [map_dots(item, f) for item in value]
    raise TypeError(f"Can't map Dots inside {type(value).__name__}.")


def all_coords(value, axis: Axis) -> List[float]:
    """Collect every coordinate on `axis` of every Dot or point within `value`."""

    if isinstance(value, MinMaxCoord):
        return value.all_coords(axis)
    if isinstance(value, np.ndarray):
        if value.shape == (2,) and axis is Axis.Z:
            raise ValueError("2D point has no z coordinate.")
        return [float(value[axis.index])]
    if isinstance(value, (tuple, list)):
        coords: List[float] = []
        for item in value:
            coords.extend(all_coords(item, axis))
        return coords
    raise TypeError(f"Can't collect coordinates from {type(value).__name__}.")


def max_coord(value, axis: Axis) -> float:
    return map_float(np.fmax, all_coords(value, axis))


def min_coord(value, axis: Axis) -> float:
    return map_float(np.fmin, all_coords(value, axis))


def bound_length(value, axis: Axis) -> float:
    return max_coord(value, axis) - min_coord(value, axis)


def midpoint(value, axis: Axis) -> float:
    return 0.5 * (max_coord(value, axis) + min_coord(value, axis))


def midpoint3(value) -> np.ndarray:
    return np.array([midpoint(value, axis) for axis in Axis])


class MapDots:
    """Mixin for dataclasses whose fields are Dots or other MapDots values."""

    def map(self, f: DotFn):
        changes = {fld.name: map_dots(getattr(self, fld.name), f) for fld in _visited_fields(self)}
        return dataclasses.replace(self, **changes)

    def map_translate(self, offset):
        return self.map(lambda d: d.translate(offset))

    def map_translate_z(self, z_offset: float):
        return self.map_translate((0.0, 0.0, z_offset))

    def map_rotate(self, rot):
        return self.map(lambda d: d.rotate(rot))


class MinMaxCoord:
    """Mixin providing bounding-box queries over every contained Dot."""

    def all_coords(self, axis: Axis) -> List[float]:
        coords: List[float] = []
        for fld in _visited_fields(self):
            coords.extend(all_coords(getattr(self, fld.name), axis))
        return coords

    def max_coord(self, axis: Axis) -> float:
        return max_coord(self, axis)

    def min_coord(self, axis: Axis) -> float:
        return min_coord(self, axis)

    def less_than(self, other, axis: Axis) -> bool:
        return self.min_coord(axis) < min_coord(other, axis)

    def greater_than(self, other, axis: Axis) -> bool:
        return self.max_coord(axis) > max_coord(other, axis)

    def bound_length(self, axis: Axis) -> float:
        return bound_length(self, axis)

    def midpoint(self, axis: Axis) -> float:
        return midpoint(self, axis)

    def midpoint2(self) -> np.ndarray:
        return np.array([self.midpoint(Axis.X), self.midpoint(Axis.Y)])

    def midpoint3(self) -> np.ndarray:
        return midpoint3(self)
