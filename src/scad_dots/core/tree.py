"""The CSG tree: primitive solids combined by boolean and affine operators.

Trees are immutable. Builder functions accept anything convertible to a tree:
an existing :class:`Tree`, or any value with a ``to_tree()`` method (Dots,
Cylinders, Extrusions and the composite shapes).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple

from scad_dots.core.utils import ColorSpec, Plane, v3


class Tree:
    """Base class for every node of a CSG tree."""

    def to_tree(self) -> "Tree":
        return self

    def walk(self) -> Iterator["Tree"]:
        """Yield this node and all descendants, depth first, children in order."""

        yield self


@dataclass(frozen=True)
class TreeObject(Tree):
    """A leaf holding a Dot, Cylinder or Extrusion."""

    obj: Any


class TreeOperator(Tree):
    """An operator node; subclasses expose their operands as `children`."""

    name = "operator"

    def walk(self) -> Iterator[Tree]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Union(TreeOperator):
    children: Tuple[Tree, ...]
    name = "union"


@dataclass(frozen=True)
class Hull(TreeOperator):
    children: Tuple[Tree, ...]
    name = "hull"


@dataclass(frozen=True)
class Diff(TreeOperator):
    """The first child minus every following child, in order."""

    children: Tuple[Tree, ...]
    name = "diff"


@dataclass(frozen=True)
class Intersect(TreeOperator):
    children: Tuple[Tree, ...]
    name = "intersect"


@dataclass(frozen=True)
class Rotate(TreeOperator):
    degrees: float
    axis: Tuple[float, float, float]
    children: Tuple[Tree, ...]
    name = "rotate"


@dataclass(frozen=True)
class Color(TreeOperator):
    spec: ColorSpec
    child: Tree
    name = "color"

    @property
    def children(self) -> Tuple[Tree, ...]:
        return (self.child,)


@dataclass(frozen=True)
class Mirror(TreeOperator):
    normal: Tuple[float, float, float]
    child: Tree
    name = "mirror"

    @property
    def children(self) -> Tuple[Tree, ...]:
        return (self.child,)


def to_tree(value) -> Tree:
    if isinstance(value, Tree):
        return value
    convert = getattr(value, "to_tree", None)
    if convert is None:
        raise TypeError(f"Can't convert {type(value).__name__} to a Tree.")
    return convert()


def _children(items: Iterable) -> Tuple[Tree, ...]:
    return tuple(to_tree(item) for item in items)


def _vector(value) -> Tuple[float, float, float]:
    return tuple(float(c) for c in v3(value))


def union(items: Iterable) -> Union:
    return Union(_children(items))


def hull(items: Iterable) -> Hull:
    return Hull(_children(items))


def diff(items: Iterable) -> Diff:
    return Diff(_children(items))


def intersect(items: Iterable) -> Intersect:
    return Intersect(_children(items))


def rotate(degrees: float, axis, items: Iterable) -> Rotate:
    return Rotate(float(degrees), _vector(axis), _children(items))


def color(spec: ColorSpec, thing) -> Color:
    return Color(spec, to_tree(thing))


def mirror(normal, thing) -> Mirror:
    return Mirror(_vector(normal), to_tree(thing))


def drop_solid(dots, bottom_z: float, shape=None) -> Hull:
    """Hull the dots together with copies of them dropped flat onto z = `bottom_z`."""

    dots = list(dots)
    dropped = [dot.drop(bottom_z, shape) for dot in dots]
    return hull(dots + dropped)


def drop_solid_to_plane(dots, plane: Plane, align, shape=None) -> Hull:
    dots = list(dots)
    dropped = [dot.drop_to_plane(plane, align, shape) for dot in dots]
    return hull(dots + dropped)
