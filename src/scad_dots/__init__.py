"""scad_dots – build OpenSCAD models out of aligned cubes, spheres and cylinders."""

from __future__ import annotations

from .core import (
    R3,
    Axis,
    ColorSpec,
    Corner1,
    Corner2,
    Corner3,
    CubeFace,
    Dot,
    DotAlign,
    DotShape,
    DotSpec,
    Fraction,
    Plane,
    Snake,
    Tree,
    axis_degrees,
    chain,
    chain_loop,
    color,
    diff,
    hull,
    intersect,
    mark,
    mirror,
    union,
)
from .cuboid import Cuboid, CuboidAlign, CuboidLink, CuboidShapes, CuboidSpec
from .post import Post, PostAlign, PostLink, PostShapes, PostSpec
from .rect import Rect, RectAlign, RectLink, RectShapes, RectSpec
from .triangle import Triangle, TriangleSpec

__all__ = [
    "__version__",
    "R3",
    "Axis",
    "ColorSpec",
    "Corner1",
    "Corner2",
    "Corner3",
    "CubeFace",
    "Dot",
    "DotAlign",
    "DotShape",
    "DotSpec",
    "Fraction",
    "Plane",
    "Snake",
    "Tree",
    "axis_degrees",
    "chain",
    "chain_loop",
    "color",
    "diff",
    "hull",
    "intersect",
    "mark",
    "mirror",
    "union",
    "Cuboid",
    "CuboidAlign",
    "CuboidLink",
    "CuboidShapes",
    "CuboidSpec",
    "Post",
    "PostAlign",
    "PostLink",
    "PostShapes",
    "PostSpec",
    "Rect",
    "RectAlign",
    "RectLink",
    "RectShapes",
    "RectSpec",
    "Triangle",
    "TriangleSpec",
]

__version__ = "0.1.0"
