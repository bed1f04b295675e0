"""Core primitives: geometry helpers, Dots, the CSG tree and chain builders."""

from __future__ import annotations

from .utils import (
    R3,
    Axis,
    ColorSpec,
    Corner1,
    Corner2,
    Corner3,
    CubeFace,
    Fraction,
    Plane,
    RectEdge,
    axis_degrees,
    axis_radians,
    rotation_between,
)
from .dot import Dot, DotAlign, DotShape, DotSpec, mark
from .cylinder import Centroid, Cylinder, CylinderSpec, EndCenter
from .extrusion import Extrusion
from .tree import Tree, TreeObject, color, diff, drop_solid, hull, intersect, mirror, rotate, to_tree, union
from .chain import Snake, SnakeLink, chain, chain_loop
from .traits import MapDots, MinMaxCoord

__all__ = [
    "R3",
    "Axis",
    "ColorSpec",
    "Corner1",
    "Corner2",
    "Corner3",
    "CubeFace",
    "Fraction",
    "Plane",
    "RectEdge",
    "axis_degrees",
    "axis_radians",
    "rotation_between",
    "Dot",
    "DotAlign",
    "DotShape",
    "DotSpec",
    "mark",
    "Centroid",
    "Cylinder",
    "CylinderSpec",
    "EndCenter",
    "Extrusion",
    "Tree",
    "TreeObject",
    "color",
    "diff",
    "drop_solid",
    "hull",
    "intersect",
    "mirror",
    "rotate",
    "to_tree",
    "union",
    "Snake",
    "SnakeLink",
    "chain",
    "chain_loop",
    "MapDots",
    "MinMaxCoord",
]
