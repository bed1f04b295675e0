from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from scad_dots.core.dot import DotAlign
from scad_dots.core.tree import Tree, TreeObject
from scad_dots.core.utils import frozen, p2


@dataclass(frozen=True, eq=False)
class Extrusion:
    """A closed 2D polygon swept up along Z from `bottom_z` by `thickness`."""

    perimeter: Tuple[np.ndarray, ...]
    bottom_z: float
    thickness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "perimeter", tuple(frozen(p2(point)) for point in self.perimeter))
        object.__setattr__(self, "bottom_z", float(self.bottom_z))
        object.__setattr__(self, "thickness", float(self.thickness))

    @classmethod
    def from_dot_centers(cls, dots: Iterable, thickness: float, bottom_z: float) -> "Extrusion":
        perimeter = [dot.pos(DotAlign.centroid())[:2] for dot in dots]
        return cls(tuple(perimeter), bottom_z, thickness)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Extrusion):
            return NotImplemented
        return (
            self.bottom_z == other.bottom_z
            and self.thickness == other.thickness
            and len(self.perimeter) == len(other.perimeter)
            and all(np.array_equal(a, b) for a, b in zip(self.perimeter, other.perimeter))
        )

    def __hash__(self) -> int:
        points = tuple(tuple(float(c) for c in point) for point in self.perimeter)
        return hash((self.bottom_z, self.thickness, points))

    def to_tree(self) -> Tree:
        return TreeObject(self)
