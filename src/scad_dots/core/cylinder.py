from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from scad_dots.core.tree import Tree, TreeObject
from scad_dots.core.utils import R3, Axis, Corner1, frozen, radians_to_degrees, rotate, unwrap_rot_axis, v3


class CylinderAlign:
    def offset(self, height: float, rot: R3) -> np.ndarray:
        raise NotImplementedError


@dataclass(frozen=True)
class EndCenter(CylinderAlign):
    """Center of the bottom (P0) or top (P1) face."""

    end: Corner1

    def offset(self, height: float, rot: R3) -> np.ndarray:
        return self.end.offset(height, rot)


@dataclass(frozen=True)
class Centroid(CylinderAlign):
    def offset(self, height: float, rot: R3) -> np.ndarray:
        return Corner1.P1.offset(height, rot) / 2.0


@dataclass(frozen=True)
class CylinderSpec:
    pos: np.ndarray
    align: CylinderAlign
    diameter: float
    height: float
    rot: R3 = field(default_factory=R3.identity)


@dataclass(frozen=True, eq=False)
class Cylinder:
    """A cylinder of arbitrary diameter and height, anchored at its bottom center."""

    center_bot_pos: np.ndarray
    diameter: float
    height: float
    rot: R3 = field(default_factory=R3.identity)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center_bot_pos", frozen(v3(self.center_bot_pos)))

    @classmethod
    def new(cls, spec: CylinderSpec) -> "Cylinder":
        center_bot = v3(spec.pos) - spec.align.offset(spec.height, spec.rot)
        return cls(center_bot, float(spec.diameter), float(spec.height), spec.rot)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cylinder):
            return NotImplemented
        return (
            self.diameter == other.diameter
            and self.height == other.height
            and self.rot == other.rot
            and np.array_equal(self.center_bot_pos, other.center_bot_pos)
        )

    def __hash__(self) -> int:
        return hash((self.diameter, self.height, self.rot, tuple(float(c) for c in self.center_bot_pos)))

    def to_tree(self) -> Tree:
        return TreeObject(self)

    def pos(self, align: CylinderAlign) -> np.ndarray:
        return self.center_bot_pos + align.offset(self.height, self.rot)

    def unit_axis(self) -> np.ndarray:
        return rotate(self.rot, Axis.Z)

    def axis(self) -> np.ndarray:
        return self.unit_axis() * self.height

    def rot_degs(self) -> float:
        return radians_to_degrees(self.rot.angle())

    def rot_axis(self) -> np.ndarray:
        return unwrap_rot_axis(self.rot)
