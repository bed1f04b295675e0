from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from scad_dots.core.dot import Dot
from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, hull, union
from scad_dots.core.utils import Axis
from scad_dots.errors import ChainError, SnakeError


def chain(items: Sequence) -> Tree:
    """Union of hulls between each consecutive pair of `items`."""

    items = list(items)
    if len(items) < 2:
        raise ChainError()
    return union(hull(pair) for pair in zip(items, items[1:]))


def chain_loop(items: Sequence) -> Tree:
    """Like `chain`, but also hull the last item back to the first."""

    items = list(items)
    if not items:
        raise ChainError("Need at least 1 element to chain_loop")
    return chain(items + [items[0]])


class SnakeLink(Enum):
    CHAIN = "chain"


@dataclass(frozen=True)
class Snake(MapDots, MinMaxCoord):
    """A taxicab path of four dots from `start` to `end`.

    Each step copies one coordinate of `end`, in the order given.
    """

    dots: Tuple[Dot, Dot, Dot, Dot]

    @classmethod
    def new(cls, start: Dot, end: Dot, order: Sequence[Axis]) -> "Snake":
        order = list(order)
        if len(order) != 3 or len(set(order)) != 3:
            raise SnakeError(f"Invalid snake axis order: {[axis.name for axis in order]}")
        dots = [start]
        for axis in order:
            dots.append(dots[-1].copy_to_other_dim(end, axis))
        return cls(tuple(dots))

    def get(self, index: int) -> Dot:
        return self.dots[index]

    def link(self, style: SnakeLink = SnakeLink.CHAIN) -> Tree:
        if style is SnakeLink.CHAIN:
            return chain(self.dots)
        raise ValueError(f"Unknown snake link style: {style}")
