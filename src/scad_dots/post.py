"""Posts: a top and a bottom Dot along the post's own Z axis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple, Union

import numpy as np

from scad_dots.core.chain import Snake, chain, chain_loop
from scad_dots.core.dot import Dot, DotShape, DotSpec
from scad_dots.core.traits import MapDots, MinMaxCoord
from scad_dots.core.tree import Tree, hull, union
from scad_dots.core.utils import R3, Axis, Corner1 as C1, Corner3 as C3, midpoint, rotate, v3
from scad_dots.errors import DimensionError, MidpointError


class PostAlign:
    def offset(self, dot_size: float, post_length: float, rot: R3) -> np.ndarray:
        raise NotImplementedError

    @staticmethod
    def origin() -> "PostCorner":
        return PostAlign.outside(C3.P000)

    @staticmethod
    def outside(corner: C3) -> "PostCorner":
        return PostCorner(post=C1.from_c3(corner), dot=corner)

    @staticmethod
    def midpoint(a: "PostAlign", b: "PostAlign") -> "PostMidpoint":
        return PostMidpoint(a, b)

    @staticmethod
    def outside_midpoint(a: C3, b: C3) -> "PostMidpoint":
        return PostMidpoint(PostAlign.outside(a), PostAlign.outside(b))

    @staticmethod
    def centroid() -> "PostMidpoint":
        return PostAlign.outside_midpoint(C3.P000, C3.P111)


@dataclass(frozen=True)
class PostCorner(PostAlign):
    post: C1
    dot: C3

    def offset(self, dot_size: float, post_length: float, rot: R3) -> np.ndarray:
        return self.dot.offset(np.full(3, float(dot_size)), rot) + self.post.offset(post_length, rot)


@dataclass(frozen=True)
class PostMidpoint(PostAlign):
    a: PostCorner
    b: PostCorner

    def __post_init__(self) -> None:
        if not (isinstance(self.a, PostCorner) and isinstance(self.b, PostCorner)):
            raise MidpointError()

    def offset(self, dot_size: float, post_length: float, rot: R3) -> np.ndarray:
        return (self.a.offset(dot_size, post_length, rot) + self.b.offset(dot_size, post_length, rot)) / 2.0


@dataclass(frozen=True)
class PostShapes:
    top: DotShape = DotShape.CUBE
    bot: DotShape = DotShape.CUBE

    @classmethod
    def round(cls) -> "PostShapes":
        """Sphere on top, cylinder on the bottom."""

        return cls(top=DotShape.SPHERE, bot=DotShape.CYLINDER)

    def get(self, upper_or_lower: C1) -> DotShape:
        return self.top if upper_or_lower.is_high() else self.bot


def as_post_shapes(shapes: Union[DotShape, PostShapes]) -> PostShapes:
    if isinstance(shapes, DotShape):
        return PostShapes(shapes, shapes)
    return shapes


class PostLink(Enum):
    SOLID = "solid"
    DOTS = "dots"


class PostSnakeLink(Enum):
    CHAIN = "chain"
    POSTS = "posts"


@dataclass(frozen=True)
class PostSpec:
    pos: np.ndarray
    align: PostAlign
    length: float
    size: float
    rot: R3 = field(default_factory=R3.identity)
    shapes: Union[DotShape, PostShapes] = DotShape.CUBE

    def axis(self) -> np.ndarray:
        return rotate(self.rot, Axis.Z)

    def dot_spec(self, upper_or_lower: C1) -> DotSpec:
        if self.size <= 0 or self.length < self.size:
            raise DimensionError(f"Post of length {self.length} can't hold dots of size {self.size}")
        inner_length = self.length - self.size
        origin = v3(self.pos) - self.align.offset(self.size, inner_length, self.rot)
        return DotSpec(
            pos=origin + upper_or_lower.offset(inner_length, self.rot),
            align=C3.P000,
            size=self.size,
            rot=self.rot,
            shape=as_post_shapes(self.shapes).get(upper_or_lower),
        )


@dataclass(frozen=True)
class Post(MapDots, MinMaxCoord):
    top: Dot
    bot: Dot

    @classmethod
    def new(cls, spec: PostSpec) -> "Post":
        return cls(top=Dot.new(spec.dot_spec(C1.P1)), bot=Dot.new(spec.dot_spec(C1.P0)))

    @property
    def size(self) -> float:
        return self.top.size

    def get_dot(self, upper_or_lower: C1) -> Dot:
        return self.top if upper_or_lower.is_high() else self.bot

    def pos(self, align: PostAlign) -> np.ndarray:
        if isinstance(align, PostMidpoint):
            return midpoint(self.pos(align.a), self.pos(align.b))
        return self.get_dot(align.post).pos(align.dot)

    def edge(self, axis: Axis) -> np.ndarray:
        """Vector along one outer edge, in the Post's own (unrotated) axes."""

        return self.pos(PostAlign.outside(C3.from_axis(axis))) - self.pos(PostAlign.origin())

    def edge_unit_vec(self, axis: Axis) -> np.ndarray:
        edge = self.edge(axis)
        return edge / np.linalg.norm(edge)

    def edge_length(self, axis: Axis) -> float:
        return float(np.linalg.norm(self.edge(axis)))

    def copy_raise_bot(self, distance: float) -> "Post":
        """Copy the post with its bottom Dot slid `distance` up the post's axis."""

        if distance > self.edge_length(Axis.Z) - self.top.size:
            raise DimensionError().context("failed to copy_raise_bot, new post would be too short")
        return Post(top=self.top, bot=self.bot.translate(distance * self.edge_unit_vec(Axis.Z)))

    def snake(self, other: "Post", order: Sequence[Axis]) -> "PostSnake":
        tops = Snake.new(self.top, other.top, order).dots
        bots = Snake.new(self.bot, other.bot, order).dots
        return PostSnake(tuple(Post(top=top, bot=bot) for top, bot in zip(tops, bots)))

    @staticmethod
    def chain(posts: Sequence["Post"]) -> Tree:
        return chain([post.link(PostLink.SOLID) for post in posts])

    @staticmethod
    def chain_loop(posts: Sequence["Post"]) -> Tree:
        return chain_loop([post.link(PostLink.SOLID) for post in posts])

    def link(self, style: PostLink) -> Tree:
        if style is PostLink.SOLID:
            return hull([self.bot, self.top])
        if style is PostLink.DOTS:
            return union([self.bot, self.top])
        raise ValueError(f"Unknown post link style: {style}")


@dataclass(frozen=True)
class PostSnake(MapDots, MinMaxCoord):
    posts: Tuple[Post, Post, Post, Post]

    def bottoms(self) -> List[Dot]:
        return [post.bot for post in self.posts]

    def get(self, index: int) -> Post:
        return self.posts[index]

    def link(self, style: PostSnakeLink) -> Tree:
        if style is PostSnakeLink.CHAIN:
            return Post.chain(self.posts)
        if style is PostSnakeLink.POSTS:
            return union(post.link(PostLink.SOLID) for post in self.posts)
        raise ValueError(f"Unknown post snake link style: {style}")
