"""Example scad_dots model: a frame of spheres standing on a solid slab."""

from __future__ import annotations

from scad_dots import (
    Axis,
    CubeFace,
    Cuboid,
    CuboidAlign,
    CuboidLink,
    CuboidSpec,
    DotShape,
    RectLink,
    axis_degrees,
    union,
)


def _frame() -> Cuboid:
    return Cuboid.new(
        CuboidSpec(
            pos=(0.0, 0.0, 0.0),
            align=CuboidAlign.center_face(CubeFace.Z0),
            x_length=12.0,
            y_length=8.0,
            z_length=6.0,
            size=1.5,
            rot=axis_degrees(Axis.Z, 30.0),
            shapes=DotShape.SPHERE,
        )
    )


def dots():
    return [_frame()]


def build():
    frame = _frame()
    slab = frame.bot.map(lambda d: d.with_shape(DotShape.CUBE)).map_translate_z(-frame.size)
    return union([frame.link(CuboidLink.FRAME), slab.link(RectLink.SOLID)])
