"""Lower a CSG tree to OpenSCAD source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from scad_dots.core.cylinder import Cylinder
from scad_dots.core.dot import Dot, DotShape
from scad_dots.core.extrusion import Extrusion
from scad_dots.core.tree import Color, Diff, Hull, Intersect, Mirror, Rotate, Tree, TreeObject, Union, to_tree
from scad_dots.core.utils import Corner3 as C3, rotate
from scad_dots.errors import ScadDotsError

logger = logging.getLogger(__name__)

INDENT = "    "


class RenderQuality(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def detail(self) -> int:
        """Value of OpenSCAD's `$fn`, the number of fragments in a full circle."""

        return _DETAIL[self]


_DETAIL = {RenderQuality.LOW: 5, RenderQuality.MEDIUM: 20, RenderQuality.HIGH: 60}


@dataclass(frozen=True)
class ScadNode:
    """One OpenSCAD module call: `name(args)` followed by its children."""

    name: str
    args: Tuple[Tuple[Optional[str], Any], ...] = ()
    children: Tuple["ScadNode", ...] = ()


@dataclass(frozen=True)
class ScadFile:
    assignments: Tuple[Tuple[str, Any], ...]
    objects: Tuple[ScadNode, ...]

    def to_code(self) -> str:
        lines = [f"{name} = {_format_value(value)};" for name, value in self.assignments]
        if lines:
            lines.append("")
        for node in self.objects:
            _write_node(node, 0, lines)
        return "\n".join(lines) + "\n"


def to_scad_file(thing, quality: RenderQuality = RenderQuality.LOW) -> ScadFile:
    tree = to_tree(thing)
    try:
        node = render_tree(tree)
    except ScadDotsError as exc:
        raise exc.context("failed to render to scad") from exc
    return ScadFile(assignments=(("$fn", quality.detail),), objects=(node,))


def to_code(thing, quality: RenderQuality = RenderQuality.LOW) -> str:
    code = to_scad_file(thing, quality).to_code()
    logger.debug("Rendered %d lines of OpenSCAD at %s quality", code.count("\n"), quality.value)
    return code


def to_file(thing, path: Path, quality: RenderQuality = RenderQuality.LOW) -> Path:
    path = Path(path)
    path.write_text(to_code(thing, quality))
    logger.debug("Wrote %s", path)
    return path


def render_tree(tree: Tree) -> ScadNode:
    if isinstance(tree, TreeObject):
        return render_object(tree.obj)
    children = []
    for child in tree.children:
        try:
            children.append(render_tree(child))
        except ScadDotsError as exc:
            raise exc.context("failed to render child of operator") from exc
    return _operation(tree, tuple(children))


def _operation(tree: Tree, children: Tuple[ScadNode, ...]) -> ScadNode:
    if isinstance(tree, Union):
        return ScadNode("union", (), children)
    if isinstance(tree, Hull):
        return ScadNode("hull", (), children)
    if isinstance(tree, Diff):
        return ScadNode("difference", (), children)
    if isinstance(tree, Intersect):
        return ScadNode("intersection", (), children)
    if isinstance(tree, Rotate):
        return ScadNode("rotate", (("a", tree.degrees), ("v", list(tree.axis))), children)
    if isinstance(tree, Color):
        return ScadNode("color", ((None, list(tree.spec.rgba())),), children)
    if isinstance(tree, Mirror):
        return ScadNode("mirror", ((None, list(tree.normal)),), children)
    raise TypeError(f"Can't render tree node {type(tree).__name__}.")


def render_object(obj) -> ScadNode:
    if isinstance(obj, Dot):
        return _render_dot(obj)
    if isinstance(obj, Cylinder):
        return _render_cylinder(obj)
    if isinstance(obj, Extrusion):
        return _render_extrusion(obj)
    raise TypeError(f"Can't render {type(obj).__name__}.")


def _translate_rotate(translation, degrees: float, axis, shape: ScadNode) -> ScadNode:
    rotated = ScadNode("rotate", (("a", degrees), ("v", list(axis))), (shape,))
    return ScadNode("translate", ((None, list(translation)),), (rotated,))


def _render_dot(dot: Dot) -> ScadNode:
    half = dot.size / 2.0
    # OpenSCAD centers spheres and cylinders (in XY) on the origin
    if dot.shape is DotShape.CUBE:
        to_p000 = np.zeros(3)
        shape = ScadNode("cube", ((None, [dot.size] * 3),))
    elif dot.shape is DotShape.SPHERE:
        to_p000 = np.array([half, half, half])
        shape = ScadNode("sphere", (("d", dot.size),))
    else:
        to_p000 = np.array([half, half, 0.0])
        shape = ScadNode("cylinder", (("h", dot.size), ("d", dot.size)))
    translation = dot.pos(C3.P000) + rotate(dot.rot, to_p000)
    return _translate_rotate(translation, dot.rot_degs(), dot.rot_axis(), shape)


def _render_cylinder(cylinder: Cylinder) -> ScadNode:
    shape = ScadNode("cylinder", (("h", cylinder.height), ("d", cylinder.diameter)))
    return _translate_rotate(cylinder.center_bot_pos, cylinder.rot_degs(), cylinder.rot_axis(), shape)


def _render_extrusion(extrusion: Extrusion) -> ScadNode:
    points = [list(point) for point in extrusion.perimeter]
    polygon = ScadNode("polygon", (("points", points),))
    extrude = ScadNode("linear_extrude", (("height", extrusion.thickness),), (polygon,))
    return ScadNode("translate", ((None, [0.0, 0.0, extrusion.bottom_z]),), (extrude,))


def _format_number(value) -> str:
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return str(int(value))
    number = float(value)
    if number == 0:
        number = 0.0
    return repr(number)


def _format_value(value) -> str:
    if isinstance(value, (list, tuple, np.ndarray)):
        return "[" + ", ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, str):
        return f'"{value}"'
    return _format_number(value)


def _format_args(args: Sequence[Tuple[Optional[str], Any]]) -> str:
    parts = []
    for key, value in args:
        text = _format_value(value)
        parts.append(text if key is None else f"{key}={text}")
    return ", ".join(parts)


def _write_node(node: ScadNode, depth: int, lines: List[str]) -> None:
    pad = INDENT * depth
    call = f"{pad}{node.name}({_format_args(node.args)})"
    if not node.children:
        lines.append(call + ";")
        return
    lines.append(call)
    lines.append(pad + "{")
    for child in node.children:
        _write_node(child, depth + 1, lines)
    lines.append(pad + "}")
