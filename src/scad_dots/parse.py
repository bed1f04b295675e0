"""Parse the OpenSCAD subset produced by :mod:`scad_dots.render` and compare sources.

Only module calls, their argument lists, nested children blocks, top level
assignments such as ``$fn = 5;`` and comments are understood. Numbers are
compared with a relative tolerance, so two renderings of the same model that
differ only by floating point noise compare equal.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from scad_dots.errors import ParseError
from scad_dots.render import ScadFile, ScadNode

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<comment>//[^\n]*|/\*.*?\*/)
    |(?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
    |(?P<ident>\$?[A-Za-z_][A-Za-z0-9_]*)
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<punct>[()\[\]{};,=])
    """,
    re.VERBOSE | re.DOTALL,
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


def tokenize(code: str) -> List[Token]:
    tokens = []
    pos = 0
    while pos < len(code):
        match = _TOKEN_RE.match(code, pos)
        if match is None:
            raise ParseError(f"unexpected character {code[pos]!r} at offset {pos}")
        kind = match.lastgroup
        if kind not in ("space", "comment"):
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError("unexpected end of input")
        self.index += 1
        return token

    def expect(self, text: str) -> Token:
        token = self.next()
        if token.text != text:
            raise ParseError(f"expected {text!r} at offset {token.pos}, got {token.text!r}")
        return token

    def at(self, text: str) -> bool:
        token = self.peek()
        return token is not None and token.text == text

    def parse_file(self) -> ScadFile:
        assignments = []
        objects = []
        while self.peek() is not None:
            name = self.next()
            if name.kind != "ident":
                raise ParseError(f"expected a statement at offset {name.pos}, got {name.text!r}")
            if self.at("="):
                self.next()
                value = self.parse_value()
                self.expect(";")
                assignments.append((name.text, value))
            else:
                objects.append(self.parse_call(name))
        return ScadFile(tuple(assignments), tuple(objects))

    def parse_statement(self) -> ScadNode:
        name = self.next()
        if name.kind != "ident":
            raise ParseError(f"expected a module call at offset {name.pos}, got {name.text!r}")
        return self.parse_call(name)

    def parse_call(self, name: Token) -> ScadNode:
        self.expect("(")
        args = self.parse_args()
        self.expect(")")
        if self.at(";"):
            self.next()
            return ScadNode(name.text, args, ())
        if self.at("{"):
            self.next()
            children = []
            while not self.at("}"):
                children.append(self.parse_statement())
            self.next()
            return ScadNode(name.text, args, tuple(children))
        # a single child without braces
        return ScadNode(name.text, args, (self.parse_statement(),))

    def parse_args(self) -> Tuple[Tuple[Optional[str], Any], ...]:
        args = []
        while not self.at(")"):
            key = None
            token = self.peek()
            if token is not None and token.kind == "ident" and self.index + 1 < len(self.tokens):
                if self.tokens[self.index + 1].text == "=":
                    key = self.next().text
                    self.next()
            args.append((key, self.parse_value()))
            if not self.at(")"):
                self.expect(",")
        return tuple(args)

    def parse_value(self) -> Any:
        token = self.next()
        if token.kind == "number":
            return float(token.text)
        if token.kind == "string":
            return token.text[1:-1]
        if token.kind == "ident" and token.text in ("true", "false"):
            return token.text == "true"
        if token.text == "[":
            items = []
            while not self.at("]"):
                items.append(self.parse_value())
                if not self.at("]"):
                    self.expect(",")
            self.next()
            return items
        raise ParseError(f"unexpected value {token.text!r} at offset {token.pos}")


def parse_scad(code: str) -> ScadFile:
    return _Parser(tokenize(code)).parse_file()


def _numbers_close(a: float, b: float, max_relative: float) -> bool:
    diff = abs(a - b)
    # near zero, fall back to an absolute tolerance
    return diff <= max_relative or diff <= max_relative * max(abs(a), abs(b))


def _value_difference(a, b, max_relative: float, where: str) -> Optional[str]:
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return f"{where}: list lengths {len(a)} != {len(b)}"
        for i, (x, y) in enumerate(zip(a, b)):
            found = _value_difference(x, y, max_relative, f"{where}[{i}]")
            if found:
                return found
        return None
    if isinstance(a, bool) or isinstance(b, bool) or isinstance(a, str) or isinstance(b, str):
        return None if a == b else f"{where}: {a!r} != {b!r}"
    if isinstance(a, float) and isinstance(b, float):
        return None if _numbers_close(a, b, max_relative) else f"{where}: {a!r} != {b!r}"
    return f"{where}: {a!r} != {b!r}"


def _node_difference(a: ScadNode, b: ScadNode, max_relative: float, where: str) -> Optional[str]:
    where = f"{where}/{a.name}"
    if a.name != b.name:
        return f"{where}: module {a.name!r} != {b.name!r}"
    if len(a.args) != len(b.args):
        return f"{where}: {len(a.args)} args != {len(b.args)} args"
    for (key_a, value_a), (key_b, value_b) in zip(a.args, b.args):
        if key_a != key_b:
            return f"{where}: argument {key_a!r} != {key_b!r}"
        found = _value_difference(value_a, value_b, max_relative, f"{where}({key_a or ''})")
        if found:
            return found
    if len(a.children) != len(b.children):
        return f"{where}: {len(a.children)} children != {len(b.children)} children"
    for i, (x, y) in enumerate(zip(a.children, b.children)):
        found = _node_difference(x, y, max_relative, f"{where}[{i}]")
        if found:
            return found
    return None


def first_difference(a: str, b: str, max_relative: float = 1e-5) -> Optional[str]:
    """Describe the first structural difference between two OpenSCAD sources, or None."""

    file_a, file_b = parse_scad(a), parse_scad(b)
    if [name for name, _ in file_a.assignments] != [name for name, _ in file_b.assignments]:
        return "assignments differ"
    for (name, value_a), (_, value_b) in zip(file_a.assignments, file_b.assignments):
        found = _value_difference(value_a, value_b, max_relative, name)
        if found:
            return found
    if len(file_a.objects) != len(file_b.objects):
        return f"{len(file_a.objects)} top level objects != {len(file_b.objects)}"
    for x, y in zip(file_a.objects, file_b.objects):
        found = _node_difference(x, y, max_relative, "")
        if found:
            return found
    return None


def scad_relative_eq(a: str, b: str, max_relative: float = 1e-5) -> bool:
    difference = first_difference(a, b, max_relative)
    if difference is not None:
        logger.debug("OpenSCAD sources differ at %s", difference)
    return difference is None
