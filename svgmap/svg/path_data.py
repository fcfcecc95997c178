"""Path-data tokenizer: ``d`` attribute string to typed path commands.

Operands are kept exactly as written: relative commands keep their relative
offsets and H/V keep their single coordinate. Resolving them against the
current point is the coordinate transform's job, and curve flattening happens
at tessellation time.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from svgmap.errors import MalformedPathData


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class HorizontalLineTo:
    x: float
    relative: bool = False


@dataclass(frozen=True)
class VerticalLineTo:
    y: float
    relative: bool = False


@dataclass(frozen=True)
class QuadraticCurveTo:
    x1: float
    y1: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class CubicCurveTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class SmoothQuadraticCurveTo:
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class SmoothCubicCurveTo:
    x2: float
    y2: float
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class EllipticalArcTo:
    rx: float
    ry: float
    x_axis_rotation: float
    large_arc: bool
    sweep: bool
    x: float
    y: float
    relative: bool = False


@dataclass(frozen=True)
class ClosePath:
    relative: bool = False


PathCommand = Union[
    MoveTo,
    LineTo,
    HorizontalLineTo,
    VerticalLineTo,
    QuadraticCurveTo,
    CubicCurveTo,
    SmoothQuadraticCurveTo,
    SmoothCubicCurveTo,
    EllipticalArcTo,
    ClosePath,
]

# Operand count per command letter. Arc flags count as operands.
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "Q": 4, "C": 6, "T": 2, "S": 4, "A": 7, "Z": 0}

_BUILDERS = {
    "M": MoveTo,
    "L": LineTo,
    "H": HorizontalLineTo,
    "V": VerticalLineTo,
    "Q": QuadraticCurveTo,
    "C": CubicCurveTo,
    "T": SmoothQuadraticCurveTo,
    "S": SmoothCubicCurveTo,
}

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_WSP_RE = re.compile(r"[ \t\r\n\f]*")
_NUMBER_START = set("+-.0123456789")


class _Scanner:
    """Cursor over the path-data string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        self.pos = _WSP_RE.match(self.text, self.pos).end()

    def skip_separator(self) -> bool:
        """Consume ``wsp* ,? wsp*``; return True if a comma was eaten."""
        self.skip_whitespace()
        if self.peek() == ",":
            self.pos += 1
            self.skip_whitespace()
            return True
        return False

    def number(self) -> float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise MalformedPathData("expected a number", self.pos)
        value = float(match.group(0))
        if not math.isfinite(value):
            raise MalformedPathData("number out of range", self.pos)
        self.pos = match.end()
        return value

    def flag(self) -> bool:
        char = self.peek()
        if char not in ("0", "1"):
            raise MalformedPathData("expected an arc flag (0 or 1)", self.pos)
        self.pos += 1
        return char == "1"

    def starts_number(self) -> bool:
        return self.peek() in _NUMBER_START


def _read_operands(scanner: _Scanner, kind: str) -> list[float]:
    operands: list[float] = []
    for i in range(_ARITY[kind]):
        if i > 0:
            scanner.skip_separator()
        if kind == "A" and i in (3, 4):
            operands.append(float(scanner.flag()))
        else:
            operands.append(scanner.number())
    return operands


def _build(kind: str, relative: bool, operands: list[float]) -> PathCommand:
    if kind == "A":
        rx, ry, rotation, large_arc, sweep, x, y = operands
        return EllipticalArcTo(rx, ry, rotation, bool(large_arc), bool(sweep), x, y, relative)
    return _BUILDERS[kind](*operands, relative=relative)


def tokenize_path(path_data: str) -> list[PathCommand]:
    """Parse path data into commands, in source order.

    Raises MalformedPathData if the whole string cannot be consumed or the
    path does not start with a moveto.
    """
    scanner = _Scanner(path_data)
    commands: list[PathCommand] = []

    scanner.skip_whitespace()
    if scanner.at_end():
        raise MalformedPathData("empty path data", 0)

    while not scanner.at_end():
        letter = scanner.peek()
        kind = letter.upper()
        if kind not in _ARITY:
            raise MalformedPathData(f"unexpected character {letter!r}", scanner.pos)
        if not commands and kind != "M":
            raise MalformedPathData("path data must begin with a moveto", scanner.pos)
        relative = letter.islower()
        scanner.pos += 1
        scanner.skip_whitespace()

        if kind == "Z":
            commands.append(ClosePath(relative))
            continue

        if not scanner.starts_number():
            raise MalformedPathData(f"missing operands for {letter!r}", scanner.pos)

        # Operand groups repeat implicitly; extra pairs after a moveto are linetos.
        group_kind = kind
        while True:
            commands.append(_build(group_kind, relative, _read_operands(scanner, group_kind)))
            if group_kind == "M":
                group_kind = "L"
            comma = scanner.skip_separator()
            if scanner.starts_number():
                continue
            if comma:
                raise MalformedPathData("dangling comma", scanner.pos)
            break

    return commands


def endpoint(command: PathCommand) -> tuple[float | None, float | None]:
    """The raw (x, y) endpoint operands of a command; None where the command has none."""
    return (getattr(command, "x", None), getattr(command, "y", None))
