"""Error taxonomy for the SVG map loader.

Every error carries a ``fatal`` flag. Fatal errors abort the whole document
load; the rest are isolated to one path segment, one command or one pass and
end up as diagnostics on the load result.
"""

from __future__ import annotations


class SvgMapError(Exception):
    """Base class for every error raised by the loader."""

    fatal = False


class DocumentReadError(SvgMapError):
    """The source document could not be read or parsed."""

    fatal = True


class MissingStyleProperty(SvgMapError):
    """A required style property was queried but is not present."""

    fatal = True

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Style property {name!r} (used to build svg-based geometry) is missing! Check your SVG file"
        )
        self.name = name


class StylePropertyError(SvgMapError, ValueError):
    """A style property is present but its value cannot be parsed."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Malformed value for style property {name!r}: {value!r}")
        self.name = name
        self.value = value


class MalformedPathData(SvgMapError, ValueError):
    """Path data could not be consumed to completion."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position


class UnsupportedPathCommand(SvgMapError):
    """A recognized path command that the coordinate transform does not handle."""

    def __init__(self, command: object) -> None:
        super().__init__(f"Unsupported path command skipped: {command!r}")
        self.command = command


class TessellationError(SvgMapError):
    """Geometry is too degenerate to produce a triangulation."""
