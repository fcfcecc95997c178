"""Style strategies: decide the material color and domain semantics of each mesh.

Subclass ``StyleStrategy`` and override either method:

    class Walls(StyleStrategy):
        def attach_semantics(self, style, entity):
            if style.get("stroke") == "#000000":
                entity.insert("wall")
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from svgmap.svg.colors import Color
from svgmap.svg.style import StyleAttributes

if TYPE_CHECKING:
    from svgmap.engine.runtime import EntityRef


class PassKind(str, enum.Enum):
    FILL = "fill"
    STROKE = "stroke"


class StyleStrategy:
    """Default strategy: every mesh is black and carries no semantics."""

    fallback_color: Color = Color.BLACK

    def color_for(self, style: StyleAttributes, kind: PassKind = PassKind.STROKE) -> Color:
        return self.fallback_color

    def attach_semantics(self, style: StyleAttributes, entity: "EntityRef") -> None:
        return None


class LiteralStrategy(StyleStrategy):
    """Use the color written in the document; red when it cannot be parsed."""

    fallback_color = Color.RED

    def color_for(self, style: StyleAttributes, kind: PassKind = PassKind.STROKE) -> Color:
        color = style.fill() if kind is PassKind.FILL else style.stroke()
        return color if color is not None else self.fallback_color
