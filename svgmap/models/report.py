"""Load report models: the serializable summary of one document load."""

from __future__ import annotations

from pydantic import BaseModel, Field

from svgmap.errors import SvgMapError


class Diagnostic(BaseModel):
    """A recoverable problem that skipped a segment, a command or a pass."""

    kind: str  # Error class name, e.g. "MalformedPathData"
    stage: str  # Stage ID that reported it
    segment_index: int | None = None
    element_id: str | None = None
    message: str = ""

    @classmethod
    def from_error(
        cls,
        error: SvgMapError,
        stage: str,
        segment_index: int | None = None,
        element_id: str | None = None,
    ) -> "Diagnostic":
        return cls(
            kind=type(error).__name__,
            stage=stage,
            segment_index=segment_index,
            element_id=element_id,
            message=str(error),
        )


class LoadReport(BaseModel):
    paths: int = 0
    segments: int = 0
    fill_meshes: int = 0
    stroke_meshes: int = 0
    triangles: int = 0
    extent: tuple[float, float] = (0.0, 0.0)
    completed_stages: list[str] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)  # stage ID → message
