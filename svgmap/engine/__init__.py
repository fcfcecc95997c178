"""svgmap load engine: stage registry, shared context and the pipeline that runs it."""

from svgmap.engine.config import LoaderConfig
from svgmap.engine.context import GeometryPass, LoadContext, PathSegment, RenderRecord
from svgmap.engine.pipeline import Pipeline, create_pipeline
from svgmap.engine.registry import Layer, StageRegistry, get_registry, stage

__all__ = [
    "GeometryPass",
    "Layer",
    "LoadContext",
    "LoaderConfig",
    "PathSegment",
    "Pipeline",
    "RenderRecord",
    "StageRegistry",
    "create_pipeline",
    "get_registry",
    "stage",
]
