"""Stage registry: each load stage is a plain function registered via decorator.

Usage:
    @stage(id="S2.01", layer=Layer.TESSELLATION, dependencies=["S1.02"])
    def fill_tessellation(ctx: LoadContext) -> None:
        for segment in ctx.segments:
            ...

A new stage is one module under ``svgmap.engine.stages`` with the decorator.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from svgmap.engine.context import LoadContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    EXTRACTION = 0
    GEOMETRY = 1
    TESSELLATION = 2
    DISPATCH = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["LoadContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        return sorted((s for s in self._stages.values() if s.layer == layer), key=lambda s: s.id)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

    def _with_dependencies(self, stage_ids: set[str]) -> set[str]:
        closure: set[str] = set()
        pending = list(stage_ids)
        while pending:
            sid = pending.pop()
            if sid in closure or sid not in self._stages:
                continue
            closure.add(sid)
            pending.extend(self._stages[sid].dependencies)
        return closure

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[StageSpec]:
        """Dependency order (Kahn's algorithm, ties broken by ID).

        With ``requested_ids`` only those stages and their transitive
        dependencies are returned.
        """
        ids = set(self._stages) if requested_ids is None else self._with_dependencies(requested_ids)
        pool = {sid: self._stages[sid] for sid in ids}

        remaining = {sid: sum(dep in pool for dep in spec.dependencies) for sid, spec in pool.items()}
        ready = sorted(sid for sid, n in remaining.items() if n == 0)
        ordered: list[StageSpec] = []

        while ready:
            sid = ready.pop(0)
            ordered.append(pool[sid])
            for other, spec in pool.items():
                if sid in spec.dependencies:
                    remaining[other] -= 1
                    if remaining[other] == 0:
                        ready.append(other)
            ready.sort()

        if len(ordered) != len(pool):
            stuck = sorted(set(pool) - {s.id for s in ordered})
            raise ValueError(f"Circular dependency detected among: {stuck}")
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
    registry: StageRegistry | None = None,
):
    """Decorator to register a stage function (into the module registry by default)."""

    def decorator(fn: Callable[["LoadContext"], None]):
        (registry or _registry).register(
            StageSpec(id=id, layer=layer, fn=fn, dependencies=dependencies or [], description=description)
        )
        return fn

    return decorator
