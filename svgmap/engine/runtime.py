"""Host runtime seam: where finished meshes become entities.

The loader only talks to ``HostRuntime``. ``RecordingRuntime`` keeps every
spawned entity in memory and is the default when no host is supplied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Hashable, Protocol

from svgmap.engine.tessellation import GeometryBuffer, Translation
from svgmap.svg.colors import Color

logger = logging.getLogger(__name__)


class HostRuntime(Protocol):
    def spawn(
        self,
        geometry: GeometryBuffer,
        color: Color,
        translation: Translation,
        parent: Hashable | None = None,
    ) -> Hashable: ...

    def spawn_group(self, translation: Translation) -> Hashable: ...

    def attach(self, handle: Hashable, marker: Any) -> None: ...


@dataclass(frozen=True)
class EntityRef:
    """What a strategy sees of a spawned entity: a handle and a way to tag it."""

    runtime: HostRuntime
    handle: Hashable

    def insert(self, *markers: Any) -> "EntityRef":
        for marker in markers:
            self.runtime.attach(self.handle, marker)
        return self


@dataclass
class SpawnedEntity:
    handle: int
    geometry: GeometryBuffer | None
    color: Color | None
    translation: Translation
    parent: int | None = None
    markers: list[Any] = field(default_factory=list)


class RecordingRuntime:
    """In-memory HostRuntime with integer handles."""

    def __init__(self) -> None:
        self.entities: dict[int, SpawnedEntity] = {}
        self._next_handle = 0

    def _new_handle(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def spawn(
        self,
        geometry: GeometryBuffer,
        color: Color,
        translation: Translation,
        parent: int | None = None,
    ) -> int:
        if parent is not None and parent not in self.entities:
            raise KeyError(f"Unknown parent entity: {parent}")
        handle = self._new_handle()
        self.entities[handle] = SpawnedEntity(handle, geometry, color, translation, parent)
        logger.debug("Spawned mesh entity %d (%d triangles)", handle, geometry.triangle_count)
        return handle

    def spawn_group(self, translation: Translation) -> int:
        handle = self._new_handle()
        self.entities[handle] = SpawnedEntity(handle, None, None, translation)
        return handle

    def attach(self, handle: int, marker: Any) -> None:
        self.entities[handle].markers.append(marker)

    def children(self, parent: int) -> list[SpawnedEntity]:
        return [e for e in self.entities.values() if e.parent == parent]

    def meshes(self) -> list[SpawnedEntity]:
        return [e for e in self.entities.values() if e.geometry is not None]
