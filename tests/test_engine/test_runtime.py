"""Tests for the in-memory host runtime."""

import numpy as np
import pytest

from svgmap.engine.runtime import EntityRef, HostRuntime, RecordingRuntime
from svgmap.engine.tessellation import GeometryBuffer
from svgmap.svg.colors import Color


def _buffer() -> GeometryBuffer:
    vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float32)
    return GeometryBuffer(vertices, np.array([0, 1, 2], dtype=np.uint32))


def test_spawn_assigns_increasing_handles(runtime):
    first = runtime.spawn(_buffer(), Color.RED, (0.0, 0.0, 0.0))
    second = runtime.spawn(_buffer(), Color.BLACK, (1.0, 0.0, 0.0))
    assert second > first
    assert runtime.entities[second].color == Color.BLACK
    assert runtime.entities[second].translation == (1.0, 0.0, 0.0)
    assert len(runtime.meshes()) == 2


def test_group_children(runtime):
    group = runtime.spawn_group((5.0, 5.0, 0.0))
    child = runtime.spawn(_buffer(), Color.RED, (0.0, 0.0, 0.0), parent=group)
    assert [e.handle for e in runtime.children(group)] == [child]
    assert runtime.entities[group].geometry is None
    assert len(runtime.meshes()) == 1


def test_unknown_parent(runtime):
    with pytest.raises(KeyError):
        runtime.spawn(_buffer(), Color.RED, (0.0, 0.0, 0.0), parent=42)


def test_entity_ref_insert(runtime):
    handle = runtime.spawn(_buffer(), Color.RED, (0.0, 0.0, 0.0))
    ref = EntityRef(runtime, handle).insert("a").insert("b", "c")
    assert ref.handle == handle
    assert runtime.entities[handle].markers == ["a", "b", "c"]


def test_geometry_buffer_helpers():
    buffer = _buffer()
    assert buffer.triangle_count == 1
    assert buffer.triangles().shape == (1, 3, 3)
    assert buffer.area() == pytest.approx(0.5)


def test_recording_runtime_satisfies_protocol():
    runtime: HostRuntime = RecordingRuntime()
    assert callable(runtime.spawn) and callable(runtime.spawn_group) and callable(runtime.attach)
