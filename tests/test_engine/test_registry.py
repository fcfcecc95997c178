"""Tests for the stage registry."""

import pytest

from svgmap.engine.context import LoadContext
from svgmap.engine.registry import Layer, StageRegistry, StageSpec, stage


def _noop(ctx: LoadContext) -> None:
    pass


def test_register_and_get():
    reg = StageRegistry()
    spec = StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop)
    reg.register(spec)
    assert reg.get("S0.01") is spec
    assert reg.count == 1


def test_duplicate_rejected():
    reg = StageRegistry()
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))


def test_get_layer():
    reg = StageRegistry()
    reg.register(StageSpec(id="S1.01", layer=Layer.GEOMETRY, fn=_noop))
    reg.register(StageSpec(id="S0.02", layer=Layer.EXTRACTION, fn=_noop))
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))
    assert [s.id for s in reg.get_layer(Layer.EXTRACTION)] == ["S0.01", "S0.02"]


def test_resolve_order_with_deps():
    reg = StageRegistry()
    reg.register(StageSpec(id="S1.02", layer=Layer.GEOMETRY, fn=_noop, dependencies=["S1.01"]))
    reg.register(StageSpec(id="S1.01", layer=Layer.GEOMETRY, fn=_noop, dependencies=["S0.02"]))
    reg.register(StageSpec(id="S0.02", layer=Layer.EXTRACTION, fn=_noop))
    reg.register(StageSpec(id="S2.01", layer=Layer.TESSELLATION, fn=_noop))
    ids = [s.id for s in reg.resolve_order({"S1.02"})]
    assert ids == ["S0.02", "S1.01", "S1.02"]


def test_resolve_order_all():
    reg = StageRegistry()
    for i in range(5):
        reg.register(StageSpec(id=f"S0.0{i + 1}", layer=Layer.EXTRACTION, fn=_noop))
    assert len(reg.resolve_order(None)) == 5


def test_cycle_detected():
    reg = StageRegistry()
    reg.register(StageSpec(id="A", layer=Layer.EXTRACTION, fn=_noop, dependencies=["B"]))
    reg.register(StageSpec(id="B", layer=Layer.EXTRACTION, fn=_noop, dependencies=["A"]))
    with pytest.raises(ValueError, match="Circular"):
        reg.resolve_order()


def test_decorator_registers_into_given_registry():
    reg = StageRegistry()

    @stage(id="S9.01", layer=Layer.DISPATCH, dependencies=["S0.01"], registry=reg)
    def late(ctx: LoadContext) -> None:
        pass

    assert reg.get("S9.01").fn is late
    assert reg.get("S9.01").dependencies == ["S0.01"]


def test_builtin_stages_order():
    from svgmap.engine.pipeline import create_pipeline

    ids = [s.id for s in create_pipeline().registry.resolve_order()]
    assert ids == ["S0.01", "S0.02", "S1.01", "S1.02", "S2.01", "S2.02", "S3.01"]
