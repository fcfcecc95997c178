"""Pipeline orchestrator: runs load stages in dependency order with pass gating."""

from __future__ import annotations

import logging
import time

from svgmap.engine.config import LoaderConfig
from svgmap.engine.context import LoadContext
from svgmap.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from svgmap.errors import SvgMapError

logger = logging.getLogger(__name__)

FILL_STAGE = "S2.01"
STROKE_STAGE = "S2.02"


class Pipeline:
    """Orchestrates the load stages."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: LoaderConfig | None = None,
    ) -> None:
        if registry is None:
            import svgmap.engine.stages  # noqa: F401  (registers the built-in stages)

            registry = get_registry()
        self.registry = registry
        self.config = config

    def run(self, ctx: LoadContext) -> LoadContext:
        """Run every stage on ``ctx``. Fatal errors propagate; the rest land in ``ctx.errors``."""
        start = time.perf_counter()
        if self.config is not None:
            ctx.config = self.config

        skip_ids = self._adaptive_gate(ctx)
        ordered = [s for s in self.registry.resolve_order() if s.id not in skip_ids]

        logger.info("Pipeline: %d stages queued (%d skipped)", len(ordered), len(skip_ids))

        for spec in ordered:
            self._run_stage(ctx, spec)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages, %d records, %d diagnostics in %.0fms",
            len(ctx.completed_stages),
            len(ordered),
            len(ctx.records),
            len(ctx.diagnostics),
            total,
        )
        return ctx

    def run_layer(self, ctx: LoadContext, layer: Layer) -> LoadContext:
        """Run only the stages of one layer."""
        for spec in self.registry.get_layer(layer):
            self._run_stage(ctx, spec)
        return ctx

    def _run_stage(self, ctx: LoadContext, spec: StageSpec) -> None:
        failed = [d for d in spec.dependencies if d in ctx.errors]
        if failed:
            ctx.errors[spec.id] = f"skipped: dependency {', '.join(failed)} failed"
            logger.warning("  %s SKIPPED: dependency %s failed", spec.id, ", ".join(failed))
            return

        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
        except SvgMapError as e:
            if e.fatal:
                raise
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)
            return
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)
            return
        ctx.completed_stages.add(spec.id)
        logger.debug("  %s completed in %.1fms", spec.id, (time.perf_counter() - t0) * 1000)

    def _adaptive_gate(self, ctx: LoadContext) -> set[str]:
        """Stages to skip for this load: disabled stroke or fill passes."""
        skip: set[str] = set()
        if not ctx.config.fill_enabled:
            skip.add(FILL_STAGE)
        if not ctx.config.stroke_enabled:
            skip.add(STROKE_STAGE)
        return skip


def create_pipeline(config: LoaderConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline over the built-in stages."""
    return Pipeline(config=config)
