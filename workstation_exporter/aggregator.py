"""
Collection cycle orchestration.

A cycle probes every enabled source module concurrently, waits for all of
them, flattens their records in module order and applies them to the
metric registry in a single pass.
"""

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .collectors.base import ModuleResult, SourceModule
from .exposition import render_exposition
from .logging import get_logger
from .models.record import MetricRecord
from .registry import MetricRegistry


logger = get_logger("aggregator")


@dataclass
class CycleReport:
    """What one collection cycle did."""

    results: list[ModuleResult] = field(default_factory=list)
    applied: int = 0
    dropped: int = 0

    @property
    def records(self) -> list[MetricRecord]:
        return [record for result in self.results for record in result.records]

    @property
    def failed(self) -> list[ModuleResult]:
        return [result for result in self.results if not result.ok]


class Aggregator:
    """
    Runs collection cycles over a fixed set of source modules.

    Disabled modules are dropped at construction and never probed.
    """

    def __init__(
        self,
        modules: Iterable[SourceModule],
        registry: MetricRegistry | None = None,
        render: Callable[[MetricRegistry], str] = render_exposition,
    ):
        modules = list(modules)
        self.active_modules = [module for module in modules if module.enabled]
        self.registry = registry if registry is not None else MetricRegistry()
        self._render = render

        skipped = [module.name for module in modules if not module.enabled]
        if skipped:
            logger.info(f"Disabled modules: {', '.join(skipped)}")

    async def run_cycle(self) -> CycleReport:
        """Probe all active modules and update the registry."""
        results = await asyncio.gather(
            *(module.safe_collect() for module in self.active_modules)
        )
        report = CycleReport(results=list(results))

        # No awaits from here on: the registry update is atomic on the loop
        for record in report.records:
            if self.registry.apply(record):
                report.applied += 1
            else:
                report.dropped += 1

        logger.debug(
            f"Cycle done: {len(report.results)} modules, {report.applied} applied, "
            f"{report.dropped} dropped, {len(report.failed)} failed"
        )
        return report

    async def collect_cycle(self) -> str:
        """Run one cycle and return the rendered exposition."""
        await self.run_cycle()
        return self._render(self.registry)
