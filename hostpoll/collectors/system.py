"""
System-wide utilization collector.

Collects:
- RAM usage percent
- CPU usage percent (all cores)
- Swap usage percent
"""

import asyncio

from ..config.schema import SystemConfig
from ..registry import HostMetrics, MetricRegistry
from ..samplers.base import SourceUnavailable
from ..samplers.system import sample_cpu, sample_memory, sample_swap
from .base import Collector, CollectorResult


class SystemCollector(Collector):
    """
    Collector for RAM, CPU and swap gauges.

    Each value is sampled independently: a failing memory query does not
    hold back the CPU or swap values of the same cycle.
    """

    SOURCE_TYPE = "system"

    def __init__(self, registry: MetricRegistry, metrics: HostMetrics, config: SystemConfig):
        super().__init__(
            registry,
            update_interval=config.update_interval,
            enabled=config.enabled,
        )
        self.config = config
        self.metrics = metrics

    async def initialize(self) -> None:
        """Prime the CPU counter so the first reported value is meaningful."""
        if self.config.cpu:
            try:
                await asyncio.to_thread(sample_cpu)
            except SourceUnavailable as e:
                self.logger.debug(f"CPU priming failed: {e}")
        await super().initialize()

    async def collect(self) -> CollectorResult:
        result = CollectorResult()

        sources = []
        if self.config.memory:
            sources.append((self.metrics.ram_usage, sample_memory))
        if self.config.cpu:
            sources.append((self.metrics.cpu_usage, sample_cpu))
        if self.config.swap:
            sources.append((self.metrics.swap_usage, sample_swap))

        for metric, sampler in sources:
            try:
                value = await asyncio.to_thread(sampler)
            except SourceUnavailable as e:
                result.add_error(e)
                continue
            result.set(metric, value)

        return result
