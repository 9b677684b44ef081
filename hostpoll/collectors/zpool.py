"""
Storage pool capacity collector.

Shells out to the pool listing command on every cycle. The command runs
with a timeout so a hung process only costs this collector one cycle.
"""

from ..config.schema import ZpoolConfig
from ..registry import HostMetrics, MetricRegistry
from ..samplers.base import SourceUnavailable
from ..samplers.zpool import sample_pools
from .base import Collector, CollectorResult


class ZpoolCollector(Collector):
    """Collector for per-pool capacity percent."""

    SOURCE_TYPE = "zpool"

    def __init__(self, registry: MetricRegistry, metrics: HostMetrics, config: ZpoolConfig):
        super().__init__(
            registry,
            update_interval=config.update_interval,
            enabled=config.enabled,
        )
        self.config = config
        self.metrics = metrics
        self._command = tuple(config.command)

    async def collect(self) -> CollectorResult:
        result = CollectorResult()

        try:
            batch = await sample_pools(self._command, self.config.timeout)
        except SourceUnavailable as e:
            result.add_error(e)
            return result

        for sample in batch.samples:
            result.set(self.metrics.zpool_usage, sample.value, **sample.labels)
        for skipped in batch.skipped:
            result.add_error(skipped)

        return result
