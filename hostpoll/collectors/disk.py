"""
Filesystem usage collector.

One gauge per mounted partition, labelled by device and mount point.
Mount points under excluded prefixes are never reported.
"""

import asyncio

from ..config.schema import FilesystemConfig
from ..registry import HostMetrics, MetricRegistry
from ..samplers.base import SourceUnavailable
from ..samplers.disk import sample_filesystems
from .base import Collector, CollectorResult


class FilesystemCollector(Collector):
    """Collector for per-mount usage percent."""

    SOURCE_TYPE = "filesystem"

    def __init__(self, registry: MetricRegistry, metrics: HostMetrics, config: FilesystemConfig):
        super().__init__(
            registry,
            update_interval=config.update_interval,
            enabled=config.enabled,
        )
        self.config = config
        self.metrics = metrics
        self._exclude = tuple(config.exclude)

    async def collect(self) -> CollectorResult:
        result = CollectorResult()

        try:
            batch = await asyncio.to_thread(sample_filesystems, self._exclude)
        except SourceUnavailable as e:
            result.add_error(e)
            return result

        for sample in batch.samples:
            result.set(self.metrics.filesystem_usage, sample.value, **sample.labels)
        for skipped in batch.skipped:
            result.add_error(skipped)

        return result
