"""
Network interface collector.

Publishes cumulative bytes sent/received for interfaces matching the
configured name prefixes. Counters are exported as-is; rates are left to
the scraping side.
"""

import asyncio

from ..config.schema import NetworkConfig
from ..registry import HostMetrics, MetricRegistry
from ..samplers.base import SourceUnavailable
from ..samplers.network import sample_network
from .base import Collector, CollectorResult


class NetworkCollector(Collector):
    """Collector for per-interface byte counters."""

    SOURCE_TYPE = "network"

    def __init__(self, registry: MetricRegistry, metrics: HostMetrics, config: NetworkConfig):
        super().__init__(
            registry,
            update_interval=config.update_interval,
            enabled=config.enabled,
        )
        self.config = config
        self.metrics = metrics
        self._prefixes = tuple(config.interfaces)

    async def collect(self) -> CollectorResult:
        result = CollectorResult()

        try:
            counters = await asyncio.to_thread(sample_network, self._prefixes)
        except SourceUnavailable as e:
            result.add_error(e)
            return result

        for nic in counters:
            result.set(self.metrics.network_bytes_sent, nic.bytes_sent, interface=nic.interface)
            result.set(self.metrics.network_bytes_recv, nic.bytes_recv, interface=nic.interface)

        return result
