"""
Base collection task.

A collector owns one family of samplers and a fixed update interval. Each
cycle it runs its samplers, writes every successful value into the metric
registry and logs every failure. Failed values are simply not written, so
the registry keeps the last known good value.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from ..logging import get_logger
from ..registry import MetricRegistry
from ..samplers.base import MalformedRecord, SamplerError


@dataclass
class MetricUpdate:
    """A value to write into the registry."""

    name: str
    labels: dict[str, str]
    value: float


@dataclass
class CollectorResult:
    """Result of one collection cycle."""

    updates: list[MetricUpdate] = field(default_factory=list)
    errors: list[SamplerError] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def set(self, name: str, value: float, **labels: str) -> None:
        """Queue a value for the registry."""
        self.updates.append(MetricUpdate(name, labels, value))

    def add_error(self, error: SamplerError) -> None:
        self.errors.append(error)

    @property
    def available(self) -> bool:
        """False when the cycle produced nothing but errors."""
        return bool(self.updates) or not self.errors

    def __repr__(self) -> str:
        return f"CollectorResult({len(self.updates)} updates, {len(self.errors)} errors)"


class Collector(ABC):
    """
    Abstract base class for collection tasks.

    Subclasses implement collect(); scheduling, registry writes and error
    logging live here so every data source runs the same loop.
    """

    SOURCE_TYPE: str = "unknown"

    def __init__(
        self,
        registry: MetricRegistry,
        name: str | None = None,
        update_interval: float = 10.0,
        enabled: bool = True,
    ):
        """
        Initialize collector.

        Args:
            registry: Registry receiving collected values
            name: Collector name (defaults to SOURCE_TYPE)
            update_interval: Seconds between cycles
            enabled: Whether the collector runs at all
        """
        self.registry = registry
        self.name = name or self.SOURCE_TYPE
        self.update_interval = update_interval
        self.enabled = enabled
        self.logger = get_logger(f"collectors.{self.name}")

        self._initialized = False
        self._cycles = 0

    async def initialize(self) -> None:
        """
        Called once before the first cycle.

        Override for one-time setup such as priming counters.
        """
        self._initialized = True

    @abstractmethod
    async def collect(self) -> CollectorResult:
        """
        Run the samplers once.

        Sampler failures are recorded on the result, not raised.
        """

    async def safe_collect(self) -> CollectorResult:
        """Collect, turning unexpected exceptions into a logged empty cycle."""
        if not self._initialized:
            await self.initialize()

        try:
            result = await self.collect()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.exception(f"Unexpected error in collector {self.name}: {e}")
            result = CollectorResult()

        return result

    def publish(self, result: CollectorResult) -> None:
        """Write successful values to the registry and log failures."""
        for update in result.updates:
            self.registry.upsert(update.name, update.labels, update.value)

        for error in result.errors:
            if isinstance(error, MalformedRecord):
                self.logger.warning(f"{self.name}: {error}")
            else:
                self.logger.warning(f"Error collecting {self.name} metrics: {error}")

    async def run_once(self) -> CollectorResult:
        """One full cycle: collect then publish."""
        result = await self.safe_collect()
        self.publish(result)
        self._cycles += 1
        self.logger.debug(f"{self.name} cycle {self._cycles}: {result!r}")
        return result

    async def run(self, stop: asyncio.Event) -> None:
        """
        Run cycles until stop is set.

        A cycle in progress when stop is set completes before returning.
        """
        self.logger.info(f"Starting collector: {self.name} (interval: {self.update_interval}s)")

        while not stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.update_interval)
            except TimeoutError:
                pass

        self.logger.info(f"Collector {self.name} stopped after {self._cycles} cycles")

    @property
    def cycles(self) -> int:
        return self._cycles

    def __repr__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"{self.__class__.__name__}({self.name!r}, {status}, {self.update_interval}s)"
