"""
Main application orchestrator.

Handles:
- Collector creation and scheduling
- Metrics HTTP server lifetime
- Graceful shutdown
"""

import asyncio
import signal

from .collectors.base import Collector
from .collectors.disk import FilesystemCollector
from .collectors.network import NetworkCollector
from .collectors.system import SystemCollector
from .collectors.zpool import ZpoolCollector
from .config.schema import Config
from .const import SHUTDOWN_GRACE_PERIOD
from .logging import get_logger
from .registry import MetricRegistry, define_host_metrics
from .server import MetricsServer


logger = get_logger("app")


class Application:
    """
    Supervisor owning the registry, every collector task and the server.

    Collectors only share the registry; each runs as its own asyncio task
    so a slow source never delays another source's cadence.
    """

    def __init__(self, config: Config, registry: MetricRegistry | None = None):
        """
        Initialize application.

        Args:
            config: Application configuration
            registry: Registry to fill (a fresh one if None)
        """
        self.config = config
        self.registry = registry or MetricRegistry()
        self.metrics = define_host_metrics(self.registry, config.exporter.prefix)

        self.server = MetricsServer(
            self.registry,
            port=config.exporter.port,
            bind=config.exporter.bind,
        )

        self.collectors: list[Collector] = self._create_collectors()

        self._tasks: list[asyncio.Task] = []
        self._stop: asyncio.Event | None = None

    def _create_collectors(self) -> list[Collector]:
        """Create every enabled collector."""
        candidates: list[Collector] = [
            SystemCollector(self.registry, self.metrics, self.config.system),
            FilesystemCollector(self.registry, self.metrics, self.config.filesystem),
            NetworkCollector(self.registry, self.metrics, self.config.network),
            ZpoolCollector(self.registry, self.metrics, self.config.zpool),
        ]
        collectors = []
        for collector in candidates:
            if collector.enabled:
                collectors.append(collector)
            else:
                logger.info(f"Collector {collector.name} disabled")
        return collectors

    def _setup_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.request_stop)

    def request_stop(self) -> None:
        """Ask the application to shut down."""
        if self._stop is not None and not self._stop.is_set():
            logger.info("Received shutdown signal")
            self._stop.set()

    async def start(self) -> None:
        """
        Start the HTTP server and every collector task.

        Raises:
            ServerError: If the HTTP port cannot be bound
        """
        logger.info(f"Starting hostpoll with {len(self.collectors)} collectors")
        self._stop = asyncio.Event()

        self.server.start()

        for collector in self.collectors:
            task = asyncio.create_task(collector.run(self._stop), name=f"collector-{collector.name}")
            self._tasks.append(task)

    async def stop(self, grace_period: float = SHUTDOWN_GRACE_PERIOD) -> None:
        """
        Stop serving, then let in-flight collection cycles finish.

        Tasks still running after grace_period are cancelled.
        """
        logger.info("Stopping hostpoll")

        if self._stop is not None:
            self._stop.set()

        await asyncio.to_thread(self.server.stop)

        if self._tasks:
            _, pending = await asyncio.wait(self._tasks, timeout=grace_period)
            for task in pending:
                logger.warning(f"Cancelling {task.get_name()} after {grace_period}s")
                task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)

        self._tasks.clear()
        logger.info("hostpoll stopped")

    async def run(self) -> None:
        """Run until a shutdown signal arrives."""
        await self.start()
        self._setup_signal_handlers()

        try:
            await self._stop.wait()
        finally:
            await self.stop()

    @property
    def tasks(self) -> list[asyncio.Task]:
        return list(self._tasks)


async def run_app(config: Config) -> None:
    """Create and run the application."""
    app = Application(config)
    await app.run()
