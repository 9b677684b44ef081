"""
HTTP publisher for the metric registry.

Serves the Prometheus text exposition format using prometheus_client's
threaded HTTP server. A dedicated CollectorRegistry holds only the host
metric registry, so no process or platform collectors are exported.
"""

import threading
from wsgiref.simple_server import WSGIServer

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest, start_http_server

from .logging import get_logger
from .registry import MetricRegistry


logger = get_logger("server")


class ServerError(Exception):
    """Raised when the HTTP listener cannot be started."""


class MetricsServer:
    """
    Scrape endpoint for a MetricRegistry.

    Every request renders a fresh snapshot; nothing is cached.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: MetricRegistry, port: int, bind: str = "0.0.0.0"):
        """
        Args:
            registry: Registry to expose
            port: TCP port to listen on (0 picks a free port)
            bind: Address to bind
        """
        self.registry = registry
        self.port = port
        self.bind = bind

        self.collector_registry = CollectorRegistry(auto_describe=False)
        self.collector_registry.register(registry)

        self._httpd: WSGIServer | None = None
        self._thread: threading.Thread | None = None

    def render(self) -> bytes:
        """Exposition text for the current registry contents."""
        return generate_latest(self.collector_registry)

    def start(self) -> None:
        """
        Bind and start serving in background threads.

        Raises:
            ServerError: If the port cannot be bound
        """
        try:
            self._httpd, self._thread = start_http_server(
                self.port,
                addr=self.bind,
                registry=self.collector_registry,
            )
        except (OSError, OverflowError) as e:
            raise ServerError(f"Cannot listen on {self.bind}:{self.port}: {e}") from e

        self.port = self._httpd.server_port
        logger.info(f"Serving metrics on http://{self.bind}:{self.port}/metrics")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop accepting requests and close the listening socket."""
        if self._httpd is None:
            return

        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout)

        self._httpd = None
        self._thread = None
        logger.info("Metrics server stopped")

    @property
    def running(self) -> bool:
        return self._httpd is not None
