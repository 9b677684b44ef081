"""
hostpoll - host telemetry poller exposing Prometheus metrics.
"""

from .const import APP_VERSION

__version__ = APP_VERSION
