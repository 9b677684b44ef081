"""
Collection tasks: periodic loops feeding the metric registry.
"""

from .base import Collector, CollectorResult, MetricUpdate
from .disk import FilesystemCollector
from .network import NetworkCollector
from .system import SystemCollector
from .zpool import ZpoolCollector

__all__ = [
    "Collector",
    "CollectorResult",
    "MetricUpdate",
    "SystemCollector",
    "FilesystemCollector",
    "NetworkCollector",
    "ZpoolCollector",
]
