"""
Thread-safe registry of current metric values.

Collection tasks upsert values from the asyncio loop while the HTTP server
renders snapshots from its own threads. The registry doubles as a
prometheus_client custom collector, so the exposition text itself is
produced by prometheus_client.
"""

import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple

from prometheus_client.core import GaugeMetricFamily, Metric

from .const import DEFAULT_METRIC_PREFIX


LabelKey = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class MetricFamily:
    """Metadata for one metric name."""

    name: str
    documentation: str
    labelnames: tuple[str, ...] = ()


class MetricValue(NamedTuple):
    """One series in a snapshot."""

    name: str
    labels: Mapping[str, str]
    value: float


class Snapshot:
    """
    Immutable view of the registry at one instant.

    Values are grouped by metric name in first-registration order.
    """

    def __init__(self, families: Mapping[str, MetricFamily], values: Iterable[MetricValue]):
        self._families = MappingProxyType(dict(families))
        self._values = tuple(values)

    def __iter__(self) -> Iterator[MetricValue]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def get(self, name: str, labels: Mapping[str, str] | None = None) -> float | None:
        """Return the value of one series, or None if it was never written."""
        wanted = dict(labels or {})
        for item in self._values:
            if item.name == name and dict(item.labels) == wanted:
                return item.value
        return None

    def series(self, name: str) -> list[MetricValue]:
        """All series of a metric name."""
        return [item for item in self._values if item.name == name]

    def family(self, name: str) -> MetricFamily:
        """Metadata for a metric name (synthesized for undeclared names)."""
        family = self._families.get(name)
        if family is None:
            labelnames: tuple[str, ...] = ()
            for item in self._values:
                if item.name == name:
                    labelnames = tuple(item.labels)
                    break
            family = MetricFamily(name, name, labelnames)
        return family

    @property
    def names(self) -> list[str]:
        """Distinct metric names present in the snapshot."""
        seen: dict[str, None] = {}
        for item in self._values:
            seen.setdefault(item.name, None)
        return list(seen)

    def __repr__(self) -> str:
        return f"Snapshot({len(self._values)} series, {len(self.names)} metrics)"


class MetricRegistry:
    """
    Mapping of (name, label set) -> current value.

    Writes replace the previous value for an identity. Entries are created on
    first write and never removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._families: dict[str, MetricFamily] = {}
        self._values: dict[tuple[str, LabelKey], float] = {}

    @staticmethod
    def _label_key(labels: Mapping[str, str] | None) -> LabelKey:
        if not labels:
            return ()
        return tuple(sorted((str(k), str(v)) for k, v in labels.items()))

    def define(self, name: str, documentation: str, labelnames: Iterable[str] = ()) -> MetricFamily:
        """Declare HELP text and label names for a metric."""
        family = MetricFamily(name, documentation, tuple(labelnames))
        with self._lock:
            self._families[name] = family
        return family

    def upsert(self, name: str, labels: Mapping[str, str] | None, value: float) -> None:
        """Replace the current value of one series."""
        key = (name, self._label_key(labels))
        value = float(value)
        with self._lock:
            self._values[key] = value

    def snapshot(self) -> Snapshot:
        """Copy every current value."""
        with self._lock:
            families = dict(self._families)
            items = list(self._values.items())

        values = [
            MetricValue(name, MappingProxyType(dict(label_key)), value)
            for (name, label_key), value in items
        ]
        return Snapshot(families, values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    # prometheus_client collector protocol

    def describe(self) -> list[Metric]:
        # Empty: registering must not trigger a collect() pass.
        return []

    def collect(self) -> Iterator[Metric]:
        """Yield one gauge family per metric name present in a fresh snapshot."""
        snapshot = self.snapshot()
        for name in snapshot.names:
            family = snapshot.family(name)
            gauge = GaugeMetricFamily(
                family.name,
                family.documentation,
                labels=list(family.labelnames),
            )
            for item in snapshot.series(name):
                gauge.add_metric(
                    [item.labels.get(label, "") for label in family.labelnames],
                    item.value,
                )
            yield gauge


@dataclass(frozen=True)
class HostMetrics:
    """Names of the exported host metrics."""

    ram_usage: str
    cpu_usage: str
    swap_usage: str
    zpool_usage: str
    filesystem_usage: str
    network_bytes_sent: str
    network_bytes_recv: str


def _join(prefix: str, name: str) -> str:
    return f"{prefix}_{name}" if prefix else name


def define_host_metrics(registry: MetricRegistry, prefix: str = DEFAULT_METRIC_PREFIX) -> HostMetrics:
    """
    Declare every host metric family on a registry.

    Args:
        registry: Registry to declare on
        prefix: Metric name prefix ("" for none)

    Returns:
        The resolved metric names
    """
    names = HostMetrics(
        ram_usage=_join(prefix, "ram_usage_percent"),
        cpu_usage=_join(prefix, "cpu_usage_percent"),
        swap_usage=_join(prefix, "swap_usage_percent"),
        zpool_usage=_join(prefix, "zpool_usage_percent"),
        filesystem_usage=_join(prefix, "filesystem_usage_percent"),
        network_bytes_sent=_join(prefix, "network_bytes_sent_total"),
        network_bytes_recv=_join(prefix, "network_bytes_recv_total"),
    )

    registry.define(names.ram_usage, "Total RAM utilization in percent")
    registry.define(names.cpu_usage, "Total CPU utilization in percent (across all cores)")
    registry.define(names.swap_usage, "Total swap memory utilization in percent")
    registry.define(names.zpool_usage, "ZFS pool utilization in percent (capacity)", ["pool"])
    registry.define(
        names.filesystem_usage,
        "Filesystem utilization in percent",
        ["filesystem", "mountpoint"],
    )
    registry.define(
        names.network_bytes_sent,
        "Total bytes transmitted on network interfaces",
        ["interface"],
    )
    registry.define(
        names.network_bytes_recv,
        "Total bytes received on network interfaces",
        ["interface"],
    )

    return names
