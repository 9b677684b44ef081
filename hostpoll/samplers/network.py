"""
Network interface byte counter sampler.
"""

from collections.abc import Iterable
from typing import NamedTuple

import psutil

from ..const import DEFAULT_INTERFACE_PREFIXES
from .base import SourceUnavailable


class InterfaceCounters(NamedTuple):
    """Cumulative byte counters of one interface."""

    interface: str
    bytes_sent: int
    bytes_recv: int


def matches_interface(name: str, prefixes: Iterable[str]) -> bool:
    """True if the interface name starts with one of the prefixes."""
    return any(name.startswith(prefix) for prefix in prefixes)


def sample_network(
    prefixes: Iterable[str] = DEFAULT_INTERFACE_PREFIXES,
) -> list[InterfaceCounters]:
    """
    Cumulative bytes sent/received per matching interface.

    Args:
        prefixes: Interface name prefixes to report

    Raises:
        SourceUnavailable: If the counters cannot be read
    """
    prefixes = tuple(prefixes)

    try:
        counters = psutil.net_io_counters(pernic=True)
    except (OSError, psutil.Error) as e:
        raise SourceUnavailable("network", e) from e

    return [
        InterfaceCounters(name, stats.bytes_sent, stats.bytes_recv)
        for name, stats in sorted(counters.items())
        if matches_interface(name, prefixes)
    ]
