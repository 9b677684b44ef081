"""
Memory, CPU and swap utilization samplers.

psutil rounds its own `percent` fields to one decimal, so memory and swap
are computed from the raw byte counts.
"""

import psutil

from .base import SourceUnavailable, round_percent, used_percent


def sample_memory() -> float:
    """Used virtual memory in percent, counting reclaimable memory as free."""
    try:
        mem = psutil.virtual_memory()
    except (OSError, psutil.Error) as e:
        raise SourceUnavailable("memory", e) from e
    return used_percent(mem.total - mem.available, mem.total)


def sample_cpu() -> float:
    """
    Aggregate CPU utilization in percent.

    Uses a zero-length window: the value covers the time since the previous
    call in this process, so the very first call returns 0.0. psutil only
    reports one decimal here.
    """
    try:
        percent = psutil.cpu_percent(interval=None)
    except (OSError, psutil.Error) as e:
        raise SourceUnavailable("cpu", e) from e
    return round_percent(percent)


def sample_swap() -> float:
    """Used swap in percent (0.0 when no swap is configured)."""
    try:
        swap = psutil.swap_memory()
    except (OSError, psutil.Error) as e:
        raise SourceUnavailable("swap", e) from e
    return used_percent(swap.used, swap.total)
