"""
Samplers: stateless queries of one OS data source each.
"""

from .base import (
    MalformedRecord,
    Sample,
    SampleBatch,
    SamplerError,
    SourceUnavailable,
    round_percent,
    used_percent,
)
from .disk import is_excluded_mountpoint, sample_filesystems
from .network import InterfaceCounters, matches_interface, sample_network
from .system import sample_cpu, sample_memory, sample_swap
from .zpool import parse_pool_line, parse_pool_list, run_pool_command, sample_pools

__all__ = [
    "SamplerError",
    "SourceUnavailable",
    "MalformedRecord",
    "Sample",
    "SampleBatch",
    "round_percent",
    "used_percent",
    "sample_memory",
    "sample_cpu",
    "sample_swap",
    "sample_filesystems",
    "is_excluded_mountpoint",
    "sample_network",
    "matches_interface",
    "InterfaceCounters",
    "sample_pools",
    "run_pool_command",
    "parse_pool_line",
    "parse_pool_list",
]
