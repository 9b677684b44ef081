"""
Filesystem usage sampler.

Reports usage of mounted partitions via psutil, skipping mount points that
are internally managed or already covered by the pool sampler.
"""

from collections.abc import Iterable

import psutil

from ..const import DEFAULT_EXCLUDED_MOUNTPOINTS
from .base import MalformedRecord, SampleBatch, SourceUnavailable, used_percent


def is_excluded_mountpoint(mountpoint: str, excluded: Iterable[str]) -> bool:
    """Case-sensitive path prefix match against the excluded prefixes."""
    return any(mountpoint.startswith(prefix) for prefix in excluded)


def sample_filesystems(
    excluded: Iterable[str] = DEFAULT_EXCLUDED_MOUNTPOINTS,
) -> SampleBatch:
    """
    Usage percent of every mounted partition.

    Args:
        excluded: Mount point prefixes to ignore

    Returns:
        SampleBatch labelled by filesystem (device) and mountpoint

    Raises:
        SourceUnavailable: If partitions cannot be enumerated
    """
    excluded = tuple(excluded)

    try:
        partitions = psutil.disk_partitions(all=False)
    except (OSError, psutil.Error) as e:
        raise SourceUnavailable("filesystem", e) from e

    batch = SampleBatch()
    for partition in partitions:
        if is_excluded_mountpoint(partition.mountpoint, excluded):
            continue

        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except (OSError, psutil.Error) as e:
            batch.skip(MalformedRecord(partition.mountpoint, e))
            continue

        batch.add(
            # Same basis as df: reserved blocks count as neither used nor free
            used_percent(usage.used, usage.used + usage.free),
            filesystem=partition.device,
            mountpoint=partition.mountpoint,
        )

    return batch
