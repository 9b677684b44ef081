"""
Common sampler types and errors.

A sampler queries one OS subsystem and returns normalized values. Samplers
never touch the metric registry; collection tasks decide what to publish.
"""

import math
from dataclasses import dataclass, field
from typing import Any


class SamplerError(Exception):
    """Base class for sampler failures."""


class SourceUnavailable(SamplerError):
    """The underlying OS query or external command failed outright."""

    def __init__(self, source: str, reason: Any):
        self.source = source
        self.reason = reason
        super().__init__(f"{source} unavailable: {reason}")


class MalformedRecord(SamplerError):
    """One entry of a multi-entry source could not be used."""

    def __init__(self, record: str, reason: Any):
        self.record = record
        self.reason = reason
        super().__init__(f"skipped {record!r}: {reason}")


def round_percent(value: float) -> float:
    """
    Round to two decimal places, halves away from zero.

    >>> round_percent(42.567)
    42.57
    """
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled, value) / 100


def used_percent(used: float, total: float) -> float:
    """`used` as a rounded share of `total` (0.0 when total is 0)."""
    if total <= 0:
        return 0.0
    return round_percent(used / total * 100)


@dataclass(frozen=True)
class Sample:
    """One labelled value produced by a multi-entry sampler."""

    labels: dict[str, str]
    value: float


@dataclass
class SampleBatch:
    """Result of a multi-entry sampler: usable samples plus skipped records."""

    samples: list[Sample] = field(default_factory=list)
    skipped: list[MalformedRecord] = field(default_factory=list)

    def add(self, value: float, **labels: str) -> None:
        self.samples.append(Sample(labels=labels, value=value))

    def skip(self, error: MalformedRecord) -> None:
        self.skipped.append(error)

    def __len__(self) -> int:
        return len(self.samples)

    def __repr__(self) -> str:
        return f"SampleBatch({len(self.samples)} samples, {len(self.skipped)} skipped)"
