"""
Storage pool capacity sampler.

Runs `zpool list -H -o name,cap` and parses its tab-separated output:

    tank	55%
    backup	12%
"""

import asyncio
import math
from collections.abc import Sequence

from ..const import DEFAULT_ZPOOL_COMMAND, DEFAULT_ZPOOL_TIMEOUT
from .base import MalformedRecord, SampleBatch, SourceUnavailable, round_percent


def parse_pool_line(line: str) -> tuple[str, float]:
    """
    Parse one `name cap%` line.

    Raises:
        MalformedRecord: On wrong field count, missing '%' or non-numeric capacity
    """
    fields = line.split()
    if len(fields) != 2:
        raise MalformedRecord(line, f"expected 2 fields, got {len(fields)}")

    name, capacity = fields
    if not capacity.endswith("%"):
        raise MalformedRecord(line, "capacity has no '%' suffix")

    try:
        percent = float(capacity[:-1])
    except ValueError:
        raise MalformedRecord(line, f"capacity is not a number: {capacity!r}") from None

    if not math.isfinite(percent):
        raise MalformedRecord(line, f"capacity is not finite: {capacity!r}")

    return name, round_percent(percent)


def parse_pool_list(output: str) -> SampleBatch:
    """Parse the whole command output; bad lines are skipped individually."""
    batch = SampleBatch()
    for line in output.splitlines():
        if not line.strip():
            continue
        try:
            name, percent = parse_pool_line(line)
        except MalformedRecord as e:
            batch.skip(e)
            continue
        batch.add(percent, pool=name)
    return batch


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


async def run_pool_command(
    command: Sequence[str] = DEFAULT_ZPOOL_COMMAND,
    timeout: float = DEFAULT_ZPOOL_TIMEOUT,
) -> str:
    """
    Run the pool listing command and return its stdout.

    Raises:
        SourceUnavailable: If the command is missing, fails or times out
    """
    if not command:
        raise SourceUnavailable("zpool", "no command configured")

    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SourceUnavailable("zpool", e) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        await _kill(proc)
        raise SourceUnavailable("zpool", f"command timed out after {timeout}s") from None
    except BaseException:
        # Cancelled mid-run (shutdown): never leave the child behind
        await _kill(proc)
        raise

    if proc.returncode != 0:
        message = stderr.decode(errors="replace").strip()
        raise SourceUnavailable(
            "zpool", message or f"command failed with code {proc.returncode}"
        )

    return stdout.decode(errors="replace")


async def sample_pools(
    command: Sequence[str] = DEFAULT_ZPOOL_COMMAND,
    timeout: float = DEFAULT_ZPOOL_TIMEOUT,
) -> SampleBatch:
    """Capacity percent of every pool reported by the command."""
    output = await run_pool_command(command, timeout)
    return parse_pool_list(output)
