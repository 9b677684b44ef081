"""
Tests for pool listing parsing and the external command runner.
"""

import asyncio
import sys
import time

import pytest

from hostpoll.samplers import (
    MalformedRecord,
    SourceUnavailable,
    parse_pool_line,
    parse_pool_list,
    run_pool_command,
    sample_pools,
)


def python_command(code: str) -> tuple[str, ...]:
    return (sys.executable, "-c", code)


def test_parse_tab_separated_line() -> None:
    assert parse_pool_line("tank\t87%") == ("tank", 87.0)


def test_parse_rounds_capacity() -> None:
    assert parse_pool_line("tank 12.345%") == ("tank", 12.35)


@pytest.mark.parametrize(
    "line",
    [
        "tank 87",
        "tank",
        "tank 87% extra",
        "backup xx%",
        "backup -",
        "odd nan%",
        "odd inf%",
    ],
)
def test_parse_malformed_line(line: str) -> None:
    with pytest.raises(MalformedRecord):
        parse_pool_line(line)


def test_malformed_line_does_not_abort_parse() -> None:
    batch = parse_pool_list("tank 87\nbackup\t12%\n\nfast 3%\n")

    assert [(s.labels["pool"], s.value) for s in batch.samples] == [
        ("backup", 12.0),
        ("fast", 3.0),
    ]
    assert [e.record for e in batch.skipped] == ["tank 87"]


def test_non_finite_capacity_skipped_individually() -> None:
    batch = parse_pool_list("tank 55%\nodd nan%\nfast 3%\n")

    assert [(s.labels["pool"], s.value) for s in batch.samples] == [
        ("tank", 55.0),
        ("fast", 3.0),
    ]
    assert [e.record for e in batch.skipped] == ["odd nan%"]


def test_one_valid_one_malformed() -> None:
    batch = parse_pool_list("tank 55%\nbackup xx%\n")

    assert len(batch.samples) == 1
    assert batch.samples[0].labels == {"pool": "tank"}
    assert batch.samples[0].value == 55.0
    assert len(batch.skipped) == 1


def test_run_pool_command_output() -> None:
    command = python_command("print('tank\\t55%'); print('backup\\t10%')")

    batch = asyncio.run(sample_pools(command, timeout=10))

    assert [(s.labels["pool"], s.value) for s in batch.samples] == [
        ("tank", 55.0),
        ("backup", 10.0),
    ]


def test_run_pool_command_missing_binary() -> None:
    with pytest.raises(SourceUnavailable, match="zpool"):
        asyncio.run(run_pool_command(("hostpoll-no-such-zpool-binary", "list"), timeout=5))


def test_run_pool_command_nonzero_exit() -> None:
    command = python_command("import sys; sys.stderr.write('no pools available'); sys.exit(1)")

    with pytest.raises(SourceUnavailable, match="no pools available"):
        asyncio.run(run_pool_command(command, timeout=10))


def test_run_pool_command_timeout() -> None:
    command = python_command("import time; time.sleep(30)")

    started = time.monotonic()
    with pytest.raises(SourceUnavailable, match="timed out"):
        asyncio.run(run_pool_command(command, timeout=0.5))

    assert time.monotonic() - started < 10


def test_run_pool_command_empty() -> None:
    with pytest.raises(SourceUnavailable):
        asyncio.run(run_pool_command((), timeout=1))


def test_cancelled_pool_command_kills_child(monkeypatch) -> None:
    spawned = []
    create = asyncio.create_subprocess_exec

    async def spawn(*args, **kwargs):
        proc = await create(*args, **kwargs)
        spawned.append(proc)
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", spawn)

    async def scenario() -> None:
        task = asyncio.create_task(
            run_pool_command(python_command("import time; time.sleep(30)"), timeout=60)
        )
        await asyncio.sleep(0.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert len(spawned) == 1
    assert spawned[0].returncode is not None
