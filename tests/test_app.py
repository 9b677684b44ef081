"""
Tests for the application supervisor and command line entry point.
"""

import asyncio
import socket
import sys
import urllib.request
from pathlib import Path

import pytest

from hostpoll.__main__ import main
from hostpoll.app import Application
from hostpoll.collectors import system as system_module
from hostpoll.config.schema import Config, ExporterConfig, ZpoolConfig


def make_config(**overrides) -> Config:
    config = Config(exporter=ExporterConfig(port=0, bind="127.0.0.1"), **overrides)
    config.system.update_interval = 0.05
    config.filesystem.enabled = False
    config.network.enabled = False
    return config


def test_disabled_collectors_are_not_created() -> None:
    app = Application(make_config(zpool=ZpoolConfig(enabled=False)))

    assert [c.name for c in app.collectors] == ["system"]


def test_collectors_share_one_registry() -> None:
    app = Application(make_config())

    assert {id(c.registry) for c in app.collectors} == {id(app.registry)}
    assert app.server.registry is app.registry


def test_start_serve_and_stop(monkeypatch) -> None:
    monkeypatch.setattr(system_module, "sample_memory", lambda: 42.57)
    monkeypatch.setattr(system_module, "sample_cpu", lambda: 13.1)
    monkeypatch.setattr(system_module, "sample_swap", lambda: 0.0)
    app = Application(make_config(zpool=ZpoolConfig(enabled=False)))

    def scrape() -> str:
        url = f"http://127.0.0.1:{app.server.port}/metrics"
        with urllib.request.urlopen(url, timeout=5) as response:
            return response.read().decode()

    async def scenario() -> str:
        await app.start()
        await asyncio.sleep(0.2)
        body = await asyncio.to_thread(scrape)
        await app.stop(grace_period=5)
        return body

    body = asyncio.run(scenario())

    assert "envirobly_ram_usage_percent 42.57" in body
    assert "envirobly_cpu_usage_percent 13.1" in body
    assert not app.server.running
    assert app.tasks == []
    assert all(c.cycles >= 1 for c in app.collectors)


def test_slow_pool_command_does_not_block_other_collectors(monkeypatch) -> None:
    monkeypatch.setattr(system_module, "sample_memory", lambda: 1.0)
    slow = ZpoolConfig(
        command=[sys.executable, "-c", "import time; time.sleep(30)"],
        timeout=1.0,
        update_interval=60,
    )
    app = Application(make_config(zpool=slow))

    async def scenario() -> None:
        await app.start()
        await asyncio.sleep(0.5)
        await app.stop(grace_period=5)

    asyncio.run(scenario())

    system = next(c for c in app.collectors if c.name == "system")
    assert system.cycles >= 3
    assert app.registry.snapshot().get(app.metrics.ram_usage) == 1.0


def test_main_validate(example_config_path: Path, capsys) -> None:
    assert main(["--validate", str(example_config_path)]) == 0
    assert "Configuration is valid!" in capsys.readouterr().out


def test_main_rejects_broken_config(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.conf"
    path.write_text("exporter { port 1")

    assert main([str(path)]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_main_port_override(capsys) -> None:
    assert main(["--validate", "--port", "9100"]) == 0
    assert "0.0.0.0:9100" in capsys.readouterr().out


@pytest.mark.usefixtures("reset_logging")
def test_main_exits_when_port_is_taken() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("0.0.0.0", 0))
        sock.listen(1)
        port = sock.getsockname()[1]

        assert main(["--port", str(port)]) == 1


def test_main_rejects_out_of_range_port(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--validate", "--port", "70000"])

    assert exc.value.code == 2
    assert "out of range" in capsys.readouterr().err


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert "hostpoll" in capsys.readouterr().out
