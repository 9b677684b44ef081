"""
Tests for the metric registry.
"""

import threading

from prometheus_client import CollectorRegistry, generate_latest

from hostpoll.registry import MetricRegistry, define_host_metrics


def render(registry: MetricRegistry) -> str:
    collector_registry = CollectorRegistry(auto_describe=False)
    collector_registry.register(registry)
    return generate_latest(collector_registry).decode()


def test_upsert_replaces(registry: MetricRegistry) -> None:
    registry.upsert("cpu", None, 10.0)
    registry.upsert("cpu", {}, 20.0)

    snapshot = registry.snapshot()
    assert len(snapshot) == 1
    assert snapshot.get("cpu") == 20.0


def test_label_sets_are_distinct_identities(registry: MetricRegistry) -> None:
    registry.upsert("fs", {"filesystem": "/dev/sda1", "mountpoint": "/"}, 40.0)
    registry.upsert("fs", {"mountpoint": "/home", "filesystem": "/dev/sda2"}, 60.0)
    registry.upsert("fs", {"mountpoint": "/", "filesystem": "/dev/sda1"}, 41.0)

    snapshot = registry.snapshot()
    assert len(snapshot.series("fs")) == 2
    assert snapshot.get("fs", {"filesystem": "/dev/sda1", "mountpoint": "/"}) == 41.0
    assert snapshot.get("fs", {"filesystem": "/dev/sda2", "mountpoint": "/home"}) == 60.0


def test_snapshot_is_not_changed_by_later_upserts(registry: MetricRegistry) -> None:
    registry.upsert("ram", None, 1.0)
    snapshot = registry.snapshot()

    registry.upsert("ram", None, 2.0)
    registry.upsert("swap", None, 3.0)

    assert snapshot.get("ram") == 1.0
    assert snapshot.get("swap") is None
    assert len(snapshot) == 1


def test_unwritten_metric_is_absent(registry: MetricRegistry, metrics) -> None:
    snapshot = registry.snapshot()

    assert not snapshot
    assert snapshot.get(metrics.ram_usage) is None


def test_concurrent_upserts_to_distinct_identities(registry: MetricRegistry) -> None:
    threads = [
        threading.Thread(target=registry.upsert, args=("bytes", {"interface": f"ens{i}"}, i))
        for i in range(64)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = registry.snapshot()
    assert len(snapshot) == 64
    for i in range(64):
        assert snapshot.get("bytes", {"interface": f"ens{i}"}) == float(i)


def test_snapshots_during_writes_only_see_written_values(registry: MetricRegistry) -> None:
    written = {float(v) for v in range(500)}
    seen: set[float] = set()
    done = threading.Event()

    def writer() -> None:
        for value in range(500):
            registry.upsert("ram", None, value)
        done.set()

    def reader() -> None:
        while not done.is_set():
            value = registry.snapshot().get("ram")
            if value is not None:
                seen.add(value)

    threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert seen <= written
    assert registry.snapshot().get("ram") == 499.0


def test_render_empty_registry(registry: MetricRegistry, metrics) -> None:
    assert render(registry) == ""


def test_render_exposition_format(registry: MetricRegistry, metrics) -> None:
    registry.upsert(metrics.ram_usage, None, 42.57)
    registry.upsert(metrics.zpool_usage, {"pool": "tank"}, 55.0)

    text = render(registry)

    assert "# HELP envirobly_ram_usage_percent Total RAM utilization in percent" in text
    assert "# TYPE envirobly_ram_usage_percent gauge" in text
    assert "envirobly_ram_usage_percent 42.57" in text
    assert "# TYPE envirobly_zpool_usage_percent gauge" in text
    assert 'envirobly_zpool_usage_percent{pool="tank"} 55.0' in text
    assert "filesystem_usage_percent" not in text


def test_render_undeclared_metric(registry: MetricRegistry) -> None:
    registry.upsert("custom_value", {"host": "a"}, 1.5)

    text = render(registry)

    assert "# HELP custom_value custom_value" in text
    assert 'custom_value{host="a"} 1.5' in text


def test_define_host_metrics_prefix() -> None:
    registry = MetricRegistry()

    names = define_host_metrics(registry, "node")
    bare = define_host_metrics(MetricRegistry(), "")

    assert names.cpu_usage == "node_cpu_usage_percent"
    assert names.network_bytes_recv == "node_network_bytes_recv_total"
    assert bare.swap_usage == "swap_usage_percent"
