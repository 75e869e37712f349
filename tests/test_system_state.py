from collections import namedtuple
import os
import socket

import psutil

from laptop_diagnostic import system_state
from laptop_diagnostic.system_state import (
    collect_basic_info,
    collect_cpu_info,
    collect_memory_info,
    collect_network_info,
    collect_samples,
    read_load_average,
)

FakeAddress = namedtuple("FakeAddress", "family address netmask broadcast ptp", defaults=(None, None, None))
LINK_FAMILY = getattr(psutil, "AF_LINK", 17)


def test_basic_info_fields():
    info = collect_basic_info()
    assert set(info) == {
        "platform",
        "architecture",
        "hostname",
        "uptime_hours",
        "os_type",
        "os_release",
        "os_version",
        "total_memory_gb",
        "free_memory_gb",
    }
    assert info["total_memory_gb"] > 0


def test_cpu_info_counts_cores():
    info = collect_cpu_info(usage_interval=0.1)
    assert info["cores"] >= 1
    assert len(info["load_average"]) == 3
    assert info["usage"]["total"] >= 0


def test_memory_info_is_consistent():
    info = collect_memory_info()
    assert info["used_bytes"] + info["free_bytes"] == info["total_bytes"]
    assert 0 <= info["usage_percent"] <= 100


def test_load_average_sentinel_without_getloadavg(monkeypatch):
    monkeypatch.delattr(os, "getloadavg", raising=False)
    assert read_load_average() == (0.0, 0.0, 0.0)


def test_collect_samples_count():
    samples = collect_samples(3, 0.0)
    assert len(samples) == 3
    assert all(sample.free_memory > 0 for sample in samples)


def test_network_info_drops_loopback_addresses():
    for interface in collect_network_info()["interfaces"]:
        for address in interface["addresses"]:
            assert address["address"] not in ("127.0.0.1", "::1")


def test_cpu_model_falls_back_to_unknown(monkeypatch):
    monkeypatch.setattr(system_state.platform, "processor", lambda: "")
    monkeypatch.setattr(system_state, "_linux_cpu_model", lambda: None)
    assert system_state._cpu_model() == "Unknown"


def test_network_info_survives_denied_interfaces(monkeypatch):
    def denied():
        raise psutil.AccessDenied()

    monkeypatch.setattr(system_state.psutil, "net_if_addrs", denied)
    info = collect_network_info()
    assert info["interfaces"] == []
    assert info["error"].startswith("Network interfaces unavailable")


def test_loopback_interface_drops_link_layer_address(monkeypatch):
    addresses = {
        "lo": [
            FakeAddress(socket.AF_INET, "127.0.0.1"),
            FakeAddress(LINK_FAMILY, "00:00:00:00:00:00"),
        ],
        "eth0": [
            FakeAddress(socket.AF_INET, "192.168.1.20"),
            FakeAddress(LINK_FAMILY, "aa:bb:cc:dd:ee:ff"),
        ],
    }
    monkeypatch.setattr(system_state.psutil, "net_if_addrs", lambda: addresses)
    monkeypatch.setattr(system_state.psutil, "net_if_stats", lambda: {})
    interfaces = {item["name"]: item for item in collect_network_info()["interfaces"]}
    assert interfaces["lo"]["addresses"] == []
    assert [addr["address"] for addr in interfaces["eth0"]["addresses"]] == ["192.168.1.20", "aa:bb:cc:dd:ee:ff"]


def test_cpu_usage_error_is_recorded(monkeypatch):
    def broken(interval=None):
        raise NotImplementedError("no cpu times")

    monkeypatch.setattr(system_state.psutil, "cpu_times_percent", broken)
    info = collect_cpu_info(usage_interval=0.0)
    assert info["usage"] == {"error": "CPU usage unavailable: no cpu times"}
    assert info["cores"] >= 1


def test_process_memory_error_is_recorded(monkeypatch):
    def denied():
        raise psutil.AccessDenied()

    monkeypatch.setattr(system_state.psutil, "Process", denied)
    info = collect_memory_info()
    assert info["process"]["error"].startswith("Process memory unavailable")
    assert info["total_bytes"] > 0
