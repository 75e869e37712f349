"""Collect host counters through psutil and the platform module."""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress
import logging
import os
import platform
import socket
import sys
import time
from typing import Any, Dict, List, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)

GIB = 1024**3
COUNTER_ERRORS = (psutil.Error, OSError, NotImplementedError)


@dataclass
class MetricSample:
    timestamp: float
    load_avg: Tuple[float, float, float]
    free_memory: int
    uptime: float


def read_load_average() -> Tuple[float, float, float]:
    return os.getloadavg() if hasattr(os, "getloadavg") else (0.0, 0.0, 0.0)


def read_free_memory() -> int:
    return psutil.virtual_memory().available


def read_uptime() -> float:
    try:
        return max(time.time() - psutil.boot_time(), 0.0)
    except COUNTER_ERRORS:
        return 0.0


def take_sample() -> MetricSample:
    return MetricSample(
        timestamp=time.time(),
        load_avg=read_load_average(),
        free_memory=read_free_memory(),
        uptime=read_uptime(),
    )


def collect_samples(count: int, interval: float) -> List[MetricSample]:
    """Take ``count`` samples spaced ``interval`` seconds apart."""
    samples: List[MetricSample] = []
    for _ in range(count):
        samples.append(take_sample())
        time.sleep(interval)
    return samples


def collect_basic_info() -> Dict[str, Any]:
    memory = psutil.virtual_memory()
    return {
        "platform": sys.platform,
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "uptime_hours": int(read_uptime() // 3600),
        "os_type": platform.system(),
        "os_release": platform.release(),
        "os_version": platform.version(),
        "total_memory_gb": round(memory.total / GIB, 2),
        "free_memory_gb": round(memory.available / GIB, 2),
    }


def collect_cpu_info(usage_interval: float = 1.0) -> Dict[str, Any]:
    """Describe the processor and measure how busy it is right now."""
    return {
        "model": _cpu_model(),
        "cores": psutil.cpu_count() or 0,
        "physical_cores": psutil.cpu_count(logical=False),
        "speed_mhz": _cpu_frequency(),
        "architecture": platform.machine(),
        "load_average": list(read_load_average()),
        "usage": _cpu_usage(usage_interval),
    }


def collect_memory_info() -> Dict[str, Any]:
    memory = psutil.virtual_memory()
    used = memory.total - memory.available
    return {
        "total_bytes": memory.total,
        "used_bytes": used,
        "free_bytes": memory.available,
        "total_gb": round(memory.total / GIB, 2),
        "used_gb": round(used / GIB, 2),
        "free_gb": round(memory.available / GIB, 2),
        "usage_percent": round(used / memory.total * 100, 2) if memory.total else 0.0,
        "process": _process_memory(),
    }


def collect_network_info() -> Dict[str, Any]:
    try:
        addresses_by_interface = psutil.net_if_addrs()
    except COUNTER_ERRORS as exc:
        logger.warning("Network interfaces unavailable: %s", exc)
        return {"interfaces": [], "error": f"Network interfaces unavailable: {exc}"}
    try:
        stats = psutil.net_if_stats()
    except COUNTER_ERRORS as exc:
        logger.debug("Interface stats unavailable: %s", exc)
        stats = {}

    interfaces: List[Dict[str, Any]] = []
    for name, addresses in addresses_by_interface.items():
        stat = stats.get(name)
        internal = _is_internal_interface(addresses, stat)
        interfaces.append(
            {
                "name": name,
                "is_up": stat.isup if stat else None,
                "speed_mbps": stat.speed if stat else None,
                "addresses": [
                    {
                        "family": _family_name(addr.family),
                        "address": addr.address,
                        "netmask": addr.netmask,
                        "broadcast": addr.broadcast,
                    }
                    for addr in addresses
                    if not internal and not _is_loopback(addr.address)
                ],
            }
        )
    return {"interfaces": interfaces}


def _cpu_usage(interval: float) -> Dict[str, Any]:
    try:
        times = psutil.cpu_times_percent(interval=interval)
    except COUNTER_ERRORS as exc:
        logger.warning("CPU usage unavailable: %s", exc)
        return {"error": f"CPU usage unavailable: {exc}"}
    return {
        "user": round(times.user, 2),
        "system": round(times.system, 2),
        "total": round(times.user + times.system, 2),
    }


def _process_memory() -> Dict[str, Any]:
    try:
        info = psutil.Process().memory_info()
    except COUNTER_ERRORS as exc:
        logger.warning("Process memory unavailable: %s", exc)
        return {"error": f"Process memory unavailable: {exc}"}
    return {"rss_bytes": info.rss, "vms_bytes": info.vms}


def _cpu_model() -> str:
    model = platform.processor()
    if not model and sys.platform.startswith("linux"):
        model = _linux_cpu_model()
    return model or "Unknown"


def _linux_cpu_model() -> Optional[str]:
    try:
        with open("/proc/cpuinfo", encoding="utf-8") as handle:
            for line in handle:
                if line.lower().startswith("model name"):
                    return line.split(":", 1)[1].strip()
    except OSError:
        return None
    return None


def _cpu_frequency() -> Optional[float]:
    try:
        freq = psutil.cpu_freq()
    except COUNTER_ERRORS:
        return None
    return round(freq.current, 0) if freq else None


def _family_name(family: int) -> str:
    if family == getattr(psutil, "AF_LINK", None):
        return "MAC"
    try:
        return socket.AddressFamily(family).name
    except ValueError:
        return str(family)


def _is_loopback(address: str) -> bool:
    try:
        return ipaddress.ip_address(address.split("%", 1)[0]).is_loopback
    except ValueError:
        return False


def _is_internal_interface(addresses, stat) -> bool:
    """True for loopback interfaces, including their link-layer entry."""
    if stat is not None and "loopback" in getattr(stat, "flags", "").split(","):
        return True
    ips = [addr.address for addr in addresses if addr.family in (socket.AF_INET, socket.AF_INET6)]
    return bool(ips) and all(_is_loopback(ip) for ip in ips)
