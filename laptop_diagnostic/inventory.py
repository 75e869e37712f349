"""Platform-specific inventory commands whose raw output lands in the report."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

CATEGORIES = ("storage", "gpu", "battery", "display", "thermal")
BASH = shutil.which("bash") if os.name == "posix" else None


def run_command(command: str, timeout: Optional[float] = None) -> str:
    """Run a shell command and return its stdout, or a placeholder if it fails.

    Pipelines run under bash with ``pipefail`` where bash exists, so a missing
    first command is reported instead of hidden behind the last one's status.
    """
    command_line, executable = _shell_invocation(command)
    try:
        result = subprocess.run(
            command_line,
            shell=True,
            executable=executable,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            timeout=timeout,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        reason = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        logger.debug("Command failed: %s (%s)", command, reason)
        return f"Unavailable: {command} ({reason})"
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out: %s", command)
        return f"Unavailable: {command} (timed out after {timeout}s)"
    except OSError as exc:
        logger.debug("Command could not start: %s (%s)", command, exc)
        return f"Unavailable: {command} ({exc})"
    if "|" in command and not result.stdout.strip():
        return f"Unavailable: {command} (no output)"
    return result.stdout


def _shell_invocation(command: str) -> Tuple[str, Optional[str]]:
    if BASH and "|" in command:
        return f"set -o pipefail; {command}", BASH
    return command, None


class InventoryProvider:
    """Base inventory provider. Subclasses only declare their command tables."""

    name = "unknown"
    COMMANDS: Mapping[str, Mapping[str, str]] = {}
    NOTES: Mapping[str, str] = {}

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def collect(self, category: str) -> Dict[str, str]:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown inventory category: {category}")
        section = {"provider": self.name}
        if category in self.NOTES:
            section["note"] = self.NOTES[category]
            return section
        for label, command in self.COMMANDS.get(category, {}).items():
            section[label] = run_command(command, timeout=self.timeout)
        return section


class WindowsInventory(InventoryProvider):
    name = "windows"
    COMMANDS = {
        "storage": {
            "drives": "wmic logicaldisk get size,freespace,caption,drivetype,filesystem",
            "disk_info": "wmic diskdrive get model,size,status,interfacetype",
        },
        "gpu": {"video_controllers": "wmic path win32_VideoController get name,adapterram,driverversion"},
        "battery": {
            "battery": "wmic path Win32_Battery get BatteryStatus,EstimatedChargeRemaining,EstimatedRunTime,DesignCapacity",
        },
        "display": {
            "resolution": "wmic path Win32_VideoController get CurrentHorizontalResolution,CurrentVerticalResolution,MaxRefreshRate",
        },
    }
    NOTES = {"thermal": "Temperature monitoring requires additional tools on Windows"}


class MacInventory(InventoryProvider):
    name = "macos"
    COMMANDS = {
        "storage": {"diskutil": "diskutil list", "df": "df -h"},
        "gpu": {"displays": "system_profiler SPDisplaysDataType"},
        "battery": {"battery": "pmset -g batt", "power_info": "system_profiler SPPowerDataType"},
        "display": {"displays": "system_profiler SPDisplaysDataType"},
        "thermal": {"powermetrics": "sudo -n powermetrics -n 1 -s smc | grep -i temp"},
    }


class LinuxInventory(InventoryProvider):
    name = "linux"
    COMMANDS = {
        "storage": {"lsblk": "lsblk -f", "df": "df -h", "fdisk": "sudo -n fdisk -l 2>/dev/null || fdisk -l"},
        "gpu": {"lspci": "lspci | grep -i vga", "glxinfo": "glxinfo | sed -n '1,20p'"},
        "battery": {
            "acpi": "acpi -b",
            "upower": "upower -i /org/freedesktop/UPower/devices/battery_BAT0 2>/dev/null || upower -i $(upower -e | grep BAT)",
        },
        "display": {"xrandr": "xrandr"},
        "thermal": {"sensors": "sensors", "thermal_zones": "cat /sys/class/thermal/thermal_zone*/temp"},
    }


def select_provider(system: Optional[str] = None, timeout: Optional[float] = None) -> InventoryProvider:
    """Pick the provider for the running OS family."""
    system = system or platform.system()
    if system == "Windows":
        return WindowsInventory(timeout)
    if system == "Darwin":
        return MacInventory(timeout)
    return LinuxInventory(timeout)
