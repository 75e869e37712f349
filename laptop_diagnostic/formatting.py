"""Console-friendly formatting utilities."""

from __future__ import annotations

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .report import DiagnosticReport

RULE = "=" * 60


def format_bytes(num: float) -> str:
    suffixes = ["B", "KiB", "MiB", "GiB", "TiB"]
    value = float(num)
    for suffix in suffixes:
        if value < 1024 or suffix == suffixes[-1]:
            return f"{value:.1f} {suffix}"
        value /= 1024
    return f"{value:.1f} TiB"


def summary_rows(report: DiagnosticReport) -> List[List[str]]:
    """Label/value pairs shown in every summary, in display order."""
    basic, cpu, memory = report.basic_info, report.cpu, report.memory
    rows = [
        ["System", f"{basic.get('os_type', 'Unknown')} {basic.get('os_release', '')}".strip()],
        ["CPU", f"{cpu.get('model', 'Unknown')} ({cpu.get('cores', '?')} cores)"],
        ["Memory", f"{_memory_total(memory)} ({_number(memory.get('usage_percent'))}% used)"],
    ]
    storage = report.stress_test.get("storage", {})
    if storage.get("write_speed_mbps") is not None:
        rows.append(
            [
                "Storage Speed",
                f"Write {_number(storage['write_speed_mbps'])} MB/s, Read {_number(storage.get('read_speed_mbps'))} MB/s",
            ]
        )
    rows.append(["Uptime", f"{basic.get('uptime_hours', '?')} hours"])
    return rows


def format_summary(report: DiagnosticReport) -> str:
    lines = [RULE, "LAPTOP DIAGNOSTIC SUMMARY", RULE, ""]
    lines.extend(f"{label}: {value}" for label, value in summary_rows(report))
    lines.append("")
    lines.append("RECOMMENDATIONS:")
    lines.extend(f"  {recommendation}" for recommendation in report.recommendations)
    lines.append("")
    lines.append(RULE)
    return "\n".join(lines)


def render_summary(report: DiagnosticReport, console: Console) -> None:
    console.print(Panel(f"Laptop diagnostic - {report.started_at:%Y-%m-%d %H:%M:%S}", style="bold cyan"))

    summary = Table(show_header=False, box=box.ROUNDED)
    for label, value in summary_rows(report):
        summary.add_row(label, value)
    console.print(summary)

    performance = report.performance
    if "avg_load" in performance:
        stability = Table(title="Stability", box=box.SIMPLE_HEAD)
        stability.add_column("Metric", style="bold")
        stability.add_column("Variance", justify="right")
        stability.add_column("Verdict")
        stability.add_row(
            "Free memory",
            f"{performance['memory_stability']['variance']:.0f}",
            performance["memory_stability"]["stability"],
        )
        stability.add_row(
            "Load average",
            f"{performance['load_stability']['variance']:.4f}",
            performance["load_stability"]["stability"],
        )
        console.print(stability)

    advice = Table(title="Recommendations", box=box.SIMPLE_HEAD, show_header=False)
    advice.add_column("Recommendation")
    for recommendation in report.recommendations:
        advice.add_row(recommendation)
    console.print(advice)


def _number(value: object) -> str:
    if isinstance(value, (int, float)):
        return f"{value:.2f}"
    return "?"


def _memory_total(memory: dict) -> str:
    total = memory.get("total_bytes")
    return format_bytes(total) if total is not None else "?"
