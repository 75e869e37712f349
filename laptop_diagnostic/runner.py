"""Run every diagnostic phase in order and save the report."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rich.console import Console

from .config import DiagnosticSettings
from .diagnostics import generate_recommendations, summarize_performance
from .formatting import format_summary, render_summary
from .inventory import InventoryProvider, select_provider
from .report import DiagnosticReport, save_report
from .stress import run_cpu_stress, run_memory_stress, run_storage_test
from .system_state import (
    collect_basic_info,
    collect_cpu_info,
    collect_memory_info,
    collect_network_info,
    collect_samples,
)

logger = logging.getLogger(__name__)

STRESS_SKIPPED = {"skipped": "Stress tests disabled"}

Phase = Callable[[DiagnosticReport, DiagnosticSettings, InventoryProvider], None]


def basic_info_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.basic_info = collect_basic_info()


def cpu_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.cpu = collect_cpu_info(settings.cpu_usage_interval)
    if settings.run_stress:
        report.stress_test["cpu"] = run_cpu_stress(
            settings.cpu_duration, settings.cpu_workers, settings.cpu_sample_interval
        )
    else:
        report.stress_test["cpu"] = dict(STRESS_SKIPPED)


def memory_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.memory = collect_memory_info()
    if settings.run_stress:
        report.stress_test["memory"] = run_memory_stress(
            settings.memory_chunk_elements, settings.memory_max_bytes, settings.memory_max_chunks
        )
    else:
        report.stress_test["memory"] = dict(STRESS_SKIPPED)


def storage_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.storage = provider.collect("storage")
    if settings.run_stress:
        report.stress_test["storage"] = run_storage_test(settings.output_dir, settings.storage_test_bytes)
    else:
        report.stress_test["storage"] = dict(STRESS_SKIPPED)


def gpu_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.gpu = provider.collect("gpu")


def battery_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.battery = provider.collect("battery")


def display_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.display = provider.collect("display")


def network_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.network = collect_network_info()


def thermal_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    report.thermal = provider.collect("thermal")


def performance_phase(report: DiagnosticReport, settings: DiagnosticSettings, provider: InventoryProvider) -> None:
    start = time.time()
    samples = collect_samples(settings.performance_samples, settings.performance_interval)
    duration_ms = int((time.time() - start) * 1000)
    if samples:
        report.performance = summarize_performance(samples, duration_ms)
    else:
        report.performance = {"duration_ms": duration_ms, "samples": 0, "error": "No samples collected"}


PHASES: List[Tuple[str, Phase]] = [
    ("Gathering basic system information", basic_info_phase),
    ("Analyzing CPU performance", cpu_phase),
    ("Analyzing memory", memory_phase),
    ("Analyzing storage", storage_phase),
    ("Analyzing GPU", gpu_phase),
    ("Analyzing battery", battery_phase),
    ("Analyzing display", display_phase),
    ("Analyzing network interfaces", network_phase),
    ("Checking thermal status", thermal_phase),
    ("Analyzing overall performance", performance_phase),
]


def run_diagnostic(
    settings: Optional[DiagnosticSettings] = None,
    provider: Optional[InventoryProvider] = None,
    console: Optional[Console] = None,
    rich_summary: bool = False,
) -> Tuple[DiagnosticReport, Path]:
    """Run all phases once, print the summary and write the JSON report.

    Failures a phase handles itself end up as placeholder strings in the report.
    Anything else propagates and no report file is written.
    """
    settings = settings or DiagnosticSettings()
    provider = provider or select_provider(timeout=settings.command_timeout)
    console = console or Console()
    report = DiagnosticReport()

    console.print("Starting laptop diagnostic, this may take a few minutes...")
    for label, phase in PHASES:
        console.print(f"\n{label}...")
        logger.debug("Running phase %s", phase.__name__)
        phase(report, settings, provider)
        console.print("[green]done[/green]")

    report.recommendations = generate_recommendations(report)
    if rich_summary:
        render_summary(report, console)
    else:
        console.print(format_summary(report), markup=False, highlight=False)

    path = save_report(report, settings.output_dir)
    console.print(f"\nResults saved to: {path}")
    return report, path
