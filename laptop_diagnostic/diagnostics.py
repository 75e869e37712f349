"""Derive stability statistics and upgrade advice from a finished report."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .report import DiagnosticReport
from .system_state import MetricSample

GIB = 1024**3
MEMORY_VARIANCE_THRESHOLD = 1_000_000_000

NO_ISSUES = "✅ No major issues detected - laptop appears to be in good condition"


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("mean of an empty sequence")
    return sum(values) / len(values)


def population_variance(values: Sequence[float]) -> float:
    """Population variance; zero exactly when every value is identical."""
    centre = mean(values)
    if all(value == values[0] for value in values):
        return 0.0
    return sum((value - centre) ** 2 for value in values) / len(values)


def classify_memory_stability(variance: float) -> str:
    return "Stable" if variance < MEMORY_VARIANCE_THRESHOLD else "Unstable"


def classify_load_stability(variance: float) -> str:
    if variance < 0.5:
        return "Stable"
    if variance < 1.0:
        return "Moderate"
    return "High Load"


def summarize_performance(samples: Sequence[MetricSample], duration_ms: int) -> Dict[str, Any]:
    loads = [sample.load_avg[0] for sample in samples]
    free = [sample.free_memory for sample in samples]
    memory_variance = population_variance(free)
    load_variance = population_variance(loads)
    return {
        "duration_ms": duration_ms,
        "samples": len(samples),
        "avg_load": round(mean(loads), 2),
        "memory_stability": {
            "variance": memory_variance,
            "stability": classify_memory_stability(memory_variance),
        },
        "load_stability": {
            "variance": round(load_variance, 4),
            "stability": classify_load_stability(load_variance),
        },
    }


def generate_recommendations(report: DiagnosticReport) -> List[str]:
    """Evaluate the fixed rule list against a report and return advice strings."""
    recommendations: List[str] = []
    for rule in (_check_cores, _check_memory_size, _check_memory_usage, _check_storage_speed, _check_load):
        advice = rule(report)
        if advice:
            recommendations.append(advice)
    return recommendations or [NO_ISSUES]


def _check_cores(report: DiagnosticReport) -> Optional[str]:
    cores = report.cpu.get("cores")
    if cores is not None and cores < 4:
        return "❌ CPU has fewer than 4 cores - may struggle with modern multitasking"
    return None


def _check_memory_size(report: DiagnosticReport) -> Optional[str]:
    total = report.memory.get("total_bytes")
    if total is None:
        return None
    total_gb = total / GIB
    if total_gb < 8:
        return "❌ Less than 8GB RAM - insufficient for modern computing needs"
    if total_gb >= 16:
        return "✅ 16GB+ RAM - excellent for multitasking and demanding applications"
    return None


def _check_memory_usage(report: DiagnosticReport) -> Optional[str]:
    usage = report.memory.get("usage_percent")
    if usage is not None and usage > 80:
        return "⚠️ High memory usage detected - system may be under stress"
    return None


def _check_storage_speed(report: DiagnosticReport) -> Optional[str]:
    write_speed = report.stress_test.get("storage", {}).get("write_speed_mbps")
    if write_speed is None:
        return None
    if write_speed < 50:
        return "❌ Slow storage detected - consider SSD upgrade"
    if write_speed > 200:
        return "✅ Fast storage detected - likely SSD"
    return None


def _check_load(report: DiagnosticReport) -> Optional[str]:
    avg_load = report.performance.get("avg_load")
    if avg_load is not None and avg_load > 2:
        return "⚠️ High system load detected - system may be overloaded"
    return None
