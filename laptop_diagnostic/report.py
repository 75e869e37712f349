"""The per-run report record and its JSON file."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import json
from pathlib import Path
from typing import Any, Dict, List

CATEGORIES = (
    "basic_info",
    "cpu",
    "memory",
    "storage",
    "gpu",
    "battery",
    "display",
    "network",
    "thermal",
    "performance",
    "stress_test",
)


@dataclass
class DiagnosticReport:
    started_at: datetime = field(default_factory=datetime.now)
    basic_info: Dict[str, Any] = field(default_factory=dict)
    cpu: Dict[str, Any] = field(default_factory=dict)
    memory: Dict[str, Any] = field(default_factory=dict)
    storage: Dict[str, Any] = field(default_factory=dict)
    gpu: Dict[str, Any] = field(default_factory=dict)
    battery: Dict[str, Any] = field(default_factory=dict)
    display: Dict[str, Any] = field(default_factory=dict)
    network: Dict[str, Any] = field(default_factory=dict)
    thermal: Dict[str, Any] = field(default_factory=dict)
    performance: Dict[str, Any] = field(default_factory=dict)
    stress_test: Dict[str, Any] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return f"laptop_diagnostic_{int(self.started_at.timestamp() * 1000)}.json"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"timestamp": self.started_at.isoformat()}
        for category in CATEGORIES:
            payload[category] = getattr(self, category)
        payload["recommendations"] = list(self.recommendations)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


def save_report(report: DiagnosticReport, directory: Path = Path(".")) -> Path:
    """Write the report as pretty-printed JSON and return the file path."""
    path = Path(directory) / report.filename
    path.write_text(report.to_json(), encoding="utf-8")
    return path
