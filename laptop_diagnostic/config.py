"""Tunable knobs for a diagnostic run."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

GIB = 1024**3
MIB = 1024**2


@dataclass
class DiagnosticSettings:
    cpu_duration: int = 10
    cpu_workers: Optional[int] = None
    cpu_sample_interval: float = 1.0
    cpu_usage_interval: float = 1.0
    memory_chunk_elements: int = 1024 * 1024
    memory_max_bytes: int = GIB
    memory_max_chunks: int = 100
    storage_test_bytes: int = 10 * MIB
    performance_samples: int = 5
    performance_interval: float = 1.0
    command_timeout: Optional[float] = None
    output_dir: Path = Path(".")
    run_stress: bool = True

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "DiagnosticSettings":
        return cls(
            cpu_duration=args.cpu_duration,
            output_dir=Path(args.output_dir),
            run_stress=not args.skip_stress,
        )
