"""Short synthetic workloads for CPU, memory and storage."""

from __future__ import annotations

import logging
import math
import multiprocessing
import os
import random
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from .system_state import read_free_memory, read_load_average

logger = logging.getLogger(__name__)

MIB = 1024**2
SCRATCH_FILE_NAME = "speed_test_file.tmp"


def _burn_cpu(deadline: float, stop) -> None:
    x = 0.0
    while time.time() < deadline and not stop.is_set():
        for i in range(10_000):
            x += math.sqrt(i) * math.sin(i) * math.cos(i)
        if x > 1e10:
            x = 0.0


def run_cpu_stress(duration: int, workers: Optional[int] = None, sample_interval: float = 1.0) -> Dict[str, Any]:
    """Saturate every core for ``duration`` seconds while sampling load and free memory.

    Samples are taken on a fixed schedule, one per ``sample_interval``, and the
    window always runs to the deadline. Workers stop on their own at the deadline;
    any still alive afterwards are signalled, joined and finally terminated.
    """
    if sample_interval <= 0:
        raise ValueError("sample_interval must be positive")
    workers = workers or os.cpu_count() or 1
    start = time.time()
    deadline = start + duration
    result: Dict[str, Any] = {"duration_seconds": duration, "workers": workers}

    context = multiprocessing.get_context()
    stop = None
    processes: List[Any] = []
    samples: List[Dict[str, Any]] = []
    try:
        try:
            stop = context.Event()
            for _ in range(workers):
                process = context.Process(target=_burn_cpu, args=(deadline, stop), daemon=True)
                process.start()
                processes.append(process)
        except (OSError, ImportError) as exc:
            logger.warning("CPU stress workers could not start: %s", exc)
            result["error"] = f"CPU stress workers could not start: {exc}"
            deadline = time.time()

        for tick in range(1, int(duration / sample_interval + 1e-9) + 1):
            next_tick = start + tick * sample_interval
            if next_tick > deadline + 1e-6:
                break
            time.sleep(max(next_tick - time.time(), 0.0))
            samples.append(
                {
                    "elapsed_ms": int((time.time() - start) * 1000),
                    "load_avg": read_load_average()[0],
                    "free_memory": read_free_memory(),
                }
            )
        time.sleep(max(deadline - time.time(), 0.0))
    finally:
        _stop_workers(processes, stop)

    loads = [sample["load_avg"] for sample in samples]
    result.update(
        {
            "peak_load": round(max(loads), 2) if loads else None,
            "avg_load": round(sum(loads) / len(loads), 2) if loads else None,
            "samples": samples,
        }
    )
    return result


def _stop_workers(processes: List[Any], stop) -> None:
    if stop is not None:
        stop.set()
    for process in processes:
        process.join(timeout=1.0)
        if process.is_alive():
            logger.warning("CPU stress worker %s overran its deadline, terminating", process.pid)
            process.terminate()
            process.join()


def run_memory_stress(
    chunk_elements: int = 1024 * 1024,
    max_bytes: int = 1024**3,
    max_chunks: int = 100,
) -> Dict[str, Any]:
    """Allocate float64 buffers until a byte or chunk cap is reached."""
    buffers: List[np.ndarray] = []
    allocated = 0
    start_free = read_free_memory()
    try:
        while allocated < max_bytes and len(buffers) < max_chunks:
            chunk = np.full(chunk_elements, random.random(), dtype=np.float64)
            buffers.append(chunk)
            allocated += chunk.nbytes
        end_free = read_free_memory()
        return {
            "allocated_mb": round(allocated / MIB, 2),
            "memory_drop_mb": round((start_free - end_free) / MIB, 2),
            "chunks": len(buffers),
        }
    except MemoryError as exc:
        logger.warning("Memory stress stopped after %d chunks: %s", len(buffers), exc)
        return {
            "error": f"Memory allocation failed: {exc}",
            "allocated_mb": round(allocated / MIB, 2),
            "chunks": len(buffers),
        }
    finally:
        buffers.clear()


def run_storage_test(directory: Path = Path("."), size: int = 10 * MIB) -> Dict[str, Any]:
    """Time a sequential write and read of ``size`` bytes through a scratch file."""
    path = Path(directory) / SCRATCH_FILE_NAME
    data = b"a" * size
    try:
        write_start = time.perf_counter()
        with open(path, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        write_time = time.perf_counter() - write_start

        read_start = time.perf_counter()
        with open(path, "rb") as handle:
            read_back = handle.read()
        read_time = time.perf_counter() - read_start
    except OSError as exc:
        logger.warning("Storage speed test failed: %s", exc)
        return {"error": str(exc)}
    finally:
        _remove_quietly(path)

    return {
        "file_size_mb": round(size / MIB, 2),
        "write_speed_mbps": _throughput(len(data), write_time),
        "read_speed_mbps": _throughput(len(read_back), read_time),
        "write_time_ms": round(write_time * 1000, 2),
        "read_time_ms": round(read_time * 1000, 2),
        "verified": read_back == data,
    }


def _throughput(num_bytes: int, seconds: float) -> Optional[float]:
    if seconds <= 0:
        return None
    return round(num_bytes / MIB / seconds, 2)


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove scratch file %s: %s", path, exc)
