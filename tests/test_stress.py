import time

from laptop_diagnostic import stress
from laptop_diagnostic.stress import SCRATCH_FILE_NAME, run_cpu_stress, run_memory_stress, run_storage_test

MIB = 1024**2


def test_storage_round_trip_removes_scratch_file(tmp_path):
    result = run_storage_test(tmp_path, 10 * MIB)
    assert "error" not in result
    assert result["verified"] is True
    assert result["file_size_mb"] == 10
    assert not (tmp_path / SCRATCH_FILE_NAME).exists()


def test_storage_failure_reports_error(tmp_path):
    missing = tmp_path / "does-not-exist"
    result = run_storage_test(missing, MIB)
    assert "error" in result
    assert not (missing / SCRATCH_FILE_NAME).exists()


def test_storage_read_failure_still_removes_file(tmp_path, monkeypatch):
    real_open = open

    def failing_open(path, mode="r", *args, **kwargs):
        if mode == "rb":
            raise OSError("read failed")
        return real_open(path, mode, *args, **kwargs)

    monkeypatch.setattr(stress, "open", failing_open, raising=False)
    result = run_storage_test(tmp_path, MIB)
    assert result == {"error": "read failed"}
    assert not (tmp_path / SCRATCH_FILE_NAME).exists()


def test_memory_stress_stops_at_chunk_cap():
    result = run_memory_stress(chunk_elements=1024, max_bytes=MIB, max_chunks=4)
    assert result["chunks"] == 4
    assert result["allocated_mb"] == round(4 * 1024 * 8 / MIB, 2)


def test_memory_stress_stops_at_byte_cap():
    result = run_memory_stress(chunk_elements=1024, max_bytes=3 * 1024 * 8, max_chunks=100)
    assert result["chunks"] == 3


def test_memory_stress_reports_partial_result(monkeypatch):
    calls = []

    def flaky_full(size, value, dtype):
        calls.append(size)
        if len(calls) > 2:
            raise MemoryError("out of memory")
        return stress.np.zeros(size, dtype=dtype)

    monkeypatch.setattr(stress.np, "full", flaky_full)
    result = run_memory_stress(chunk_elements=1024, max_bytes=MIB, max_chunks=10)
    assert result["chunks"] == 2
    assert "Memory allocation failed" in result["error"]


def test_cpu_stress_runs_full_window():
    start = time.time()
    result = run_cpu_stress(duration=2, workers=2, sample_interval=0.5)
    elapsed = time.time() - start
    assert result["workers"] == 2
    assert len(result["samples"]) == 4
    assert result["samples"][-1]["elapsed_ms"] >= 1990
    assert result["peak_load"] >= result["avg_load"]
    assert 2 <= elapsed < 6


def test_cpu_stress_reports_worker_start_failure(monkeypatch):
    class NoSemaphores:
        def Event(self):
            raise OSError("sem_open is not available")

    monkeypatch.setattr(stress.multiprocessing, "get_context", lambda: NoSemaphores())
    result = run_cpu_stress(duration=5, workers=2)
    assert "sem_open" in result["error"]
    assert result["samples"] == []
    assert result["avg_load"] is None


def test_cpu_stress_without_window_has_no_samples():
    result = run_cpu_stress(duration=0, workers=1)
    assert result["samples"] == []
    assert result["peak_load"] is None
    assert result["avg_load"] is None
