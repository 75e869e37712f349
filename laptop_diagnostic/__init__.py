"""
One-shot laptop health check: probes hardware, runs short stress tests and suggests upgrades.
"""

__all__ = ["cli", "config", "diagnostics", "inventory", "report", "runner", "stress", "system_state"]
__version__ = "0.1.0"
