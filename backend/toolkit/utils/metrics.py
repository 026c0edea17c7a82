"""
ToolKit Metrics Collection
In-process counters and timings for the color tools, served at /metrics.
"""
import time
from collections import Counter, defaultdict
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

import numpy as np


def _describe(values: Sequence[float], percentiles: bool = True) -> Dict[str, float]:
    data = np.asarray(values, dtype=np.float64)
    stats = {
        "count": int(data.size),
        "mean": float(data.mean()),
        "min": float(data.min()),
        "max": float(data.max()),
    }
    if percentiles:
        stats["p50"] = float(np.percentile(data, 50))
        stats["p95"] = float(np.percentile(data, 95))
    return stats


class MetricsCollector:
    """Thread-safe counters, operation timings and extracted palette sizes."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._palette_sizes: List[int] = []
        self._start_time = time.time()

    def increment_counter(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def increment_failure_count(self, operation: str, error_type: str):
        """Count a failed operation, in total and per exception type."""
        with self._lock:
            self._counters[f"{operation}_failed_total"] += 1
            self._counters[f"{operation}_error_{error_type.lower()}"] += 1

    def record_timing(self, operation: str, duration_ms: float):
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def record_palette_size(self, size: int):
        with self._lock:
            self._palette_sizes.append(size)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """count/mean/min/max/p50/p95 per timed operation."""
        with self._lock:
            return {name: _describe(values) for name, values in self._timings.items() if values}

    def get_palette_size_stats(self) -> Dict[str, float]:
        with self._lock:
            if not self._palette_sizes:
                return {}
            return _describe(self._palette_sizes, percentiles=False)

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "palette_size_stats": self.get_palette_size_stats()
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._palette_sizes.clear()
            self._start_time = time.time()


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    if _metrics is not None:
        _metrics.reset()
