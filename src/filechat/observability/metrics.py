"""
FileChat Metrics Store.

In-process metrics collection for observability without external dependencies.
Tracks:
- Operation latencies (per operation, percentiles)
- Error counts by code (FileChatException.code)
- Chat turns and fallback responses

Thread-safe via locks.
"""

from __future__ import annotations

import statistics
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class OperationMetrics:
    """Metrics for a single operation."""

    latencies_ms: list[float] = field(default_factory=list)
    error_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    call_count: int = 0
    last_called: datetime | None = None

    # Keep last N latencies to avoid unbounded memory
    MAX_LATENCIES = 1000

    def record_latency(self, ms: float) -> None:
        self.latencies_ms.append(ms)
        if len(self.latencies_ms) > self.MAX_LATENCIES:
            self.latencies_ms = self.latencies_ms[-self.MAX_LATENCIES :]
        self.call_count += 1
        self.last_called = datetime.now(timezone.utc)

    def record_error(self, code: str) -> None:
        self.error_counts[code] += 1

    def get_percentiles(self) -> dict[str, float]:
        if not self.latencies_ms:
            return {}
        sorted_latencies = sorted(self.latencies_ms)
        n = len(sorted_latencies)
        return {
            "p50_ms": sorted_latencies[int(n * 0.5)],
            "p90_ms": sorted_latencies[int(n * 0.9)],
            "p99_ms": sorted_latencies[int(n * 0.99)] if n > 1 else sorted_latencies[-1],
            "mean_ms": statistics.mean(sorted_latencies),
            "max_ms": max(sorted_latencies),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_count": self.call_count,
            "last_called": self.last_called.isoformat() if self.last_called else None,
            **self.get_percentiles(),
            "errors": dict(self.error_counts),
        }


class MetricsStore:
    """Collects metrics across the application. One instance per app."""

    def __init__(self):
        self._lock = threading.Lock()
        self._operations: dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self._global_errors: dict[str, int] = defaultdict(int)
        self._counters: dict[str, int] = defaultdict(int)
        self._started_at = datetime.now(timezone.utc)

    # -------------------------------------------------------------------------
    # Operation Metrics
    # -------------------------------------------------------------------------

    def record_latency(self, operation: str, ms: float) -> None:
        """Record an operation latency."""
        with self._lock:
            self._operations[operation].record_latency(ms)

    def record_operation_error(self, operation: str, code: str) -> None:
        """Record an error for a specific operation."""
        with self._lock:
            self._operations[operation].record_error(code)
            self._global_errors[code] += 1

    # -------------------------------------------------------------------------
    # Global Errors / Counters
    # -------------------------------------------------------------------------

    def record_error(self, code: str) -> None:
        """Record a global error (not tied to a specific operation)."""
        with self._lock:
            self._global_errors[code] += 1

    def increment(self, counter: str, by: int = 1) -> None:
        with self._lock:
            self._counters[counter] += by

    # -------------------------------------------------------------------------
    # Summary / Export
    # -------------------------------------------------------------------------

    def get_summary(self) -> dict[str, Any]:
        """
        Get a summary of all metrics.

        Returns a dict suitable for JSON serialization and /metrics endpoint.
        """
        with self._lock:
            now = datetime.now(timezone.utc)
            uptime_seconds = (now - self._started_at).total_seconds()
            return {
                "uptime_seconds": round(uptime_seconds, 1),
                "collected_at": now.isoformat(),
                "operations": {name: m.to_dict() for name, m in self._operations.items()},
                "global_errors": dict(self._global_errors),
                "counters": dict(self._counters),
            }

    def reset(self) -> None:
        """Reset all metrics. Useful for testing."""
        with self._lock:
            self._operations.clear()
            self._global_errors.clear()
            self._counters.clear()
            self._started_at = datetime.now(timezone.utc)
