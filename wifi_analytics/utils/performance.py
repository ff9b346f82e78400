"""
WiFiAnalytics - Stage Timing Utilities

Wall-clock timings (and optional row counts) for pipeline stages, plus a
batching helper for streaming large fact tables into the loader.

Usage:
    from wifi_analytics.utils.performance import PerformanceTimer

    with PerformanceTimer("load_qos") as timer:
        timer.rows = loader.load_qos_records(records)
"""

import logging
import time
from dataclasses import dataclass, field
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class StageTiming:
    """Accumulated measurements for one named stage."""
    durations_ms: List[float] = field(default_factory=list)
    rows: int = 0

    @property
    def total_ms(self) -> float:
        return sum(self.durations_ms)

    @property
    def rows_per_second(self) -> Optional[float]:
        if not self.rows or not self.total_ms:
            return None
        return self.rows / (self.total_ms / 1000)


class PerformanceMetrics:
    """Process-wide registry of stage timings."""

    def __init__(self):
        self._stages: Dict[str, StageTiming] = {}

    def record(self, operation: str, elapsed_ms: float, rows: int = 0) -> None:
        stage = self._stages.setdefault(operation, StageTiming())
        stage.durations_ms.append(elapsed_ms)
        stage.rows += rows

    def get_stats(self, operation: str) -> Dict[str, float]:
        """
        Summary for one stage.

        Returns:
            Dict with count, total, avg, last and rows (all zero when unseen)
        """
        stage = self._stages.get(operation)
        if stage is None or not stage.durations_ms:
            return {"count": 0, "total": 0, "avg": 0, "last": 0, "rows": 0}

        return {
            "count": len(stage.durations_ms),
            "total": stage.total_ms,
            "avg": stage.total_ms / len(stage.durations_ms),
            "last": stage.durations_ms[-1],
            "rows": stage.rows
        }

    def stages(self) -> Dict[str, StageTiming]:
        return dict(self._stages)

    def clear(self) -> None:
        self._stages.clear()


_METRICS = PerformanceMetrics()


def get_metrics() -> PerformanceMetrics:
    return _METRICS


class PerformanceTimer:
    """
    Context manager that times a stage and records it in the registry.

    Set ``rows`` inside the block to report throughput for the stage.
    Stages slower than ``log_threshold_ms`` are logged at WARNING.
    """

    def __init__(self, operation: str, log_threshold_ms: float = 60000.0):
        self.operation = operation
        self.log_threshold_ms = log_threshold_ms
        self.rows = 0
        self.elapsed_ms: float = 0
        self._started: float = 0

    def __enter__(self) -> "PerformanceTimer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000
        get_metrics().record(self.operation, self.elapsed_ms, self.rows)

        message = f"[PERF] {self.operation}: {self.elapsed_ms:.1f}ms"
        if self.rows:
            message += f" ({self.rows:,} rows)"
        if self.elapsed_ms >= self.log_threshold_ms:
            logger.warning(f"{message} exceeded {self.log_threshold_ms:.0f}ms")
        else:
            logger.debug(message)


def batched(items: Iterable, batch_size: int) -> Iterator[list]:
    """
    Split an iterable into lists of at most batch_size items.

    Args:
        items: Any iterable, consumed lazily
        batch_size: Maximum items per batch (must be positive)

    Yields:
        Lists of items
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    iterator = iter(items)
    batch = list(islice(iterator, batch_size))
    while batch:
        yield batch
        batch = list(islice(iterator, batch_size))


def format_perf_report() -> str:
    """Multi-line stage timing report, slowest stage first."""
    stages = get_metrics().stages()
    if not stages:
        return "[PERF] No performance metrics recorded"

    lines = ["[PERF] Stage Timings:", "-" * 60]
    for operation, stage in sorted(stages.items(), key=lambda item: item[1].total_ms, reverse=True):
        line = f"  {operation}: {stage.total_ms:.1f}ms over {len(stage.durations_ms)} run(s)"
        if stage.rows_per_second is not None:
            line += f", {stage.rows:,} rows at {stage.rows_per_second:,.0f} rows/s"
        lines.append(line)
    lines.append("-" * 60)
    return "\n".join(lines)
