from __future__ import annotations

import statistics
from dataclasses import dataclass
from datetime import datetime

"""Processing result models.

ProcessingResult carries every counter printed on the SUMMARY line; FileStat
keeps the per-file detail including row store batch timings.
"""

__all__ = [
    "BatchStatsAccumulator",
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    rows: int
    sheets: int
    elapsed_seconds: float
    total_batches: int = 0
    avg_batch_seconds: float = 0.0
    p95_batch_seconds: float = 0.0


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one folder run."""
    success_files: int
    failed_files: int
    total_rows: int  # data rows of the primary sheets (persisted, or counted in mock mode)
    total_sheets: int
    empty_sheets: int
    transposed_sheets: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    file_stats: list[FileStat] | None = None
    error_log_path: str | None = None  # set when the run wrote error records

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files


class BatchStatsAccumulator:
    """Collects row store batch timings for a FileStat."""

    def __init__(self) -> None:
        self.batch_times: list[float] = []

    def add_batch_time(self, elapsed_seconds: float) -> None:
        self.batch_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Calculate batch statistics.

        Returns:
            tuple: (total_batches, avg_batch_seconds, p95_batch_seconds)
        """
        if not self.batch_times:
            return (0, 0.0, 0.0)

        total_batches = len(self.batch_times)
        avg_batch_seconds = statistics.mean(self.batch_times)

        if total_batches == 1:
            p95_batch_seconds = self.batch_times[0]
        else:
            # 19th of 20 inclusive quantiles
            p95_batch_seconds = statistics.quantiles(
                self.batch_times, n=20, method='inclusive'
            )[18]

        return (total_batches, avg_batch_seconds, p95_batch_seconds)
