from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY files={n}/{n} success={s} failed={f} rows={r} sheets={t}
empty_sheets={e} transposed_sheets={x} elapsed_sec={sec} throughput_rps={rps}
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integral values without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Args:
        total_files: Number of workbooks detected
        result: Aggregated counters of the run

    Returns:
        The line, ``SUMMARY `` prefix included

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2023, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_rows=1000, total_sheets=2,
        ...     empty_sheets=0, transposed_sheets=1, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=500.0
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 rows=1000 sheets=2 empty_sheets=0 transposed_sheets=1 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"sheets={result.total_sheets} "
        f"empty_sheets={result.empty_sheets} "
        f"transposed_sheets={result.transposed_sheets} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )
