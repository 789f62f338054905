from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Metric models for report-style aggregation.

MetricBlock is one chart-ready ``{label, actual, target, percent}`` unit.
MetricsReport is what the aggregator returns for one sheet: either a list of
blocks, or one of two distinct reported conditions (columns not found /
no valid rows). Neither condition is raised as an exception.
"""

__all__ = [
    "AggregationStatus",
    "MetricBlock",
    "MetricsReport",
    "percent_of_target",
]


def percent_of_target(actual: float, target: float) -> float:
    """actual / target * 100, or 0 when the target is not positive."""
    if target > 0:
        return actual / target * 100
    return 0.0


@dataclass(frozen=True)
class MetricBlock:
    label: str
    actual_value: float
    target_value: float
    percent: float

    @classmethod
    def from_values(cls, label: str, actual: float, target: float) -> MetricBlock:
        return cls(
            label=label,
            actual_value=actual,
            target_value=target,
            percent=percent_of_target(actual, target),
        )

    @property
    def reached(self) -> bool:
        return self.percent >= 100


class AggregationStatus(str, Enum):
    OK = "ok"
    COLUMNS_NOT_FOUND = "columns-not-found"
    NO_VALID_ROWS = "no-valid-rows"


@dataclass(frozen=True)
class MetricsReport:
    """Aggregation outcome for a single sheet.

    ``headers`` always carries the header texts that were examined so a caller
    can render a diagnostic when the metric columns were not recognized.
    ``source`` tells whether the blocks came from the sheet's own header
    ("table") or from report-style block extraction ("blocks").
    """
    sheet_name: str
    status: AggregationStatus
    blocks: list[MetricBlock] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    actual_index: int = -1
    target_index: int = -1
    source: str = "table"

    @property
    def ok(self) -> bool:
        return self.status is AggregationStatus.OK
