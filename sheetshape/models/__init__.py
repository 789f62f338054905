"""Domain models for sheetshape.

Cells and grids, extracted sheets, metric blocks, configuration and
processing results.
"""

from .cell import EMPTY_CELL, Cell, Grid
from .config_models import DEFAULT_HEURISTICS, FRENCH_KEYWORDS, AppConfig, DatabaseConfig, Heuristics, KeywordSet
from .metric_block import AggregationStatus, MetricBlock, MetricsReport
from .sheet_result import ColumnDescriptor, ColumnType, SheetResult

__all__ = [
    # Grid models
    "Cell",
    "EMPTY_CELL",
    "Grid",
    # Extraction results
    "ColumnDescriptor",
    "ColumnType",
    "SheetResult",
    # Aggregation
    "AggregationStatus",
    "MetricBlock",
    "MetricsReport",
    # Configuration models
    "AppConfig",
    "DEFAULT_HEURISTICS",
    "DatabaseConfig",
    "FRENCH_KEYWORDS",
    "Heuristics",
    "KeywordSet",
]
