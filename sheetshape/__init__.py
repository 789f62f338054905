"""sheetshape: structure inference for loosely laid out spreadsheets.

Recovers a header-aware, correctly oriented, typed table from each worksheet
and re-derives store / metric blocks from report-style sheets.
"""

from .excel.extract import extract_grid, extract_sheet
from .services.metrics import aggregate_metrics

__all__ = [
    "__version__",
    "aggregate_metrics",
    "extract_grid",
    "extract_sheet",
]

__version__ = "0.1.0"
