from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from ..models.cell import Cell, Grid
from ..models.config_models import DEFAULT_HEURISTICS, FRENCH_KEYWORDS, Heuristics, KeywordSet
from .values import cell_text, is_blank, is_numeric

"""Header row locator.

Two variants share this module:

* density variant (plain extraction path): first row, top to bottom, whose
  filled-cell count reaches ``density_threshold`` of the densest row in the
  scan window.
* scored variant (chart / block detection path): rows are scored on their
  textual labels,

      score = textCount * (ln(avgTextLength + 1) + 1)

  then, with ``refine=True``, penalized for low uniqueness (a merged title
  repeated over several cells) and given a flat bonus per short cell matching
  a metric keyword.

Both return 0 when nothing in the window looks like a header.
"""

__all__ = [
    "find_header_row_by_density",
    "find_header_row_by_score",
    "score_header_row",
]

logger = logging.getLogger(__name__)


def _filled_count(row: Sequence[Cell]) -> int:
    return sum(1 for cell in row if not is_blank(cell.value))


def find_header_row_by_density(grid: Grid, *, heuristics: Heuristics = DEFAULT_HEURISTICS) -> int:
    window = grid[: heuristics.header_scan_rows]
    densities = [_filled_count(row) for row in window]
    max_density = max(densities, default=0)
    if max_density <= 1:
        return 0

    threshold = max_density * heuristics.density_threshold
    for index, density in enumerate(densities):
        if density >= threshold:
            logger.debug("header row %d (density %d/%d)", index, density, max_density)
            return index
    return 0  # pragma: no cover (the densest row always qualifies)


def _matches_keyword(text: str, keywords: Sequence[str], heuristics: Heuristics) -> bool:
    lowered = text.strip().lower()
    if not lowered or len(lowered) >= heuristics.keyword_max_length:
        return False
    return any(lowered == k or k in lowered for k in keywords)


def score_header_row(
    row: Sequence[Cell],
    *,
    refine: bool = True,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
    keywords: KeywordSet = FRENCH_KEYWORDS,
) -> float:
    """Score how much ``row`` looks like a header row."""
    filled = [cell.value for cell in row if not is_blank(cell.value)]
    texts = [cell_text(v) for v in filled if not is_numeric(v)]
    if not texts:
        return 0.0

    avg_length = sum(len(t) for t in texts) / len(texts)
    score = len(texts) * (math.log(avg_length + 1) + 1)
    if not refine:
        return score

    uniqueness = len({cell_text(v) for v in filled}) / len(filled)
    if uniqueness < heuristics.title_uniqueness_ratio and avg_length > heuristics.title_text_length:
        score *= heuristics.title_penalty
    elif uniqueness < heuristics.low_uniqueness_ratio:
        score *= heuristics.low_uniqueness_penalty

    bonus_cells = sum(1 for t in texts if _matches_keyword(t, keywords.header, heuristics))
    return score + bonus_cells * heuristics.keyword_bonus


def find_header_row_by_score(
    grid: Grid,
    *,
    refine: bool = True,
    max_rows: int | None = None,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
    keywords: KeywordSet = FRENCH_KEYWORDS,
) -> int:
    """Index of the best-scoring row among the first ``max_rows`` rows.

    ``max_rows`` defaults to ``heuristics.block_header_scan_rows``. Ties keep
    the earliest row.
    """
    limit = heuristics.block_header_scan_rows if max_rows is None else max_rows
    best_row = 0
    best_score = -1.0
    for index, row in enumerate(grid[:limit]):
        score = score_header_row(row, refine=refine, heuristics=heuristics, keywords=keywords)
        if score > best_score:
            best_score = score
            best_row = index

    if best_score <= 0:
        return 0
    logger.debug("scored header row %d (score %.2f)", best_row, best_score)
    return best_row
