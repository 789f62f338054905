from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the sheetshape extraction tool.

Heuristics holds the tuning constants of the structure-inference pipeline
(density threshold, transpose hysteresis, header penalties...). KeywordSet
holds the locale-specific vocabulary used to recognize metric columns and
report blocks; FRENCH_KEYWORDS is the default and matches French business
reports ("CA Réalisé", "Objectif").

Both are immutable and passed explicitly into the pure pipeline functions.
The YAML loader (sheetshape.config.loader) builds AppConfig from these.
"""

__all__ = [
    "AppConfig",
    "DEFAULT_HEURISTICS",
    "DatabaseConfig",
    "FRENCH_KEYWORDS",
    "Heuristics",
    "KeywordSet",
]


@dataclass(frozen=True)
class Heuristics:
    """Tuning constants for the structure-inference heuristics."""
    header_scan_rows: int = 20  # density header locator window
    block_header_scan_rows: int = 10  # scored header locator window (chart path)
    density_threshold: float = 0.75  # share of the densest row a header must reach
    transpose_margin: float = 0.1  # rowScore must beat colScore by this much
    type_sample_size: int = 10  # non-empty values sampled per column
    keyword_bonus: float = 5.0  # flat bonus per header cell matching a keyword
    keyword_max_length: int = 20  # longer cells never earn the keyword bonus
    title_uniqueness_ratio: float = 0.5  # below this + long text => merged title
    title_text_length: float = 15.0
    title_penalty: float = 0.1
    low_uniqueness_ratio: float = 0.8
    low_uniqueness_penalty: float = 0.8
    numeric_column_ratio: float = 0.1  # chart columns need more numeric rows than this


@dataclass(frozen=True)
class KeywordSet:
    """Locale vocabulary for header scoring, metric columns and report blocks.

    All entries are compared lowercased.
    """
    header: tuple[str, ...]  # header-row keyword bonus
    actual: tuple[str, ...]  # "actual" metric column
    target: tuple[str, ...]  # "target" metric column
    actual_markers: tuple[str, ...]  # reject a target candidate containing these
    target_markers: tuple[str, ...]  # reject an actual candidate containing these
    non_data_labels: tuple[str, ...]  # row labels that are totals / metadata
    actual_row_markers: tuple[str, ...]  # report row holding the realized value
    target_row_markers: tuple[str, ...]  # report row holding the objective
    placeholder_label: str = "Store"  # "Store N" when a block has no label
    synthetic_headers: tuple[str, str, str] = ("Name", "CA Réalisé", "Objectif")


FRENCH_KEYWORDS = KeywordSet(
    header=("ca", "objectif", "budget", "réalisé", "realise"),
    actual=("ca réalisé", "chiffre d'affaires", "ca", "realise", "réalisé"),
    target=("objectif", "budget", "prevu", "prévu", "obj"),
    actual_markers=("réalisé", "realise", "chiffre d'affaires"),
    target_markers=("objectif", "budget", "prevu", "prévu", "obj"),
    non_data_labels=(
        "objectif",
        "total",
        "ca realise",
        "ca réalisé",
        "% de realisation",
        "% de réalisation",
        "moyenne",
    ),
    actual_row_markers=("ca réalisé", "ca realise"),
    target_row_markers=("objectif",),
)

DEFAULT_HEURISTICS = Heuristics()


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for a processing run."""
    source_directory: str  # Directory scanned for workbooks
    export_csv: bool = False
    logs_directory: str = "./logs"
    heuristics: Heuristics = DEFAULT_HEURISTICS
    keywords: KeywordSet = FRENCH_KEYWORDS
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
