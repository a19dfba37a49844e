"""
Batch site tables

Reads a table with one row per sampling site and one column per metal
(mg/L unless told otherwise), assesses every row on its own and returns the
table with the index, risk category and per-metal contributions attached.
Also derives the per-metal contribution summary and the hotspot ranking.
"""
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from hmpi.classifier import RiskThresholds
from hmpi.engine import assess
from hmpi.errors import EmptyInput, HMPIError
from hmpi.metals import canonical_metal
from hmpi.normalizer import DEFAULT_WEIGHT_CONSTANT
from hmpi.standards import LimitTable
from hmpi.units import CANONICAL_UNIT

logger = logging.getLogger(__name__)

INDEX_COLUMN = "HPI"
CATEGORY_COLUMN = "Category"
EXCEEDED_COLUMN = "Exceeded"
ERROR_COLUMN = "Error"
CONTRIB_SUFFIX = "_contrib"


def read_table(source: Any, name: Optional[str] = None) -> pd.DataFrame:
    """
    Read a CSV or Excel site table from a path or an open file.

    The format is taken from `name`, the file's own name, or the path
    suffix. Column headers are stripped of surrounding whitespace.
    """
    if name is None:
        name = getattr(source, "name", None) if hasattr(source, "read") else str(source)
    suffix = Path(str(name or "")).suffix.lower()

    if suffix == ".csv" or (suffix == "" and hasattr(source, "read")):
        df = pd.read_csv(source, skipinitialspace=True)
    elif suffix in (".xlsx", ".xls"):
        df = pd.read_excel(source)
    else:
        raise ValueError(f"Unsupported table format {suffix!r}; expected .csv, .xlsx or .xls")

    df.columns = [str(c).strip() for c in df.columns]
    logger.info("Read %d rows, %d columns from %s", len(df), len(df.columns), name or "<buffer>")
    return df


def detect_metal_columns(df: pd.DataFrame, table: LimitTable) -> List[str]:
    """Columns, in frame order, that name a metal the limit table knows."""
    return [c for c in df.columns if c in table]


def _row_readings(row: pd.Series, metals: Sequence[str], unit: str, site: str) -> list:
    readings = []
    for col in metals:
        value = row[col]
        if pd.isna(value):
            logger.warning("Site %s: no value for %s, left out of the index", site, col)
            continue
        readings.append((col, value, unit))
    return readings


def compute_table(
    df: pd.DataFrame,
    table: LimitTable,
    metals: Optional[Sequence[str]] = None,
    unit: str = CANONICAL_UNIT,
    site_col: Optional[str] = None,
    thresholds: Optional[RiskThresholds] = None,
    weight_constant: float = DEFAULT_WEIGHT_CONSTANT,
    errors: str = "raise",
) -> pd.DataFrame:
    """
    Assess every row of a site table.

    Returns a copy of `df` with HPI (3 decimals), Category, Exceeded and one
    `<metal>_contrib` column (Q_i * W_i) per metal. Blank cells are treated
    as not measured. With errors="record" a failing row gets NaN/None and
    the message in an Error column instead of raising.
    """
    if errors not in ("raise", "record"):
        raise ValueError(f"errors must be 'raise' or 'record', got {errors!r}")

    use_metals = list(metals) if metals is not None else detect_metal_columns(df, table)
    if len(use_metals) == 0:
        raise EmptyInput("No metal columns with a permissible limit in the selected standard")
    missing = [m for m in use_metals if m not in df.columns]
    if missing:
        raise KeyError(f"Metal columns not in table: {missing}")

    symbols = [canonical_metal(m) for m in use_metals]
    hpi = np.full(len(df), np.nan)
    categories: List[Optional[str]] = [None] * len(df)
    exceeded: List[Optional[str]] = [None] * len(df)
    messages: List[Optional[str]] = [None] * len(df)
    contributions = np.full((len(df), len(symbols)), np.nan)

    for pos, (idx, row) in enumerate(df.iterrows()):
        site = str(row[site_col]) if site_col is not None else str(idx)
        try:
            assessment = assess(
                _row_readings(row, use_metals, unit, site),
                table,
                location=site,
                thresholds=thresholds,
                weight_constant=weight_constant,
            )
        except HMPIError as e:
            if errors == "raise":
                raise
            logger.warning("Site %s: %s", site, e)
            messages[pos] = str(e)
            continue

        hpi[pos] = assessment.overall_index
        categories[pos] = assessment.risk_level
        exceeded[pos] = ", ".join(assessment.exceeded_metals)
        for s in assessment.sub_indices:
            contributions[pos, symbols.index(s.metal_name)] = s.contribution

    df_results = df.copy()
    df_results[INDEX_COLUMN] = np.round(hpi, 3)
    df_results[CATEGORY_COLUMN] = categories
    df_results[EXCEEDED_COLUMN] = exceeded
    if errors == "record":
        df_results[ERROR_COLUMN] = messages
    contrib_df = pd.DataFrame(
        contributions, columns=[f"{m}{CONTRIB_SUFFIX}" for m in symbols], index=df.index
    )
    df_results = pd.concat([df_results, contrib_df], axis=1)

    failed = sum(m is not None for m in messages)
    logger.info("Computed HMPI for %d of %d sites", len(df) - failed, len(df))
    return df_results


def average_contributions(results: pd.DataFrame) -> pd.Series:
    """Mean per-metal contribution across sites, indexed by metal."""
    contrib_cols = [c for c in results.columns if str(c).endswith(CONTRIB_SUFFIX)]
    return results[contrib_cols].mean().rename(index=lambda s: s[: -len(CONTRIB_SUFFIX)])


def hotspots(
    results: pd.DataFrame,
    lat_col: str,
    lon_col: str,
    site_col: Optional[str] = None,
    top: Optional[int] = None,
) -> pd.DataFrame:
    """
    Sites with usable coordinates, highest index first.

    Columns: site, lat, lon, hpi, category. Rows with non-numeric
    coordinates or no index are dropped.
    """
    map_df = results[[lat_col, lon_col]].copy()
    map_df = map_df.rename(columns={lat_col: "lat", lon_col: "lon"})

    map_df["lat"] = pd.to_numeric(map_df["lat"], errors="coerce")
    map_df["lon"] = pd.to_numeric(map_df["lon"], errors="coerce")
    map_df["hpi"] = results[INDEX_COLUMN]
    map_df["site"] = results[site_col] if site_col is not None else results.index.astype(str)
    map_df["category"] = results[CATEGORY_COLUMN]
    map_df = map_df.dropna(subset=["lat", "lon", "hpi"])

    map_df = map_df.sort_values("hpi", ascending=False, kind="mergesort")
    if top is not None:
        map_df = map_df.head(top)
    return map_df[["site", "lat", "lon", "hpi", "category"]].reset_index(drop=True)


def write_results(results: pd.DataFrame, path: Union[str, Path]) -> None:
    results.to_csv(path, index=False)
    logger.info("Wrote %d rows to %s", len(results), path)
