"""
csv_loader.py — Parse player CSV uploads into validated statistic records.

Expected headers (case and spacing tolerant):
    Name, University, Category, Total Runs, Balls Faced, Innings Played,
    Wickets, Overs Bowled, Runs Conceded

Missing or unparseable numbers become 0. Rows without a name, university
or category are skipped; rows whose statistics the valuation engine
rejects (negative, oversized or infinite values) are counted as failed.
"""

import io
import logging
import math
from dataclasses import dataclass, field

import pandas as pd

from scoring.valuation import (
    InvalidStatisticsError, PlayerStatistics, STAT_FIELDS, compute_stats,
)

logger = logging.getLogger("fantasy")

IDENTITY_COLUMNS = ("name", "university", "category")
INTEGER_STATS = ("total_runs", "balls_faced", "innings_played", "wickets", "runs_conceded")


class CsvFormatError(ValueError):
    """The upload is not a readable CSV."""


@dataclass
class LoadResult:
    records: list = field(default_factory=list)
    rows_read: int = 0
    skipped: int = 0
    failed: int = 0


def _column_key(header):
    """'Total Runs' / 'total_runs' / ' TOTAL-RUNS ' -> 'total_runs'."""
    return "_".join(str(header).strip().lower().replace("-", " ").replace("_", " ").split())


def _numeric(series, integral):
    cleaned = series.astype(str).str.replace(",", "", regex=False).str.replace(" ", "", regex=False)
    values = pd.to_numeric(cleaned, errors="coerce")
    if integral:
        # "12.5" is not a valid count; treat like any other unparseable cell.
        values = values.where(values.isna() | (values % 1 == 0))
    return values.fillna(0)


def load_players_csv(source):
    """
    Parse a CSV upload.

    Parameters
    ----------
    source : path, bytes or file-like object

    Returns LoadResult with one dict per valid row: name, university,
    category and the six raw statistics as Python int/float.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False,
                         skipinitialspace=True)
    except pd.errors.EmptyDataError:
        raise CsvFormatError("CSV file is empty")
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CsvFormatError(f"Could not parse CSV: {e}")

    df.columns = [_column_key(c) for c in df.columns]
    logger.info(f"CSV headers: {', '.join(df.columns)}; {len(df)} rows")

    result = LoadResult(rows_read=len(df))
    if df.empty:
        return result

    for col in IDENTITY_COLUMNS:
        df[col] = df[col].astype(str).str.strip() if col in df.columns else ""
    for col in STAT_FIELDS:
        source_col = df[col] if col in df.columns else pd.Series("", index=df.index)
        df[col] = _numeric(source_col, integral=col in INTEGER_STATS)

    complete = (df["name"] != "") & (df["university"] != "") & (df["category"] != "")
    result.skipped = int((~complete).sum())
    if result.skipped:
        logger.warning(f"Skipped {result.skipped} rows missing name, university or category")

    for row in df[complete].to_dict("records"):
        record = {col: row[col] for col in IDENTITY_COLUMNS}
        for col in STAT_FIELDS:
            value = float(row[col])
            integral = col in INTEGER_STATS and math.isfinite(value)
            record[col] = int(value) if integral else value
        try:
            compute_stats(PlayerStatistics.from_mapping(record))
        except InvalidStatisticsError as e:
            result.failed += 1
            logger.warning(f"Rejected CSV row for {record['name']}: {e}")
            continue
        result.records.append(record)

    logger.info(
        f"CSV processing complete: {result.rows_read} rows, "
        f"{len(result.records)} valid, {result.skipped} skipped, {result.failed} failed"
    )
    return result
