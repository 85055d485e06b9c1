"""
Data source boundary for the order table.

Everything that touches the raw file lives here: reading the CSV, mapping
source headers onto canonical column names, checking that the required
columns exist, and parsing locale-formatted dates and numbers. The reporting
engine only ever sees a prepared frame.
"""

import os
from pathlib import Path

import pandas as pd

from exceptions import DataSourceError, MissingColumnsError
from logging_config import get_logger

logger = get_logger(__name__)

ORDER_COLUMNS = [
    "Order_ID",
    "Order_Date",
    "Ship_Date",
    "Customer_ID",
    "Customer_Name",
    "Category",
    "Sub_Category",
    "State",
    "Sales",
    "Profit",
    "Discount",
    "Quantity",
]

DATE_COLUMNS = ["Order_Date", "Ship_Date"]
NUMERIC_COLUMNS = ["Sales", "Profit", "Discount", "Quantity"]

UNPARSEABLE_DATES_ATTR = "unparseable_dates"


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = df.columns.str.strip()
    col_map = {
        "Order ID": "Order_ID",
        "Order Date": "Order_Date",
        "Ship Date": "Ship_Date",
        "Customer ID": "Customer_ID",
        "Customer Name": "Customer_Name",
        "Sub-Category": "Sub_Category",
        "Sub Category": "Sub_Category",
    }
    for old, new in col_map.items():
        if old in df.columns and new not in df.columns:
            df = df.rename(columns={old: new})
    return df


normalize_columns = _normalize_columns


def validate_columns(df: pd.DataFrame, path: str | None = None) -> None:
    """Raise MissingColumnsError listing every canonical column the frame lacks."""
    missing = [c for c in ORDER_COLUMNS if c not in df.columns]
    if missing:
        logger.error("Order table is missing required column(s): %s", missing)
        raise MissingColumnsError(missing, path=path)


def _is_blank(series: pd.Series) -> pd.Series:
    return series.isna() | (series.astype(str).str.strip() == "")


def parse_dates(
    df: pd.DataFrame,
    dayfirst: bool = True,
    date_format: str | None = None,
) -> pd.DataFrame:
    """
    Convert the order and ship date columns to datetimes.

    Values that cannot be parsed become NaT so they drop out of date-based
    reports. The number of such values per column is logged and kept in
    ``df.attrs["unparseable_dates"]``.
    """
    df = df.copy()
    unparseable: dict[str, int] = {}
    for col in DATE_COLUMNS:
        if col not in df.columns:
            continue
        raw = df[col]
        if pd.api.types.is_datetime64_any_dtype(raw):
            unparseable[col] = 0
            continue
        if date_format:
            parsed = pd.to_datetime(raw, format=date_format, errors="coerce")
        else:
            parsed = pd.to_datetime(raw, format="mixed", dayfirst=dayfirst, errors="coerce")
        bad = int((parsed.isna() & ~_is_blank(raw)).sum())
        if bad:
            logger.warning("%d unparseable value(s) in `%s` excluded from date-based reports", bad, col)
        unparseable[col] = bad
        df[col] = parsed
    df.attrs[UNPARSEABLE_DATES_ATTR] = unparseable
    return df


def coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def unparseable_date_counts(df: pd.DataFrame) -> dict[str, int]:
    return dict(df.attrs.get(UNPARSEABLE_DATES_ATTR, {}))


def prepare_orders(
    df: pd.DataFrame,
    dayfirst: bool = True,
    date_format: str | None = None,
    path: str | None = None,
) -> pd.DataFrame:
    """Normalize, validate and parse a raw order table."""
    df = _normalize_columns(df)
    validate_columns(df, path=path)
    df = parse_dates(df, dayfirst=dayfirst, date_format=date_format)
    unparseable = unparseable_date_counts(df)
    df = coerce_numeric(df)
    df.attrs[UNPARSEABLE_DATES_ATTR] = unparseable
    return df


def load_orders(
    path: str | Path,
    dayfirst: bool = True,
    date_format: str | None = None,
) -> pd.DataFrame:
    path = str(path)
    if not os.path.isfile(path):
        raise DataSourceError("file not found", path=path)
    try:
        raw = pd.read_csv(path, encoding_errors="replace")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataSourceError("could not parse CSV", path=path, original_error=e) from e
    logger.info("Loaded %s (%d rows)", os.path.basename(path), len(raw))
    return prepare_orders(raw, dayfirst=dayfirst, date_format=date_format, path=path)


def write_cleaned_orders(
    df: pd.DataFrame,
    output_path: str | Path,
    source_path: str | Path | None = None,
) -> str:
    """
    Write a prepared order table with ISO (YYYY-MM-DD) dates.

    Unparseable dates are written as empty cells. Refuses to overwrite the
    source file.
    """
    output_path = Path(output_path)
    if source_path is not None and output_path.resolve() == Path(source_path).resolve():
        raise DataSourceError("refusing to overwrite the source file", path=str(source_path))

    out = df.copy()
    for col in DATE_COLUMNS:
        if col in out.columns and pd.api.types.is_datetime64_any_dtype(out[col]):
            out[col] = out[col].dt.strftime("%Y-%m-%d")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    out.to_csv(output_path, index=False)
    logger.info("Wrote cleaned order table to %s (%d rows)", output_path, len(out))
    return str(output_path)
