"""Data ingestion for document elements.

Reads tabular data files into the shapes the content elements expect:
- Table cells from CSV (UTF-8 comma or UTF-16 LE tab) or Excel (.xlsx/.xlsm)
- Chart values (label / value / optional color columns) from the same formats
"""

import math
from pathlib import Path

import pandas as pd

from texdoc.schema.models import GraphValue


EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


# ---------------------------------------------------------------------------
# Encoding detection and file reading
# ---------------------------------------------------------------------------

def detect_encoding(path):
    """Detect whether a file is UTF-16 LE (with BOM) or UTF-8.

    Returns (encoding, delimiter) tuple.
    """
    with open(path, "rb") as f:
        raw = f.read(4)
    if raw[:2] == b"\xff\xfe":
        return "utf-16", "\t"
    return "utf-8", ","


def clean_columns(df):
    """Strip whitespace from string column names."""
    df.columns = [c.strip() if isinstance(c, str) else c for c in df.columns]
    return df


def read_frame(path, header=True, sheet=None):
    """Read a CSV or Excel file into a DataFrame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    header_row = 0 if header else None
    if path.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=sheet if sheet is not None else 0,
                           header=header_row)
    else:
        encoding, sep = detect_encoding(path)
        df = pd.read_csv(path, encoding=encoding, sep=sep, header=header_row)
    return clean_columns(df)


# ---------------------------------------------------------------------------
# Cell formatting
# ---------------------------------------------------------------------------

def format_cell(value):
    """Render a cell value as table text.

    Examples:
        NaN -> ""
        12.0 -> "12"
        3.5 -> "3.5"
        "abc" -> "abc"
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(float(value))
    if pd.isna(value):
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def frame_to_cells(df, header=True):
    """Convert a DataFrame into a rectangular grid of strings.

    When ``header`` is true the column names form the first row.
    """
    rows = []
    if header:
        rows.append(tuple(format_cell(c) for c in df.columns))
    for record in df.itertuples(index=False, name=None):
        rows.append(tuple(format_cell(v) for v in record))
    return tuple(rows)


def read_table_cells(path, header=True, sheet=None):
    """Read a data file as table cells, header row first."""
    df = read_frame(path, header=header, sheet=sheet)
    return frame_to_cells(df, header=header)


def read_graph_values(path, label_column, value_column, color_column=None, sheet=None):
    """Read chart data points from a data file.

    Rows with a missing label or value are skipped. Values are truncated
    to integers.
    """
    df = read_frame(path, sheet=sheet)
    for col in (label_column, value_column, color_column):
        if col is not None and col not in df.columns:
            raise KeyError(f"Column {col!r} not found in {path}")

    values = []
    for _, row in df.iterrows():
        label = row[label_column]
        value = row[value_column]
        if pd.isna(label) or pd.isna(value):
            continue
        color = None
        if color_column is not None and not pd.isna(row[color_column]):
            color = str(row[color_column]).strip()
        values.append(GraphValue(label=format_cell(label), value=int(float(value)),
                                 color=color))
    return tuple(values)
