"""CSV reading and writing over pandas DataFrames."""

import io
from typing import Any, Iterable, Sequence

import pandas as pd

from equine_center.errors import ImportFormatError


def read_csv_rows(text: str, required_columns: Sequence[str]) -> list[dict[str, str]]:
    """
    Parse CSV text with a header row into string-valued row dicts.

    Every cell is kept as text; empty cells become ``""``.

    Raises:
        ImportFormatError: unparseable text, no data rows or missing columns
    """
    if not text or not text.strip():
        raise ImportFormatError("CSV file is empty")

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ImportFormatError("Failed to parse CSV file") from exc

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in required_columns if c not in df.columns]
    if missing:
        raise ImportFormatError(
            f"Missing required columns: {', '.join(missing)}",
            details={"missing": missing},
        )
    if df.empty:
        raise ImportFormatError("CSV file is empty")

    df = df.apply(lambda col: col.str.strip())
    return df.to_dict(orient="records")


def write_csv_rows(rows: Iterable[dict[str, Any]], columns: Sequence[str]) -> str:
    """Render rows as CSV text with a fixed column order."""
    df = pd.DataFrame(list(rows), columns=list(columns), dtype=object)
    df = df.where(df.notna(), "")
    return df.to_csv(index=False, lineterminator="\n")


def optional_text(value: str | None) -> str | None:
    """Empty cells read back as None."""
    return value if value else None
