"""
Tabular file decoder for shop exports.

Turns an uploaded .xlsx/.xls/.csv into {sheet name: [row dict, ...]},
where each row maps the header text to the raw cell value. Nothing is
renamed or coerced here; header resolution and value cleaning happen in
the core.

The whole file is decoded before anything is returned, so a broken file
fails here, before the caller has touched the catalog or the ledger.
"""

import logging
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import DecodeError

logger = logging.getLogger(__name__)

Sheets = dict[str, list[dict[str, Any]]]

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
CSV_SUFFIXES = {".csv", ".txt"}

_DECODE_ERRORS = (
    OSError,
    ValueError,
    zipfile.BadZipFile,
    InvalidFileException,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
)


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as header -> value dicts; blank cells become None, blank rows are dropped."""
    df = df.dropna(how="all")
    df.columns = [str(c).strip() for c in df.columns]
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


class SpreadsheetLoader:
    """
    Reads stock and order exports into row dicts.

    Usage:
        loader = SpreadsheetLoader()
        sheets = loader.load_sheets("orders_march.xlsx")
        rows = loader.load_rows("stock.xlsx")  # first sheet only
    """

    def __init__(self, csv_separator: str | None = None, encoding: str = "utf-8-sig"):
        """
        Args:
            csv_separator: Fixed CSV separator; None sniffs it (',' or ';' exports both occur)
            encoding: CSV text encoding
        """
        self.csv_separator = csv_separator
        self.encoding = encoding

    def load_sheets(self, source: Path | str | BinaryIO, suffix: str | None = None) -> Sheets:
        """
        Decode every sheet of a workbook (a CSV is a single sheet named after the file).

        Args:
            source: Path or open binary file
            suffix: File type when source is a file object without a name, e.g. ".xlsx"
        """
        suffix = (suffix or Path(str(getattr(source, "name", source))).suffix).lower()

        try:
            if suffix in CSV_SUFFIXES:
                df = pd.read_csv(
                    source,
                    sep=self.csv_separator,
                    engine="python",
                    dtype=object,
                    encoding=self.encoding,
                )
                name = Path(str(getattr(source, "name", "sheet"))).stem or "sheet"
                sheets = {name: frame_to_rows(df)}
            elif suffix in EXCEL_SUFFIXES or not suffix:
                frames = pd.read_excel(source, sheet_name=None, dtype=object)
                sheets = {str(name): frame_to_rows(df) for name, df in frames.items()}
            else:
                raise DecodeError(f"unsupported file type {suffix!r}")
        except _DECODE_ERRORS as exc:
            logger.error("Cannot decode %s: %s", source, exc)
            raise DecodeError(f"file is not a readable table: {exc}") from exc

        if not sheets:
            raise DecodeError("no sheet found")

        logger.debug(
            "Decoded %s: %s",
            source,
            ", ".join(f"{name} ({len(rows)} rows)" for name, rows in sheets.items()),
        )
        return sheets

    def load_rows(self, source: Path | str | BinaryIO, suffix: str | None = None) -> list[dict[str, Any]]:
        """Rows of the first sheet, which is where stock exports keep their items."""
        sheets = self.load_sheets(source, suffix)
        return next(iter(sheets.values()))
