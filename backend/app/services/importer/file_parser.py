"""
Read uploaded CSV / Excel files into Rows.

pandas does the actual parsing; this module decides which reader to use,
forces every cell to text (so "0012" or "3.1만" reach the row processor
untouched), and turns reader failures into request-level import errors.
"""
import io
import logging
from dataclasses import dataclass
from typing import List

import pandas as pd

from app.core.config import settings
from app.exceptions import ImportFileError
from app.services.importer.row import Row

logger = logging.getLogger(__name__)

# Excel-exported Korean CSVs are frequently CP949 rather than UTF-8
CSV_ENCODINGS = ("utf-8-sig", "cp949")


@dataclass(frozen=True)
class ParsedSheet:
    file_name: str
    headers: List[str]
    rows: List[Row]

    @property
    def total_rows(self) -> int:
        return len(self.rows)


def file_extension(filename: str) -> str:
    name = (filename or "").strip().lower()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1]


def _read_csv(content: bytes) -> pd.DataFrame:
    last_error = None
    for encoding in CSV_ENCODINGS:
        try:
            return pd.read_csv(
                io.BytesIO(content),
                encoding=encoding,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except UnicodeDecodeError as e:
            logger.debug(f"CSV is not {encoding}, trying next encoding")
            last_error = e
    raise ImportFileError("Could not decode CSV file", details={"error": str(last_error)})


def _read_excel(content: bytes) -> pd.DataFrame:
    # First sheet only, header on the first row
    return pd.read_excel(
        io.BytesIO(content),
        sheet_name=0,
        dtype=str,
        keep_default_na=False,
    )


def parse_upload(content: bytes, filename: str) -> ParsedSheet:
    """
    Parse an uploaded spreadsheet.

    Args:
        content: Raw file bytes
        filename: Original file name; its extension selects the reader

    Returns:
        ParsedSheet with the header row and one Row per non-blank data row

    Raises:
        ImportFileError: Unsupported extension, oversize, unreadable or empty file
    """
    extension = file_extension(filename)
    if extension not in settings.IMPORT_ALLOWED_EXTENSIONS:
        raise ImportFileError("Unsupported file format", details={"extension": extension})

    max_bytes = settings.MAX_IMPORT_FILE_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise ImportFileError(f"File exceeds {settings.MAX_IMPORT_FILE_SIZE_MB} MB limit")

    if not content:
        raise ImportFileError("File is empty")

    try:
        if extension == "csv":
            frame = _read_csv(content)
        else:
            frame = _read_excel(content)
    except ImportFileError:
        raise
    except pd.errors.EmptyDataError as e:
        raise ImportFileError("File has no header row") from e
    except Exception as e:
        logger.warning(f"Failed to read {filename}: {e}")
        raise ImportFileError("Could not read file", details={"error": str(e)}) from e

    headers = [str(column) for column in frame.columns]
    if not headers:
        raise ImportFileError("File has no header row")

    rows = []
    for record in frame.to_dict(orient="records"):
        row = Row(record)
        if not row.is_blank():
            rows.append(row)

    if not rows:
        raise ImportFileError("File contains no data rows")

    logger.info(f"Parsed {filename}: {len(headers)} columns, {len(rows)} rows")
    return ParsedSheet(file_name=filename, headers=headers, rows=rows)
