"""Turn uploaded CSV/JSON payloads into loosely typed candidate records."""

from __future__ import annotations

import csv
import json
import logging
import math
from io import StringIO
from typing import Any, Dict, List, Optional

import pandas as pd

from catalog.core.errors import ParseError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {".csv": "csv", ".json": "json"}
_MIME_FORMATS = {"text/csv": "csv", "application/json": "json", "text/json": "json"}
_NUMERIC_FIELDS = ("latitude", "longitude")


def detect_format(filename: Optional[str], mimetype: Optional[str] = None) -> Optional[str]:
    """Route by file name suffix. The declared MIME type is advisory only."""
    name = (filename or "").strip().lower()
    fmt = next((value for suffix, value in SUPPORTED_FORMATS.items() if name.endswith(suffix)), None)

    advertised = _MIME_FORMATS.get((mimetype or "").split(";")[0].strip().lower())
    if advertised and fmt and advertised != fmt:
        logger.debug("Ignoring declared type %s for %s; using suffix format %s", mimetype, filename, fmt)
    return fmt


def decode_content(content: bytes) -> str:
    text = content.decode("utf-8", errors="replace")
    # Excel exports often start with a BOM.
    return text.lstrip("\ufeff")


def _to_number(field_name: str, raw: Any) -> float:
    try:
        value = float(str(raw).strip())
    except ValueError:
        raise ParseError(f"Invalid {field_name}: {raw}") from None
    if math.isnan(value):
        raise ParseError(f"Invalid {field_name}: {raw}")
    return value


def _check_row_widths(text: str) -> None:
    """Every data row must have exactly as many fields as the header.

    pandas pads short rows with empty cells and treats a first data row that
    is one field longer as carrying an index, so widths are checked up front.
    """
    rows = (row for row in csv.reader(StringIO(text)) if row)
    header = next(rows, None)
    if header is None:
        return
    for position, row in enumerate(rows, start=1):
        if len(row) != len(header):
            problem = "Too few fields" if len(row) < len(header) else "Too many fields"
            raise ParseError(
                f"CSV parsing error: {problem}: expected {len(header)} fields "
                f"but parsed {len(row)} in row {position}"
            )


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """Parse CSV with a header row; latitude/longitude cells become floats."""
    try:
        _check_row_widths(text)
    except csv.Error as exc:
        raise ParseError(f"CSV parsing error: {exc}") from exc

    try:
        df = pd.read_csv(
            StringIO(text),
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ParseError(f"CSV parsing error: {exc}") from exc

    df.columns = [str(col).strip().lstrip("\ufeff") for col in df.columns]

    records: List[Dict[str, Any]] = []
    for row in df.to_dict(orient="records"):
        for field_name in _NUMERIC_FIELDS:
            if field_name in row:
                row[field_name] = _to_number(field_name, row[field_name])
        records.append(row)
    return records


def parse_json(text: str) -> List[Any]:
    """Parse a JSON array of records, or a single record object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"JSON parsing error: {exc}") from exc

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise ParseError(
        f"JSON parsing error: expected an object or an array of objects, got {type(data).__name__}"
    )


def parse_content(content: bytes, fmt: str) -> List[Any]:
    text = decode_content(content)
    if fmt == "csv":
        records = parse_csv(text)
    elif fmt == "json":
        records = parse_json(text)
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    logger.debug("Parsed %d candidate record(s) from %s payload", len(records), fmt)
    return records
