"""
Delimited-text parsing for the physical and financial progress feeds.

The parser never raises on malformed content: every problem is collected as a
ParseIssue and parsing continues with the next row. Cells are returned as the
strings found in the file; numeric interpretation happens downstream.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from highwayexec.config import MAX_CSV_SIZE_MB

logger = logging.getLogger(__name__)

CsvSource = Union[bytes, str, Path, Any]


@dataclass
class ParseIssue:
    row: int  # 0-based data row index, -1 when the issue is not tied to a row
    message: str
    code: Optional[str] = None


@dataclass
class ParseResult:
    rows: List[Dict[str, str]] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    errors: List[ParseIssue] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def frame(self, limit: Optional[int] = None) -> pd.DataFrame:
        rows = self.rows if limit is None else self.rows[:limit]
        return pd.DataFrame(rows, columns=self.headers)


def _is_blank_line(record: List[str]) -> bool:
    return not record or (len(record) == 1 and not record[0].strip())


def _normalize_headers(raw: List[str], errors: List[ParseIssue]) -> List[str]:
    headers: List[str] = []
    seen: Dict[str, int] = {}
    for idx, cell in enumerate(raw):
        name = cell.strip()
        if not name:
            name = f"Column{idx + 1}"
            errors.append(ParseIssue(-1, f"Header {idx + 1} is blank; using '{name}'", "InvalidHeader"))
        if name in seen:
            seen[name] += 1
            renamed = f"{name}_{seen[name]}"
            errors.append(ParseIssue(-1, f"Duplicate header '{name}' renamed to '{renamed}'", "InvalidHeader"))
            name = renamed
        else:
            seen[name] = 0
        headers.append(name)
    return headers


class _LineTap:
    """Line iterator for csv.reader that remembers the raw text of the current record."""

    def __init__(self, text: str):
        self._lines = io.StringIO(text, newline="")
        self.consumed: List[str] = []

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        self.consumed.append(line)
        return line

    def take(self) -> str:
        raw = "".join(self.consumed)
        self.consumed.clear()
        return raw


def _quote_fault(raw: str, delimiter: str, quotechar: str = '"') -> Optional[str]:
    """Classify quoting problems in one raw record the way the tokenizer reads it."""
    state = "start"
    invalid = False
    for ch in raw.rstrip("\r\n"):
        if state == "start":
            if ch == quotechar:
                state = "quoted"
            elif ch != delimiter:
                state = "field"
        elif state == "field":
            if ch == delimiter:
                state = "start"
        elif state == "quoted":
            if ch == quotechar:
                state = "closed"
        elif state == "closed":
            if ch == quotechar:
                state = "quoted"
            elif ch == delimiter:
                state = "start"
            else:
                # stray text after a closing quote is kept as part of the cell
                invalid = True
                state = "field"
    if state == "quoted":
        return "MissingQuotes"
    return "InvalidQuotes" if invalid else None


def parse_csv_string(text: str, delimiter: str = ",") -> ParseResult:
    """Parse delimited text with a mandatory header row."""
    result = ParseResult()
    if text.startswith("\ufeff"):
        text = text[1:]

    tap = _LineTap(text)
    reader = csv.reader(tap, delimiter=delimiter)
    while True:
        tap.take()
        try:
            record = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            result.errors.append(ParseIssue(-1, f"Line {reader.line_num}: {exc}", "MissingQuotes"))
            continue
        if _is_blank_line(record):
            continue

        row_idx = len(result.rows) if result.headers else -1
        fault = _quote_fault(tap.take(), delimiter)
        if fault == "MissingQuotes":
            # An unterminated quote swallows the rest of the file; nothing usable remains.
            result.errors.append(
                ParseIssue(-1, f"Line {reader.line_num}: quoted field is never closed", "MissingQuotes")
            )
            continue
        if fault == "InvalidQuotes":
            result.errors.append(
                ParseIssue(row_idx, f"Line {reader.line_num}: unexpected text after a closing quote", "InvalidQuotes")
            )

        if not result.headers:
            result.headers = _normalize_headers(record, result.errors)
            continue

        width = len(result.headers)
        if len(record) < width:
            result.errors.append(
                ParseIssue(
                    row_idx,
                    f"Too few fields: expected {width} fields but parsed {len(record)}",
                    "TooFewFields",
                )
            )
            record = record + [""] * (width - len(record))
        elif len(record) > width:
            result.errors.append(
                ParseIssue(
                    row_idx,
                    f"Too many fields: expected {width} fields but parsed {len(record)}",
                    "TooManyFields",
                )
            )
            record = record[:width]
        result.rows.append(dict(zip(result.headers, record)))

    if not result.headers:
        result.errors.append(ParseIssue(-1, "No header row found", "EmptyFile"))

    logger.info(
        "Parsed %d rows, %d columns, %d issues",
        len(result.rows),
        len(result.headers),
        len(result.errors),
    )
    return result


def _read_bytes(source: CsvSource) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    # Streamlit UploadedFile and other file-likes
    if hasattr(source, "getvalue"):
        return source.getvalue()
    data = source.read()
    return data.encode("utf-8") if isinstance(data, str) else data


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("Feed is not valid UTF-8; decoding as latin-1")
        return data.decode("latin-1")


def parse_csv_file(
    source: CsvSource,
    max_size_mb: float = MAX_CSV_SIZE_MB,
    delimiter: str = ",",
) -> ParseResult:
    """Read a CSV from bytes, a path or an uploaded file and parse it."""
    data = _read_bytes(source)
    size_mb = len(data) / (1024 * 1024)
    if size_mb > max_size_mb:
        logger.warning("Rejected %.1f MB upload (limit %s MB)", size_mb, max_size_mb)
        return ParseResult(
            errors=[ParseIssue(-1, f"File is {size_mb:.1f} MB; the limit is {max_size_mb} MB", "FileTooLarge")]
        )
    return parse_csv_string(_decode(data), delimiter=delimiter)
