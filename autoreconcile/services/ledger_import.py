"""Ledger ingestion from spreadsheet exports (.xlsx / .xls / .csv)."""

from __future__ import annotations

import csv
import io
import math
import zipfile
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from pathlib import PurePath
from typing import Any

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from autoreconcile.config import settings
from autoreconcile.logger import get_logger
from autoreconcile.models import LedgerRecord
from autoreconcile.services.detection import detect_account_class

logger = get_logger(__name__)

HEADER_MARKERS = ("BusA", "Tot.rpt.pr")
BRANCH_HEADERS = ("BusA",)
NARRATIVE_HEADERS = ("ข้อความ", "Text")
BALANCE_HEADERS = ("Tot.rpt.pr", "Balance")
MISSING_BRANCH = "N/A"

Row = Sequence[Any]


class LedgerImportError(Exception):
    """Raised when a ledger file cannot be turned into ledger records."""

    pass


def _read_xlsx_rows(content: bytes) -> list[Row]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
        raise LedgerImportError(f"Unable to read workbook: {e}") from e
    try:
        sheet = workbook.worksheets[0]
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _xls_cell_value(cell: xlrd.sheet.Cell) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    # xlrd reports every number as float; branch codes such as 1001 stay integral
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def _read_xls_rows(content: bytes) -> list[Row]:
    try:
        book = xlrd.open_workbook(file_contents=content)
    except (xlrd.XLRDError, OSError, ValueError, IndexError) as e:
        raise LedgerImportError(f"Unable to read workbook: {e}") from e
    try:
        sheet = book.sheet_by_index(0)
        return [tuple(_xls_cell_value(cell) for cell in sheet.row(index)) for index in range(sheet.nrows)]
    finally:
        book.release_resources()


def _read_csv_rows(content: bytes) -> list[Row]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise LedgerImportError("CSV file must be UTF-8 encoded") from e
    return [tuple(row) for row in csv.reader(io.StringIO(text))]


def read_rows(content: bytes, filename: str) -> list[Row]:
    """Read every row of the first sheet as a tuple of cell values."""
    suffix = PurePath(filename).suffix.lower()
    if suffix == ".xlsx":
        return _read_xlsx_rows(content)
    if suffix == ".xls":
        return _read_xls_rows(content)
    if suffix == ".csv":
        return _read_csv_rows(content)
    raise LedgerImportError(f"Unsupported ledger file type: {suffix or filename}")


def _is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def find_header_row(rows: Sequence[Row], scan_rows: int) -> int:
    """Return the index of the header row, defaulting to the first row."""
    for index, row in enumerate(rows[:scan_rows]):
        if any(isinstance(cell, str) and any(marker in cell for marker in HEADER_MARKERS) for cell in row):
            return index
    return 0


def find_column(headers: Row, names: Sequence[str]) -> int | None:
    """Return the first column whose header contains one of ``names``."""
    for index, header in enumerate(headers):
        if header is None:
            continue
        label = str(header)
        if any(name in label for name in names):
            return index
    return None


def parse_balance(cell: Any) -> Decimal | None:
    """Parse a balance cell; ``None`` for blank, subtotal or text cells."""
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, (int, Decimal)):
        return Decimal(cell)
    if isinstance(cell, float):
        if math.isnan(cell) or math.isinf(cell):
            return None
        return Decimal(str(cell))
    if isinstance(cell, str):
        cleaned = cell.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            return None
        return value if value.is_finite() else None
    return None


def _cell(row: Row, index: int | None) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def build_ledger_records(rows: Sequence[Row], *, scan_rows: int | None = None) -> list[LedgerRecord]:
    """Map raw sheet rows to ledger records."""
    if not rows:
        raise LedgerImportError("Ledger file is empty")

    header_index = find_header_row(rows, scan_rows or settings.ledger_header_scan_rows)
    headers = rows[header_index]

    branch_col = find_column(headers, BRANCH_HEADERS)
    narrative_col = find_column(headers, NARRATIVE_HEADERS)
    balance_col = find_column(headers, BALANCE_HEADERS)
    if balance_col is None:
        raise LedgerImportError("Balance column (Tot.rpt.pr) not found in ledger file")

    records: list[LedgerRecord] = []
    skipped = 0
    for row_index in range(header_index + 1, len(rows)):
        row = rows[row_index]
        if not row or all(_is_blank(cell) for cell in row):
            continue

        balance = parse_balance(_cell(row, balance_col))
        if balance is None:
            # Totals and blank rows carry no numeric balance
            skipped += 1
            continue

        narrative_cell = _cell(row, narrative_col)
        narrative = "" if _is_blank(narrative_cell) else str(narrative_cell)
        branch_cell = _cell(row, branch_col)
        branch = MISSING_BRANCH if _is_blank(branch_cell) else str(branch_cell)

        records.append(
            LedgerRecord(
                id=f"ledger-{row_index}",
                branch_code=branch,
                narrative=narrative,
                balance=balance,
                account_class=detect_account_class(narrative),
            )
        )

    logger.info(
        "Ledger rows mapped",
        header_row=header_index,
        record_count=len(records),
        skipped_rows=skipped,
        has_narrative_column=narrative_col is not None,
        has_branch_column=branch_col is not None,
    )
    return records


def parse_ledger_file(content: bytes, filename: str) -> list[LedgerRecord]:
    """Ingest a ledger export; either every usable row or an error."""
    logger.info("Parsing ledger file", filename=filename, size_bytes=len(content))
    rows = read_rows(content, filename)
    return build_ledger_records(rows)
