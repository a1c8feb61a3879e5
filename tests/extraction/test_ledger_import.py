"""Ledger spreadsheet ingestion tests."""

from decimal import Decimal
from io import BytesIO
from unittest.mock import MagicMock, patch

import pytest
from openpyxl import Workbook
from xlrd import XL_CELL_EMPTY, XL_CELL_ERROR, XL_CELL_NUMBER, XL_CELL_TEXT
from xlrd.sheet import Cell

from autoreconcile.models import AccountClass
from autoreconcile.services.ledger_import import (
    LedgerImportError,
    build_ledger_records,
    find_header_row,
    parse_balance,
    parse_ledger_file,
    read_rows,
)

HEADER = ["BusA", "Account", "ข้อความ", "Tot.rpt.pr"]


def _text(value: str) -> Cell:
    return Cell(XL_CELL_TEXT, value)


def _number(value: float) -> Cell:
    return Cell(XL_CELL_NUMBER, value)


def _xls_book(rows: list[list[Cell]]) -> MagicMock:
    sheet = MagicMock()
    sheet.nrows = len(rows)
    sheet.row.side_effect = lambda index: rows[index]
    book = MagicMock()
    book.sheet_by_index.return_value = sheet
    return book


def _xlsx_bytes(rows: list[list]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class TestParseLedgerXlsx:
    def test_maps_rows_after_preamble(self):
        content = _xlsx_bytes(
            [
                ["Company XYZ"],
                ["Balance report as of 31.01.2025"],
                [],
                HEADER,
                ["1001", "1110100", "KBANK S/A 123-4-56789-0", 1500.5],
                ["1002", "1110200", "SCB C/A 234-5-67890-1", 2000],
            ]
        )

        records = parse_ledger_file(content, "ledger.xlsx")

        assert [record.branch_code for record in records] == ["1001", "1002"]
        assert records[0].narrative == "KBANK S/A 123-4-56789-0"
        assert records[0].balance == Decimal("1500.5")
        assert records[1].balance == Decimal("2000")
        assert records[0].account_class is AccountClass.SAVINGS_ACCOUNT
        assert records[1].account_class is AccountClass.CURRENT_ACCOUNT

    def test_ids_follow_row_position(self):
        content = _xlsx_bytes([HEADER, ["1001", "", "a", 1], ["1002", "", "b", 2]])

        records = parse_ledger_file(content, "ledger.xlsx")

        assert [record.id for record in records] == ["ledger-1", "ledger-2"]

    def test_subtotal_and_blank_rows_skipped(self):
        content = _xlsx_bytes(
            [
                HEADER,
                ["1001", "1110100", "KBANK S/A 123-4-56789-0", 100],
                [None, None, None, None],
                ["", "", "Total", "*"],
                ["1002", "1110200", "SCB C/A 234-5-67890-1", "1,234.50"],
            ]
        )

        records = parse_ledger_file(content, "ledger.xlsx")

        assert len(records) == 2
        assert records[1].balance == Decimal("1234.50")

    def test_missing_branch_defaults(self):
        content = _xlsx_bytes([HEADER, [None, "1110100", "Cash", 5]])

        [record] = parse_ledger_file(content, "ledger.xlsx")

        assert record.branch_code == "N/A"
        assert record.account_class is AccountClass.UNKNOWN

    def test_missing_balance_column(self):
        content = _xlsx_bytes([["BusA", "Text"], ["1001", "Cash"]])

        with pytest.raises(LedgerImportError, match="Balance column"):
            parse_ledger_file(content, "ledger.xlsx")

    def test_corrupt_workbook(self):
        with pytest.raises(LedgerImportError, match="Unable to read workbook"):
            parse_ledger_file(b"not a zip file", "ledger.xlsx")


class TestParseLedgerXls:
    def test_maps_legacy_workbook_rows(self):
        book = _xls_book(
            [
                [_text("Balance report"), Cell(XL_CELL_EMPTY, ""), Cell(XL_CELL_EMPTY, ""), Cell(XL_CELL_EMPTY, "")],
                [_text(header) for header in HEADER],
                [_number(1001.0), _text("1110100"), _text("KBANK S/A 123-4-56789-0"), _number(1500.5)],
                [_number(1002.0), _text("1110200"), _text("SCB C/A 234-5-67890-1"), _number(2000.0)],
            ]
        )

        with patch("autoreconcile.services.ledger_import.xlrd.open_workbook", return_value=book) as open_workbook:
            records = parse_ledger_file(b"legacy workbook bytes", "LEDGER.XLS")

        open_workbook.assert_called_once_with(file_contents=b"legacy workbook bytes")
        book.sheet_by_index.assert_called_once_with(0)
        book.release_resources.assert_called_once()
        assert [record.id for record in records] == ["ledger-2", "ledger-3"]
        assert [record.branch_code for record in records] == ["1001", "1002"]
        assert records[0].balance == Decimal("1500.5")
        assert records[1].balance == Decimal("2000")
        assert records[0].account_class is AccountClass.SAVINGS_ACCOUNT

    def test_error_and_empty_cells_skipped(self):
        book = _xls_book(
            [
                [_text(header) for header in HEADER],
                [Cell(XL_CELL_EMPTY, ""), _text(""), _text("Cash"), _number(10.0)],
                [_number(1001.0), _text(""), _text("#N/A total"), Cell(XL_CELL_ERROR, 42)],
            ]
        )

        with patch("autoreconcile.services.ledger_import.xlrd.open_workbook", return_value=book):
            records = parse_ledger_file(b"legacy workbook bytes", "ledger.xls")

        assert len(records) == 1
        assert records[0].branch_code == "N/A"
        assert records[0].balance == Decimal("10")

    def test_corrupt_workbook(self):
        with pytest.raises(LedgerImportError, match="Unable to read workbook"):
            parse_ledger_file(b"not an excel workbook", "ledger.xls")


class TestParseLedgerCsv:
    def test_english_headers(self):
        content = "BusA,Text,Balance\n1001,BBL S/A 300-0-00000-3,42.10\n".encode()

        [record] = parse_ledger_file(content, "ledger.csv")

        assert record.narrative == "BBL S/A 300-0-00000-3"
        assert record.balance == Decimal("42.10")

    def test_utf8_bom_and_thai_header(self):
        content = "BusA,ข้อความ,Tot.rpt.pr\n1001,ออมทรัพย์ KBANK,10\n".encode("utf-8-sig")

        [record] = parse_ledger_file(content, "ledger.csv")

        assert record.narrative == "ออมทรัพย์ KBANK"
        assert record.account_class is AccountClass.SAVINGS_ACCOUNT

    def test_non_utf8(self):
        with pytest.raises(LedgerImportError, match="UTF-8"):
            parse_ledger_file("BusA,Balance\n".encode("utf-16"), "ledger.csv")


def test_unsupported_extension():
    with pytest.raises(LedgerImportError, match="Unsupported ledger file type"):
        read_rows(b"", "ledger.pdf")


def test_empty_rows():
    with pytest.raises(LedgerImportError, match="empty"):
        build_ledger_records([])


def test_header_outside_scan_window_falls_back_to_first_row():
    rows = [("Preamble",), ("More",), ("BusA", "Balance"), ("1001", "5")]

    assert find_header_row(rows, scan_rows=2) == 0
    assert find_header_row(rows, scan_rows=5) == 2


@pytest.mark.parametrize(
    ("cell", "expected"),
    [
        (12, Decimal("12")),
        (12.25, Decimal("12.25")),
        (Decimal("3.10"), Decimal("3.10")),
        ("-1,000.00", Decimal("-1000.00")),
        ("  ", None),
        ("Total", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_parse_balance(cell, expected):
    assert parse_balance(cell) == expected
