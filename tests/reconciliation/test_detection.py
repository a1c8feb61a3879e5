"""Narrative detection helper tests."""

import pytest

from autoreconcile.models import AccountClass, BankCode
from autoreconcile.services.detection import (
    account_numbers_match,
    detect_account_class,
    detect_bank_name,
    extract_embedded_account,
    normalize_account_number,
)


class TestDetectBankName:
    @pytest.mark.parametrize(
        "text",
        [
            "Payment via KBANK Kasikorn branch",
            "payment via kbank kasikorn branch",
            "PAYMENT VIA KASIKORN",
        ],
    )
    def test_case_insensitive(self, text):
        assert detect_bank_name(text) is BankCode.KBANK

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Siam Commercial Bank S/A", BankCode.SCB),
            ("Bangkok Bank C/A", BankCode.BBL),
            ("krung thai", BankCode.KTB),
            ("TMB savings", BankCode.TTB),
            ("Krungsri fixed", BankCode.BAY),
            ("GSB deposit", BankCode.GSB),
        ],
    )
    def test_aliases(self, text, expected):
        assert detect_bank_name(text) is expected

    def test_first_rule_wins(self):
        assert detect_bank_name("SCB transfer to BBL") is BankCode.SCB
        assert detect_bank_name("BBL transfer to SCB") is BankCode.SCB

    def test_unknown(self):
        assert detect_bank_name("Petty cash") is BankCode.UNKNOWN
        assert detect_bank_name("") is BankCode.UNKNOWN


class TestAccountNumbers:
    def test_normalize_strips_separators(self):
        assert normalize_account_number("123-456 789") == normalize_account_number("123456789") == "123456789"

    def test_substring_identity(self):
        assert account_numbers_match("456789", "123456789")
        assert account_numbers_match("456-789", "123-456-789")

    def test_non_contained_candidate(self):
        assert not account_numbers_match("999", "123456789")

    def test_empty_candidate_is_never_identical(self):
        assert not account_numbers_match("", "123456789")
        assert not account_numbers_match("--", "123456789")


class TestExtractEmbeddedAccount:
    def test_dashed_account(self):
        assert extract_embedded_account("KBANK S/A 123-4-56789-0 Silom") == "1234567890"

    def test_spaced_account(self):
        assert extract_embedded_account("SCB 123 456 7890") == "1234567890"

    def test_first_run_wins(self):
        assert extract_embedded_account("1111111111 and 2222222222") == "1111111111"

    def test_short_digit_runs_ignored(self):
        assert extract_embedded_account("Branch 1001 fee 250") == ""

    def test_minimum_length(self):
        assert extract_embedded_account("ref 123456789") == ""
        assert extract_embedded_account("ref 1234567890") == "1234567890"

    def test_thai_digits_ignored(self):
        assert extract_embedded_account("บัญชี ๑๒๓๔๕๖๗๘๙๐") == ""

    def test_non_breaking_space_separators(self):
        assert extract_embedded_account("KBANK S/A 123\u00a0456\u00a07890") == "1234567890"


class TestDetectAccountClass:
    @pytest.mark.parametrize(
        ("narrative", "expected"),
        [
            ("KBANK C/A 123", AccountClass.CURRENT_ACCOUNT),
            ("current account", AccountClass.CURRENT_ACCOUNT),
            ("กระแสรายวัน กสิกร", AccountClass.CURRENT_ACCOUNT),
            ("SCB S/A", AccountClass.SAVINGS_ACCOUNT),
            ("Savings", AccountClass.SAVINGS_ACCOUNT),
            ("ออมทรัพย์", AccountClass.SAVINGS_ACCOUNT),
            ("Fixed 12M", AccountClass.FIXED_DEPOSIT),
            ("ฝากประจำ", AccountClass.FIXED_DEPOSIT),
            ("Petty cash", AccountClass.UNKNOWN),
        ],
    )
    def test_classification(self, narrative, expected):
        assert detect_account_class(narrative) is expected
