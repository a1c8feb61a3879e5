"""Text normalization and detection heuristics for ledger narratives."""

from __future__ import annotations

import re

from autoreconcile.models import AccountClass, BankCode

# Order matters: the first rule with a matching alias wins ("SCB" is checked
# before "BBL", and so on).
BANK_NAME_RULES: tuple[tuple[tuple[str, ...], BankCode], ...] = (
    (("KBANK", "KASIKORN"), BankCode.KBANK),
    (("SCB", "SIAM COMMERCIAL"), BankCode.SCB),
    (("BBL", "BANGKOK BANK"), BankCode.BBL),
    (("KTB", "KRUNG THAI"), BankCode.KTB),
    (("TMB", "TTB"), BankCode.TTB),
    (("BAY", "KRUNGSRI"), BankCode.BAY),
    (("GSB",), BankCode.GSB),
)

ACCOUNT_CLASS_RULES: tuple[tuple[tuple[str, ...], AccountClass], ...] = (
    (("C/A", "CURRENT", "กระแสรายวัน"), AccountClass.CURRENT_ACCOUNT),
    (("S/A", "SAVING", "ออมทรัพย์"), AccountClass.SAVINGS_ACCOUNT),
    (("FIXED", "ฝากประจำ"), AccountClass.FIXED_DEPOSIT),
)

# An ASCII digit, eight or more ASCII digits/dashes/whitespace (NBSP included), then an ASCII digit.
EMBEDDED_ACCOUNT_PATTERN = re.compile(r"[0-9][0-9\-\s]{8,}[0-9]")
_NON_DIGIT = re.compile(r"[^0-9]")


def detect_bank_name(text: str) -> BankCode:
    """Return the canonical bank code mentioned in ``text``."""
    upper_text = text.upper()
    for aliases, code in BANK_NAME_RULES:
        if any(alias in upper_text for alias in aliases):
            return code
    return BankCode.UNKNOWN


def normalize_account_number(value: str) -> str:
    """Strip every non-digit character from an account identifier."""
    return _NON_DIGIT.sub("", value)


def account_numbers_match(candidate: str, account_number: str) -> bool:
    """Return True if ``candidate`` identifies the same account as ``account_number``.

    Ledger narratives often carry a truncated account number, so the
    normalized candidate only has to appear inside the normalized statement
    account number.
    """
    normalized_candidate = normalize_account_number(candidate)
    if not normalized_candidate:
        return False
    return normalized_candidate in normalize_account_number(account_number)


def extract_embedded_account(narrative: str) -> str:
    """Return the first account-like digit run in ``narrative``, normalized."""
    match = EMBEDDED_ACCOUNT_PATTERN.search(narrative)
    if not match:
        return ""
    return normalize_account_number(match.group(0))


def detect_account_class(narrative: str) -> AccountClass:
    """Classify a narrative as current, savings or fixed-deposit account."""
    upper_text = narrative.upper()
    for keywords, account_class in ACCOUNT_CLASS_RULES:
        if any(keyword in upper_text for keyword in keywords):
            return account_class
    return AccountClass.UNKNOWN
