"""Bank statement records produced by document extraction."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class BankCode(str, Enum):
    """Canonical institution codes recognised in ledger narratives."""

    KBANK = "KBANK"
    SCB = "SCB"
    BBL = "BBL"
    KTB = "KTB"
    TTB = "TTB"
    BAY = "BAY"
    GSB = "GSB"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class StatementRecord:
    """Summary of one externally issued bank statement."""

    source_name: str
    account_number: str
    ending_balance: Decimal
    statement_date: str
    bank_name: str | None = None
