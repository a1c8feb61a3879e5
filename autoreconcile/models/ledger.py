"""Ledger records imported from the accounting system export."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class AccountClass(str, Enum):
    """Bank account class inferred from the ledger narrative."""

    CURRENT_ACCOUNT = "C/A"
    SAVINGS_ACCOUNT = "S/A"
    FIXED_DEPOSIT = "F/D"
    UNKNOWN = "-"


@dataclass(frozen=True)
class LedgerRecord:
    """One account-balance line of the ledger export."""

    id: str
    branch_code: str
    narrative: str
    balance: Decimal
    account_class: AccountClass = AccountClass.UNKNOWN
