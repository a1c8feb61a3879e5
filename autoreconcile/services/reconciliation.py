"""Reconciliation matching engine."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from autoreconcile.models import (
    AccountClass,
    BankCode,
    LedgerRecord,
    ReconciliationOutcome,
    ReconciliationStatus,
    StatementRecord,
)
from autoreconcile.services.detection import (
    account_numbers_match,
    detect_bank_name,
    extract_embedded_account,
)

MATCH_TOLERANCE = Decimal("0.01")
CENTS = Decimal("0.01")
NO_BRANCH = "N/A"


def round_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to two decimal places."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def find_statement_match(
    candidate: str,
    statements: Sequence[StatementRecord],
    consumed: set[int],
) -> int | None:
    """Return the index of the first unconsumed statement matching ``candidate``.

    This is a first-match scan in input order, not a best-match search.
    """
    if not candidate:
        return None
    for index, statement in enumerate(statements):
        if index in consumed:
            continue
        if account_numbers_match(candidate, statement.account_number):
            return index
    return None


def _ledger_outcome(
    ledger: LedgerRecord,
    statements: Sequence[StatementRecord],
    consumed: set[int],
) -> ReconciliationOutcome:
    bank_name = detect_bank_name(ledger.narrative).value
    candidate = extract_embedded_account(ledger.narrative)
    index = find_statement_match(candidate, statements, consumed)

    if index is None:
        return ReconciliationOutcome(
            id=f"rec-{ledger.id}",
            status=ReconciliationStatus.UNMATCHED_LEDGER,
            ledger_record=ledger,
            variance_amount=ledger.balance,
            detected_bank_name=bank_name,
            detected_branch=ledger.branch_code,
            account_class=ledger.account_class,
            detected_account_number=candidate,
        )

    consumed.add(index)
    statement = statements[index]
    difference = ledger.balance - statement.ending_balance
    # Tolerance is checked on the unrounded difference
    status = (
        ReconciliationStatus.MATCHED
        if abs(difference) < MATCH_TOLERANCE
        else ReconciliationStatus.VARIANCE
    )
    return ReconciliationOutcome(
        id=f"rec-{ledger.id}",
        status=status,
        ledger_record=ledger,
        statement_record=statement,
        variance_amount=round_money(difference),
        detected_bank_name=bank_name,
        detected_branch=ledger.branch_code,
        account_class=ledger.account_class,
        detected_account_number=candidate,
    )


def _unmatched_statement_outcome(index: int, statement: StatementRecord) -> ReconciliationOutcome:
    return ReconciliationOutcome(
        id=f"rec-bs-{index}",
        status=ReconciliationStatus.UNMATCHED_STATEMENT,
        statement_record=statement,
        variance_amount=-statement.ending_balance,
        detected_bank_name=statement.bank_name or BankCode.UNKNOWN.value,
        detected_branch=NO_BRANCH,
        account_class=AccountClass.UNKNOWN,
    )


def reconcile(
    ledger_records: Sequence[LedgerRecord],
    statement_records: Sequence[StatementRecord],
) -> list[ReconciliationOutcome]:
    """Match ledger records against bank statements.

    Ledger records are visited in input order. Each one claims at most one
    statement, the first unconsumed statement whose account number contains
    the account number embedded in the ledger narrative. Statements never
    claimed are appended afterwards in their input order.

    The function never raises and keeps no state between calls; the consumed
    set is local to one invocation.
    """
    consumed: set[int] = set()
    outcomes = [_ledger_outcome(ledger, statement_records, consumed) for ledger in ledger_records]
    outcomes.extend(
        _unmatched_statement_outcome(index, statement)
        for index, statement in enumerate(statement_records)
        if index not in consumed
    )
    return outcomes
