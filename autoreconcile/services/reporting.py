"""Read-only views over reconciliation outcomes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import assert_never

from autoreconcile.models import ReconciliationOutcome, ReconciliationStatus


class StatusFilter(str, Enum):
    """Status filter accepted by the results view."""

    ALL = "all"
    ISSUES = "issues"
    MATCHED = "matched"
    VARIANCE = "variance"
    UNMATCHED_LEDGER = "unmatched_ledger"
    UNMATCHED_STATEMENT = "unmatched_statement"


@dataclass(frozen=True)
class ReconciliationSummary:
    """Outcome counts for one reconciliation run."""

    total: int
    matched: int
    variance: int
    unmatched_ledger: int
    unmatched_statement: int
    net_variance: Decimal

    @property
    def unmatched(self) -> int:
        return self.unmatched_ledger + self.unmatched_statement


def status_label(status: ReconciliationStatus) -> str:
    """Human-readable badge text for a status."""
    match status:
        case ReconciliationStatus.MATCHED:
            return "Balances agree"
        case ReconciliationStatus.VARIANCE:
            return "Balance variance"
        case ReconciliationStatus.UNMATCHED_LEDGER:
            return "No statement found"
        case ReconciliationStatus.UNMATCHED_STATEMENT:
            return "No ledger record found"
        case _:
            assert_never(status)


def summarize(outcomes: Iterable[ReconciliationOutcome]) -> ReconciliationSummary:
    """Count outcomes per status."""
    counts = dict.fromkeys(ReconciliationStatus, 0)
    net_variance = Decimal("0.00")
    for outcome in outcomes:
        counts[outcome.status] += 1
        if outcome.status is ReconciliationStatus.VARIANCE:
            net_variance += outcome.variance_amount

    return ReconciliationSummary(
        total=sum(counts.values()),
        matched=counts[ReconciliationStatus.MATCHED],
        variance=counts[ReconciliationStatus.VARIANCE],
        unmatched_ledger=counts[ReconciliationStatus.UNMATCHED_LEDGER],
        unmatched_statement=counts[ReconciliationStatus.UNMATCHED_STATEMENT],
        net_variance=net_variance,
    )


def matches_status_filter(outcome: ReconciliationOutcome, status_filter: StatusFilter) -> bool:
    match status_filter:
        case StatusFilter.ALL:
            return True
        case StatusFilter.ISSUES:
            return outcome.status is not ReconciliationStatus.MATCHED
        case (
            StatusFilter.MATCHED
            | StatusFilter.VARIANCE
            | StatusFilter.UNMATCHED_LEDGER
            | StatusFilter.UNMATCHED_STATEMENT
        ):
            return outcome.status.value == status_filter.value
        case _:
            assert_never(status_filter)


def matches_search(outcome: ReconciliationOutcome, search: str) -> bool:
    """Free-text match over bank, branch, ledger narrative and statement account."""
    needle = search.lower()
    if not needle:
        return True
    narrative = outcome.ledger_record.narrative if outcome.ledger_record else ""
    account_number = outcome.statement_record.account_number if outcome.statement_record else ""
    haystacks = (outcome.detected_bank_name, outcome.detected_branch, narrative, account_number)
    return any(needle in haystack.lower() for haystack in haystacks)


def filter_outcomes(
    outcomes: Sequence[ReconciliationOutcome],
    status_filter: StatusFilter = StatusFilter.ALL,
    search: str = "",
) -> list[ReconciliationOutcome]:
    """Return outcomes passing both the status filter and the search text."""
    return [
        outcome
        for outcome in outcomes
        if matches_status_filter(outcome, status_filter) and matches_search(outcome, search)
    ]
