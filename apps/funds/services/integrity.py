"""
Ledger integrity checks.

A fund's history is the source of truth: replaying its transactions from a
zero balance must reproduce every stored snapshot and the live balance.
These helpers detect drift and, when asked, reset the live balance from
history. Transactions themselves are never rewritten.
"""

import logging
from typing import List, NamedTuple

from django.db import transaction

from apps.funds.models import Fund, FundTransaction
from apps.funds.values import Balance, ZERO

from .exceptions import FundNotFoundError, InvariantViolationError

logger = logging.getLogger(__name__)


class FundVerification(NamedTuple):
    fund: Fund
    expected: Balance
    actual: Balance
    ok: bool


def replay_history(fund: Fund) -> Balance:
    """
    Rebuild ``fund``'s balance from its transactions.

    Checks along the way that sequences are contiguous from 1, that each
    snapshot equals the previous one plus or minus the entry amount on its
    method, and that no snapshot is negative or has ``total != cash + upi``.

    Returns:
        The balance after the last entry (zero for an empty history)

    Raises:
        InvariantViolationError: On the first broken entry
    """
    balance = Balance()
    entries = FundTransaction.objects.filter(fund_id=fund.pk).order_by('sequence')

    for expected_sequence, entry in enumerate(entries.iterator(), start=1):
        label = f"{fund.fund_code} #{entry.sequence}"
        if entry.sequence != expected_sequence:
            raise InvariantViolationError(
                f"{label}: expected sequence {expected_sequence}"
            )

        balance = balance.apply(entry.method, entry.signed_amount)
        snapshot = entry.balance_after

        if not snapshot.is_consistent:
            raise InvariantViolationError(f"{label}: snapshot total is not cash + upi")
        if min(snapshot) < ZERO:
            raise InvariantViolationError(f"{label}: negative balance in snapshot")
        if snapshot != balance:
            raise InvariantViolationError(
                f"{label}: snapshot {snapshot.as_dict()} does not follow from history {balance.as_dict()}"
            )

    return balance


def _persisted_balance(fund: Fund) -> Balance:
    try:
        cash, upi, total = Fund.objects.values_list(
            'cash_balance', 'upi_balance', 'total_balance'
        ).get(pk=fund.pk)
    except Fund.DoesNotExist:
        raise FundNotFoundError(f"Fund {fund.pk} not found")
    return Balance(cash=cash, upi=upi, total=total)


def verify_fund(fund: Fund) -> FundVerification:
    """Compare the live balance of ``fund`` with its replayed history."""
    expected = replay_history(fund)
    actual = _persisted_balance(fund)
    ok = expected == actual
    if not ok:
        logger.warning(
            "Fund %s balance %s does not match history %s",
            fund.fund_code, actual.as_dict(), expected.as_dict()
        )
    return FundVerification(fund=fund, expected=expected, actual=actual, ok=ok)


def verify_all_funds(include_inactive: bool = True) -> List[FundVerification]:
    funds = Fund.objects.all() if include_inactive else Fund.objects.filter(is_active=True)
    return [verify_fund(fund) for fund in funds.order_by('category', 'created_at')]


def recompute_balance(fund: Fund, *, repair: bool = False) -> FundVerification:
    """
    Check ``fund`` against its history and optionally fix the live balance.

    Running it again after a repair finds nothing to do.

    Args:
        fund: Fund to check
        repair: Overwrite the live balance from history on mismatch

    Returns:
        FundVerification describing the (possibly repaired) state

    Raises:
        InvariantViolationError: If the balance is wrong and ``repair`` is
            False, or if the history itself is broken
    """
    with transaction.atomic():
        locked = Fund.objects.select_for_update().get(pk=fund.pk)
        result = verify_fund(locked)
        if result.ok:
            return result

        if not repair:
            raise InvariantViolationError(
                f"Fund {locked.fund_code} balance {result.actual.as_dict()} "
                f"does not match history {result.expected.as_dict()}"
            )

        locked.set_balance(result.expected)
        locked.save(update_fields=['cash_balance', 'upi_balance', 'total_balance', 'updated_at'])

    logger.warning(
        "Repaired fund %s balance from %s to %s",
        locked.fund_code, result.actual.as_dict(), result.expected.as_dict()
    )
    fund.set_balance(result.expected)
    return FundVerification(fund=locked, expected=result.expected, actual=result.expected, ok=True)
