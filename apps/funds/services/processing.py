"""
Donation and expense processing.

Bridges the intake apps and the ledger: a received cash/UPI donation is
credited to a category fund, and a pending expense is paid by debiting one.
In both cases the ledger entry and the status change on the donation or
expense are committed together.
"""

import logging
from typing import NamedTuple, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.donations.models import Donation, DonationStatus
from apps.expenses.models import Expense
from apps.funds.models import Fund, FundTransaction
from apps.funds.values import SourceRef

from .exceptions import (
    DonationAlreadyProcessedError,
    DonationNotEligibleError,
    DonationNotFoundError,
    ExpenseAlreadyPaidError,
    ExpenseNotFoundError,
)
from .ledger import FundLedger

logger = logging.getLogger(__name__)


class DonationProcessingResult(NamedTuple):
    fund: Fund
    donation: Donation
    transaction: FundTransaction


class ExpenseAllocationResult(NamedTuple):
    fund: Fund
    expense: Expense
    transaction: FundTransaction


def process_donation(*, donation_id, performed_by, fund_category: Optional[str] = None,
                     ledger: Optional[FundLedger] = None) -> DonationProcessingResult:
    """
    Credit a received donation to a fund.

    The fund for ``fund_category`` is created if it does not exist yet. The
    donation row is locked while it is processed, so the same donation
    cannot be credited twice.

    Args:
        donation_id: Donation primary key
        performed_by: Acting user
        fund_category: Target fund category (defaults to FUNDS_DEFAULT_CATEGORY)
        ledger: Ledger service to use (a default one is built if omitted)

    Returns:
        DonationProcessingResult with the fund, donation and credit entry

    Raises:
        DonationNotFoundError: If the donation does not exist
        DonationNotEligibleError: If it is in-kind or has no positive amount
        DonationAlreadyProcessedError: If it was already credited
        LedgerValidationError: If the category is invalid
    """
    ledger = ledger or FundLedger()
    fund_category = fund_category or settings.FUNDS_DEFAULT_CATEGORY

    with transaction.atomic():
        try:
            donation = Donation.objects.select_for_update().get(pk=donation_id)
        except (Donation.DoesNotExist, ValidationError):
            raise DonationNotFoundError("Donation not found")

        if not donation.is_monetary:
            raise DonationNotEligibleError("Only cash and UPI donations can be added to funds")
        if donation.amount is None or donation.amount <= 0:
            raise DonationNotEligibleError("Donation amount must be positive")
        if donation.status != DonationStatus.RECEIVED:
            raise DonationAlreadyProcessedError(
                f"Donation {donation.donation_code} has already been processed"
            )

        fund = ledger.find_or_create_fund(fund_category, performed_by)
        entry = ledger.credit(
            fund,
            donation.type,
            donation.amount,
            SourceRef.donation(donation),
            performed_by,
            description=f"Donation from {donation.donor_name} - {donation.donation_code}",
        )

        donation.status = DonationStatus.PROCESSED
        donation.save(update_fields=['status', 'updated_at'])

    logger.info("Donation %s credited to %s", donation.donation_code, fund.fund_code)
    return DonationProcessingResult(fund=fund, donation=donation, transaction=entry)


def allocate_expense(*, expense_id, performed_by, fund_category: Optional[str] = None,
                     payment_method: str = 'cash',
                     ledger: Optional[FundLedger] = None) -> ExpenseAllocationResult:
    """
    Pay a pending expense out of an existing fund.

    Raises:
        ExpenseNotFoundError: If the expense does not exist
        ExpenseAlreadyPaidError: If the expense is already paid
        FundNotFoundError: If there is no active fund for the category
        InsufficientFundsError: If the fund cannot cover the amount
    """
    ledger = ledger or FundLedger()
    fund_category = fund_category or settings.FUNDS_DEFAULT_CATEGORY

    with transaction.atomic():
        try:
            expense = Expense.objects.select_for_update().get(pk=expense_id)
        except (Expense.DoesNotExist, ValidationError):
            raise ExpenseNotFoundError("Expense not found")

        if expense.is_paid:
            raise ExpenseAlreadyPaidError(f"Expense {expense.expense_code} is already paid")

        fund = ledger.get_fund(fund_category)
        entry = ledger.debit(
            fund,
            payment_method,
            expense.amount,
            SourceRef.expense(expense),
            performed_by,
            description=f"Payment for expense {expense.expense_code} - {expense.description}",
        )
        expense.mark_paid(fund=fund, method=payment_method, allocated_by=performed_by)

    logger.info(
        "Expense %s paid from %s (%s %s)",
        expense.expense_code, fund.fund_code, payment_method, expense.amount
    )
    return ExpenseAllocationResult(fund=fund, expense=expense, transaction=entry)
