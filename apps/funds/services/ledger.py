"""
Fund ledger service.

The only code allowed to change a fund's balance. Every credit or debit
runs as one critical section on the fund row:

    lock row (select_for_update) -> validate -> compute new balance
    -> save balance -> append transaction -> verify persisted balance

so two concurrent debits can never both pass the sufficiency check against
a stale balance. Transfers lock both funds (in primary-key order, to avoid
deadlocks) and run the debit and the credit inside one database
transaction, so money is never left "in flight".

Example:
    Crediting a donation and paying an expense::

        from apps.funds.services import FundLedger, SourceRef

        ledger = FundLedger()
        fund = ledger.find_or_create_fund('general', performed_by=admin)
        ledger.credit(fund, 'cash', Decimal('5000'), SourceRef.donation(donation), admin)
        ledger.debit(fund, 'cash', Decimal('2000'), SourceRef.expense(expense), admin)
"""

import logging
from decimal import Decimal
from typing import NamedTuple, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Max, QuerySet

from apps.common.identifiers import create_with_code
from apps.funds.models import (
    Fund,
    FundCategory,
    FundTransaction,
    PaymentMethod,
    TransactionSource,
    TransactionType,
)
from apps.funds.values import MAX_AMOUNT, Balance, SourceRef, to_amount

from .exceptions import (
    FundNotFoundError,
    InsufficientFundsError,
    InvariantViolationError,
    LedgerValidationError,
    SameFundTransferError,
)

logger = logging.getLogger(__name__)


class TransferResult(NamedTuple):
    """Both legs of a completed transfer."""

    source: Fund
    destination: Fund
    debit: FundTransaction
    credit: FundTransaction


class FundLedger:
    """
    Service object exposing the ledger operations.

    Callers receive a ledger instance (``process_donation(..., ledger=...)``)
    instead of touching ``Fund`` balances themselves.

    Methods:
        credit: Add money to one side (cash/upi) of a fund.
        debit: Take money from one side of a fund; never goes negative.
        transfer: Move money between two category funds, all-or-nothing.
        find_or_create_fund: Active fund for a category, created lazily.
        get_fund / get_balance / get_transactions / list_funds: Read accessors.
        deactivate_fund: Soft-delete a fund.
    """

    def __init__(self, currency_symbol: Optional[str] = None):
        self.currency_symbol = currency_symbol or getattr(settings, 'FUNDS_CURRENCY_SYMBOL', '₹')

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def credit(self, fund: Fund, method: str, amount, source: SourceRef, performed_by,
               description: str = '') -> FundTransaction:
        """
        Increase ``fund``'s ``method`` balance by ``amount``.

        Args:
            fund: Fund to credit (its balance fields are refreshed afterwards)
            method: ``cash`` or ``upi``
            amount: Positive amount, at most two decimal places
            source: What caused the credit
            performed_by: Acting user
            description: Human-readable note stored on the entry

        Returns:
            The appended FundTransaction

        Raises:
            LedgerValidationError: If method, amount or source is invalid
            FundNotFoundError: If the fund no longer exists
            InvariantViolationError: If the stored balance is inconsistent
        """
        return self._post(fund, TransactionType.CREDIT, method, amount, source, performed_by, description)

    def debit(self, fund: Fund, method: str, amount, source: SourceRef, performed_by,
              description: str = '') -> FundTransaction:
        """
        Decrease ``fund``'s ``method`` balance by ``amount``.

        Same arguments as ``credit``. The sufficiency check is made against
        the locked row, so a stale ``fund`` instance cannot cause an
        overdraft.

        Raises:
            InsufficientFundsError: If the sub-balance is below ``amount``;
                nothing is written
        """
        return self._post(fund, TransactionType.DEBIT, method, amount, source, performed_by, description)

    def transfer(self, from_category: str, to_category: str, method: str, amount, performed_by,
                 description: str = '') -> TransferResult:
        """
        Move ``amount`` from one category fund to another.

        The source fund must exist; the destination is created if needed.
        Both legs, and any fund created for the destination, commit or roll
        back together.

        Raises:
            SameFundTransferError: If both categories are the same
            FundNotFoundError: If there is no active source fund
            InsufficientFundsError: If the source cannot cover the amount
        """
        from_category = self._clean_category(from_category)
        to_category = self._clean_category(to_category)
        if from_category == to_category:
            raise SameFundTransferError("Cannot transfer to the same fund category")

        method = self._clean_method(method)
        amount = self._clean_amount(amount)
        self._clean_actor(performed_by)

        with transaction.atomic():
            source = self.get_fund(from_category)
            destination = self.find_or_create_fund(to_category, performed_by)

            # Lock in primary-key order so opposing transfers cannot deadlock
            locked = {}
            for pk in sorted([source.pk, destination.pk]):
                locked[pk] = self._lock(pk)
            source, destination = locked[source.pk], locked[destination.pk]

            debit = self._apply(
                source, TransactionType.DEBIT, method, amount,
                SourceRef.transfer(destination), performed_by,
                description or f"Transfer to {to_category} fund",
            )
            credit = self._apply(
                destination, TransactionType.CREDIT, method, amount,
                SourceRef.transfer(source), performed_by,
                description or f"Transfer from {from_category} fund",
            )

        logger.info(
            "Transferred %s %s from %s to %s",
            amount, method, source.fund_code, destination.fund_code
        )
        return TransferResult(source=source, destination=destination, debit=debit, credit=credit)

    def find_or_create_fund(self, category: str, performed_by, description: str = '') -> Fund:
        """
        Return the active fund for ``category``, creating an empty one if needed.

        ``description`` is only used when the fund is created; it defaults to
        e.g. "Festival fund".

        Calling it again returns the same fund. If two callers race to create
        the fund, the loser hits the one-active-fund-per-category constraint
        and returns the winner's fund.
        """
        category = self._clean_category(category)
        fund = Fund.objects.filter(category=category, is_active=True).first()
        if fund is not None:
            return fund

        self._clean_actor(performed_by)
        try:
            fund = create_with_code(
                Fund,
                code_field='fund_code',
                prefix='FND',
                category=category,
                created_by=performed_by,
                description=description or f"{category.capitalize()} fund",
            )
        except IntegrityError:
            return Fund.objects.get(category=category, is_active=True)

        logger.info("Created %s fund %s", category, fund.fund_code)
        return fund

    def deactivate_fund(self, category: str, performed_by) -> Fund:
        """Soft-delete the active fund for ``category``; its history is kept."""
        fund = self.get_fund(category)
        fund.deactivate()
        logger.info("Fund %s deactivated by %s", fund.fund_code, performed_by)
        return fund

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def get_fund(self, category: str) -> Fund:
        """Return the active fund for ``category`` or raise FundNotFoundError."""
        category = self._clean_category(category)
        try:
            return Fund.objects.get(category=category, is_active=True)
        except Fund.DoesNotExist:
            raise FundNotFoundError(f"{category} fund not found")

    def get_balance(self, fund: Fund) -> Balance:
        """Current persisted balance of ``fund``."""
        try:
            cash, upi, total = Fund.objects.values_list(
                'cash_balance', 'upi_balance', 'total_balance'
            ).get(pk=fund.pk)
        except Fund.DoesNotExist:
            raise FundNotFoundError(f"Fund {fund.pk} not found")
        return Balance(cash=cash, upi=upi, total=total)

    def get_transactions(self, fund: Fund, *, source: Optional[str] = None, type: Optional[str] = None,
                         start=None, end=None) -> QuerySet:
        """Transaction history of ``fund`` in ledger order, optionally filtered."""
        queryset = (
            FundTransaction.objects
            .filter(fund_id=fund.pk)
            .select_related('performed_by')
            .order_by('sequence')
        )
        if source:
            queryset = queryset.filter(source=source)
        if type:
            queryset = queryset.filter(type=type)
        if start:
            queryset = queryset.filter(date__gte=start)
        if end:
            queryset = queryset.filter(date__lte=end)
        return queryset

    def list_funds(self, include_inactive: bool = False) -> QuerySet:
        queryset = Fund.objects.select_related('created_by')
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        return queryset

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _post(self, fund, tx_type, method, amount, source, performed_by, description):
        method = self._clean_method(method)
        amount = self._clean_amount(amount)
        source = self._clean_source(source)
        self._clean_actor(performed_by)

        with transaction.atomic():
            locked = self._lock(fund.pk)
            entry = self._apply(locked, tx_type, method, amount, source, performed_by, description)

        # Hand the committed state back to the caller's instance
        fund.set_balance(locked.balance)
        fund.updated_at = locked.updated_at
        return entry

    def _lock(self, pk) -> Fund:
        try:
            return Fund.objects.select_for_update().get(pk=pk)
        except Fund.DoesNotExist:
            raise FundNotFoundError(f"Fund {pk} not found")

    def _apply(self, fund: Fund, tx_type, method, amount: Decimal, source: SourceRef, performed_by,
               description: str) -> FundTransaction:
        """Mutate a locked fund and append the entry. Caller holds the atomic block."""
        if not fund.is_active:
            raise LedgerValidationError(f"Fund {fund.fund_code} is inactive")

        current = fund.balance
        if not current.is_consistent:
            logger.error("Fund %s has inconsistent balance %s", fund.fund_code, current)
            raise InvariantViolationError(
                f"Fund {fund.fund_code} total {current.total} != cash {current.cash} + upi {current.upi}"
            )

        if tx_type == TransactionType.DEBIT:
            available = current.get(method)
            if available < amount:
                logger.warning(
                    "Rejected debit of %s %s from %s (available %s)",
                    amount, method, fund.fund_code, available
                )
                raise InsufficientFundsError(method, available, amount, self.currency_symbol)
            after = current.apply(method, -amount)
        else:
            try:
                after = current.apply(method, amount)
            except ValueError:
                logger.warning(
                    "Rejected credit of %s %s to %s (balance limit reached)",
                    amount, method, fund.fund_code
                )
                raise LedgerValidationError(
                    f"Credit of {amount} would exceed the maximum fund balance of {MAX_AMOUNT}"
                )

        last_sequence = fund.transactions.aggregate(last=Max('sequence'))['last'] or 0

        fund.set_balance(after)
        fund.save(update_fields=['cash_balance', 'upi_balance', 'total_balance', 'updated_at'])

        entry = FundTransaction.objects.create(
            fund=fund,
            sequence=last_sequence + 1,
            type=tx_type,
            source=source.kind,
            source_id=source.id,
            method=method,
            amount=amount,
            cash_after=after.cash,
            upi_after=after.upi,
            total_after=after.total,
            description=description,
            performed_by=performed_by,
        )

        persisted = self.get_balance(fund)
        if persisted != after:
            logger.error(
                "Fund %s persisted balance %s differs from snapshot %s",
                fund.fund_code, persisted, after
            )
            raise InvariantViolationError(
                f"Fund {fund.fund_code} persisted balance does not match transaction #{entry.sequence}"
            )

        logger.info(
            "%s %s %s on %s (#%s), balance after %s",
            tx_type, amount, method, fund.fund_code, entry.sequence, after.total
        )
        return entry

    def _clean_amount(self, amount) -> Decimal:
        try:
            amount = to_amount(amount)
        except ValueError as e:
            raise LedgerValidationError(str(e))
        if amount <= 0:
            raise LedgerValidationError("Amount must be a positive number")
        return amount

    def _clean_method(self, method) -> str:
        if method not in PaymentMethod.values:
            raise LedgerValidationError("Payment method must be cash or upi")
        return str(method)

    def _clean_category(self, category) -> str:
        if category not in FundCategory.values:
            raise LedgerValidationError(f"Invalid fund category: {category!r}")
        return str(category)

    def _clean_source(self, source) -> SourceRef:
        if not isinstance(source, SourceRef) or source.kind not in TransactionSource.values:
            raise LedgerValidationError(f"Invalid transaction source: {source!r}")
        if source.kind != TransactionSource.ADJUSTMENT and source.id is None:
            raise LedgerValidationError(f"A {source.kind} entry must reference its {source.source_type}")
        return source

    def _clean_actor(self, performed_by):
        if performed_by is None or getattr(performed_by, 'pk', None) is None:
            raise LedgerValidationError("performed_by must be a saved user")
