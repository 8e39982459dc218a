"""
Concurrency tests for the ledger.

These use TransactionTestCase so every thread commits real transactions
on its own database connection.
"""

import threading
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from apps.accounts.models import User
from apps.funds.models import Fund, FundTransaction
from apps.funds.services import (
    FundLedger,
    InsufficientFundsError,
    SourceRef,
    verify_fund,
)


def run_in_threads(target, args_list):
    """Run ``target`` once per argument tuple, all threads started together."""
    barrier = threading.Barrier(len(args_list))

    def worker(*args):
        try:
            barrier.wait()
            target(*args)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=args) for args in args_list]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


class TestConcurrency(TransactionTestCase):
    """
    Tests for per-fund serialization of ledger mutations.

    Note: a regular TestCase wraps each test in a transaction, which
    hides the interleaving these tests are about.
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@temple.org',
            password='TestPass123!',
            display_name='Temple Admin',
        )
        self.ledger = FundLedger()
        self.fund = self.ledger.find_or_create_fund('general', self.admin)
        self.ledger.credit(self.fund, 'cash', Decimal('1000'), SourceRef.adjustment(), self.admin)

    def test_concurrent_debits_never_overdraw(self):
        """Ten debits of 200 against 1000: exactly five succeed."""
        succeeded = []
        rejected = []
        unexpected = []

        def debit():
            try:
                fund = Fund.objects.get(pk=self.fund.pk)
                succeeded.append(
                    self.ledger.debit(fund, 'cash', Decimal('200'), SourceRef.adjustment(), self.admin)
                )
            except InsufficientFundsError as e:
                rejected.append(e)
            except Exception as e:
                unexpected.append(e)

        run_in_threads(debit, [()] * 10)

        assert unexpected == [], f"Unexpected errors: {unexpected}"
        assert len(succeeded) == 5
        assert len(rejected) == 5
        assert self.ledger.get_balance(self.fund).cash == Decimal('0.00')
        assert FundTransaction.objects.filter(fund=self.fund, type='debit').count() == 5
        assert verify_fund(self.fund).ok

        sequences = list(
            FundTransaction.objects.filter(fund=self.fund)
            .order_by('sequence')
            .values_list('sequence', flat=True)
        )
        assert sequences == list(range(1, 7))

    def test_concurrent_credits_lose_no_updates(self):
        errors = []

        def credit(amount):
            try:
                fund = Fund.objects.get(pk=self.fund.pk)
                self.ledger.credit(fund, 'upi', amount, SourceRef.adjustment(), self.admin)
            except Exception as e:
                errors.append(e)

        run_in_threads(credit, [(Decimal(f'{i}.25'),) for i in range(1, 9)])

        assert errors == [], f"Unexpected errors: {errors}"
        # 1.25 + 2.25 + ... + 8.25
        assert self.ledger.get_balance(self.fund).upi == Decimal('38.00')
        assert verify_fund(self.fund).ok

    def test_opposing_transfers_conserve_money(self):
        festival = self.ledger.find_or_create_fund('festival', self.admin)
        self.ledger.credit(festival, 'cash', Decimal('1000'), SourceRef.adjustment(), self.admin)
        errors = []

        def transfer(from_category, to_category):
            try:
                self.ledger.transfer(from_category, to_category, 'cash', Decimal('100'), self.admin)
            except Exception as e:
                errors.append(e)

        run_in_threads(transfer, [('general', 'festival'), ('festival', 'general')] * 4)

        assert errors == [], f"Unexpected errors: {errors}"
        assert self.ledger.get_balance(self.fund).cash == Decimal('1000.00')
        assert self.ledger.get_balance(festival).cash == Decimal('1000.00')
        assert verify_fund(self.fund).ok
        assert verify_fund(festival).ok

    def test_concurrent_fund_creation_yields_one_fund(self):
        created = []
        errors = []

        def create():
            try:
                created.append(self.ledger.find_or_create_fund('emergency', self.admin))
            except Exception as e:
                errors.append(e)

        run_in_threads(create, [()] * 5)

        assert errors == [], f"Unexpected errors: {errors}"
        assert Fund.objects.filter(category='emergency', is_active=True).count() == 1
        assert len({fund.pk for fund in created}) == 1
