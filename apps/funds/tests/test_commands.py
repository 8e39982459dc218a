import json
import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.donations.models import DonationStatus
from apps.expenses.models import ExpenseStatus
from apps.funds.models import Fund


def run(name, *args, **options):
    out = StringIO()
    call_command(name, *args, stdout=out, **options)
    return out.getvalue()


@pytest.mark.django_db
class TestLedgerCommands:
    """Tests for create_fund, fund_credit, fund_debit and fund_transfer."""

    def test_create_fund(self, admin_user):
        output = run('create_fund', 'festival', user=admin_user.email, description='Brahmotsavam')

        fund = Fund.objects.get(category='festival', is_active=True)
        assert fund.description == 'Brahmotsavam'
        assert fund.fund_code in output

    def test_create_fund_existing(self, admin_user, general_fund):
        output = run('create_fund', 'general', user=admin_user.email)

        assert 'already exists' in output
        assert Fund.objects.filter(category='general').count() == 1

    def test_create_fund_invalid_category(self, admin_user):
        with pytest.raises(CommandError):
            run('create_fund', 'lottery', user=admin_user.email)

    def test_unknown_user(self, db):
        with pytest.raises(CommandError, match='No active user'):
            run('create_fund', 'general', user='nobody@temple.org')

    def test_credit_and_debit(self, ledger, admin_user):
        run('fund_credit', 'general', 'cash', '5000', user=admin_user.email)
        output = run('fund_debit', 'general', 'cash', '2000', user=admin_user.email, description='Priest fees')

        fund = ledger.get_fund('general')
        assert fund.cash_balance == Decimal('3000.00')
        assert fund.last_transaction.description == 'Priest fees'
        assert fund.last_transaction.source == 'adjustment'
        assert '₹3000.00' in output

    def test_user_option_is_acting_user(self, ledger, volunteer):
        """The --user email is resolved to the user recorded on the entry."""
        call_command('fund_credit', 'general', 'upi', '10', '--user', volunteer.email.upper(), stdout=StringIO())

        fund = ledger.get_fund('general')
        assert fund.last_transaction.performed_by == volunteer
        assert fund.created_by == volunteer

    def test_debit_insufficient_funds(self, admin_user, general_fund):
        with pytest.raises(CommandError) as exc_info:
            run('fund_debit', 'general', 'cash', '5000', user=admin_user.email)

        assert str(exc_info.value) == 'Insufficient cash funds. Available: ₹0.00, Required: ₹5000.00'

    def test_debit_missing_fund(self, admin_user):
        with pytest.raises(CommandError, match='festival fund not found'):
            run('fund_debit', 'festival', 'cash', '10', user=admin_user.email)

    @pytest.mark.parametrize('amount', ['0', '-10', '10.005', 'ten'])
    def test_invalid_amount(self, admin_user, amount):
        with pytest.raises(CommandError, match='amount'):
            run('fund_credit', 'general', 'cash', amount, user=admin_user.email)

        assert not Fund.objects.exists()

    def test_short_description_rejected(self, admin_user):
        with pytest.raises(CommandError, match='description'):
            run('fund_credit', 'general', 'cash', '10', user=admin_user.email, description='ok')

    def test_transfer(self, ledger, admin_user, funded_general):
        output = run('fund_transfer', 'general', 'festival', 'upi', '750', user=admin_user.email)

        assert ledger.get_fund('festival').upi_balance == Decimal('750.00')
        assert ledger.get_balance(funded_general).upi == Decimal('1250.00')
        assert 'Transferred ₹750.00 upi' in output

    def test_transfer_same_category(self, admin_user, funded_general):
        with pytest.raises(CommandError, match='same fund category'):
            run('fund_transfer', 'general', 'general', 'cash', '10', user=admin_user.email)


@pytest.mark.django_db
class TestProcessingCommands:
    """Tests for process_donation and allocate_expense."""

    def test_process_donation(self, admin_user, cash_donation):
        output = run(
            'process_donation', cash_donation.donation_code,
            user=admin_user.email, category='anadhanam',
        )

        cash_donation.refresh_from_db()
        assert cash_donation.status == DonationStatus.PROCESSED
        assert Fund.objects.get(category='anadhanam').cash_balance == Decimal('5000.00')
        assert '₹5000.00 added to anadhanam fund' in output

    def test_process_unknown_donation(self, admin_user):
        with pytest.raises(CommandError, match='not found'):
            run('process_donation', 'DON000000000000', user=admin_user.email)

    def test_process_in_kind_donation(self, admin_user, in_kind_donation):
        with pytest.raises(CommandError, match='Only cash and UPI'):
            run('process_donation', in_kind_donation.donation_code, user=admin_user.email)

    def test_allocate_expense(self, admin_user, funded_general, pending_expense):
        output = run(
            'allocate_expense', pending_expense.expense_code,
            user=admin_user.email, method='upi',
        )

        pending_expense.refresh_from_db()
        assert pending_expense.status == ExpenseStatus.PAID
        assert pending_expense.allocated_payment_method == 'upi'
        assert '₹1200.00 allocated from general fund' in output

    def test_allocate_expense_insufficient(self, admin_user, general_fund, pending_expense):
        with pytest.raises(CommandError, match='Insufficient cash funds'):
            run('allocate_expense', pending_expense.expense_code, user=admin_user.email)

        pending_expense.refresh_from_db()
        assert pending_expense.status == ExpenseStatus.PENDING


@pytest.mark.django_db
class TestReportCommands:
    """Tests for fund_report and verify_fund_balances."""

    def test_report_text(self, funded_general):
        output = run('fund_report')

        assert funded_general.fund_code in output
        assert 'total ₹7000.00' in output

    def test_report_json(self, funded_general):
        report = json.loads(run('fund_report', json=True))

        assert report['current_balances']['general']['cash'] == '5000.00'
        assert report['funds'][0]['transaction_count'] == 2

    def test_report_bad_date_range(self, db):
        with pytest.raises(CommandError, match='end_date'):
            run('fund_report', start='2026-10-10', end='2026-10-01')

    def test_verify_clean(self, funded_general):
        output = run('verify_fund_balances')

        assert 'All fund balances match' in output

    def test_verify_mismatch_fails(self, funded_general):
        Fund.objects.filter(pk=funded_general.pk).update(
            cash_balance=Decimal('1.00'), total_balance=Decimal('2001.00')
        )

        with pytest.raises(CommandError, match=funded_general.fund_code):
            run('verify_fund_balances')

    def test_verify_repair(self, ledger, funded_general):
        Fund.objects.filter(pk=funded_general.pk).update(
            cash_balance=Decimal('1.00'), total_balance=Decimal('2001.00')
        )

        output = run('verify_fund_balances', repair=True)

        assert 'repaired' in output
        assert ledger.get_balance(funded_general).cash == Decimal('5000.00')
        assert 'All fund balances match' in run('verify_fund_balances')
