"""
Pay an expense out of a fund.

Usage:
    python manage.py allocate_expense EXP202610190001 --user admin@temple.org --method upi
"""

from django.core.management.base import CommandError

from apps.expenses.models import Expense
from apps.funds.management.base import LedgerCommand
from apps.funds.serializers import ExpenseAllocationInputSerializer
from apps.funds.services import allocate_expense


class Command(LedgerCommand):
    help = 'Pay a pending expense from a fund'

    def add_arguments(self, parser):
        parser.add_argument('expense_code', help='Expense code, e.g. EXP202610190001')
        parser.add_argument('--category', help='Fund category (defaults to FUNDS_DEFAULT_CATEGORY)')
        parser.add_argument('--method', default='cash', help='cash or upi (default: cash)')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        data = self.validate(ExpenseAllocationInputSerializer, {
            'fund_category': options.get('category'),
            'payment_method': options['method'],
        })

        expense_id = (
            Expense.objects
            .filter(expense_code=options['expense_code'])
            .values_list('id', flat=True)
            .first()
        )
        if expense_id is None:
            raise CommandError(f"Expense {options['expense_code']} not found")

        result = allocate_expense(
            expense_id=expense_id,
            performed_by=user,
            fund_category=data.get('fund_category'),
            payment_method=data['payment_method'],
            ledger=ledger,
        )
        self.stdout.write(self.style.SUCCESS(
            f"{self.money(result.transaction.amount)} allocated from {result.fund.category} fund "
            f"for expense {result.expense.expense_code}"
        ))
