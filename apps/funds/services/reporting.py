"""
Fund Reports
============

Read-only queries over funds, donations and expenses for the report
command and anything else that needs balance overviews.

Classes:
    FundReports: Static methods returning plain dictionaries.

Example:
    Balances for last month::

        from apps.funds.services import FundReports

        report = FundReports.fund_report(
            start_date=date(2026, 9, 1),
            end_date=date(2026, 9, 30),
        )
        print(report['total_balances']['total'])

Note:
    Amounts are returned as ``Decimal``; serialize with Django's
    ``DjangoJSONEncoder`` when JSON output is needed.
"""

from decimal import Decimal

from django.db.models import Count, DecimalField, Max, Sum, Value
from django.db.models.functions import Coalesce

from apps.donations.models import Donation, MONETARY_TYPES
from apps.expenses.models import Expense, ExpenseStatus
from apps.funds.models import Fund
from apps.funds.serializers import FundTransactionSerializer
from apps.funds.values import ZERO


def _money_sum(field):
    return Coalesce(
        Sum(field),
        Value(Decimal('0.00')),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def _totals(funds):
    totals = {'cash': ZERO, 'upi': ZERO, 'total': ZERO}
    for fund in funds:
        totals['cash'] += fund.cash_balance
        totals['upi'] += fund.upi_balance
        totals['total'] += fund.total_balance
    return totals


class FundReports:
    """
    Aggregations over the ledger.

    Methods:
        fund_summary: Active funds and their combined balances.
        fund_report: Balances plus donation and expense totals for a period.
        transaction_history: Serialized history of one fund.
    """

    @staticmethod
    def fund_summary():
        """
        List active funds, newest first, with combined balances.

        Returns:
            dict: A dictionary containing:
                - funds (list): One dict per fund (code, category,
                  description, balance, created_by).
                - total_funds (int): Number of active funds.
                - total_balances (dict): Summed cash, upi and total.
        """
        funds = list(
            Fund.objects
            .filter(is_active=True)
            .select_related('created_by')
            .order_by('-created_at')
        )

        return {
            'funds': [
                {
                    'fund_code': fund.fund_code,
                    'category': fund.category,
                    'description': fund.description,
                    'balance': fund.balance.as_dict(),
                    'created_by': fund.created_by.get_display_name(),
                }
                for fund in funds
            ],
            'total_funds': len(funds),
            'total_balances': _totals(funds),
        }

    @staticmethod
    def fund_report(start_date=None, end_date=None, category=None):
        """
        Balances and money movement, optionally limited to a period or category.

        The period filters donations and expenses by their creation date;
        balances are always the current ones.

        Args:
            start_date (date, optional): First day to include.
            end_date (date, optional): Last day to include.
            category (str, optional): Only report this fund category.

        Returns:
            dict: A dictionary containing:
                - current_balances (dict): category -> {cash, upi, total}.
                - total_balances (dict): Summed cash, upi and total.
                - donation_totals (list): Per donation type (cash/upi):
                  type, total, count.
                - expense_totals (list): Paid expenses per allocation
                  method: method, total, count.
                - funds (list): Per fund: fund_code, category, balance,
                  transaction_count, last_transaction (datetime | None).
        """
        funds_qs = Fund.objects.filter(is_active=True)
        if category:
            funds_qs = funds_qs.filter(category=category)
        funds = list(
            funds_qs
            .annotate(
                transaction_count=Count('transactions'),
                last_transaction_at=Max('transactions__date'),
            )
            .order_by('category')
        )

        date_filter = {}
        if start_date:
            date_filter['created_at__date__gte'] = start_date
        if end_date:
            date_filter['created_at__date__lte'] = end_date

        donation_totals = (
            Donation.objects
            .filter(type__in=MONETARY_TYPES, **date_filter)
            .values('type')
            .annotate(total=_money_sum('amount'), count=Count('id'))
            .order_by('type')
        )

        expense_totals = (
            Expense.objects
            .filter(status=ExpenseStatus.PAID, **date_filter)
            .values('allocated_payment_method')
            .annotate(total=_money_sum('amount'), count=Count('id'))
            .order_by('allocated_payment_method')
        )

        return {
            'current_balances': {fund.category: fund.balance.as_dict() for fund in funds},
            'total_balances': _totals(funds),
            'donation_totals': [
                {'type': row['type'], 'total': row['total'], 'count': row['count']}
                for row in donation_totals
            ],
            'expense_totals': [
                {
                    'method': row['allocated_payment_method'],
                    'total': row['total'],
                    'count': row['count'],
                }
                for row in expense_totals
            ],
            'funds': [
                {
                    'fund_code': fund.fund_code,
                    'category': fund.category,
                    'balance': fund.balance.as_dict(),
                    'transaction_count': fund.transaction_count,
                    'last_transaction': fund.last_transaction_at,
                }
                for fund in funds
            ],
        }

    @staticmethod
    def transaction_history(fund):
        """Full history of ``fund`` in ledger order, serialized for output."""
        transactions = fund.transactions.select_related('fund', 'performed_by').order_by('sequence')
        return FundTransactionSerializer(transactions, many=True).data
