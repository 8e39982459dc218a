"""
Manually add money to a fund (recorded as an adjustment).

Usage:
    python manage.py fund_credit general cash 500 --user admin@temple.org
"""

from apps.funds.management.base import LedgerCommand
from apps.funds.serializers import LedgerEntryInputSerializer
from apps.funds.services import SourceRef


class Command(LedgerCommand):
    help = 'Credit a fund with a manual adjustment'
    operation = 'credit'

    def add_arguments(self, parser):
        parser.add_argument('category', help='Fund category')
        parser.add_argument('method', help='cash or upi')
        parser.add_argument('amount', help='Amount, at most two decimal places')
        parser.add_argument('--description', help='Note stored on the transaction')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        data = self.validate(LedgerEntryInputSerializer, {
            'category': options['category'],
            'method': options['method'],
            'amount': options['amount'],
            'description': options.get('description'),
        })

        if self.operation == 'credit':
            fund = ledger.find_or_create_fund(data['category'], user)
            post = ledger.credit
        else:
            fund = ledger.get_fund(data['category'])
            post = ledger.debit

        entry = post(
            fund,
            data['method'],
            data['amount'],
            SourceRef.adjustment(),
            user,
            description=data.get('description', f"Manual {self.operation}"),
        )
        self.stdout.write(self.style.SUCCESS(
            f"{fund.fund_code} #{entry.sequence}: {self.operation} {self.money(entry.amount)} "
            f"{entry.method}, balance {self.money(entry.total_after)}"
        ))
