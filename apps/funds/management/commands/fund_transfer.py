"""
Move money between two category funds.

Usage:
    python manage.py fund_transfer general festival cash 1000 --user admin@temple.org
"""

from apps.funds.management.base import LedgerCommand
from apps.funds.serializers import FundTransferInputSerializer


class Command(LedgerCommand):
    help = 'Transfer money from one category fund to another'

    def add_arguments(self, parser):
        parser.add_argument('from_category', help='Source fund category')
        parser.add_argument('to_category', help='Destination fund category')
        parser.add_argument('method', help='cash or upi')
        parser.add_argument('amount', help='Amount, at most two decimal places')
        parser.add_argument('--description', help='Note stored on both transactions')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        data = self.validate(FundTransferInputSerializer, {
            'from_category': options['from_category'],
            'to_category': options['to_category'],
            'method': options['method'],
            'amount': options['amount'],
            'description': options.get('description'),
        })

        result = ledger.transfer(
            data['from_category'],
            data['to_category'],
            data['method'],
            data['amount'],
            user,
            description=data.get('description', ''),
        )
        self.stdout.write(self.style.SUCCESS(
            f"Transferred {self.money(result.debit.amount)} {result.debit.method} "
            f"from {result.source.fund_code} to {result.destination.fund_code}"
        ))
