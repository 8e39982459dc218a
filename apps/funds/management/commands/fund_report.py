"""
Print fund balances with donation and expense totals.

Usage:
    python manage.py fund_report
    python manage.py fund_report --start 2026-09-01 --end 2026-09-30 --category festival
    python manage.py fund_report --json
"""

import json

from django.core.serializers.json import DjangoJSONEncoder

from apps.funds.management.base import LedgerCommand
from apps.funds.serializers import FundReportFilterSerializer
from apps.funds.services import FundReports


class Command(LedgerCommand):
    help = 'Show fund balances and money movement for a period'
    requires_user = False

    def add_arguments(self, parser):
        parser.add_argument('--start', help='First day to include (YYYY-MM-DD)')
        parser.add_argument('--end', help='Last day to include (YYYY-MM-DD)')
        parser.add_argument('--category', help='Only this fund category')
        parser.add_argument('--json', action='store_true', help='Print the report as JSON')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        filters = self.validate(FundReportFilterSerializer, {
            'start_date': options.get('start'),
            'end_date': options.get('end'),
            'category': options.get('category'),
        })
        report = FundReports.fund_report(**filters)

        if options['json']:
            self.stdout.write(json.dumps(report, cls=DjangoJSONEncoder, indent=2))
            return

        self.stdout.write(self.style.MIGRATE_HEADING('Funds'))
        if not report['funds']:
            self.stdout.write('  No active funds')
        for fund in report['funds']:
            balance = fund['balance']
            self.stdout.write(
                f"  {fund['fund_code']}  {fund['category']:<13} "
                f"cash {self.money(balance['cash'])}  upi {self.money(balance['upi'])}  "
                f"total {self.money(balance['total'])}  ({fund['transaction_count']} transactions)"
            )

        totals = report['total_balances']
        self.stdout.write(
            f"  Total: cash {self.money(totals['cash'])}  upi {self.money(totals['upi'])}  "
            f"total {self.money(totals['total'])}"
        )

        self.stdout.write(self.style.MIGRATE_HEADING('Donations'))
        for row in report['donation_totals']:
            self.stdout.write(f"  {row['type']:<5} {self.money(row['total'])} ({row['count']})")

        self.stdout.write(self.style.MIGRATE_HEADING('Paid expenses'))
        for row in report['expense_totals']:
            self.stdout.write(f"  {row['method'] or '-':<5} {self.money(row['total'])} ({row['count']})")
