"""
Check every fund's balance against its transaction history.

Usage:
    python manage.py verify_fund_balances
    python manage.py verify_fund_balances --repair

Exits with an error if a mismatch is found and not repaired.
"""

from django.core.management.base import CommandError

from apps.funds.management.base import LedgerCommand
from apps.funds.services import recompute_balance, verify_all_funds


class Command(LedgerCommand):
    help = 'Verify fund balances against their history'
    requires_user = False

    def add_arguments(self, parser):
        parser.add_argument(
            '--repair',
            action='store_true',
            help='Reset mismatched balances from history',
        )
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        mismatched = []

        for result in verify_all_funds():
            fund = result.fund
            if result.ok:
                self.stdout.write(f"  {fund.fund_code} OK ({self.money(result.actual.total)})")
                continue

            if options['repair']:
                recompute_balance(fund, repair=True)
                self.stdout.write(self.style.WARNING(
                    f"  {fund.fund_code} repaired: {self.money(result.actual.total)} -> "
                    f"{self.money(result.expected.total)}"
                ))
            else:
                mismatched.append(fund.fund_code)
                self.stdout.write(self.style.ERROR(
                    f"  {fund.fund_code} mismatch: balance {self.money(result.actual.total)}, "
                    f"history {self.money(result.expected.total)}"
                ))

        if mismatched:
            raise CommandError(f"Balance mismatch in {', '.join(mismatched)}")
        self.stdout.write(self.style.SUCCESS('All fund balances match their history'))
