"""
Credit a received donation to a fund.

Usage:
    python manage.py process_donation DON202610190001 --user admin@temple.org --category festival
"""

from django.core.management.base import CommandError

from apps.donations.models import Donation
from apps.funds.management.base import LedgerCommand
from apps.funds.services import process_donation


class Command(LedgerCommand):
    help = 'Add a cash or UPI donation to a fund'

    def add_arguments(self, parser):
        parser.add_argument('donation_code', help='Donation code, e.g. DON202610190001')
        parser.add_argument('--category', help='Fund category (defaults to FUNDS_DEFAULT_CATEGORY)')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        donation_id = (
            Donation.objects
            .filter(donation_code=options['donation_code'])
            .values_list('id', flat=True)
            .first()
        )
        if donation_id is None:
            raise CommandError(f"Donation {options['donation_code']} not found")

        result = process_donation(
            donation_id=donation_id,
            performed_by=user,
            fund_category=options.get('category'),
            ledger=ledger,
        )
        self.stdout.write(self.style.SUCCESS(
            f"{self.money(result.transaction.amount)} added to {result.fund.category} fund "
            f"from {result.donation.type} donation {result.donation.donation_code}"
        ))
