"""
Create the fund for a category.

Usage:
    python manage.py create_fund festival --user admin@temple.org
"""

from apps.funds.models import Fund
from apps.funds.management.base import LedgerCommand
from apps.funds.serializers import CreateFundInputSerializer


class Command(LedgerCommand):
    help = 'Create the active fund for a category (no-op if it already exists)'

    def add_arguments(self, parser):
        parser.add_argument('category', help='Fund category')
        parser.add_argument('--description', help='Fund description')
        super().add_arguments(parser)

    def run(self, ledger, user, **options):
        data = self.validate(CreateFundInputSerializer, {
            'category': options['category'],
            'description': options.get('description'),
        })

        existing = Fund.objects.filter(category=data['category'], is_active=True).first()
        if existing is not None:
            self.stdout.write(self.style.WARNING(
                f"{existing.fund_code} already exists for {existing.category}"
            ))
            return

        fund = ledger.find_or_create_fund(
            data['category'], user, description=data.get('description', '')
        )
        self.stdout.write(self.style.SUCCESS(f"Created {fund.fund_code} ({fund.category})"))
