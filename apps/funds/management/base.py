"""Shared plumbing for the fund management commands."""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.funds.services import FundLedger, FundsServiceError


class LedgerCommand(BaseCommand):
    """
    Base for commands that act on the ledger as a given user.

    Subclasses implement ``run(ledger, user, **options)``. Input is checked
    with a DRF serializer first, and domain errors are reported as
    ``CommandError`` so the command exits non-zero with a readable message.
    """

    requires_user = True

    def add_arguments(self, parser):
        if self.requires_user:
            parser.add_argument(
                '--user',
                required=True,
                help='Email of the user performing the operation',
            )

    def handle(self, *args, **options):
        user = self.get_user(options.pop('user')) if self.requires_user else None
        try:
            return self.run(FundLedger(), user, **options)
        except FundsServiceError as e:
            raise CommandError(str(e))

    def run(self, ledger, user, **options):
        raise NotImplementedError

    def get_user(self, email):
        try:
            return User.objects.get(email__iexact=email, is_active=True)
        except User.DoesNotExist:
            raise CommandError(f"No active user with email {email}")

    def validate(self, serializer_class, data):
        serializer = serializer_class(data={k: v for k, v in data.items() if v is not None})
        if not serializer.is_valid():
            errors = '; '.join(
                f"{field}: {' '.join(str(m) for m in messages)}"
                for field, messages in serializer.errors.items()
            )
            raise CommandError(errors)
        return serializer.validated_data

    def money(self, amount):
        return f"{self.symbol}{amount}"

    @property
    def symbol(self):
        return settings.FUNDS_CURRENCY_SYMBOL
