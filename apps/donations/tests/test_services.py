"""
Donation intake tests.

Tests cover:
- Donation code generation and collision retries
- Field validation for cash, UPI and in-kind donations
"""

import re
import pytest
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.common.identifiers import create_with_code, generate_code
from apps.donations.models import Donation, DonationStatus
from apps.donations.services import record_donation


def donation_fields(volunteer, **overrides):
    fields = {
        'received_by': volunteer,
        'donor_name': 'Ravi Kumar',
        'donor_mobile': '9876543210',
        'type': 'cash',
        'amount': Decimal('501.00'),
    }
    fields.update(overrides)
    return fields


class TestGenerateCode:
    """Tests for generate_code."""

    def test_format(self):
        assert generate_code('DON', 0, date(2026, 10, 19)) == 'DON202610190001'
        assert generate_code('EXP', 41, date(2026, 1, 5)) == 'EXP202601050042'


@pytest.mark.django_db
class TestRecordDonation:
    """Tests for record_donation."""

    def test_cash_donation(self, volunteer):
        donation = record_donation(**donation_fields(volunteer, event='pradosham'))

        assert re.fullmatch(r'DON\d{12}', donation.donation_code)
        assert donation.donation_code.startswith(f"DON{timezone.localdate():%Y%m%d}")
        assert donation.status == DonationStatus.RECEIVED
        assert donation.event == 'pradosham'
        assert donation.is_monetary

    def test_codes_increment(self, volunteer):
        first = record_donation(**donation_fields(volunteer))
        second = record_donation(**donation_fields(volunteer, donor_name='Lakshmi'))

        assert first.donation_code.endswith('0001')
        assert second.donation_code.endswith('0002')

    def test_upi_requires_transaction_id(self, volunteer):
        with pytest.raises(ValidationError) as exc_info:
            record_donation(**donation_fields(volunteer, type='upi'))

        assert 'upi_transaction_id' in exc_info.value.message_dict
        assert not Donation.objects.exists()

    def test_monetary_requires_amount(self, volunteer):
        with pytest.raises(ValidationError) as exc_info:
            record_donation(**donation_fields(volunteer, amount=None))

        assert 'amount' in exc_info.value.message_dict

    def test_in_kind_without_amount(self, volunteer):
        donation = record_donation(**donation_fields(volunteer, type='in-kind', amount=None))

        assert donation.amount is None
        assert not donation.is_monetary

    @pytest.mark.parametrize('mobile', ['12345', '5876543210', '98765432100'])
    def test_invalid_mobile(self, volunteer, mobile):
        with pytest.raises(ValidationError):
            record_donation(**donation_fields(volunteer, donor_mobile=mobile))


@pytest.mark.django_db
class TestCreateWithCode:
    """Tests for collision handling in create_with_code."""

    def occupy_next_code(self, volunteer):
        """Leave one row today whose code is the one the next create will try."""
        existing = record_donation(**donation_fields(volunteer))
        Donation.objects.filter(pk=existing.pk).update(donation_code=generate_code('DON', 1))

    def test_retries_on_collision(self, volunteer):
        self.occupy_next_code(volunteer)

        donation = create_with_code(
            Donation, code_field='donation_code', prefix='DON', **donation_fields(volunteer)
        )

        assert donation.donation_code == generate_code('DON', 2)

    def test_gives_up_after_max_retries(self, volunteer):
        self.occupy_next_code(volunteer)

        with pytest.raises(RuntimeError, match='Failed to generate unique DON code after 1 attempts'):
            create_with_code(
                Donation, code_field='donation_code', prefix='DON', max_retries=1,
                **donation_fields(volunteer)
            )

        assert Donation.objects.count() == 1
