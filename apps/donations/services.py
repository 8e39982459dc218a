"""
Donation intake service.

Records incoming donations with their ``DON`` sequence code. Moving the
money into a fund is a separate step handled by the funds ledger.
"""

import logging

from apps.common.identifiers import create_with_code

from .models import Donation

logger = logging.getLogger(__name__)


def record_donation(*, received_by, donor_name, donor_mobile, type, amount=None, **extra) -> Donation:
    """
    Record a donation and assign its donation code.

    Args:
        received_by: User taking the donation
        donor_name: Donor's name as printed on the receipt
        donor_mobile: 10-digit mobile number
        type: One of ``cash``, ``upi``, ``in-kind``
        amount: Amount for monetary donations
        **extra: Other Donation fields (``donor_email``, ``event``, ...)

    Returns:
        Created Donation instance

    Raises:
        django.core.exceptions.ValidationError: If the fields are invalid
    """
    donation = Donation(
        received_by=received_by,
        donor_name=donor_name,
        donor_mobile=donor_mobile,
        type=type,
        amount=amount,
        **extra
    )
    donation.full_clean(exclude=['donation_code'])

    fields = {
        field.name: getattr(donation, field.name)
        for field in Donation._meta.concrete_fields
        if field.name not in ('id', 'donation_code', 'created_at', 'updated_at')
    }
    donation = create_with_code(Donation, code_field='donation_code', prefix='DON', **fields)
    logger.info("Recorded donation %s (%s %s)", donation.donation_code, donation.type, donation.amount)
    return donation
