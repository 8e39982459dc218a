from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from decimal import Decimal
import uuid


class DonationType(models.TextChoices):
    CASH = 'cash', 'Cash'
    UPI = 'upi', 'UPI'
    IN_KIND = 'in-kind', 'In-kind'


class DonationStatus(models.TextChoices):
    RECEIVED = 'received', 'Received'
    PROCESSED = 'processed', 'Processed'
    USED = 'used', 'Used'


class DonationEvent(models.TextChoices):
    NEW_MOON = 'new-moon', 'New moon'
    FULL_MOON = 'full-moon', 'Full moon'
    GURU_POOJAI = 'guru-poojai', 'Guru poojai'
    UTHIRA_NAKSHATRAM = 'uthira-nakshatram', 'Uthira nakshatram'
    ADI_AMMAVASAI = 'adi-ammavasai', 'Adi ammavasai'
    ANADHANAM = 'anadhanam', 'Anadhanam'
    PRADOSHAM = 'pradosham', 'Pradosham'
    SHIVARATRI = 'shivaratri', 'Shivaratri'
    OTHER = 'other', 'Other'
    GENERAL = 'general', 'General'


MONETARY_TYPES = (DonationType.CASH, DonationType.UPI)

mobile_validator = RegexValidator(
    r'^[6-9]\d{9}$',
    'Please provide a valid 10-digit mobile number'
)


class Donation(models.Model):
    """Donation received at the temple (money or goods)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donation_code = models.CharField(max_length=20, unique=True, editable=False)

    # Donor
    donor_name = models.CharField(max_length=200)
    donor_mobile = models.CharField(max_length=10, validators=[mobile_validator])
    donor_email = models.EmailField(blank=True)
    donor_address = models.TextField(blank=True)

    # What was given
    type = models.CharField(max_length=10, choices=DonationType.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    upi_transaction_id = models.CharField(max_length=100, blank=True)

    event = models.CharField(max_length=30, choices=DonationEvent.choices, default=DonationEvent.GENERAL)
    remarks = models.TextField(blank=True)

    received_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='donations_received'
    )
    status = models.CharField(
        max_length=20,
        choices=DonationStatus.choices,
        default=DonationStatus.RECEIVED
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'donations'
        indexes = [
            models.Index(fields=['type', 'created_at'], name='donations_type_created_idx'),
            models.Index(fields=['status'], name='donations_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.donation_code} - {self.donor_name} ({self.type})"

    @property
    def is_monetary(self):
        return self.type in MONETARY_TYPES

    def clean(self):
        from django.core.exceptions import ValidationError

        if self.is_monetary and self.amount is None:
            raise ValidationError({'amount': 'Amount is required for cash and UPI donations'})
        if self.type == DonationType.UPI and not self.upi_transaction_id:
            raise ValidationError({'upi_transaction_id': 'UPI transaction ID is required'})
