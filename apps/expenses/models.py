from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class ExpenseCategory(models.TextChoices):
    COOKING_GAS_FUEL = 'cooking-gas-fuel', 'Cooking gas / fuel'
    LABOR_CHARGES = 'labor-charges', 'Labor charges'
    ELECTRICITY_BILL = 'electricity-bill', 'Electricity bill'
    MAINTENANCE = 'maintenance', 'Maintenance'
    OTHER_TEMPLE_EXPENSES = 'other-temple-expenses', 'Other temple expenses'
    WATER_BILL = 'water-bill', 'Water bill'
    FESTIVAL_EXPENSES = 'festival-expenses', 'Festival expenses'
    ANADHANAM_SUPPLIES = 'anadhanam-supplies', 'Anadhanam supplies'
    CLEANING_SUPPLIES = 'cleaning-supplies', 'Cleaning supplies'
    OTHER = 'other', 'Other'


class ExpensePaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    UPI = 'upi', 'UPI'
    BANK_TRANSFER = 'bank-transfer', 'Bank transfer'
    CHEQUE = 'cheque', 'Cheque'


class ExpenseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class Expense(models.Model):
    """Bill or payment the temple has to settle."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense_code = models.CharField(max_length=20, unique=True, editable=False)

    category = models.CharField(max_length=30, choices=ExpenseCategory.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.TextField()
    vendor_name = models.CharField(max_length=200)
    invoice_number = models.CharField(max_length=100, blank=True)
    bill_date = models.DateField()
    payment_method = models.CharField(max_length=20, choices=ExpensePaymentMethod.choices)

    status = models.CharField(
        max_length=20,
        choices=ExpenseStatus.choices,
        default=ExpenseStatus.PENDING
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='expenses_created'
    )

    # Fund allocation stamp (set when the expense is paid from a fund)
    allocated_fund = models.ForeignKey(
        'funds.Fund',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='allocated_expenses'
    )
    allocated_fund_category = models.CharField(max_length=20, blank=True)
    allocated_payment_method = models.CharField(max_length=10, blank=True)
    allocated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses_allocated'
    )
    allocated_at = models.DateTimeField(null=True, blank=True)

    remarks = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='expenses_status_created_idx'),
            models.Index(fields=['allocated_payment_method'], name='expenses_alloc_method_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.expense_code} - {self.description} ({self.amount})"

    @property
    def is_paid(self):
        return self.status == ExpenseStatus.PAID

    def mark_paid(self, *, fund, method, allocated_by):
        """Mark the expense paid from ``fund`` and stamp the allocation."""
        from django.utils import timezone

        self.status = ExpenseStatus.PAID
        self.allocated_fund = fund
        self.allocated_fund_category = fund.category
        self.allocated_payment_method = method
        self.allocated_by = allocated_by
        self.allocated_at = timezone.now()
        self.save(update_fields=[
            'status',
            'allocated_fund',
            'allocated_fund_category',
            'allocated_payment_method',
            'allocated_by',
            'allocated_at',
            'updated_at',
        ])
