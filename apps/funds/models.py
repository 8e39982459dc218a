from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from decimal import Decimal
import uuid

from .values import Balance, SourceRef, SOURCE_TYPES


class FundCategory(models.TextChoices):
    GENERAL = 'general', 'General'
    MAINTENANCE = 'maintenance', 'Maintenance'
    FESTIVAL = 'festival', 'Festival'
    ANADHANAM = 'anadhanam', 'Anadhanam'
    CONSTRUCTION = 'construction', 'Construction'
    EMERGENCY = 'emergency', 'Emergency'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    UPI = 'upi', 'UPI'


class TransactionType(models.TextChoices):
    CREDIT = 'credit', 'Credit'
    DEBIT = 'debit', 'Debit'


class TransactionSource(models.TextChoices):
    DONATION = 'donation', 'Donation'
    EXPENSE = 'expense', 'Expense'
    TRANSFER = 'transfer', 'Transfer'
    ADJUSTMENT = 'adjustment', 'Adjustment'


class Fund(models.Model):
    """
    Monetary bucket for one category, holding cash and UPI sub-balances.

    Balances are only changed through ``FundLedger``; every change appends a
    ``FundTransaction``. Funds are never hard-deleted, only deactivated.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    fund_code = models.CharField(max_length=20, unique=True, editable=False)
    category = models.CharField(max_length=20, choices=FundCategory.choices, default=FundCategory.GENERAL)

    cash_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    upi_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    is_active = models.BooleanField(default=True)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='funds_created'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'funds'
        constraints = [
            models.UniqueConstraint(
                fields=['category'],
                condition=Q(is_active=True),
                name='funds_one_active_per_category',
            ),
            models.CheckConstraint(condition=Q(cash_balance__gte=0), name='funds_cash_non_negative'),
            models.CheckConstraint(condition=Q(upi_balance__gte=0), name='funds_upi_non_negative'),
            models.CheckConstraint(condition=Q(total_balance__gte=0), name='funds_total_non_negative'),
        ]
        indexes = [
            models.Index(fields=['category', 'is_active'], name='funds_category_active_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.fund_code} ({self.category}): {self.total_balance}"

    @property
    def balance(self) -> Balance:
        return Balance(cash=self.cash_balance, upi=self.upi_balance, total=self.total_balance)

    def set_balance(self, balance: Balance):
        self.cash_balance = balance.cash
        self.upi_balance = balance.upi
        self.total_balance = balance.total

    @property
    def last_transaction(self):
        return self.transactions.order_by('-sequence').first()

    def deactivate(self):
        """Soft-delete: the fund stops matching category lookups but keeps its history."""
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])

    def delete(self, *args, **kwargs):
        from .services.exceptions import InvariantViolationError

        raise InvariantViolationError(
            f"Fund {self.fund_code} cannot be deleted; deactivate it instead"
        )


class FundTransactionQuerySet(models.QuerySet):
    """Ledger entries are append-only; bulk rewrites are refused."""

    def update(self, **kwargs):
        from .services.exceptions import InvariantViolationError

        raise InvariantViolationError("Fund transactions cannot be modified")

    def delete(self):
        from .services.exceptions import InvariantViolationError

        raise InvariantViolationError("Fund transactions cannot be deleted")


class FundTransaction(models.Model):
    """Immutable ledger entry recording one credit or debit against a fund."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    fund = models.ForeignKey(Fund, on_delete=models.PROTECT, related_name='transactions')
    sequence = models.PositiveIntegerField()

    type = models.CharField(max_length=10, choices=TransactionType.choices)
    source = models.CharField(max_length=20, choices=TransactionSource.choices)
    source_id = models.UUIDField(null=True, blank=True)
    method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Balance snapshot right after this entry
    cash_after = models.DecimalField(max_digits=12, decimal_places=2)
    upi_after = models.DecimalField(max_digits=12, decimal_places=2)
    total_after = models.DecimalField(max_digits=12, decimal_places=2)

    description = models.TextField(blank=True)
    performed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='fund_transactions'
    )
    date = models.DateTimeField(default=timezone.now)

    objects = FundTransactionQuerySet.as_manager()

    class Meta:
        db_table = 'fund_transactions'
        constraints = [
            models.UniqueConstraint(fields=['fund', 'sequence'], name='fund_transactions_unique_sequence'),
            models.CheckConstraint(condition=Q(amount__gt=0), name='fund_transactions_amount_positive'),
        ]
        indexes = [
            models.Index(fields=['fund', 'date'], name='fund_tx_fund_date_idx'),
            models.Index(fields=['source', 'source_id'], name='fund_tx_source_idx'),
        ]
        ordering = ['fund', 'sequence']

    def __str__(self):
        return f"{self.fund.fund_code} #{self.sequence} {self.type} {self.method} {self.amount}"

    @property
    def balance_after(self) -> Balance:
        return Balance(cash=self.cash_after, upi=self.upi_after, total=self.total_after)

    @property
    def source_ref(self) -> SourceRef:
        return SourceRef(self.source, self.source_id)

    @property
    def source_type(self) -> str:
        return SOURCE_TYPES.get(self.source, '')

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.CREDIT else -self.amount

    def save(self, *args, **kwargs):
        from .services.exceptions import InvariantViolationError

        if not self._state.adding:
            raise InvariantViolationError(
                f"Transaction #{self.sequence} of {self.fund_id} is immutable"
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from .services.exceptions import InvariantViolationError

        raise InvariantViolationError("Fund transactions cannot be deleted")
