from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import User
from .models import Fund, FundCategory, FundTransaction, PaymentMethod, TransactionSource, TransactionType


# =============================================================================
# Input Serializers
# =============================================================================

class AmountField(serializers.DecimalField):
    """Positive money amount with at most two decimal places."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 12)
        kwargs.setdefault('decimal_places', 2)
        kwargs.setdefault('min_value', Decimal('0.01'))
        super().__init__(**kwargs)


class LedgerEntryInputSerializer(serializers.Serializer):
    """
    Validate a manual credit or debit.

    Fields:
        category (str): Fund category
        method (str): ``cash`` or ``upi``
        amount (Decimal): Positive amount
        description (str): Optional note, at least 3 characters
    """

    category = serializers.ChoiceField(choices=FundCategory.choices)
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    amount = AmountField()
    description = serializers.CharField(min_length=3, max_length=500, required=False)


class FundTransferInputSerializer(serializers.Serializer):
    """
    Validate a transfer between two category funds.

    Fields:
        from_category (str): Source fund category
        to_category (str): Destination fund category
        method (str): ``cash`` or ``upi``
        amount (Decimal): Positive amount
        description (str): Optional note, at least 3 characters
    """

    from_category = serializers.ChoiceField(choices=FundCategory.choices)
    to_category = serializers.ChoiceField(choices=FundCategory.choices)
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    amount = AmountField()
    description = serializers.CharField(min_length=3, max_length=500, required=False)

    def validate(self, attrs):
        if attrs['from_category'] == attrs['to_category']:
            raise serializers.ValidationError({
                'to_category': 'Cannot transfer to the same fund category'
            })
        return attrs


class CreateFundInputSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=FundCategory.choices)
    description = serializers.CharField(min_length=3, max_length=500, required=False)


class ExpenseAllocationInputSerializer(serializers.Serializer):
    fund_category = serializers.ChoiceField(choices=FundCategory.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)


class FundReportFilterSerializer(serializers.Serializer):
    """
    Validate report filters.

    Fields:
        start_date (date): Include records created on or after this day
        end_date (date): Include records created on or before this day
        category (str): Only this fund category
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    category = serializers.ChoiceField(choices=FundCategory.choices, required=False)

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class BalanceSerializer(serializers.Serializer):
    cash = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    upi = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class FundSerializer(serializers.ModelSerializer):
    """Fund with its current balance."""

    balance = BalanceSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Fund
        fields = [
            'id',
            'fund_code',
            'category',
            'balance',
            'is_active',
            'description',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class FundTransactionSerializer(serializers.ModelSerializer):
    """One ledger entry with its balance snapshot."""

    fund_code = serializers.CharField(source='fund.fund_code', read_only=True)
    type = serializers.ChoiceField(choices=TransactionType.choices, read_only=True)
    source = serializers.ChoiceField(choices=TransactionSource.choices, read_only=True)
    source_type = serializers.CharField(read_only=True)
    balance_after = BalanceSerializer(read_only=True)
    performed_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = FundTransaction
        fields = [
            'id',
            'fund_code',
            'sequence',
            'type',
            'source',
            'source_type',
            'source_id',
            'method',
            'amount',
            'balance_after',
            'description',
            'performed_by',
            'date',
        ]
        read_only_fields = fields
