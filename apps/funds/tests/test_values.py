import pytest
from decimal import Decimal
from uuid import uuid4

from apps.funds.values import MAX_AMOUNT, Balance, SourceRef, to_amount


class TestToAmount:
    """Tests for to_amount."""

    @pytest.mark.parametrize('value, expected', [
        ('10', Decimal('10.00')),
        (10, Decimal('10.00')),
        (0.1, Decimal('0.10')),
        (Decimal('3.5'), Decimal('3.50')),
        ('-2.25', Decimal('-2.25')),
    ])
    def test_valid(self, value, expected):
        amount = to_amount(value)

        assert amount == expected
        assert amount.as_tuple().exponent == -2

    @pytest.mark.parametrize('value', [
        '1.001', 'abc', None, 'Infinity', 'NaN', 0.125, True, False,
        Decimal('1e30'), '10000000000', '-10000000000',
    ])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            to_amount(value)


class TestBalance:
    """Tests for the Balance value type."""

    def test_of_computes_total(self):
        balance = Balance.of('100.50', '20')

        assert balance == (Decimal('100.50'), Decimal('20.00'), Decimal('120.50'))
        assert balance.is_consistent

    def test_apply_returns_new_balance(self):
        balance = Balance.of('100', '50')

        after = balance.apply('upi', Decimal('-20'))

        assert after == Balance.of('100', '30')
        assert balance.upi == Decimal('50.00')

    def test_get_and_unknown_method(self):
        balance = Balance.of('1', '2')

        assert balance.get('cash') == Decimal('1.00')
        assert balance.get('upi') == Decimal('2.00')
        with pytest.raises(ValueError):
            balance.get('cheque')
        with pytest.raises(ValueError):
            balance.apply('cheque', Decimal('1'))

    def test_limit_accepted(self):
        assert to_amount(MAX_AMOUNT) == Decimal('9999999999.99')

    def test_total_past_limit_rejected(self):
        with pytest.raises(ValueError):
            Balance.of(MAX_AMOUNT, '0.01')
        with pytest.raises(ValueError):
            Balance.of(MAX_AMOUNT, '0').apply('cash', Decimal('0.01'))

    def test_inconsistent_balance(self):
        assert not Balance(Decimal('1'), Decimal('1'), Decimal('3')).is_consistent

    def test_as_dict(self):
        assert Balance.of('1', '2').as_dict() == {
            'cash': Decimal('1.00'),
            'upi': Decimal('2.00'),
            'total': Decimal('3.00'),
        }


class TestSourceRef:
    """Tests for SourceRef."""

    def test_adjustment_has_no_target(self):
        ref = SourceRef.adjustment()

        assert ref.kind == 'adjustment'
        assert ref.id is None
        assert ref.source_type == ''

    def test_transfer_points_at_fund(self):
        class FakeFund:
            pk = uuid4()

        ref = SourceRef.transfer(FakeFund)

        assert ref == ('transfer', FakeFund.pk)
        assert ref.source_type == 'Fund'
