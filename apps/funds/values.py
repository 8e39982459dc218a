"""
Value types shared by the funds models and the ledger service.

``Balance`` is the (cash, upi, total) triple stored on a fund and snapshotted
on every transaction. ``SourceRef`` is the tagged reference from a ledger
entry to the business event that caused it.
"""

from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional
from uuid import UUID

CENT = Decimal('0.01')
ZERO = Decimal('0.00')
# Largest value a DecimalField(max_digits=12, decimal_places=2) column holds.
MAX_AMOUNT = Decimal('9999999999.99')


def to_amount(value) -> Decimal:
    """
    Coerce ``value`` to a two-decimal ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal('0.10')`` rather
    than its binary expansion.

    Raises:
        ValueError: If the value is not a finite number with at most
            two decimal places that fits in a balance column
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount {value} exceeds the maximum of {MAX_AMOUNT}")
    quantized = amount.quantize(CENT)
    if amount != quantized:
        raise ValueError(f"Amount {value} has more than two decimal places")
    return quantized


class Balance(NamedTuple):
    """Fund balance; ``total`` is always ``cash + upi``."""

    cash: Decimal = ZERO
    upi: Decimal = ZERO
    total: Decimal = ZERO

    @classmethod
    def of(cls, cash, upi) -> 'Balance':
        cash, upi = to_amount(cash), to_amount(upi)
        return cls(cash=cash, upi=upi, total=to_amount(cash + upi))

    @property
    def is_consistent(self) -> bool:
        return self.total == self.cash + self.upi

    def get(self, method: str) -> Decimal:
        if method == 'cash':
            return self.cash
        if method == 'upi':
            return self.upi
        raise ValueError(f"Unknown payment method: {method!r}")

    def apply(self, method: str, delta: Decimal) -> 'Balance':
        """Return a new balance with ``delta`` added to the ``method`` side."""
        if method == 'cash':
            return Balance.of(self.cash + delta, self.upi)
        if method == 'upi':
            return Balance.of(self.cash, self.upi + delta)
        raise ValueError(f"Unknown payment method: {method!r}")

    def as_dict(self) -> dict:
        return {'cash': self.cash, 'upi': self.upi, 'total': self.total}


class SourceRef(NamedTuple):
    """
    What caused a ledger entry.

    ``kind`` is one of ``donation``, ``expense``, ``transfer`` or
    ``adjustment``; ``id`` is the Donation, Expense or counterpart Fund id
    (``None`` for adjustments).
    """

    kind: str
    id: Optional[UUID] = None

    @classmethod
    def donation(cls, donation) -> 'SourceRef':
        return cls('donation', donation.pk)

    @classmethod
    def expense(cls, expense) -> 'SourceRef':
        return cls('expense', expense.pk)

    @classmethod
    def transfer(cls, counterpart_fund) -> 'SourceRef':
        return cls('transfer', counterpart_fund.pk)

    @classmethod
    def adjustment(cls) -> 'SourceRef':
        return cls('adjustment', None)

    @property
    def source_type(self) -> str:
        """Model name the ``id`` points to."""
        return SOURCE_TYPES[self.kind]


SOURCE_TYPES = {
    'donation': 'Donation',
    'expense': 'Expense',
    'transfer': 'Fund',
    'adjustment': '',
}
