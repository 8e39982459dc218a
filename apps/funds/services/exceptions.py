"""
Domain exceptions for the funds ledger.

These exceptions represent business rule violations raised by the services
layer. Callers (management commands, other apps) catch them and turn them
into user-facing messages.

Exception Hierarchy:
    FundsServiceError (base)
    ├── LedgerValidationError
    │   ├── SameFundTransferError
    │   ├── DonationNotEligibleError
    │   ├── DonationAlreadyProcessedError
    │   └── ExpenseAlreadyPaidError
    ├── InsufficientFundsError
    ├── NotFoundError
    │   ├── FundNotFoundError
    │   ├── DonationNotFoundError
    │   └── ExpenseNotFoundError
    └── InvariantViolationError
"""

from decimal import Decimal


class FundsServiceError(Exception):
    """Base exception for all funds service errors."""
    pass


class LedgerValidationError(FundsServiceError):
    """Raised for malformed input (non-positive amount, unknown method or category)."""
    pass


class SameFundTransferError(LedgerValidationError):
    """Raised when a transfer names the same category on both sides."""
    pass


class DonationNotEligibleError(LedgerValidationError):
    """Raised when a donation is not a positive cash or UPI donation."""
    pass


class DonationAlreadyProcessedError(LedgerValidationError):
    """Raised when a donation has already been credited to a fund."""
    pass


class ExpenseAlreadyPaidError(LedgerValidationError):
    """Raised when an expense has already been paid."""
    pass


class InsufficientFundsError(FundsServiceError):
    """
    Raised when a debit exceeds the available sub-balance.

    Carries the figures so callers can show them to the user:

        try:
            ledger.debit(fund, 'cash', Decimal('5000'), ...)
        except InsufficientFundsError as e:
            print(e.available, e.required)
    """

    def __init__(self, method: str, available: Decimal, required: Decimal, symbol: str = '₹'):
        self.method = method
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient {method} funds. "
            f"Available: {symbol}{available}, Required: {symbol}{required}"
        )


class NotFoundError(FundsServiceError):
    """Base for missing funds, donations and expenses."""
    pass


class FundNotFoundError(NotFoundError):
    """Raised when no active fund exists for a category."""
    pass


class DonationNotFoundError(NotFoundError):
    """Raised when a donation does not exist."""
    pass


class ExpenseNotFoundError(NotFoundError):
    """Raised when an expense does not exist."""
    pass


class InvariantViolationError(FundsServiceError):
    """
    Raised when ledger state contradicts itself.

    Examples: ``total != cash + upi``, a persisted balance that differs from
    the snapshot just written, or an attempt to rewrite history. Never
    recovered by silently overwriting transactions.
    """
    pass
