"""Services for the fund ledger."""

from apps.funds.values import Balance, SourceRef

from .exceptions import (
    FundsServiceError,
    LedgerValidationError,
    SameFundTransferError,
    DonationNotEligibleError,
    DonationAlreadyProcessedError,
    ExpenseAlreadyPaidError,
    InsufficientFundsError,
    NotFoundError,
    FundNotFoundError,
    DonationNotFoundError,
    ExpenseNotFoundError,
    InvariantViolationError,
)
from .ledger import (
    FundLedger,
    TransferResult,
)
from .processing import (
    process_donation,
    allocate_expense,
    DonationProcessingResult,
    ExpenseAllocationResult,
)
from .reporting import (
    FundReports,
)
from .integrity import (
    replay_history,
    verify_fund,
    verify_all_funds,
    recompute_balance,
    FundVerification,
)

__all__ = [
    # Values
    'Balance',
    'SourceRef',
    # Exceptions
    'FundsServiceError',
    'LedgerValidationError',
    'SameFundTransferError',
    'DonationNotEligibleError',
    'DonationAlreadyProcessedError',
    'ExpenseAlreadyPaidError',
    'InsufficientFundsError',
    'NotFoundError',
    'FundNotFoundError',
    'DonationNotFoundError',
    'ExpenseNotFoundError',
    'InvariantViolationError',
    # Ledger
    'FundLedger',
    'TransferResult',
    # Processing
    'process_donation',
    'allocate_expense',
    'DonationProcessingResult',
    'ExpenseAllocationResult',
    # Reporting
    'FundReports',
    # Integrity
    'replay_history',
    'verify_fund',
    'verify_all_funds',
    'recompute_balance',
    'FundVerification',
]
