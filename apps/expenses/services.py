"""
Expense intake service.

Records bills with their ``EXP`` sequence code. Paying an expense out of a
fund is handled by the funds ledger (``allocate_expense``).
"""

import logging

from apps.common.identifiers import create_with_code

from .models import Expense

logger = logging.getLogger(__name__)


def record_expense(*, created_by, category, amount, description, vendor_name, bill_date,
                   payment_method, **extra) -> Expense:
    """
    Record an expense and assign its expense code.

    Returns:
        Created Expense instance (status ``pending``)

    Raises:
        django.core.exceptions.ValidationError: If the fields are invalid
    """
    expense = Expense(
        created_by=created_by,
        category=category,
        amount=amount,
        description=description,
        vendor_name=vendor_name,
        bill_date=bill_date,
        payment_method=payment_method,
        **extra
    )
    expense.full_clean(exclude=['expense_code'])

    fields = {
        field.name: getattr(expense, field.name)
        for field in Expense._meta.concrete_fields
        if field.name not in ('id', 'expense_code', 'created_at', 'updated_at')
    }
    expense = create_with_code(Expense, code_field='expense_code', prefix='EXP', **fields)
    logger.info("Recorded expense %s (%s)", expense.expense_code, expense.amount)
    return expense
