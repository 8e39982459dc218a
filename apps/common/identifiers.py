"""
Human-readable record codes.

Donations, expenses and funds carry a date-stamped sequence code next to
their UUID primary key, e.g. ``DON202610190001`` for the first donation
received on 19 October 2026.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone


def generate_code(prefix: str, count: int, today: Optional[date] = None) -> str:
    """
    Build a code from a prefix and the number of records already created today.

    Args:
        prefix: Record prefix (``FND``, ``DON``, ``EXP``)
        count: Records of this kind already created today
        today: Date to stamp (defaults to the current local date)

    Returns:
        Code in ``<PREFIX><YYYY><MM><DD><NNNN>`` form
    """
    today = today or timezone.localdate()
    return f"{prefix}{today:%Y%m%d}{count + 1:04d}"


def count_created_on(model, day: date) -> int:
    """Count ``model`` rows whose ``created_at`` falls on ``day`` (local time)."""
    start = timezone.make_aware(datetime.combine(day, time.min))
    end = start + timedelta(days=1)
    return model.objects.filter(created_at__gte=start, created_at__lt=end).count()


def create_with_code(model, *, code_field: str, prefix: str, max_retries: int = 5, **fields):
    """
    Create a ``model`` row with a fresh sequence code.

    Two creators racing on the same day compute the same code; the loser
    hits the unique constraint and retries with the next number.

    Raises:
        RuntimeError: If no unique code could be generated after retries
        IntegrityError: If the row violates a constraint other than the code
    """
    today = timezone.localdate()
    count = count_created_on(model, today)

    for attempt in range(max_retries):
        code = generate_code(prefix, count + attempt, today)

        try:
            with transaction.atomic():
                return model.objects.create(**{code_field: code}, **fields)
        except IntegrityError:
            if not model.objects.filter(**{code_field: code}).exists():
                raise
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique {prefix} code after {max_retries} attempts"
                )
