"""
Manually take money out of a fund (recorded as an adjustment).

Usage:
    python manage.py fund_debit general cash 200 --user admin@temple.org
"""

from .fund_credit import Command as CreditCommand


class Command(CreditCommand):
    help = 'Debit a fund with a manual adjustment'
    operation = 'debit'
