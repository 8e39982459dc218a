import pytest
from datetime import date
from decimal import Decimal
from apps.accounts.models import User, UserRole
from apps.donations.services import record_donation
from apps.expenses.services import record_expense
from apps.funds.services import FundLedger, SourceRef


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def admin_user(db):
    """Create the temple admin who performs ledger operations."""
    return User.objects.create_user(
        email='admin@temple.org',
        password='TestPass123!',
        display_name='Temple Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def volunteer(db):
    """Create a volunteer who records donations."""
    return User.objects.create_user(
        email='volunteer@temple.org',
        password='TestPass123!',
        display_name='Volunteer',
        role=UserRole.VOLUNTEER,
    )


# =============================================================================
# Funds
# =============================================================================

@pytest.fixture
def ledger():
    """Return a ledger service instance."""
    return FundLedger()


@pytest.fixture
def general_fund(ledger, admin_user):
    """Create an empty general fund."""
    return ledger.find_or_create_fund('general', admin_user)


@pytest.fixture
def funded_general(ledger, general_fund, admin_user):
    """General fund holding cash 5000.00 and upi 2000.00."""
    ledger.credit(general_fund, 'cash', Decimal('5000'), SourceRef.adjustment(), admin_user, 'Opening cash')
    ledger.credit(general_fund, 'upi', Decimal('2000'), SourceRef.adjustment(), admin_user, 'Opening upi')
    return general_fund


# =============================================================================
# Donations and expenses
# =============================================================================

@pytest.fixture
def cash_donation(volunteer):
    """Cash donation of 5000.00 waiting to be processed."""
    return record_donation(
        received_by=volunteer,
        donor_name='Ravi Kumar',
        donor_mobile='9876543210',
        type='cash',
        amount=Decimal('5000.00'),
    )


@pytest.fixture
def upi_donation(volunteer):
    """UPI donation of 1500.00 waiting to be processed."""
    return record_donation(
        received_by=volunteer,
        donor_name='Lakshmi',
        donor_mobile='9123456780',
        type='upi',
        amount=Decimal('1500.00'),
        upi_transaction_id='UPI-REF-001',
    )


@pytest.fixture
def in_kind_donation(volunteer):
    """Donation of goods; it carries no amount."""
    return record_donation(
        received_by=volunteer,
        donor_name='Murugan Stores',
        donor_mobile='9000000001',
        type='in-kind',
        remarks='10 kg rice',
    )


@pytest.fixture
def pending_expense(admin_user):
    """Pending electricity bill of 1200.00."""
    return record_expense(
        created_by=admin_user,
        category='electricity-bill',
        amount=Decimal('1200.00'),
        description='October electricity',
        vendor_name='TNEB',
        bill_date=date(2026, 10, 1),
        payment_method='cash',
    )
