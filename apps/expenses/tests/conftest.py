import pytest
from apps.accounts.models import User, UserRole


@pytest.fixture
def manager(db):
    """Create a manager who records expenses."""
    return User.objects.create_user(
        email='manager@temple.org',
        password='TestPass123!',
        display_name='Manager',
        role=UserRole.MANAGER,
    )
