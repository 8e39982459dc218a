import pytest
from apps.accounts.models import User


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='Priest@Temple.org',
        password='TestPass123!',
        display_name='Head Priest',
    )


@pytest.fixture
def user_without_name(db):
    """Create a user with no display name."""
    return User.objects.create_user(
        email='helper@temple.org',
        password='TestPass123!',
    )
