import pytest
from apps.accounts.models import User, UserRole


@pytest.fixture
def volunteer(db):
    """Create a volunteer who records donations."""
    return User.objects.create_user(
        email='volunteer@temple.org',
        password='TestPass123!',
        display_name='Volunteer',
        role=UserRole.VOLUNTEER,
    )
