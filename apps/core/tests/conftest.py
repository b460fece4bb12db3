import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a regular member."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Member',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a platform admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        display_name='Admin',
        is_staff=True,
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def authenticated_client(user):
    """Return an API client authenticated as the regular member."""
    return _client_for(user)


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the admin."""
    return _client_for(admin_user)
