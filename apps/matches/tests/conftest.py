import itertools

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


_emails = itertools.count()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def make_user(db):
    """Factory for members with unique emails."""
    def _make_user(**extra):
        n = next(_emails)
        extra.setdefault('display_name', f'Member {n}')
        return User.objects.create_user(
            email=f'member{n}@example.com',
            password='TestPass123!',
            **extra
        )
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user(display_name='Test User')


@pytest.fixture
def other_user(make_user):
    return make_user(display_name='Other User')


@pytest.fixture
def admin_user(make_user):
    return make_user(display_name='Admin', is_staff=True)


@pytest.fixture
def client_for():
    """Return a function building a JWT-authenticated client for a user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def authenticated_client(client_for, user):
    return client_for(user)


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def match(user, other_user):
    from apps.matches.models import Match
    user_a, user_b = Match.ordered_pair(user, other_user)
    return Match.objects.create(user_a=user_a, user_b=user_b)
