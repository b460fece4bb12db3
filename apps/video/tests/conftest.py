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


@pytest.fixture
def daily_settings(settings):
    settings.DAILY_API_KEY = 'test-daily-key'
    settings.DAILY_DOMAIN_NAME = 'rendeview'
    settings.DAILY_API_URL = 'https://api.daily.co/v1'
    return settings


@pytest.fixture
def daily_response():
    """Build a fake ``requests`` response for Daily.co."""
    from unittest.mock import Mock

    def _daily_response(status_code=200, json_data=None):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = json_data or {}
        response.text = ''
        return response
    return _daily_response


@pytest.fixture
def video_session(match, user, other_user):
    from apps.video.models import VideoSession
    return VideoSession.objects.create(match=match, caller=user, callee=other_user, max_duration_minutes=5)


@pytest.fixture
def stripe_settings(settings):
    settings.STRIPE_SECRET_KEY = 'sk_test_123'
    settings.APP_URL = 'https://app.rendeview.test'
    return settings


@pytest.fixture
def make_extension(video_session, user, other_user):
    """Factory for extension requests on the ``video_session`` fixture."""
    from datetime import timedelta

    from django.utils import timezone

    from apps.video.models import VideoSessionExtension

    def _make_extension(**overrides):
        fields = {
            'video_session': video_session,
            'initiator': user,
            'responder': other_user,
            'amount_cents': 800,
            'extension_seconds': 600,
            'expires_at': timezone.now() + timedelta(seconds=60),
        }
        fields.update(overrides)
        return VideoSessionExtension.objects.create(**fields)
    return _make_extension
