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
def match_client(client_for, user):
    """Client for ``user``, a participant of ``match``."""
    return client_for(user)


@pytest.fixture
def credits_for():
    """Give a member a credit balance."""
    from apps.messaging.models import MessageCredits

    def _credits_for(user, amount):
        return MessageCredits.objects.create(user=user, credits_remaining=amount, total_purchased=amount)
    return _credits_for


@pytest.fixture
def age_match():
    """Move a match's creation time into the past."""
    from datetime import timedelta
    from django.utils import timezone
    from apps.matches.models import Match

    def _age_match(match, days):
        Match.objects.filter(pk=match.pk).update(created_at=timezone.now() - timedelta(days=days))
        match.refresh_from_db()
        return match
    return _age_match


@pytest.fixture
def mark_video_call():
    """Record that a match's members have met on video."""
    from django.utils import timezone

    def _mark_video_call(match):
        now = timezone.now()
        match.first_video_call_at = now
        match.last_video_call_at = now
        match.video_call_count = 1
        match.save()
        return match
    return _mark_video_call
