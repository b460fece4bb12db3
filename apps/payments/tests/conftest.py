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
def stripe_settings(settings):
    settings.STRIPE_SECRET_KEY = 'sk_test_123'
    settings.STRIPE_WEBHOOK_SECRET = 'whsec_test_123'
    settings.APP_URL = 'https://app.rendeview.test'
    return settings


@pytest.fixture
def subscriber(make_user):
    """Business member with an active Stripe subscription."""
    return make_user(
        display_name='Subscriber',
        membership_tier='business',
        subscription_status='active',
        stripe_customer_id='cus_test_1',
    )


@pytest.fixture
def stripe_subscription():
    """Factory for Stripe subscription payloads."""
    def _stripe_subscription(**overrides):
        subscription = {
            'id': 'sub_test_1',
            'customer': 'cus_test_1',
            'status': 'active',
            'created': 1767225600,
            'cancel_at_period_end': False,
            'current_period_start': 1767225600,
            'current_period_end': 1769904000,
            'metadata': {},
            'items': {'data': [{
                'price': {'id': 'price_business', 'product': 'prod_membership'},
                'quantity': 1,
            }]},
        }
        subscription.update(overrides)
        return subscription
    return _stripe_subscription


@pytest.fixture
def stripe_event():
    """Factory for webhook events."""
    def _stripe_event(event_type, obj, event_id='evt_test_1'):
        return {'id': event_id, 'type': event_type, 'data': {'object': obj}}
    return _stripe_event
