"""
Tests for core services.

Covers:
- Sliding-window rate limiting
- Idempotency key compare-and-store
- Admin settings defaults and overrides
- Feature flag parsing
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.feature_flags import Feature, is_feature_enabled
from apps.core.models import IdempotencyKey, RateLimitEntry
from apps.core.services import (
    RateLimitRule,
    RateLimits,
    check_rate_limit,
    get_cached_response,
    store_response,
    purge_expired_keys,
    get_pricing,
    get_setting,
    update_settings,
    InvalidSettingError,
)


TEST_RULE = RateLimitRule(
    endpoint='test_endpoint',
    max_requests=3,
    window=timedelta(minutes=60),
    label='test',
)


@pytest.mark.django_db
class TestRateLimiting:
    """Tests for check_rate_limit()."""

    def test_allows_until_limit(self, user):
        results = [check_rate_limit(user_id=user.id, rule=TEST_RULE) for _ in range(3)]

        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == [2, 1, 0]

    def test_denies_over_limit(self, user):
        for _ in range(3):
            check_rate_limit(user_id=user.id, rule=TEST_RULE)

        result = check_rate_limit(user_id=user.id, rule=TEST_RULE)

        assert result.allowed is False
        assert result.remaining == 0
        assert 'Too many' in result.message
        # Denied requests are not recorded
        assert RateLimitEntry.objects.filter(user=user, endpoint='test_endpoint').count() == 3

    def test_reset_at_is_oldest_entry_plus_window(self, user):
        oldest = timezone.now() - timedelta(minutes=50)
        RateLimitEntry.objects.create(user=user, endpoint='test_endpoint', created_at=oldest)
        check_rate_limit(user_id=user.id, rule=TEST_RULE)
        check_rate_limit(user_id=user.id, rule=TEST_RULE)

        result = check_rate_limit(user_id=user.id, rule=TEST_RULE)

        assert result.allowed is False
        assert result.reset_at == oldest + TEST_RULE.window
        assert 0 < result.retry_after_seconds <= 10 * 60

    def test_entries_outside_window_are_pruned(self, user):
        old = timezone.now() - timedelta(minutes=61)
        for _ in range(3):
            RateLimitEntry.objects.create(user=user, endpoint='test_endpoint', created_at=old)

        result = check_rate_limit(user_id=user.id, rule=TEST_RULE)

        assert result.allowed is True
        assert RateLimitEntry.objects.filter(user=user, endpoint='test_endpoint').count() == 1

    def test_limits_are_per_endpoint(self, user):
        for _ in range(3):
            check_rate_limit(user_id=user.id, rule=TEST_RULE)

        assert check_rate_limit(user_id=user.id, rule=RateLimits.LIKES).allowed is True

    def test_configured_limits(self):
        assert RateLimits.VIDEO_ROOM_CREATE.max_requests == 10
        assert RateLimits.BLOCKERS.max_requests == 20
        assert RateLimits.LIKES.max_requests == 100


@pytest.mark.django_db
class TestIdempotency:
    """Tests for idempotency key storage."""

    def test_store_then_replay(self, user):
        store_response(key='abc', user_id=user.id, response_body={'url': 'u'}, status_code=200)

        record = get_cached_response(key='abc', user_id=user.id)

        assert record.response_body == {'url': 'u'}
        assert record.status_code == 200

    def test_first_writer_wins(self, user):
        store_response(key='abc', user_id=user.id, response_body={'n': 1}, status_code=200)
        record = store_response(key='abc', user_id=user.id, response_body={'n': 2}, status_code=200)

        assert record.response_body == {'n': 1}
        assert IdempotencyKey.objects.count() == 1

    def test_other_users_key_is_ignored(self, user, admin_user):
        store_response(key='abc', user_id=user.id, response_body={}, status_code=200)

        assert get_cached_response(key='abc', user_id=admin_user.id) is None

    def test_same_key_is_scoped_per_user(self, user, admin_user):
        store_response(key='abc', user_id=user.id, response_body={'id': 'cs_user'}, status_code=200)

        record = store_response(key='abc', user_id=admin_user.id, response_body={'id': 'cs_admin'}, status_code=200)

        assert record.response_body == {'id': 'cs_admin'}
        assert get_cached_response(key='abc', user_id=user.id).response_body == {'id': 'cs_user'}
        assert IdempotencyKey.objects.filter(key='abc').count() == 2

    def test_expired_key_is_dropped(self, user):
        record = store_response(key='abc', user_id=user.id, response_body={}, status_code=200)
        IdempotencyKey.objects.filter(id=record.id).update(expires_at=timezone.now() - timedelta(seconds=1))

        assert get_cached_response(key='abc', user_id=user.id) is None
        assert not IdempotencyKey.objects.exists()

    def test_purge_expired_keys(self, user):
        store_response(key='old', user_id=user.id, response_body={}, status_code=200)
        store_response(key='new', user_id=user.id, response_body={}, status_code=200)
        IdempotencyKey.objects.filter(key='old').update(expires_at=timezone.now() - timedelta(hours=1))

        assert purge_expired_keys() == 1
        assert list(IdempotencyKey.objects.values_list('key', flat=True)) == ['new']


@pytest.mark.django_db
class TestAdminSettings:
    """Tests for pricing settings."""

    def test_default_pricing(self):
        pricing = get_pricing()

        assert pricing['tiers']['casual'] == {'minutes': 15, 'price_cents': 999}
        assert pricing['tiers']['business']['price_cents'] == 4999
        assert pricing['extension_cents'] == 800
        assert pricing['second_date_cents'] == 1000

    def test_override_merges_with_defaults(self, admin_user):
        update_settings(
            updates={'pricing': {'tiers': {'dating': {'price_cents': 2499}}}},
            updated_by=admin_user,
        )

        pricing = get_pricing()
        assert pricing['tiers']['dating'] == {'minutes': 25, 'price_cents': 2499}
        assert pricing['tiers']['casual']['price_cents'] == 999

    def test_unknown_key_rejected(self, admin_user):
        with pytest.raises(InvalidSettingError):
            update_settings(updates={'nope': {}}, updated_by=admin_user)

        with pytest.raises(InvalidSettingError):
            get_setting('nope')


class TestFeatureFlags:
    """Tests for FEATURE_FLAG_* parsing."""

    def test_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv('FEATURE_FLAG_PAYMENT_CHECKOUT', raising=False)
        assert is_feature_enabled(Feature.PAYMENT_CHECKOUT) is True

    @pytest.mark.parametrize('value', ['false', 'FALSE', '0'])
    def test_disabled_values(self, monkeypatch, value):
        monkeypatch.setenv('FEATURE_FLAG_VIDEO_CALLS', value)
        assert is_feature_enabled(Feature.VIDEO_CALLS) is False

    def test_other_values_enable(self, monkeypatch):
        monkeypatch.setenv('FEATURE_FLAG_VIDEO_CALLS', 'yes')
        assert is_feature_enabled(Feature.VIDEO_CALLS) is True
