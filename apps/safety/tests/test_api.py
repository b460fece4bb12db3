import uuid

import pytest
from django.urls import reverse
from rest_framework import status

from apps.core.models import RateLimitEntry
from apps.safety.models import Block, SafetyReport


@pytest.mark.django_db
class TestBlockersAPI:
    """Tests for /api/blockers/"""

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('safety:blockers'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_block_and_list(self, authenticated_client, other_user):
        url = reverse('safety:blockers')
        response = authenticated_client.post(url, {'blockedId': str(other_user.id)}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['blockCount'] == 1

        response = authenticated_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['blockers'][0]['blocked']['id'] == str(other_user.id)

    def test_block_missing_id(self, authenticated_client):
        response = authenticated_client.post(reverse('safety:blockers'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_block_self(self, authenticated_client, user):
        response = authenticated_client.post(
            reverse('safety:blockers'), {'blockedId': str(user.id)}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_block_unknown_user(self, authenticated_client):
        response = authenticated_client.post(
            reverse('safety:blockers'), {'blockedId': str(uuid.uuid4())}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_block_rate_limited(self, authenticated_client, user, other_user):
        from django.utils import timezone
        RateLimitEntry.objects.bulk_create([
            RateLimitEntry(user=user, endpoint='blockers', created_at=timezone.now())
            for _ in range(20)
        ])

        response = authenticated_client.post(
            reverse('safety:blockers'), {'blockedId': str(other_user.id)}, format='json'
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response['X-RateLimit-Limit'] == '20'
        assert response['X-RateLimit-Remaining'] == '0'
        assert 'X-RateLimit-Reset' in response
        assert response.data['retryAfter'] > 0
        assert 'Too many' in response.data['error']
        assert not Block.objects.exists()

    def test_patch_notes(self, authenticated_client, user, other_user):
        Block.objects.create(blocker=user, blocked=other_user)

        response = authenticated_client.patch(
            reverse('safety:blockers'),
            {'blockedId': str(other_user.id), 'notes': 'met at party'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notes'] == 'met at party'

    def test_delete_by_query_param(self, authenticated_client, user, other_user):
        Block.objects.create(blocker=user, blocked=other_user)

        url = f"{reverse('safety:blockers')}?blockedId={other_user.id}"
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Block.objects.exists()


@pytest.mark.django_db
class TestSafetyReportsAPI:
    """Tests for /api/safety-reports/"""

    def test_file_report(self, authenticated_client, other_user):
        response = authenticated_client.post(
            reverse('safety:safety-reports'),
            {'reportedUserId': str(other_user.id), 'reason': 'Inappropriate behaviour'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert SafetyReport.objects.filter(id=response.data['reportId']).exists()

    def test_reason_required(self, authenticated_client, other_user):
        response = authenticated_client.post(
            reverse('safety:safety-reports'),
            {'reportedUserId': str(other_user.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_feature_disabled(self, authenticated_client, other_user, monkeypatch):
        monkeypatch.setenv('FEATURE_FLAG_SAFETY_REPORTS', 'false')

        response = authenticated_client.post(
            reverse('safety:safety-reports'),
            {'reportedUserId': str(other_user.id), 'reason': 'x'},
            format='json',
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['error'] == 'This feature is currently unavailable'

    def test_list_requires_admin(self, authenticated_client):
        response = authenticated_client.get(reverse('safety:safety-reports'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_lists_pending(self, admin_client, user, other_user):
        SafetyReport.objects.create(reporter=user, reported_user=other_user, reason='spam')
        SafetyReport.objects.create(reporter=user, reported_user=other_user, reason='old', status='resolved')

        response = admin_client.get(reverse('safety:safety-reports'))

        assert response.status_code == status.HTTP_200_OK
        assert [r['reason'] for r in response.data['reports']] == ['spam']

    def test_admin_bans(self, admin_client, user, other_user):
        report = SafetyReport.objects.create(reporter=user, reported_user=other_user, reason='abuse')

        response = admin_client.patch(
            reverse('safety:safety-report-review', args=[report.id]),
            {'action': 'ban'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['action'] == 'banned'
        other_user.refresh_from_db()
        assert other_user.account_status == 'banned'

    def test_review_unknown_report(self, admin_client):
        response = admin_client.patch(
            reverse('safety:safety-report-review', args=[uuid.uuid4()]),
            {'action': 'resolve'},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestModerationAPI:

    def test_flagged_users(self, admin_client, make_user):
        flagged = make_user(flagged_for_admin=True, block_count=3)
        make_user()

        response = admin_client.get(reverse('safety:flagged-users'))

        assert response.status_code == status.HTTP_200_OK
        assert [u['id'] for u in response.data['users']] == [str(flagged.id)]

    def test_clear_flag(self, admin_client, make_user):
        flagged = make_user(flagged_for_admin=True, block_count=3)

        response = admin_client.post(
            reverse('safety:clear-flag'), {'userId': str(flagged.id)}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['flagged_for_admin'] is False

    def test_non_admin_forbidden(self, authenticated_client):
        response = authenticated_client.get(reverse('safety:flagged-users'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
