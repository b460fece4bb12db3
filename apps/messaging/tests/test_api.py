import uuid
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status

from apps.messaging.models import MatchDailyMessageCount, Message
from apps.messaging.services.quota import today
from apps.safety.models import Block


@pytest.mark.django_db
class TestConversationAPI:
    """Tests for /api/messages/<matchId>/"""

    def test_requires_auth(self, api_client, match):
        response = api_client.get(reverse('messaging:conversation', args=[match.id]))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_send_and_list(self, authenticated_client, match):
        url = reverse('messaging:conversation', args=[match.id])

        response = authenticated_client.post(url, {'body': 'Hi! Fancy a call tonight?'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['usedCredit'] is False
        assert response.data['message']['body'] == 'Hi! Fancy a call tonight?'

        response = authenticated_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['messages']) == 1

    def test_empty_body(self, authenticated_client, match):
        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]), {'body': '   '}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_too_long(self, authenticated_client, match):
        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]), {'body': 'a' * 281}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_contact_details_rejected(self, authenticated_client, match):
        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]),
            {'body': 'email me: jane.doe@example.com'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Message.objects.exists()

    def test_unknown_match(self, authenticated_client):
        response = authenticated_client.post(
            reverse('messaging:conversation', args=[uuid.uuid4()]), {'body': 'Hello'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_non_participant(self, client_for, make_user, match):
        client = client_for(make_user())

        response = client.get(reverse('messaging:conversation', args=[match.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_blocked(self, authenticated_client, match, user, other_user):
        Block.objects.create(blocker=user, blocked=other_user)

        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]), {'body': 'Hello'}, format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_quota_exceeded(self, authenticated_client, match, user):
        MatchDailyMessageCount.objects.create(match=match, user=user, date=today(), messages_sent=10)

        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]), {'body': 'Hello'}, format='json'
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data['quotaExceeded'] is True
        assert response.data['reason'] == 'pre_video_limit'
        assert response.data['messagesAllowed'] == 10
        assert response.data['isDecay'] is False
        assert response.data['hasCompletedVideo'] is False
        assert response.data['tier'] == 'free'

    def test_credit_used(self, authenticated_client, match, user, credits_for):
        MatchDailyMessageCount.objects.create(match=match, user=user, date=today(), messages_sent=10)
        credits_for(user, 1)

        response = authenticated_client.post(
            reverse('messaging:conversation', args=[match.id]), {'body': 'Hello'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['usedCredit'] is True
        assert response.data['creditsRemaining'] == 0


@pytest.mark.django_db
class TestQuotaAPI:
    """Tests for /api/messages/quota/"""

    def test_quota(self, authenticated_client, match):
        response = authenticated_client.get(reverse('messaging:quota'), {'matchId': str(match.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['canSend'] is True
        assert response.data['perMatch']['limit'] == 10
        assert response.data['dailyTier']['limit'] == 15
        assert 'resetsAt' in response.data['dailyTier']

    def test_missing_match_id(self, authenticated_client):
        response = authenticated_client.get(reverse('messaging:quota'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_match(self, authenticated_client):
        response = authenticated_client.get(reverse('messaging:quota'), {'matchId': str(uuid.uuid4())})

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCreditPurchaseAPI:
    """Tests for /api/messages/credits/purchase/"""

    def test_get_offer(self, authenticated_client):
        response = authenticated_client.get(reverse('messaging:credit-purchase'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pricingTier'] == 'STANDARD'
        assert len(response.data['packs']) == 3

    def test_invalid_pack(self, authenticated_client):
        response = authenticated_client.post(
            reverse('messaging:credit-purchase'), {'pack': 'PACK_HUGE'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @patch('apps.payments.stripe_gateway.create_checkout_session')
    @patch('apps.payments.stripe_gateway.ensure_customer')
    def test_post_returns_checkout_url(self, mock_customer, mock_session, authenticated_client):
        mock_customer.return_value = 'cus_123'
        mock_session.return_value = {'id': 'cs_api_1', 'url': 'https://checkout.stripe.com/pay/cs_api_1'}

        response = authenticated_client.post(
            reverse('messaging:credit-purchase'), {'pack': 'PACK_SMALL'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['url'] == 'https://checkout.stripe.com/pay/cs_api_1'
        assert response.data['credits'] == 20

    def test_feature_disabled(self, authenticated_client, monkeypatch):
        monkeypatch.setenv('FEATURE_FLAG_MESSAGE_CREDITS', 'false')

        response = authenticated_client.get(reverse('messaging:credit-purchase'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
