import pytest
from django.urls import reverse
from rest_framework import status

from apps.matches.models import Like, Match


@pytest.mark.django_db
class TestLikeAPI:
    """Tests for POST /api/matches/like/"""

    def test_like(self, authenticated_client, other_user):
        response = authenticated_client.post(
            reverse('matches:like'), {'userId': str(other_user.id)}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['matched'] is False

    def test_reciprocal_like_matches(self, authenticated_client, user, other_user):
        Like.objects.create(liker=other_user, liked=user)

        response = authenticated_client.post(
            reverse('matches:like'), {'userId': str(other_user.id)}, format='json'
        )

        assert response.data['matched'] is True
        assert response.data['matchId'] is not None

    def test_like_self(self, authenticated_client, user):
        response = authenticated_client.post(
            reverse('matches:like'), {'userId': str(user.id)}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_missing_user_id(self, authenticated_client):
        response = authenticated_client.post(reverse('matches:like'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_like_rate_limit(self, authenticated_client, user, other_user):
        from django.utils import timezone
        from apps.core.models import RateLimitEntry
        RateLimitEntry.objects.bulk_create([
            RateLimitEntry(user=user, endpoint='likes', created_at=timezone.now())
            for _ in range(100)
        ])

        response = authenticated_client.post(
            reverse('matches:like'), {'userId': str(other_user.id)}, format='json'
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response['X-RateLimit-Limit'] == '100'


@pytest.mark.django_db
class TestMatchListAPI:

    def test_lists_matches_with_other_user(self, authenticated_client, match, other_user):
        response = authenticated_client.get(reverse('matches:match-list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['matches']) == 1
        assert response.data['matches'][0]['other_user']['id'] == str(other_user.id)
        assert response.data['matches'][0]['has_video_call'] is False

    def test_list_is_paginated(self, authenticated_client, user, make_user):
        for _ in range(3):
            user_a, user_b = Match.ordered_pair(user, make_user())
            Match.objects.create(user_a=user_a, user_b=user_b)

        response = authenticated_client.get(reverse('matches:match-list'), {'page_size': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert len(response.data['matches']) == 2
        assert response.data['next'] is not None

        response = authenticated_client.get(response.data['next'])
        assert len(response.data['matches']) == 1
        assert response.data['previous'] is not None
