import uuid

import pytest

from apps.matches.models import Like, Match
from apps.matches.services import (
    like_user,
    get_match_for_participant,
    get_user_matches,
    CannotLikeSelfError,
    UserNotFoundError,
    MatchNotFoundError,
    NotMatchParticipantError,
)
from apps.safety.models import Block


@pytest.mark.django_db
class TestLikeUser:
    """Tests for like_user()."""

    def test_one_way_like_does_not_match(self, user, other_user):
        result = like_user(liker=user, liked_id=other_user.id)

        assert result.created is True
        assert result.matched is False
        assert not Match.objects.exists()

    def test_mutual_like_creates_ordered_match(self, user, other_user):
        like_user(liker=user, liked_id=other_user.id)
        result = like_user(liker=other_user, liked_id=user.id)

        assert result.matched is True
        match = result.match
        assert str(match.user_a_id) < str(match.user_b_id)
        assert {match.user_a_id, match.user_b_id} == {user.id, other_user.id}

    def test_repeat_like_is_noop(self, user, other_user):
        like_user(liker=user, liked_id=other_user.id)
        result = like_user(liker=user, liked_id=other_user.id)

        assert result.created is False
        assert Like.objects.count() == 1

    def test_repeat_mutual_like_keeps_single_match(self, user, other_user):
        like_user(liker=user, liked_id=other_user.id)
        like_user(liker=other_user, liked_id=user.id)
        like_user(liker=user, liked_id=other_user.id)

        assert Match.objects.count() == 1

    def test_cannot_like_self(self, user):
        with pytest.raises(CannotLikeSelfError):
            like_user(liker=user, liked_id=user.id)

    def test_unknown_user(self, user):
        with pytest.raises(UserNotFoundError):
            like_user(liker=user, liked_id=uuid.uuid4())


@pytest.mark.django_db
class TestMatchAccess:

    def test_participant_can_fetch(self, match, user):
        assert get_match_for_participant(match_id=match.id, user=user) == match

    def test_outsider_rejected(self, match, make_user):
        with pytest.raises(NotMatchParticipantError):
            get_match_for_participant(match_id=match.id, user=make_user())

    def test_unknown_match(self, user):
        with pytest.raises(MatchNotFoundError):
            get_match_for_participant(match_id=uuid.uuid4(), user=user)

    def test_invalid_match_id(self, user):
        with pytest.raises(MatchNotFoundError):
            get_match_for_participant(match_id='not-a-uuid', user=user)

    def test_blocked_matches_hidden(self, match, user, other_user):
        Block.objects.create(blocker=other_user, blocked=user)

        assert list(get_user_matches(user=user)) == []
