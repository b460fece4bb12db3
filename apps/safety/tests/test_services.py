"""
Tests for safety services.

Covers:
- Strike counting and escalation thresholds
- Duplicate blocks
- Safety reports and admin review
"""
import uuid

import pytest

from apps.accounts.models import AccountStatus
from apps.safety.models import Block, ReportStatus
from apps.safety.services import (
    block_user,
    unblock_user,
    update_block_notes,
    blocked_user_ids,
    is_blocked_between,
    create_report,
    review_report,
    clear_flag,
    InvalidBlockTargetError,
    InvalidReportError,
    UserNotFoundError,
    BlockNotFoundError,
    InvalidModerationActionError,
)


@pytest.mark.django_db
class TestBlockUser:
    """Tests for block_user()."""

    def test_block_increments_count(self, user, other_user):
        result = block_user(blocker=user, blocked_id=other_user.id)

        assert result.created is True
        assert result.block_count == 1
        assert result.warning is None
        other_user.refresh_from_db()
        assert other_user.block_count == 1

    def test_duplicate_block_does_not_double_count(self, user, other_user):
        block_user(blocker=user, blocked_id=other_user.id)
        result = block_user(blocker=user, blocked_id=other_user.id)

        assert result.created is False
        assert result.block_count == 1
        assert Block.objects.count() == 1

    def test_cannot_block_self(self, user):
        with pytest.raises(InvalidBlockTargetError):
            block_user(blocker=user, blocked_id=user.id)

    def test_unknown_target(self, user):
        with pytest.raises(UserNotFoundError):
            block_user(blocker=user, blocked_id=uuid.uuid4())

    def test_third_block_flags_for_admin(self, make_user, other_user):
        for _ in range(2):
            block_user(blocker=make_user(), blocked_id=other_user.id)

        result = block_user(blocker=make_user(), blocked_id=other_user.id)

        assert result.block_count == 3
        assert 'flagged for admin review' in result.warning
        other_user.refresh_from_db()
        assert other_user.flagged_for_admin is True
        assert other_user.account_status == AccountStatus.ACTIVE

    def test_fourth_block_puts_account_under_review(self, make_user, other_user):
        for _ in range(3):
            block_user(blocker=make_user(), blocked_id=other_user.id)

        result = block_user(blocker=make_user(), blocked_id=other_user.id)

        assert result.block_count == 4
        assert 'under review' in result.warning
        other_user.refresh_from_db()
        assert other_user.account_status == AccountStatus.UNDER_REVIEW

    def test_banned_account_stays_banned(self, make_user):
        target = make_user(block_count=3, account_status=AccountStatus.BANNED)

        block_user(blocker=make_user(), blocked_id=target.id)

        target.refresh_from_db()
        assert target.account_status == AccountStatus.BANNED


@pytest.mark.django_db
class TestBlockManagement:

    def test_block_visible_in_both_directions(self, user, other_user):
        block_user(blocker=user, blocked_id=other_user.id)

        assert blocked_user_ids(user=user) == {other_user.id}
        assert blocked_user_ids(user=other_user) == {user.id}
        assert is_blocked_between(user_id=other_user.id, other_id=user.id)

    def test_update_notes(self, user, other_user):
        block_user(blocker=user, blocked_id=other_user.id)

        block = update_block_notes(blocker=user, blocked_id=other_user.id, notes='rude')

        assert block.notes == 'rude'

    def test_unblock_keeps_strike(self, user, other_user):
        block_user(blocker=user, blocked_id=other_user.id)

        unblock_user(blocker=user, blocked_id=other_user.id)

        assert not Block.objects.exists()
        other_user.refresh_from_db()
        assert other_user.block_count == 1

    def test_unblock_missing(self, user, other_user):
        with pytest.raises(BlockNotFoundError):
            unblock_user(blocker=user, blocked_id=other_user.id)


@pytest.mark.django_db
class TestSafetyReports:

    def test_report_counts_as_strike(self, user, other_user):
        report = create_report(reporter=user, reported_user_id=other_user.id, reason='  spam  ')

        assert report.reason == 'spam'
        assert report.status == ReportStatus.PENDING
        other_user.refresh_from_db()
        assert other_user.block_count == 1

    def test_report_flags_at_three_but_never_escalates(self, make_user):
        target = make_user(block_count=3)

        create_report(reporter=make_user(), reported_user_id=target.id, reason='abuse')

        target.refresh_from_db()
        assert target.flagged_for_admin is True
        assert target.account_status == AccountStatus.ACTIVE

    def test_reason_required(self, user, other_user):
        with pytest.raises(InvalidReportError):
            create_report(reporter=user, reported_user_id=other_user.id, reason='   ')

    def test_cannot_report_self(self, user):
        with pytest.raises(InvalidReportError):
            create_report(reporter=user, reported_user_id=user.id, reason='x')

    def test_ban_action(self, user, other_user, admin_user):
        report = create_report(reporter=user, reported_user_id=other_user.id, reason='abuse')

        report = review_report(report_id=report.id, admin=admin_user, action='ban')

        assert report.status == ReportStatus.ACTIONED
        assert report.admin_notes == 'User banned'
        other_user.refresh_from_db()
        assert other_user.account_status == AccountStatus.BANNED

    def test_invalid_action(self, user, other_user, admin_user):
        report = create_report(reporter=user, reported_user_id=other_user.id, reason='abuse')

        with pytest.raises(InvalidModerationActionError):
            review_report(report_id=report.id, admin=admin_user, action='delete')


@pytest.mark.django_db
class TestClearFlag:

    def test_clears_flag_and_review(self, make_user, admin_user):
        target = make_user(flagged_for_admin=True, account_status=AccountStatus.UNDER_REVIEW)

        target = clear_flag(user_id=target.id, admin=admin_user)

        assert target.flagged_for_admin is False
        assert target.account_status == AccountStatus.ACTIVE

    def test_does_not_lift_ban(self, make_user, admin_user):
        target = make_user(flagged_for_admin=True, account_status=AccountStatus.BANNED)

        target = clear_flag(user_id=target.id, admin=admin_user)

        assert target.account_status == AccountStatus.BANNED
