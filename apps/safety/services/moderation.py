"""
Strike counting and the admin moderation queue.

Every block and every safety report counts as one strike against the
target. Three strikes flag the member for admin review; a fourth block
puts the account under review.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User, AccountStatus

from .exceptions import UserNotFoundError

logger = logging.getLogger(__name__)

FLAG_THRESHOLD = 3
REVIEW_THRESHOLD = 4

FLAGGED_WARNING = 'This user has been flagged for admin review'
UNDER_REVIEW_WARNING = 'This account is now under review'


@dataclass
class StrikeResult:
    block_count: int
    flagged: bool
    warning: Optional[str] = None


def _lock_user(user_id: UUID) -> User:
    try:
        return User.objects.select_for_update().get(id=user_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise UserNotFoundError(f"User {user_id} not found")


def record_strike(*, user_id: UUID, escalate_to_review: bool) -> StrikeResult:
    """
    Add one strike to a member. Must run inside a transaction.

    Args:
        user_id: Member receiving the strike
        escalate_to_review: Whether crossing REVIEW_THRESHOLD puts the
            account under review (blocks do, reports only flag)
    """
    user = _lock_user(user_id)
    user.block_count += 1
    warning = None

    if user.block_count >= FLAG_THRESHOLD:
        user.flagged_for_admin = True
        warning = FLAGGED_WARNING

    if escalate_to_review and user.block_count >= REVIEW_THRESHOLD:
        if user.account_status == AccountStatus.ACTIVE:
            user.account_status = AccountStatus.UNDER_REVIEW
        warning = UNDER_REVIEW_WARNING

    user.save(update_fields=['block_count', 'flagged_for_admin', 'account_status'])

    if warning:
        logger.warning(
            'Member crossed safety threshold',
            extra={
                'user_id': str(user.id),
                'block_count': user.block_count,
                'account_status': user.account_status,
            }
        )

    return StrikeResult(
        block_count=user.block_count,
        flagged=user.flagged_for_admin,
        warning=warning,
    )


def get_flagged_users() -> QuerySet:
    return User.objects.filter(flagged_for_admin=True).order_by('-block_count', '-created_at')


@transaction.atomic
def clear_flag(*, user_id: UUID, admin: User) -> User:
    """
    Clear the admin flag on a member after review.

    Accounts that were put under review return to active; bans stay.

    Raises:
        UserNotFoundError: If the member does not exist
    """
    user = _lock_user(user_id)
    user.flagged_for_admin = False
    if user.account_status == AccountStatus.UNDER_REVIEW:
        user.account_status = AccountStatus.ACTIVE
    user.save(update_fields=['flagged_for_admin', 'account_status'])

    logger.info(
        'Admin cleared flag',
        extra={'admin_id': str(admin.id), 'target_user_id': str(user.id)}
    )
    return user
