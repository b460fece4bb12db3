"""Block service."""

import logging
from dataclasses import dataclass
from typing import Optional, Set
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.safety.models import Block

from .exceptions import InvalidBlockTargetError, BlockNotFoundError
from .moderation import record_strike

logger = logging.getLogger(__name__)


@dataclass
class BlockResult:
    block: Block
    created: bool
    block_count: int
    warning: Optional[str] = None


@transaction.atomic
def block_user(*, blocker: User, blocked_id: UUID, reason: str = '') -> BlockResult:
    """
    Block a member and count it as a strike against them.

    Blocking someone twice is a no-op: the existing block is returned and
    no extra strike is recorded.

    Args:
        blocker: Member doing the blocking
        blocked_id: Member being blocked
        reason: Optional free-text reason

    Returns:
        BlockResult with the blocked member's strike count and any warning

    Raises:
        InvalidBlockTargetError: If blocked_id is empty or the blocker's own id
        UserNotFoundError: If the blocked member does not exist
    """
    if not blocked_id or str(blocked_id) == str(blocker.id):
        raise InvalidBlockTargetError("Invalid user")

    existing = Block.objects.filter(blocker=blocker, blocked_id=blocked_id).select_related('blocked').first()
    if existing:
        return BlockResult(
            block=existing,
            created=False,
            block_count=existing.blocked.block_count,
        )

    strike = record_strike(user_id=blocked_id, escalate_to_review=True)
    block = Block.objects.create(blocker=blocker, blocked_id=blocked_id, reason=reason)

    logger.info(
        'Member blocked',
        extra={
            'blocker_id': str(blocker.id),
            'blocked_id': str(blocked_id),
            'block_count': strike.block_count,
        }
    )

    return BlockResult(
        block=block,
        created=True,
        block_count=strike.block_count,
        warning=strike.warning,
    )


@transaction.atomic
def update_block_notes(*, blocker: User, blocked_id: UUID, notes: str) -> Block:
    """
    Raises:
        BlockNotFoundError: If the member has not blocked blocked_id
    """
    block = Block.objects.select_for_update().filter(blocker=blocker, blocked_id=blocked_id).first()
    if block is None:
        raise BlockNotFoundError("Block not found")

    block.notes = notes or ''
    block.save(update_fields=['notes'])
    return block


@transaction.atomic
def unblock_user(*, blocker: User, blocked_id: UUID) -> None:
    """
    Remove a block. Strikes already recorded against the member stay.

    Raises:
        BlockNotFoundError: If the member has not blocked blocked_id
    """
    deleted, _ = Block.objects.filter(blocker=blocker, blocked_id=blocked_id).delete()
    if not deleted:
        raise BlockNotFoundError("Block not found")

    logger.info('Member unblocked', extra={'blocker_id': str(blocker.id), 'blocked_id': str(blocked_id)})


def get_user_blocks(*, user: User) -> QuerySet:
    return Block.objects.filter(blocker=user).select_related('blocked')


def blocked_user_ids(*, user: User) -> Set[UUID]:
    """Ids of members blocked by, or blocking, ``user``."""
    rows = Block.objects.filter(Q(blocker=user) | Q(blocked=user)).values_list('blocker_id', 'blocked_id')
    ids = set()
    for blocker_id, blocked_id in rows:
        ids.add(blocked_id if blocker_id == user.id else blocker_id)
    return ids


def is_blocked_between(*, user_id: UUID, other_id: UUID) -> bool:
    return Block.objects.filter(
        Q(blocker_id=user_id, blocked_id=other_id) | Q(blocker_id=other_id, blocked_id=user_id)
    ).exists()
