"""Replay protection for payment endpoints via Idempotency-Key headers."""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.core.models import IdempotencyKey

IDEMPOTENCY_KEY_TTL = timedelta(hours=24)


def get_cached_response(*, key: str, user_id: UUID) -> Optional[IdempotencyKey]:
    """
    Return the stored response for ``key`` if it is still valid.

    Keys belong to the member who created them; a key presented by anyone
    else is treated as unknown.
    """
    if not key:
        return None

    record = IdempotencyKey.objects.filter(key=key, user_id=user_id).first()
    if record is None:
        return None

    if record.expires_at <= timezone.now():
        record.delete()
        return None

    return record


@transaction.atomic
def store_response(
    *,
    key: str,
    user_id: UUID,
    response_body: dict,
    status_code: int
) -> IdempotencyKey:
    """
    Store a response under the member's ``key`` unless one is already stored.

    Compare-and-store: the first writer wins and later writers get the
    existing record back. Keys are scoped per member, so two members
    sending the same key never see each other's responses.
    """
    record, _created = IdempotencyKey.objects.get_or_create(
        key=key,
        user_id=user_id,
        defaults={
            'response_body': response_body,
            'status_code': status_code,
            'expires_at': timezone.now() + IDEMPOTENCY_KEY_TTL,
        }
    )
    return record


def purge_expired_keys() -> int:
    deleted, _ = IdempotencyKey.objects.filter(expires_at__lte=timezone.now()).delete()
    return deleted
