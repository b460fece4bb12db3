"""
Paid extensions of a running video call.

One member asks for more time, the partner has a minute to accept, and
the member who asked pays through Stripe Checkout. The extra seconds are
added to the session once Stripe reports the payment, either when the
initiator confirms or when the checkout webhook arrives, whichever comes
first.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

import stripe
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.tiers import EXTENSION_MINUTES, EXTENSION_PRICE_CENTS
from apps.core.services import get_pricing
from apps.payments import stripe_gateway
from apps.safety.services import blocked_user_ids
from apps.video.models import (
    ExtensionStatus,
    VideoSession,
    VideoSessionExtension,
    VideoSessionStatus,
)

from .exceptions import (
    ExtensionConflictError,
    ExtensionExpiredError,
    ExtensionForbiddenError,
    ExtensionNotAllowedError,
    ExtensionNotFoundError,
    ExtensionPaymentRequiredError,
    VideoSessionNotFoundError,
)

logger = logging.getLogger(__name__)

EXTENSION_KIND = 'extension'
EXTENSION_SECONDS = EXTENSION_MINUTES * 60
EXTENSION_RESPONSE_WINDOW = timedelta(seconds=60)

ACTION_ACCEPT = 'accept'
ACTION_DECLINE = 'decline'


@dataclass
class ExtensionCheckout:
    extension: VideoSessionExtension
    url: str


def extension_price_cents() -> int:
    return int(get_pricing().get('extension_cents') or EXTENSION_PRICE_CENTS)


def _get_session(video_session_id, *, lock: bool = False) -> VideoSession:
    queryset = VideoSession.objects.select_for_update() if lock else VideoSession.objects.all()
    try:
        return queryset.get(id=video_session_id)
    except (VideoSession.DoesNotExist, ValidationError, ValueError):
        raise VideoSessionNotFoundError("Video session not found")


def get_session_for_participant(*, video_session_id: UUID, user: User, lock: bool = False) -> VideoSession:
    """
    Raises:
        VideoSessionNotFoundError: If the session is unknown
        ExtensionForbiddenError: If the member is not on the call
    """
    video_session = _get_session(video_session_id, lock=lock)
    if not video_session.has_participant(user):
        raise ExtensionForbiddenError("Not a participant in this session")
    return video_session


def _get_extension(*, video_session_id, extension_id) -> VideoSessionExtension:
    try:
        return (
            VideoSessionExtension.objects
            .select_for_update()
            .select_related('video_session')
            .get(id=extension_id, video_session_id=video_session_id)
        )
    except (VideoSessionExtension.DoesNotExist, ValidationError, ValueError):
        raise ExtensionNotFoundError("Extension request not found")


@transaction.atomic
def request_extension(*, video_session_id: UUID, user: User) -> VideoSessionExtension:
    """
    Ask the partner for ten more minutes.

    Only one request per session can be open at a time. A pending request
    that has not been answered within a minute no longer blocks a new one.

    Raises:
        VideoSessionNotFoundError: If the session is unknown
        ExtensionForbiddenError: If the member is not on the call
        ExtensionNotAllowedError: If the session has ended
        ExtensionConflictError: If another request is still open
    """
    video_session = get_session_for_participant(video_session_id=video_session_id, user=user, lock=True)
    if video_session.status != VideoSessionStatus.CREATED:
        raise ExtensionNotAllowedError("Session has ended")

    now = timezone.now()
    open_requests = video_session.extensions.filter(status__in=VideoSessionExtension.OPEN_STATUSES)
    open_requests.filter(status=ExtensionStatus.PENDING_ACCEPTANCE, expires_at__lte=now).update(
        status=ExtensionStatus.EXPIRED
    )
    if open_requests.exists():
        raise ExtensionConflictError("An extension request is already pending")

    extension = VideoSessionExtension.objects.create(
        video_session=video_session,
        initiator=user,
        responder_id=video_session.other_participant_id(user),
        amount_cents=extension_price_cents(),
        extension_seconds=EXTENSION_SECONDS,
        expires_at=now + EXTENSION_RESPONSE_WINDOW,
    )

    logger.info(
        "Extension requested",
        extra={
            'video_session_id': str(video_session.id),
            'extension_id': str(extension.id),
            'amount_cents': extension.amount_cents,
        }
    )
    return extension


def _start_payment(extension: VideoSessionExtension, redirect_url: Optional[str]) -> str:
    initiator = extension.initiator
    customer_id = stripe_gateway.ensure_customer(initiator)
    base_url = redirect_url or settings.APP_URL
    session = stripe_gateway.create_checkout_session(
        customer=customer_id,
        mode='payment',
        line_items=[{
            'price_data': {
                'currency': 'usd',
                'product_data': {'name': f'Call Extension ({EXTENSION_MINUTES} minutes)'},
                'unit_amount': extension.amount_cents,
            },
            'quantity': 1,
        }],
        metadata={
            'kind': EXTENSION_KIND,
            'extension_id': str(extension.id),
            'video_session_id': str(extension.video_session_id),
            'user_id': str(initiator.id),
            'cents': str(extension.amount_cents),
        },
        client_reference_id=str(initiator.id),
        success_url=base_url,
        cancel_url=base_url,
    )
    extension.stripe_session_id = session['id']
    return session['url']


def respond_to_extension(
    *,
    video_session_id: UUID,
    extension_id: UUID,
    user: User,
    action: str,
    redirect_url: Optional[str] = None
) -> ExtensionCheckout:
    """
    Accept or decline a pending request as the partner.

    Accepting opens a Checkout session billed to the initiator. When Stripe
    rejects it the request is marked ``payment_failed`` and the error is
    re-raised.

    Raises:
        ExtensionNotAllowedError: If ``action`` is not accept or decline
        ExtensionNotFoundError: If the request is unknown
        ExtensionForbiddenError: If the member is not the partner
        ExtensionConflictError: If the request was already answered
        ExtensionExpiredError: If the response window has passed
        stripe.StripeError: If Stripe rejects the checkout
    """
    if action not in (ACTION_ACCEPT, ACTION_DECLINE):
        raise ExtensionNotAllowedError("Invalid action")

    with transaction.atomic():
        extension = _get_extension(video_session_id=video_session_id, extension_id=extension_id)
        if extension.responder_id != user.id:
            raise ExtensionForbiddenError("Only the invited partner can respond")
        if extension.status != ExtensionStatus.PENDING_ACCEPTANCE:
            raise ExtensionConflictError("Extension request is no longer pending")

        expired = extension.expires_at <= timezone.now()
        if expired:
            extension.status = ExtensionStatus.EXPIRED
            extension.save(update_fields=['status', 'updated_at'])
        elif action == ACTION_DECLINE:
            extension.status = ExtensionStatus.DECLINED
            extension.save(update_fields=['status', 'updated_at'])
            logger.info("Extension declined", extra={'extension_id': str(extension.id)})
            return ExtensionCheckout(extension=extension, url='')
        else:
            # Claimed before calling Stripe so a second accept gets a conflict
            extension.status = ExtensionStatus.AWAITING_PAYMENT
            extension.save(update_fields=['status', 'updated_at'])

    if expired:
        raise ExtensionExpiredError("Extension request has expired")

    try:
        url = _start_payment(extension, redirect_url)
    except stripe.StripeError:
        VideoSessionExtension.objects.filter(pk=extension.pk).update(
            status=ExtensionStatus.PAYMENT_FAILED,
            updated_at=timezone.now(),
        )
        logger.exception("Extension checkout failed", extra={'extension_id': str(extension.id)})
        raise

    extension.save(update_fields=['stripe_session_id', 'updated_at'])
    logger.info(
        "Extension accepted",
        extra={'extension_id': str(extension.id), 'session_id': extension.stripe_session_id}
    )
    return ExtensionCheckout(extension=extension, url=url)


@transaction.atomic
def settle_extension(*, extension_id) -> bool:
    """
    Add a paid extension's seconds to its session exactly once.

    Only the call that flips the request from ``awaiting_payment`` to
    ``completed`` adds time, so the confirm endpoint and webhook retries
    can race safely.

    Returns:
        True if time was added by this call
    """
    settled = (
        VideoSessionExtension.objects
        .filter(id=extension_id, status=ExtensionStatus.AWAITING_PAYMENT)
        .update(status=ExtensionStatus.COMPLETED, updated_at=timezone.now())
    )
    if not settled:
        logger.info("Extension already settled or not payable", extra={'extension_id': str(extension_id)})
        return False

    extension = VideoSessionExtension.objects.get(id=extension_id)
    VideoSession.objects.filter(pk=extension.video_session_id).update(
        extended_seconds_total=F('extended_seconds_total') + extension.extension_seconds
    )
    logger.info(
        "Extension settled",
        extra={
            'extension_id': str(extension.id),
            'video_session_id': str(extension.video_session_id),
            'extension_seconds': extension.extension_seconds,
        }
    )
    return True


def confirm_extension(*, video_session_id: UUID, extension_id: UUID, user: User) -> VideoSession:
    """
    Check the initiator's payment with Stripe and apply the extra time.

    Confirming a request the webhook already settled returns the session
    unchanged.

    Raises:
        ExtensionNotFoundError: If the request is unknown
        ExtensionForbiddenError: If the member did not ask for it
        ExtensionConflictError: If the request is not awaiting payment
        ExtensionPaymentRequiredError: If Stripe has not taken the payment
        stripe.StripeError: If the checkout cannot be retrieved
    """
    with transaction.atomic():
        extension = _get_extension(video_session_id=video_session_id, extension_id=extension_id)
    if extension.initiator_id != user.id:
        raise ExtensionForbiddenError("Only the member who asked can confirm")

    if extension.status == ExtensionStatus.COMPLETED:
        return extension.video_session
    if extension.status != ExtensionStatus.AWAITING_PAYMENT or not extension.stripe_session_id:
        raise ExtensionConflictError("Extension is not awaiting payment")

    checkout = stripe_gateway.retrieve_checkout_session(extension.stripe_session_id)
    if stripe_gateway.get_field(checkout, 'payment_status') != 'paid':
        raise ExtensionPaymentRequiredError("Payment has not completed")

    settle_extension(extension_id=extension.id)
    return VideoSession.objects.get(pk=extension.video_session_id)


def get_pending_extensions(*, video_session: VideoSession) -> QuerySet:
    return (
        video_session.extensions
        .filter(
            Q(status=ExtensionStatus.AWAITING_PAYMENT)
            | Q(status=ExtensionStatus.PENDING_ACCEPTANCE, expires_at__gt=timezone.now())
        )
        .order_by('created_at')
    )


def get_remaining_seconds(video_session: VideoSession) -> int:
    if video_session.status != VideoSessionStatus.CREATED:
        return 0
    elapsed = (timezone.now() - video_session.started_at).total_seconds()
    return max(0, int(video_session.total_seconds - elapsed))


def get_past_sessions(*, user: User) -> QuerySet:
    """The member's calls, newest first, without anyone they blocked or who blocked them."""
    hidden = blocked_user_ids(user=user)
    return (
        VideoSession.objects
        .filter(Q(caller=user) | Q(callee=user))
        .exclude(caller_id__in=hidden)
        .exclude(callee_id__in=hidden)
        .select_related('caller', 'callee')
        .order_by('-started_at')
    )
