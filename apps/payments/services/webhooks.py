"""
Stripe webhook handling.

Events are verified, de-duplicated by event id, applied inside a
transaction and logged to ``webhook_events`` whether they succeed or not.
"""

import logging
import uuid
from typing import Optional

import stripe
from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import SubscriptionStatus, User
from apps.accounts.tiers import MembershipTier, is_paid_tier
from apps.messaging.services import MESSAGE_CREDITS_KIND, fulfill_credit_purchase
from apps.video.services import EXTENSION_KIND, settle_extension
from apps.payments import stripe_gateway
from apps.payments.models import WebhookEvent, WebhookEventStatus
from apps.payments.stripe_gateway import get_field

from .downgrades import SCHEDULED_TIER_KEY
from .exceptions import WebhookNotConfiguredError, WebhookProcessingError, WebhookSignatureError

logger = logging.getLogger(__name__)


def _record(event_id: str, event_type: str, status: str, *, error: str = '', source_ip: Optional[str] = None):
    WebhookEvent.objects.update_or_create(
        event_id=event_id,
        defaults={
            'event_type': event_type,
            'status': status,
            'error_message': error,
            'source_ip': source_ip,
        }
    )


def _users_for_customer(customer_id):
    if not customer_id:
        return User.objects.none()
    return User.objects.filter(stripe_customer_id=customer_id)


def _apply_scheduled_tier(users, tier: str) -> int:
    return users.update(
        membership_tier=tier,
        scheduled_tier=None,
        tier_change_at=None,
        subscription_status=SubscriptionStatus.ACTIVE,
    )


def handle_checkout_completed(session) -> None:
    mode = get_field(session, 'mode')
    metadata = get_field(session, 'metadata', {})
    kind = get_field(metadata, 'kind')

    if mode == 'subscription':
        customer_id = get_field(session, 'customer')
        user_id = get_field(session, 'client_reference_id') or get_field(metadata, 'user_id')

        if customer_id:
            _users_for_customer(customer_id).update(subscription_status=SubscriptionStatus.ACTIVE)
        elif user_id:
            User.objects.filter(id=user_id).update(subscription_status=SubscriptionStatus.ACTIVE)

        tier = (get_field(metadata, 'tier') or '').lower()
        if user_id and is_paid_tier(tier):
            User.objects.filter(id=user_id).update(membership_tier=tier)

        logger.info(
            "Subscription checkout completed",
            extra={'user_id': user_id, 'tier': tier, 'customer_id': customer_id}
        )

    elif mode == 'payment' and kind == MESSAGE_CREDITS_KIND:
        fulfill_credit_purchase(session_id=session['id'], metadata=dict(metadata))

    elif mode == 'payment' and kind == EXTENSION_KIND:
        extension_id = get_field(metadata, 'extension_id')
        if not extension_id:
            logger.warning("Extension checkout without extension id", extra={'session_id': session['id']})
            return
        settle_extension(extension_id=extension_id)


def _invoice_subscription_id(invoice) -> Optional[str]:
    subscription = get_field(invoice, 'subscription')
    if subscription is None:
        # Newer API versions nest it under the invoice parent
        parent = get_field(invoice, 'parent', {})
        details = get_field(parent, 'subscription_details', {})
        subscription = get_field(details, 'subscription')
    if subscription is not None and not isinstance(subscription, str):
        subscription = subscription['id']
    return subscription


def handle_invoice_payment_succeeded(invoice) -> None:
    """On renewal, finalize a downgrade to a paid tier."""
    customer_id = get_field(invoice, 'customer')
    subscription_id = _invoice_subscription_id(invoice)
    if not (customer_id and subscription_id) or get_field(invoice, 'billing_reason') != 'subscription_cycle':
        return

    user = _users_for_customer(customer_id).exclude(scheduled_tier__isnull=True).first()
    if user is None:
        return

    subscription = stripe_gateway.retrieve_subscription(subscription_id)
    metadata = get_field(subscription, 'metadata', {})
    scheduled = (get_field(metadata, SCHEDULED_TIER_KEY) or user.scheduled_tier or '').lower()
    if not is_paid_tier(scheduled):
        return

    _apply_scheduled_tier(_users_for_customer(customer_id), scheduled)
    stripe_gateway.update_subscription(subscription_id, metadata={SCHEDULED_TIER_KEY: ''})
    logger.info(
        "Scheduled downgrade applied on renewal",
        extra={'customer_id': customer_id, 'tier': scheduled}
    )


def handle_invoice_payment_failed(invoice) -> None:
    customer_id = get_field(invoice, 'customer')
    if not customer_id:
        return
    _users_for_customer(customer_id).update(subscription_status=SubscriptionStatus.PAST_DUE)
    logger.warning(
        "Invoice payment failed",
        extra={'customer_id': customer_id, 'invoice_id': get_field(invoice, 'id')}
    )


def handle_subscription_deleted(subscription) -> None:
    customer_id = get_field(subscription, 'customer')
    if not customer_id:
        return

    users = _users_for_customer(customer_id)
    metadata = get_field(subscription, 'metadata', {})
    if get_field(metadata, SCHEDULED_TIER_KEY) == MembershipTier.FREE:
        users.update(
            subscription_status=SubscriptionStatus.CANCELED,
            membership_tier=MembershipTier.FREE,
            scheduled_tier=None,
            tier_change_at=None,
        )
        logger.info("Downgrade to free finalized", extra={'customer_id': customer_id})
    else:
        users.update(subscription_status=SubscriptionStatus.CANCELED)
        logger.info("Subscription canceled", extra={'customer_id': customer_id})


def handle_subscription_updated(subscription) -> None:
    customer_id = get_field(subscription, 'customer')
    if not customer_id or get_field(subscription, 'status') != 'active':
        return

    metadata = get_field(subscription, 'metadata', {})
    scheduled = (get_field(metadata, SCHEDULED_TIER_KEY) or '').lower()
    # Writing the schedule metadata fires this event too; wait for the change date
    users = (
        _users_for_customer(customer_id)
        .exclude(scheduled_tier__isnull=True)
        .filter(Q(tier_change_at__isnull=True) | Q(tier_change_at__lte=timezone.now()))
    )
    if not is_paid_tier(scheduled) or not users.exists():
        return

    _apply_scheduled_tier(users, scheduled)
    logger.info(
        "Scheduled downgrade applied",
        extra={'customer_id': customer_id, 'tier': scheduled}
    )


EVENT_HANDLERS = {
    'checkout.session.completed': handle_checkout_completed,
    'invoice.payment_succeeded': handle_invoice_payment_succeeded,
    'invoice.payment_failed': handle_invoice_payment_failed,
    'customer.subscription.deleted': handle_subscription_deleted,
    'customer.subscription.updated': handle_subscription_updated,
}


def verify_event(*, payload: bytes, signature: Optional[str], source_ip: Optional[str] = None):
    """
    Verify the Stripe-Signature header and parse the event.

    Rejected deliveries are logged to ``webhook_events``.

    Raises:
        WebhookSignatureError: If the signature is missing or invalid
        WebhookNotConfiguredError: If no webhook secret is configured
    """
    if not signature:
        logger.error("Webhook signature missing", extra={'source_ip': source_ip})
        _record(
            f'unknown-{uuid.uuid4()}',
            '',
            WebhookEventStatus.SIGNATURE_MISSING,
            error='Missing stripe-signature header',
            source_ip=source_ip,
        )
        raise WebhookSignatureError("Missing signature", missing=True)

    secret = settings.STRIPE_WEBHOOK_SECRET
    if not secret:
        logger.critical("STRIPE_WEBHOOK_SECRET not configured; webhook processing disabled")
        raise WebhookNotConfiguredError("Webhook not configured")

    try:
        return stripe_gateway.construct_event(payload, signature, secret)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error("Webhook signature verification failed", extra={'source_ip': source_ip, 'error': str(e)})
        _record(
            f'unknown-{uuid.uuid4()}',
            '',
            WebhookEventStatus.SIGNATURE_FAILED,
            error=str(e),
            source_ip=source_ip,
        )
        raise WebhookSignatureError("Invalid signature")


def process_event(event, *, source_ip: Optional[str] = None) -> bool:
    """
    Apply a verified event once.

    Returns:
        False if the event was already processed, True otherwise

    Raises:
        WebhookProcessingError: If the handler failed; the failure is logged
    """
    event_id = event['id']
    event_type = event['type']

    if WebhookEvent.objects.filter(event_id=event_id, status=WebhookEventStatus.PROCESSED).exists():
        logger.info("Webhook event already processed", extra={'event_id': event_id, 'event_type': event_type})
        return False

    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info("Unhandled webhook event type", extra={'event_id': event_id, 'event_type': event_type})
    else:
        try:
            with transaction.atomic():
                handler(event['data']['object'])
        except Exception as e:
            logger.exception(
                "Webhook processing error",
                extra={'event_id': event_id, 'event_type': event_type}
            )
            _record(event_id, event_type, WebhookEventStatus.FAILED, error=str(e), source_ip=source_ip)
            raise WebhookProcessingError("Webhook handler error") from e

    _record(event_id, event_type, WebhookEventStatus.PROCESSED, source_ip=source_ip)
    logger.info("Webhook event processed", extra={'event_id': event_id, 'event_type': event_type})
    return True
